"""Configuration for the terminal host."""

from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel


class TerminalHostConfig(BaseModel):
    """Configuration for the terminal host."""

    workspace_roots: Sequence[Path] = (Path("."),)
    # Template such as "code {focus} --goto {path}:{line}"; None prints the location
    editor_command: str | None = None
    # Replaces a bare {focus} argument when the editor should take focus
    editor_focus_args: Sequence[str] = ()
    clipboard_path: Path | None = None
    steal_focus: bool = False

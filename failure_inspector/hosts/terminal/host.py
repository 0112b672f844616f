"""Terminal host: collaborators backed by the filesystem and standard streams."""

import difflib
import logging
import shlex
import subprocess
import sys
from collections.abc import Generator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO

from failure_inspector.hosts.terminal.config import TerminalHostConfig
from failure_inspector.models.trace import Frame, SourceLocation
from failure_inspector.services.base import (
    Clipboard,
    ComparisonView,
    HostServices,
    Navigator,
    SourceLookup,
)

log = logging.getLogger(__name__)

FOCUS_PLACEHOLDER = "{focus}"


@dataclass(frozen=True, kw_only=True)
class FileSystemSourceLookup(SourceLookup):
    """Resolves frame modules to files below the workspace roots."""

    roots: Sequence[Path]

    def candidates(self, frame: Frame) -> Sequence[Path]:
        module = Path(frame.module)
        if module.is_absolute():
            return [module]
        return [module, *(root / module for root in self.roots)]

    def resolve(self, frame: Frame) -> SourceLocation | None:
        """Return the first existing file that has the frame's line."""
        for candidate in self.candidates(frame):
            if not candidate.is_file():
                continue
            with candidate.open(encoding="utf-8", errors="replace") as source:
                line_count = sum(1 for _ in source)
            if 1 <= frame.line <= line_count:
                return SourceLocation(path=candidate.resolve(), line=frame.line)
            log.debug(
                "%s has %d line(s), frame points at line %d",
                candidate,
                line_count,
                frame.line,
            )
        return None


def editor_arguments(
    template: str, location: SourceLocation, focus_args: Sequence[str] = ()
) -> list[str]:
    """Split an editor command template and fill in each argument.

    The template is split before formatting so a path with spaces stays one
    argument. A bare ``{focus}`` argument expands to focus_args, or to nothing.
    """
    arguments: list[str] = []
    for part in shlex.split(template):
        if part == FOCUS_PLACEHOLDER:
            arguments.extend(focus_args)
        else:
            arguments.append(part.format(path=location.path, line=location.line))
    return arguments


@dataclass(frozen=True, kw_only=True)
class EditorNavigator(Navigator):
    """Opens locations with an editor command, or prints them."""

    editor_command: str | None = None
    focus_args: Sequence[str] = ()
    stream: IO[str] = field(default_factory=lambda: sys.stdout, repr=False)

    def open(self, location: SourceLocation, steal_focus: bool) -> None:
        """Run the editor on the location and wait for it to return.

        Raises:
            RuntimeError: If the editor exits with a non-zero code

        """
        if self.editor_command is None:
            print(location, file=self.stream)
            return
        command = editor_arguments(
            self.editor_command, location, self.focus_args if steal_focus else ()
        )
        log.info("Launching editor: %s", shlex.join(command))
        completed = subprocess.run(command, check=False)
        if completed.returncode != 0:
            raise RuntimeError(f"Editor exited with code {completed.returncode}")


@dataclass(kw_only=True)
class FileClipboard(Clipboard):
    """Clipboard stand-in writing to a file, or to a stream without a path."""

    path: Path | None = None
    stream: IO[str] = field(default_factory=lambda: sys.stdout, repr=False)
    closed: bool = field(default=False, init=False)
    _handle: IO[str] | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.path is not None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._handle = self.path.open("w", encoding="utf-8")

    def write(self, text: str) -> None:
        if self.closed:
            raise RuntimeError("Clipboard is disposed")
        if self._handle is None:
            print(text, file=self.stream)
            return
        self._handle.seek(0)
        self._handle.truncate()
        self._handle.write(text)
        self._handle.flush()

    def dispose(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._handle is not None:
            self._handle.close()
            self._handle = None


@dataclass(frozen=True, kw_only=True)
class DiffComparisonView(ComparisonView):
    """Prints a unified diff of expected against actual."""

    stream: IO[str] = field(default_factory=lambda: sys.stdout, repr=False)

    def open(self, expected: str, actual: str) -> None:
        diff = difflib.unified_diff(
            expected.splitlines(keepends=True),
            actual.splitlines(keepends=True),
            fromfile="expected",
            tofile="actual",
        )
        for line in diff:
            self.stream.write(line if line.endswith("\n") else f"{line}\n")


@contextmanager
def terminal_host(config: TerminalHostConfig) -> Generator[HostServices]:
    """Create terminal host services with managed clipboard lifecycle."""
    clipboard = FileClipboard(path=config.clipboard_path)
    try:
        yield HostServices(
            source_lookup=FileSystemSourceLookup(roots=config.workspace_roots),
            navigator=EditorNavigator(
                editor_command=config.editor_command,
                focus_args=config.editor_focus_args,
            ),
            clipboard=clipboard,
            comparison_view=DiffComparisonView(),
            steal_focus=config.steal_focus,
        )
    finally:
        clipboard.dispose()

"""Terminal host module."""

from failure_inspector.hosts.terminal.config import TerminalHostConfig
from failure_inspector.hosts.terminal.host import (
    DiffComparisonView,
    EditorNavigator,
    FileClipboard,
    FileSystemSourceLookup,
    terminal_host,
)
from failure_inspector.hosts.terminal.manifest import terminal_manifest

__all__ = [
    "DiffComparisonView",
    "EditorNavigator",
    "FileClipboard",
    "FileSystemSourceLookup",
    "TerminalHostConfig",
    "terminal_host",
    "terminal_manifest",
]

"""Structured stack trace produced by a trace parser."""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, kw_only=True)
class SourceLocation:
    """Resolved position in a source file (1-based line)."""

    path: Path
    line: int

    def __str__(self) -> str:
        return f"{self.path}:{self.line}"


@dataclass(frozen=True, kw_only=True)
class ErrorHeader:
    """Error message heading a trace."""

    message: str
    comparison: bool = False

    def render(self) -> str:
        return self.message


@dataclass(frozen=True, kw_only=True)
class Frame:
    """Stack entry pointing at a symbolic source location.

    ``module`` is whatever reference the parser found in the trace (a file
    path, a module name); it may not resolve to an actual file.
    """

    module: str
    line: int
    symbol: str | None = None
    text: str | None = None

    @property
    def reference(self) -> str:
        return f"{self.module}:{self.line}"

    def render(self) -> str:
        rendered = f"at {self.reference}"
        if self.symbol:
            rendered = f"{rendered} ({self.symbol})"
        if self.text:
            rendered = f"{rendered}\n    {self.text}"
        return rendered


type TraceEntry = ErrorHeader | Frame


@dataclass(frozen=True)
class StackTrace:
    """Ordered entries of one parsed trace."""

    entries: Sequence[TraceEntry] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[TraceEntry]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> TraceEntry:
        return self.entries[index]

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def frames(self) -> Sequence[Frame]:
        """Frame entries in trace order."""
        frames: list[Frame] = []
        for entry in self.entries:
            match entry:
                case Frame():
                    frames.append(entry)
                case ErrorHeader():
                    pass
        return frames

    @property
    def errors(self) -> Sequence[ErrorHeader]:
        """Error headers in trace order."""
        errors: list[ErrorHeader] = []
        for entry in self.entries:
            match entry:
                case ErrorHeader():
                    errors.append(entry)
                case Frame():
                    pass
        return errors

    def render(self) -> str:
        """Render entries as plain text, one entry per line."""
        return "\n".join(entry.render() for entry in self.entries)

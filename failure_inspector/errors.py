"""Exceptions raised by the failure inspector and its collaborators."""


class InspectorError(Exception):
    """Base class for failure inspector errors."""


class TraceParseError(InspectorError):
    """Raised by a trace parser when trace text cannot be parsed."""


class SourceNotFoundError(InspectorError):
    """Raised when a frame cannot be resolved to a source file."""


class PluginNotFoundError(InspectorError):
    """Raised when a parser or host plugin is not registered."""


class ReportLoadError(InspectorError):
    """Raised when a test-run report cannot be read or validated."""

"""Loading of parser and host plugins from entry points."""

from importlib.metadata import entry_points
from typing import Any

from failure_inspector.errors import PluginNotFoundError
from failure_inspector.services.manifest import HostManifest, ParserManifest

PARSERS_ENTRY_POINT_GROUP = "failure_inspector.parsers"
HOSTS_ENTRY_POINT_GROUP = "failure_inspector.hosts"


def _load_entry_point(group: str, key: str) -> Any:
    entries = entry_points(group=group)

    for entry in entries:
        if entry.name == key:
            return entry.load()

    available = [e.name for e in entries]
    raise PluginNotFoundError(
        f"Plugin '{key}' not found in '{group}'. Available plugins: {available}"
    )


def load_parser_manifest(key: str) -> ParserManifest[Any]:
    """Load a trace parser manifest by key.

    Args:
        key: The parser key as registered by the distribution providing it

    Returns:
        The parser manifest instance

    Raises:
        PluginNotFoundError: If no parser with the given key is found

    """
    manifest: ParserManifest[Any] = _load_entry_point(PARSERS_ENTRY_POINT_GROUP, key)
    return manifest


def load_host_manifest(key: str) -> HostManifest[Any]:
    """Load a host manifest by key (e.g., "terminal").

    Raises:
        PluginNotFoundError: If no host with the given key is found

    """
    manifest: HostManifest[Any] = _load_entry_point(HOSTS_ENTRY_POINT_GROUP, key)
    return manifest

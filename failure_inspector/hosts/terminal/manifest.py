"""Terminal host manifest."""

from failure_inspector.hosts.terminal.config import TerminalHostConfig
from failure_inspector.hosts.terminal.host import terminal_host
from failure_inspector.services.manifest import HostManifest

terminal_manifest = HostManifest(
    config_cls=TerminalHostConfig,
    host_factory=terminal_host,
)

"""Tests for plugin loading module."""

from importlib.metadata import EntryPoint
from unittest.mock import patch

import pytest

from failure_inspector.errors import PluginNotFoundError
from failure_inspector.hosts.terminal import terminal_manifest
from failure_inspector.services.loading import (
    PARSERS_ENTRY_POINT_GROUP,
    load_host_manifest,
    load_parser_manifest,
)
from failure_inspector.testing.fakes import line_parser_manifest


def test_load_host_manifest_returns_manifest() -> None:
    """Loads the terminal host registered by this distribution."""
    manifest = load_host_manifest("terminal")

    assert manifest is terminal_manifest


def test_load_host_manifest_raises_for_unknown_host() -> None:
    """Raises PluginNotFoundError for unknown host key."""
    with pytest.raises(PluginNotFoundError) as exc_info:
        load_host_manifest("unknown-host")

    assert "unknown-host" in str(exc_info.value)
    assert "Available plugins" in str(exc_info.value)


def test_load_parser_manifest_loads_registered_entry_point() -> None:
    """Loads parser manifests from the parsers group."""
    entry = EntryPoint(
        name="lines",
        value="failure_inspector.testing.fakes:line_parser_manifest",
        group=PARSERS_ENTRY_POINT_GROUP,
    )

    with patch(
        "failure_inspector.services.loading.entry_points", return_value=[entry]
    ) as entry_points_mock:
        manifest = load_parser_manifest("lines")

    entry_points_mock.assert_called_once_with(group=PARSERS_ENTRY_POINT_GROUP)
    assert manifest is line_parser_manifest


def test_load_parser_manifest_lists_available_parsers() -> None:
    """Error names the parsers that are registered."""
    entry = EntryPoint(
        name="bsl", value="example:manifest", group=PARSERS_ENTRY_POINT_GROUP
    )

    with (
        patch("failure_inspector.services.loading.entry_points", return_value=[entry]),
        pytest.raises(PluginNotFoundError, match=r"Available plugins: \['bsl'\]"),
    ):
        load_parser_manifest("python")

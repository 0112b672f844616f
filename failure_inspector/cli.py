"""CLI entry point for inspecting a failed test from a report."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

from failure_inspector.errors import InspectorError
from failure_inspector.inspector import FailureInspector
from failure_inspector.models.trace import ErrorHeader, Frame, TraceEntry
from failure_inspector.report_loader import load_test_results, pick_result
from failure_inspector.services.loading import load_host_manifest, load_parser_manifest

type CommandName = Literal["copy", "compare", "goto", "activate"]

COMMAND_SYMBOLS = {
    True: "✓",
    False: "✗",
}


def log_inspection_summary(log: logging.Logger, inspector: FailureInspector) -> None:
    """Log the displayed entries and which commands are available."""
    log.info("=" * 80)
    log.info("Failure: %s", inspector.result.name if inspector.result else "-")
    log.info("=" * 80)

    for index, entry in enumerate(inspector.tree.entries):
        log.info("%3d %s", index, describe_entry(entry))

    for name, enabled in inspector.enabled_commands.items():
        log.info("%s %s", COMMAND_SYMBOLS[enabled], name)
    if inspector.status_message:
        log.info("Status: %s", inspector.status_message)


def describe_entry(entry: TraceEntry) -> str:
    match entry:
        case ErrorHeader(message=message, comparison=True):
            return f"[comparison] {message}"
        case ErrorHeader(message=message):
            return f"[error] {message}"
        case Frame() as frame:
            return f"[frame] {frame.reference}"


def format_entry(entry: TraceEntry) -> dict[str, Any]:
    """Format a trace entry for JSON output."""
    match entry:
        case ErrorHeader(message=message, comparison=comparison):
            return {"kind": "error", "message": message, "comparison": comparison}
        case Frame(module=module, line=line, symbol=symbol):
            return {"kind": "frame", "module": module, "line": line, "symbol": symbol}


def format_output(
    inspector: FailureInspector, ran: bool | None = None
) -> Mapping[str, Any]:
    """Format the inspector state for JSON output."""
    return {
        "test": inspector.result.name if inspector.result else None,
        "state": inspector.state,
        "entries": [format_entry(entry) for entry in inspector.tree.entries],
        "selected": inspector.tree.selected_index,
        "enabled_commands": dict(inspector.enabled_commands),
        "ran": ran,
        "status_message": inspector.status_message,
    }


def empty_output(test_name: str | None) -> Mapping[str, Any]:
    return {"test": test_name, "state": "empty", "entries": []}


def run_command(inspector: FailureInspector, command: CommandName) -> bool:
    """Run a command, treating "activate" as a double-click on the selection."""
    if command == "activate":
        return inspector.activate()
    return inspector.run(command)


async def run(
    report_path: Path,
    parser_key: str,
    parser_config_json: str,
    host_key: str,
    host_config_json: str,
    test_name: str | None = None,
    select: int | None = None,
    command: CommandName | None = None,
) -> int:
    """Inspect a test from the report and return exit code."""
    log = logging.getLogger("failure_inspector")

    try:
        log.info("Loading parser: %s", parser_key)
        parser_manifest = load_parser_manifest(parser_key)
        parser = parser_manifest.parser_factory(
            parser_manifest.config_cls(**json.loads(parser_config_json))
        )

        log.info("Loading host: %s", host_key)
        host_manifest = load_host_manifest(host_key)
        host_config = host_manifest.config_cls(**json.loads(host_config_json))

        log.info("Loading report: %s", report_path)
        results = await load_test_results(report_path)
    except (InspectorError, OSError, TypeError, ValueError) as e:
        # Bad config JSON raises JSONDecodeError, ValidationError or TypeError
        log.error("Cannot inspect %s: %s", report_path, e)
        print(json.dumps(empty_output(test_name)))
        return 1

    result = pick_result(results, test_name)
    if result is None:
        log.error("No matching test found in %s", report_path)
        print(json.dumps(empty_output(test_name)))
        return 1

    selected = True
    ran: bool | None = None
    with host_manifest.host_factory(host_config) as host:
        inspector = FailureInspector.for_host(parser, host)
        try:
            await inspector.show_async(result)
            if select is not None:
                selected = inspector.select(select)

            if selected and command is not None:
                ran = run_command(inspector, command)

            log_inspection_summary(log, inspector)
            print(json.dumps(format_output(inspector, ran), indent=2))
        finally:
            inspector.dispose()

    return 0 if selected and ran is not False else 1


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Inspect the stack trace of a failed test"
    )
    parser.add_argument(
        "--report",
        type=Path,
        required=True,
        help="Path to the YAML test-run report",
    )
    parser.add_argument(
        "--parser",
        required=True,
        help="Trace parser key registered under failure_inspector.parsers",
    )
    parser.add_argument(
        "--parser-config",
        default="{}",
        help="JSON configuration for the parser",
    )
    parser.add_argument(
        "--host",
        default="terminal",
        help="Host key registered under failure_inspector.hosts",
    )
    parser.add_argument(
        "--host-config",
        default="{}",
        help="JSON configuration for the host",
    )
    parser.add_argument(
        "--test",
        default=None,
        help="Test name (default: first failed test with a trace)",
    )
    parser.add_argument(
        "--select",
        type=int,
        default=None,
        help="Index of the trace entry to select",
    )
    parser.add_argument(
        "--command",
        choices=["copy", "compare", "goto", "activate"],
        default=None,
        help="Command to run on the inspected test",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            report_path=args.report,
            parser_key=args.parser,
            parser_config_json=args.parser_config,
            host_key=args.host,
            host_config_json=args.host_config,
            test_name=args.test,
            select=args.select,
            command=args.command,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()

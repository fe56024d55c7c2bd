"""
Sieve CLI - Command line interface for running Sieve pipelines.

Provides commands for:
- Configuration validation
- Listing available filter types
- Checking values against the configured reference sets
- Running a pipeline over JSON lines
"""

import argparse
import json
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import IO

from sieve.config import Config, load_config
from sieve.errors import ConfigurationError
from sieve.event import Event
from sieve.filters.contains import ContainsFilter
from sieve.logging_config import get_logger, setup_logging
from sieve.pipeline import create_pipeline
from sieve.plugins import get_registry

logger = get_logger(__name__)


def _load(args: argparse.Namespace) -> Config | None:
    config_path = Path(args.config)

    if not config_path.exists():
        print(f"Error: Config file not found: {config_path}", file=sys.stderr)
        return None

    try:
        config = load_config(str(config_path))
    except Exception as e:
        print(f"✗ Configuration invalid: {e}", file=sys.stderr)
        return None

    # Command line flags win over the logging section of the config
    setup_logging(
        level=args.log_level or config.logging.level,
        log_file=args.log_file or config.logging.file
    )
    return config


def cmd_config_validate(args: argparse.Namespace) -> int:
    """Validate configuration file, including each filter's options."""
    config = _load(args)
    if config is None:
        return 1

    try:
        pipeline = create_pipeline(config)
    except ConfigurationError as e:
        print(f"✗ Configuration invalid: {e}", file=sys.stderr)
        return 1

    pipeline.close()
    print(f"✓ Configuration valid: {args.config}")
    print(f"  - {len(config.filters)} filter(s) configured")
    print(f"  - {config.workers} worker(s)")
    return 0


def cmd_filter_list(_args: argparse.Namespace) -> int:
    """List all registered filter types."""
    plugins = get_registry().list_plugins()
    print(f"Available filters ({len(plugins['filters'])}):\n")
    for name in plugins["filters"]:
        print(f"  - {name}")
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Check values against every contains filter in the configuration."""
    config = _load(args)
    if config is None:
        return 1

    try:
        pipeline = create_pipeline(config)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        checked = [f for f in pipeline.filters if isinstance(f, ContainsFilter)]
        if not checked:
            print("Error: No contains filters configured", file=sys.stderr)
            return 1

        any_match = False
        for f in checked:
            print(f"{f.id} ({len(f.reference_set)} reference value(s)):")
            for value in args.values:
                matched = f.evaluate([value])
                any_match = any_match or matched
                status = "✓ matched" if matched else "✗ not matched"
                print(f"  {status}: {value}")

        return 0 if any_match else 2
    finally:
        pipeline.close()


def _read_events(stream: IO[str]) -> Iterator[Event]:
    for line_number, line in enumerate(stream, 1):
        line = line.strip()
        if not line:
            continue
        try:
            data = json.loads(line)
        except json.JSONDecodeError as e:
            logger.warning("Skipping invalid JSON on line %d: %s", line_number, e)
            continue
        if not isinstance(data, dict):
            logger.warning("Skipping line %d: not a JSON object", line_number)
            continue
        yield Event(data)


def cmd_run(args: argparse.Namespace) -> int:
    """Run the pipeline over JSON lines, writing processed events to stdout."""
    config = _load(args)
    if config is None:
        return 1

    if args.workers is not None:
        config.workers = args.workers

    try:
        pipeline = create_pipeline(config)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    def sink(event: Event) -> None:
        sys.stdout.write(json.dumps(event.to_dict()) + "\n")

    try:
        if args.input:
            with open(args.input, encoding="utf-8") as f:
                pipeline.run(_read_events(f), sink)
        else:
            pipeline.run(_read_events(sys.stdin), sink)
        sys.stdout.flush()
        return 0
    except KeyboardInterrupt:
        print("\nShutting down...", file=sys.stderr)
        return 0
    except OSError as e:
        print(f"Error reading input: {e}", file=sys.stderr)
        return 1
    finally:
        pipeline.close()


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="sieve",
        description="Sieve - Streaming membership filter for events"
    )
    parser.add_argument(
        "-c", "--config",
        default="sieve.yaml",
        help="Path to configuration file (default: sieve.yaml)"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: from config, else INFO)"
    )
    parser.add_argument(
        "--log-file",
        help="Optional log file path (logs to stderr if not specified)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Config commands
    config_parser = subparsers.add_parser("config", help="Configuration management")
    config_subparsers = config_parser.add_subparsers(dest="subcommand")
    config_subparsers.add_parser("validate", help="Validate configuration file")

    # Filter commands
    filter_parser = subparsers.add_parser("filter", help="Filter plugins")
    filter_subparsers = filter_parser.add_subparsers(dest="subcommand")
    filter_subparsers.add_parser("list", help="List available filter types")

    # Check command
    check_parser = subparsers.add_parser(
        "check", help="Check values against the configured reference sets"
    )
    check_parser.add_argument("values", nargs="+", help="Values to check")

    # Run command
    run_parser = subparsers.add_parser("run", help="Filter JSON lines events")
    run_parser.add_argument(
        "-i", "--input",
        help="File of JSON lines events (reads stdin if not specified)"
    )
    run_parser.add_argument(
        "-w", "--workers",
        type=int,
        help="Number of worker threads (overrides the config)"
    )

    args = parser.parse_args(argv)

    # Handle no command
    if not args.command:
        parser.print_help()
        return 0

    setup_logging(level=args.log_level or "INFO", log_file=args.log_file)

    # Route to appropriate handler
    if args.command == "config":
        if args.subcommand == "validate":
            return cmd_config_validate(args)
        parser.print_help()
        return 0

    if args.command == "filter":
        if args.subcommand == "list":
            return cmd_filter_list(args)
        parser.print_help()
        return 0

    if args.command == "check":
        return cmd_check(args)

    if args.command == "run":
        if args.workers is not None and args.workers < 1:
            print("Error: --workers must be at least 1", file=sys.stderr)
            return 1
        return cmd_run(args)

    parser.print_help()
    return 0


if __name__ == '__main__':
    sys.exit(main())

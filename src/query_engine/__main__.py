"""Command-line entry point: ``python -m query_engine``."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from query_engine.adapters.inbound.repl import QueryRepl
from query_engine.infrastructure.config import Config
from query_engine.infrastructure.container import Container
from query_engine.ports.outbound import PersistenceError


def build_parser() -> argparse.ArgumentParser:
    arg_parser = argparse.ArgumentParser(
        prog="query_engine",
        description="Run SELECT / INSERT / DELETE statements over CSV-backed tables",
    )
    arg_parser.add_argument(
        "data_dir",
        type=Path,
        nargs="?",
        default=None,
        help="Directory holding schema.txt and the table files (default: from config)",
    )
    arg_parser.add_argument(
        "-c", "--command",
        type=str,
        help="Execute a single statement and exit",
    )
    arg_parser.add_argument(
        "-f", "--file",
        type=Path,
        help="Execute statements from a file, one per line, and exit",
    )
    arg_parser.add_argument(
        "--serve",
        action="store_true",
        help="Serve the REST API instead of the interactive loop",
    )
    arg_parser.add_argument("--host", type=str, default=None, help="REST API host")
    arg_parser.add_argument("--port", type=int, default=None, help="REST API port")
    arg_parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Log level (logs go to stderr)",
    )
    return arg_parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    config = Config()
    if args.data_dir is not None:
        config.storage.data_dir = args.data_dir
    if args.host is not None:
        config.server.host = args.host
    if args.port is not None:
        config.server.port = args.port
    if args.log_level is not None:
        config.observability.log_level = args.log_level

    if args.file is not None and not args.file.exists():
        print(f"Error: File not found: {args.file}", file=sys.stderr)
        return 1

    container = Container.create(config)
    engine = container.engine
    try:
        engine.start()
    except PersistenceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        repl = QueryRepl(engine)
        if args.command:
            return repl.run_statement(args.command)
        if args.file is not None:
            return repl.run_file(args.file)
        if args.serve:
            from query_engine.adapters.inbound.rest_api import run_server

            run_server(engine, host=config.server.host, port=config.server.port)
            return 0
        return repl.run()
    finally:
        engine.stop()


if __name__ == "__main__":
    sys.exit(main())

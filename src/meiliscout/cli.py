"""CLI entry point for index administration."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="meiliscout",
        description="meiliscout — MeiliSearch index administration",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="MeiliSearch URL (overrides config)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--wait",
        action="store_true",
        help="Wait for enqueued tasks to finish",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"meiliscout {_get_version()}",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("health", help="Check MeiliSearch health")

    create = commands.add_parser("create-index", help="Create an index")
    create.add_argument("name", help="Index name")
    create.add_argument("--primary-key", default=None, help="Primary-key field of the documents")

    delete = commands.add_parser("delete-index", help="Delete an index")
    delete.add_argument("name", help="Index name")

    flush = commands.add_parser("flush", help="Delete every document from an index")
    flush.add_argument("name", help="Index name")

    args = parser.parse_args(argv)

    from meiliscout.config.settings import Settings
    from meiliscout.observability.logging import setup_logging

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        settings = Settings.from_yaml(config_path)
    else:
        settings = Settings()

    if args.host:
        settings.meilisearch.host = args.host.rstrip("/")
    if args.log_level:
        settings.observability.log_level = args.log_level

    from meiliscout.exceptions import MeiliScoutError

    try:
        setup_logging(settings.observability)
        result = asyncio.run(_run(args, settings))
    except MeiliScoutError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(result, indent=2, default=str))


async def _run(args: argparse.Namespace, settings: Any) -> dict[str, Any]:
    from meiliscout.transport.meilisearch import MeiliSearchClient

    async with MeiliSearchClient.from_settings(settings.meilisearch) as client:
        if args.command == "health":
            return (await client.health_check()).model_dump()

        if args.command == "create-index":
            options = {"primaryKey": args.primary_key} if args.primary_key else {}
            task = await client.create_index(args.name, options)
        elif args.command == "delete-index":
            task = await client.delete_index(args.name)
        else:
            task = await client.index(args.name).delete_all_documents()

        if args.wait:
            task = await client.wait_for_task(task.task_uid)
        return task.model_dump(by_alias=True)


def _get_version() -> str:
    """Get the package version."""
    try:
        from meiliscout import __version__

        return __version__
    except ImportError:
        return "unknown"


if __name__ == "__main__":
    main()

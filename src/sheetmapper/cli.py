"""Command-line interface for SheetMapper."""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

import uvicorn

from .config import settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="SheetMapper - Spreadsheet header classification and schema mapping"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Server command
    server_parser = subparsers.add_parser("serve", help="Start the web server")
    server_parser.add_argument(
        "--host", default=settings.host, help=f"Host to bind to (default: {settings.host})"
    )
    server_parser.add_argument(
        "--port", type=int, default=settings.port, help=f"Port to bind to (default: {settings.port})"
    )
    server_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )

    # Classify command
    classify_parser = subparsers.add_parser(
        "classify", help="Detect the entity kind of a header row"
    )
    classify_parser.add_argument("headers", nargs="+", help="Raw header strings")

    # Map command
    map_parser = subparsers.add_parser("map", help="Map a header row onto its schema")
    map_parser.add_argument("headers", nargs="+", help="Raw header strings")
    map_parser.add_argument(
        "--entity",
        "-e",
        choices=["client", "worker", "task"],
        help="Entity kind (detected automatically when omitted)",
    )

    return parser


def main():
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command == "serve":
        run_server(args.host, args.port, args.reload)
    elif args.command == "classify":
        print(asyncio.run(run_classify(args.headers)))
    elif args.command == "map":
        print(asyncio.run(run_map(args.headers, args.entity)))
    else:
        parser.print_help()
        sys.exit(1)


def run_server(host: str, port: int, reload: bool):
    """Run the web server."""
    uvicorn.run(
        "sheetmapper.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


async def run_classify(headers: list[str]) -> str:
    """Classify a header row and return the decision as JSON."""
    from .mapping import MappingManager

    manager = MappingManager()
    try:
        decision = await manager.classify(headers)
    finally:
        await manager.close()
    return decision.model_dump_json(indent=2)


async def run_map(headers: list[str], entity: Optional[str] = None) -> str:
    """Map a header row and return the result as JSON."""
    from .mapping import MappingManager

    manager = MappingManager()
    try:
        result = await manager.map_sheet(headers, entity)
        payload = result.model_dump(mode="json")
        if result.unmapped:
            payload["suggestions"] = manager.suggest_mappings(result.unmapped, result.entity_kind)
    finally:
        await manager.close()
    return json.dumps(payload, indent=2)


if __name__ == "__main__":
    main()

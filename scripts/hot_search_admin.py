#!/usr/bin/env python3
"""Inspect and maintain the hot search store from the command line.

Usage:
    # Show the current ranking
    HOT_SEARCH_DB_PATH=./data/hot-searches.db python scripts/hot_search_admin.py list --limit 20

    # Totals and top terms
    python scripts/hot_search_admin.py stats

    # Seed terms (each argument is recorded once)
    python scripts/hot_search_admin.py record "movie-x" "movie-y"

    # Admin operations (password from --password or HOT_SEARCH_PASSWORD)
    python scripts/hot_search_admin.py delete "movie-x" --password s3cret
    HOT_SEARCH_PASSWORD=s3cret python scripts/hot_search_admin.py clear

    # Database size
    python scripts/hot_search_admin.py size
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from hot_search_service.config import HotSearchSettings
from hot_search_service.shared_service import HotSearchManager

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


def _print(payload) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


async def run(args: argparse.Namespace) -> int:
    overrides = {}
    if args.db_path:
        overrides["db_path"] = Path(args.db_path)
    manager = HotSearchManager(HotSearchSettings(**overrides))

    try:
        service = await manager.get_service()

        if args.command == "list":
            records = await service.list_hot_searches(args.limit)
            _print([r.to_dict() for r in records])
        elif args.command == "stats":
            stats = await service.stats()
            _print(stats.to_dict())
        elif args.command == "record":
            for term in args.terms:
                await service.record(term)
            logger.info(f"Recorded {len(args.terms)} term(s)")
        elif args.command == "size":
            _print({"mode": service.mode, "bytes": await service.database_size(), "mb": await service.database_size_mb()})
        elif args.command in ("delete", "clear"):
            password = args.password or os.environ.get("HOT_SEARCH_PASSWORD", "")
            if args.command == "delete":
                result = await service.admin_delete(args.term, password)
            else:
                result = await service.admin_clear(password)
            _print(result.model_dump())
            if not result.success:
                return 1
    finally:
        await manager.close()

    return 0


def main():
    parser = argparse.ArgumentParser(description="Hot search store maintenance")
    parser.add_argument("--db-path", help="SQLite database path (overrides HOT_SEARCH_DB_PATH)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="Show ranked terms")
    list_parser.add_argument("--limit", type=int, default=None, help="Maximum number of terms")

    subparsers.add_parser("stats", help="Show total and top terms")
    subparsers.add_parser("size", help="Show database size")

    record_parser = subparsers.add_parser("record", help="Record one search for each term")
    record_parser.add_argument("terms", nargs="+")

    delete_parser = subparsers.add_parser("delete", help="Delete one term")
    delete_parser.add_argument("term")
    delete_parser.add_argument("--password", help="Admin password")

    clear_parser = subparsers.add_parser("clear", help="Delete every term")
    clear_parser.add_argument("--password", help="Admin password")

    args = parser.parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()

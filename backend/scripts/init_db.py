#!/usr/bin/env python3
"""
Snapshot initialization script.
Creates the JSON snapshot with empty collections if it does not exist.

Run: python scripts/init_db.py [--reset]
"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import get_settings  # noqa: E402
from repositories import MalformedSnapshotError  # noqa: E402
from store import database_path, get_database, initialize_database  # noqa: E402

logger = logging.getLogger("init_db")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create the document store snapshot.")
    parser.add_argument("--reset", action="store_true", help="overwrite an existing snapshot with empty collections")
    args = parser.parse_args(argv)

    logging.basicConfig(level=get_settings().LOG_LEVEL, format="%(levelname)s %(message)s")
    path = database_path()
    existed = path.exists()
    initialize_database(reset=args.reset)

    try:
        db = get_database()
    except MalformedSnapshotError as e:
        logger.error("%s (re-run with --reset to start over)", e.message)
        return 1

    if existed and not args.reset:
        logger.info("Snapshot already present at %s", path)
    else:
        logger.info("Snapshot ready at %s", path)
    for name, records in ((c, db.list(c)) for c in ("users", "products", "threads", "messages")):
        logger.info("  %-10s %d", name, len(records))
    return 0


if __name__ == "__main__":
    sys.exit(main())

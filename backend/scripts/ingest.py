#!/usr/bin/env python3
"""
Ingest markdown files into the knowledge base.

Run: python scripts/ingest.py [--path docs] [--dry-run]
"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import PROJECT_ROOT, get_settings  # noqa: E402
from services.knowledge import ingest_directory  # noqa: E402

logger = logging.getLogger("ingest")


def main(argv=None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Ingest markdown files into the knowledge base.")
    parser.add_argument("--path", "-p", default=settings.KNOWLEDGE_BASE_DIR, help="source directory (relative to the project root)")
    parser.add_argument("--dry-run", action="store_true", help="list slugs without writing")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.LOG_LEVEL, format="%(message)s")
    source = Path(args.path)
    if not source.is_absolute():
        source = PROJECT_ROOT / source

    try:
        slugs = ingest_directory(source, dry_run=args.dry_run)
    except FileNotFoundError as e:
        logger.error("Ingestion failed: %s", e)
        return 1

    if not slugs:
        logger.info("No markdown files found to ingest.")
        return 0
    for slug in slugs:
        logger.info(" • %s", slug)
    logger.info("Dry run complete." if args.dry_run else f"Ingested {len(slugs)} documents.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

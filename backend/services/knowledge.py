"""
Knowledge base ingestion: markdown files become documents keyed by slug.
Re-ingesting the same file updates the document in place.
"""

import logging
import re
from pathlib import Path
from typing import Optional

from config import PROJECT_ROOT
from repositories import DocumentStore
from store import get_database

logger = logging.getLogger(__name__)

EMBEDDING_DIM = 1536
MARKDOWN_SUFFIXES = {".md", ".mdx"}
_TITLE_RE = re.compile(r"^#\s+(.+)$", re.MULTILINE)


def collect_markdown_files(source: Path) -> list[Path]:
    return sorted(p for p in source.rglob("*") if p.is_file() and p.suffix.lower() in MARKDOWN_SUFFIXES)


def slug_from_path(path: Path, root: Path = PROJECT_ROOT) -> str:
    """docs/Guides/Setup.md -> docs:guides:setup"""
    try:
        relative = path.resolve().relative_to(root.resolve())
    except ValueError:
        relative = Path(path.name)
    return ":".join(relative.with_suffix("").parts).lower()


def title_from_markdown(content: str, slug: str) -> str:
    match = _TITLE_RE.search(content)
    if match:
        return match.group(1).strip()
    return slug.split(":")[-1] or slug


def pseudo_embedding(text: str, dim: int = EMBEDDING_DIM) -> list[float]:
    """Deterministic character-histogram vector. Stands in for a real embedding model."""
    vector = [0.0] * dim
    for ch in text:
        code = ord(ch)
        vector[code % dim] += ((code % 29) + 1) / 100
    return [round(v, 4) for v in vector]


def ingest_document(slug: str, title: str, body: str, db: Optional[DocumentStore] = None) -> dict:
    db = db or get_database()
    return db.upsert_knowledge_base_document({
        "slug": slug,
        "title": title,
        "body": body,
        "embedding": pseudo_embedding(body),
    })


def ingest_directory(
    source: Path,
    dry_run: bool = False,
    root: Path = PROJECT_ROOT,
    db: Optional[DocumentStore] = None,
) -> list[str]:
    """Ingest every markdown file under source. Returns the slugs seen, in path order."""
    source = Path(source)
    if not source.is_dir():
        raise FileNotFoundError(f"Source directory {source} does not exist")
    files = collect_markdown_files(source)
    slugs = [slug_from_path(p, root) for p in files]
    if dry_run or not files:
        return slugs

    db = db or get_database()
    with db.transaction():
        for path, slug in zip(files, slugs):
            content = path.read_text(encoding="utf-8")
            ingest_document(slug, title_from_markdown(content, slug), content, db)
            logger.info("Ingested %s", slug)
    return slugs


def list_documents(db: Optional[DocumentStore] = None) -> list[dict]:
    db = db or get_database()
    return [
        {
            "id": doc["id"],
            "title": doc.get("title", ""),
            "slug": doc.get("slug", ""),
            "excerpt": (doc.get("body") or "")[:180],
            "updatedAt": doc.get("updatedAt"),
        }
        for doc in db.get_knowledge_base()
    ]

"""
Snapshot persistence: one JSON document holding every collection.

Known limitation: save() overwrites the file in a single write call with no
temp-file rename, so an interrupted process can leave a truncated snapshot.
That surfaces as MalformedSnapshotError on the next load.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from config import PROJECT_ROOT

from .errors import MalformedSnapshotError
from .schema import default_schema

logger = logging.getLogger(__name__)


def resolve_database_path(configured: Union[str, Path], root: Optional[Path] = None) -> Path:
    """Absolute paths are used verbatim; relative ones hang off the project root."""
    path = Path(configured)
    if path.is_absolute():
        return path
    return (root or PROJECT_ROOT) / path


def serialize(snapshot: dict) -> str:
    return json.dumps(snapshot, ensure_ascii=False, indent=2)


class SnapshotFile:
    """Reads and rewrites the whole snapshot at one location."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        # top-level keys this version does not know; written back untouched on save
        self.extras: dict = {}

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> dict[str, list]:
        """
        Return the stored snapshot merged over the defaults. A missing file
        is the bootstrap case and yields the defaults. Top-level keys that are
        not collections are kept aside in self.extras, out of the snapshot.
        """
        schema = default_schema()
        if not self.path.exists():
            self.extras = {}
            logger.info("No snapshot at %s, starting from empty collections", self.path)
            return schema

        try:
            raw = self.path.read_text(encoding="utf-8")
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedSnapshotError(self.path, str(e)) from e

        if not isinstance(data, dict):
            raise MalformedSnapshotError(self.path, f"top level is {type(data).__name__}, expected object")

        extras = {k: v for k, v in data.items() if k not in schema}
        if extras:
            logger.warning(
                "Preserving unknown snapshot keys in %s: %s", self.path, ", ".join(extras)
            )

        for name in schema:
            if name not in data:
                continue
            records = data[name]
            if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
                raise MalformedSnapshotError(self.path, f"'{name}' must be a list of objects")
            schema[name] = records

        self.extras = extras
        logger.info(
            "Loaded snapshot from %s (%d records)",
            self.path, sum(len(v) for v in schema.values()),
        )
        return schema

    def save(self, snapshot: dict) -> None:
        """Create the parent directory if needed, then overwrite the file in one write. Extras go after the collections."""
        document = {**snapshot, **{k: v for k, v in self.extras.items() if k not in snapshot}}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(serialize(document))
        except OSError as e:
            logger.error("Failed to write snapshot %s: %s", self.path, e)
            raise

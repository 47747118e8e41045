"""
Document store: named collections of records kept in memory and mirrored to
a single JSON snapshot on disk.

Every mutating call rewrites the whole snapshot before returning, unless it
runs inside transaction(), in which case the rewrite happens once at exit.
A re-entrant lock serialises the search-then-mutate-then-flush sequence so
concurrent callers in one process cannot both insert the same natural key.
"""

from __future__ import annotations

import copy
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator, Literal, Optional, Union

from utils import create_id, utc_now_iso

from .errors import (
    ConflictError,
    MissingRequiredFieldError,
    NotFoundError,
    StoreError,
)
from .schema import Collection, CollectionSpec, collection_spec
from .snapshot import SnapshotFile

logger = logging.getLogger(__name__)

CollectionName = Union[Collection, str]
ConflictPolicy = Literal["merge", "replace", "error"]


class DocumentStore:
    """Owns one in-memory snapshot and the file that mirrors it."""

    def __init__(self, path: Union[str, Path]):
        self._file = SnapshotFile(path)
        self._lock = threading.RLock()
        self._batch_depth = 0
        self._dirty = False
        self._snapshot = self._file.load()

    @property
    def path(self) -> Path:
        return self._file.path

    # ── Lifecycle ──────────────────────────────────────────────────────

    def reload(self) -> None:
        """Re-read the snapshot file, discarding in-memory state."""
        with self._lock:
            if self._batch_depth:
                raise StoreError("Cannot reload inside a transaction", code="reload_in_transaction")
            self._snapshot = self._file.load()

    def flush(self) -> None:
        """Write the full snapshot now, or mark it dirty when a transaction is open."""
        with self._lock:
            if self._batch_depth:
                self._dirty = True
                return
            self._file.save(self._snapshot)
            self._dirty = False

    @contextmanager
    def transaction(self) -> Iterator["DocumentStore"]:
        """
        Coalesce mutations into one flush at exit. If the block raises, the
        in-memory snapshot goes back to its state at entry and nothing is written.
        Nested transactions join the outermost one.
        """
        with self._lock:
            outermost = self._batch_depth == 0
            saved = {k: list(v) for k, v in self._snapshot.items()} if outermost else None
            self._batch_depth += 1
            try:
                yield self
            except BaseException:
                if outermost:
                    self._snapshot = saved
                    self._dirty = False
                raise
            finally:
                self._batch_depth -= 1
            if outermost and self._dirty:
                try:
                    self.flush()
                except BaseException:
                    self._snapshot = saved
                    self._dirty = False
                    raise

    # ── Reads ──────────────────────────────────────────────────────────

    def list(self, collection: CollectionName) -> list[dict]:
        """Copy of every record in insertion order. Mutating it does not touch the store."""
        spec = collection_spec(collection)
        with self._lock:
            return copy.deepcopy(self._records(spec))

    def list_by(
        self,
        collection: CollectionName,
        predicate: Optional[Callable[[dict], bool]] = None,
        **equals: Any,
    ) -> list[dict]:
        """Records matching predicate and every field=value pair, e.g. list_by(MESSAGES, threadId="t1")."""
        spec = collection_spec(collection)
        with self._lock:
            matched = [
                r for r in self._records(spec)
                if all(r.get(k) == v for k, v in equals.items())
                and (predicate is None or predicate(r))
            ]
            return copy.deepcopy(matched)

    def find(self, collection: CollectionName, record_id: str) -> Optional[dict]:
        return self.find_by(collection, "id", record_id)

    def find_by(self, collection: CollectionName, field: str, value: Any) -> Optional[dict]:
        spec = collection_spec(collection)
        with self._lock:
            records = self._records(spec)
            index = _index_of(records, field, value)
            return copy.deepcopy(records[index]) if index >= 0 else None

    # ── Generic mutations ──────────────────────────────────────────────

    def upsert(self, collection: CollectionName, candidate: dict) -> dict:
        """
        Match by id when the candidate has one, otherwise by the collection's
        natural key, and shallow-merge into the match. With no match a new
        record is appended; a caller-supplied id that matched nothing becomes
        the new record's id. Collections without a natural key always append
        when no id is given.
        """
        spec = collection_spec(collection)
        with self._mutation(spec) as records:
            index = self._locate(spec, records, candidate)
            if index >= 0:
                record = self._merge(spec, records[index], candidate)
                records[index] = record
            else:
                if candidate.get("id"):
                    logger.debug("Upsert on %s adopted unknown id %s", spec.name.value, candidate["id"])
                record = self._new_record(spec, candidate)
                records.append(record)
        return copy.deepcopy(record)

    def append(self, collection: CollectionName, candidate: dict) -> dict:
        """Insert a record with a fresh id into a collection that has no natural key."""
        spec = collection_spec(collection)
        if not spec.append_only:
            raise StoreError(
                f"'{spec.name.value}' is keyed by '{spec.natural_key}'; use upsert or insert",
                code="append_not_allowed",
            )
        fields = {k: v for k, v in candidate.items() if k != "id"}
        with self._mutation(spec) as records:
            record = self._new_record(spec, fields)
            records.append(record)
        return copy.deepcopy(record)

    def insert(self, collection: CollectionName, candidate: dict) -> dict:
        """Create a record, failing with ConflictError if its id or natural key is taken."""
        spec = collection_spec(collection)
        with self._mutation(spec) as records:
            if candidate.get("id") and _index_of(records, "id", candidate["id"]) >= 0:
                raise ConflictError(spec.name.value, "id", candidate["id"])
            if spec.natural_key:
                value = candidate.get(spec.natural_key)
                if value is None:
                    raise MissingRequiredFieldError(spec.name.value, spec.natural_key)
                if _index_of(records, spec.natural_key, value) >= 0:
                    raise ConflictError(spec.name.value, spec.natural_key, value)
            record = self._new_record(spec, candidate)
            records.append(record)
        return copy.deepcopy(record)

    def update_by_id(self, collection: CollectionName, record_id: str, patch: dict) -> dict:
        """Merge patch into an existing record, failing with NotFoundError if absent."""
        spec = collection_spec(collection)
        with self._mutation(spec) as records:
            index = _index_of(records, "id", record_id)
            if index < 0:
                raise NotFoundError(spec.name.value, record_id)
            record = self._merge(spec, records[index], patch)
            records[index] = record
        return copy.deepcopy(record)

    def upsert_by_key(
        self,
        collection: CollectionName,
        patch: dict,
        on_conflict: ConflictPolicy = "merge",
    ) -> dict:
        """
        Find by natural key only (any id in patch is ignored for matching and
        never adopted). On a match, "merge" keeps absent fields, "replace"
        keeps only id and immutable fields, "error" raises ConflictError.
        """
        spec = collection_spec(collection)
        if spec.append_only:
            raise StoreError(f"'{spec.name.value}' has no natural key", code="no_natural_key")
        if on_conflict not in ("merge", "replace", "error"):
            raise ValueError(f"Unknown conflict policy: {on_conflict}")
        value = patch.get(spec.natural_key)
        if value is None:
            raise MissingRequiredFieldError(spec.name.value, spec.natural_key)
        fields = {k: v for k, v in patch.items() if k != "id"}

        with self._mutation(spec) as records:
            index = _index_of(records, spec.natural_key, value)
            if index < 0:
                record = self._new_record(spec, fields)
                records.append(record)
            elif on_conflict == "error":
                raise ConflictError(spec.name.value, spec.natural_key, value)
            else:
                existing = records[index]
                if on_conflict == "replace":
                    existing = {f: existing[f] for f in spec.immutable_fields if f in existing}
                record = self._merge(spec, existing, fields)
                records[index] = record
        return copy.deepcopy(record)

    def delete(self, collection: CollectionName, record_id: str) -> bool:
        spec = collection_spec(collection)
        with self._lock:
            index = _index_of(self._records(spec), "id", record_id)
            if index < 0:
                return False
            with self._mutation(spec) as records:
                del records[index]
        return True

    # ── Typed accessors ────────────────────────────────────────────────

    def get_users(self) -> list[dict]:
        return self.list(Collection.USERS)

    def find_user_by_email(self, email: str) -> Optional[dict]:
        return self.find_by(Collection.USERS, "email", email)

    def upsert_user(self, user: dict) -> dict:
        return self.upsert(Collection.USERS, user)

    def get_products(self) -> list[dict]:
        return self.list(Collection.PRODUCTS)

    def upsert_product(self, product: dict) -> dict:
        return self.upsert(Collection.PRODUCTS, product)

    def get_subscriptions(self) -> list[dict]:
        return self.list(Collection.SUBSCRIPTIONS)

    def upsert_subscription(self, subscription: dict) -> dict:
        return self.upsert(Collection.SUBSCRIPTIONS, subscription)

    def get_threads(self) -> list[dict]:
        return self.list(Collection.THREADS)

    def upsert_thread(self, thread: dict) -> dict:
        return self.upsert(Collection.THREADS, thread)

    def get_messages(self, thread_id: Optional[str] = None) -> list[dict]:
        if thread_id:
            return self.list_by(Collection.MESSAGES, threadId=thread_id)
        return self.list(Collection.MESSAGES)

    def add_message(self, message: dict) -> dict:
        return self.append(Collection.MESSAGES, message)

    def get_audit_logs(self) -> list[dict]:
        return self.list(Collection.AUDIT_LOGS)

    def add_audit_log(self, entry: dict) -> dict:
        return self.append(Collection.AUDIT_LOGS, entry)

    def get_knowledge_base(self) -> list[dict]:
        return self.list(Collection.KNOWLEDGE_BASE)

    def upsert_knowledge_base_document(self, doc: dict) -> dict:
        return self.upsert(Collection.KNOWLEDGE_BASE, doc)

    def get_voice_sessions(self) -> list[dict]:
        return self.list(Collection.VOICE_SESSIONS)

    def add_voice_session(self, session: dict) -> dict:
        return self.append(Collection.VOICE_SESSIONS, session)

    def get_analytics_events(self) -> list[dict]:
        return self.list(Collection.ANALYTICS_EVENTS)

    def add_analytics_event(self, event: dict) -> dict:
        return self.append(Collection.ANALYTICS_EVENTS, event)

    # ── Internal helpers ───────────────────────────────────────────────

    def _records(self, spec: CollectionSpec) -> list[dict]:
        return self._snapshot[spec.name.value]

    @contextmanager
    def _mutation(self, spec: CollectionSpec) -> Iterator[list[dict]]:
        """Hold the lock, hand out the live list, flush on success, undo on any failure."""
        with self._lock:
            records = self._records(spec)
            before = list(records)
            try:
                yield records
                self.flush()
            except BaseException:
                records[:] = before
                raise

    def _locate(self, spec: CollectionSpec, records: list[dict], candidate: dict) -> int:
        if candidate.get("id"):
            return _index_of(records, "id", candidate["id"])
        if spec.append_only:
            return -1
        value = candidate.get(spec.natural_key)
        if value is None:
            raise MissingRequiredFieldError(spec.name.value, spec.natural_key)
        return _index_of(records, spec.natural_key, value)

    def _merge(self, spec: CollectionSpec, existing: dict, candidate: dict) -> dict:
        merged = {**existing, **copy.deepcopy(candidate)}
        for field in spec.immutable_fields:
            if field in existing:
                merged[field] = existing[field]
        if spec.touched_field:
            merged[spec.touched_field] = utc_now_iso()
        return merged

    def _new_record(self, spec: CollectionSpec, candidate: dict) -> dict:
        record = {"id": candidate.get("id") or create_id(spec.id_prefix)}
        now = utc_now_iso()
        for field in (spec.created_field, spec.touched_field):
            if field:
                record[field] = candidate.get(field) or now
        for key, value in candidate.items():
            if key not in record:
                record[key] = copy.deepcopy(value)
        return record


def _index_of(records: list[dict], field: str, value: Any) -> int:
    for i, record in enumerate(records):
        if record.get(field) == value:
            return i
    return -1

"""Abstract store interface the services and routes depend on."""

from __future__ import annotations

from typing import Any, Callable, ContextManager, Optional, Protocol, runtime_checkable

from .schema import Collection


@runtime_checkable
class StoreProtocol(Protocol):
    """Operations every store backend provides. DocumentStore is the JSON-file one."""

    def reload(self) -> None: ...

    def flush(self) -> None: ...

    def transaction(self) -> ContextManager[Any]: ...

    def list(self, collection: Collection) -> list: ...

    def list_by(
        self,
        collection: Collection,
        predicate: Optional[Callable[[dict], bool]] = None,
        **equals: Any,
    ) -> list: ...

    def find(self, collection: Collection, record_id: str) -> Optional[dict]: ...

    def find_by(self, collection: Collection, field: str, value: Any) -> Optional[dict]: ...

    def upsert(self, collection: Collection, candidate: dict) -> dict: ...

    def append(self, collection: Collection, candidate: dict) -> dict: ...

    def insert(self, collection: Collection, candidate: dict) -> dict: ...

    def update_by_id(self, collection: Collection, record_id: str, patch: dict) -> dict: ...

    def upsert_by_key(self, collection: Collection, patch: dict, on_conflict: str = "merge") -> dict: ...

    def delete(self, collection: Collection, record_id: str) -> bool: ...

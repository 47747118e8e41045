"""
Collection catalogue and zero-state snapshot.

Every collection is listed here with the field used to find an existing record
when no id is given (its natural key), the id prefix for new records, and which
timestamp fields the store fills in.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .errors import UnknownCollectionError


class Collection(str, Enum):
    USERS = "users"
    PRODUCTS = "products"
    SUBSCRIPTIONS = "subscriptions"
    THREADS = "threads"
    MESSAGES = "messages"
    AUDIT_LOGS = "auditLogs"
    KNOWLEDGE_BASE = "knowledgeBase"
    VOICE_SESSIONS = "voiceSessions"
    ANALYTICS_EVENTS = "analyticsEvents"


@dataclass(frozen=True)
class CollectionSpec:
    name: Collection
    id_prefix: str
    natural_key: Optional[str] = None
    created_field: Optional[str] = None    # set on insert when absent, never overwritten
    touched_field: Optional[str] = None    # set on insert when absent, refreshed on every update

    @property
    def append_only(self) -> bool:
        return self.natural_key is None

    @property
    def immutable_fields(self) -> tuple[str, ...]:
        return ("id", self.created_field) if self.created_field else ("id",)


COLLECTIONS: dict[Collection, CollectionSpec] = {
    spec.name: spec
    for spec in (
        CollectionSpec(Collection.USERS, "usr", natural_key="email"),
        CollectionSpec(Collection.PRODUCTS, "prd", natural_key="name"),
        CollectionSpec(Collection.SUBSCRIPTIONS, "sub", natural_key="userId"),
        CollectionSpec(Collection.THREADS, "thr", natural_key="title", created_field="createdAt"),
        CollectionSpec(Collection.MESSAGES, "msg", created_field="createdAt"),
        CollectionSpec(Collection.AUDIT_LOGS, "evt", created_field="createdAt"),
        CollectionSpec(
            Collection.KNOWLEDGE_BASE, "doc", natural_key="slug", touched_field="updatedAt"
        ),
        CollectionSpec(Collection.VOICE_SESSIONS, "evt", created_field="createdAt"),
        CollectionSpec(Collection.ANALYTICS_EVENTS, "evt", created_field="createdAt"),
    )
}


def collection_spec(name: Union[Collection, str]) -> CollectionSpec:
    """Look up a collection by enum member or persisted key ("auditLogs")."""
    try:
        return COLLECTIONS[Collection(name)]
    except ValueError:
        raise UnknownCollectionError(str(name)) from None


def default_schema() -> dict[str, list]:
    """Fresh zero-state snapshot: every collection present and empty."""
    return {c.value: [] for c in Collection}

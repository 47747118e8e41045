"""Store exceptions. Each carries a short machine-readable code for API clients."""

from typing import Optional


class StoreError(Exception):
    """Base for store failures with a client-facing code."""
    def __init__(self, message: str, code: str = "store_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class MalformedSnapshotError(StoreError):
    """Snapshot file exists but does not hold the expected JSON document."""
    def __init__(self, path, reason: str):
        self.path = path
        super().__init__(
            f"Snapshot at {path} is malformed: {reason}",
            code="snapshot_malformed",
        )


class MissingRequiredFieldError(StoreError):
    """Natural-key lookup on a record that has neither an id nor the key field."""
    def __init__(self, collection: str, field: str):
        self.collection = collection
        self.field = field
        super().__init__(
            f"Record for '{collection}' needs either 'id' or '{field}'",
            code="missing_required_field",
        )


class NotFoundError(StoreError):
    def __init__(self, collection: str, record_id: str):
        self.collection = collection
        self.record_id = record_id
        super().__init__(
            f"No record '{record_id}' in '{collection}'",
            code="not_found",
        )


class ConflictError(StoreError):
    """Insert collided with an existing id or natural key."""
    def __init__(self, collection: str, field: str, value: Optional[object]):
        self.collection = collection
        self.field = field
        self.value = value
        super().__init__(
            f"'{collection}' already has a record with {field}={value!r}",
            code="conflict",
        )


class UnknownCollectionError(StoreError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown collection: {name!r}", code="unknown_collection")

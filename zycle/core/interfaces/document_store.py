"""
Abstract interface for the backing document store.

The engine needs only point reads, ordered/filtered collection queries and
atomic multi-document write batches with native numeric increments. Any
store that can provide these semantics can back the back office.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

FilterOp = Literal["==", "!=", "<", "<=", ">", ">="]

_FIELD_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class _ServerTimestamp:
    """Sentinel replaced by the store's commit time."""

    _instance: "_ServerTimestamp | None" = None

    def __new__(cls) -> "_ServerTimestamp":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


def check_field_name(name: str) -> str:
    """Reject field names that cannot be addressed as a top-level JSON key."""
    if not _FIELD_NAME.match(name):
        raise ValueError(f"Invalid document field name: {name!r}")
    return name


@dataclass(frozen=True)
class DocumentSnapshot:
    """A document as read from the store."""

    id: str
    collection: str
    data: dict[str, Any]
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class FieldFilter:
    """A single ``field op value`` query clause."""

    field: str
    op: FilterOp
    value: Any

    def __post_init__(self) -> None:
        check_field_name(self.field)


# Writes


@dataclass(frozen=True)
class SetWrite:
    """Create or overwrite a document. With ``merge`` only the given fields change."""

    collection: str
    doc_id: str
    fields: dict[str, Any]
    merge: bool = False


@dataclass(frozen=True)
class UpdateWrite:
    """Change top-level fields of an existing document."""

    collection: str
    doc_id: str
    fields: dict[str, Any]


@dataclass(frozen=True)
class IncrementWrite:
    """Atomically add ``delta`` to a numeric field of an existing document."""

    collection: str
    doc_id: str
    field: str
    delta: float


@dataclass(frozen=True)
class ArrayUnionWrite:
    """Append values not already present to an array field of an existing document."""

    collection: str
    doc_id: str
    field: str
    values: tuple[Any, ...]


@dataclass(frozen=True)
class DeleteWrite:
    collection: str
    doc_id: str


Write = SetWrite | UpdateWrite | IncrementWrite | ArrayUnionWrite | DeleteWrite


# Preconditions, checked inside the batch transaction before any write


@dataclass(frozen=True)
class CollectionEmpty:
    collection: str


@dataclass(frozen=True)
class FieldTotalEquals:
    """The sum of ``field`` over every document in the collection equals ``value``."""

    collection: str
    field: str
    value: float = 0.0


Precondition = CollectionEmpty | FieldTotalEquals


@dataclass
class WriteBatch:
    """
    An ordered list of writes committed atomically.

    Usage:
        batch = WriteBatch()
        batch.set(invoices, invoice_id, fields)
        batch.increment(materials, material_id, "stock", 12.5)
        await store.commit_batch(batch)
    """

    writes: list[Write] = field(default_factory=list)
    preconditions: list[Precondition] = field(default_factory=list)

    def set(
        self,
        collection: str,
        doc_id: str,
        fields: dict[str, Any],
        merge: bool = False,
    ) -> "WriteBatch":
        for name in fields:
            check_field_name(name)
        self.writes.append(SetWrite(collection, doc_id, dict(fields), merge))
        return self

    def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> "WriteBatch":
        for name in fields:
            check_field_name(name)
        self.writes.append(UpdateWrite(collection, doc_id, dict(fields)))
        return self

    def increment(
        self, collection: str, doc_id: str, field_name: str, delta: float
    ) -> "WriteBatch":
        check_field_name(field_name)
        self.writes.append(IncrementWrite(collection, doc_id, field_name, delta))
        return self

    def array_union(
        self, collection: str, doc_id: str, field_name: str, values: list[Any]
    ) -> "WriteBatch":
        check_field_name(field_name)
        self.writes.append(ArrayUnionWrite(collection, doc_id, field_name, tuple(values)))
        return self

    def delete(self, collection: str, doc_id: str) -> "WriteBatch":
        self.writes.append(DeleteWrite(collection, doc_id))
        return self

    def require(self, precondition: Precondition) -> "WriteBatch":
        if isinstance(precondition, FieldTotalEquals):
            check_field_name(precondition.field)
        self.preconditions.append(precondition)
        return self

    def __len__(self) -> int:
        return len(self.writes)


class IDocumentStore(ABC):
    """Interface for a collection/document store with atomic write batches."""

    @abstractmethod
    async def get_document(self, collection: str, doc_id: str) -> DocumentSnapshot | None:
        """Get a single document, or None if it does not exist."""
        pass

    @abstractmethod
    async def query_collection(
        self,
        collection: str,
        order_by: str | None = None,
        descending: bool = False,
        filters: tuple[FieldFilter, ...] | list[FieldFilter] = (),
        limit: int | None = None,
        then_by: str | None = None,
    ) -> list[DocumentSnapshot]:
        """
        Query documents in a collection.

        ``then_by`` breaks ties on ``order_by`` in the same direction.
        """
        pass

    @abstractmethod
    async def commit_batch(self, batch: WriteBatch) -> None:
        """
        Apply every write in the batch atomically.

        Raises a StorageError subclass and leaves all documents untouched
        when any precondition or write fails.
        """
        pass

    @abstractmethod
    def new_id(self) -> str:
        """Generate a fresh document id."""
        pass

    async def ping(self) -> bool:
        """Check that the store is reachable."""
        return True

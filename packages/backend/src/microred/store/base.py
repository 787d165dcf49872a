"""Document store base — pluggable interface for the persistence backend.

Learn: The REST services and the subscription registry never talk to
Firestore directly. They depend on this interface, which has two parts:

1. CRUD primitives (async) used by the service layer
2. Change feeds (sync registration, async delivery) used by the registry

Watch contract: `watch_*` returns immediately with a zero-argument
cancellation handle. Callbacks are invoked later, on the asyncio event
loop that was running when the watch was opened, never inline during
the `watch_*` call. Once the handle has been called, no further
callbacks are delivered.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Literal

ChangeType = Literal["added", "modified", "removed"]


@dataclass(frozen=True)
class Document:
    """A stored document: store-assigned id plus its fields."""

    id: str
    data: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Flatten to the JSON shape the API returns: `{"id": ..., **fields}`."""
        return {"id": self.id, **self.data}


@dataclass(frozen=True)
class DocumentChange:
    """One entry of a collection change batch."""

    type: ChangeType
    id: str
    data: dict[str, Any]


@dataclass(frozen=True)
class DocumentState:
    """Current state of a watched document. `data` is None when it doesn't exist."""

    id: str
    exists: bool
    data: dict[str, Any] | None = None


CancelWatch = Callable[[], None]
CollectionCallback = Callable[[list[DocumentChange]], None]
DocumentCallback = Callable[[DocumentState], None]
ErrorCallback = Callable[[Exception], None]


class DocumentStore(ABC):
    """Abstract base for document store backends."""

    # ─── CRUD ───────────────────────────────────────────

    @abstractmethod
    async def list_documents(self, collection: str) -> list[Document]:
        """Return every document in a collection."""

    @abstractmethod
    async def find_by_field(
        self, collection: str, field_name: str, value: Any
    ) -> list[Document]:
        """Return documents whose `field_name` equals `value`."""

    @abstractmethod
    async def get_document(self, collection: str, document_id: str) -> Document | None:
        """Fetch a document by store id, or None."""

    @abstractmethod
    async def add_document(self, collection: str, data: dict[str, Any]) -> str:
        """Insert a document with a store-generated id and return that id."""

    @abstractmethod
    async def update_document(
        self, collection: str, document_id: str, data: dict[str, Any]
    ) -> None:
        """Merge `data` into an existing document (top-level fields only)."""

    @abstractmethod
    async def delete_document(self, collection: str, document_id: str) -> None:
        """Delete a document. Deleting a missing document is not an error."""

    # ─── Change feeds ───────────────────────────────────

    @abstractmethod
    def watch_collection(
        self,
        collection: str,
        on_change: CollectionCallback,
        on_error: ErrorCallback,
    ) -> CancelWatch:
        """Open a collection-level change feed."""

    @abstractmethod
    def watch_document(
        self,
        collection: str,
        document_id: str,
        on_change: DocumentCallback,
        on_error: ErrorCallback,
    ) -> CancelWatch:
        """Open a single-document change feed."""

    # ─── Lifecycle ──────────────────────────────────────

    async def ping(self) -> None:
        """Raise if the backend is unreachable. Used by the health check."""

    async def close(self) -> None:
        """Release connections and stop every open watch."""

"""In-process document store.

Learn: Used for local development (MICRORED_STORE_BACKEND=memory) and by
the test-suite. It mimics Firestore's listener semantics closely enough
that the registry can't tell the difference:

- Opening a watch delivers an initial snapshot (every existing document
  as "added", or the document's current state)
- Every write afterwards delivers one change
- Delivery is always scheduled on the event loop with call_soon, never
  inline with the write or the watch call
"""

import asyncio
import copy
import itertools
import uuid
from dataclasses import dataclass
from typing import Any, Callable

from microred.errors import StoreFailure
from microred.store.base import (
    CancelWatch,
    ChangeType,
    CollectionCallback,
    Document,
    DocumentCallback,
    DocumentChange,
    DocumentState,
    DocumentStore,
    ErrorCallback,
)


@dataclass
class _Watcher:
    loop: asyncio.AbstractEventLoop
    on_change: Callable[[Any], None]
    on_error: ErrorCallback
    active: bool = True


class MemoryStore(DocumentStore):
    """Dictionary-backed DocumentStore with Firestore-like change feeds."""

    def __init__(self):
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._collection_watchers: dict[str, dict[int, _Watcher]] = {}
        self._document_watchers: dict[tuple[str, str], dict[int, _Watcher]] = {}
        self._ids = itertools.count(1)

    # ─── CRUD ───────────────────────────────────────────

    async def list_documents(self, collection: str) -> list[Document]:
        docs = self._collections.get(collection, {})
        return [Document(doc_id, copy.deepcopy(data)) for doc_id, data in docs.items()]

    async def find_by_field(
        self, collection: str, field_name: str, value: Any
    ) -> list[Document]:
        docs = self._collections.get(collection, {})
        return [
            Document(doc_id, copy.deepcopy(data))
            for doc_id, data in docs.items()
            if field_name in data and data[field_name] == value
        ]

    async def get_document(self, collection: str, document_id: str) -> Document | None:
        data = self._collections.get(collection, {}).get(document_id)
        if data is None:
            return None
        return Document(document_id, copy.deepcopy(data))

    async def add_document(self, collection: str, data: dict[str, Any]) -> str:
        document_id = uuid.uuid4().hex[:20]
        self._collections.setdefault(collection, {})[document_id] = copy.deepcopy(data)
        self._notify(collection, document_id, "added")
        return document_id

    async def update_document(
        self, collection: str, document_id: str, data: dict[str, Any]
    ) -> None:
        current = self._collections.get(collection, {}).get(document_id)
        if current is None:
            raise StoreFailure(
                "update_document", f"No document to update: {collection}/{document_id}"
            )
        current.update(copy.deepcopy(data))
        self._notify(collection, document_id, "modified")

    async def delete_document(self, collection: str, document_id: str) -> None:
        docs = self._collections.get(collection, {})
        if document_id not in docs:
            return
        removed = docs.pop(document_id)
        self._notify(collection, document_id, "removed", removed)

    # ─── Change feeds ───────────────────────────────────

    def watch_collection(
        self,
        collection: str,
        on_change: CollectionCallback,
        on_error: ErrorCallback,
    ) -> CancelWatch:
        watcher = _Watcher(asyncio.get_running_loop(), on_change, on_error)
        watch_id = next(self._ids)
        self._collection_watchers.setdefault(collection, {})[watch_id] = watcher

        initial = [
            DocumentChange("added", doc_id, copy.deepcopy(data))
            for doc_id, data in self._collections.get(collection, {}).items()
        ]
        self._schedule(watcher, initial)

        def cancel() -> None:
            watcher.active = False
            self._collection_watchers.get(collection, {}).pop(watch_id, None)

        return cancel

    def watch_document(
        self,
        collection: str,
        document_id: str,
        on_change: DocumentCallback,
        on_error: ErrorCallback,
    ) -> CancelWatch:
        watcher = _Watcher(asyncio.get_running_loop(), on_change, on_error)
        watch_id = next(self._ids)
        target = (collection, document_id)
        self._document_watchers.setdefault(target, {})[watch_id] = watcher
        self._schedule(watcher, self._state(collection, document_id))

        def cancel() -> None:
            watcher.active = False
            self._document_watchers.get(target, {}).pop(watch_id, None)

        return cancel

    def fail_watches(self, collection: str, error: Exception) -> None:
        """Report `error` to every watch on `collection` and its documents.

        Watches stay registered, the same way a Firestore listener that
        errored is left for its owner to cancel.
        """
        watchers = list(self._collection_watchers.get(collection, {}).values())
        for (coll, _), by_id in self._document_watchers.items():
            if coll == collection:
                watchers.extend(by_id.values())
        for watcher in watchers:
            watcher.loop.call_soon(self._deliver_error, watcher, error)

    @property
    def watch_count(self) -> int:
        """Number of open watches, for tests and the health endpoint."""
        return sum(len(w) for w in self._collection_watchers.values()) + sum(
            len(w) for w in self._document_watchers.values()
        )

    async def close(self) -> None:
        for by_id in (*self._collection_watchers.values(), *self._document_watchers.values()):
            for watcher in by_id.values():
                watcher.active = False
        self._collection_watchers.clear()
        self._document_watchers.clear()

    # ─── Internals ──────────────────────────────────────

    def _state(self, collection: str, document_id: str) -> DocumentState:
        data = self._collections.get(collection, {}).get(document_id)
        if data is None:
            return DocumentState(document_id, exists=False)
        return DocumentState(document_id, exists=True, data=copy.deepcopy(data))

    def _notify(
        self,
        collection: str,
        document_id: str,
        change_type: ChangeType,
        removed: dict[str, Any] | None = None,
    ) -> None:
        if change_type == "removed":
            data = copy.deepcopy(removed or {})
        else:
            data = copy.deepcopy(self._collections[collection][document_id])

        for watcher in list(self._collection_watchers.get(collection, {}).values()):
            self._schedule(watcher, [DocumentChange(change_type, document_id, data)])

        for watcher in list(self._document_watchers.get((collection, document_id), {}).values()):
            self._schedule(watcher, self._state(collection, document_id))

    def _schedule(self, watcher: _Watcher, payload: Any) -> None:
        watcher.loop.call_soon(self._deliver, watcher, payload)

    @staticmethod
    def _deliver(watcher: _Watcher, payload: Any) -> None:
        if watcher.active:
            watcher.on_change(payload)

    @staticmethod
    def _deliver_error(watcher: _Watcher, error: Exception) -> None:
        if watcher.active:
            watcher.on_error(error)

"""Firestore backend — google-cloud-firestore.

Learn: Firestore's Python SDK splits along two lines that matter here:

1. CRUD goes through `firestore.AsyncClient`, so request handlers never
   block the event loop.
2. Real-time listeners (`on_snapshot`) only exist on the sync
   `firestore.Client`. Their callbacks run on a background thread owned
   by the SDK.

The registry is single-threaded, so every snapshot callback is hopped
back onto the loop with call_soon_threadsafe before anything else sees
it. A cancelled watch is flagged inactive first, so batches already
queued on the loop are dropped instead of delivered.
"""

import asyncio
import threading
from contextlib import asynccontextmanager
from typing import Any, Callable

import structlog
from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter
from google.oauth2 import service_account

from microred.errors import StoreFailure
from microred.store.base import (
    CancelWatch,
    CollectionCallback,
    Document,
    DocumentCallback,
    DocumentChange,
    DocumentState,
    DocumentStore,
    ErrorCallback,
)

logger = structlog.get_logger()

# Firestore ChangeType enum names → our change types
_CHANGE_TYPES = {"ADDED": "added", "MODIFIED": "modified", "REMOVED": "removed"}

_STORE_ERRORS = (google_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError)


class _WatchHandle:
    """Cancellation handle for one on_snapshot listener."""

    def __init__(self, loop: asyncio.AbstractEventLoop, target: str):
        self.loop = loop
        self.target = target
        self.active = True
        self.watch = None
        self._lock = threading.Lock()

    def dispatch(self, callback: Callable[[Any], None], payload: Any) -> None:
        """Called from the SDK thread — schedule `callback(payload)` on the loop."""
        if not self.active:
            return
        try:
            self.loop.call_soon_threadsafe(self._run, callback, payload)
        except RuntimeError:
            # Loop already closed (shutdown in progress)
            logger.debug("store.watch_dropped", target=self.target)

    def _run(self, callback: Callable[[Any], None], payload: Any) -> None:
        if self.active:
            callback(payload)

    def __call__(self) -> None:
        with self._lock:
            if not self.active:
                return
            self.active = False
            watch = self.watch
        if watch is not None:
            watch.unsubscribe()


class FirestoreStore(DocumentStore):
    """DocumentStore backed by Cloud Firestore."""

    def __init__(
        self,
        project: str | None = None,
        database: str = "(default)",
        credentials_file: str | None = None,
    ):
        self.project = project
        self.database = database
        self.credentials_file = credentials_file
        self._async_client: firestore.AsyncClient | None = None
        self._sync_client: firestore.Client | None = None
        self._handles: set[_WatchHandle] = set()

    # ─── Clients (lazy) ─────────────────────────────────

    def _client_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"project": self.project, "database": self.database}
        if self.credentials_file:
            kwargs["credentials"] = (
                service_account.Credentials.from_service_account_file(
                    self.credentials_file
                )
            )
        return kwargs

    @property
    def async_client(self) -> firestore.AsyncClient:
        if self._async_client is None:
            self._async_client = firestore.AsyncClient(**self._client_kwargs())
        return self._async_client

    @property
    def sync_client(self) -> firestore.Client:
        if self._sync_client is None:
            self._sync_client = firestore.Client(**self._client_kwargs())
        return self._sync_client

    @asynccontextmanager
    async def _operation(self, name: str):
        """Translate SDK errors into StoreFailure."""
        try:
            yield
        except _STORE_ERRORS as e:
            logger.error("store.operation_failed", operation=name, error=str(e))
            raise StoreFailure(name, str(e)) from e

    # ─── CRUD ───────────────────────────────────────────

    async def list_documents(self, collection: str) -> list[Document]:
        async with self._operation("list_documents"):
            snapshots = await self.async_client.collection(collection).get()
        return [_to_document(s) for s in snapshots]

    async def find_by_field(
        self, collection: str, field_name: str, value: Any
    ) -> list[Document]:
        async with self._operation("find_by_field"):
            query = self.async_client.collection(collection).where(
                filter=FieldFilter(field_name, "==", value)
            )
            snapshots = await query.get()
        return [_to_document(s) for s in snapshots]

    async def get_document(self, collection: str, document_id: str) -> Document | None:
        async with self._operation("get_document"):
            snapshot = await self.async_client.collection(collection).document(document_id).get()
        if not snapshot.exists:
            return None
        return _to_document(snapshot)

    async def add_document(self, collection: str, data: dict[str, Any]) -> str:
        async with self._operation("add_document"):
            _, ref = await self.async_client.collection(collection).add(data)
        return ref.id

    async def update_document(
        self, collection: str, document_id: str, data: dict[str, Any]
    ) -> None:
        async with self._operation("update_document"):
            await self.async_client.collection(collection).document(document_id).update(data)

    async def delete_document(self, collection: str, document_id: str) -> None:
        async with self._operation("delete_document"):
            await self.async_client.collection(collection).document(document_id).delete()

    # ─── Change feeds ───────────────────────────────────

    def watch_collection(
        self,
        collection: str,
        on_change: CollectionCallback,
        on_error: ErrorCallback,
    ) -> CancelWatch:
        handle = _WatchHandle(asyncio.get_running_loop(), collection)

        def on_snapshot(col_snapshot, changes, read_time):
            try:
                batch = [
                    DocumentChange(
                        _CHANGE_TYPES[change.type.name],
                        change.document.id,
                        _snapshot_data(change.document),
                    )
                    for change in changes
                ]
            except Exception as e:
                logger.error("store.watch_error", target=collection, error=str(e))
                handle.dispatch(on_error, e)
                return
            handle.dispatch(on_change, batch)

        return self._open(handle, lambda: self.sync_client.collection(collection), on_snapshot, on_error)

    def watch_document(
        self,
        collection: str,
        document_id: str,
        on_change: DocumentCallback,
        on_error: ErrorCallback,
    ) -> CancelWatch:
        target = f"{collection}/{document_id}"
        handle = _WatchHandle(asyncio.get_running_loop(), target)

        def on_snapshot(doc_snapshots, changes, read_time):
            try:
                # The SDK passes an empty list once the document is gone
                snapshot = doc_snapshots[0] if doc_snapshots else None
                if snapshot is None or not snapshot.exists:
                    state = DocumentState(document_id, exists=False)
                else:
                    state = DocumentState(document_id, exists=True, data=_snapshot_data(snapshot))
            except Exception as e:
                logger.error("store.watch_error", target=target, error=str(e))
                handle.dispatch(on_error, e)
                return
            handle.dispatch(on_change, state)

        return self._open(
            handle,
            lambda: self.sync_client.collection(collection).document(document_id),
            on_snapshot,
            on_error,
        )

    def _open(self, handle: _WatchHandle, reference, on_snapshot, on_error: ErrorCallback) -> CancelWatch:
        """Start the listener; failures are reported through on_error, never raised."""
        try:
            handle.watch = reference().on_snapshot(on_snapshot)
        except Exception as e:
            logger.error("store.watch_open_failed", target=handle.target, error=str(e))
            handle.active = False
            handle.loop.call_soon(on_error, e)
            return handle

        self._handles.add(handle)

        def cancel() -> None:
            self._handles.discard(handle)
            handle()

        return cancel

    # ─── Lifecycle ──────────────────────────────────────

    async def ping(self) -> None:
        async with self._operation("ping"):
            async for _ in self.async_client.collections():
                break

    async def close(self) -> None:
        for handle in list(self._handles):
            handle()
        self._handles.clear()
        # Channels are released when the clients are garbage collected
        self._sync_client = None
        self._async_client = None


def _to_document(snapshot) -> Document:
    return Document(snapshot.id, _snapshot_data(snapshot))


def _snapshot_data(snapshot) -> dict[str, Any]:
    return _plain(snapshot.to_dict() or {})


def _plain(value: Any) -> Any:
    """Replace store-native values with JSON-friendly ones.

    Timestamps arrive as datetime subclasses and are left alone; geo points
    become {latitud, longitud} like the rest of the data model, references
    become their document path.
    """
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    if isinstance(value, firestore.GeoPoint):
        return {"latitud": value.latitude, "longitud": value.longitude}
    if isinstance(value, (firestore.DocumentReference, firestore.AsyncDocumentReference)):
        return value.path
    return value

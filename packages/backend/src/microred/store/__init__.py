"""Document store backends.

Learn: build_store() is the only place that knows which backend is
configured. Everything else receives a DocumentStore instance.
"""

from fastapi import Request

from microred.config import Settings
from microred.store.base import (
    CancelWatch,
    Document,
    DocumentChange,
    DocumentState,
    DocumentStore,
)

__all__ = [
    "CancelWatch",
    "Document",
    "DocumentChange",
    "DocumentState",
    "DocumentStore",
    "build_store",
    "get_store",
]


def build_store(settings: Settings) -> DocumentStore:
    """Instantiate the backend selected by MICRORED_STORE_BACKEND."""
    if settings.store_backend == "memory":
        from microred.store.memory import MemoryStore

        return MemoryStore()

    from microred.store.firestore import FirestoreStore

    return FirestoreStore(
        project=settings.firestore_project,
        database=settings.firestore_database,
        credentials_file=settings.credentials_file,
    )


def get_store(request: Request) -> DocumentStore:
    """FastAPI dependency — the store created in the app lifespan."""
    return request.app.state.store

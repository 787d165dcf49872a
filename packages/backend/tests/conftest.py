"""Test fixtures — a fresh in-memory document store per test.

Learn: The app factory accepts a DocumentStore, so tests hand it a
MemoryStore instead of talking to Firestore. Every test gets its own
store and its own app, so nothing leaks between tests.

Two clients are provided:
- `client`: async httpx client over ASGITransport, for REST tests
- `ws_client`: Starlette's TestClient, which also speaks WebSocket.
  REST calls made through it run on the same event loop as the socket,
  so a write shows up on an open subscription.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from microred.main import create_app
from microred.store.memory import MemoryStore


@pytest.fixture()
def store():
    return MemoryStore()


@pytest.fixture()
def app(store):
    return create_app(store=store)


@pytest_asyncio.fixture()
async def client(app):
    """HTTP client wired straight into the ASGI app (no network)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def ws_client(app):
    """Sync client that runs the app lifespan and supports websocket_connect()."""
    with TestClient(app) as tc:
        yield tc

"""WebSocket endpoint tests.

Learn: Starlette's TestClient runs the app on a background event loop.
REST calls made through the same client land on that loop too, so a
POST while a socket is subscribed produces a live update on the socket.

The frame handler (handle_frame) is also tested directly, without a
socket, for the error paths.
"""

import time

import pytest
from starlette.websockets import WebSocketDisconnect
from structlog.testing import capture_logs

from microred.realtime.channel import ClientChannel, QueueChannel
from microred.realtime.registry import SubscriptionRegistry
from microred.realtime.websocket import handle_frame
from microred.store.memory import MemoryStore


COLABORADOR = {
    "nombre": "Ana",
    "apellidos": "López",
    "numero_empleado": "E-1",
    "zona_actual": "Norte",
    "contrasenia": "x",
}


def wait_until(predicate, timeout=2.0):
    """Poll until predicate() is true; server-side teardown is asynchronous."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def connect(ws) -> str:
    """Read the greeting frame and return the assigned client id."""
    frame = ws.receive_json()
    assert frame["event"] == "connected"
    return frame["data"]["clientId"]


# ═══════════════════════════════════════════════════════════
# Socket round-trips
# ═══════════════════════════════════════════════════════════


def test_connect_and_ping(ws_client):
    with ws_client.websocket_connect("/ws") as ws:
        client_id = connect(ws)
        assert client_id

        ws.send_json({"event": "ping"})
        assert ws.receive_json() == {"event": "pong", "data": {}}


def test_collection_subscription_receives_rest_writes(ws_client):
    with ws_client.websocket_connect("/ws") as ws:
        client_id = connect(ws)

        ws.send_json({"event": "subscribe_collection", "data": "colaboradores"})
        ack = ws.receive_json()
        assert ack == {
            "event": "subscribed",
            "data": {"key": f"{client_id}/colaboradores", "collectionName": "colaboradores"},
        }

        resp = ws_client.post("/api/v1/colaboradores", json=COLABORADOR)
        assert resp.status_code == 201

        update = ws.receive_json()
        assert update["event"] == "collection_update"
        assert update["data"]["collectionName"] == "colaboradores"
        [change] = update["data"]["changes"]
        assert change["type"] == "added"
        assert change["data"]["id_colaborador"] == resp.json()["id_colaborador"]


def test_document_subscription_sees_update_and_delete(ws_client):
    ws_client.post("/api/v1/colaboradores", json=COLABORADOR)
    doc_id = ws_client.get("/api/v1/colaboradores/E-1").json()["id"]

    with ws_client.websocket_connect("/ws") as ws:
        client_id = connect(ws)

        ws.send_json(
            {
                "event": "subscribe_document",
                "data": {"collectionName": "colaboradores", "documentId": doc_id},
            }
        )
        ack = ws.receive_json()
        assert ack["data"]["key"] == f"{client_id}/colaboradores/{doc_id}"
        assert ack["data"]["documentId"] == doc_id

        initial = ws.receive_json()
        assert initial["event"] == "document_update"
        assert initial["data"]["exists"] is True
        assert initial["data"]["data"]["nombre"] == "Ana"

        ws_client.put("/api/v1/colaboradores/E-1", json={"zona_actual": "Sur"})
        modified = ws.receive_json()
        assert modified["data"]["data"]["zona_actual"] == "Sur"

        ws_client.delete("/api/v1/colaboradores/E-1")
        deleted = ws.receive_json()
        assert deleted["data"] == {
            "collectionName": "colaboradores",
            "documentId": doc_id,
            "exists": False,
        }


def test_unsubscribe_stops_updates(ws_client):
    with ws_client.websocket_connect("/ws") as ws:
        connect(ws)
        ws.send_json({"event": "subscribe_collection", "data": "zonas"})
        key = ws.receive_json()["data"]["key"]

        ws.send_json({"event": "unsubscribe", "data": key})
        ws.send_json({"event": "ping"})
        assert ws.receive_json()["event"] == "pong"

        ws_client.post(
            "/api/v1/zonas", json={"nombre_zona": "Norte", "estado": "NL"}
        )
        ws.send_json({"event": "ping"})
        # Nothing from the cancelled watch got in ahead of the pong
        assert ws.receive_json()["event"] == "pong"


def test_disconnect_releases_all_watches(ws_client, app, store):
    with ws_client.websocket_connect("/ws") as ws:
        connect(ws)
        ws.send_json({"event": "subscribe_collection", "data": "zonas"})
        ws.receive_json()
        ws.send_json({"event": "subscribe_collection", "data": "rutas"})
        ws.receive_json()
        assert len(app.state.registry) == 2

    registry = app.state.registry
    assert wait_until(lambda: len(registry) == 0)
    assert wait_until(lambda: store.watch_count == 0)
    assert registry.clients() == []


def test_clients_are_isolated(ws_client):
    with ws_client.websocket_connect("/ws") as first, ws_client.websocket_connect("/ws") as second:
        first_id = connect(first)
        second_id = connect(second)
        assert first_id != second_id

        first.send_json({"event": "subscribe_collection", "data": "zonas"})
        key = first.receive_json()["data"]["key"]

        # second can't cancel first's subscription
        second.send_json({"event": "unsubscribe", "data": key})
        second.send_json({"event": "ping"})
        assert second.receive_json()["event"] == "pong"

        ws_client.post("/api/v1/zonas", json={"nombre_zona": "Norte", "estado": "NL"})
        assert first.receive_json()["event"] == "collection_update"


def test_bad_frames_get_error_replies(ws_client):
    with ws_client.websocket_connect("/ws") as ws:
        connect(ws)

        ws.send_text("not json")
        assert ws.receive_json()["event"] == "error"

        ws.send_json({"event": "subscribe_collection", "data": "a/b"})
        reply = ws.receive_json()
        assert reply["event"] == "error"
        assert "'/'" in reply["data"]["message"]

        # The socket is still usable afterwards
        ws.send_json({"event": "ping"})
        assert ws.receive_json()["event"] == "pong"


def test_writer_failure_is_logged_and_releases_client(ws_client, app, monkeypatch):
    """A writer crash closes the socket, logs the error and still cleans up."""

    async def broken_next_frame(self):
        raise RuntimeError("frame could not be encoded")

    monkeypatch.setattr(QueueChannel, "next_frame", broken_next_frame)

    with capture_logs() as logs:
        with ws_client.websocket_connect("/ws") as ws:
            with pytest.raises(WebSocketDisconnect):
                ws.receive_json()

        registry = app.state.registry
        assert wait_until(lambda: registry.clients() == [])

    failures = [e for e in logs if e["event"] == "realtime.socket_task_failed"]
    assert len(failures) == 1
    assert failures[0]["task"] == "ws-writer"
    assert isinstance(failures[0]["exc_info"], RuntimeError)


# ═══════════════════════════════════════════════════════════
# handle_frame
# ═══════════════════════════════════════════════════════════


class RecordingChannel(ClientChannel):
    def __init__(self):
        self.frames = []

    def send(self, message) -> None:
        self.frames.append(message.to_wire())


@pytest.fixture
def session():
    registry = SubscriptionRegistry(MemoryStore())
    channel = RecordingChannel()
    registry.connect_client("c1", channel)
    return registry, channel


@pytest.mark.parametrize(
    "raw",
    [
        "{",
        "[]",
        '{"data": "zonas"}',
        '{"event": ""}',
    ],
)
def test_handle_frame_malformed(session, raw):
    registry, channel = session
    handle_frame(registry, "c1", channel, raw)
    assert channel.frames[0]["event"] == "error"
    assert channel.frames[0]["data"]["message"].startswith("Malformed frame")


def test_handle_frame_unknown_event(session):
    registry, channel = session
    handle_frame(registry, "c1", channel, '{"event": "subscribe_everything"}')
    assert channel.frames == [
        {"event": "error", "data": {"message": "Unknown event: subscribe_everything"}}
    ]


def test_handle_frame_subscribe_document_needs_both_fields(session):
    registry, channel = session
    handle_frame(
        registry, "c1", channel,
        '{"event": "subscribe_document", "data": {"collectionName": "zonas"}}',
    )
    assert channel.frames[0]["event"] == "error"
    assert "subscribe_document" in channel.frames[0]["data"]["message"]
    assert len(registry) == 0


def test_handle_frame_subscribe_collection_needs_a_name(session):
    registry, channel = session
    handle_frame(registry, "c1", channel, '{"event": "subscribe_collection", "data": 7}')
    assert channel.frames[0]["event"] == "error"
    assert len(registry) == 0


def test_handle_frame_unsubscribe_unknown_key_is_silent(session):
    registry, channel = session
    handle_frame(registry, "c1", channel, '{"event": "unsubscribe", "data": "c1/zonas"}')
    assert channel.frames == []

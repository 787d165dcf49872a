"""WebSocket endpoint — live collection and document updates.

Learn: Each client connects to /ws and gets a fresh client id. The handler:
1. Registers the client with the SubscriptionRegistry
2. Runs a writer task (channel queue → socket) and a reader task
   (socket → subscribe / unsubscribe commands) concurrently
3. On disconnect, cancels both tasks and releases every watch the
   client owned before returning

Frames are JSON: {"event": "...", "data": ...}. See realtime/messages.py.
"""

import asyncio
import json
import uuid

import structlog
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError
from starlette.websockets import WebSocketState

from microred.errors import MicroredError
from microred.realtime.channel import ClientChannel, QueueChannel
from microred.realtime.messages import (
    PING,
    SUBSCRIBE_COLLECTION,
    SUBSCRIBE_DOCUMENT,
    UNSUBSCRIBE,
    Connected,
    DocumentTarget,
    ErrorMessage,
    InboundFrame,
    Pong,
    Subscribed,
)
from microred.realtime.registry import SubscriptionRegistry

logger = structlog.get_logger()
router = APIRouter()


def get_registry(websocket: WebSocket) -> SubscriptionRegistry:
    """FastAPI dependency — the app-wide registry created in the lifespan."""
    return websocket.app.state.registry


def handle_frame(
    registry: SubscriptionRegistry,
    client_id: str,
    channel: ClientChannel,
    raw: str,
) -> None:
    """Apply one inbound frame. Bad input becomes an `error` message, never an exception."""
    try:
        frame = InboundFrame.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError):
        channel.send(ErrorMessage(message="Malformed frame: expected {\"event\": ..., \"data\": ...}"))
        return

    try:
        if frame.event == SUBSCRIBE_COLLECTION:
            if not isinstance(frame.data, str):
                raise ValueError("subscribe_collection expects a collection name")
            key = registry.subscribe_to_collection(client_id, frame.data)
            channel.send(Subscribed(key=key, collection_name=frame.data))

        elif frame.event == SUBSCRIBE_DOCUMENT:
            target = DocumentTarget.model_validate(frame.data)
            key = registry.subscribe_to_document(
                client_id, target.collection_name, target.document_id
            )
            channel.send(
                Subscribed(
                    key=key,
                    collection_name=target.collection_name,
                    document_id=target.document_id,
                )
            )

        elif frame.event == UNSUBSCRIBE:
            if not isinstance(frame.data, str):
                raise ValueError("unsubscribe expects a subscription key")
            registry.unsubscribe(client_id, frame.data)

        elif frame.event == PING:
            channel.send(Pong())

        else:
            channel.send(ErrorMessage(message=f"Unknown event: {frame.event}"))

    except ValidationError:
        channel.send(
            ErrorMessage(message=f"Invalid data for {frame.event}: expected {{collectionName, documentId}}")
        )
    except (ValueError, MicroredError) as e:
        channel.send(ErrorMessage(message=str(e)))


@router.websocket("/ws")
async def realtime_websocket(
    websocket: WebSocket,
    registry: SubscriptionRegistry = Depends(get_registry),
):
    """WebSocket endpoint for real-time collection/document updates."""
    await websocket.accept()

    client_id = uuid.uuid4().hex
    structlog.contextvars.bind_contextvars(client_id=client_id)
    channel = QueueChannel()
    registry.connect_client(client_id, channel)
    channel.send(Connected(client_id=client_id))

    async def writer():
        """Forward queued messages to the socket."""
        try:
            while True:
                await websocket.send_text(await channel.next_frame())
        except (WebSocketDisconnect, asyncio.CancelledError):
            pass

    async def reader():
        """Handle subscribe / unsubscribe / ping frames."""
        try:
            while True:
                raw = await websocket.receive_text()
                handle_frame(registry, client_id, channel, raw)
        except (WebSocketDisconnect, asyncio.CancelledError):
            pass

    writer_task = asyncio.create_task(writer(), name="ws-writer")
    reader_task = asyncio.create_task(reader(), name="ws-reader")

    try:
        # Wait for either to finish (usually client disconnect)
        done, _ = await asyncio.wait(
            [writer_task, reader_task],
            return_when=asyncio.FIRST_COMPLETED,
        )
        for task in done:
            if not task.cancelled() and task.exception() is not None:
                logger.error(
                    "realtime.socket_task_failed",
                    task=task.get_name(),
                    exc_info=task.exception(),
                )
    finally:
        registry.disconnect_client(client_id)
        for task in (writer_task, reader_task):
            task.cancel()
        await asyncio.gather(writer_task, reader_task, return_exceptions=True)
        structlog.contextvars.unbind_contextvars("client_id")
        if websocket.client_state == WebSocketState.CONNECTED:
            await websocket.close()

"""Outbound channel — one per connected client.

Learn: The registry pushes messages from store callbacks, which are plain
synchronous functions running on the event loop. They can't await a
socket write, so a channel only has to accept a message without
blocking. QueueChannel parks messages on an asyncio.Queue; the socket's
writer task drains it in order.
"""

import asyncio
import json
from abc import ABC, abstractmethod

from microred.realtime.messages import OutboundMessage


class ClientChannel(ABC):
    """Where the registry delivers messages for one client."""

    @abstractmethod
    def send(self, message: OutboundMessage) -> None:
        """Enqueue a message. Must not block."""


class QueueChannel(ClientChannel):
    """Unbounded FIFO between the registry and a socket writer."""

    def __init__(self):
        self._queue: asyncio.Queue[OutboundMessage] = asyncio.Queue()

    def send(self, message: OutboundMessage) -> None:
        self._queue.put_nowait(message)

    async def next_frame(self) -> str:
        """Wait for the next message and serialize it as a JSON text frame."""
        message = await self._queue.get()
        # default=str covers store-native values (timestamps, geo points)
        return json.dumps(message.to_wire(), default=str)

"""Socket message types.

Every frame on the wire is `{"event": <name>, "data": <payload>}`.
Payload field names are camelCase on the wire (collectionName,
documentId) and snake_case in Python; pydantic aliases bridge the two.
Document contents inside `data` are passed through untouched.
"""

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from microred.store.base import ChangeType


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ─── Outbound ───────────────────────────────────────────

class OutboundMessage(_WireModel):
    """Base for everything the server pushes to a client."""

    event: ClassVar[str]

    def payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)

    def to_wire(self) -> dict[str, Any]:
        return {"event": self.event, "data": self.payload()}


class Connected(OutboundMessage):
    event: ClassVar[str] = "connected"

    client_id: str


class Subscribed(OutboundMessage):
    """Ack for a subscribe request, carrying the key needed to unsubscribe."""

    event: ClassVar[str] = "subscribed"

    key: str
    collection_name: str
    document_id: str | None = None

    def payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Change(BaseModel):
    type: ChangeType
    id: str
    data: dict[str, Any]


class CollectionUpdate(OutboundMessage):
    event: ClassVar[str] = "collection_update"

    collection_name: str
    changes: list[Change]


class DocumentUpdate(OutboundMessage):
    """Current state of a watched document.

    `data` is left out of the payload entirely when the document doesn't
    exist, so clients can tell "deleted" from "updated to empty".
    """

    event: ClassVar[str] = "document_update"

    collection_name: str
    document_id: str
    exists: bool
    data: dict[str, Any] | None = None

    def payload(self) -> dict[str, Any]:
        body = self.model_dump(by_alias=True)
        if not self.exists:
            body.pop("data", None)
        return body


class ErrorMessage(OutboundMessage):
    event: ClassVar[str] = "error"

    message: str


class Pong(OutboundMessage):
    event: ClassVar[str] = "pong"


# ─── Inbound ────────────────────────────────────────────

SUBSCRIBE_COLLECTION = "subscribe_collection"
SUBSCRIBE_DOCUMENT = "subscribe_document"
UNSUBSCRIBE = "unsubscribe"
PING = "ping"


class InboundFrame(BaseModel):
    event: str = Field(..., min_length=1)
    data: Any = None


class DocumentTarget(_WireModel):
    collection_name: str = Field(..., min_length=1)
    document_id: str = Field(..., min_length=1)

"""Shared response shapes.

Learn: Documents come back from the store as-is. Other clients write to
the same collections, so a stored field can hold any JSON type (or a
store-native timestamp). Every *Read model therefore types its fields
as Any and allows extra fields: the models list what clients can expect
to find, they never reject what is actually stored.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class DocumentRead(BaseModel):
    """Base for stored documents: the store id plus whatever fields exist."""

    # A stored "id" field shadows the store id, so even this one is untyped
    id: Any

    model_config = ConfigDict(extra="allow")


class ErrorResponse(BaseModel):
    error: str
    detail: str | None = None


class Coordenadas(BaseModel):
    latitud: float | None = None
    longitud: float | None = None


# Declared on every route that touches the store
STORE_ERRORS = {500: {"model": ErrorResponse, "description": "Store operation failed"}}
NOT_FOUND = {404: {"model": ErrorResponse, "description": "No document with that key"}}


def update_fields(body: BaseModel) -> dict:
    """Fields an update request actually sets: omitted, null and "" are skipped."""
    return {
        k: v for k, v in body.model_dump(exclude_none=True).items() if v != ""
    }

"""Pydantic schemas for incentives."""

from typing import Any

from pydantic import BaseModel, Field

from microred.schemas.common import DocumentRead


class IncentivoCreate(BaseModel):
    titulo: str = Field(..., min_length=1)
    descripcion: str = Field(..., min_length=1)


class IncentivoUpdate(BaseModel):
    titulo: str | None = None
    descripcion: str | None = None


class IncentivoRead(DocumentRead):
    id_incentivo: Any = None
    titulo: Any = None
    descripcion: Any = None


class IncentivoResult(BaseModel):
    message: str
    id_incentivo: str

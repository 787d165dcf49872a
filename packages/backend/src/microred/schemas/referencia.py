"""Pydantic schemas for referrals."""

from typing import Any

from pydantic import BaseModel, Field

from microred.schemas.common import DocumentRead


class ReferenciaCreate(BaseModel):
    id_colaborador: str = Field(..., min_length=1)
    id_microempresario: str = Field(..., min_length=1)


class ReferenciaStateUpdate(BaseModel):
    estado_referencia: str = Field(..., min_length=1)


class ReferenciaRead(DocumentRead):
    id_referencia: Any = None
    id_colaborador: Any = None
    id_microempresario: Any = None
    estado_referencia: Any = None
    fecha_referencia: Any = None
    historial_estados: Any = []


class ReferenciaResult(BaseModel):
    message: str
    id_referencia: str

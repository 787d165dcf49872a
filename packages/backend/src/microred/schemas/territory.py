"""Pydantic schemas for zones and routes."""

from typing import Any

from pydantic import BaseModel, Field

from microred.schemas.common import Coordenadas, DocumentRead


# ─── Zonas ──────────────────────────────────────────────

class ZonaCreate(BaseModel):
    nombre_zona: str = Field(..., min_length=1)
    estado: str = Field(..., min_length=1)
    municipios_incluidos: list[str] = Field(default_factory=list)
    codigos_postales_relacionados: list[str] = Field(default_factory=list)


class ZonaUpdate(BaseModel):
    nombre_zona: str | None = None
    estado: str | None = None
    municipios_incluidos: list[str] | None = None
    codigos_postales_relacionados: list[str] | None = None


class ZonaRead(DocumentRead):
    id_zona: Any = None
    nombre_zona: Any = None
    estado: Any = None
    municipios_incluidos: Any = []
    codigos_postales_relacionados: Any = []


class ZonaResult(BaseModel):
    message: str
    id_zona: str


# ─── Rutas ──────────────────────────────────────────────

class PuntoRuta(BaseModel):
    descripcion_punto: str | None = None
    coordenadas: Coordenadas | None = None


class RutaCreate(BaseModel):
    nombre_ruta: str = Field(..., min_length=1)
    id_zona_asociada: str = Field(..., min_length=1)
    ubicaciones: list[PuntoRuta]


class RutaUpdate(BaseModel):
    nombre_ruta: str | None = None
    id_zona_asociada: str | None = None
    ubicaciones: list[PuntoRuta] | None = None


class RutaRead(DocumentRead):
    id_ruta: Any = None
    nombre_ruta: Any = None
    id_zona_asociada: Any = None
    ubicaciones: Any = []
    fecha_creacion: Any = None
    fecha_actualizacion: Any = None


class RutaResult(BaseModel):
    message: str
    id_ruta: str

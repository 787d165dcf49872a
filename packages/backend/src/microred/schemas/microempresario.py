"""Pydantic schemas for microentrepreneurs."""

from typing import Any

from pydantic import BaseModel, Field

from microred.schemas.common import Coordenadas, DocumentRead


class Ubicacion(BaseModel):
    estado: str | None = None
    municipio: str | None = None
    colonia: str | None = None
    codigo_postal: str | None = None
    calle: str | None = None
    numero_edificio: str | None = None


class MicroempresarioCreate(BaseModel):
    nombre: str = Field(..., min_length=1)
    apellidos: str = Field(..., min_length=1)
    telefono: str = Field(..., min_length=1)
    correo_electronico: str = Field(..., min_length=1)
    nombre_negocio: str = Field(..., min_length=1)
    tipo_negocio: str = Field(..., min_length=1)
    foto_negocio_url: str | None = None
    ubicacion: Ubicacion
    coordenadas_geograficas: Coordenadas


class MicroempresarioUpdate(BaseModel):
    nombre: str | None = None
    apellidos: str | None = None
    telefono: str | None = None
    correo_electronico: str | None = None
    nombre_negocio: str | None = None
    tipo_negocio: str | None = None
    foto_negocio_url: str | None = None
    ubicacion: Ubicacion | None = None
    coordenadas_geograficas: Coordenadas | None = None


class MicroempresarioRead(DocumentRead):
    id_microempresario: Any = None
    nombre: Any = None
    apellidos: Any = None
    telefono: Any = None
    correo_electronico: Any = None
    nombre_negocio: Any = None
    tipo_negocio: Any = None
    foto_negocio_url: Any = None
    ubicacion: Any = None
    coordenadas_geograficas: Any = None
    fecha_registro: Any = None


class MicroempresarioResult(BaseModel):
    message: str
    id_microempresario: str

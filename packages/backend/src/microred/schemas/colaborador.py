"""Pydantic schemas for collaborators and administrators.

Learn: Separate "Create" schemas (input) from "Read" schemas (output).
Update schemas make every field optional — only fields that are present
and non-empty get written.
"""

from typing import Any

from pydantic import BaseModel, Field

from microred.schemas.common import DocumentRead


# ─── Colaboradores ──────────────────────────────────────

class ColaboradorCreate(BaseModel):
    nombre: str = Field(..., min_length=1)
    apellidos: str = Field(..., min_length=1)
    numero_empleado: str = Field(..., min_length=1)
    zona_actual: str = Field(..., min_length=1)
    contrasenia: str = Field(..., min_length=1)
    foto_perfil_url: str | None = None


class ColaboradorUpdate(BaseModel):
    nombre: str | None = None
    apellidos: str | None = None
    nuevo_numero_empleado: str | None = None
    zona_actual: str | None = None
    contrasenia: str | None = None
    foto_perfil_url: str | None = None


class ColaboradorRead(DocumentRead):
    # Stored alongside the profile but never returned
    contrasenia: Any = Field(default=None, exclude=True)
    id_colaborador: Any = None
    nombre: Any = None
    apellidos: Any = None
    numero_empleado: Any = None
    zona_actual: Any = None
    fecha_registro: Any = None
    foto_perfil_url: Any = None
    incentivos_canjeados: Any = []
    registro_actividades: Any = []
    notificaciones: Any = []
    rutas: Any = []


class ColaboradorResult(BaseModel):
    message: str
    numero_empleado: str


class ColaboradorCreated(BaseModel):
    message: str
    id_colaborador: str


# ─── Administradores ────────────────────────────────────

class AdministradorCreate(BaseModel):
    nombre: str = Field(..., min_length=1)
    apellidos: str = Field(..., min_length=1)
    correo_institucional: str = Field(..., min_length=1)
    numero_empleado: str = Field(..., min_length=1)
    rol_admin: str = Field(..., min_length=1)


class AdministradorUpdate(BaseModel):
    nombre: str | None = None
    apellidos: str | None = None
    correo_institucional: str | None = None
    numero_empleado: str | None = None
    rol_admin: str | None = None
    estado: str | None = None


class AdministradorRead(DocumentRead):
    id_admin: Any = None
    nombre: Any = None
    apellidos: Any = None
    correo_institucional: Any = None
    numero_empleado: Any = None
    rol_admin: Any = None
    estado: Any = None
    fecha_registro: Any = None


class AdministradorResult(BaseModel):
    message: str
    id_admin: str

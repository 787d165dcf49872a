"""Collaborator and administrator API routes.

Learn: Routes translate HTTP to service calls. Not-found and store errors
are raised by the service layer and mapped to 404 / 500 by the exception
handlers registered in main.py, so handlers here stay one-liners.
"""

from fastapi import APIRouter, Depends

from microred.schemas.colaborador import (
    AdministradorCreate,
    AdministradorRead,
    AdministradorResult,
    AdministradorUpdate,
    ColaboradorCreate,
    ColaboradorCreated,
    ColaboradorRead,
    ColaboradorResult,
    ColaboradorUpdate,
)
from microred.schemas.common import NOT_FOUND, STORE_ERRORS, update_fields
from microred.services.colaborador_service import (
    AdministradorService,
    ColaboradorService,
)
from microred.store import DocumentStore, get_store

router = APIRouter()


def _colaboradores(store: DocumentStore = Depends(get_store)) -> ColaboradorService:
    return ColaboradorService(store)


def _administradores(store: DocumentStore = Depends(get_store)) -> AdministradorService:
    return AdministradorService(store)


# ─── Colaboradores ──────────────────────────────────────

@router.get("/colaboradores", response_model=list[ColaboradorRead], responses=STORE_ERRORS)
async def list_colaboradores(svc: ColaboradorService = Depends(_colaboradores)):
    return await svc.list_all()


@router.post(
    "/colaboradores",
    response_model=ColaboradorCreated,
    status_code=201,
    responses=STORE_ERRORS,
)
async def create_colaborador(
    body: ColaboradorCreate,
    svc: ColaboradorService = Depends(_colaboradores),
):
    """Register a collaborator. id_colaborador and fecha_registro are generated."""
    id_colaborador = await svc.create(body.model_dump(exclude_none=True))
    return ColaboradorCreated(message="Colaborador created", id_colaborador=id_colaborador)


@router.get(
    "/colaboradores/{numero_empleado}",
    response_model=ColaboradorRead,
    responses={**NOT_FOUND, **STORE_ERRORS},
)
async def get_colaborador(
    numero_empleado: str,
    svc: ColaboradorService = Depends(_colaboradores),
):
    return await svc.get(numero_empleado)


@router.put(
    "/colaboradores/{numero_empleado}",
    response_model=ColaboradorResult,
    responses={**NOT_FOUND, **STORE_ERRORS},
)
async def update_colaborador(
    numero_empleado: str,
    body: ColaboradorUpdate,
    svc: ColaboradorService = Depends(_colaboradores),
):
    """Partial update. Send nuevo_numero_empleado to change the employee number."""
    result = await svc.update(numero_empleado, update_fields(body))
    return ColaboradorResult(message="Colaborador updated", numero_empleado=result)


@router.delete(
    "/colaboradores/{numero_empleado}",
    response_model=ColaboradorResult,
    responses={**NOT_FOUND, **STORE_ERRORS},
)
async def delete_colaborador(
    numero_empleado: str,
    svc: ColaboradorService = Depends(_colaboradores),
):
    await svc.delete(numero_empleado)
    return ColaboradorResult(message="Colaborador deleted", numero_empleado=numero_empleado)


# ─── Administradores ────────────────────────────────────

@router.get("/administradores", response_model=list[AdministradorRead], responses=STORE_ERRORS)
async def list_administradores(svc: AdministradorService = Depends(_administradores)):
    return await svc.list_all()


@router.post(
    "/administradores",
    response_model=AdministradorResult,
    status_code=201,
    responses=STORE_ERRORS,
)
async def create_administrador(
    body: AdministradorCreate,
    svc: AdministradorService = Depends(_administradores),
):
    """Create an administrator in 'activo' state."""
    id_admin = await svc.create(body.model_dump())
    return AdministradorResult(message="Administrador created", id_admin=id_admin)


@router.get(
    "/administradores/{id_admin}",
    response_model=AdministradorRead,
    responses={**NOT_FOUND, **STORE_ERRORS},
)
async def get_administrador(id_admin: str, svc: AdministradorService = Depends(_administradores)):
    return await svc.get(id_admin)


@router.put(
    "/administradores/{id_admin}",
    response_model=AdministradorResult,
    responses={**NOT_FOUND, **STORE_ERRORS},
)
async def update_administrador(
    id_admin: str,
    body: AdministradorUpdate,
    svc: AdministradorService = Depends(_administradores),
):
    await svc.update(id_admin, update_fields(body))
    return AdministradorResult(message="Administrador updated", id_admin=id_admin)


@router.delete(
    "/administradores/{id_admin}",
    response_model=AdministradorResult,
    responses={**NOT_FOUND, **STORE_ERRORS},
)
async def delete_administrador(id_admin: str, svc: AdministradorService = Depends(_administradores)):
    await svc.delete(id_admin)
    return AdministradorResult(message="Administrador deleted", id_admin=id_admin)

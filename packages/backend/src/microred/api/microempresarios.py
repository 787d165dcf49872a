"""Microentrepreneur API routes."""

from fastapi import APIRouter, Depends

from microred.schemas.common import NOT_FOUND, STORE_ERRORS, update_fields
from microred.schemas.microempresario import (
    MicroempresarioCreate,
    MicroempresarioRead,
    MicroempresarioResult,
    MicroempresarioUpdate,
)
from microred.services.microempresario_service import MicroempresarioService
from microred.store import DocumentStore, get_store

router = APIRouter()


def _svc(store: DocumentStore = Depends(get_store)) -> MicroempresarioService:
    return MicroempresarioService(store)


@router.get("/microempresarios", response_model=list[MicroempresarioRead], responses=STORE_ERRORS)
async def list_microempresarios(svc: MicroempresarioService = Depends(_svc)):
    return await svc.list_all()


@router.post(
    "/microempresarios",
    response_model=MicroempresarioResult,
    status_code=201,
    responses=STORE_ERRORS,
)
async def create_microempresario(
    body: MicroempresarioCreate,
    svc: MicroempresarioService = Depends(_svc),
):
    id_microempresario = await svc.create(body.model_dump(exclude_none=True))
    return MicroempresarioResult(
        message="Microempresario created", id_microempresario=id_microempresario
    )


@router.get(
    "/microempresarios/{id_microempresario}",
    response_model=MicroempresarioRead,
    responses={**NOT_FOUND, **STORE_ERRORS},
)
async def get_microempresario(
    id_microempresario: str,
    svc: MicroempresarioService = Depends(_svc),
):
    return await svc.get(id_microempresario)


@router.put(
    "/microempresarios/{id_microempresario}",
    response_model=MicroempresarioResult,
    responses={**NOT_FOUND, **STORE_ERRORS},
)
async def update_microempresario(
    id_microempresario: str,
    body: MicroempresarioUpdate,
    svc: MicroempresarioService = Depends(_svc),
):
    """Partial update. ubicacion / coordenadas_geograficas are merged sub-field by sub-field."""
    await svc.update(id_microempresario, update_fields(body))
    return MicroempresarioResult(
        message="Microempresario updated", id_microempresario=id_microempresario
    )


@router.delete(
    "/microempresarios/{id_microempresario}",
    response_model=MicroempresarioResult,
    responses={**NOT_FOUND, **STORE_ERRORS},
)
async def delete_microempresario(
    id_microempresario: str,
    svc: MicroempresarioService = Depends(_svc),
):
    await svc.delete(id_microempresario)
    return MicroempresarioResult(
        message="Microempresario deleted", id_microempresario=id_microempresario
    )

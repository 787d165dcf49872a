"""Referral API routes.

Learn: Referrals have no general-purpose update. PUT only moves the
referral to a new estado_referencia, and the service appends that move
to historial_estados.
"""

from fastapi import APIRouter, Depends

from microred.schemas.common import NOT_FOUND, STORE_ERRORS
from microred.schemas.referencia import (
    ReferenciaCreate,
    ReferenciaRead,
    ReferenciaResult,
    ReferenciaStateUpdate,
)
from microred.services.referencia_service import ReferenciaService
from microred.store import DocumentStore, get_store

router = APIRouter()


def _svc(store: DocumentStore = Depends(get_store)) -> ReferenciaService:
    return ReferenciaService(store)


@router.get("/referencias", response_model=list[ReferenciaRead], responses=STORE_ERRORS)
async def list_referencias(svc: ReferenciaService = Depends(_svc)):
    return await svc.list_all()


@router.post(
    "/referencias",
    response_model=ReferenciaResult,
    status_code=201,
    responses=STORE_ERRORS,
)
async def create_referencia(body: ReferenciaCreate, svc: ReferenciaService = Depends(_svc)):
    """Create a referral in 'pendiente' state."""
    id_referencia = await svc.create(body.model_dump())
    return ReferenciaResult(message="Referencia created", id_referencia=id_referencia)


@router.get(
    "/referencias/{id_referencia}",
    response_model=ReferenciaRead,
    responses={**NOT_FOUND, **STORE_ERRORS},
)
async def get_referencia(id_referencia: str, svc: ReferenciaService = Depends(_svc)):
    return await svc.get(id_referencia)


@router.put(
    "/referencias/{id_referencia}",
    response_model=ReferenciaResult,
    responses={**NOT_FOUND, **STORE_ERRORS},
)
async def update_referencia_state(
    id_referencia: str,
    body: ReferenciaStateUpdate,
    svc: ReferenciaService = Depends(_svc),
):
    await svc.update_state(id_referencia, body.estado_referencia)
    return ReferenciaResult(message="Referencia updated", id_referencia=id_referencia)


@router.delete(
    "/referencias/{id_referencia}",
    response_model=ReferenciaResult,
    responses={**NOT_FOUND, **STORE_ERRORS},
)
async def delete_referencia(id_referencia: str, svc: ReferenciaService = Depends(_svc)):
    await svc.delete(id_referencia)
    return ReferenciaResult(message="Referencia deleted", id_referencia=id_referencia)

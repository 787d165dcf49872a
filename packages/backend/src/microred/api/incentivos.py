"""Incentive API routes."""

from fastapi import APIRouter, Depends

from microred.schemas.common import NOT_FOUND, STORE_ERRORS, update_fields
from microred.schemas.incentivo import (
    IncentivoCreate,
    IncentivoRead,
    IncentivoResult,
    IncentivoUpdate,
)
from microred.services.incentivo_service import IncentivoService
from microred.store import DocumentStore, get_store

router = APIRouter()


def _svc(store: DocumentStore = Depends(get_store)) -> IncentivoService:
    return IncentivoService(store)


@router.get("/incentivos", response_model=list[IncentivoRead], responses=STORE_ERRORS)
async def list_incentivos(svc: IncentivoService = Depends(_svc)):
    return await svc.list_all()


@router.post("/incentivos", response_model=IncentivoResult, status_code=201, responses=STORE_ERRORS)
async def create_incentivo(body: IncentivoCreate, svc: IncentivoService = Depends(_svc)):
    id_incentivo = await svc.create(body.model_dump())
    return IncentivoResult(message="Incentivo created", id_incentivo=id_incentivo)


@router.get(
    "/incentivos/{id_incentivo}",
    response_model=IncentivoRead,
    responses={**NOT_FOUND, **STORE_ERRORS},
)
async def get_incentivo(id_incentivo: str, svc: IncentivoService = Depends(_svc)):
    return await svc.get(id_incentivo)


@router.put(
    "/incentivos/{id_incentivo}",
    response_model=IncentivoResult,
    responses={**NOT_FOUND, **STORE_ERRORS},
)
async def update_incentivo(
    id_incentivo: str,
    body: IncentivoUpdate,
    svc: IncentivoService = Depends(_svc),
):
    await svc.update(id_incentivo, update_fields(body))
    return IncentivoResult(message="Incentivo updated", id_incentivo=id_incentivo)


@router.delete(
    "/incentivos/{id_incentivo}",
    response_model=IncentivoResult,
    responses={**NOT_FOUND, **STORE_ERRORS},
)
async def delete_incentivo(id_incentivo: str, svc: IncentivoService = Depends(_svc)):
    await svc.delete(id_incentivo)
    return IncentivoResult(message="Incentivo deleted", id_incentivo=id_incentivo)

"""Zone and route API routes.

Routes (rutas) are attached to a zone through id_zona_asociada;
GET /zonas/{id_zona}/rutas lists them. An unknown zone just yields [].
"""

from fastapi import APIRouter, Depends

from microred.schemas.common import NOT_FOUND, STORE_ERRORS, update_fields
from microred.schemas.territory import (
    RutaCreate,
    RutaRead,
    RutaResult,
    RutaUpdate,
    ZonaCreate,
    ZonaRead,
    ZonaResult,
    ZonaUpdate,
)
from microred.services.territory_service import RutaService, ZonaService
from microred.store import DocumentStore, get_store

router = APIRouter()


def _zonas(store: DocumentStore = Depends(get_store)) -> ZonaService:
    return ZonaService(store)


def _rutas(store: DocumentStore = Depends(get_store)) -> RutaService:
    return RutaService(store)


# ─── Zonas ──────────────────────────────────────────────

@router.get("/zonas", response_model=list[ZonaRead], responses=STORE_ERRORS)
async def list_zonas(svc: ZonaService = Depends(_zonas)):
    return await svc.list_all()


@router.post("/zonas", response_model=ZonaResult, status_code=201, responses=STORE_ERRORS)
async def create_zona(body: ZonaCreate, svc: ZonaService = Depends(_zonas)):
    id_zona = await svc.create(body.model_dump())
    return ZonaResult(message="Zona created", id_zona=id_zona)


@router.get("/zonas/{id_zona}", response_model=ZonaRead, responses={**NOT_FOUND, **STORE_ERRORS})
async def get_zona(id_zona: str, svc: ZonaService = Depends(_zonas)):
    return await svc.get(id_zona)


@router.put("/zonas/{id_zona}", response_model=ZonaResult, responses={**NOT_FOUND, **STORE_ERRORS})
async def update_zona(id_zona: str, body: ZonaUpdate, svc: ZonaService = Depends(_zonas)):
    await svc.update(id_zona, update_fields(body))
    return ZonaResult(message="Zona updated", id_zona=id_zona)


@router.delete("/zonas/{id_zona}", response_model=ZonaResult, responses={**NOT_FOUND, **STORE_ERRORS})
async def delete_zona(id_zona: str, svc: ZonaService = Depends(_zonas)):
    await svc.delete(id_zona)
    return ZonaResult(message="Zona deleted", id_zona=id_zona)


@router.get("/zonas/{id_zona}/rutas", response_model=list[RutaRead], responses=STORE_ERRORS)
async def list_rutas_by_zona(id_zona: str, svc: RutaService = Depends(_rutas)):
    return await svc.list_by_zona(id_zona)


# ─── Rutas ──────────────────────────────────────────────

@router.get("/rutas", response_model=list[RutaRead], responses=STORE_ERRORS)
async def list_rutas(svc: RutaService = Depends(_rutas)):
    return await svc.list_all()


@router.post("/rutas", response_model=RutaResult, status_code=201, responses=STORE_ERRORS)
async def create_ruta(body: RutaCreate, svc: RutaService = Depends(_rutas)):
    id_ruta = await svc.create(body.model_dump(exclude_none=True))
    return RutaResult(message="Ruta created", id_ruta=id_ruta)


@router.get("/rutas/{id_ruta}", response_model=RutaRead, responses={**NOT_FOUND, **STORE_ERRORS})
async def get_ruta(id_ruta: str, svc: RutaService = Depends(_rutas)):
    return await svc.get(id_ruta)


@router.put("/rutas/{id_ruta}", response_model=RutaResult, responses={**NOT_FOUND, **STORE_ERRORS})
async def update_ruta(id_ruta: str, body: RutaUpdate, svc: RutaService = Depends(_rutas)):
    """Partial update; fecha_actualizacion is stamped on every call."""
    await svc.update(id_ruta, update_fields(body))
    return RutaResult(message="Ruta updated", id_ruta=id_ruta)


@router.delete("/rutas/{id_ruta}", response_model=RutaResult, responses={**NOT_FOUND, **STORE_ERRORS})
async def delete_ruta(id_ruta: str, svc: RutaService = Depends(_rutas)):
    await svc.delete(id_ruta)
    return RutaResult(message="Ruta deleted", id_ruta=id_ruta)

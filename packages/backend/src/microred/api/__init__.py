"""API route aggregation.

All routers registered here get mounted in main.py under /api/v1.
The WebSocket route lives in realtime/websocket.py and is mounted
separately at /ws.
"""

from fastapi import APIRouter

from microred.api.colaboradores import router as colaboradores_router
from microred.api.health import router as health_router
from microred.api.incentivos import router as incentivos_router
from microred.api.microempresarios import router as microempresarios_router
from microred.api.referencias import router as referencias_router
from microred.api.territory import router as territory_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(colaboradores_router, tags=["colaboradores", "administradores"])
api_router.include_router(microempresarios_router, tags=["microempresarios"])
api_router.include_router(referencias_router, tags=["referencias"])
api_router.include_router(incentivos_router, tags=["incentivos"])
api_router.include_router(territory_router, tags=["zonas", "rutas"])

"""Zone and route services.

Routes (rutas) belong to a zone through id_zona_asociada; a zone's
routes are listed with RutaService.list_by_zona().
"""

from typing import Any

from microred.services.entity_service import EntityService, today
from microred.store.base import Document


class ZonaService(EntityService):
    collection = "zonas"
    key_field = "id_zona"
    id_prefix = "zon"
    entity_name = "zona"


class RutaService(EntityService):
    collection = "rutas"
    key_field = "id_ruta"
    id_prefix = "rut"
    entity_name = "ruta"

    def creation_defaults(self) -> dict[str, Any]:
        return {"fecha_creacion": today()}

    def prepare_update(self, current: Document, changes: dict[str, Any]) -> dict[str, Any]:
        return {**changes, "fecha_actualizacion": today()}

    async def list_by_zona(self, id_zona: str) -> list[dict[str, Any]]:
        return await self.list_by("id_zona_asociada", id_zona)

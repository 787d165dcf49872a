"""Staff services — collaborators and administrators.

Collaborators are looked up by employee number (numero_empleado), which
the client supplies, while id_colaborador is generated on creation.
"""

import asyncio
from typing import Any

from microred.services.entity_service import EntityService, today


class ColaboradorService(EntityService):
    collection = "colaboradores"
    key_field = "numero_empleado"
    id_field = "id_colaborador"
    id_prefix = "col"
    entity_name = "colaborador"

    def creation_defaults(self) -> dict[str, Any]:
        return {
            "fecha_registro": today(),
            "incentivos_canjeados": [],
            "registro_actividades": [],
            "notificaciones": [],
            "rutas": [],
        }

    async def update(self, key: str, changes: dict[str, Any]) -> str:
        """Update every document with this employee number.

        `nuevo_numero_empleado` renames the key; the new number is returned.
        """
        docs = await self._find_all(key)
        changes = dict(changes)
        new_key = changes.pop("nuevo_numero_empleado", None)
        if new_key:
            changes["numero_empleado"] = new_key

        if changes:
            await asyncio.gather(
                *(self.store.update_document(self.collection, d.id, changes) for d in docs)
            )
        return new_key or key

    async def delete(self, key: str) -> str:
        docs = await self._find_all(key)
        await asyncio.gather(
            *(self.store.delete_document(self.collection, d.id) for d in docs)
        )
        return key


class AdministradorService(EntityService):
    collection = "administradores"
    key_field = "id_admin"
    id_prefix = "admin"
    entity_name = "administrador"

    def creation_defaults(self) -> dict[str, Any]:
        return {
            "fecha_registro": today(),
            "estado": "activo",
            "registro_actividades": [],
        }

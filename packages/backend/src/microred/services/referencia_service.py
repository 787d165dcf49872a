"""Referral service.

Learn: A referral (referencia) links a collaborator to a microentrepreneur
they brought in. It has a simple status field plus an append-only
history — every status change adds {estado, fecha} to historial_estados.
"""

from typing import Any

import structlog

from microred.services.entity_service import EntityService, today

logger = structlog.get_logger()

INITIAL_STATE = "pendiente"


class ReferenciaService(EntityService):
    collection = "referencias"
    key_field = "id_referencia"
    id_prefix = "ref"
    entity_name = "referencia"

    def creation_defaults(self) -> dict[str, Any]:
        date = today()
        return {
            "estado_referencia": INITIAL_STATE,
            "fecha_referencia": date,
            "historial_estados": [{"estado": INITIAL_STATE, "fecha": date}],
        }

    async def update_state(self, key: str, estado: str) -> str:
        """Set a new status and record it in the history."""
        doc = await self._find_one(key)
        history = list(doc.data.get("historial_estados") or [])
        history.append({"estado": estado, "fecha": today()})
        await self.store.update_document(
            self.collection,
            doc.id,
            {"estado_referencia": estado, "historial_estados": history},
        )
        logger.info("referencias.state_changed", id_referencia=key, estado=estado)
        return key

"""Microentrepreneur service."""

from typing import Any

from microred.services.entity_service import EntityService, today
from microred.store.base import Document

# Nested objects merged key-by-key with what's stored, instead of replaced
NESTED_FIELDS = ("ubicacion", "coordenadas_geograficas")


class MicroempresarioService(EntityService):
    collection = "microempresarios"
    key_field = "id_microempresario"
    id_prefix = "me"
    entity_name = "microempresario"

    def creation_defaults(self) -> dict[str, Any]:
        return {"fecha_registro": today()}

    def prepare_update(self, current: Document, changes: dict[str, Any]) -> dict[str, Any]:
        """Partial nested updates keep the stored value of every omitted sub-field."""
        merged = dict(changes)
        for field_name in NESTED_FIELDS:
            incoming = merged.get(field_name)
            if not incoming:
                continue
            stored = current.data.get(field_name) or {}
            merged[field_name] = {
                **stored,
                **{k: v for k, v in incoming.items() if v not in (None, "")},
            }
        return merged

"""Entity service base — business-key CRUD over one store collection.

Learn: Every entity in this system follows the same pattern:
- Documents carry a human-facing business key (numero_empleado, id_ruta, …)
  next to the store's own document id
- Lookups, updates and deletes go through the business key
- Creation generates the business key (prefix + 3 random digits)

Subclasses set the collection/key/prefix and override the hooks where an
entity needs more (defaults on create, nested merges, history).
"""

import random
from datetime import datetime, timezone
from typing import Any

import structlog

from microred.errors import NotFoundError
from microred.store.base import Document, DocumentStore

logger = structlog.get_logger()


class EntityNotFoundError(NotFoundError):
    """No document matched the business key."""

    def __init__(self, entity: str, key_field: str, value: Any):
        super().__init__(f"No {entity} found with {key_field} {value!r}")
        self.entity = entity
        self.key_field = key_field
        self.value = value


def generate_business_id(prefix: str) -> str:
    """`prefix` followed by a random number in [100, 999], e.g. col482."""
    return f"{prefix}{random.randint(100, 999)}"


def today() -> str:
    """Current UTC date as YYYY-MM-DD."""
    return datetime.now(timezone.utc).date().isoformat()


class EntityService:
    """CRUD for one collection, addressed by business key."""

    collection: str
    key_field: str
    id_prefix: str
    entity_name: str
    # Field holding the generated id, when it differs from the lookup key
    id_field: str | None = None

    def __init__(self, store: DocumentStore):
        self.store = store

    # ─── Reads ──────────────────────────────────────────

    async def list_all(self) -> list[dict[str, Any]]:
        docs = await self.store.list_documents(self.collection)
        return [d.as_dict() for d in docs]

    async def get(self, key: str) -> dict[str, Any]:
        return (await self._find_one(key)).as_dict()

    async def list_by(self, field_name: str, value: Any) -> list[dict[str, Any]]:
        docs = await self.store.find_by_field(self.collection, field_name, value)
        return [d.as_dict() for d in docs]

    # ─── Writes ─────────────────────────────────────────

    async def create(self, data: dict[str, Any]) -> str:
        """Insert a new document and return its generated id."""
        id_field = self.id_field or self.key_field
        new_id = generate_business_id(self.id_prefix)
        document = {id_field: new_id, **data, **self.creation_defaults()}
        await self.store.add_document(self.collection, document)
        logger.info(f"{self.collection}.created", **{id_field: new_id})
        return new_id

    async def update(self, key: str, changes: dict[str, Any]) -> str:
        """Apply `changes` to the matching document. Returns the business key."""
        doc = await self._find_one(key)
        changes = self.prepare_update(doc, changes)
        if changes:
            await self.store.update_document(self.collection, doc.id, changes)
        logger.info(f"{self.collection}.updated", **{self.key_field: key}, fields=sorted(changes))
        return key

    async def delete(self, key: str) -> str:
        doc = await self._find_one(key)
        await self.store.delete_document(self.collection, doc.id)
        logger.info(f"{self.collection}.deleted", **{self.key_field: key})
        return key

    # ─── Hooks ──────────────────────────────────────────

    def creation_defaults(self) -> dict[str, Any]:
        """Fields stamped onto every new document (override per entity)."""
        return {}

    def prepare_update(self, current: Document, changes: dict[str, Any]) -> dict[str, Any]:
        """Turn the request's changes into the fields actually written."""
        return changes

    # ─── Internals ──────────────────────────────────────

    async def _find_all(self, key: str) -> list[Document]:
        docs = await self.store.find_by_field(self.collection, self.key_field, key)
        if not docs:
            raise EntityNotFoundError(self.entity_name, self.key_field, key)
        return docs

    async def _find_one(self, key: str) -> Document:
        # Business keys should be unique; the first match wins.
        return (await self._find_all(key))[0]

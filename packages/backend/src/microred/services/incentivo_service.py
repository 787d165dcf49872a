"""Incentive catalogue service."""

from microred.services.entity_service import EntityService


class IncentivoService(EntityService):
    collection = "incentivos"
    key_field = "id_incentivo"
    id_prefix = "inc"
    entity_name = "incentivo"

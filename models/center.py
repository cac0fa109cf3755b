"""Datenmodell für ein Nachhilfe-Center (Pydantic v2)."""

from models.base import CatalogEntry


class Center(CatalogEntry):
    """Repräsentiert ein Center bzw. Institut, an dem unterrichtet wird."""

"""Datenmodell für eine Klassenstufe (Pydantic v2)."""

from models.base import CatalogEntry


class Standard(CatalogEntry):
    """Repräsentiert eine Klassenstufe bzw. einen Jahrgang (z.B. "10")."""

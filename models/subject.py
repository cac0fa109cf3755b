"""Datenmodell für ein Unterrichtsfach (Pydantic v2)."""

from models.base import CatalogEntry


class Subject(CatalogEntry):
    """Repräsentiert ein Unterrichtsfach (z.B. "Mathematics")."""

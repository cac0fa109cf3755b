"""Datenmodell für die Benutzereinstellungen (Pydantic v2)."""

from typing import Literal

from models.base import LedgerModel

Theme = Literal["light", "dark"]


class Settings(LedgerModel):
    """Einstellungen der Tutorin bzw. des Tutors (genau eine Instanz pro Datenbestand)."""

    tutor_name: str = "Tutor"
    theme: Theme = "light"

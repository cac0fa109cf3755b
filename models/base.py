"""Gemeinsame Basis für alle Ledger-Datenmodelle (Pydantic v2).

Alle Modelle sind unveränderlich (frozen): jede Zustandsänderung erzeugt einen
neuen Snapshot. Das JSON-Format nutzt camelCase-Schlüssel (``rateRules``,
``ratePerHour``, ``tutorName`` …), damit bestehende Backups unverändert
eingelesen werden können.
"""

from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Platzhalter für Referenzen ohne passenden Katalog-Eintrag
MISSING_NAME = "—"
# Platzhalter für Wildcard-Felder einer Tarifregel
ANY_NAME = "Any"


class LedgerModel(BaseModel):
    """Basisklasse: unveränderlich, camelCase im JSON, unbekannte Felder ignoriert."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class CatalogEntry(LedgerModel):
    """Ein Eintrag der Stammdaten-Kataloge (Center, Fach, Klassenstufe)."""

    id: str
    name: str


def lookup_name(
    entries: Iterable[CatalogEntry],
    entry_id: Optional[str],
    placeholder: str = MISSING_NAME,
) -> str:
    """Name zum Eintrag mit ``entry_id`` oder ``placeholder``, falls nicht vorhanden.

    Verwaiste IDs (z.B. nach dem Löschen eines Centers) sind kein Fehler.
    """
    if not entry_id:
        return placeholder
    for entry in entries:
        if entry.id == entry_id:
            return entry.name
    return placeholder

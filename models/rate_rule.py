"""Datenmodell für eine Tarifregel (Pydantic v2)."""

from typing import Optional

from pydantic import Field, field_validator

from models.base import LedgerModel


class RateRule(LedgerModel):
    """Stundensatz für einen (teilweise) festgelegten Kontext.

    Jedes der drei Scope-Felder ist optional: ``None`` bedeutet "beliebig"
    (Wildcard). Verweise auf gelöschte Katalog-Einträge bleiben erhalten.
    """

    id: str
    center_id: Optional[str] = None     # None = jedes Center
    subject_id: Optional[str] = None    # None = jedes Fach
    standard_id: Optional[str] = None   # None = jede Klassenstufe
    rate_per_hour: float = Field(gt=0)

    @field_validator("center_id", "subject_id", "standard_id", mode="before")
    @classmethod
    def blank_is_wildcard(cls, v):
        # Ältere Backups speichern die Wildcard als leeren String
        if v == "":
            return None
        return v

    @property
    def scope(self) -> tuple[Optional[str], Optional[str], Optional[str]]:
        """(center_id, subject_id, standard_id) als Tupel."""
        return (self.center_id, self.subject_id, self.standard_id)

    @property
    def specificity(self) -> int:
        """Anzahl festgelegter Scope-Felder (0 = globaler Standardsatz)."""
        return sum(1 for v in self.scope if v is not None)

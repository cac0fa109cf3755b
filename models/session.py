"""Datenmodell für eine Nachhilfe-Stunde (Pydantic v2)."""

import datetime as dt
from enum import Enum

from pydantic import Field

from models.base import LedgerModel


class SessionStatus(str, Enum):
    COMPLETED = "completed"
    SCHEDULED = "scheduled"
    CANCELLED = "cancelled"


class Session(LedgerModel):
    """Eine erfasste Unterrichtseinheit.

    ``rate`` und ``amount`` werden beim Speichern eingefroren und NIE aus den
    aktuellen Tarifregeln nachberechnet. Nur eine explizite Bearbeitung der
    Stunde bepreist sie neu.
    """

    id: str
    date: dt.date
    center_id: str
    subject_id: str
    standard_id: str
    duration: float = Field(gt=0)      # Stunden
    status: SessionStatus = SessionStatus.COMPLETED
    rate: float = 0.0                  # Stundensatz zum Zeitpunkt des Speicherns
    amount: float = 0.0                # rate * duration zum Zeitpunkt des Speicherns

    @property
    def is_billable(self) -> bool:
        """Nur abgeschlossene Stunden zählen zum Verdienst."""
        return self.status == SessionStatus.COMPLETED

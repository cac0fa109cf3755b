"""Geschlossene Menge der Zustandsübergänge.

Jede Aktion ist ein unveränderlicher Datensatz. IDs neuer Einträge werden
vor dem Erzeugen der Aktion vergeben, damit ``apply_action`` rein bleibt.
"""

from dataclasses import dataclass
from typing import Optional, Union

from models.billing_state import BillingState
from models.center import Center
from models.rate_rule import RateRule
from models.session import Session
from models.settings import Theme
from models.standard import Standard
from models.subject import Subject


@dataclass(frozen=True)
class ReplaceState:
    """Ersetzt den kompletten Zustand (Restore)."""
    state: BillingState


@dataclass(frozen=True)
class UpdateSettings:
    """Überschreibt nur die gesetzten Felder der Einstellungen."""
    tutor_name: Optional[str] = None
    theme: Optional[Theme] = None


# ─── Kataloge ───

@dataclass(frozen=True)
class AddCenter:
    entry: Center


@dataclass(frozen=True)
class DeleteCenter:
    entry_id: str


@dataclass(frozen=True)
class AddSubject:
    entry: Subject


@dataclass(frozen=True)
class DeleteSubject:
    entry_id: str


@dataclass(frozen=True)
class AddStandard:
    entry: Standard


@dataclass(frozen=True)
class DeleteStandard:
    entry_id: str


# ─── Tarifregeln ───

@dataclass(frozen=True)
class AddRateRule:
    rule: RateRule


@dataclass(frozen=True)
class UpdateRateRule:
    """Ersetzt die Regel mit gleicher ID (keine Kollisionsprüfung)."""
    rule: RateRule


@dataclass(frozen=True)
class DeleteRateRule:
    rule_id: str


# ─── Stunden ───

@dataclass(frozen=True)
class AddSession:
    session: Session


@dataclass(frozen=True)
class UpdateSession:
    """Ersetzt die Stunde mit gleicher ID samt neu berechnetem Preis."""
    session: Session


@dataclass(frozen=True)
class DeleteSession:
    session_id: str


Action = Union[
    ReplaceState,
    UpdateSettings,
    AddCenter,
    DeleteCenter,
    AddSubject,
    DeleteSubject,
    AddStandard,
    DeleteStandard,
    AddRateRule,
    UpdateRateRule,
    DeleteRateRule,
    AddSession,
    UpdateSession,
    DeleteSession,
]

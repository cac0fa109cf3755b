"""Abrechnungsbericht: gefilterte Sicht auf abgeschlossene Stunden.

Reine Leseoperation über Stunden und Stammdaten. Nur Stunden mit Status
``completed`` fließen in Summen ein, unabhängig von ihrem gespeicherten Betrag.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel

from models.billing_state import BillingState
from models.session import Session


class GroupTotals(BaseModel):
    """Summen für ein Center bzw. ein Fach."""

    key: str            # Katalog-ID (kann verwaist sein)
    name: str           # Anzeigename oder "—"
    hours: float = 0.0
    amount: float = 0.0
    session_count: int = 0


class BillingReport(BaseModel):
    """Ergebnis der Berichtsabfrage."""

    start_date: date
    end_date: date
    center_id: Optional[str] = None
    sessions: list[Session]           # aufsteigend nach Datum
    by_center: list[GroupTotals]      # Reihenfolge des ersten Auftretens
    by_subject: list[GroupTotals]
    total_hours: float
    total_amount: float

    @property
    def session_count(self) -> int:
        return len(self.sessions)

    @property
    def is_empty(self) -> bool:
        return not self.sessions


def _group(sessions: list[Session], key_of, name_of) -> list[GroupTotals]:
    groups: dict[str, GroupTotals] = {}
    for s in sessions:
        key = key_of(s)
        g = groups.get(key)
        if g is None:
            g = groups[key] = GroupTotals(key=key, name=name_of(key))
        g.hours += s.duration
        g.amount += s.amount
        g.session_count += 1
    return list(groups.values())


def build_report(
    state: BillingState,
    start_date: date,
    end_date: date,
    center_id: Optional[str] = None,
) -> BillingReport:
    """Abgeschlossene Stunden im Zeitraum [start_date, end_date] samt Summen.

    Args:
        state: Aktueller Snapshot.
        start_date: Erster Tag (inklusive).
        end_date: Letzter Tag (inklusive).
        center_id: Optionaler Center-Filter.
    """
    selected = [
        s for s in state.sessions
        if s.is_billable
        and start_date <= s.date <= end_date
        and (not center_id or s.center_id == center_id)
    ]
    selected.sort(key=lambda s: s.date)

    return BillingReport(
        start_date=start_date,
        end_date=end_date,
        center_id=center_id or None,
        sessions=selected,
        by_center=_group(selected, lambda s: s.center_id, state.center_name),
        by_subject=_group(selected, lambda s: s.subject_id, state.subject_name),
        total_hours=sum(s.duration for s in selected),
        total_amount=sum(s.amount for s in selected),
    )

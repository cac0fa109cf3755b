"""Bepreisung und Sortierung von Unterrichtsstunden."""

from typing import Optional, Sequence

from models.rate_rule import RateRule
from models.session import Session, SessionStatus
from ledger.rates import resolve_rate


def price_session(
    rules: Sequence[RateRule],
    center_id: str,
    subject_id: str,
    standard_id: str,
    duration: float,
) -> tuple[float, float]:
    """Gibt (rate, amount) zurück. Eingaben sind bereits validiert."""
    rate = resolve_rate(rules, center_id, subject_id, standard_id)
    return rate, rate * duration


def sessions_newest_first(
    sessions: Sequence[Session], status: Optional[SessionStatus] = None
) -> list[Session]:
    """Stunden absteigend nach Datum, optional nach Status gefiltert."""
    selected = [s for s in sessions if status is None or s.status == status]
    return sorted(selected, key=lambda s: s.date, reverse=True)

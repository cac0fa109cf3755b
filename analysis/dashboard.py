"""Monatsübersicht für das Dashboard."""

import calendar
from datetime import date

from pydantic import BaseModel

from models.billing_state import BillingState
from models.session import Session, SessionStatus


class DashboardSummary(BaseModel):
    """Verdienst des laufenden Monats und anstehende Stunden."""

    month_start: date
    month_end: date
    earnings: float
    hours: float
    session_count: int
    upcoming: list[Session]


def month_bounds(day: date) -> tuple[date, date]:
    """Erster und letzter Tag des Monats von ``day``."""
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def build_dashboard(state: BillingState, today: date,
                    upcoming_limit: int = 5) -> DashboardSummary:
    """Berechnet die Kennzahlen relativ zu ``today``.

    Anstehend = geplante Stunden ab heute, aufsteigend nach Datum.
    """
    start, end = month_bounds(today)
    completed = [
        s for s in state.sessions
        if s.is_billable and start <= s.date <= end
    ]
    upcoming = sorted(
        (s for s in state.sessions
         if s.status == SessionStatus.SCHEDULED and s.date >= today),
        key=lambda s: s.date,
    )
    return DashboardSummary(
        month_start=start,
        month_end=end,
        earnings=sum(s.amount for s in completed),
        hours=sum(s.duration for s in completed),
        session_count=len(completed),
        upcoming=upcoming[:max(upcoming_limit, 0)],
    )

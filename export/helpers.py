"""Gemeinsame Hilfsfunktionen für CSV-, Excel-, PDF- und Terminal-Ausgabe."""

from datetime import date

from models.billing_state import BillingState
from models.session import Session

# ─── Farbpalette (RRGGBB, ohne #) ─────────────────────────────────────────────

COLORS: dict[str, str] = {
    "header":    "4472C4",
    "total":     "D9E1F2",
    "zebra":     "F5F5F5",
    "completed": "B3FFB3",
    "scheduled": "B3D4FF",
    "cancelled": "FFB3B3",
}

# Rich-Farben je Status (Terminal)
STATUS_STYLES: dict[str, str] = {
    "completed": "green",
    "scheduled": "blue",
    "cancelled": "red",
}


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Wandelt RRGGBB-String in (r, g, b)-Tupel um."""
    h = hex_color.lstrip("#")
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def today_str() -> str:
    """Gibt das heutige Datum als DD.MM.YYYY zurück."""
    return date.today().strftime("%d.%m.%Y")


# ─── Zahlen & Datum ───────────────────────────────────────────────────────────

def format_number(value: float) -> str:
    """Zahl für CSV ohne Rundung: 2.0 → "2", 1.5 → "1.5", 0.125 → "0.125"."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def format_money(amount: float, symbol: str = "₹") -> str:
    """Betrag ohne Nachkommastellen mit Tausender-Trennung: ₹12,500."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.0f}"


def format_hours(hours: float) -> str:
    return f"{hours:.1f}"


def format_date(day: date, fmt: str = "%d %b %Y") -> str:
    return day.strftime(fmt)


# ─── Namen ────────────────────────────────────────────────────────────────────

def session_names(session: Session, state: BillingState) -> tuple[str, str, str]:
    """(Center, Fach, Klassenstufe) einer Stunde; verwaiste IDs → "—"."""
    return (
        state.center_name(session.center_id),
        state.subject_name(session.subject_id),
        state.standard_name(session.standard_id),
    )

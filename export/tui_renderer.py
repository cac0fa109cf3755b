"""Gemeinsamer Renderer für Terminal-Tabellen (rich).

Liefert reine Zeilenlisten; main.py baut daraus rich-Tabellen.
"""

from typing import TYPE_CHECKING, Sequence

from export.helpers import (
    STATUS_STYLES, format_date, format_hours, format_money, session_names,
)

if TYPE_CHECKING:
    from analysis.report import GroupTotals
    from config.schema import DisplayConfig
    from models.billing_state import BillingState
    from models.session import Session


def render_session_rows(
    sessions: Sequence["Session"],
    state: "BillingState",
    display: "DisplayConfig",
    with_status: bool = True,
) -> list[list[str]]:
    """Eine Zeile je Stunde: ID, Datum, Center, Fach, Stufe, Std., Satz, Betrag[, Status]."""
    symbol = display.currency_symbol
    rows: list[list[str]] = []
    for s in sessions:
        center, subject, standard = session_names(s, state)
        row = [
            s.id,
            format_date(s.date, display.date_format),
            center, subject, standard,
            format_hours(s.duration),
            format_money(s.rate, symbol),
            format_money(s.amount, symbol),
        ]
        if with_status:
            style = STATUS_STYLES.get(s.status.value, "white")
            row.append(f"[{style}]{s.status.value}[/{style}]")
        rows.append(row)
    return rows


def render_rule_rows(state: "BillingState", display: "DisplayConfig") -> list[list[str]]:
    """Eine Zeile je Tarifregel in Speicherreihenfolge; Wildcards als "Any".

    Letzte Spalte: Anzahl festgelegter Scope-Felder (0 = globaler Standardsatz).
    """
    rows: list[list[str]] = []
    for rule in state.rate_rules:
        center, subject, standard = state.rule_scope_names(rule)
        rows.append([
            rule.id, center, subject, standard,
            f"{format_money(rule.rate_per_hour, display.currency_symbol)}/h",
            str(rule.specificity),
        ])
    return rows


def render_group_rows(groups: Sequence["GroupTotals"],
                      display: "DisplayConfig") -> list[list[str]]:
    """Gruppensummen: Name, Anzahl, Stunden, Betrag."""
    return [
        [g.name, str(g.session_count), format_hours(g.hours),
         format_money(g.amount, display.currency_symbol)]
        for g in groups
    ]

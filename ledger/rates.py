"""Stundensatz-Ermittlung über eine feste Spezifitäts-Rangfolge.

Für einen Kontext (Center, Fach, Klassenstufe) werden die Tarifregeln in acht
Stufen geprüft, von "alles festgelegt" bis "globaler Standardsatz". Die erste
Stufe mit einem Treffer gewinnt; innerhalb einer Stufe gewinnt die zuerst
gespeicherte Regel.

  Stufe | Center | Fach | Klassenstufe
  ------+--------+------+-------------
    1   |   =    |  =   |     =
    2   |  any   |  =   |     =
    3   |   =    |  =   |    any
    4   |   =    | any  |     =
    5   |  any   |  =   |    any
    6   |   =    | any  |    any
    7   |  any   | any  |     =
    8   |  any   | any  |    any

Die Reihenfolge ist Preispolitik: eine Umsortierung ändert Beträge.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from models.rate_rule import RateRule

# (center, subject, standard): True = Feld gesetzt und gleich dem Kontext,
# False = Feld ist Wildcard.
RATE_TIERS: tuple[tuple[bool, bool, bool], ...] = (
    (True, True, True),
    (False, True, True),
    (True, True, False),
    (True, False, True),
    (False, True, False),
    (True, False, False),
    (False, False, True),
    (False, False, False),
)


@dataclass(frozen=True)
class RateMatch:
    """Gewinnende Regel samt Stufe (1-basiert)."""

    tier: int
    rule: RateRule

    @property
    def rate(self) -> float:
        return self.rule.rate_per_hour


def _field_matches(rule_value: Optional[str], query_value: Optional[str],
                   pinned: bool) -> bool:
    if pinned:
        return rule_value is not None and rule_value == query_value
    return rule_value is None


def match_rule(
    rules: Sequence[RateRule],
    center_id: Optional[str],
    subject_id: Optional[str],
    standard_id: Optional[str],
) -> Optional[RateMatch]:
    """Sucht die maßgebliche Regel für den Kontext. None wenn keine passt."""
    for tier, (c_pinned, s_pinned, st_pinned) in enumerate(RATE_TIERS, start=1):
        for rule in rules:
            if (_field_matches(rule.center_id, center_id, c_pinned)
                    and _field_matches(rule.subject_id, subject_id, s_pinned)
                    and _field_matches(rule.standard_id, standard_id, st_pinned)):
                return RateMatch(tier=tier, rule=rule)
    return None


def resolve_rate(
    rules: Sequence[RateRule],
    center_id: Optional[str],
    subject_id: Optional[str],
    standard_id: Optional[str],
) -> float:
    """Stundensatz für den Kontext; 0.0 wenn keine Regel greift."""
    match = match_rule(rules, center_id, subject_id, standard_id)
    return match.rate if match is not None else 0.0


def find_rule_with_scope(
    rules: Iterable[RateRule],
    center_id: Optional[str],
    subject_id: Optional[str],
    standard_id: Optional[str],
) -> Optional[RateRule]:
    """Erste Regel mit exakt gleichem Scope-Tripel (inkl. Wildcards)."""
    scope = (center_id or None, subject_id or None, standard_id or None)
    return next((r for r in rules if r.scope == scope), None)


def parse_rate(value) -> Optional[float]:
    """Wandelt eine Eingabe in einen gültigen Stundensatz um.

    Gibt None zurück für nicht-numerische, nicht-endliche oder nicht-positive
    Werte.
    """
    if isinstance(value, bool):
        return None
    try:
        rate = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(rate) or rate <= 0:
        return None
    return rate

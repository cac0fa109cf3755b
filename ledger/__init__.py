"""Abrechnungskern: Tarif-Auflösung, Zustandsübergänge und StateStore."""

from .rates import RATE_TIERS, RateMatch, match_rule, resolve_rate, parse_rate
from .reducer import apply_action
from .store import StateStore

__all__ = [
    "RATE_TIERS",
    "RateMatch",
    "match_rule",
    "resolve_rate",
    "parse_rate",
    "apply_action",
    "StateStore",
]

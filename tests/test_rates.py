"""Tests für die Stundensatz-Ermittlung (acht Spezifitäts-Stufen)."""

import itertools

import pytest

from ledger.rates import (
    RATE_TIERS,
    find_rule_with_scope,
    match_rule,
    parse_rate,
    resolve_rate,
)
from models.rate_rule import RateRule


C, S, ST = "c1", "s1", "st1"


def _rule(rule_id: str, rate: float, center=None, subject=None, standard=None) -> RateRule:
    return RateRule(id=rule_id, center_id=center, subject_id=subject,
                    standard_id=standard, rate_per_hour=rate)


def _all_scopes() -> list[RateRule]:
    """Je eine Regel pro Stufe; Satz = 100 * Stufe."""
    rules = []
    for tier, (c, s, st) in enumerate(RATE_TIERS, start=1):
        rules.append(_rule(
            f"r{tier}", 100.0 * tier,
            center=C if c else None,
            subject=S if s else None,
            standard=ST if st else None,
        ))
    return rules


# ─── RANGFOLGE ────────────────────────────────────────────────────────────────

class TestTierOrder:
    def test_eight_distinct_tiers(self):
        """Alle acht Kombinationen aus festgelegt/beliebig kommen genau einmal vor."""
        assert len(RATE_TIERS) == 8
        assert set(RATE_TIERS) == set(itertools.product([True, False], repeat=3))

    def test_first_and_last_tier(self):
        assert RATE_TIERS[0] == (True, True, True)
        assert RATE_TIERS[-1] == (False, False, False)

    @pytest.mark.parametrize("tier", range(1, 9))
    def test_tier_wins_over_all_less_specific(self, tier: int):
        """Entfernt man alle spezifischeren Regeln, gewinnt die Regel dieser Stufe."""
        rules = _all_scopes()[tier - 1:]
        match = match_rule(rules, C, S, ST)
        assert match is not None
        assert match.tier == tier
        assert match.rate == 100.0 * tier

    def test_storage_order_irrelevant_between_tiers(self):
        """Die Stufe entscheidet, nicht die Speicherreihenfolge."""
        rules = list(reversed(_all_scopes()))
        assert resolve_rate(rules, C, S, ST) == 100.0

    def test_first_stored_wins_within_tier(self):
        rules = [_rule("a", 250, subject=S), _rule("b", 999, subject=S)]
        match = match_rule(rules, C, S, ST)
        assert match.rule.id == "a"
        assert match.tier == 5

    def test_center_beats_standard_only(self):
        """Stufe 6 (nur Center) kommt vor Stufe 7 (nur Klassenstufe)."""
        rules = [_rule("std", 450, standard=ST), _rule("ctr", 350, center=C)]
        assert resolve_rate(rules, C, S, ST) == 350


# ─── VOLLSTÄNDIGKEIT ──────────────────────────────────────────────────────────

class TestTotality:
    def test_no_rules_gives_zero(self):
        assert resolve_rate([], C, S, ST) == 0.0
        assert match_rule([], C, S, ST) is None

    def test_non_matching_rules_give_zero(self):
        rules = [_rule("x", 500, center="other"), _rule("y", 600, subject="other")]
        assert resolve_rate(rules, C, S, ST) == 0.0

    def test_pinned_rule_does_not_match_other_context(self):
        rules = [_rule("full", 700, C, S, ST)]
        assert resolve_rate(rules, C, S, "st2") == 0.0

    def test_global_rule_matches_everything(self):
        rules = [_rule("g", 300)]
        assert resolve_rate(rules, "a", "b", "c") == 300
        assert resolve_rate(rules, None, None, None) == 300

    def test_missing_query_field_only_matches_wildcards(self):
        """Ein fehlender Kontext-Wert wird nie von einer festgelegten Regel getroffen."""
        rules = [_rule("c", 500, center=C), _rule("g", 300)]
        assert resolve_rate(rules, None, S, ST) == 300


# ─── BEISPIELSZENARIO ─────────────────────────────────────────────────────────

class TestScenario:
    @pytest.fixture
    def rules(self) -> list[RateRule]:
        return [
            _rule("global", 300),
            _rule("math10", 500, subject="math", standard="10"),
            _rule("apex-math10", 650, center="apex", subject="math", standard="10"),
            _rule("physics", 400, subject="physics"),
        ]

    def test_fully_pinned(self, rules):
        assert resolve_rate(rules, "apex", "math", "10") == 650

    def test_subject_and_standard_any_center(self, rules):
        assert resolve_rate(rules, "sunrise", "math", "10") == 500

    def test_subject_only(self, rules):
        assert resolve_rate(rules, "sunrise", "physics", "12") == 400

    def test_fallback_to_global(self, rules):
        assert resolve_rate(rules, "sunrise", "math", "12") == 300
        assert match_rule(rules, "sunrise", "math", "12").tier == 8


# ─── HILFSFUNKTIONEN ──────────────────────────────────────────────────────────

class TestParseRate:
    @pytest.mark.parametrize("value,expected", [
        (500, 500.0),
        ("450", 450.0),
        ("12.5", 12.5),
        (0.01, 0.01),
    ])
    def test_valid(self, value, expected):
        assert parse_rate(value) == expected

    @pytest.mark.parametrize("value", [
        0, -10, "0", "abc", "", None, float("nan"), float("inf"), True, [],
    ])
    def test_invalid(self, value):
        assert parse_rate(value) is None


class TestFindRuleWithScope:
    def test_exact_scope_only(self):
        rules = [_rule("a", 100, subject=S), _rule("b", 200, subject=S, standard=ST)]
        assert find_rule_with_scope(rules, None, S, None).id == "a"
        assert find_rule_with_scope(rules, None, S, ST).id == "b"
        assert find_rule_with_scope(rules, C, S, ST) is None

    def test_blank_equals_wildcard(self):
        rules = [_rule("g", 300)]
        assert find_rule_with_scope(rules, "", "", "").id == "g"


class TestRateRuleModel:
    def test_blank_scope_is_wildcard(self):
        rule = RateRule(id="r", center_id="", subject_id="", standard_id="",
                        rate_per_hour=300)
        assert rule.scope == (None, None, None)
        assert rule.specificity == 0

    def test_specificity(self):
        assert _rule("r", 1, C, S, ST).specificity == 3
        assert _rule("r", 1, subject=S).specificity == 1

    def test_rate_must_be_positive(self):
        with pytest.raises(ValueError):
            RateRule(id="r", rate_per_hour=0)

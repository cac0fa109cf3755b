"""BillingState: Vollständiger Datenbestand der Abrechnung (Pydantic v2).

Der Zustand ist ein unveränderlicher Snapshot. Änderungen laufen ausschließlich
über ``ledger.reducer.apply_action``, das jeweils einen neuen Snapshot liefert.
"""

from typing import Optional

from models.base import ANY_NAME, MISSING_NAME, LedgerModel, lookup_name
from models.center import Center
from models.rate_rule import RateRule
from models.session import Session
from models.settings import Settings
from models.standard import Standard
from models.subject import Subject


class BillingState(LedgerModel):
    """Aggregat aus Einstellungen, Stammdaten, Tarifregeln und Stunden."""

    settings: Settings = Settings()
    centers: tuple[Center, ...] = ()
    subjects: tuple[Subject, ...] = ()
    standards: tuple[Standard, ...] = ()
    rate_rules: tuple[RateRule, ...] = ()
    sessions: tuple[Session, ...] = ()   # Einfügereihenfolge

    # ─── Namensauflösung ───

    def center_name(self, center_id: Optional[str], placeholder: str = MISSING_NAME) -> str:
        return lookup_name(self.centers, center_id, placeholder)

    def subject_name(self, subject_id: Optional[str], placeholder: str = MISSING_NAME) -> str:
        return lookup_name(self.subjects, subject_id, placeholder)

    def standard_name(self, standard_id: Optional[str], placeholder: str = MISSING_NAME) -> str:
        return lookup_name(self.standards, standard_id, placeholder)

    def rule_scope_names(self, rule: RateRule) -> tuple[str, str, str]:
        """Anzeigenamen des Regel-Scopes; Wildcards und verwaiste IDs → "Any"."""
        return (
            self.center_name(rule.center_id, ANY_NAME),
            self.subject_name(rule.subject_id, ANY_NAME),
            self.standard_name(rule.standard_id, ANY_NAME),
        )

    # ─── Suche ───

    def find_rule(self, rule_id: str) -> Optional[RateRule]:
        return next((r for r in self.rate_rules if r.id == rule_id), None)

    def find_session(self, session_id: str) -> Optional[Session]:
        return next((s for s in self.sessions if s.id == session_id), None)

    # ─── Übersicht ───

    def summary(self) -> str:
        """Kurze Übersicht über den Datenbestand."""
        billable = [s for s in self.sessions if s.is_billable]
        lines = [
            f"Tutor: {self.settings.tutor_name}",
            f"Center: {len(self.centers)}",
            f"Fächer: {len(self.subjects)}",
            f"Klassenstufen: {len(self.standards)}",
            f"Tarifregeln: {len(self.rate_rules)}",
            f"Stunden: {len(self.sessions)} ({len(billable)} abgeschlossen)",
        ]
        return "\n".join(lines)

    # ─── Serialisierung ───

    def to_json(self, indent: Optional[int] = None) -> str:
        """Serialisiert den kompletten Zustand (camelCase-Schlüssel)."""
        return self.model_dump_json(by_alias=True, indent=indent)

    @classmethod
    def from_json(cls, raw: str | bytes) -> "BillingState":
        """Liest einen Zustand; fehlende Top-Level-Schlüssel erhalten Defaults."""
        return cls.model_validate_json(raw)

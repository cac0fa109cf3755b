"""Demo-Daten-Generator für die Nachhilfe-Abrechnung.

Erzeugt einen reproduzierbaren Datenbestand (Seed) über die regulären
StateStore-Operationen, damit alle Beträge über die Tarif-Auflösung entstehen.

Enthaltene Sonderfälle:
  1. Globaler Standardsatz + spezifischere Regeln aller Stufen
  2. Geplante und abgesagte Stunden (zählen nicht zum Verdienst)
  3. Zukünftige Stunden für die Dashboard-Liste "Anstehend"
"""

import random
from datetime import date, timedelta
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich import box

from config.defaults import DEFAULT_STANDARDS, DEFAULT_SUBJECTS
from ledger.store import StateStore
from models.session import SessionStatus

console = Console()

# ─── Stammdaten ───────────────────────────────────────────────────────────────

_CENTERS = ["Bright Minds Academy", "Sunrise Coaching", "Apex Tutorials"]

# Stunden-Dauern (gewichtet)
_DURATIONS: list[tuple[float, int]] = [
    (1.0, 5),
    (1.5, 3),
    (2.0, 3),
    (0.75, 1),
]

# Status-Verteilung vergangener Stunden (gewichtet)
_PAST_STATUS: list[tuple[SessionStatus, int]] = [
    (SessionStatus.COMPLETED, 8),
    (SessionStatus.CANCELLED, 1),
]


def _weighted(rng: random.Random, options: list[tuple]):
    values = [v for v, _ in options]
    weights = [w for _, w in options]
    return rng.choices(values, weights=weights, k=1)[0]


class DemoDataGenerator:
    """Füllt einen StateStore mit Demo-Stammdaten, Tarifregeln und Stunden."""

    def __init__(self, seed: int = 42, today: Optional[date] = None):
        self.rng = random.Random(seed)
        self.today = today or date.today()

    def populate(self, store: StateStore, past_days: int = 45,
                 sessions: int = 30, upcoming: int = 4) -> None:
        """Legt Kataloge, Regeln und Stunden an.

        Args:
            store: Ziel-Store (vorhandene Daten bleiben erhalten).
            past_days: Zeitraum für vergangene Stunden (Tage vor heute).
            sessions: Anzahl vergangener Stunden.
            upcoming: Anzahl geplanter Stunden ab heute.
        """
        centers = [store.add_center(n) for n in _CENTERS]
        subjects = {n: store.add_subject(n) for n in DEFAULT_SUBJECTS}
        standards = {n: store.add_standard(n) for n in DEFAULT_STANDARDS}

        math_id = subjects["Mathematics"]
        physics_id = subjects["Physics"]

        # Globaler Standardsatz (Stufe 8)
        store.add_or_merge_rule(300)
        # Fach + Stufe, jedes Center (Stufe 2)
        store.add_or_merge_rule(500, subject_id=math_id, standard_id=standards["10"])
        store.add_or_merge_rule(550, subject_id=math_id, standard_id=standards["12"])
        # Nur Fach (Stufe 5)
        store.add_or_merge_rule(400, subject_id=physics_id)
        # Nur Center (Stufe 6)
        store.add_or_merge_rule(350, center_id=centers[1])
        # Nur Stufe (Stufe 7)
        store.add_or_merge_rule(450, standard_id=standards["12"])
        # Vollständig festgelegt (Stufe 1)
        store.add_or_merge_rule(
            650, center_id=centers[2], subject_id=math_id, standard_id=standards["12"]
        )

        subject_ids = list(subjects.values())
        standard_ids = list(standards.values())

        for _ in range(sessions):
            day = self.today - timedelta(days=self.rng.randint(0, past_days))
            store.log_session(
                day,
                self.rng.choice(centers),
                self.rng.choice(subject_ids),
                self.rng.choice(standard_ids),
                _weighted(self.rng, _DURATIONS),
                _weighted(self.rng, _PAST_STATUS),
            )

        for _ in range(upcoming):
            day = self.today + timedelta(days=self.rng.randint(1, 14))
            store.log_session(
                day,
                self.rng.choice(centers),
                self.rng.choice(subject_ids),
                self.rng.choice(standard_ids),
                _weighted(self.rng, _DURATIONS),
                SessionStatus.SCHEDULED,
            )

    def print_summary(self, store: StateStore) -> None:
        """Gibt eine kurze Übersicht des erzeugten Bestands aus."""
        state = store.state
        table = Table(title="Demo-Daten", box=box.ROUNDED)
        table.add_column("Bereich", style="bold")
        table.add_column("Anzahl", justify="right")
        table.add_row("Center", str(len(state.centers)))
        table.add_row("Fächer", str(len(state.subjects)))
        table.add_row("Klassenstufen", str(len(state.standards)))
        table.add_row("Tarifregeln", str(len(state.rate_rules)))
        for status in SessionStatus:
            count = sum(1 for s in state.sessions if s.status == status)
            table.add_row(f"Stunden ({status.value})", str(count))
        console.print(table)

"""StateStore: einziger Besitzer des aktuellen Zustands.

Alle Schreiboperationen validieren ihre Eingaben an dieser Grenze. Ungültige
Eingaben führen zu keinem Übergang (Rückgabe None bzw. False). Gültige
Eingaben werden in eine Aktion übersetzt, über ``apply_action`` angewendet
und sofort vollständig gespeichert.
"""

import datetime as dt
import logging
import math
from typing import Optional

from models.billing_state import BillingState
from models.center import Center
from models.rate_rule import RateRule
from models.session import Session, SessionStatus
from models.standard import Standard
from models.subject import Subject
from data.backup import parse_backup
from data.storage import STATE_KEY, KeyValueStore, load_state, save_state
from ledger.actions import (
    Action,
    AddCenter,
    AddRateRule,
    AddSession,
    AddStandard,
    AddSubject,
    DeleteCenter,
    DeleteRateRule,
    DeleteSession,
    DeleteStandard,
    DeleteSubject,
    ReplaceState,
    UpdateRateRule,
    UpdateSession,
    UpdateSettings,
)
from ledger.ids import new_id
from ledger.pricing import price_session
from ledger.rates import find_rule_with_scope, parse_rate, resolve_rate
from ledger.reducer import apply_action

logger = logging.getLogger(__name__)

_THEMES = ("light", "dark")


def _clean_name(name) -> Optional[str]:
    if not isinstance(name, str):
        return None
    name = name.strip()
    return name or None


def _parse_date(value) -> Optional[dt.date]:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return dt.date.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def _parse_duration(value) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        hours = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(hours) or hours <= 0:
        return None
    return hours


def _parse_status(value) -> Optional[SessionStatus]:
    try:
        return SessionStatus(value)
    except ValueError:
        return None


class StateStore:
    """Hält den aktuellen Snapshot und spiegelt jede Änderung in den Speicher."""

    def __init__(self, backend: KeyValueStore, key: str = STATE_KEY) -> None:
        self._backend = backend
        self._key = key
        self._state = load_state(backend, key)

    @property
    def state(self) -> BillingState:
        return self._state

    def dispatch(self, action: Action) -> BillingState:
        """Wendet eine Aktion an und speichert den neuen Snapshot synchron.

        Der neue Snapshot ist bereits installiert, bevor gespeichert wird;
        ein Speicherfehler (OSError) wird weitergereicht. Liefert der Reducer
        denselben Snapshot zurück, wird nichts gespeichert.
        """
        new_state = apply_action(self._state, action)
        if new_state is self._state:
            logger.debug(f"Aktion ohne Wirkung: {action!r}")
            return new_state
        self._state = new_state
        save_state(self._backend, new_state, self._key)
        logger.info(f"Übergang {type(action).__name__} gespeichert.")
        return new_state

    # ─── Kataloge ───

    def _add_entry(self, entry_cls, action_cls, name) -> Optional[str]:
        clean = _clean_name(name)
        if clean is None:
            logger.debug(f"{entry_cls.__name__}: leerer Name abgelehnt.")
            return None
        entry = entry_cls(id=new_id(), name=clean)
        self.dispatch(action_cls(entry=entry))
        return entry.id

    def add_center(self, name: str) -> Optional[str]:
        return self._add_entry(Center, AddCenter, name)

    def delete_center(self, center_id: str) -> None:
        self.dispatch(DeleteCenter(entry_id=center_id))

    def add_subject(self, name: str) -> Optional[str]:
        return self._add_entry(Subject, AddSubject, name)

    def delete_subject(self, subject_id: str) -> None:
        self.dispatch(DeleteSubject(entry_id=subject_id))

    def add_standard(self, name: str) -> Optional[str]:
        return self._add_entry(Standard, AddStandard, name)

    def delete_standard(self, standard_id: str) -> None:
        self.dispatch(DeleteStandard(entry_id=standard_id))

    # ─── Tarifregeln ───

    def add_or_merge_rule(
        self,
        rate_per_hour,
        center_id: Optional[str] = None,
        subject_id: Optional[str] = None,
        standard_id: Optional[str] = None,
    ) -> Optional[str]:
        """Legt eine Regel an oder überschreibt den Satz einer Regel mit gleichem Scope.

        Gibt die ID der angelegten bzw. aktualisierten Regel zurück, None bei
        ungültigem Satz.
        """
        rate = parse_rate(rate_per_hour)
        if rate is None:
            logger.debug(f"Tarifregel abgelehnt: ungültiger Satz {rate_per_hour!r}")
            return None
        existing = find_rule_with_scope(
            self._state.rate_rules, center_id, subject_id, standard_id
        )
        if existing is not None:
            self.dispatch(UpdateRateRule(
                rule=existing.model_copy(update={"rate_per_hour": rate})
            ))
            return existing.id
        rule = RateRule(
            id=new_id(), center_id=center_id, subject_id=subject_id,
            standard_id=standard_id, rate_per_hour=rate,
        )
        self.dispatch(AddRateRule(rule=rule))
        return rule.id

    def update_rule(
        self,
        rule_id: str,
        rate_per_hour,
        center_id: Optional[str] = None,
        subject_id: Optional[str] = None,
        standard_id: Optional[str] = None,
    ) -> bool:
        """Überschreibt Scope und Satz einer Regel.

        Keine Prüfung auf Scope-Kollision mit anderen Regeln; bei doppeltem
        Scope gewinnt in der Auflösung die zuerst gespeicherte Regel.
        """
        rate = parse_rate(rate_per_hour)
        if rate is None or self._state.find_rule(rule_id) is None:
            logger.debug(f"Regel-Update für '{rule_id}' abgelehnt.")
            return False
        self.dispatch(UpdateRateRule(rule=RateRule(
            id=rule_id, center_id=center_id, subject_id=subject_id,
            standard_id=standard_id, rate_per_hour=rate,
        )))
        return True

    def delete_rule(self, rule_id: str) -> None:
        self.dispatch(DeleteRateRule(rule_id=rule_id))

    def resolve(self, center_id: Optional[str], subject_id: Optional[str],
                standard_id: Optional[str]) -> float:
        """Aktueller Stundensatz für einen Kontext (reine Leseoperation)."""
        return resolve_rate(self._state.rate_rules, center_id, subject_id, standard_id)

    # ─── Stunden ───

    def _build_session(self, session_id, session_date, center_id, subject_id,
                       standard_id, duration, status) -> Optional[Session]:
        day = _parse_date(session_date)
        hours = _parse_duration(duration)
        parsed_status = _parse_status(status)
        if (day is None or hours is None or parsed_status is None
                or not center_id or not subject_id or not standard_id):
            logger.debug(
                f"Stunde abgelehnt: date={session_date!r}, center={center_id!r}, "
                f"subject={subject_id!r}, standard={standard_id!r}, "
                f"duration={duration!r}, status={status!r}"
            )
            return None
        rate, amount = price_session(
            self._state.rate_rules, center_id, subject_id, standard_id, hours
        )
        return Session(
            id=session_id, date=day, center_id=center_id, subject_id=subject_id,
            standard_id=standard_id, duration=hours, status=parsed_status,
            rate=rate, amount=amount,
        )

    def log_session(
        self,
        session_date,
        center_id: str,
        subject_id: str,
        standard_id: str,
        duration,
        status=SessionStatus.COMPLETED,
    ) -> Optional[Session]:
        """Erfasst eine Stunde mit eingefrorenem Satz und Betrag."""
        session = self._build_session(new_id(), session_date, center_id, subject_id,
                                      standard_id, duration, status)
        if session is None:
            return None
        self.dispatch(AddSession(session=session))
        return session

    def revise_session(
        self,
        session_id: str,
        session_date,
        center_id: str,
        subject_id: str,
        standard_id: str,
        duration,
        status,
    ) -> Optional[Session]:
        """Überschreibt eine Stunde und bepreist sie mit den aktuellen Regeln neu."""
        if self._state.find_session(session_id) is None:
            logger.debug(f"Stunde '{session_id}' nicht gefunden.")
            return None
        session = self._build_session(session_id, session_date, center_id, subject_id,
                                      standard_id, duration, status)
        if session is None:
            return None
        self.dispatch(UpdateSession(session=session))
        return session

    def delete_session(self, session_id: str) -> None:
        self.dispatch(DeleteSession(session_id=session_id))

    # ─── Einstellungen ───

    def update_settings(self, tutor_name: Optional[str] = None,
                        theme: Optional[str] = None) -> bool:
        if tutor_name is not None:
            tutor_name = _clean_name(tutor_name)
            if tutor_name is None:
                return False
        if theme is not None and theme not in _THEMES:
            return False
        if tutor_name is None and theme is None:
            return False
        self.dispatch(UpdateSettings(tutor_name=tutor_name, theme=theme))
        return True

    def toggle_theme(self) -> str:
        theme = "light" if self._state.settings.theme == "dark" else "dark"
        self.dispatch(UpdateSettings(theme=theme))
        return theme

    # ─── Backup / Restore ───

    def backup_json(self) -> str:
        return self._state.to_json(indent=2)

    def restore(self, raw: str | bytes) -> BillingState:
        """Ersetzt den kompletten Zustand durch den Backup-Inhalt.

        Raises:
            BackupFormatError: Inhalt ungültig; der aktuelle Zustand bleibt unverändert.
        """
        state = parse_backup(raw)
        self.dispatch(ReplaceState(state=state))
        logger.info(
            f"Restore: {len(state.sessions)} Stunden, "
            f"{len(state.rate_rules)} Tarifregeln übernommen."
        )
        return state

    def __repr__(self) -> str:
        return f"StateStore({self._backend!r}, key={self._key!r})"

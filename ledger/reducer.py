"""Reiner Zustandsübergang: ``apply_action(state, action) -> state``.

Der alte Snapshot wird nie verändert; jede Aktion liefert einen neuen.
Updates und Löschungen mit unbekannter ID lassen die Sammlungen unverändert.
"""

from models.billing_state import BillingState
from models.settings import Settings
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

# Aktionstyp → betroffene Sammlung im BillingState
_CATALOG_ADD = {AddCenter: "centers", AddSubject: "subjects", AddStandard: "standards"}
_CATALOG_DELETE = {DeleteCenter: "centers", DeleteSubject: "subjects",
                   DeleteStandard: "standards"}


def _append(items: tuple, item) -> tuple:
    return items + (item,)


def _without(items: tuple, item_id: str) -> tuple:
    return tuple(i for i in items if i.id != item_id)


def _replace(items: tuple, item) -> tuple:
    return tuple(item if i.id == item.id else i for i in items)


def _updated_settings(current: Settings, action: UpdateSettings) -> Settings:
    changes = {}
    if action.tutor_name is not None:
        changes["tutor_name"] = action.tutor_name
    if action.theme is not None:
        changes["theme"] = action.theme
    # model_validate statt model_copy, damit das Theme geprüft wird
    return Settings.model_validate({**current.model_dump(), **changes})


def apply_action(state: BillingState, action: Action) -> BillingState:
    """Wendet genau eine Aktion an und gibt den neuen Snapshot zurück.

    Unbekannte Aktionen liefern denselben Snapshot (``is state``) zurück.
    """
    kind = type(action)

    if kind is ReplaceState:
        return action.state

    if kind is UpdateSettings:
        return state.model_copy(
            update={"settings": _updated_settings(state.settings, action)}
        )

    if kind in _CATALOG_ADD:
        field = _CATALOG_ADD[kind]
        return state.model_copy(
            update={field: _append(getattr(state, field), action.entry)}
        )

    if kind in _CATALOG_DELETE:
        field = _CATALOG_DELETE[kind]
        return state.model_copy(
            update={field: _without(getattr(state, field), action.entry_id)}
        )

    if kind is AddRateRule:
        return state.model_copy(
            update={"rate_rules": _append(state.rate_rules, action.rule)}
        )
    if kind is UpdateRateRule:
        return state.model_copy(
            update={"rate_rules": _replace(state.rate_rules, action.rule)}
        )
    if kind is DeleteRateRule:
        return state.model_copy(
            update={"rate_rules": _without(state.rate_rules, action.rule_id)}
        )

    if kind is AddSession:
        return state.model_copy(
            update={"sessions": _append(state.sessions, action.session)}
        )
    if kind is UpdateSession:
        return state.model_copy(
            update={"sessions": _replace(state.sessions, action.session)}
        )
    if kind is DeleteSession:
        return state.model_copy(
            update={"sessions": _without(state.sessions, action.session_id)}
        )

    # Unbekannte Aktion: Zustand unverändert
    return state

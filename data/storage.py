"""Persistenz-Adapter: synchroner Key-Value-Speicher für den Zustand.

Der Kern kennt nur ``get(key) -> bytes | None`` und ``set(key, bytes)``.
Der Zustand liegt als JSON unter einem festen Schlüssel.
"""

import logging
from pathlib import Path
from typing import Optional, Protocol

from pydantic import ValidationError

from models.billing_state import BillingState

logger = logging.getLogger(__name__)

STATE_KEY = "tutor_billing_db"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[bytes]: ...

    def set(self, key: str, value: bytes) -> None: ...


class FileKeyValueStore:
    """Legt jeden Schlüssel als eigene Datei ``<key>.json`` im Datenverzeichnis ab."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = Path(base_dir)

    def _path(self, key: str) -> Path:
        return self.base_dir / f"{key}.json"

    def get(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def set(self, key: str, value: bytes) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        # Erst temporär schreiben, dann ersetzen: keine halbe Datei bei Abbruch
        tmp = path.with_suffix(".json.tmp")
        tmp.write_bytes(value)
        tmp.replace(path)

    def __repr__(self) -> str:
        return f"FileKeyValueStore({self.base_dir})"


class MemoryKeyValueStore:
    """Flüchtiger Speicher (Tests, Probeläufe)."""

    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = value

    def __len__(self) -> int:
        return len(self._data)


def load_state(store: KeyValueStore, key: str = STATE_KEY) -> BillingState:
    """Lädt den Zustand; fehlender oder unlesbarer Inhalt → Standard-Zustand."""
    raw = store.get(key)
    if raw is None:
        logger.info(f"Kein gespeicherter Zustand unter '{key}' – starte leer.")
        return BillingState()
    try:
        return BillingState.from_json(raw)
    except ValidationError as e:
        logger.warning(
            f"Gespeicherter Zustand unter '{key}' ist unlesbar – starte leer. "
            f"({e.error_count()} Fehler)"
        )
        return BillingState()


def save_state(store: KeyValueStore, state: BillingState, key: str = STATE_KEY) -> None:
    """Schreibt den kompletten Snapshot synchron."""
    store.set(key, state.to_json().encode("utf-8"))

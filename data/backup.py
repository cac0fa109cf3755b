"""Backup und Restore des kompletten Datenbestands als JSON-Datei.

Ein Restore ist ein vollständiges Überschreiben (kein Zusammenführen).
Fehlende Top-Level-Schlüssel erhalten ihre Standardwerte.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from models.billing_state import BillingState


class BackupFormatError(ValueError):
    """Backup-Datei ist kein gültiger Datenbestand."""


def backup_filename(today: Optional[date] = None) -> str:
    """Dateiname ``tutor_backup_YYYY-MM-DD.json``."""
    today = today or date.today()
    return f"tutor_backup_{today.isoformat()}.json"


def parse_backup(raw: str | bytes) -> BillingState:
    """Liest einen Backup-Inhalt.

    Raises:
        BackupFormatError: kein JSON, kein JSON-Objekt oder ungültige Daten.
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise BackupFormatError(f"Backup ist kein gültiges JSON: {e}") from e
    if not isinstance(data, dict):
        raise BackupFormatError(
            f"Backup muss ein JSON-Objekt sein, gefunden: {type(data).__name__}"
        )
    try:
        return BillingState.model_validate(data)
    except ValidationError as e:
        raise BackupFormatError(
            f"Backup enthält ungültige Daten ({e.error_count()} Fehler):\n{e}"
        ) from e


def write_backup(state: BillingState, directory: Path,
                 today: Optional[date] = None) -> Path:
    """Speichert den Zustand als eingerücktes JSON und gibt den Pfad zurück."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / backup_filename(today)
    with open(path, "w", encoding="utf-8") as f:
        f.write(state.to_json(indent=2))
    return path


def read_backup(path: Path) -> BillingState:
    """Lädt eine Backup-Datei (FileNotFoundError wenn sie fehlt)."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Backup-Datei nicht gefunden: {path}")
    return parse_backup(path.read_bytes())

"""Tests für Persistenz, Backup und Restore."""

import json
from datetime import date
from pathlib import Path

import pytest

from data.backup import (
    BackupFormatError,
    backup_filename,
    parse_backup,
    read_backup,
    write_backup,
)
from data.storage import (
    STATE_KEY,
    FileKeyValueStore,
    MemoryKeyValueStore,
    load_state,
    save_state,
)
from ledger.store import StateStore
from models.billing_state import BillingState
from models.session import SessionStatus


@pytest.fixture
def filled_store() -> StateStore:
    store = StateStore(MemoryKeyValueStore())
    center = store.add_center("Bright Minds Academy")
    subject = store.add_subject("Chemistry")
    standard = store.add_standard("11")
    store.add_or_merge_rule(300)
    store.add_or_merge_rule(550, subject_id=subject, standard_id=standard)
    store.log_session(date(2026, 10, 1), center, subject, standard, 2)
    store.log_session(date(2026, 10, 20), center, subject, standard, 1,
                      SessionStatus.SCHEDULED)
    store.update_settings(tutor_name="Asha")
    return store


# Älteres Backup-Format: camelCase, Wildcards als leerer String
LEGACY_BACKUP = {
    "settings": {"tutorName": "Ravi", "theme": "dark"},
    "centers": [{"id": "c1", "name": "Apex Tutorials"}],
    "subjects": [{"id": "s1", "name": "Mathematics"}],
    "standards": [{"id": "st1", "name": "10"}],
    "rateRules": [
        {"id": "r1", "centerId": "", "subjectId": "s1", "standardId": "st1",
         "ratePerHour": 500},
        {"id": "r2", "centerId": "", "subjectId": "", "standardId": "",
         "ratePerHour": 300},
    ],
    "sessions": [
        {"id": "x1", "date": "2026-09-14", "centerId": "c1", "subjectId": "s1",
         "standardId": "st1", "duration": 1.5, "status": "completed",
         "rate": 450, "amount": 675},
    ],
}


# ─── LADEN / SPEICHERN ────────────────────────────────────────────────────────

class TestLoadSave:
    def test_absent_gives_default(self):
        state = load_state(MemoryKeyValueStore())
        assert state == BillingState()
        assert state.settings.tutor_name == "Tutor"
        assert state.settings.theme == "light"

    @pytest.mark.parametrize("raw", [
        b"{not json",
        b"[]",
        b'{"sessions": [{"id": 1}]}',
        b'{"rateRules": [{"id": "r", "ratePerHour": -3}]}',
    ])
    def test_unreadable_gives_default(self, raw: bytes):
        backend = MemoryKeyValueStore()
        backend.set(STATE_KEY, raw)
        assert load_state(backend) == BillingState()

    def test_roundtrip(self, filled_store: StateStore):
        backend = MemoryKeyValueStore()
        save_state(backend, filled_store.state)
        assert load_state(backend) == filled_store.state

    def test_fixed_key(self, filled_store: StateStore):
        backend = MemoryKeyValueStore()
        save_state(backend, filled_store.state)
        assert backend.get("tutor_billing_db") is not None
        assert len(backend) == 1

    def test_camel_case_keys(self, filled_store: StateStore):
        data = json.loads(filled_store.state.to_json())
        assert set(data) == {"settings", "centers", "subjects", "standards",
                             "rateRules", "sessions"}
        assert "tutorName" in data["settings"]
        assert "ratePerHour" in data["rateRules"][0]
        assert data["sessions"][0]["date"] == "2026-10-01"

    def test_missing_top_level_keys_default(self):
        state = BillingState.from_json('{"centers": [{"id": "c1", "name": "A"}]}')
        assert len(state.centers) == 1
        assert state.sessions == ()
        assert state.settings.tutor_name == "Tutor"


class TestFileStore:
    def test_get_missing(self, tmp_path: Path):
        assert FileKeyValueStore(tmp_path).get(STATE_KEY) is None

    def test_set_and_get(self, tmp_path: Path):
        kv = FileKeyValueStore(tmp_path / "nested")
        kv.set(STATE_KEY, b'{"a": 1}')
        assert (tmp_path / "nested" / "tutor_billing_db.json").exists()
        assert kv.get(STATE_KEY) == b'{"a": 1}'
        assert not list((tmp_path / "nested").glob("*.tmp"))

    def test_store_survives_restart(self, tmp_path: Path):
        store = StateStore(FileKeyValueStore(tmp_path))
        store.add_center("Sunrise Coaching")
        again = StateStore(FileKeyValueStore(tmp_path))
        assert [c.name for c in again.state.centers] == ["Sunrise Coaching"]


# ─── BACKUP / RESTORE ─────────────────────────────────────────────────────────

class TestBackup:
    def test_filename(self):
        assert backup_filename(date(2026, 10, 19)) == "tutor_backup_2026-10-19.json"

    def test_write_and_read(self, filled_store: StateStore, tmp_path: Path):
        path = write_backup(filled_store.state, tmp_path, today=date(2026, 10, 19))
        assert path.name == "tutor_backup_2026-10-19.json"
        assert read_backup(path) == filled_store.state

    def test_read_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            read_backup(tmp_path / "nope.json")

    def test_restore_roundtrip(self, filled_store: StateStore):
        """backup → restore in einen leeren Store ergibt denselben Zustand."""
        target = StateStore(MemoryKeyValueStore())
        target.restore(filled_store.backup_json())
        assert target.state == filled_store.state

    def test_restore_overwrites(self, filled_store: StateStore):
        other = StateStore(MemoryKeyValueStore())
        other.add_center("Only Center")
        filled_store.restore(other.backup_json())
        assert [c.name for c in filled_store.state.centers] == ["Only Center"]
        assert filled_store.state.sessions == ()

    def test_restore_is_persisted(self):
        backend = MemoryKeyValueStore()
        store = StateStore(backend)
        store.restore(json.dumps(LEGACY_BACKUP))
        assert StateStore(backend).state == store.state

    def test_legacy_backup(self):
        state = parse_backup(json.dumps(LEGACY_BACKUP))
        assert state.settings.tutor_name == "Ravi"
        assert state.settings.theme == "dark"
        assert state.rate_rules[0].scope == (None, "s1", "st1")
        assert state.rate_rules[1].specificity == 0
        session = state.sessions[0]
        assert session.date == date(2026, 9, 14)
        assert session.amount == 675

    @pytest.mark.parametrize("raw", [
        "kein json",
        b"\xc3\x28",
        "[1, 2, 3]",
        '"text"',
        '{"sessions": "falsch"}',
        '{"settings": {"theme": "purple"}}',
    ])
    def test_invalid_backup_leaves_state(self, filled_store: StateStore, raw):
        before = filled_store.state
        with pytest.raises(BackupFormatError):
            filled_store.restore(raw)
        assert filled_store.state is before

    def test_format_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_backup("{")

"""Tests für Bericht, Dashboard und Export (CSV, Excel, PDF)."""

from datetime import date
from pathlib import Path

import pytest

from analysis.dashboard import build_dashboard, month_bounds
from analysis.report import build_report
from config.schema import DisplayConfig
from data.storage import MemoryKeyValueStore
from export import CsvExporter, ExcelExporter, PdfExporter
from export.csv_export import csv_filename
from export.helpers import format_money, format_number
from export.tui_renderer import render_group_rows, render_rule_rows, render_session_rows
from ledger.pricing import sessions_newest_first
from ledger.store import StateStore
from models.session import SessionStatus


@pytest.fixture
def store() -> StateStore:
    """Zwei Center, zwei Fächer; gemischte Status und Monate."""
    s = StateStore(MemoryKeyValueStore())
    apex = s.add_center("Apex Tutorials")
    sunrise = s.add_center("Sunrise Coaching")
    math = s.add_subject("Mathematics")
    physics = s.add_subject("Physics")
    ten = s.add_standard("10")
    nine = s.add_standard("9")
    s.add_or_merge_rule(300)
    s.add_or_merge_rule(500, subject_id=math, standard_id=ten)
    s.update_settings(tutor_name="Asha")

    s.log_session(date(2026, 10, 5), apex, math, ten, 2)
    s.log_session(date(2026, 10, 2), sunrise, physics, nine, 1.5)
    s.log_session(date(2026, 10, 7), apex, math, ten, 1, SessionStatus.CANCELLED)
    s.log_session(date(2026, 10, 10), apex, math, ten, 1, SessionStatus.SCHEDULED)
    s.log_session(date(2026, 10, 20), sunrise, physics, nine, 1, SessionStatus.SCHEDULED)
    s.log_session(date(2026, 11, 3), apex, physics, ten, 1, SessionStatus.SCHEDULED)
    s.log_session(date(2026, 11, 1), apex, math, ten, 1)
    return s


@pytest.fixture
def october(store: StateStore):
    return build_report(store.state, date(2026, 10, 1), date(2026, 10, 31))


# ─── BERICHT ──────────────────────────────────────────────────────────────────

class TestReport:
    def test_only_completed_in_range(self, october):
        assert october.session_count == 2
        assert [s.date for s in october.sessions] == [date(2026, 10, 2), date(2026, 10, 5)]
        assert all(s.status == SessionStatus.COMPLETED for s in october.sessions)

    def test_totals(self, october):
        assert october.total_hours == 3.5
        assert october.total_amount == 1450

    def test_inclusive_bounds(self, store: StateStore):
        report = build_report(store.state, date(2026, 10, 5), date(2026, 11, 1))
        assert [s.date for s in report.sessions] == [date(2026, 10, 5), date(2026, 11, 1)]

    def test_center_filter(self, store: StateStore):
        apex = store.state.centers[0].id
        report = build_report(store.state, date(2026, 10, 1), date(2026, 10, 31), apex)
        assert report.session_count == 1
        assert report.total_amount == 1000
        assert report.center_id == apex

    def test_groups_in_first_appearance_order(self, october):
        assert [g.name for g in october.by_center] == ["Sunrise Coaching", "Apex Tutorials"]
        assert [g.name for g in october.by_subject] == ["Physics", "Mathematics"]
        apex = october.by_center[1]
        assert apex.hours == 2
        assert apex.amount == 1000
        assert apex.session_count == 1

    def test_group_sums_match_total(self, october):
        assert sum(g.amount for g in october.by_center) == october.total_amount
        assert sum(g.hours for g in october.by_subject) == october.total_hours

    def test_empty_range(self, store: StateStore):
        report = build_report(store.state, date(2025, 1, 1), date(2025, 1, 31))
        assert report.is_empty
        assert report.total_amount == 0
        assert report.by_center == []

    def test_orphaned_center_placeholder(self, store: StateStore):
        store.delete_center(store.state.centers[0].id)
        report = build_report(store.state, date(2026, 10, 1), date(2026, 10, 31))
        assert [g.name for g in report.by_center] == ["Sunrise Coaching", "—"]

    def test_amounts_not_recomputed(self, store: StateStore):
        """Berichte nutzen die gespeicherten Beträge, nicht die aktuellen Regeln."""
        for rule in store.state.rate_rules:
            store.delete_rule(rule.id)
        report = build_report(store.state, date(2026, 10, 1), date(2026, 10, 31))
        assert report.total_amount == 1450


# ─── DASHBOARD ────────────────────────────────────────────────────────────────

class TestDashboard:
    def test_month_bounds(self):
        assert month_bounds(date(2026, 2, 14)) == (date(2026, 2, 1), date(2026, 2, 28))
        assert month_bounds(date(2028, 2, 1)) == (date(2028, 2, 1), date(2028, 2, 29))

    def test_month_earnings(self, store: StateStore):
        summary = build_dashboard(store.state, date(2026, 10, 15))
        assert summary.earnings == 1450
        assert summary.hours == 3.5
        assert summary.session_count == 2

    def test_upcoming_scheduled_from_today(self, store: StateStore):
        summary = build_dashboard(store.state, date(2026, 10, 15))
        assert [s.date for s in summary.upcoming] == [date(2026, 10, 20), date(2026, 11, 3)]

    def test_upcoming_includes_today(self, store: StateStore):
        summary = build_dashboard(store.state, date(2026, 10, 10))
        assert summary.upcoming[0].date == date(2026, 10, 10)

    def test_upcoming_limit(self, store: StateStore):
        summary = build_dashboard(store.state, date(2026, 10, 1), upcoming_limit=1)
        assert len(summary.upcoming) == 1


class TestSessionList:
    def test_newest_first(self, store: StateStore):
        dates = [s.date for s in sessions_newest_first(store.state.sessions)]
        assert dates == sorted(dates, reverse=True)

    def test_status_filter(self, store: StateStore):
        scheduled = sessions_newest_first(store.state.sessions, SessionStatus.SCHEDULED)
        assert len(scheduled) == 3
        assert scheduled[0].date == date(2026, 11, 3)


# ─── CSV ──────────────────────────────────────────────────────────────────────

class TestCsvExport:
    def test_filename(self):
        assert csv_filename(date(2026, 10, 1), date(2026, 10, 31)) == \
            "billing_2026-10-01_2026-10-31.csv"

    def test_render(self, october, store: StateStore):
        text = CsvExporter(october, store.state).render()
        assert text == (
            "Date,Center,Subject,Standard,Hours,Rate,Amount\n"
            "2026-10-02,Sunrise Coaching,Physics,9,1.5,300,450\n"
            "2026-10-05,Apex Tutorials,Mathematics,10,2,500,1000\n"
            ",,,TOTAL,3.5,,1450\n"
        )

    def test_empty_report_has_header_and_total(self, store: StateStore):
        report = build_report(store.state, date(2025, 1, 1), date(2025, 1, 31))
        rows = CsvExporter(report, store.state).rows()
        assert len(rows) == 2
        assert rows[-1] == ["", "", "", "TOTAL", "0", "", "0"]

    def test_names_with_comma_are_quoted(self, store: StateStore):
        store.add_center("Smith, Jones & Co")
        center = store.state.centers[-1].id
        subject = store.state.subjects[0].id
        standard = store.state.standards[0].id
        store.log_session(date(2026, 10, 9), center, subject, standard, 1)
        report = build_report(store.state, date(2026, 10, 9), date(2026, 10, 9))
        assert '"Smith, Jones & Co"' in CsvExporter(report, store.state).render()

    def test_fractional_hours_not_rounded(self, store: StateStore):
        """Bruchteile von Stunden erscheinen ungerundet; Zeilen und TOTAL stimmen überein."""
        sunrise = store.state.centers[1].id
        physics = store.state.subjects[1].id
        nine = store.state.standards[1].id
        store.log_session(date(2026, 12, 1), sunrise, physics, nine, 0.125)
        store.log_session(date(2026, 12, 2), sunrise, physics, nine, 0.125)
        report = build_report(store.state, date(2026, 12, 1), date(2026, 12, 31))
        rows = CsvExporter(report, store.state).rows()
        assert rows[1][4:] == ["0.125", "300", "37.5"]
        assert rows[-1] == ["", "", "", "TOTAL", "0.25", "", "75"]

    def test_export_writes_file(self, october, store: StateStore, tmp_path: Path):
        path = CsvExporter(october, store.state).export(tmp_path / "out" / "b.csv")
        assert path.read_text(encoding="utf-8").startswith("Date,Center")


class TestFormatting:
    @pytest.mark.parametrize("value,expected", [
        (2.0, "2"), (1.5, "1.5"), (0.125, "0.125"), (1450, "1450"),
        (1 / 3, "0.3333333333333333"),
    ])
    def test_format_number(self, value, expected):
        assert format_number(value) == expected

    def test_format_money(self):
        assert format_money(12500) == "₹12,500"
        assert format_money(99.6, "€") == "€100"


# ─── EXCEL / PDF ──────────────────────────────────────────────────────────────

class TestExcelExport:
    def test_sheets_and_values(self, october, store: StateStore, tmp_path: Path):
        from openpyxl import load_workbook
        path = ExcelExporter(october, store.state).export(tmp_path / "bericht.xlsx")
        wb = load_workbook(path)
        assert wb.sheetnames == ["Abrechnung", "Nach Center", "Nach Fach"]

        ws = wb["Abrechnung"]
        assert ws.cell(row=5, column=1).value == "Date"
        assert ws.cell(row=6, column=2).value == "Sunrise Coaching"
        assert ws.cell(row=7, column=7).value == 1000
        assert ws.cell(row=8, column=4).value == "TOTAL"
        assert ws.cell(row=8, column=7).value == 1450

        groups = wb["Nach Center"]
        assert groups.cell(row=6, column=1).value == "Sunrise Coaching"
        assert groups.cell(row=8, column=1).value == "TOTAL"
        assert groups.cell(row=8, column=2).value == 2


class TestPdfExport:
    def test_creates_pdf(self, october, store: StateStore, tmp_path: Path):
        path = PdfExporter(october, store.state).export(tmp_path / "bericht.pdf")
        assert path.exists()
        assert path.read_bytes().startswith(b"%PDF")

    def test_empty_report(self, store: StateStore, tmp_path: Path):
        report = build_report(store.state, date(2025, 1, 1), date(2025, 1, 31))
        path = PdfExporter(report, store.state, DisplayConfig(currency_symbol="€")) \
            .export(tmp_path / "leer.pdf")
        assert path.stat().st_size > 0


# ─── TERMINAL ─────────────────────────────────────────────────────────────────

class TestTuiRenderer:
    def test_session_rows(self, october, store: StateStore):
        rows = render_session_rows(october.sessions, store.state, DisplayConfig())
        assert rows[0][1] == "02 Oct 2026"
        assert rows[0][2:5] == ["Sunrise Coaching", "Physics", "9"]
        assert rows[0][-1] == "[green]completed[/green]"

    def test_rule_rows_show_any(self, store: StateStore):
        rows = render_rule_rows(store.state, DisplayConfig())
        assert rows[0][1:] == ["Any", "Any", "Any", "₹300/h", "0"]
        assert rows[1][1:4] == ["Any", "Mathematics", "10"]
        assert rows[1][-1] == "2"

    def test_group_rows(self, october):
        rows = render_group_rows(october.by_center, DisplayConfig())
        assert rows[1] == ["Apex Tutorials", "1", "2.0", "₹1,000"]

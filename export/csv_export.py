"""CSV-Export des Abrechnungsberichts."""

import csv
import io
from datetime import date
from pathlib import Path

from analysis.report import BillingReport
from models.billing_state import BillingState
from export.helpers import format_number, session_names

CSV_HEADER = ["Date", "Center", "Subject", "Standard", "Hours", "Rate", "Amount"]
TOTAL_LABEL = "TOTAL"


def csv_filename(start_date: date, end_date: date) -> str:
    """Dateiname ``billing_<start>_<end>.csv``."""
    return f"billing_{start_date.isoformat()}_{end_date.isoformat()}.csv"


class CsvExporter:
    """Schreibt abgeschlossene Stunden eines Berichts als CSV.

    Aufbau: Kopfzeile, eine Zeile je Stunde (aufsteigend nach Datum), dann
    eine Summenzeile mit "TOTAL" in der Spalte Standard.
    """

    def __init__(self, report: BillingReport, state: BillingState):
        self.report = report
        self.state = state

    def rows(self) -> list[list[str]]:
        rows = [list(CSV_HEADER)]
        for s in self.report.sessions:
            center, subject, standard = session_names(s, self.state)
            rows.append([
                s.date.isoformat(), center, subject, standard,
                format_number(s.duration), format_number(s.rate),
                format_number(s.amount),
            ])
        rows.append([
            "", "", "", TOTAL_LABEL,
            format_number(self.report.total_hours), "",
            format_number(self.report.total_amount),
        ])
        return rows

    def render(self) -> str:
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerows(self.rows())
        return buf.getvalue()

    def export(self, output_path: Path) -> Path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8", newline="") as f:
            f.write(self.render())
        return output_path

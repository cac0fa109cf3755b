"""Excel-Export des Abrechnungsberichts (openpyxl)."""

from pathlib import Path

from analysis.report import BillingReport, GroupTotals
from config.schema import DisplayConfig
from models.billing_state import BillingState

from export.helpers import COLORS, format_date, session_names, today_str


class ExcelExporter:
    """Exportiert einen BillingReport in eine Excel-Datei mit drei Sheets."""

    # Spaltenbreiten (Excel-Einheiten)
    COL_DATE_W = 14
    COL_NAME_W = 24
    COL_NUM_W  = 12

    # Zeilenhöhen (Punkte)
    ROW_HEADER_H = 22

    MONEY_FORMAT = "#,##0.00"
    HOURS_FORMAT = "0.00"

    def __init__(self, report: BillingReport, state: BillingState,
                 display: DisplayConfig | None = None):
        self.report  = report
        self.state   = state
        self.display = display or DisplayConfig()

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def export(self, output_path: Path) -> Path:
        """Erstellt die Excel-Datei mit Abrechnung und Gruppensummen."""
        from openpyxl import Workbook
        wb = Workbook()
        wb.remove(wb.active)   # Leeres Standard-Sheet entfernen

        self._sheet_abrechnung(wb)
        self._sheet_groups(wb, "Nach Center", "Center", self.report.by_center)
        self._sheet_groups(wb, "Nach Fach", "Subject", self.report.by_subject)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)
        return output_path

    # ─── Style-Helpers ────────────────────────────────────────────────────────

    def _fill(self, hex_color: str):
        from openpyxl.styles import PatternFill
        return PatternFill(start_color=hex_color, end_color=hex_color, fill_type="solid")

    def _thin_border(self):
        from openpyxl.styles import Border, Side
        s = Side(border_style="thin", color="BBBBBB")
        return Border(left=s, right=s, top=s, bottom=s)

    def _write_header_row(self, ws, row: int, headers: list[str]) -> None:
        """Schreibt eine Kopfzeile in weißer Schrift auf Header-Farbe."""
        from openpyxl.styles import Alignment, Font
        fill = self._fill(COLORS["header"])
        border = self._thin_border()
        for col, text in enumerate(headers, 1):
            cell = ws.cell(row=row, column=col, value=text)
            cell.fill = fill
            cell.font = Font(bold=True, color="FFFFFF", size=10)
            cell.alignment = Alignment(horizontal="center", vertical="center")
            cell.border = border
        ws.row_dimensions[row].height = self.ROW_HEADER_H

    def _write_title(self, ws, title: str) -> int:
        """Titel + Zeitraum; gibt die nächste freie Zeile zurück."""
        from openpyxl.styles import Font
        fmt = self.display.date_format
        ws.cell(row=1, column=1, value=title).font = Font(bold=True, size=14)
        ws.cell(row=2, column=1, value=(
            f"{self.state.settings.tutor_name}  |  "
            f"{format_date(self.report.start_date, fmt)} – "
            f"{format_date(self.report.end_date, fmt)}"
        ))
        if self.report.center_id:
            ws.cell(row=2, column=5,
                    value=f"Center: {self.state.center_name(self.report.center_id)}")
        ws.cell(row=3, column=1, value=f"Erstellt: {today_str()}")
        return 5

    # ─── Sheet: Abrechnung ────────────────────────────────────────────────────

    def _sheet_abrechnung(self, wb) -> None:
        from openpyxl.styles import Font
        from openpyxl.utils import get_column_letter
        ws = wb.create_sheet(title="Abrechnung")
        row = self._write_title(ws, "Abrechnung")

        headers = ["Date", "Center", "Subject", "Standard", "Hours", "Rate", "Amount"]
        self._write_header_row(ws, row, headers)
        row += 1

        border = self._thin_border()
        for i, s in enumerate(self.report.sessions):
            center, subject, standard = session_names(s, self.state)
            values = [s.date, center, subject, standard, s.duration, s.rate, s.amount]
            for col, value in enumerate(values, 1):
                c = ws.cell(row=row, column=col, value=value)
                c.border = border
                if i % 2 == 1:
                    c.fill = self._fill(COLORS["zebra"])
            ws.cell(row=row, column=1).number_format = "yyyy-mm-dd"
            ws.cell(row=row, column=5).number_format = self.HOURS_FORMAT
            ws.cell(row=row, column=6).number_format = self.MONEY_FORMAT
            ws.cell(row=row, column=7).number_format = self.MONEY_FORMAT
            row += 1

        # Summenzeile
        total_fill = self._fill(COLORS["total"])
        totals = ["", "", "", "TOTAL", self.report.total_hours, "",
                  self.report.total_amount]
        for col, value in enumerate(totals, 1):
            c = ws.cell(row=row, column=col, value=value)
            c.font = Font(bold=True)
            c.fill = total_fill
            c.border = border
        ws.cell(row=row, column=5).number_format = self.HOURS_FORMAT
        ws.cell(row=row, column=7).number_format = self.MONEY_FORMAT

        ws.column_dimensions["A"].width = self.COL_DATE_W
        for col in range(2, 5):
            ws.column_dimensions[get_column_letter(col)].width = self.COL_NAME_W
        for col in range(5, 8):
            ws.column_dimensions[get_column_letter(col)].width = self.COL_NUM_W

    # ─── Sheet: Gruppensummen ─────────────────────────────────────────────────

    def _sheet_groups(self, wb, title: str, label: str,
                      groups: list[GroupTotals]) -> None:
        from openpyxl.styles import Font
        ws = wb.create_sheet(title=title)
        row = self._write_title(ws, title)

        self._write_header_row(ws, row, [label, "Sessions", "Hours", "Amount"])
        row += 1

        border = self._thin_border()
        for g in groups:
            for col, value in enumerate(
                [g.name, g.session_count, g.hours, g.amount], 1
            ):
                ws.cell(row=row, column=col, value=value).border = border
            ws.cell(row=row, column=3).number_format = self.HOURS_FORMAT
            ws.cell(row=row, column=4).number_format = self.MONEY_FORMAT
            row += 1

        total_fill = self._fill(COLORS["total"])
        for col, value in enumerate(
            ["TOTAL", self.report.session_count,
             self.report.total_hours, self.report.total_amount], 1
        ):
            c = ws.cell(row=row, column=col, value=value)
            c.font = Font(bold=True)
            c.fill = total_fill
            c.border = border
        ws.cell(row=row, column=3).number_format = self.HOURS_FORMAT
        ws.cell(row=row, column=4).number_format = self.MONEY_FORMAT

        ws.column_dimensions["A"].width = self.COL_NAME_W
        for letter in ("B", "C", "D"):
            ws.column_dimensions[letter].width = self.COL_NUM_W

"""PDF-Export des Abrechnungsberichts zum Ausdrucken (fpdf2)."""

from pathlib import Path

from analysis.report import BillingReport, GroupTotals
from config.schema import DisplayConfig
from models.billing_state import BillingState
from models.session import Session

from export.helpers import (
    COLORS, hex_to_rgb, format_date, format_hours, format_money, today_str,
)


def _pdf_safe(text: str) -> str:
    """Ersetzt nicht-latin-1-fähige Zeichen für fpdf2-Built-in-Fonts."""
    return (
        text
        .replace("₹", "Rs.")    # Rupien-Zeichen ₹
        .replace("€", "EUR ")   # Euro-Zeichen €
        .replace("—", "-")      # em dash —
        .replace("–", "-")      # en dash –
        .encode("latin-1", errors="replace").decode("latin-1")
    )


# ─── A4-Hochformat-Dimensionen ────────────────────────────────────────────────
# Portrait A4: 210 × 297 mm, nutzbare Breite (Margin 15 links+rechts): 180 mm
# Spalten Stunden-Tabelle: Datum(28) + Fach(40) + Stufe(28) + Std.(20) + Satz(30) + Betrag(34) = 180 mm

_SESSION_COLS = [
    ("Date", 28, "L"),
    ("Subject", 40, "L"),
    ("Standard", 28, "L"),
    ("Hours", 20, "R"),
    ("Rate", 30, "R"),
    ("Amount", 34, "R"),
]
_GROUP_COLS = [
    ("Subject", 80, "L"),
    ("Sessions", 30, "R"),
    ("Hours", 30, "R"),
    ("Amount", 40, "R"),
]
_ROW_H        = 7     # mm
_FONT_TITLE   = 16    # pt
_FONT_HEADER  = 9     # pt
_FONT_CONTENT = 9     # pt


class _ReportPdf:
    """Interner Wrapper um fpdf.FPDF für Abrechnungs-Seiten."""

    def __init__(self, tutor_name: str):
        from fpdf import FPDF

        class _Pdf(FPDF):
            def __init__(inner, tn):
                super().__init__(orientation="P", unit="mm", format="A4")
                inner._tutor_name = tn
                inner.alias_nb_pages()
                inner.set_auto_page_break(auto=True, margin=18)
                inner.set_margins(left=15, top=15, right=15)

            def footer(inner):
                inner.set_y(-14)
                inner.set_font("Helvetica", "I", 7)
                inner.cell(
                    0, 8,
                    _pdf_safe(f"{inner._tutor_name}  |  {today_str()}  |  "
                              f"Seite {inner.page_no()}/{{nb}}"),
                    border=0, align="C",
                )

        self._pdf = _Pdf(tutor_name)

    @property
    def pdf(self):
        return self._pdf

    def add_page(self) -> None:
        self._pdf.add_page()

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self._pdf.output(str(path))

    # ─── Zeilen ───────────────────────────────────────────────────────────────

    def text_line(self, text: str, size: int = _FONT_CONTENT, style: str = "",
                  h: float = _ROW_H) -> None:
        self._pdf.set_font("Helvetica", style, size)
        self._pdf.cell(0, h, _pdf_safe(text), border=0, align="L")
        self._pdf.ln(h)

    def header_row(self, cols: list[tuple[str, float, str]]) -> None:
        """Kopfzeile in weißer Schrift auf Header-Farbe."""
        pdf = self._pdf
        pdf.set_font("Helvetica", "B", _FONT_HEADER)
        pdf.set_fill_color(*hex_to_rgb(COLORS["header"]))
        pdf.set_text_color(255, 255, 255)
        for label, w, align in cols:
            pdf.cell(w, _ROW_H, label, border=1, align=align, fill=True)
        pdf.ln(_ROW_H)
        pdf.set_text_color(0, 0, 0)

    def data_row(self, cols: list[tuple[str, float, str]], values: list[str],
                 bold: bool = False, bg_hex: str | None = None) -> None:
        pdf = self._pdf
        pdf.set_font("Helvetica", "B" if bold else "", _FONT_CONTENT)
        if bg_hex:
            pdf.set_fill_color(*hex_to_rgb(bg_hex))
        for (_, w, align), value in zip(cols, values):
            pdf.cell(w, _ROW_H, _pdf_safe(value), border=1, align=align,
                     fill=bg_hex is not None)
        pdf.ln(_ROW_H)


class PdfExporter:
    """Exportiert einen BillingReport als druckbare PDF, gruppiert nach Center."""

    def __init__(self, report: BillingReport, state: BillingState,
                 display: DisplayConfig | None = None):
        self.report  = report
        self.state   = state
        self.display = display or DisplayConfig()

    def _money(self, amount: float) -> str:
        return format_money(amount, self.display.currency_symbol)

    def _date(self, session: Session) -> str:
        return format_date(session.date, self.display.date_format)

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def export(self, output_path: Path) -> Path:
        """Erzeugt die PDF: Kopf, Kennzahlen, ein Abschnitt je Center, Fach-Summen."""
        doc = _ReportPdf(self.state.settings.tutor_name)
        doc.add_page()
        self._draw_heading(doc)

        if self.report.is_empty:
            doc.text_line("Keine abgeschlossenen Stunden im Zeitraum.", style="I")
        else:
            for group in self.report.by_center:
                self._draw_center_section(doc, group)
            self._draw_subject_table(doc)
            doc.text_line("")
            doc.text_line(
                f"Gesamt: {format_hours(self.report.total_hours)} h  |  "
                f"{self._money(self.report.total_amount)}",
                size=11, style="B",
            )

        output_path = Path(output_path)
        doc.save(output_path)
        return output_path

    # ─── Abschnitte ───────────────────────────────────────────────────────────

    def _draw_heading(self, doc: _ReportPdf) -> None:
        fmt = self.display.date_format
        doc.text_line("Billing Report", size=_FONT_TITLE, style="B", h=10)
        period = (
            f"{self.state.settings.tutor_name}  |  "
            f"{format_date(self.report.start_date, fmt)} - "
            f"{format_date(self.report.end_date, fmt)}"
        )
        if self.report.center_id:
            period += f"  |  Center: {self.state.center_name(self.report.center_id)}"
        doc.text_line(period)
        doc.text_line(
            f"Sessions: {self.report.session_count}    "
            f"Hours: {format_hours(self.report.total_hours)}    "
            f"Amount: {self._money(self.report.total_amount)}",
            style="B",
        )
        doc.text_line("")

    def _draw_center_section(self, doc: _ReportPdf, group: GroupTotals) -> None:
        doc.text_line(group.name, size=12, style="B", h=9)
        doc.header_row(_SESSION_COLS)
        sessions = [s for s in self.report.sessions if s.center_id == group.key]
        for i, s in enumerate(sessions):
            doc.data_row(_SESSION_COLS, [
                self._date(s),
                self.state.subject_name(s.subject_id),
                self.state.standard_name(s.standard_id),
                format_hours(s.duration),
                self._money(s.rate),
                self._money(s.amount),
            ], bg_hex=COLORS["zebra"] if i % 2 == 1 else None)
        doc.data_row(_SESSION_COLS, [
            "", "", "Subtotal", format_hours(group.hours), "",
            self._money(group.amount),
        ], bold=True, bg_hex=COLORS["total"])
        doc.text_line("", h=4)

    def _draw_subject_table(self, doc: _ReportPdf) -> None:
        doc.text_line("By Subject", size=12, style="B", h=9)
        doc.header_row(_GROUP_COLS)
        for g in self.report.by_subject:
            doc.data_row(_GROUP_COLS, [
                g.name, str(g.session_count), format_hours(g.hours),
                self._money(g.amount),
            ])

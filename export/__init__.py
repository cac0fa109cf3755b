"""Export-Modul: CSV, Excel (openpyxl) und PDF (fpdf2) für den Abrechnungsbericht."""

from export.csv_export import CsvExporter
from export.excel_export import ExcelExporter
from export.pdf_export import PdfExporter

__all__ = ["CsvExporter", "ExcelExporter", "PdfExporter"]

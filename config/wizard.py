"""Interaktiver Setup-Wizard für die Ersteinrichtung der Abrechnung.

Fragt Speicherorte, Anzeige-Formate und den Namen der Tutorin bzw. des Tutors ab.
Nutzt rich für die Konsolenausgabe.
"""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table
from rich import box

from config.schema import AppConfig, DisplayConfig, StorageConfig
from config.defaults import default_display, default_storage

console = Console()


def _header(title: str) -> None:
    console.print()
    console.print(Panel(f"[bold cyan]{title}[/bold cyan]", expand=False))


def _info(text: str) -> None:
    console.print(f"[dim]{text}[/dim]")


def _success(text: str) -> None:
    console.print(f"[green]✓[/green] {text}")


def _warn(text: str) -> None:
    console.print(f"[yellow]⚠[/yellow]  {text}")


# ─── SCHRITT 1: Tutor ───

def _wizard_tutor() -> str:
    _header("Schritt 1 — Tutor")
    name = Prompt.ask("Ihr Name (erscheint auf Berichten)", default="Tutor").strip()
    return name or "Tutor"


# ─── SCHRITT 2: Speicherorte ───

def _wizard_storage() -> StorageConfig:
    _header("Schritt 2 — Speicherorte")
    defaults = default_storage()
    _info("Relative Pfade beziehen sich auf das aktuelle Arbeitsverzeichnis.")
    return StorageConfig(
        data_dir=Prompt.ask("Datenverzeichnis", default=defaults.data_dir),
        export_dir=Prompt.ask("Berichtsverzeichnis", default=defaults.export_dir),
        backup_dir=Prompt.ask("Backup-Verzeichnis", default=defaults.backup_dir),
    )


# ─── SCHRITT 3: Anzeige ───

def _wizard_display() -> DisplayConfig:
    _header("Schritt 3 — Anzeige")
    defaults = default_display()
    symbol = Prompt.ask("Währungssymbol", default=defaults.currency_symbol)
    date_format = Prompt.ask("Datumsformat (strftime)", default=defaults.date_format)
    limit = IntPrompt.ask("Anstehende Stunden auf dem Dashboard",
                          default=defaults.upcoming_limit)
    try:
        return DisplayConfig(currency_symbol=symbol, date_format=date_format,
                             upcoming_limit=limit)
    except ValueError as e:
        _warn(f"Validierungsfehler: {e}")
        _warn("Standard-Anzeige wird verwendet.")
        return defaults


def _show_summary(config: AppConfig, tutor_name: str) -> None:
    table = Table(title="Zusammenfassung", box=box.ROUNDED)
    table.add_column("Bereich", style="bold")
    table.add_column("Wert")
    table.add_row("Tutor", tutor_name)
    table.add_row("Datenverzeichnis", config.storage.data_dir)
    table.add_row("Berichte", config.storage.export_dir)
    table.add_row("Backups", config.storage.backup_dir)
    table.add_row("Währung", config.display.currency_symbol)
    table.add_row("Datumsformat", config.display.date_format)
    console.print(table)


# ─── HAUPT-WIZARD ───

def run_wizard() -> Optional[tuple[AppConfig, str]]:
    """Führt den interaktiven Setup-Wizard aus.

    Returns:
        (AppConfig, Tutor-Name) oder None, wenn der Nutzer abbricht.
    """
    console.print()
    console.print(Panel(
        "[bold]Willkommen bei der Nachhilfe-Abrechnung![/bold]\n\n"
        "Der Wizard richtet Speicherorte und Anzeige ein.\n"
        "Center, Fächer, Klassenstufen und Stundensätze legen Sie danach\n"
        "mit [bold]center add[/bold], [bold]subject add[/bold], "
        "[bold]standard add[/bold] und [bold]rate add[/bold] an.\n\n"
        "[dim]Standard-Werte können mit Enter übernommen werden.[/dim]",
        title="[bold cyan]Nachhilfe-Abrechnung[/bold cyan]",
        border_style="cyan",
    ))

    if not Confirm.ask("\nMöchten Sie jetzt einrichten?", default=True):
        console.print("[yellow]Einrichtung abgebrochen.[/yellow]")
        return None

    try:
        tutor_name = _wizard_tutor()
        config = AppConfig(storage=_wizard_storage(), display=_wizard_display())

        _show_summary(config, tutor_name)

        if not Confirm.ask("\nKonfiguration speichern?", default=True):
            console.print("[yellow]Konfiguration wird nicht gespeichert.[/yellow]")
            return None

        _success("Konfiguration wird gespeichert...")
        return config, tutor_name

    except KeyboardInterrupt:
        console.print("\n[yellow]Wizard abgebrochen.[/yellow]")
        return None

"""Nachhilfe-Abrechnung — Haupt-CLI.

Verwendung:
  python main.py setup                          Ersteinrichtung (Wizard)
  python main.py config show                    Konfiguration anzeigen
  python main.py center add|list|delete         Center verwalten
  python main.py subject add|list|delete        Fächer verwalten
  python main.py standard add|list|delete       Klassenstufen verwalten
  python main.py rate add|edit|list|delete      Tarifregeln verwalten
  python main.py rate explain                   Stundensatz für einen Kontext erklären
  python main.py session log|edit|list|delete   Unterrichtsstunden erfassen
  python main.py dashboard                      Monatsübersicht
  python main.py report --csv --xlsx --pdf      Abrechnung für einen Zeitraum
  python main.py backup                         Datenbestand sichern
  python main.py restore <datei.json>           Datenbestand wiederherstellen
  python main.py settings show|name|theme       Einstellungen
  python main.py demo                           Demo-Daten erzeugen
"""

import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()

_STATUS_CHOICES = ["completed", "scheduled", "cancelled"]
_DATE_TYPE = click.DateTime(formats=["%Y-%m-%d"])


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _load_config():
    """Konfiguration laden; ohne Datei gelten die Standardwerte."""
    from config.manager import ConfigManager
    try:
        return ConfigManager().load_or_default()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)


def _open_store(config=None):
    """Öffnet den StateStore im konfigurierten Datenverzeichnis."""
    from data.storage import FileKeyValueStore
    from ledger.store import StateStore
    config = config or _load_config()
    return StateStore(FileKeyValueStore(Path(config.storage.data_dir)))


def _resolve_ref(entries, value: Optional[str], label: str) -> Optional[str]:
    """Findet einen Katalogeintrag per ID oder Name (ohne Groß-/Kleinschreibung)."""
    if value is None:
        return None
    for e in entries:
        if e.id == value:
            return e.id
    wanted = value.strip().casefold()
    for e in entries:
        if e.name.casefold() == wanted:
            return e.id
    console.print(f"[red]{label} '{value}' nicht gefunden.[/red]")
    sys.exit(1)


def _date_or_today(value) -> date:
    return value.date() if value is not None else date.today()


def _session_table(title: str, sessions, state, display, with_status: bool = True) -> Table:
    from export.tui_renderer import render_session_rows
    table = Table(title=title, box=box.ROUNDED)
    for col in ("ID", "Datum", "Center", "Fach", "Stufe"):
        table.add_column(col, style="dim" if col == "ID" else None)
    for col in ("Std.", "Satz", "Betrag"):
        table.add_column(col, justify="right")
    if with_status:
        table.add_column("Status")
    for row in render_session_rows(sessions, state, display, with_status):
        table.add_row(*row)
    return table


# ─── SETUP ────────────────────────────────────────────────────────────────────

@click.command("setup")
def cmd_setup():
    """Ersteinrichtung: Speicherorte, Anzeige und Tutor-Namen festlegen."""
    from config.wizard import run_wizard
    from config.manager import ConfigManager

    mgr = ConfigManager()
    if not mgr.first_run_check():
        console.print("[yellow]Eine Konfiguration existiert bereits.[/yellow]")
        if not click.confirm("Trotzdem neu einrichten?", default=False):
            return

    result = run_wizard()
    if result is None:
        return
    config, tutor_name = result
    mgr.save(config)
    _open_store(config).update_settings(tutor_name=tutor_name)
    console.print("[bold green]Einrichtung abgeschlossen![/bold green]")
    console.print("Legen Sie jetzt mit [bold]python main.py center add[/bold] ein Center an.")


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen."""


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuelle Konfiguration an."""
    from config.manager import ConfigManager
    ConfigManager().show(_load_config())


# ─── KATALOGE ─────────────────────────────────────────────────────────────────

def _catalog_group(name: str, label: str, plural: str, attr: str):
    """Baut die Gruppe add|list|delete für einen Katalog (Center, Fach, Stufe)."""

    @click.group(name, help=f"{plural} verwalten.")
    def group():
        pass

    @group.command("add", help=f"Legt {label} an.")
    @click.argument("entry_name")
    def add(entry_name: str):
        store = _open_store()
        entry_id = getattr(store, f"add_{name}")(entry_name)
        if entry_id is None:
            console.print("[red]Name darf nicht leer sein.[/red]")
            sys.exit(1)
        console.print(f"[green]✓[/green] {entry_name.strip()} angelegt (ID {entry_id}).")

    @group.command("list", help=f"Listet alle {plural} auf.")
    def list_():
        entries = getattr(_open_store().state, attr)
        if not entries:
            console.print(f"[dim]Keine {plural} vorhanden.[/dim]")
            return
        table = Table(title=plural, box=box.ROUNDED)
        table.add_column("ID", style="dim")
        table.add_column("Name", style="bold")
        for e in entries:
            table.add_row(e.id, e.name)
        console.print(table)

    @group.command("delete", help=f"Löscht {label}; Stunden und Regeln bleiben erhalten.")
    @click.argument("ref")
    def delete(ref: str):
        store = _open_store()
        entry_id = _resolve_ref(getattr(store.state, attr), ref, label)
        getattr(store, f"delete_{name}")(entry_id)
        console.print(f"[green]✓[/green] {label} gelöscht.")

    return group


cmd_center = _catalog_group("center", "Center", "Center", "centers")
cmd_subject = _catalog_group("subject", "Fach", "Fächer", "subjects")
cmd_standard = _catalog_group("standard", "Klassenstufe", "Klassenstufen", "standards")


# ─── TARIFREGELN ──────────────────────────────────────────────────────────────

def _scope_options(f):
    f = click.option("--standard", default=None, help="Klassenstufe (ID/Name); leer = Any.")(f)
    f = click.option("--subject", default=None, help="Fach (ID/Name); leer = Any.")(f)
    f = click.option("--center", default=None, help="Center (ID/Name); leer = Any.")(f)
    return f


def _resolve_scope(state, center, subject, standard):
    return (
        _resolve_ref(state.centers, center, "Center"),
        _resolve_ref(state.subjects, subject, "Fach"),
        _resolve_ref(state.standards, standard, "Klassenstufe"),
    )


@click.group("rate")
def cmd_rate():
    """Stundensätze (Tarifregeln) verwalten."""


@cmd_rate.command("add")
@click.argument("rate", type=float)
@_scope_options
def rate_add(rate: float, center, subject, standard):
    """Legt eine Regel an; bei gleichem Scope wird der Satz überschrieben."""
    store = _open_store()
    scope = _resolve_scope(store.state, center, subject, standard)
    before = len(store.state.rate_rules)
    rule_id = store.add_or_merge_rule(rate, *scope)
    if rule_id is None:
        console.print("[red]Der Stundensatz muss größer als 0 sein.[/red]")
        sys.exit(1)
    verb = "angelegt" if len(store.state.rate_rules) > before else "aktualisiert"
    console.print(f"[green]✓[/green] Regel {rule_id} {verb}.")


@cmd_rate.command("edit")
@click.argument("rule_id")
@click.argument("rate", type=float)
@_scope_options
def rate_edit(rule_id: str, rate: float, center, subject, standard):
    """Überschreibt Scope und Satz einer Regel (nicht angegebene Felder = Any)."""
    store = _open_store()
    scope = _resolve_scope(store.state, center, subject, standard)
    if not store.update_rule(rule_id, rate, *scope):
        console.print("[red]Regel nicht gefunden oder Satz ungültig.[/red]")
        sys.exit(1)
    console.print(f"[green]✓[/green] Regel {rule_id} aktualisiert.")


@cmd_rate.command("list")
def rate_list():
    """Listet alle Tarifregeln in Speicherreihenfolge."""
    from export.tui_renderer import render_rule_rows
    config = _load_config()
    state = _open_store(config).state
    if not state.rate_rules:
        console.print("[dim]Keine Tarifregeln vorhanden.[/dim]")
        return
    table = Table(title="Tarifregeln", box=box.ROUNDED)
    table.add_column("ID", style="dim")
    table.add_column("Center")
    table.add_column("Fach")
    table.add_column("Stufe")
    table.add_column("Satz", justify="right", style="bold")
    table.add_column("Felder", justify="right", style="dim")
    for row in render_rule_rows(state, config.display):
        table.add_row(*row)
    console.print(table)


@cmd_rate.command("delete")
@click.argument("rule_id")
def rate_delete(rule_id: str):
    """Löscht eine Tarifregel; erfasste Stunden behalten ihren Satz."""
    store = _open_store()
    if store.state.find_rule(rule_id) is None:
        console.print(f"[red]Regel '{rule_id}' nicht gefunden.[/red]")
        sys.exit(1)
    store.delete_rule(rule_id)
    console.print(f"[green]✓[/green] Regel {rule_id} gelöscht.")


@cmd_rate.command("explain")
@click.option("--center", required=True, help="Center (ID/Name).")
@click.option("--subject", required=True, help="Fach (ID/Name).")
@click.option("--standard", required=True, help="Klassenstufe (ID/Name).")
def rate_explain(center, subject, standard):
    """Zeigt, welche Regel für einen Kontext greift."""
    from export.helpers import format_money
    from ledger.rates import match_rule
    config = _load_config()
    state = _open_store(config).state
    scope = _resolve_scope(state, center, subject, standard)
    match = match_rule(state.rate_rules, *scope)
    if match is None:
        console.print("[yellow]Keine passende Regel: Satz 0.[/yellow]")
        return
    c, s, st = state.rule_scope_names(match.rule)
    console.print(Panel(
        f"Stufe [bold]{match.tier}[/bold] von 8  |  Regel {match.rule.id}\n"
        f"Center: {c}  |  Fach: {s}  |  Stufe: {st}\n"
        f"Satz: [bold]{format_money(match.rate, config.display.currency_symbol)}/h[/bold]",
        title="Stundensatz",
        border_style="cyan",
    ))


# ─── STUNDEN ──────────────────────────────────────────────────────────────────

@click.group("session")
def cmd_session():
    """Unterrichtsstunden erfassen und bearbeiten."""


@cmd_session.command("log")
@click.option("--date", "session_date", type=_DATE_TYPE, default=None,
              help="Datum (YYYY-MM-DD), Standard: heute.")
@click.option("--center", required=True, help="Center (ID/Name).")
@click.option("--subject", required=True, help="Fach (ID/Name).")
@click.option("--standard", required=True, help="Klassenstufe (ID/Name).")
@click.option("--hours", type=float, required=True, help="Dauer in Stunden.")
@click.option("--status", type=click.Choice(_STATUS_CHOICES), default="completed",
              show_default=True)
def session_log(session_date, center, subject, standard, hours, status):
    """Erfasst eine Stunde; Satz und Betrag werden sofort festgeschrieben."""
    from export.helpers import format_money
    config = _load_config()
    store = _open_store(config)
    scope = _resolve_scope(store.state, center, subject, standard)
    session = store.log_session(_date_or_today(session_date), *scope, hours, status)
    if session is None:
        console.print("[red]Ungültige Eingabe: Dauer muss größer als 0 sein.[/red]")
        sys.exit(1)
    symbol = config.display.currency_symbol
    console.print(
        f"[green]✓[/green] Stunde {session.id} erfasst: "
        f"{format_money(session.rate, symbol)}/h → {format_money(session.amount, symbol)}"
    )
    if session.rate == 0:
        console.print("[yellow]⚠  Keine passende Tarifregel, Satz 0.[/yellow]")


@cmd_session.command("edit")
@click.argument("session_id")
@click.option("--date", "session_date", type=_DATE_TYPE, default=None)
@click.option("--center", default=None)
@click.option("--subject", default=None)
@click.option("--standard", default=None)
@click.option("--hours", type=float, default=None)
@click.option("--status", type=click.Choice(_STATUS_CHOICES), default=None)
def session_edit(session_id, session_date, center, subject, standard, hours, status):
    """Ändert eine Stunde; sie wird mit den aktuellen Regeln neu bepreist."""
    store = _open_store()
    current = store.state.find_session(session_id)
    if current is None:
        console.print(f"[red]Stunde '{session_id}' nicht gefunden.[/red]")
        sys.exit(1)
    c, s, st = _resolve_scope(store.state, center, subject, standard)
    session = store.revise_session(
        session_id,
        session_date.date() if session_date is not None else current.date,
        c or current.center_id,
        s or current.subject_id,
        st or current.standard_id,
        hours if hours is not None else current.duration,
        status or current.status,
    )
    if session is None:
        console.print("[red]Ungültige Eingabe.[/red]")
        sys.exit(1)
    console.print(f"[green]✓[/green] Stunde {session_id} aktualisiert.")


@cmd_session.command("list")
@click.option("--status", type=click.Choice(_STATUS_CHOICES), default=None,
              help="Nur Stunden mit diesem Status.")
@click.option("--limit", type=int, default=None, help="Maximale Anzahl Zeilen.")
def session_list(status, limit):
    """Listet Stunden, neueste zuerst."""
    from ledger.pricing import sessions_newest_first
    from models.session import SessionStatus
    config = _load_config()
    state = _open_store(config).state
    sessions = sessions_newest_first(
        state.sessions, SessionStatus(status) if status else None
    )
    if limit is not None:
        sessions = sessions[:limit]
    if not sessions:
        console.print("[dim]Keine Stunden vorhanden.[/dim]")
        return
    console.print(_session_table("Stunden", sessions, state, config.display))


@cmd_session.command("delete")
@click.argument("session_id")
def session_delete(session_id: str):
    """Löscht eine Stunde."""
    store = _open_store()
    if store.state.find_session(session_id) is None:
        console.print(f"[red]Stunde '{session_id}' nicht gefunden.[/red]")
        sys.exit(1)
    store.delete_session(session_id)
    console.print(f"[green]✓[/green] Stunde {session_id} gelöscht.")


# ─── DASHBOARD ────────────────────────────────────────────────────────────────

@click.command("dashboard")
def cmd_dashboard():
    """Verdienst im laufenden Monat und anstehende Stunden."""
    from analysis.dashboard import build_dashboard
    from export.helpers import format_hours, format_money
    config = _load_config()
    state = _open_store(config).state
    summary = build_dashboard(state, date.today(), config.display.upcoming_limit)

    console.print(Panel(
        f"[bold]{state.settings.tutor_name}[/bold]\n\n"
        f"Verdienst: [bold green]"
        f"{format_money(summary.earnings, config.display.currency_symbol)}[/bold green]\n"
        f"Stunden: {format_hours(summary.hours)} h in {summary.session_count} Einheiten",
        title=f"{summary.month_start:%B %Y}",
        border_style="cyan",
    ))
    if summary.upcoming:
        console.print(_session_table(
            "Anstehend", summary.upcoming, state, config.display, with_status=False
        ))
    else:
        console.print("[dim]Keine anstehenden Stunden.[/dim]")


# ─── REPORT ───────────────────────────────────────────────────────────────────

@click.command("report")
@click.option("--from", "start", type=_DATE_TYPE, default=None,
              help="Erster Tag (YYYY-MM-DD), Standard: Monatsanfang.")
@click.option("--to", "end", type=_DATE_TYPE, default=None,
              help="Letzter Tag (YYYY-MM-DD), Standard: heute.")
@click.option("--center", default=None, help="Nur dieses Center (ID/Name).")
@click.option("--csv", "as_csv", is_flag=True, default=False, help="CSV exportieren.")
@click.option("--xlsx", "as_xlsx", is_flag=True, default=False, help="Excel exportieren.")
@click.option("--pdf", "as_pdf", is_flag=True, default=False, help="PDF exportieren.")
def cmd_report(start, end, center, as_csv, as_xlsx, as_pdf):
    """Abrechnung abgeschlossener Stunden für einen Zeitraum."""
    from analysis.report import build_report
    from export import CsvExporter, ExcelExporter, PdfExporter
    from export.csv_export import csv_filename
    from export.helpers import format_hours, format_money
    from export.tui_renderer import render_group_rows

    config = _load_config()
    state = _open_store(config).state
    today = date.today()
    start_date = start.date() if start is not None else today.replace(day=1)
    end_date = end.date() if end is not None else today
    if start_date > end_date:
        console.print("[red]Der Zeitraum ist leer: --from liegt nach --to.[/red]")
        sys.exit(1)
    center_id = _resolve_ref(state.centers, center, "Center")

    report = build_report(state, start_date, end_date, center_id)
    display = config.display

    if report.is_empty:
        console.print("[dim]Keine abgeschlossenen Stunden im Zeitraum.[/dim]")
    else:
        console.print(_session_table("Abrechnung", report.sessions, state, display,
                                     with_status=False))
        for title, groups in (("Nach Center", report.by_center),
                              ("Nach Fach", report.by_subject)):
            table = Table(title=title, box=box.SIMPLE)
            table.add_column("Name", style="bold")
            table.add_column("Einheiten", justify="right")
            table.add_column("Std.", justify="right")
            table.add_column("Betrag", justify="right")
            for row in render_group_rows(groups, display):
                table.add_row(*row)
            console.print(table)
        console.print(
            f"[bold]Gesamt:[/bold] {format_hours(report.total_hours)} h  |  "
            f"[bold green]{format_money(report.total_amount, display.currency_symbol)}"
            f"[/bold green]"
        )

    out_dir = Path(config.storage.export_dir)
    stem = csv_filename(start_date, end_date)[: -len(".csv")]
    if as_csv:
        path = CsvExporter(report, state).export(out_dir / f"{stem}.csv")
        console.print(f"[green]✓[/green] CSV: {path}")
    if as_xlsx:
        path = ExcelExporter(report, state, display).export(out_dir / f"{stem}.xlsx")
        console.print(f"[green]✓[/green] Excel: {path}")
    if as_pdf:
        path = PdfExporter(report, state, display).export(out_dir / f"{stem}.pdf")
        console.print(f"[green]✓[/green] PDF: {path}")


# ─── BACKUP / RESTORE ─────────────────────────────────────────────────────────

@click.command("backup")
def cmd_backup():
    """Sichert den kompletten Datenbestand als JSON-Datei."""
    from data.backup import write_backup
    config = _load_config()
    store = _open_store(config)
    path = write_backup(store.state, Path(config.storage.backup_dir))
    console.print(f"[green]✓[/green] Backup gespeichert: {path}")
    console.print(f"[dim]{store.state.summary()}[/dim]")


@click.command("restore")
@click.argument("datei", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--yes", "-y", is_flag=True, default=False, help="Ohne Rückfrage.")
def cmd_restore(datei: Path, yes: bool):
    """Ersetzt den kompletten Datenbestand durch ein Backup."""
    from data.backup import BackupFormatError
    store = _open_store()
    if not yes and not click.confirm(
        "Alle aktuellen Daten werden überschrieben. Fortfahren?", default=False
    ):
        return
    try:
        state = store.restore(datei.read_bytes())
    except BackupFormatError as e:
        console.print(f"[red]Restore fehlgeschlagen:[/red] {e}")
        sys.exit(1)
    console.print(f"[green]✓[/green] Wiederhergestellt: {state.summary()}")


# ─── EINSTELLUNGEN ────────────────────────────────────────────────────────────

@click.group("settings")
def cmd_settings():
    """Tutor-Name und Farbschema."""


@cmd_settings.command("show")
def settings_show():
    """Zeigt die gespeicherten Einstellungen."""
    settings = _open_store().state.settings
    table = Table(title="Einstellungen", box=box.ROUNDED)
    table.add_column("Parameter", style="bold")
    table.add_column("Wert")
    table.add_row("Tutor", settings.tutor_name)
    table.add_row("Theme", settings.theme)
    console.print(table)


@cmd_settings.command("name")
@click.argument("tutor_name")
def settings_name(tutor_name: str):
    """Setzt den Namen, der auf Berichten erscheint."""
    if not _open_store().update_settings(tutor_name=tutor_name):
        console.print("[red]Name darf nicht leer sein.[/red]")
        sys.exit(1)
    console.print(f"[green]✓[/green] Name gesetzt: {tutor_name.strip()}")


@cmd_settings.command("theme")
@click.argument("theme", type=click.Choice(["light", "dark", "toggle"]), default="toggle")
def settings_theme(theme: str):
    """Setzt das Farbschema oder schaltet es um."""
    store = _open_store()
    if theme == "toggle":
        theme = store.toggle_theme()
    else:
        store.update_settings(theme=theme)
    console.print(f"[green]✓[/green] Theme: {theme}")


# ─── DEMO ─────────────────────────────────────────────────────────────────────

@click.command("demo")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--sessions", default=30, help="Anzahl vergangener Stunden.")
def cmd_demo(seed: int, sessions: int):
    """Erzeugt Demo-Center, -Regeln und -Stunden im aktuellen Datenbestand."""
    from data.demo_data import DemoDataGenerator
    store = _open_store()
    if store.state.sessions and not click.confirm(
        "Es sind bereits Daten vorhanden. Demo-Daten trotzdem hinzufügen?",
        default=False,
    ):
        return
    console.print(f"[bold]Erzeuge Demo-Daten (Seed={seed})...[/bold]")
    gen = DemoDataGenerator(seed=seed)
    gen.populate(store, sessions=sessions)
    gen.print_summary(store)


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Ausführliches Logging.")
def cli(verbose: bool):
    """Abrechnung für freiberufliche Nachhilfe.

    Starten Sie mit: python main.py setup
    """
    _setup_logging(verbose)


def main():
    """Einstiegspunkt. Startet automatisch den Wizard beim ersten Aufruf."""
    from config.manager import ConfigManager
    mgr = ConfigManager()

    if len(sys.argv) == 1 and mgr.first_run_check():
        console.print(Panel(
            "[bold]Willkommen bei der Nachhilfe-Abrechnung![/bold]\n\n"
            "Keine Konfiguration gefunden.\n"
            "Der Setup-Wizard wird jetzt gestartet...",
            border_style="cyan",
        ))
        sys.argv.append("setup")

    cli()


# Befehle registrieren
cli.add_command(cmd_setup)
cli.add_command(cmd_config)
cli.add_command(cmd_center)
cli.add_command(cmd_subject)
cli.add_command(cmd_standard)
cli.add_command(cmd_rate)
cli.add_command(cmd_session)
cli.add_command(cmd_dashboard)
cli.add_command(cmd_report)
cli.add_command(cmd_backup)
cli.add_command(cmd_restore)
cli.add_command(cmd_settings)
cli.add_command(cmd_demo)


if __name__ == "__main__":
    main()

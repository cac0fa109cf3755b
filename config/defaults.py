from config.schema import AppConfig, DisplayConfig, StorageConfig

# Beispiel-Stammdaten für den Demo-Datenbestand (main.py demo)
DEFAULT_SUBJECTS = ["Mathematics", "Physics", "Chemistry", "Biology", "English"]
DEFAULT_STANDARDS = ["8", "9", "10", "11", "12"]


def default_storage() -> StorageConfig:
    """Speicherorte relativ zum Arbeitsverzeichnis."""
    return StorageConfig(
        data_dir="data_store",
        export_dir="output",
        backup_dir="backups",
    )


def default_display() -> DisplayConfig:
    """Anzeige wie in der ursprünglichen Oberfläche: ₹, ganze Beträge, "05 Oct 2026"."""
    return DisplayConfig(
        currency_symbol="₹",
        date_format="%d %b %Y",
        upcoming_limit=5,
    )


def default_app_config() -> AppConfig:
    """Vollständige Standard-Konfiguration (gilt, solange keine Datei existiert)."""
    return AppConfig(storage=default_storage(), display=default_display())

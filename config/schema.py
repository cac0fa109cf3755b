from pydantic import BaseModel, Field, field_validator


# ─── SPEICHERORTE ───

class StorageConfig(BaseModel):
    """Verzeichnisse für Datenbestand, Exporte und Backups."""
    # Verzeichnis des Key-Value-Speichers (enthält tutor_billing_db.json)
    data_dir: str = Field("data_store",
        description="Verzeichnis für den gespeicherten Datenbestand")
    # Zielverzeichnis für CSV-, Excel- und PDF-Berichte
    export_dir: str = Field("output",
        description="Zielverzeichnis für Berichte")
    # Zielverzeichnis für Backups
    backup_dir: str = Field("backups",
        description="Zielverzeichnis für Backups")


# ─── ANZEIGE ───

class DisplayConfig(BaseModel):
    """Formatierung von Beträgen und Datumsangaben (nur Anzeige)."""
    # Währungssymbol vor Beträgen
    currency_symbol: str = Field("₹",
        description="Währungssymbol")
    # strftime-Format für Datumsangaben in Tabellen und Berichten
    date_format: str = Field("%d %b %Y",
        description="Datumsformat (strftime)")
    # Anzahl anstehender Stunden auf dem Dashboard
    upcoming_limit: int = Field(5, ge=0, le=50,
        description="Anstehende Stunden auf dem Dashboard")

    @field_validator("date_format")
    @classmethod
    def _check_date_format(cls, v: str) -> str:
        if "%" not in v:
            raise ValueError(f"Datumsformat '{v}' enthält keinen strftime-Platzhalter")
        return v


# ─── GESAMT-CONFIG ───

class AppConfig(BaseModel):
    """Gesamtkonfiguration der Anwendung."""
    # Speicherorte
    storage: StorageConfig = Field(default_factory=StorageConfig)
    # Anzeige-Formatierung
    display: DisplayConfig = Field(default_factory=DisplayConfig)

from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Konfiguracja aplikacji ładowana ze zmiennych środowiskowych."""

    app_name: str = "Sistema de Leitura de Gás"
    environment: str = Field(default="local", description="Nazwa środowiska uruchomieniowego.")
    database_url: str = Field(
        default="sqlite:///./data/gasmeter.db",
        description="URI bazy SQLAlchemy przechowującej magazyn klucz-wartość.",
    )
    max_units_limit: int = Field(default=200, description="Twardy limit liczby jednostek w konfiguracji.")
    default_number_of_units: int = 6
    default_company_name: str = "Sistema de Leitura de Gás"
    default_responsible_name: str = ""
    free_plan_max_units: int = 3
    print_delay_ms: int = Field(
        default=250,
        description="Opóźnienie przed otwarciem okna drukowania, aby układ strony zdążył się ustabilizować.",
    )
    export_directory: str = Field(default="./reports", description="Katalog docelowy eksportowanych raportów.")
    activity_log_enabled: bool = True
    seed_default_identities: bool = Field(
        default=True,
        description="Tworzy konta administratora i demo przy pierwszym uruchomieniu.",
    )
    api_cors_origins: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Dozwolone źródła CORS dla API.",
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def database_path(self) -> Path | None:
        """Zwraca ścieżkę pliku SQLite, jeśli baza jest plikowa."""
        if self.database_url.startswith("sqlite:///"):
            raw_path = self.database_url.replace("sqlite:///", "", 1)
            if raw_path == ":memory:":
                return None
            return Path(raw_path).resolve()
        return None


@lru_cache
def get_settings() -> Settings:
    """Zwraca singleton ustawień."""
    return Settings()

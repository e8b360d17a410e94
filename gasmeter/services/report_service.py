"""Generowanie raportu HTML z najnowszym odczytem każdej jednostki."""

from __future__ import annotations

import logging
import re
import tempfile
import webbrowser
from collections.abc import Iterable
from datetime import date, datetime
from pathlib import Path

from jinja2 import Environment, PackageLoader, select_autoescape

from gasmeter.core.config import Settings
from gasmeter.core.dates import format_display_date, format_display_time
from gasmeter.schemas.config import AppConfig
from gasmeter.schemas.reading import Reading

logger = logging.getLogger(__name__)

REPORT_TITLE = "Relatório de Leituras de Gás"
EMPTY_MESSAGE = "Nenhuma leitura encontrada para o período selecionado."

_environment = Environment(
    loader=PackageLoader("gasmeter", "templates"),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def latest_by_unit(readings: Iterable[Reading]) -> list[Reading]:
    """Najnowszy odczyt każdej jednostki, posortowany rosnąco po numerze jednostki.

    Przy identycznym znaczniku czasu zostaje odczyt napotkany jako pierwszy.
    Jednostki bez odczytów są pomijane.
    """
    latest: dict[int, Reading] = {}
    for reading in readings:
        existing = latest.get(reading.unit)
        if existing is None or reading.recorded_at > existing.recorded_at:
            latest[reading.unit] = reading
    return [latest[unit] for unit in sorted(latest)]


def report_filename(label: str, today: date | None = None) -> str:
    """Nazwa pliku z etykiety okresu i bieżącej daty."""
    today = today or date.today()
    safe_label = re.sub(r"\s+", "_", label.replace("/", "-"))
    return f"relatorio-gas-{safe_label}-{today.isoformat()}.html"


class ReportService:
    """Buduje dokument raportu i udostępnia go do pobrania lub wydruku."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def _render(
        self,
        readings: Iterable[Reading],
        config: AppConfig,
        label: str,
        *,
        now: datetime | None,
        print_delay_ms: int | None,
    ) -> str:
        now = now or datetime.now()
        template = _environment.get_template("report.html")
        return template.render(
            report_title=REPORT_TITLE,
            company_name=config.company_name or self.settings.default_company_name,
            responsible_name=config.responsible_name,
            period_label=label,
            generated_date=format_display_date(now),
            generated_time=format_display_time(now),
            rows=latest_by_unit(readings),
            empty_message=EMPTY_MESSAGE,
            print_delay_ms=print_delay_ms,
        )

    def render_report(
        self,
        readings: Iterable[Reading],
        config: AppConfig,
        label: str,
        now: datetime | None = None,
    ) -> str:
        """Zwraca samodzielny dokument HTML raportu."""
        return self._render(readings, config, label, now=now, print_delay_ms=None)

    def render_print_document(
        self,
        readings: Iterable[Reading],
        config: AppConfig,
        label: str,
        now: datetime | None = None,
    ) -> str:
        """Ten sam raport z wywołaniem okna drukowania po krótkim opóźnieniu."""
        return self._render(readings, config, label, now=now, print_delay_ms=int(self.settings.print_delay_ms))

    def export_report(
        self,
        readings: Iterable[Reading],
        config: AppConfig,
        label: str,
        directory: Path | str | None = None,
        now: datetime | None = None,
    ) -> Path:
        """Zapisuje raport do pliku i zwraca jego ścieżkę."""
        now = now or datetime.now()
        target_dir = Path(directory or self.settings.export_directory)
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / report_filename(label, now.date())
        path.write_text(self.render_report(readings, config, label, now=now), encoding="utf-8")
        logger.info("Zapisano raport %s", path)
        return path

    def open_print_preview(
        self,
        readings: Iterable[Reading],
        config: AppConfig,
        label: str,
        now: datetime | None = None,
    ) -> Path:
        """Otwiera raport w nowej karcie przeglądarki, która sama wywoła drukowanie."""
        document = self.render_print_document(readings, config, label, now=now)
        with tempfile.NamedTemporaryFile(
            "w", suffix=".html", prefix="relatorio-gas-", delete=False, encoding="utf-8"
        ) as handle:
            handle.write(document)
            path = Path(handle.name)
        if not webbrowser.open_new_tab(path.as_uri()):
            logger.warning("Nie udało się otworzyć przeglądarki dla %s", path)
        return path

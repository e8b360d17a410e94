"""Filtrowanie historii odczytów według okresu.

Wszystkie funkcje są czyste i zachowują kolejność wejściowej listy.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, timedelta

from gasmeter.core.dates import MONTH_NAMES, format_display_date, month_key
from gasmeter.schemas.reading import PeriodFilter, PeriodType, Reading

ALL_READINGS_LABEL = "Todas as Leituras"


def filter_by_month(readings: Iterable[Reading], month: str) -> list[Reading]:
    """Odczyty z miesiąca ``YYYY-MM``."""
    return [reading for reading in readings if month_key(reading.recorded_at) == month]


def filter_by_week(readings: Iterable[Reading], start: date, end: date) -> list[Reading]:
    """Odczyty z zakresu dat ``[start, end]`` włącznie, bez względu na godzinę."""
    return [reading for reading in readings if start <= reading.recorded_at.date() <= end]


def apply_period(readings: Iterable[Reading], selector: PeriodFilter) -> list[Reading]:
    if selector.period == PeriodType.month:
        return filter_by_month(readings, selector.month)
    if selector.period == PeriodType.week:
        return filter_by_week(readings, selector.week_start, selector.week_end)
    return list(readings)


def available_months(readings: Iterable[Reading]) -> list[str]:
    """Unikalne miesiące odczytów, od najnowszego."""
    return sorted({month_key(reading.recorded_at) for reading in readings}, reverse=True)


def current_month(today: date | None = None) -> str:
    return month_key(today or date.today())


def current_week(today: date | None = None) -> tuple[date, date]:
    """Poniedziałek i niedziela tygodnia zawierającego ``today``."""
    today = today or date.today()
    monday = today - timedelta(days=today.weekday())
    return monday, monday + timedelta(days=6)


def format_month_display(month: str) -> str:
    """``2024-03`` -> ``Março/2024``."""
    year, month_number = month.split("-")
    return f"{MONTH_NAMES[int(month_number) - 1]}/{year}"


def period_label(selector: PeriodFilter) -> str:
    """Czytelna etykieta okresu używana w nagłówku i nazwie pliku raportu."""
    if selector.period == PeriodType.month:
        return format_month_display(selector.month)
    if selector.period == PeriodType.week:
        start = format_display_date(selector.week_start)
        end = format_display_date(selector.week_end)
        return f"Semana {start} - {end}"
    return ALL_READINGS_LABEL


def readings_for_unit(readings: Iterable[Reading], unit: int) -> list[Reading]:
    return [reading for reading in readings if reading.unit == unit]


def last_reading_for_unit(readings: Iterable[Reading], unit: int) -> Reading | None:
    # Lista jest uporządkowana od najnowszego wpisu.
    return next((reading for reading in readings if reading.unit == unit), None)

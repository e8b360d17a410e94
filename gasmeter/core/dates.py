"""Formatowanie i parsowanie dat w formacie wyświetlanym (pt-BR)."""

from datetime import date, datetime, time

DISPLAY_DATE_FORMAT = "%d/%m/%Y"
DISPLAY_TIME_FORMAT = "%H:%M:%S"

MONTH_NAMES = (
    "Janeiro",
    "Fevereiro",
    "Março",
    "Abril",
    "Maio",
    "Junho",
    "Julho",
    "Agosto",
    "Setembro",
    "Outubro",
    "Novembro",
    "Dezembro",
)


def format_display_date(value: date) -> str:
    return value.strftime(DISPLAY_DATE_FORMAT)


def format_display_time(value: datetime | time) -> str:
    return value.strftime(DISPLAY_TIME_FORMAT)


def parse_display_date(value: str) -> date:
    """Parsuje datę zawsze w kolejności dzień/miesiąc/rok."""
    parts = value.strip().split("/")
    if len(parts) != 3:
        raise ValueError(f"Nieprawidłowa data: {value!r}")
    day, month, year = (int(part) for part in parts)
    return date(year, month, day)


def parse_display_time(value: str) -> time:
    """Parsuje godzinę w formacie HH:MM:SS lub HH:MM."""
    parts = [int(part) for part in value.strip().split(":")]
    if len(parts) == 2:
        parts.append(0)
    if len(parts) != 3:
        raise ValueError(f"Nieprawidłowa godzina: {value!r}")
    return time(*parts)


def month_key(value: date) -> str:
    """Zwraca klucz miesiąca w formacie YYYY-MM."""
    return f"{value.year:04d}-{value.month:02d}"

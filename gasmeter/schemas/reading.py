import enum
import re
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from gasmeter.core.dates import (
    format_display_date,
    format_display_time,
    parse_display_date,
    parse_display_time,
)

MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


class Reading(BaseModel):
    """Pojedynczy odczyt licznika gazu dla jednej jednostki."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    unit: int = Field(gt=0)
    value: float = Field(ge=0, allow_inf_nan=False, description="Stan licznika w m³.")
    recorded_at: datetime = Field(alias="recordedAt")

    @model_validator(mode="before")
    @classmethod
    def _accept_display_strings(cls, data: Any) -> Any:
        """Starsze wpisy zawierają tylko tekstowe pola date/time."""
        if not isinstance(data, dict):
            return data
        if "recorded_at" in data or "recordedAt" in data:
            return data
        raw_date = data.get("date")
        if not raw_date:
            return data
        raw_time = data.get("time")
        if not isinstance(raw_date, str) or (raw_time is not None and not isinstance(raw_time, str)):
            raise ValueError("Pola date/time muszą być tekstem.")
        day = parse_display_date(raw_date)
        moment = parse_display_time(raw_time) if raw_time else None
        data = dict(data)
        data["recorded_at"] = datetime.combine(day, moment or datetime.min.time())
        return data

    @computed_field
    @property
    def date(self) -> str:
        return format_display_date(self.recorded_at)

    @computed_field
    @property
    def time(self) -> str:
        return format_display_time(self.recorded_at)


class ReadingCreateRequest(BaseModel):
    """Dane nowego odczytu wprowadzane przez użytkownika."""

    unit: int = Field(gt=0)
    value: float = Field(ge=0, allow_inf_nan=False, description="Stan licznika w m³.")


class PeriodType(str, enum.Enum):
    """Rodzaj okresu filtrowania historii."""

    month = "month"
    week = "week"
    all = "all"


class PeriodFilter(BaseModel):
    """Selektor okresu: miesiąc, zakres tygodnia albo wszystko."""

    period: PeriodType = PeriodType.all
    month: str | None = Field(default=None, description="Miesiąc w formacie YYYY-MM.")
    week_start: date | None = None
    week_end: date | None = None

    @model_validator(mode="after")
    def _check_selector(self) -> "PeriodFilter":
        if self.period == PeriodType.month:
            if not self.month or not MONTH_PATTERN.match(self.month):
                raise ValueError("Filtr miesięczny wymaga miesiąca w formacie YYYY-MM.")
        if self.period == PeriodType.week and (self.week_start is None or self.week_end is None):
            raise ValueError("Filtr tygodniowy wymaga dat początku i końca.")
        return self


class AvailableMonthsResponse(BaseModel):
    """Lista miesięcy do wyboru w historii."""

    months: list[str]
    default_month: str

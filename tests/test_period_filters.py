from datetime import date, datetime

import pytest
from pydantic import ValidationError

from gasmeter.core.dates import parse_display_date
from gasmeter.schemas.reading import PeriodFilter, PeriodType, Reading
from gasmeter.services.period_filters import (
    apply_period,
    available_months,
    current_month,
    current_week,
    filter_by_month,
    filter_by_week,
    format_month_display,
    last_reading_for_unit,
    period_label,
    readings_for_unit,
)

from .utils import make_reading


@pytest.fixture
def readings() -> list[Reading]:
    # Kolejność od najnowszego, jak w repozytorium odczytów.
    return [
        make_reading("4", 1, 40.0, datetime(2024, 3, 31, 23, 59, 59)),
        make_reading("3", 2, 30.0, datetime(2024, 3, 20, 8, 0)),
        make_reading("2", 1, 20.0, datetime(2024, 3, 5, 12, 0)),
        make_reading("1", 2, 10.0, datetime(2024, 1, 10, 9, 30)),
    ]


def test_filter_by_month_preserves_order(readings: list[Reading]) -> None:
    assert [reading.id for reading in filter_by_month(readings, "2024-03")] == ["4", "3", "2"]
    assert [reading.id for reading in filter_by_month(readings, "2024-01")] == ["1"]
    assert filter_by_month(readings, "2023-03") == []


def test_filter_by_week_is_inclusive_and_ignores_time(readings: list[Reading]) -> None:
    selected = filter_by_week(readings, date(2024, 3, 5), date(2024, 3, 31))
    assert [reading.id for reading in selected] == ["4", "3", "2"]
    assert filter_by_week(readings, date(2024, 3, 6), date(2024, 3, 19)) == []


def test_apply_period_dispatch(readings: list[Reading]) -> None:
    assert apply_period(readings, PeriodFilter(period=PeriodType.all)) == readings
    month = PeriodFilter(period=PeriodType.month, month="2024-01")
    assert [reading.id for reading in apply_period(readings, month)] == ["1"]
    week = PeriodFilter(period=PeriodType.week, week_start=date(2024, 3, 18), week_end=date(2024, 3, 24))
    assert [reading.id for reading in apply_period(readings, week)] == ["3"]


def test_available_months_descending() -> None:
    dated = [
        Reading(id=str(index), unit=1, value=1.0, date=raw, time="10:00:00")
        for index, raw in enumerate(["10/01/2024", "05/03/2024", "20/03/2024"])
    ]
    assert available_months(dated) == ["2024-03", "2024-01"]
    assert available_months([]) == []


def test_display_date_is_always_day_first() -> None:
    assert parse_display_date("05/03/2024") == date(2024, 3, 5)
    assert parse_display_date("12/01/2024") == date(2024, 1, 12)
    with pytest.raises(ValueError):
        parse_display_date("2024-03-05")
    with pytest.raises(ValueError):
        parse_display_date("31/02/2024")


def test_period_selector_validation() -> None:
    with pytest.raises(ValidationError):
        PeriodFilter(period=PeriodType.month)
    with pytest.raises(ValidationError):
        PeriodFilter(period=PeriodType.month, month="2024-13")
    with pytest.raises(ValidationError):
        PeriodFilter(period=PeriodType.week, week_start=date(2024, 3, 1))


def test_period_labels() -> None:
    assert format_month_display("2024-03") == "Março/2024"
    assert period_label(PeriodFilter(period=PeriodType.month, month="2024-12")) == "Dezembro/2024"
    assert period_label(PeriodFilter()) == "Todas as Leituras"
    week = PeriodFilter(period=PeriodType.week, week_start=date(2024, 3, 4), week_end=date(2024, 3, 10))
    assert period_label(week) == "Semana 04/03/2024 - 10/03/2024"


def test_current_month_and_week() -> None:
    assert current_month(date(2024, 2, 29)) == "2024-02"
    assert current_week(date(2024, 3, 7)) == (date(2024, 3, 4), date(2024, 3, 10))
    assert current_week(date(2024, 3, 10)) == (date(2024, 3, 4), date(2024, 3, 10))
    assert current_week(date(2024, 3, 4)) == (date(2024, 3, 4), date(2024, 3, 10))


def test_unit_helpers(readings: list[Reading]) -> None:
    assert [reading.id for reading in readings_for_unit(readings, 2)] == ["3", "1"]
    assert last_reading_for_unit(readings, 1).id == "4"
    assert last_reading_for_unit(readings, 5) is None

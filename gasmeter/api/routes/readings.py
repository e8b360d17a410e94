"""Endpointy REST do rejestrowania i przeglądania odczytów."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from gasmeter.api.dependencies import get_config_service, get_period_filter, get_reading_service
from gasmeter.schemas.reading import AvailableMonthsResponse, PeriodFilter, Reading, ReadingCreateRequest
from gasmeter.services.config_service import ConfigService, units_list
from gasmeter.services.period_filters import (
    apply_period,
    available_months,
    current_month,
    last_reading_for_unit,
    readings_for_unit,
)
from gasmeter.services.reading_service import ReadingService


router = APIRouter(prefix="/readings", tags=["odczyty"])


@router.get("", response_model=list[Reading])
def list_readings(
    unit: int | None = Query(default=None, gt=0),
    selector: PeriodFilter = Depends(get_period_filter),
    service: ReadingService = Depends(get_reading_service),
) -> list[Reading]:
    """Historia odczytów w wybranym okresie, od najnowszego."""
    readings = apply_period(service.list_readings(), selector)
    if unit is not None:
        readings = readings_for_unit(readings, unit)
    return readings


@router.post("", response_model=Reading, status_code=status.HTTP_201_CREATED)
def create_reading(
    payload: ReadingCreateRequest,
    service: ReadingService = Depends(get_reading_service),
    config_service: ConfigService = Depends(get_config_service),
) -> Reading:
    """Rejestruje odczyt jednostki."""
    config = config_service.effective_config()
    return service.add_reading(unit=payload.unit, value=payload.value, number_of_units=config.number_of_units)


@router.delete("/{reading_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_reading(reading_id: str, service: ReadingService = Depends(get_reading_service)) -> None:
    if not service.delete_reading(reading_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Leitura não encontrada.")


@router.get("/months", response_model=AvailableMonthsResponse)
def list_months(service: ReadingService = Depends(get_reading_service)) -> AvailableMonthsResponse:
    """Miesiące z odczytami do wyboru w filtrze historii."""
    months = available_months(service.list_readings())
    return AvailableMonthsResponse(months=months, default_month=current_month())


@router.get("/latest", response_model=dict[int, Reading | None])
def latest_per_unit(
    service: ReadingService = Depends(get_reading_service),
    config_service: ConfigService = Depends(get_config_service),
) -> dict[int, Reading | None]:
    """Ostatni odczyt każdej skonfigurowanej jednostki (podpowiedź przy wprowadzaniu)."""
    readings = service.list_readings()
    number_of_units = config_service.effective_config().number_of_units
    return {unit: last_reading_for_unit(readings, unit) for unit in units_list(number_of_units)}

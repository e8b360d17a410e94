from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from gasmeter.api.dependencies import (
    get_config_service,
    get_period_filter,
    get_reading_service,
    get_report_service,
)
from gasmeter.schemas.reading import PeriodFilter
from gasmeter.services.config_service import ConfigService
from gasmeter.services.period_filters import apply_period, period_label
from gasmeter.services.reading_service import ReadingService
from gasmeter.services.report_service import ReportService, report_filename


router = APIRouter(prefix="/reports", tags=["raporty"])


@router.get("/download", response_class=HTMLResponse)
def download_report(
    selector: PeriodFilter = Depends(get_period_filter),
    readings: ReadingService = Depends(get_reading_service),
    config_service: ConfigService = Depends(get_config_service),
    reports: ReportService = Depends(get_report_service),
) -> HTMLResponse:
    """Raport okresu jako plik HTML do pobrania."""
    label = period_label(selector)
    document = reports.render_report(
        apply_period(readings.list_readings(), selector),
        config_service.effective_config(),
        label,
    )
    filename = report_filename(label)
    return HTMLResponse(
        content=document,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/print", response_class=HTMLResponse)
def print_report(
    selector: PeriodFilter = Depends(get_period_filter),
    readings: ReadingService = Depends(get_reading_service),
    config_service: ConfigService = Depends(get_config_service),
    reports: ReportService = Depends(get_report_service),
) -> HTMLResponse:
    """Raport otwierany w nowej karcie, który sam wywołuje okno drukowania."""
    document = reports.render_print_document(
        apply_period(readings.list_readings(), selector),
        config_service.effective_config(),
        period_label(selector),
    )
    return HTMLResponse(content=document)

from fastapi import APIRouter, Depends

from gasmeter.api.dependencies import get_config_service
from gasmeter.schemas.config import AppConfig
from gasmeter.services.config_service import ConfigService, units_list


router = APIRouter(prefix="/config", tags=["konfiguracja"])


@router.get("", response_model=AppConfig)
def read_config(service: ConfigService = Depends(get_config_service)) -> AppConfig:
    """Konfiguracja przycięta do limitu planu konta."""
    return service.effective_config()


@router.put("", response_model=AppConfig)
def update_config(
    payload: AppConfig,
    service: ConfigService = Depends(get_config_service),
) -> AppConfig:
    """Zapisuje konfigurację po sprawdzeniu zakresu i limitu planu."""
    service.save_for_identity(payload)
    return service.effective_config()


@router.get("/units", response_model=list[int])
def list_units(service: ConfigService = Depends(get_config_service)) -> list[int]:
    return units_list(service.effective_config().number_of_units)

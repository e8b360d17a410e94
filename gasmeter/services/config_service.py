"""Odczyt i zapis konfiguracji instalacji przypisanej do konta."""

from __future__ import annotations

import logging

from pydantic import ValidationError as PydanticValidationError

from gasmeter.core.config import Settings
from gasmeter.core.errors import PlanLimitError, StorageError, ValidationError
from gasmeter.db.kv_store import KeyValueStore
from gasmeter.db.models import ActivityEventStatus
from gasmeter.db.session import get_session
from gasmeter.schemas.auth import IdentityPublic
from gasmeter.schemas.config import AppConfig
from gasmeter.services.logging_service import ActivityLogger

logger = logging.getLogger(__name__)

MIN_UNITS = 1


def config_storage_key(identity_id: str) -> str:
    return f"gas-app-config-{identity_id}"


def units_list(number_of_units: int) -> list[int]:
    """Zwraca numery jednostek od 1 do ``number_of_units``."""
    return list(range(1, number_of_units + 1))


class ConfigService:
    """Konfiguracja jednego konta; odczyt nigdy nie zgłasza błędu."""

    def __init__(
        self,
        store: KeyValueStore,
        settings: Settings,
        identity: IdentityPublic,
        logger: ActivityLogger | None = None,
    ):
        self.store = store
        self.settings = settings
        self.identity = identity
        self.logger = logger or ActivityLogger(get_session, enabled=settings.activity_log_enabled)

    @property
    def storage_key(self) -> str:
        return config_storage_key(self.identity.id)

    def default_config(self) -> AppConfig:
        return AppConfig(
            number_of_units=self.settings.default_number_of_units,
            company_name=self.settings.default_company_name,
            responsible_name=self.settings.default_responsible_name,
        )

    def _within_bounds(self, number_of_units: int) -> bool:
        return MIN_UNITS <= number_of_units <= self.settings.max_units_limit

    def load(self) -> AppConfig:
        """Zwraca zapisaną konfigurację albo domyślną, gdy zapis jest nieużywalny."""
        try:
            raw = self.store.read_json(self.storage_key)
        except StorageError:
            logger.exception("Nie udało się wczytać konfiguracji konta %s.", self.identity.id)
            return self.default_config()
        if raw is None:
            return self.default_config()
        try:
            config = AppConfig.model_validate(raw)
        except PydanticValidationError:
            logger.warning("Zapisana konfiguracja konta %s jest nieprawidłowa.", self.identity.id)
            return self.default_config()
        if not self._within_bounds(config.number_of_units):
            logger.warning(
                "Liczba jednostek %s poza zakresem, używam konfiguracji domyślnej.", config.number_of_units
            )
            return self.default_config()
        return config

    def save(self, config: AppConfig) -> None:
        """Zapisuje konfigurację; liczba jednostek spoza zakresu zgłasza ``ValidationError``."""
        if config.number_of_units < MIN_UNITS:
            raise ValidationError("Número de unidades deve ser maior que 0")
        if config.number_of_units > self.settings.max_units_limit:
            raise ValidationError(f"Número máximo de unidades é {self.settings.max_units_limit}")
        self.store.write_json(self.storage_key, config.model_dump(mode="json", by_alias=True))
        self.logger.log(
            identity_id=self.identity.id,
            event_type="config_save",
            status=ActivityEventStatus.success,
            detail=f"Liczba jednostek: {config.number_of_units}.",
        )

    def save_for_identity(self, config: AppConfig) -> None:
        """Sprawdza limit planu konta, a następnie zapisuje konfigurację."""
        if config.number_of_units > self.identity.max_units:
            self.logger.log(
                identity_id=self.identity.id,
                event_type="config_save",
                status=ActivityEventStatus.denied,
                detail="Przekroczony limit planu.",
            )
            raise PlanLimitError(self.identity.max_units)
        self.save(config)

    def effective_config(self) -> AppConfig:
        """Konfiguracja przycięta do limitu planu, z nazwą firmy z konta."""
        config = self.load()
        return config.model_copy(
            update={
                "number_of_units": min(config.number_of_units, self.identity.max_units),
                "company_name": self.identity.company_name or config.company_name,
            }
        )

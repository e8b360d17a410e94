"""Obsługa zapisu i odczytu odczytów liczników."""

from __future__ import annotations

import logging
import math
from datetime import datetime

from pydantic import ValidationError as PydanticValidationError

from gasmeter.core.config import Settings
from gasmeter.core.errors import StorageError, ValidationError
from gasmeter.core.security import generate_record_id
from gasmeter.db.kv_store import KeyValueStore
from gasmeter.db.models import ActivityEventStatus
from gasmeter.db.session import get_session
from gasmeter.schemas.auth import IdentityPublic
from gasmeter.schemas.reading import Reading
from gasmeter.services.logging_service import ActivityLogger

logger = logging.getLogger(__name__)


def readings_storage_key(identity_id: str) -> str:
    return f"gas-readings-{identity_id}"


class ReadingService:
    """Lista odczytów jednego konta, zapisywana w całości po każdej zmianie."""

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
        return readings_storage_key(self.identity.id)

    def _save(self, readings: list[Reading]) -> None:
        self.store.write_json(
            self.storage_key,
            [reading.model_dump(mode="json", by_alias=True) for reading in readings],
        )

    def list_readings(self) -> list[Reading]:
        """Zwraca odczyty od najnowszego; uszkodzony zapis daje pustą listę."""
        try:
            raw = self.store.read_json(self.storage_key)
        except StorageError:
            logger.exception("Nie udało się wczytać odczytów konta %s.", self.identity.id)
            return []
        if not isinstance(raw, list):
            if raw is not None:
                logger.warning("Odczyty konta %s nie są listą, pomijam zapis.", self.identity.id)
            return []
        readings: list[Reading] = []
        for item in raw:
            try:
                readings.append(Reading.model_validate(item))
            except PydanticValidationError:
                logger.warning("Pomijam nieprawidłowy odczyt %r.", item)
        return readings

    def add_reading(
        self,
        *,
        unit: int,
        value: float,
        number_of_units: int,
        recorded_at: datetime | None = None,
    ) -> Reading:
        """Dodaje odczyt na początek listy i od razu zapisuje całość."""
        if value is None or not math.isfinite(value) or value < 0:
            raise ValidationError("Por favor, insira um valor válido")
        if not 1 <= unit <= number_of_units:
            raise ValidationError(f"Unidade {unit} fora do intervalo 1-{number_of_units}")
        reading = Reading(
            id=generate_record_id(),
            unit=unit,
            value=value,
            recorded_at=recorded_at or datetime.now(),
        )
        readings = [reading, *self.list_readings()]
        self._save(readings)
        self.logger.log(
            identity_id=self.identity.id,
            event_type="reading_add",
            status=ActivityEventStatus.success,
            detail=f"Jednostka {unit}: {value:.2f} m³.",
        )
        return reading

    def delete_reading(self, reading_id: str) -> bool:
        """Usuwa odczyt o podanym id; nieznane id pozostawia listę bez zmian."""
        readings = self.list_readings()
        index = next((i for i, reading in enumerate(readings) if reading.id == reading_id), None)
        if index is None:
            return False
        del readings[index]
        self._save(readings)
        self.logger.log(
            identity_id=self.identity.id,
            event_type="reading_delete",
            status=ActivityEventStatus.success,
            detail=f"Usunięto odczyt {reading_id}.",
        )
        return True

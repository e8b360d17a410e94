from datetime import datetime

import pytest

from gasmeter.core.config import Settings
from gasmeter.core.errors import ValidationError
from gasmeter.db.kv_store import MemoryKeyValueStore
from gasmeter.schemas.auth import IdentityPublic
from gasmeter.services.reading_service import ReadingService, readings_storage_key


@pytest.fixture
def reading_service(store: MemoryKeyValueStore, test_settings: Settings, identity: IdentityPublic, activity) -> ReadingService:
    return ReadingService(store, test_settings, identity, activity)


def test_add_prepends_and_persists(reading_service: ReadingService, store: MemoryKeyValueStore) -> None:
    first = reading_service.add_reading(unit=1, value=10.0, number_of_units=3, recorded_at=datetime(2024, 6, 1, 10, 0))
    second = reading_service.add_reading(unit=2, value=5.5, number_of_units=3, recorded_at=datetime(2024, 6, 2, 9, 0))

    assert [reading.id for reading in reading_service.list_readings()] == [second.id, first.id]
    stored = store.read_json(readings_storage_key(reading_service.identity.id))
    assert stored[0]["id"] == second.id
    assert stored[0]["date"] == "02/06/2024"
    assert stored[0]["time"] == "09:00:00"


@pytest.mark.parametrize(
    ("unit", "value"),
    [(0, 1.0), (4, 1.0), (1, -0.01), (1, float("inf")), (1, float("nan"))],
)
def test_add_rejects_invalid_input(reading_service: ReadingService, store: MemoryKeyValueStore, unit: int, value: float) -> None:
    with pytest.raises(ValidationError):
        reading_service.add_reading(unit=unit, value=value, number_of_units=3)
    assert store.get(readings_storage_key(reading_service.identity.id)) is None


def test_delete_removes_exactly_one(reading_service: ReadingService) -> None:
    kept = reading_service.add_reading(unit=1, value=1.0, number_of_units=3)
    removed = reading_service.add_reading(unit=1, value=2.0, number_of_units=3)

    assert reading_service.delete_reading(removed.id) is True
    assert [reading.id for reading in reading_service.list_readings()] == [kept.id]


def test_delete_unknown_id_leaves_list(reading_service: ReadingService, store: MemoryKeyValueStore) -> None:
    reading_service.add_reading(unit=1, value=1.0, number_of_units=3)
    before = store.get(readings_storage_key(reading_service.identity.id))

    assert reading_service.delete_reading("nao-existe") is False
    assert store.get(readings_storage_key(reading_service.identity.id)) == before


def test_legacy_display_strings_are_parsed_day_first(reading_service: ReadingService, store: MemoryKeyValueStore) -> None:
    store.write_json(
        readings_storage_key(reading_service.identity.id),
        [{"id": "1717236000000", "unit": 2, "value": 7.25, "date": "05/03/2024", "time": "14:30:15"}],
    )

    [reading] = reading_service.list_readings()

    assert reading.recorded_at == datetime(2024, 3, 5, 14, 30, 15)
    assert reading.date == "05/03/2024"


def test_corrupt_storage_degrades_to_empty(reading_service: ReadingService, store: MemoryKeyValueStore) -> None:
    store.set(readings_storage_key(reading_service.identity.id), "[{oops")
    assert reading_service.list_readings() == []

    store.write_json(readings_storage_key(reading_service.identity.id), {"not": "a list"})
    assert reading_service.list_readings() == []


def test_invalid_items_are_skipped(reading_service: ReadingService, store: MemoryKeyValueStore) -> None:
    store.write_json(
        readings_storage_key(reading_service.identity.id),
        [
            {"id": "a", "unit": 1, "value": 3.0, "date": "01/01/2024", "time": "08:00:00"},
            {"id": "b", "unit": 1, "value": -3.0, "date": "01/01/2024", "time": "08:00:00"},
            {"id": "c", "unit": 1, "value": 3.0, "date": "2024-01-01"},
            {"id": "d", "unit": 1, "value": 3.0, "date": 20240101},
            {"id": "e", "unit": 1, "value": 3.0, "date": "01/01/2024", "time": 800},
            {"id": "f", "unit": 1, "value": "Infinity", "date": "01/01/2024"},
        ],
    )
    assert [reading.id for reading in reading_service.list_readings()] == ["a"]


def test_readings_survive_shrinking_unit_count(reading_service: ReadingService) -> None:
    reading_service.add_reading(unit=3, value=9.0, number_of_units=3)
    assert [reading.unit for reading in reading_service.list_readings()] == [3]
    with pytest.raises(ValidationError):
        reading_service.add_reading(unit=3, value=9.5, number_of_units=2)
    assert len(reading_service.list_readings()) == 1

"""Magazyn klucz-wartość przechowujący kolekcje jako tekst JSON.

Każdy klucz przechowuje jedną zserializowaną wartość (lista lub obiekt).
Usługi korzystają wyłącznie z interfejsu ``KeyValueStore``, dzięki czemu
w testach można podstawić implementację w pamięci.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gasmeter.core.errors import StorageError
from gasmeter.db.models import StorageEntry


class KeyValueStore(ABC):
    """Minimalny interfejs magazynu: odczyt, zapis i usunięcie tekstu pod kluczem."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Zwraca surową wartość lub ``None``, gdy klucz nie istnieje."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Zapisuje surową wartość, nadpisując poprzednią."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Usuwa klucz; brak klucza nie jest błędem."""

    def read_json(self, key: str) -> Any | None:
        """Odczytuje i deserializuje wartość JSON."""
        raw = self.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as exc:
            raise StorageError(f"Wartość pod kluczem {key!r} nie jest poprawnym JSON-em.") from exc

    def write_json(self, key: str, value: Any) -> None:
        """Serializuje wartość do JSON i zapisuje ją pod kluczem."""
        try:
            raw = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
        except (TypeError, ValueError) as exc:
            raise StorageError(f"Nie można zserializować wartości dla klucza {key!r}.") from exc
        self.set(key, raw)


class MemoryKeyValueStore(KeyValueStore):
    """Implementacja w pamięci, używana w testach i trybie tymczasowym."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class SqlKeyValueStore(KeyValueStore):
    """Magazyn oparty o tabelę ``storage_entries`` w bazie SQLAlchemy."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def get(self, key: str) -> str | None:
        try:
            with self._session_factory() as db:
                entry = db.get(StorageEntry, key)
                return entry.value if entry is not None else None
        except SQLAlchemyError as exc:
            raise StorageError(f"Odczyt klucza {key!r} nie powiódł się.") from exc

    def set(self, key: str, value: str) -> None:
        try:
            with self._session_factory() as db:
                entry = db.get(StorageEntry, key)
                if entry is None:
                    db.add(StorageEntry(key=key, value=value))
                else:
                    entry.value = value
                db.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"Zapis klucza {key!r} nie powiódł się.") from exc

    def remove(self, key: str) -> None:
        try:
            with self._session_factory() as db:
                entry = db.get(StorageEntry, key)
                if entry is not None:
                    db.delete(entry)
                    db.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"Usunięcie klucza {key!r} nie powiodło się.") from exc

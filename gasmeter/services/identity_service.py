"""Rejestr kont i wskaźnik aktywnej sesji."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from gasmeter.core.config import Settings
from gasmeter.core.errors import StorageError
from gasmeter.core.security import generate_record_id, hash_secret, verify_secret
from gasmeter.db.kv_store import KeyValueStore
from gasmeter.db.models import ActivityEventStatus
from gasmeter.db.session import get_session
from gasmeter.schemas.auth import (
    Identity,
    IdentityCandidate,
    IdentityPublic,
    IdentityUpdate,
    Plan,
)
from gasmeter.services.logging_service import ActivityLogger

logger = logging.getLogger(__name__)

USERS_STORAGE_KEY = "gas-users"
AUTH_STORAGE_KEY = "gas-auth-user"


def _dump(identity: Identity) -> dict[str, Any]:
    return identity.model_dump(mode="json", by_alias=True)


def _default_candidates(settings: Settings) -> list[IdentityCandidate]:
    return [
        IdentityCandidate(
            email="admin@sistema.com",
            password="admin123",
            name="Administrador",
            company_name=settings.default_company_name,
            plan=Plan.enterprise,
            max_units=999,
        ),
        IdentityCandidate(
            email="demo@sistema.com",
            password="demo123",
            name="Usuário Demo",
            company_name="Empresa Demo",
            plan=Plan.free,
            max_units=settings.free_plan_max_units,
        ),
    ]


class IdentityService:
    """Logowanie, rejestracja i zarządzanie kontami w magazynie klucz-wartość."""

    def __init__(self, store: KeyValueStore, settings: Settings, logger: ActivityLogger | None = None):
        self.store = store
        self.settings = settings
        self.logger = logger or ActivityLogger(get_session, enabled=settings.activity_log_enabled)

    def _build_identity(self, candidate: IdentityCandidate, identity_id: str | None = None) -> Identity:
        return Identity(
            id=identity_id or generate_record_id(),
            email=candidate.email,
            password_secret=hash_secret(candidate.password),
            name=candidate.name,
            company_name=candidate.company_name,
            plan=candidate.plan,
            max_units=candidate.max_units,
            created_at=datetime.now(tz=timezone.utc),
        )

    def _start_session(self, identity: Identity) -> IdentityPublic:
        public = identity.public()
        self.store.write_json(AUTH_STORAGE_KEY, public.model_dump(mode="json", by_alias=True))
        return public

    def _read_records(self) -> list[Any]:
        """Surowa lista kont; uszkodzony zapis zgłasza ``StorageError``."""
        raw = self.store.read_json(USERS_STORAGE_KEY)
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise StorageError(f"Klucz {USERS_STORAGE_KEY} nie zawiera listy kont.")
        return raw

    @staticmethod
    def _parse_records(records: list[Any]) -> list[tuple[int, Identity]]:
        parsed: list[tuple[int, Identity]] = []
        for index, item in enumerate(records):
            try:
                parsed.append((index, Identity.model_validate(item)))
            except PydanticValidationError:
                logger.warning("Pomijam nieprawidłowy wpis konta %r.", item)
        return parsed

    def _write_records(self, records: list[Any]) -> None:
        self.store.write_json(USERS_STORAGE_KEY, records)

    def ensure_default_identities(self) -> list[Identity]:
        """Tworzy konta domyślne, gdy lista kont nie została jeszcze zapisana."""
        if self.store.get(USERS_STORAGE_KEY) is not None:
            return self.load_identities()
        identities = [
            self._build_identity(candidate, identity_id=str(index))
            for index, candidate in enumerate(_default_candidates(self.settings), start=1)
        ]
        self._write_records([_dump(identity) for identity in identities])
        return identities

    def load_identities(self) -> list[Identity]:
        """Zwraca poprawne konta; nieprawidłowe wpisy są pomijane, uszkodzony zapis daje pustą listę."""
        try:
            records = self._read_records()
        except StorageError:
            logger.exception("Nie udało się wczytać listy kont.")
            return []
        return [identity for _, identity in self._parse_records(records)]

    def find_by_email(self, email: str) -> Identity | None:
        return next((identity for identity in self.load_identities() if identity.email == email), None)

    def login(self, email: str, secret: str) -> IdentityPublic | None:
        """Weryfikuje dane logowania; porażka zwraca ``None``."""
        identity = self.find_by_email(email)
        if identity is None or not verify_secret(secret, identity.password_secret):
            self.logger.log(
                identity_id=identity.id if identity else None,
                event_type="login",
                status=ActivityEventStatus.denied,
                detail="Nieprawidłowe dane logowania.",
            )
            return None
        public = self._start_session(identity)
        self.logger.log(identity_id=identity.id, event_type="login", status=ActivityEventStatus.success)
        return public

    def register(self, candidate: IdentityCandidate) -> IdentityPublic | None:
        """Tworzy konto i od razu otwiera sesję; zajęty e-mail zwraca ``None``.

        Nowe konto jest dopisywane do surowej listy, więc wpisy, których nie
        da się odczytać, pozostają w magazynie nienaruszone.
        """
        try:
            records = self._read_records()
        except StorageError:
            logger.exception("Lista kont jest nieczytelna, rejestracja %s wstrzymana.", candidate.email)
            self.logger.log(event_type="register", status=ActivityEventStatus.error, detail=candidate.email)
            return None
        taken = {item.get("email") for item in records if isinstance(item, dict)}
        if candidate.email in taken:
            self.logger.log(
                event_type="register",
                status=ActivityEventStatus.denied,
                detail=f"Adres {candidate.email} jest już zarejestrowany.",
            )
            return None
        identity = self._build_identity(candidate)
        try:
            self._write_records([*records, _dump(identity)])
        except StorageError:
            logger.exception("Nie udało się zapisać nowego konta %s.", candidate.email)
            self.logger.log(event_type="register", status=ActivityEventStatus.error, detail=candidate.email)
            return None
        self.logger.log(
            identity_id=identity.id,
            event_type="register",
            status=ActivityEventStatus.success,
            detail="Nowe konto.",
        )
        return self._start_session(identity)

    def logout(self) -> None:
        """Czyści wyłącznie wskaźnik sesji."""
        current = self.current_identity()
        self.store.remove(AUTH_STORAGE_KEY)
        if current is not None:
            self.logger.log(identity_id=current.id, event_type="logout", status=ActivityEventStatus.success)

    def current_identity(self) -> IdentityPublic | None:
        """Zwraca aktywną sesję lub ``None``."""
        try:
            raw = self.store.read_json(AUTH_STORAGE_KEY)
            return IdentityPublic.model_validate(raw) if raw is not None else None
        except (StorageError, PydanticValidationError):
            logger.exception("Nie udało się wczytać aktywnej sesji.")
            return None

    def _locate(self, identity_id: str) -> tuple[list[Any], int, Identity] | None:
        records = self._read_records()
        for index, identity in self._parse_records(records):
            if identity.id == identity_id:
                return records, index, identity
        return None

    def update_identity(self, identity_id: str, changes: IdentityUpdate) -> bool:
        """Aktualizuje konto i odświeża sesję, jeśli dotyczy aktywnego konta."""
        found = self._locate(identity_id)
        if found is None:
            return False
        records, index, identity = found
        updated = identity.model_copy(update=changes.model_dump(exclude_none=True))
        records[index] = _dump(updated)
        self._write_records(records)
        current = self.current_identity()
        if current is not None and current.id == identity_id:
            self._start_session(updated)
        return True

    def delete_identity(self, identity_id: str) -> bool:
        found = self._locate(identity_id)
        if found is None:
            return False
        records, index, _ = found
        del records[index]
        self._write_records(records)
        return True

    def change_password(self, identity_id: str, old_password: str, new_password: str) -> bool:
        """Zmienia hasło po weryfikacji dotychczasowego."""
        found = self._locate(identity_id)
        if found is not None and verify_secret(old_password, found[2].password_secret):
            records, index, identity = found
            records[index] = _dump(identity.model_copy(update={"password_secret": hash_secret(new_password)}))
            self._write_records(records)
            self.logger.log(identity_id=identity_id, event_type="password_change", status=ActivityEventStatus.success)
            return True
        self.logger.log(identity_id=identity_id, event_type="password_change", status=ActivityEventStatus.denied)
        return False

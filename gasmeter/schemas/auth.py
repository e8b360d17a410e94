from __future__ import annotations

import enum
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class Plan(str, enum.Enum):
    """Dostępne plany kont."""

    free = "free"
    enterprise = "enterprise"


class IdentityPublic(BaseModel):
    """Publiczny widok konta przechowywany jako aktywna sesja (bez sekretu)."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    name: str
    company_name: str = Field(alias="companyName")
    plan: Plan = Plan.free
    max_units: int = Field(alias="maxUnits", gt=0)
    created_at: datetime = Field(alias="createdAt")


class Identity(IdentityPublic):
    """Zarejestrowane konto wraz ze skrótem hasła."""

    password_secret: str = Field(alias="passwordSecret")

    def public(self) -> IdentityPublic:
        """Zwraca projekcję konta bez sekretu."""
        return IdentityPublic.model_validate(self.model_dump(exclude={"password_secret"}))


class IdentityCandidate(BaseModel):
    """Dane potrzebne do utworzenia konta."""

    email: str
    password: str
    name: str
    company_name: str
    plan: Plan = Plan.free
    max_units: int = Field(gt=0)


class IdentityUpdate(BaseModel):
    """Pola konta, które można zmienić."""

    name: str | None = None
    company_name: str | None = None
    plan: Plan | None = None
    max_units: int | None = Field(default=None, gt=0)


class LoginRequest(BaseModel):
    """Dane logowania użytkownika."""

    email: EmailStr
    password: str = Field(min_length=1)


class RegisterRequest(BaseModel):
    """Dane do utworzenia konta użytkownika."""

    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    name: str = Field(min_length=1, max_length=100)
    company_name: str = Field(min_length=1, max_length=150)


class ChangePasswordRequest(BaseModel):
    """Zmiana hasła aktywnego konta."""

    old_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6, max_length=128)

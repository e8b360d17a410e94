from datetime import datetime
from http import HTTPStatus

from fastapi.testclient import TestClient

from gasmeter.schemas.reading import Reading


def register(client: TestClient, email: str, password: str = "Segredo123", company: str = "Condomínio Teste") -> dict:
    """Pomocniczo rejestruje konto (rejestracja od razu otwiera sesję)."""
    response = client.post(
        "/auth/register",
        json={"email": email, "password": password, "name": "Teste", "company_name": company},
    )
    assert response.status_code == HTTPStatus.CREATED, response.text
    return response.json()


def make_reading(reading_id: str, unit: int, value: float, recorded_at: datetime) -> Reading:
    return Reading(id=reading_id, unit=unit, value=value, recorded_at=recorded_at)

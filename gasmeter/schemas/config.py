from pydantic import BaseModel, ConfigDict, Field


class AppConfig(BaseModel):
    """Konfiguracja instalacji: liczba jednostek i dane do raportów.

    Zakres liczby jednostek sprawdza ``ConfigService``, ponieważ odczyt ma
    wracać do wartości domyślnych zamiast zgłaszać błąd.
    """

    model_config = ConfigDict(populate_by_name=True)

    number_of_units: int = Field(alias="numberOfUnits")
    company_name: str | None = Field(default=None, alias="companyName")
    responsible_name: str | None = Field(default=None, alias="responsibleName")

"""Wyjątki domenowe aplikacji."""


class GasMeterError(Exception):
    """Bazowy wyjątek aplikacji."""


class ValidationError(GasMeterError):
    """Dane wejściowe nie spełniają reguł domeny."""


class PlanLimitError(ValidationError):
    """Konfiguracja przekracza limit jednostek planu konta."""

    def __init__(self, max_units: int) -> None:
        super().__init__(f"Seu plano permite no máximo {max_units} unidades")
        self.max_units = max_units


class StorageError(GasMeterError):
    """Błąd serializacji lub zapisu w magazynie klucz-wartość."""

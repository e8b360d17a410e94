from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Bazowa klasa deklaratywna modeli."""

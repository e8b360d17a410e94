import time
from uuid import uuid4

from passlib.context import CryptContext


pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_secret(value: str) -> str:
    """Zwraca solony skrót hasła."""
    return pwd_context.hash(value)


def verify_secret(value: str, hashed: str) -> bool:
    """Porównuje wartość z zapisanym skrótem."""
    try:
        return pwd_context.verify(value, hashed)
    except ValueError:
        # Nierozpoznany format skrótu traktujemy jak błędne hasło.
        return False


def generate_record_id() -> str:
    """Generuje identyfikator oparty na czasie z losowym sufiksem."""
    return f"{time.time_ns()}-{uuid4().hex[:8]}"

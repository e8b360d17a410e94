from gasmeter.core.security import generate_record_id, hash_secret, verify_secret


def test_hash_is_salted_and_verifiable() -> None:
    first = hash_secret("admin123")
    second = hash_secret("admin123")

    assert first != "admin123"
    assert first != second
    assert verify_secret("admin123", first)
    assert verify_secret("admin123", second)
    assert not verify_secret("admin124", first)


def test_verify_rejects_unknown_hash_format() -> None:
    assert verify_secret("admin123", "admin123") is False


def test_record_ids_are_unique() -> None:
    ids = {generate_record_id() for _ in range(200)}
    assert len(ids) == 200

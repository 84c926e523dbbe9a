import pytest

from liturgi.app.services.passwords import hash_password, validate_password, verify_password


def test_hash_is_argon2id_and_verifies():
    password_hash = hash_password("Secret123")

    assert password_hash.startswith("$argon2id$")
    assert verify_password(password_hash, "Secret123")
    assert not verify_password(password_hash, "Secret124")


def test_same_password_hashes_differently():
    assert hash_password("Secret123") != hash_password("Secret123")


@pytest.mark.parametrize("password_hash", [None, "", "not-a-hash"])
def test_missing_or_malformed_hash_never_verifies(password_hash):
    assert verify_password(password_hash, "Secret123") is False


@pytest.mark.parametrize(
    "password,message",
    [
        ("Sh0rt", "Password must be at least 8 characters"),
        ("lowercase1", "Password must contain at least one uppercase letter"),
        ("UPPERCASE1", "Password must contain at least one lowercase letter"),
        ("NoDigitsHere", "Password must contain at least one number"),
    ],
)
def test_password_policy_names_first_failed_rule(password, message):
    assert validate_password(password) == message


def test_password_policy_accepts_strong_password():
    assert validate_password("Secret123") is None

import pyotp

from liturgi.app.services.two_factor import (
    BACKUP_CODE_COUNT,
    consume_backup_code,
    generate_backup_codes,
    generate_secret,
    provisioning_uri,
    verify_totp,
)


def test_current_totp_code_verifies():
    secret = generate_secret()

    assert verify_totp(secret, pyotp.TOTP(secret).now())


def test_totp_without_secret_fails():
    assert verify_totp(None, "123456") is False
    assert verify_totp("JBSWY3DPEHPK3PXP", "") is False


def test_provisioning_uri_names_issuer_and_account():
    uri = provisioning_uri(generate_secret(), "pastor@grace.church")

    assert uri.startswith("otpauth://totp/")
    assert "issuer=Liturgi" in uri
    assert "pastor%40grace.church" in uri


def test_backup_code_is_single_use():
    codes, hashes = generate_backup_codes()
    assert len(codes) == BACKUP_CODE_COUNT

    matched, remaining = consume_backup_code(hashes, codes[0].lower())
    assert matched
    assert len(remaining) == BACKUP_CODE_COUNT - 1

    matched_again, unchanged = consume_backup_code(remaining, codes[0])
    assert not matched_again
    assert unchanged == remaining

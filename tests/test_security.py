from datetime import datetime, timedelta, timezone

from app.core import security
from app.core.security import ADMIN_ROLE, USER_ROLE


def test_token_round_trip_carries_identity():
    token = security.create_access_token(42, "anna@example.com", is_admin=True)
    identity = security.decode_access_token(token)

    assert identity is not None
    assert identity.user_id == 42
    assert identity.email == "anna@example.com"
    assert identity.is_admin is True
    assert identity.roles == {USER_ROLE, ADMIN_ROLE}


def test_regular_user_only_has_user_role():
    identity = security.decode_access_token(security.create_access_token(7, "ben@example.com"))
    assert identity.roles == {USER_ROLE}


def test_token_still_valid_just_before_seven_days():
    issued = datetime.now(timezone.utc) - timedelta(days=6, hours=23)
    token = security.create_access_token(1, "a@example.com", now=issued)
    assert security.decode_access_token(token) is not None


def test_token_expires_after_seven_days():
    issued = datetime.now(timezone.utc) - timedelta(days=7, minutes=1)
    token = security.create_access_token(1, "a@example.com", now=issued)
    assert security.decode_access_token(token) is None


def test_tampered_or_garbage_tokens_are_rejected():
    token = security.create_access_token(1, "a@example.com")
    assert security.decode_access_token(token[:-2] + "xx") is None
    assert security.decode_access_token("not-a-jwt") is None
    assert security.decode_access_token(None) is None


def test_password_hashing():
    hashed = security.get_password_hash("secret123")
    assert hashed != "secret123"
    assert security.verify_password("secret123", hashed)
    assert not security.verify_password("wrong", hashed)
    assert not security.verify_password("", hashed)


def test_reset_code_is_six_digits():
    for _ in range(20):
        code = security.generate_reset_code()
        assert len(code) == 6
        assert code.isdigit()

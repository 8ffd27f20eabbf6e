"""Tests for password hashing and access tokens."""

import jwt
import pytest
from fastapi import HTTPException

from auth import dependencies, security


def test_password_round_trip() -> None:
    hashed = security.hash_password("correct horse")
    assert hashed != "correct horse"
    assert security.verify_password("correct horse", hashed)
    assert not security.verify_password("wrong horse", hashed)


def test_empty_password_rejected() -> None:
    with pytest.raises(security.AuthSecurityError):
        security.hash_password("")
    assert not security.verify_password("", "not-a-hash")


def test_verify_against_garbage_hash() -> None:
    assert not security.verify_password("secret123", "not-a-bcrypt-hash")


def test_access_token_claims(monkeypatch) -> None:
    monkeypatch.setenv("JWT_SECRET", "test-secret")
    token = security.build_access_token(user_id=7, email="a@example.com")

    payload = security.decode_access_token(token)

    assert payload["sub"] == "7"
    assert payload["email"] == "a@example.com"
    assert payload["type"] == "access"
    assert payload["exp"] - payload["iat"] == 7 * 24 * 60 * 60


def test_token_signed_with_other_secret(monkeypatch) -> None:
    monkeypatch.setenv("JWT_SECRET", "one")
    token = security.build_access_token(user_id=1, email="a@example.com")
    monkeypatch.setenv("JWT_SECRET", "two")

    with pytest.raises(security.AuthSecurityError):
        security.decode_access_token(token)


def test_expired_token(monkeypatch) -> None:
    monkeypatch.setenv("JWT_SECRET", "test-secret")
    token = jwt.encode({"sub": "1", "type": "access", "exp": 1}, "test-secret", algorithm="HS256")

    with pytest.raises(security.AuthSecurityError, match="expired"):
        security.decode_access_token(token)


def test_non_access_token(monkeypatch) -> None:
    monkeypatch.setenv("JWT_SECRET", "test-secret")
    token = jwt.encode({"sub": "1", "type": "refresh"}, "test-secret", algorithm="HS256")

    with pytest.raises(security.AuthSecurityError):
        security.decode_access_token(token)


@pytest.mark.parametrize("header", [None, "", "Token abc", "Bearer", "Bearer   "])
def test_bad_authorization_header(header) -> None:
    with pytest.raises(HTTPException) as exc_info:
        dependencies.extract_bearer_token(header)
    assert exc_info.value.status_code == 401


def test_bearer_token_extracted() -> None:
    assert dependencies.extract_bearer_token("bearer abc.def") == "abc.def"

"""Unit tests for JWT handler."""

from datetime import timedelta
from unittest.mock import patch

import pytest
from jose import jwt

from config.settings import settings
from src.sf_common.errors import InvalidCredentialsError
from src.sf_gateway.auth.jwt_handler import create_access_token, decode_token


def test_access_token_contains_correct_claims() -> None:
    token = create_access_token("cust-123", "customer")
    payload = jwt.get_unverified_claims(token)
    assert payload["sub"] == "cust-123"
    assert payload["type"] == "access"
    assert payload["user_type"] == "customer"
    assert "role" not in payload


def test_admin_token_carries_role() -> None:
    token = create_access_token("adm-1", "admin", role="OPERATOR")
    assert decode_token(token)["role"] == "OPERATOR"


def test_decode_valid_access_token() -> None:
    payload = decode_token(create_access_token("cust-abc", "customer"))
    assert payload["sub"] == "cust-abc"


def test_expired_token_raises_credentials_error() -> None:
    with patch(
        "src.sf_gateway.auth.jwt_handler._ACCESS_EXPIRE",
        timedelta(seconds=-1),
    ):
        token = create_access_token("cust-abc", "customer")
    with pytest.raises(InvalidCredentialsError):
        decode_token(token)


def test_wrong_secret_raises_credentials_error() -> None:
    token = jwt.encode(
        {"sub": "cust-abc", "type": "access", "user_type": "customer"},
        "some-other-secret",
        algorithm="HS256",
    )
    with pytest.raises(InvalidCredentialsError):
        decode_token(token)


def test_non_access_token_rejected() -> None:
    """Refresh tokens from the auth service must not open the order API."""
    token = jwt.encode(
        {"sub": "cust-abc", "type": "refresh", "user_type": "customer"},
        settings.JWT_SECRET,
        algorithm="HS256",
    )
    with pytest.raises(InvalidCredentialsError):
        decode_token(token)


def test_garbage_token_rejected() -> None:
    with pytest.raises(InvalidCredentialsError):
        decode_token("not-a-jwt")

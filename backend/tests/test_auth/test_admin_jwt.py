"""Unit tests for admin token creation and decoding."""

from datetime import timedelta

import pytest
from jose import JWTError, jwt

from studiorent.auth.jwt import create_admin_token, decode_token
from studiorent.config import settings


class TestCreateAdminToken:
    def test_claims(self):
        payload = decode_token(create_admin_token())
        assert payload["sub"] == "admin"
        assert payload["admin"] is True
        assert payload["type"] == "access"
        assert "iat" in payload
        assert "exp" in payload

    def test_default_expiry(self):
        payload = decode_token(create_admin_token())
        assert payload["exp"] - payload["iat"] == settings.jwt_admin_token_expire_hours * 3600

    def test_custom_expiry_delta(self):
        payload = decode_token(create_admin_token(expires_delta=timedelta(minutes=5)))
        assert payload["exp"] - payload["iat"] == 300


class TestDecodeToken:
    def test_expired_token_rejected(self):
        token = create_admin_token(expires_delta=timedelta(seconds=-1))
        with pytest.raises(JWTError):
            decode_token(token)

    def test_wrong_secret_rejected(self):
        token = jwt.encode({"sub": "admin"}, "some-other-secret", algorithm=settings.jwt_algorithm)
        with pytest.raises(JWTError):
            decode_token(token)

    def test_garbage_rejected(self):
        with pytest.raises(JWTError):
            decode_token("not-a-jwt")

"""Unit tests for security/jwt.py"""

import time
from datetime import timedelta

import pytest
from fastapi import Response
from jose import jwt

from src.notevault.config import get_settings
from src.notevault.security import jwt as jwt_module
from src.notevault.security.jwt import (
    blacklist_token,
    clear_token_cookie,
    create_access_token,
    decode_access_token,
    get_user_id_from_token,
    set_token_cookie,
)


class FakeRedis:
    def __init__(self):
        self.blacklisted = {}

    async def add_to_blacklist(self, jti, expire):
        self.blacklisted[jti] = expire
        return True

    async def is_token_blacklisted(self, jti):
        return jti in self.blacklisted


@pytest.fixture
def fake_redis(monkeypatch):
    fake = FakeRedis()
    monkeypatch.setattr(jwt_module, "get_redis_client", lambda: fake)
    return fake


def test_token_claims():
    settings = get_settings()
    token = create_access_token(7)
    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])

    assert payload["sub"] == "7"
    assert payload["type"] == "access"
    assert payload["jti"]
    # roughly thirty days out
    assert payload["exp"] - time.time() > 29 * 24 * 3600


@pytest.mark.asyncio
async def test_decode_round_trip(fake_redis):
    assert await get_user_id_from_token(create_access_token(42)) == 42


@pytest.mark.asyncio
async def test_expired_token_rejected(fake_redis):
    token = create_access_token(1, expires_delta=timedelta(seconds=-5))
    assert await decode_access_token(token) is None


@pytest.mark.asyncio
async def test_tampered_or_foreign_token_rejected(fake_redis):
    settings = get_settings()
    token = create_access_token(1)
    assert await decode_access_token(token + "x") is None

    forged = jwt.encode({"sub": "1", "type": "access"}, "another-secret", algorithm=settings.algorithm)
    assert await decode_access_token(forged) is None

    wrong_type = jwt.encode({"sub": "1", "type": "refresh"}, settings.secret_key, algorithm=settings.algorithm)
    assert await decode_access_token(wrong_type) is None


@pytest.mark.asyncio
async def test_non_numeric_subject(fake_redis):
    settings = get_settings()
    token = jwt.encode({"sub": "abc", "type": "access"}, settings.secret_key, algorithm=settings.algorithm)
    assert await get_user_id_from_token(token) is None


@pytest.mark.asyncio
async def test_blacklisted_token_rejected(fake_redis):
    token = create_access_token(3)

    assert await blacklist_token(token) is True
    assert await decode_access_token(token) is None
    # expiry of the blacklist entry follows the token lifetime
    assert list(fake_redis.blacklisted.values())[0] > 29 * 24 * 3600


@pytest.mark.asyncio
async def test_blacklist_lookup_failure_lets_token_through(monkeypatch):
    class Down:
        async def is_token_blacklisted(self, jti):
            raise ConnectionError("redis unavailable")

    monkeypatch.setattr(jwt_module, "get_redis_client", lambda: Down())
    assert await get_user_id_from_token(create_access_token(5)) == 5


@pytest.mark.asyncio
async def test_blacklist_invalid_token(fake_redis):
    assert await blacklist_token("garbage") is False
    assert fake_redis.blacklisted == {}


def test_cookie_helpers():
    response = Response()
    set_token_cookie(response, "abc")
    header = response.headers["set-cookie"].lower()
    assert header.startswith("jwt=abc")
    assert "httponly" in header
    assert "samesite=strict" in header
    assert f"max-age={30 * 24 * 3600}" in header

    cleared = Response()
    clear_token_cookie(cleared)
    assert 'jwt=""' in cleared.headers["set-cookie"] or "max-age=0" in cleared.headers["set-cookie"].lower()

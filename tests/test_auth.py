"""
Tests de l'authentification des utilisateurs et des services
"""

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt

from vapi_hub.core import auth
from vapi_hub.core.config import settings
from vapi_hub.core.security import is_valid_api_key

SECRET = "test-jwt-secret"


@pytest.fixture
def jwt_settings(monkeypatch):
    monkeypatch.setattr(settings, "supabase_jwt_secret", SECRET)
    monkeypatch.setattr(settings, "supabase_jwt_audience", "authenticated")


def make_token(secret=SECRET, **claims):
    payload = {"sub": "user-1", "email": "owner@example.com", "aud": "authenticated"}
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


def bearer(token):
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


@pytest.mark.asyncio
async def test_valid_jwt_returns_user(jwt_settings):
    user = await auth.get_current_user(bearer(make_token()))

    assert user["id"] == "user-1"
    assert user["email"] == "owner@example.com"


@pytest.mark.asyncio
async def test_jwt_signed_with_wrong_secret_is_rejected(jwt_settings):
    with pytest.raises(HTTPException) as exc_info:
        await auth.get_current_user(bearer(make_token(secret="other-secret")))

    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_jwt_with_wrong_audience_is_rejected(jwt_settings):
    with pytest.raises(HTTPException) as exc_info:
        await auth.get_current_user(bearer(make_token(aud="anon")))

    assert exc_info.value.status_code == 401


def test_jwt_without_subject_is_rejected(jwt_settings):
    with pytest.raises(HTTPException) as exc_info:
        auth.decode_session_token(make_token(sub=""))

    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_missing_configuration_is_rejected(monkeypatch):
    monkeypatch.setattr(settings, "supabase_jwt_secret", "")
    monkeypatch.setattr(settings, "supabase_url", "")

    with pytest.raises(HTTPException) as exc_info:
        await auth.get_current_user(bearer("any-token"))

    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_falls_back_to_supabase_user_endpoint(monkeypatch):
    monkeypatch.setattr(settings, "supabase_jwt_secret", "")
    monkeypatch.setattr(settings, "supabase_url", "https://project.supabase.co")
    seen = []

    async def fake_fetch(token):
        seen.append(token)
        return {"id": "user-7", "email": None, "app_metadata": {}, "user_metadata": {}}

    monkeypatch.setattr(auth, "fetch_supabase_user", fake_fetch)

    user = await auth.get_current_user(bearer("opaque-token"))

    assert user["id"] == "user-7"
    assert seen == ["opaque-token"]


def test_service_api_key(monkeypatch):
    monkeypatch.setattr(settings, "api_secret_key", "service-key")

    assert is_valid_api_key("service-key") is True
    assert is_valid_api_key("wrong") is False
    assert is_valid_api_key(None) is False


def test_service_api_key_disabled_when_not_configured(monkeypatch):
    monkeypatch.setattr(settings, "api_secret_key", "")

    assert is_valid_api_key("") is False
    assert is_valid_api_key("anything") is False

"""
Unit tests for bearer token handling
"""

import pytest
from datetime import timedelta
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt
from unittest.mock import patch

from app.core.config import settings
from app.middleware.auth import get_current_user_id
from app.services.auth import JWTService


class TestJWTService:
    """Test token creation and verification"""

    def test_round_trip_user_id(self):
        token = JWTService.create_access_token("user-7")
        assert JWTService.user_id_from_token(token) == "user-7"

    def test_expired_token_rejected(self):
        token = JWTService.create_access_token("user-7", expires_delta=timedelta(seconds=-10))
        assert JWTService.verify_token(token) is None

    def test_wrong_secret_rejected(self):
        token = jwt.encode({"sub": "user-7"}, "another-secret", algorithm=settings.algorithm)
        assert JWTService.user_id_from_token(token) is None

    def test_token_without_subject(self):
        token = jwt.encode({"role": "anon"}, settings.secret_key, algorithm=settings.algorithm)
        assert JWTService.user_id_from_token(token) is None

    def test_audience_enforced_when_configured(self):
        with patch.object(settings, "jwt_audience", "authenticated"):
            token = JWTService.create_access_token("user-7")
            assert JWTService.user_id_from_token(token) == "user-7"

        foreign = jwt.encode({"sub": "user-7", "aud": "other"}, settings.secret_key, algorithm=settings.algorithm)
        with patch.object(settings, "jwt_audience", "authenticated"):
            assert JWTService.user_id_from_token(foreign) is None


class TestCurrentUserDependency:

    @pytest.mark.asyncio
    async def test_valid_credentials(self):
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=JWTService.create_access_token("u1"))
        assert await get_current_user_id(credentials) == "u1"

    @pytest.mark.asyncio
    async def test_missing_credentials(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user_id(None)
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_credentials(self):
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="garbage")
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user_id(credentials)
        assert exc_info.value.status_code == 401

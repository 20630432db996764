"""
Bearer token verification

Tokens are issued by the identity provider; ``create_access_token`` exists for
the CLI and the test suite, which sign tokens with the shared secret.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from app.core.config import settings

logger = logging.getLogger(__name__)


class JWTService:
    """HS256 tokens carrying the user id in ``sub``"""

    @staticmethod
    def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
        expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=1))
        claims: Dict[str, Any] = {"sub": user_id, "exp": expire}
        if settings.jwt_audience:
            claims["aud"] = settings.jwt_audience
        return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)

    @staticmethod
    def verify_token(token: str) -> Optional[Dict[str, Any]]:
        """Decode a token; None when the signature, expiry or audience is wrong"""
        options = {"verify_aud": bool(settings.jwt_audience)}
        try:
            return jwt.decode(
                token,
                settings.secret_key,
                algorithms=[settings.algorithm],
                audience=settings.jwt_audience,
                options=options,
            )
        except JWTError as e:
            logger.info(f"Rejected bearer token: {str(e)}")
            return None

    @staticmethod
    def user_id_from_token(token: str) -> Optional[str]:
        payload = JWTService.verify_token(token)
        if not payload:
            return None
        return payload.get("sub") or None

"""
Health and readiness check service
"""

import logging
import os
import time
from datetime import datetime, timezone
from typing import Dict, Any, Callable

from sqlalchemy import text
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import SessionLocal

logger = logging.getLogger(__name__)

SERVICE_NAME = "migrant-legal-guide-api"
SERVICE_VERSION = "1.0.0"


class HealthService:
    """
    Liveness and readiness checks; readiness is cached for a short time
    """

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal, cache_ttl: int = 30):
        self.session_factory = session_factory
        self._cache_ttl = cache_ttl
        self._last_check = 0.0
        self._cached_status = None

    def liveness_check(self) -> Dict[str, Any]:
        return {
            "status": "healthy",
            "timestamp": self._timestamp(),
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION
        }

    def readiness_check(self) -> Dict[str, Any]:
        now = time.time()
        if self._cached_status and now - self._last_check < self._cache_ttl:
            return self._cached_status

        components = {
            "database": self._check_database(),
            "ai_gateway": self._check_key(settings.ai_gateway_api_key, "AI_GATEWAY_API_KEY"),
            "dify": self._check_key(settings.dify_api_key, "DIFY_API_KEY"),
        }
        ready = all(c["status"] == "healthy" for c in components.values())

        result = {
            "status": "ready" if ready else "not_ready",
            "timestamp": self._timestamp(),
            "components": components
        }
        self._cached_status = result
        self._last_check = now
        return result

    def clear_cache(self) -> None:
        self._cached_status = None
        self._last_check = 0.0

    def _check_database(self) -> Dict[str, Any]:
        db = self.session_factory()
        try:
            db.execute(text("SELECT 1"))
            return {
                "status": "healthy",
                "url": settings.database_url.split("@")[-1] if "@" in settings.database_url else "local"
            }
        except Exception as e:
            logger.error(f"Database health check failed: {str(e)}")
            return {"status": "unhealthy", "error": str(e)}
        finally:
            db.close()

    def _check_key(self, configured: str, env_var: str) -> Dict[str, Any]:
        key = configured or os.getenv(env_var)
        if key and key.strip():
            return {"status": "healthy"}
        return {"status": "unhealthy", "error": f"{env_var} is not configured"}

    def _timestamp(self) -> str:
        return datetime.now(timezone.utc).isoformat()

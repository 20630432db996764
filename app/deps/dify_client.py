"""
Dify chat-messages client (retrieval-augmented legal assistant)
"""

import os
import logging
from typing import Any, Dict, Optional
import requests

from app.core.config import settings
from app.deps.exceptions import (
    MissingAPIKeyError,
    InvalidAPIKeyError,
    UpstreamRateLimitedError,
    UpstreamBillingRequiredError,
    UpstreamUnavailableError,
)
from app.deps.utils import sanitize_api_key

logger = logging.getLogger(__name__)


def _get_api_key(api_key: Optional[str] = None) -> str:
    resolved_key = api_key or settings.dify_api_key or os.getenv("DIFY_API_KEY")
    if not resolved_key or resolved_key.strip() == "":
        raise MissingAPIKeyError("Dify", "DIFY_API_KEY")
    return resolved_key.strip()


def dify_chat(
    query: str,
    user: str,
    inputs: Optional[Dict[str, Any]] = None,
    conversation_id: str = "",
    api_key: Optional[str] = None
) -> Dict[str, Any]:
    """
    Send a blocking chat-messages request to Dify and return the raw JSON body.

    Raises:
        MissingAPIKeyError: If the Dify key is not configured
        InvalidAPIKeyError: On HTTP 401
        UpstreamRateLimitedError: On HTTP 429
        UpstreamBillingRequiredError: On HTTP 402
        UpstreamUnavailableError: On any other failure
    """
    resolved_api_key = _get_api_key(api_key)

    payload = {
        "inputs": inputs or {},
        "query": query,
        "response_mode": "blocking",
        "conversation_id": conversation_id,
        "user": user,
    }

    try:
        response = requests.post(
            f"{settings.dify_api_url.rstrip('/')}/chat-messages",
            json=payload,
            headers={
                "Authorization": f"Bearer {resolved_api_key}",
                "Content-Type": "application/json",
            },
            timeout=settings.dify_timeout_seconds,
        )
    except requests.RequestException as e:
        logger.error(f"Dify request failed: {sanitize_api_key(str(e), resolved_api_key)}")
        raise UpstreamUnavailableError(f"Dify API error: {type(e).__name__}") from e

    if not response.ok:
        logger.error(f"Dify API error: {response.status_code} {sanitize_api_key(response.text[:500], resolved_api_key)}")
        if response.status_code == 401:
            raise InvalidAPIKeyError("Dify")
        if response.status_code == 429:
            raise UpstreamRateLimitedError("Dify API error: 429")
        if response.status_code == 402:
            raise UpstreamBillingRequiredError("Dify API error: 402")
        raise UpstreamUnavailableError(f"Dify API error: {response.status_code}")

    try:
        return response.json()
    except ValueError as e:
        raise UpstreamUnavailableError("Dify API returned a non-JSON body") from e

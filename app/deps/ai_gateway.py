"""
AI gateway client (OpenAI-compatible chat completions)
"""

import os
import logging
from typing import List, Dict, Optional
from openai import OpenAI
from openai.types.chat import ChatCompletion
from openai import AuthenticationError as OpenAIAuthenticationError
from openai import RateLimitError as OpenAIRateLimitError
from openai import APIStatusError as OpenAIAPIStatusError
from openai import APIError as OpenAIAPIError

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
    """
    Get API key from parameter, Settings, or environment variable (in that order).

    Raises:
        MissingAPIKeyError: If no API key is found
    """
    resolved_key = api_key or settings.ai_gateway_api_key or os.getenv("AI_GATEWAY_API_KEY")

    if not resolved_key or resolved_key.strip() == "":
        raise MissingAPIKeyError("AI gateway", "AI_GATEWAY_API_KEY")

    return resolved_key.strip()


def gateway_chat(
    messages: List[Dict[str, str]],
    temperature: float = 0.2,
    max_tokens: int = 2000,
    api_key: Optional[str] = None
) -> str:
    """
    Send a chat completion request to the AI gateway.

    Args:
        messages: List of message dictionaries with 'role' and 'content' keys
        temperature: Sampling temperature
        max_tokens: Maximum tokens in response
        api_key: Optional API key (overrides Settings/env var)

    Returns:
        Content string from the assistant's response (may be empty)

    Raises:
        MissingAPIKeyError: If API key is missing
        InvalidAPIKeyError: If the gateway rejects the key
        UpstreamRateLimitedError: On HTTP 429
        UpstreamBillingRequiredError: On HTTP 402
        UpstreamUnavailableError: For any other failure
    """
    resolved_api_key = _get_api_key(api_key)

    try:
        client = OpenAI(
            api_key=resolved_api_key,
            base_url=settings.ai_gateway_url,
            max_retries=0
        )

        response: ChatCompletion = client.chat.completions.create(
            model=settings.ai_model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            stream=False
        )

        if response.choices:
            return response.choices[0].message.content or ""
        return ""

    except OpenAIAuthenticationError as e:
        logger.error(f"AI gateway authentication failed: {sanitize_api_key(str(e), resolved_api_key)}")
        raise InvalidAPIKeyError("AI gateway") from e
    except OpenAIRateLimitError as e:
        logger.warning("AI gateway rate limited the request")
        raise UpstreamRateLimitedError("AI gateway error: 429") from e
    except OpenAIAPIStatusError as e:
        error_msg = sanitize_api_key(str(e), resolved_api_key)
        logger.error(f"AI gateway error: {e.status_code} {error_msg}")
        if e.status_code == 402:
            raise UpstreamBillingRequiredError("AI gateway error: 402") from e
        if e.status_code == 429:
            raise UpstreamRateLimitedError("AI gateway error: 429") from e
        raise UpstreamUnavailableError(f"AI gateway error: {e.status_code}") from e
    except OpenAIAPIError as e:
        error_msg = sanitize_api_key(str(e), resolved_api_key)
        logger.error(f"AI gateway error: {error_msg}")
        raise UpstreamUnavailableError(f"AI gateway error: {error_msg}") from e

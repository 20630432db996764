"""
Utility functions for upstream API clients
"""

import re
from typing import Optional

# Common API key shapes: OpenAI-style, Dify app keys, generic long tokens
_KEY_PATTERNS = [
    r'sk-[a-zA-Z0-9]{20,}',
    r'app-[a-zA-Z0-9]{20,}',
    r'[a-zA-Z0-9]{32,}',
]


def _mask(value: str) -> str:
    if len(value) <= 8:
        return "****"
    return value[:4] + "*" * (len(value) - 8) + value[-4:]


def sanitize_api_key(text: str, api_key: Optional[str] = None) -> str:
    """
    Mask API keys in text before it reaches logs or error responses

    Args:
        text: Text that may contain an API key
        api_key: Optional known key to mask (common key shapes are masked anyway)

    Returns:
        Text with keys masked
    """
    if not text:
        return text

    if api_key and api_key in text:
        text = text.replace(api_key, _mask(api_key))

    for pattern in _KEY_PATTERNS:
        text = re.sub(pattern, lambda m: _mask(m.group()), text)

    return text


def extract_json_object(content: str) -> Optional[str]:
    """Return the outermost {...} span of a model reply, if any"""
    match = re.search(r'\{[\s\S]*\}', content or "")
    return match.group(0) if match else None

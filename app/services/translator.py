"""
Text translation between the supported languages
"""

import abc
import asyncio
import logging
from dataclasses import dataclass
from typing import Dict

from app.deps.ai_gateway import gateway_chat

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Language:
    code: str
    name: str
    speech_code: str


LANGUAGES: Dict[str, Language] = {
    "ne": Language("ne", "नेपाली", "ne-NP"),
    "en": Language("en", "English", "en-US"),
    "ar": Language("ar", "العربية", "ar-SA"),
    "hi": Language("hi", "हिन्दी", "hi-IN"),
    "my": Language("my", "Bahasa Melayu", "ms-MY"),
}


def language_name(code: str) -> str:
    language = LANGUAGES.get(code)
    return language.name if language else code


def speech_code(code: str, default: str = "en-US") -> str:
    language = LANGUAGES.get(code)
    return language.speech_code if language else default


class Translator(abc.ABC):
    @abc.abstractmethod
    async def translate(self, text: str, from_lang: str, to_lang: str) -> str:
        """
        Raises:
            UpstreamRateLimitedError, UpstreamUnavailableError, MissingAPIKeyError
        """


class GatewayTranslator(Translator):
    """Translation through the AI gateway"""

    def __init__(self, temperature: float = 0.1, max_tokens: int = 2000):
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def translate(self, text: str, from_lang: str, to_lang: str) -> str:
        logger.info(f"Translation request: {from_lang}->{to_lang}, {len(text)} characters")
        messages = [
            {
                "role": "system",
                "content": (
                    f"You are a professional translator. Translate the following text from "
                    f"{language_name(from_lang)} to {language_name(to_lang)}. Only output the "
                    f"translation, nothing else. Preserve the original meaning and tone."
                )
            },
            {"role": "user", "content": text}
        ]
        translation = await asyncio.to_thread(
            gateway_chat, messages, temperature=self.temperature, max_tokens=self.max_tokens
        )
        return translation.strip()

"""
Translation session with optional voice input and spoken output
"""

import abc
import logging
from dataclasses import dataclass
from typing import Optional

from app.core import localization
from app.services.notifications import Notifier
from app.services.translator import Translator, speech_code

logger = logging.getLogger(__name__)


class SpeechRecognizer(abc.ABC):
    @abc.abstractmethod
    async def start(self, language: str) -> None:
        """Begin capturing speech in the given speech code"""

    @abc.abstractmethod
    async def stop(self) -> str:
        """Stop capturing and return the recognized text"""


class SpeechSynthesizer(abc.ABC):
    @abc.abstractmethod
    async def speak(self, text: str, language: str) -> None:
        """Speak text with a voice for the given speech code"""


@dataclass
class TranslationState:
    from_lang: str = "ne"
    to_lang: str = "en"
    input_text: str = ""
    output_text: str = ""
    busy: bool = False
    recording: bool = False
    speaking: bool = False


class TranslationSession:
    def __init__(
        self,
        translator: Translator,
        notifier: Optional[Notifier] = None,
        recognizer: Optional[SpeechRecognizer] = None,
        synthesizer: Optional[SpeechSynthesizer] = None,
        from_lang: str = "ne",
        to_lang: str = "en"
    ):
        self.translator = translator
        self.notifier = notifier or Notifier()
        self.recognizer = recognizer
        self.synthesizer = synthesizer
        self.state = TranslationState(from_lang=from_lang, to_lang=to_lang)

    async def translate(self, text: Optional[str] = None) -> Optional[str]:
        if text is not None:
            self.state.input_text = text
        source = self.state.input_text
        if not source.strip() or self.state.busy:
            return None

        self.state.busy = True
        try:
            translation = await self.translator.translate(source, self.state.from_lang, self.state.to_lang)
            self.state.output_text = translation
            return translation
        except Exception as e:
            logger.error(f"Translation error: {str(e)}")
            self.notifier.error(localization.TRANSLATION_FAILED)
            return None
        finally:
            self.state.busy = False

    def swap(self) -> TranslationState:
        """Exchange languages and texts together"""
        s = self.state
        s.from_lang, s.to_lang = s.to_lang, s.from_lang
        s.input_text, s.output_text = s.output_text, s.input_text
        return s

    async def start_voice_input(self) -> bool:
        if self.recognizer is None:
            self.notifier.error(localization.VOICE_INPUT_UNAVAILABLE)
            return False
        if self.state.recording:
            return True
        try:
            await self.recognizer.start(speech_code(self.state.from_lang))
        except Exception as e:
            logger.error(f"Speech recognition error: {str(e)}")
            self.notifier.error(localization.VOICE_RECOGNITION_FAILED)
            return False
        self.state.recording = True
        return True

    async def stop_voice_input(self) -> str:
        """Stop capturing; recognized text replaces the input. In-flight translations are left alone."""
        if self.recognizer is None or not self.state.recording:
            return self.state.input_text
        self.state.recording = False
        try:
            transcript = await self.recognizer.stop()
        except Exception as e:
            logger.error(f"Speech recognition error: {str(e)}")
            self.notifier.error(localization.VOICE_RECOGNITION_FAILED)
            return self.state.input_text
        if transcript:
            self.state.input_text = transcript
        return self.state.input_text

    async def speak_output(self) -> bool:
        text = self.state.output_text
        if self.synthesizer is None or not text.strip():
            return False
        self.state.speaking = True
        try:
            await self.synthesizer.speak(text, speech_code(self.state.to_lang))
            return True
        except Exception as e:
            logger.error(f"Speech synthesis error: {str(e)}")
            return False
        finally:
            self.state.speaking = False

    async def toggle_voice_translation(self) -> Optional[str]:
        """First call starts listening; the second stops, translates and speaks the result"""
        if not self.state.recording:
            await self.start_voice_input()
            return None

        text = await self.stop_voice_input()
        translation = await self.translate(text)
        if translation:
            await self.speak_output()
        return translation

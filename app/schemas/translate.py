"""
Translation API schemas
"""

from typing import Literal
from pydantic import BaseModel, Field

LanguageCode = Literal["ne", "en", "ar", "hi", "my"]


class TranslateRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=5000)
    from_lang: LanguageCode = Field(..., alias="fromLang")
    to_lang: LanguageCode = Field(..., alias="toLang")

    class Config:
        populate_by_name = True


class TranslateResponse(BaseModel):
    translation: str


class TranslateErrorBody(BaseModel):
    error: str
    translation: str = ""

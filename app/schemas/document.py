"""
Document analysis API schemas
"""

from datetime import datetime
from typing import List, Optional, Any
from pydantic import BaseModel, Field, validator

DEFAULT_CLARITY_SCORE = 50


def _string_list(value: Any) -> List[str]:
    """Coerce a model-produced list field into a list of non-empty strings"""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


class AnalyzeRequest(BaseModel):
    """Request body of the analyze-document function"""
    ocr_text: str = Field(..., alias="ocrText", min_length=1, description="Text extracted by OCR")
    document_type: Optional[str] = Field(None, alias="documentType", description="Optional type hint")

    class Config:
        populate_by_name = True


class DocumentAnalysis(BaseModel):
    """Structured classification of a document"""
    doc_type: str = Field("other", description="contract, visa, offer_letter, id or other")
    summary: str = Field("", description="Plain-language explanation in Nepali")
    clarity_score: int = Field(DEFAULT_CLARITY_SCORE, ge=0, le=100, description="0-100 clarity score")
    red_flags: List[str] = Field(default_factory=list, description="Potentially unfavorable clauses")
    questions_to_ask: List[str] = Field(default_factory=list, description="Questions for an advisor")

    @validator('doc_type', pre=True)
    def normalize_doc_type(cls, v):
        if not v or not str(v).strip():
            return "other"
        return str(v).strip().lower()

    @validator('summary', pre=True)
    def normalize_summary(cls, v):
        return "" if v is None else str(v)

    @validator('clarity_score', pre=True)
    def clamp_clarity_score(cls, v):
        """Scores outside 0-100 are clamped; unreadable scores fall back to the default"""
        try:
            score = int(round(float(v)))
        except (TypeError, ValueError):
            return DEFAULT_CLARITY_SCORE
        return max(0, min(100, score))

    @validator('red_flags', 'questions_to_ask', pre=True)
    def normalize_lists(cls, v):
        return _string_list(v)


class AnalysisErrorBody(DocumentAnalysis):
    """Degraded body returned alongside an error status"""
    error: str


class DocumentRead(BaseModel):
    """Persisted document as returned by the API"""
    id: str
    chat_id: Optional[str] = None
    original_filename: str
    doc_type: Optional[str] = None
    clarity_score: Optional[int] = None
    red_flags: List[str] = Field(default_factory=list)
    analysis: Optional[str] = None
    ocr_text: str
    created_at: datetime

    @validator('red_flags', pre=True)
    def red_flags_never_null(cls, v):
        return _string_list(v)

    class Config:
        from_attributes = True


class ScanResponse(BaseModel):
    """Result of a successful document scan"""
    document_id: Optional[str] = Field(None, description="None when persistence failed")
    filename: str
    doc_type_name: str
    ocr_text: str
    analysis: DocumentAnalysis

"""
Document analysis: classifies extracted text and flags unfavorable clauses
"""

import abc
import asyncio
import json
import logging
from typing import Optional

from app.deps.ai_gateway import gateway_chat
from app.deps.utils import extract_json_object
from app.schemas.document import DocumentAnalysis, DEFAULT_CLARITY_SCORE

logger = logging.getLogger(__name__)

ANALYSIS_PROMPT = """तपाईं नेपाली आप्रवासी कामदारहरूको लागि कागजात विश्लेषक हुनुहुन्छ।
यो कागजात विश्लेषण गर्नुहोस् र निम्न जानकारी दिनुहोस्:

1) कागजातको प्रकार (contract/visa/offer letter/ID/other)
2) सरल नेपाली व्याख्या
3) स्पष्टता स्कोर (0-100)
4) रातो झण्डाहरू (Red flags) - जस्तै: तलब उल्लेख नभएको, पासपोर्ट राख्ने धारा, अस्पष्ट समाप्ति धारा, आदि
5) परामर्शदातालाई सोध्नु पर्ने प्रश्नहरू

JSON ढाँचामा जवाफ दिनुहोस्:
{
  "doc_type": "contract|visa|offer_letter|id|other",
  "summary": "नेपालीमा संक्षिप्त व्याख्या",
  "clarity_score": 75,
  "red_flags": ["रातो झण्डा 1", "रातो झण्डा 2"],
  "questions_to_ask": ["प्रश्न 1", "प्रश्न 2"]
}"""


class DocumentAnalyzer(abc.ABC):
    """Classifies a document from its extracted text"""

    @abc.abstractmethod
    async def analyze(self, ocr_text: str, document_type: Optional[str] = None) -> DocumentAnalysis:
        """
        Raises:
            UpstreamRateLimitedError, UpstreamBillingRequiredError,
            UpstreamUnavailableError, MissingAPIKeyError
        """


def parse_analysis(content: str, document_type: Optional[str] = None) -> DocumentAnalysis:
    """
    Parse the model reply into a DocumentAnalysis.

    A reply without a usable JSON object degrades to the raw text as summary
    with the default clarity score and no flags or questions.
    """
    raw_json = extract_json_object(content)
    if raw_json:
        try:
            data = json.loads(raw_json)
            if isinstance(data, dict):
                return DocumentAnalysis(**data)
        except ValueError as e:
            logger.warning(f"Analysis reply was not valid JSON: {e}")

    logger.info("Falling back to unstructured analysis")
    return DocumentAnalysis(
        doc_type=document_type or "other",
        summary=content,
        clarity_score=DEFAULT_CLARITY_SCORE,
        red_flags=[],
        questions_to_ask=[]
    )


class GatewayDocumentAnalyzer(DocumentAnalyzer):
    """Analysis through the AI gateway"""

    def __init__(self, temperature: float = 0.2, max_tokens: int = 2000):
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def analyze(self, ocr_text: str, document_type: Optional[str] = None) -> DocumentAnalysis:
        user_content = f"कागजातको पाठ:\n\n{ocr_text}\n\n"
        if document_type:
            user_content += f"कागजातको प्रकार: {document_type}"

        messages = [
            {"role": "system", "content": ANALYSIS_PROMPT},
            {"role": "user", "content": user_content}
        ]

        logger.info(f"Document analysis request: {len(ocr_text)} characters")
        content = await asyncio.to_thread(
            gateway_chat, messages, temperature=self.temperature, max_tokens=self.max_tokens
        )
        logger.info("AI analysis received")

        return parse_analysis(content, document_type)

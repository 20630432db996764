"""
AI function endpoints: document analysis, RAG chat and translation

Response bodies keep the shapes the mobile client already consumes,
including the degraded bodies sent alongside error statuses.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core import localization
from app.core.database import get_db
from app.deps.exceptions import (
    LegalAidError,
    UpstreamRateLimitedError,
    UpstreamBillingRequiredError,
)
from app.deps.providers import get_chat_transport, get_document_analyzer, get_translator
from app.middleware.auth import get_current_user_id
from app.schemas.chat import ChatFunctionRequest, ChatFunctionResponse, ChatErrorBody
from app.schemas.document import AnalyzeRequest, DocumentAnalysis, AnalysisErrorBody
from app.schemas.translate import TranslateRequest, TranslateResponse, TranslateErrorBody
from app.services.chat_transport import ChatTransport
from app.services.document_analyzer import DocumentAnalyzer
from app.services.repositories import ChatRepository
from app.services.translator import Translator

router = APIRouter()
logger = logging.getLogger(__name__)

def _error_message(error: Exception) -> str:
    if isinstance(error, LegalAidError):
        return error.user_message
    return localization.UNKNOWN_ERROR


@router.post("/analyze-document", response_model=DocumentAnalysis)
async def analyze_document(
    body: AnalyzeRequest,
    analyzer: DocumentAnalyzer = Depends(get_document_analyzer),
    user_id: str = Depends(get_current_user_id)
):
    logger.info(f"Analyze request from {user_id}: {len(body.ocr_text)} characters")
    try:
        return await analyzer.analyze(body.ocr_text, body.document_type)
    except (UpstreamRateLimitedError, UpstreamBillingRequiredError) as e:
        return JSONResponse(status_code=e.status_code, content={"error": e.user_message})
    except Exception as e:
        logger.error(f"Analyze document error: {str(e)}")
        fallback = AnalysisErrorBody(
            error=_error_message(e),
            doc_type="other",
            summary=localization.ANALYSIS_FAILED_SUMMARY,
            clarity_score=0,
            red_flags=[],
            questions_to_ask=[]
        )
        return JSONResponse(status_code=500, content=fallback.model_dump())


@router.post("/rag-chat", response_model=ChatFunctionResponse)
async def rag_chat(
    body: ChatFunctionRequest,
    transport: ChatTransport = Depends(get_chat_transport),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    if body.user_id and body.user_id != user_id:
        logger.warning(f"Ignoring userId {body.user_id} that differs from the token subject")

    if body.chat_id and ChatRepository(db).get_chat(body.chat_id, user_id) is None:
        raise HTTPException(status_code=404, detail="Chat not found")

    try:
        reply = await transport.send(
            body.message,
            [m.model_dump() for m in body.chat_history],
            body.chat_id,
            user_id,
            body.document_context
        )
        return ChatFunctionResponse(answer=reply.answer, sources=reply.sources)
    except UpstreamRateLimitedError as e:
        body_out = ChatErrorBody(error=e.user_message, answer=e.user_message)
        return JSONResponse(status_code=429, content=body_out.model_dump())
    except Exception as e:
        logger.error(f"RAG chat error: {str(e)}")
        body_out = ChatErrorBody(error=_error_message(e), answer=localization.CHAT_APOLOGY)
        return JSONResponse(status_code=500, content=body_out.model_dump())


@router.post("/translate", response_model=TranslateResponse)
async def translate(
    body: TranslateRequest,
    translator: Translator = Depends(get_translator),
    user_id: str = Depends(get_current_user_id)
):
    try:
        translation = await translator.translate(body.text, body.from_lang, body.to_lang)
        return TranslateResponse(translation=translation)
    except UpstreamRateLimitedError as e:
        return JSONResponse(status_code=429, content=TranslateErrorBody(error=e.user_message).model_dump())
    except Exception as e:
        logger.error(f"Translation error: {str(e)}")
        return JSONResponse(status_code=500, content=TranslateErrorBody(error=_error_message(e)).model_dump())

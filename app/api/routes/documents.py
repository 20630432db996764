"""
Document scanning endpoints
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core import localization
from app.core.config import settings
from app.core.database import get_db
from app.deps.exceptions import LegalAidError
from app.deps.providers import get_document_analyzer, get_document_store, get_ocr_extractor
from app.middleware.auth import get_current_user_id
from app.schemas.document import DocumentRead, ScanResponse
from app.services.document_analyzer import DocumentAnalyzer
from app.services.ingestion_pipeline import DocumentIngestionPipeline, DocumentStore, PipelineStep, UploadedFile
from app.services.notifications import CollectingNotifier
from app.services.ocr_extractor import OcrExtractor
from app.services.repositories import ChatRepository, DocumentRepository

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/documents/scan", response_model=ScanResponse)
async def scan_document(
    file: UploadFile = File(...),
    chat_id: Optional[str] = Form(None),
    user_id: str = Depends(get_current_user_id),
    extractor: OcrExtractor = Depends(get_ocr_extractor),
    analyzer: DocumentAnalyzer = Depends(get_document_analyzer),
    store: DocumentStore = Depends(get_document_store),
    db: Session = Depends(get_db)
):
    """
    Run an uploaded photo or PDF through OCR and analysis

    The result is returned even when saving the document row failed; in that
    case ``document_id`` is null.
    """
    if chat_id and ChatRepository(db).get_chat(chat_id, user_id) is None:
        raise HTTPException(status_code=404, detail="Chat not found")

    content = await file.read()
    max_bytes = settings.max_upload_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise HTTPException(status_code=413, detail=f"File exceeds {settings.max_upload_mb} MB")

    logger.info(f"Scan request from {user_id}: {file.filename} ({len(content)} bytes, {file.content_type})")

    notifier = CollectingNotifier()
    pipeline = DocumentIngestionPipeline(extractor, analyzer, store, user_id, chat_id=chat_id, notifier=notifier)
    state = await pipeline.process(UploadedFile(
        filename=file.filename or "upload",
        content=content,
        content_type=file.content_type
    ))

    if state.step != PipelineStep.RESULT:
        error = state.last_exception
        status_code = error.status_code if isinstance(error, LegalAidError) else 500
        return JSONResponse(
            status_code=status_code,
            content={"error": state.error or localization.DOCUMENT_PROCESSING_FAILED}
        )

    return ScanResponse(
        document_id=state.document_id,
        filename=state.filename,
        doc_type_name=localization.doc_type_name(state.analysis.doc_type),
        ocr_text=state.ocr_text,
        analysis=state.analysis
    )


@router.get("/documents", response_model=List[DocumentRead])
async def list_documents(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return DocumentRepository(db).list_for_user(user_id)


@router.get("/documents/{document_id}", response_model=DocumentRead)
async def get_document(document_id: str, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    document = DocumentRepository(db).get(document_id, user_id)
    if document is None:
        raise HTTPException(status_code=404, detail="Document not found")
    return document

"""
FastAPI dependency providers for the capability interfaces

Routes depend on these instead of constructing services, so tests can swap
in fakes through ``app.dependency_overrides``.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.services.chat_controller import ChatStore, SqlChatStore
from app.services.chat_transport import ChatTransport, RagChatTransport
from app.services.document_analyzer import DocumentAnalyzer, GatewayDocumentAnalyzer
from app.services.ingestion_pipeline import DocumentStore, SqlDocumentStore
from app.services.ocr_extractor import OcrExtractor
from app.services.translator import Translator, GatewayTranslator


def get_ocr_extractor() -> OcrExtractor:
    return OcrExtractor()


def get_document_analyzer() -> DocumentAnalyzer:
    return GatewayDocumentAnalyzer()


def get_translator() -> Translator:
    return GatewayTranslator()


def get_chat_transport(db: Session = Depends(get_db)) -> ChatTransport:
    return RagChatTransport(db)


def get_chat_store(db: Session = Depends(get_db)) -> ChatStore:
    return SqlChatStore(db)


def get_document_store(db: Session = Depends(get_db)) -> DocumentStore:
    return SqlDocumentStore(db)

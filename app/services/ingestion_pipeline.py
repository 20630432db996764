"""
Document ingestion pipeline: OCR -> analysis -> persistence -> result
"""

import abc
import asyncio
import hashlib
import logging
import mimetypes
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from sqlalchemy.orm import Session

from app.core import localization
from app.core.config import settings
from app.deps.exceptions import LegalAidError, UnsupportedFormatError, PersistenceFailureError
from app.schemas.document import DocumentAnalysis
from app.services.document_analyzer import DocumentAnalyzer
from app.services.notifications import Notifier
from app.services.ocr_extractor import OcrExtractor, is_supported_mime
from app.services.repositories import DocumentRepository

logger = logging.getLogger(__name__)


class PipelineStep(str, Enum):
    UPLOAD = "upload"
    OCR = "ocr"
    ANALYSIS = "analysis"
    RESULT = "result"


@dataclass
class UploadedFile:
    filename: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def mime_type(self) -> Optional[str]:
        """Declared type, or a guess from the extension when the client sent none"""
        if self.content_type and self.content_type != "application/octet-stream":
            return self.content_type
        guessed, _ = mimetypes.guess_type(self.filename or "")
        return guessed or self.content_type


@dataclass
class DocumentContext:
    """What "ask about this document" hands over to a chat"""
    ocr_text: str
    analysis: DocumentAnalysis

    def as_prompt_context(self) -> str:
        parts = [
            f"Document type: {self.analysis.doc_type}",
            f"Clarity score: {self.analysis.clarity_score}/100",
            f"Summary: {self.analysis.summary}",
        ]
        if self.analysis.red_flags:
            parts.append("Red flags:\n" + "\n".join(f"- {flag}" for flag in self.analysis.red_flags))
        parts.append(f"Document text:\n{self.ocr_text}")
        return "\n\n".join(parts)


@dataclass
class PipelineState:
    step: PipelineStep = PipelineStep.UPLOAD
    filename: Optional[str] = None
    progress: int = 0
    ocr_text: str = ""
    analysis: Optional[DocumentAnalysis] = None
    document_id: Optional[str] = None
    error: Optional[str] = None
    last_exception: Optional[Exception] = field(default=None, repr=False)
    busy: bool = False


class DocumentStore(abc.ABC):
    @abc.abstractmethod
    async def save(
        self,
        user_id: str,
        chat_id: Optional[str],
        file: UploadedFile,
        ocr_text: str,
        analysis: DocumentAnalysis
    ) -> str:
        """Persist the original file and the analysis; returns the document id"""


class SqlDocumentStore(DocumentStore):
    """Keeps the original bytes on disk (content-addressed) and the analysis in ``documents``"""

    def __init__(self, db: Session, storage_path: Optional[str] = None):
        self.repository = DocumentRepository(db)
        self.storage_path = storage_path or settings.storage_path

    async def save(self, user_id, chat_id, file, ocr_text, analysis) -> str:
        path = await asyncio.to_thread(self._store_file, file)
        document = self.repository.create(
            user_id=user_id,
            chat_id=chat_id,
            original_filename=file.filename,
            ocr_text=ocr_text,
            doc_type=analysis.doc_type,
            clarity_score=analysis.clarity_score,
            red_flags=list(analysis.red_flags),
            analysis=analysis.summary,
            storage_path=path,
        )
        return document.id

    def _store_file(self, file: UploadedFile) -> str:
        digest = hashlib.sha256(file.content).hexdigest()
        extension = os.path.splitext(file.filename or "")[1].lower()
        if not extension:
            extension = mimetypes.guess_extension(file.mime_type or "") or ".bin"
        path = os.path.join(self.storage_path, f"{digest}{extension}")
        try:
            os.makedirs(self.storage_path, exist_ok=True)
            if not os.path.exists(path):
                with open(path, "wb") as f:
                    f.write(file.content)
        except OSError as e:
            raise PersistenceFailureError(f"Failed to store file {file.filename}: {e}") from e
        return path


class DocumentIngestionPipeline:
    """
    One pipeline per document view.

    ``state`` is owned by the instance so independent views never share
    progress, text or results. Every failure returns to ``upload`` with no
    partial state kept; persisting the result is best-effort.
    """

    def __init__(
        self,
        extractor: OcrExtractor,
        analyzer: DocumentAnalyzer,
        store: DocumentStore,
        user_id: str,
        chat_id: Optional[str] = None,
        notifier: Optional[Notifier] = None
    ):
        self.extractor = extractor
        self.analyzer = analyzer
        self.store = store
        self.user_id = user_id
        self.chat_id = chat_id
        self.notifier = notifier or Notifier()
        self.state = PipelineState()

    async def process(self, file: UploadedFile) -> PipelineState:
        """Run one file through OCR, analysis and persistence"""
        if self.state.busy:
            logger.warning("Pipeline is busy; ignoring new file")
            return self.state

        if not is_supported_mime(file.mime_type):
            error = UnsupportedFormatError(f"Unsupported file type: {file.mime_type}")
            self._fail(error)
            return self.state

        self.state = PipelineState(step=PipelineStep.OCR, filename=file.filename, busy=True)

        try:
            ocr_text = await self.extractor.extract(file.content, file.mime_type, self._on_progress)
            self.state.ocr_text = ocr_text
            self.state.step = PipelineStep.ANALYSIS

            analysis = await self.analyzer.analyze(ocr_text)
            self.state.analysis = analysis

            self.state.document_id = await self._persist(file, ocr_text, analysis)
            self.state.step = PipelineStep.RESULT
            self.notifier.success(localization.DOCUMENT_ANALYSIS_DONE)
        except LegalAidError as e:
            logger.error(f"Document processing error ({type(e).__name__}): {e.message}")
            self._fail(e)
        except Exception as e:
            logger.error(f"Document processing error: {str(e)}", exc_info=True)
            self._fail(e)
        finally:
            self.state.busy = False

        return self.state

    async def _persist(self, file: UploadedFile, ocr_text: str, analysis: DocumentAnalysis) -> Optional[str]:
        try:
            document_id = await self.store.save(self.user_id, self.chat_id, file, ocr_text, analysis)
            logger.info(f"Persisted document {document_id}")
            return document_id
        except Exception as e:
            logger.error(f"Failed to persist document {file.filename}: {str(e)}")
            return None

    def _on_progress(self, value: int) -> None:
        self.state.progress = value

    def _fail(self, error: Exception) -> None:
        if isinstance(error, LegalAidError):
            message = error.user_message
        else:
            message = localization.DOCUMENT_PROCESSING_FAILED
        self.state = PipelineState(error=message, last_exception=error)
        self.notifier.error(message)

    def ask_about_document(self) -> Optional[DocumentContext]:
        """Context for the chat controller; only available on the result step"""
        if self.state.step != PipelineStep.RESULT or self.state.analysis is None:
            return None
        return DocumentContext(ocr_text=self.state.ocr_text, analysis=self.state.analysis)

    def scan_another(self) -> PipelineState:
        self.state = PipelineState()
        return self.state

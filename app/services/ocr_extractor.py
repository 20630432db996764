"""
OCR text extraction for photographed documents and PDFs
"""

import abc
import asyncio
import io
import logging
from typing import Callable, Optional

import fitz  # PyMuPDF
import pytesseract
from PIL import Image, UnidentifiedImageError

from app.core import localization
from app.core.config import settings
from app.deps.exceptions import LegalAidError, UnsupportedFormatError, EmptyExtractionError

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"

# Receives combined progress in [0, 100]
ProgressCallback = Callable[[int], None]
# Receives the fraction [0.0, 1.0] of the current image recognized so far
PageProgressCallback = Callable[[float], None]


def is_supported_mime(mime_type: Optional[str]) -> bool:
    """Images of any kind and PDFs can be scanned"""
    if not mime_type:
        return False
    mime_type = mime_type.lower()
    return mime_type.startswith("image/") or mime_type == PDF_MIME


class OcrEngine(abc.ABC):
    """Turns one raster image into text"""

    @abc.abstractmethod
    async def recognize(self, image: bytes, on_progress: Optional[PageProgressCallback] = None) -> str:
        """
        Recognize text in an encoded image (PNG, JPEG, ...)

        Raises:
            UnsupportedFormatError: If the bytes are not a readable image
            LegalAidError: If the engine itself fails
        """


class TesseractOcrEngine(OcrEngine):
    """Tesseract via pytesseract; reports progress at start and end of each image"""

    def __init__(self, languages: Optional[str] = None):
        self.languages = languages or settings.ocr_languages

    async def recognize(self, image: bytes, on_progress: Optional[PageProgressCallback] = None) -> str:
        if on_progress:
            on_progress(0.0)
        text = await asyncio.to_thread(self._recognize_sync, image)
        if on_progress:
            on_progress(1.0)
        return text

    def _recognize_sync(self, image: bytes) -> str:
        try:
            img = Image.open(io.BytesIO(image)).convert("RGB")
        except (UnidentifiedImageError, OSError) as e:
            raise UnsupportedFormatError(f"Unreadable image: {e}") from e

        try:
            return pytesseract.image_to_string(img, lang=self.languages) or ""
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as e:
            logger.error(f"Tesseract failed: {e}")
            raise LegalAidError(f"OCR engine failed: {e}", localization.DOCUMENT_PROCESSING_FAILED) from e


class _CombinedProgress:
    """Folds per-page fractions into one non-decreasing 0-100 stream"""

    def __init__(self, callback: Optional[ProgressCallback], total_pages: int):
        self.callback = callback
        self.total_pages = max(1, total_pages)
        self.last = -1

    def update(self, completed_pages: int, page_fraction: float) -> None:
        page_fraction = max(0.0, min(1.0, page_fraction))
        value = (completed_pages / self.total_pages) * 100 + (page_fraction * 100) / self.total_pages
        self._emit(int(round(min(100.0, value))))

    def for_page(self, completed_pages: int) -> PageProgressCallback:
        return lambda fraction: self.update(completed_pages, fraction)

    def finish(self) -> None:
        self._emit(100)

    def _emit(self, value: int) -> None:
        if value <= self.last:
            return
        self.last = value
        if self.callback:
            self.callback(value)


class OcrExtractor:
    """
    Extracts plain text from an image or PDF.

    PDFs are rasterized page by page (first ``max_pdf_pages`` pages only) and
    every page image goes through the OCR engine. Nothing is persisted here.
    """

    def __init__(
        self,
        engine: Optional[OcrEngine] = None,
        max_pdf_pages: Optional[int] = None,
        render_scale: Optional[float] = None
    ):
        self.engine = engine or TesseractOcrEngine()
        self.max_pdf_pages = max_pdf_pages or settings.ocr_max_pdf_pages
        self.render_scale = render_scale or settings.ocr_render_scale

    async def extract(self, content: bytes, mime_type: str, on_progress: Optional[ProgressCallback] = None) -> str:
        """
        Extract text from file content

        Args:
            content: Raw file bytes
            mime_type: MIME type of the file
            on_progress: Optional callback receiving combined progress for this call only

        Returns:
            Trimmed, non-empty text

        Raises:
            UnsupportedFormatError: If the file is not an image or PDF
            EmptyExtractionError: If no text was recognized
        """
        if not is_supported_mime(mime_type):
            raise UnsupportedFormatError(f"Unsupported file type: {mime_type}")

        if mime_type.lower() == PDF_MIME:
            text = await self._extract_pdf(content, on_progress)
        else:
            progress = _CombinedProgress(on_progress, 1)
            text = await self.engine.recognize(content, progress.for_page(0))
            progress.finish()

        text = (text or "").strip()
        if not text:
            raise EmptyExtractionError("OCR produced no text")

        logger.info(f"Extracted {len(text)} characters from {mime_type}")
        return text

    async def _extract_pdf(self, content: bytes, on_progress: Optional[ProgressCallback]) -> str:
        try:
            document = fitz.open(stream=content, filetype="pdf")
        except Exception as e:
            logger.warning(f"Could not open PDF: {e}")
            raise UnsupportedFormatError(f"Unreadable PDF: {e}") from e

        try:
            page_count = document.page_count
            pages_to_process = min(page_count, self.max_pdf_pages)
            if page_count > pages_to_process:
                logger.info(f"PDF has {page_count} pages, processing the first {pages_to_process}")

            progress = _CombinedProgress(on_progress, pages_to_process)
            full_text = ""

            for index in range(pages_to_process):
                image = await asyncio.to_thread(self._render_page, document, index)
                page_text = await self.engine.recognize(image, progress.for_page(index))
                full_text += (page_text or "") + "\n\n"
                progress.update(index + 1, 0.0)

            progress.finish()
            return full_text.strip()
        finally:
            document.close()

    def _render_page(self, document, index: int) -> bytes:
        """Rasterize one page to PNG at the configured scale"""
        page = document.load_page(index)
        pixmap = page.get_pixmap(matrix=fitz.Matrix(self.render_scale, self.render_scale))
        return pixmap.tobytes("png")

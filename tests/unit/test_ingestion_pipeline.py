"""
Unit tests for the document ingestion pipeline
"""

import os
import pytest

from app.core import localization
from app.deps.exceptions import UpstreamRateLimitedError, UpstreamBillingRequiredError, PersistenceFailureError
from app.schemas.document import DocumentAnalysis
from app.services.ingestion_pipeline import (
    DocumentIngestionPipeline,
    PipelineStep,
    SqlDocumentStore,
    UploadedFile,
)
from app.services.notifications import CollectingNotifier
from app.services.ocr_extractor import OcrExtractor
from app.services.repositories import DocumentRepository
from tests.utils.fakes import FakeDocumentAnalyzer, FakeDocumentStore, FakeOcrEngine


def _pipeline(engine=None, analyzer=None, store=None, notifier=None):
    return DocumentIngestionPipeline(
        OcrExtractor(engine=engine or FakeOcrEngine(["Salary: 1200 AED"]), render_scale=1.0),
        analyzer or FakeDocumentAnalyzer(),
        store or FakeDocumentStore(),
        "user-1",
        notifier=notifier or CollectingNotifier()
    )


@pytest.mark.unit
class TestDocumentIngestionPipeline:

    @pytest.mark.asyncio
    async def test_successful_scan_reaches_result(self):
        notifier = CollectingNotifier()
        store = FakeDocumentStore()
        pipeline = _pipeline(store=store, notifier=notifier)

        state = await pipeline.process(UploadedFile("contract.jpg", b"img", "image/jpeg"))

        assert state.step == PipelineStep.RESULT
        assert state.progress == 100
        assert state.ocr_text == "Salary: 1200 AED"
        assert state.analysis.doc_type == "contract"
        assert state.document_id == "doc-1"
        assert not state.busy
        assert notifier.notifications[-1].message == localization.DOCUMENT_ANALYSIS_DONE

    @pytest.mark.asyncio
    async def test_seven_page_pdf_scan(self, make_pdf):
        engine = FakeOcrEngine(["p1", "p2", "p3", "p4", "p5", "p6", "p7"])
        analyzer = FakeDocumentAnalyzer()
        pipeline = _pipeline(engine=engine, analyzer=analyzer)

        state = await pipeline.process(UploadedFile("contract.pdf", make_pdf(7), "application/pdf"))

        assert state.step == PipelineStep.RESULT
        assert engine.calls == 5
        assert analyzer.calls == ["p1\n\np2\n\np3\n\np4\n\np5"]

    @pytest.mark.asyncio
    async def test_unsupported_file_stays_on_upload(self):
        notifier = CollectingNotifier()
        engine = FakeOcrEngine(["x"])
        pipeline = _pipeline(engine=engine, notifier=notifier)

        state = await pipeline.process(UploadedFile("notes.txt", b"hello", "text/plain"))

        assert state.step == PipelineStep.UPLOAD
        assert engine.calls == 0
        assert notifier.last_error() == localization.UNSUPPORTED_FORMAT

    @pytest.mark.asyncio
    async def test_missing_content_type_guessed_from_name(self):
        state = await _pipeline().process(UploadedFile("scan.png", b"img", None))
        assert state.step == PipelineStep.RESULT

    @pytest.mark.asyncio
    async def test_empty_extraction_resets_to_upload(self):
        notifier = CollectingNotifier()
        analyzer = FakeDocumentAnalyzer()
        pipeline = _pipeline(engine=FakeOcrEngine(["   "]), analyzer=analyzer, notifier=notifier)

        state = await pipeline.process(UploadedFile("blank.jpg", b"img", "image/jpeg"))

        assert state.step == PipelineStep.UPLOAD
        assert analyzer.calls == []
        assert notifier.last_error() == localization.EMPTY_EXTRACTION

    @pytest.mark.asyncio
    async def test_analyzer_rate_limited_keeps_no_partial_state(self):
        notifier = CollectingNotifier()
        store = FakeDocumentStore()
        pipeline = _pipeline(
            analyzer=FakeDocumentAnalyzer(error=UpstreamRateLimitedError()),
            store=store,
            notifier=notifier
        )

        state = await pipeline.process(UploadedFile("contract.jpg", b"img", "image/jpeg"))

        assert state.step == PipelineStep.UPLOAD
        assert state.ocr_text == ""
        assert state.analysis is None
        assert state.progress == 0
        assert state.error == localization.TOO_MANY_REQUESTS
        assert notifier.last_error() == localization.TOO_MANY_REQUESTS
        assert store.saved == []
        assert isinstance(state.last_exception, UpstreamRateLimitedError)

    @pytest.mark.asyncio
    async def test_billing_required_message(self):
        notifier = CollectingNotifier()
        pipeline = _pipeline(analyzer=FakeDocumentAnalyzer(error=UpstreamBillingRequiredError()), notifier=notifier)
        await pipeline.process(UploadedFile("contract.jpg", b"img", "image/jpeg"))
        assert notifier.last_error() == localization.CREDIT_REQUIRED

    @pytest.mark.asyncio
    async def test_unexpected_error_uses_generic_message(self):
        notifier = CollectingNotifier()
        pipeline = _pipeline(engine=FakeOcrEngine(["x"], error=RuntimeError("boom")), notifier=notifier)
        state = await pipeline.process(UploadedFile("contract.jpg", b"img", "image/jpeg"))
        assert state.step == PipelineStep.UPLOAD
        assert notifier.last_error() == localization.DOCUMENT_PROCESSING_FAILED

    @pytest.mark.asyncio
    async def test_persistence_failure_still_shows_result(self):
        pipeline = _pipeline(store=FakeDocumentStore(error=PersistenceFailureError("disk full")))
        state = await pipeline.process(UploadedFile("contract.jpg", b"img", "image/jpeg"))
        assert state.step == PipelineStep.RESULT
        assert state.document_id is None

    @pytest.mark.asyncio
    async def test_busy_pipeline_ignores_new_file(self):
        engine = FakeOcrEngine(["x"])
        pipeline = _pipeline(engine=engine)
        pipeline.state.busy = True

        await pipeline.process(UploadedFile("contract.jpg", b"img", "image/jpeg"))

        assert engine.calls == 0

    @pytest.mark.asyncio
    async def test_ask_about_document_only_on_result(self):
        pipeline = _pipeline()
        assert pipeline.ask_about_document() is None

        await pipeline.process(UploadedFile("contract.jpg", b"img", "image/jpeg"))
        context = pipeline.ask_about_document()

        assert context.ocr_text == "Salary: 1200 AED"
        prompt = context.as_prompt_context()
        assert "contract" in prompt
        assert "पासपोर्ट राख्ने धारा" in prompt

    @pytest.mark.asyncio
    async def test_scan_another_resets(self):
        pipeline = _pipeline()
        await pipeline.process(UploadedFile("contract.jpg", b"img", "image/jpeg"))
        state = pipeline.scan_another()
        assert state.step == PipelineStep.UPLOAD
        assert state.analysis is None

    @pytest.mark.asyncio
    async def test_pipelines_do_not_share_state(self):
        first = _pipeline()
        second = _pipeline()
        await first.process(UploadedFile("contract.jpg", b"img", "image/jpeg"))
        assert second.state.step == PipelineStep.UPLOAD
        assert second.state.ocr_text == ""


@pytest.mark.unit
class TestSqlDocumentStore:

    @pytest.mark.asyncio
    async def test_saves_file_and_row(self, db_session, temp_storage):
        store = SqlDocumentStore(db_session, storage_path=temp_storage)
        analysis = DocumentAnalysis(doc_type="visa", summary="भिसा", clarity_score=90, red_flags=[])

        document_id = await store.save("user-1", None, UploadedFile("visa.jpg", b"bytes", "image/jpeg"), "text", analysis)

        document = DocumentRepository(db_session).get(document_id, "user-1")
        assert document.doc_type == "visa"
        assert document.red_flags == []
        assert os.path.dirname(document.storage_path) == temp_storage
        assert document.storage_path.endswith(".jpg")
        with open(document.storage_path, "rb") as f:
            assert f.read() == b"bytes"
        assert DocumentRepository(db_session).get(document_id, "user-2") is None

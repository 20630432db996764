"""
Test configuration and fixtures
"""

import pytest
import tempfile
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core.database import get_db, Base
from app.core.config import settings
from app.deps import providers
from app.services.auth import JWTService
from app.services.rate_limiter import rate_limiter
from tests.utils.fakes import (
    FakeChatTransport,
    FakeDocumentAnalyzer,
    FakeOcrEngine,
    FakeTranslator,
)
from app.services.ocr_extractor import OcrExtractor

# In-memory SQLite shared across threads for the test client
SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def temp_storage():
    """Create a temporary storage directory for file uploads."""
    with tempfile.TemporaryDirectory() as temp_dir:
        original_storage = settings.storage_path
        settings.storage_path = temp_dir
        yield temp_dir
        settings.storage_path = original_storage


@pytest.fixture
def fake_transport(db_session):
    return FakeChatTransport(db_session)


@pytest.fixture
def fake_analyzer():
    return FakeDocumentAnalyzer()


@pytest.fixture
def fake_translator():
    return FakeTranslator()


@pytest.fixture
def fake_ocr_engine():
    return FakeOcrEngine(["Employment contract. Salary: 1200 AED per month."])


@pytest.fixture(scope="function")
def client(db_session, temp_storage, fake_transport, fake_analyzer, fake_translator, fake_ocr_engine):
    """Test client with the database and every upstream capability overridden."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[providers.get_chat_transport] = lambda: fake_transport
    app.dependency_overrides[providers.get_document_analyzer] = lambda: fake_analyzer
    app.dependency_overrides[providers.get_translator] = lambda: fake_translator
    app.dependency_overrides[providers.get_ocr_extractor] = lambda: OcrExtractor(engine=fake_ocr_engine)
    rate_limiter.reset()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    rate_limiter.reset()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {JWTService.create_access_token(USER_ID)}"}


@pytest.fixture
def other_auth_headers():
    return {"Authorization": f"Bearer {JWTService.create_access_token(OTHER_USER_ID)}"}


@pytest.fixture
def make_pdf():
    """Build a real PDF with one line of text per page."""
    import fitz  # PyMuPDF

    def _make(page_count: int) -> bytes:
        document = fitz.open()
        for number in range(page_count):
            page = document.new_page()
            page.insert_text((72, 72), f"Page {number + 1}")
        content = document.tobytes()
        document.close()
        return content

    return _make

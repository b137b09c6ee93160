"""
Pytest configuration and fixtures for the test suite.

Service and API tests run against an in-memory document table and a mocked
object store; the SQLAlchemy table has its own sqlite-backed tests.
"""

import copy
import os
from typing import Any, AsyncGenerator, Dict, List, Optional
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio
from faker import Faker
from httpx import AsyncClient, ASGITransport

# Set test environment before importing application modules
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("GCS_BUCKET_NAME", "test-bucket")
os.environ["GCP_PROJECT_ID"] = ""

fake = Faker()


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (API)")
    config.addinivalue_line("markers", "api: API endpoint tests")
    config.addinivalue_line("markers", "db: Database tests")


# =============================================================================
# Store Doubles
# =============================================================================

class InMemoryDocumentTable:
    """Dict-backed stand-in for DocumentTable with the same whole-item semantics."""

    def __init__(self):
        self.items: Dict[str, Dict[str, Any]] = {}
        self.put_calls = 0

    async def get_item(self, document_id: str) -> Optional[Dict[str, Any]]:
        item = self.items.get(document_id)
        return copy.deepcopy(item) if item is not None else None

    async def put_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        self.put_calls += 1
        self.items[item["documentId"]] = copy.deepcopy(item)
        return item

    async def scan(self) -> List[Dict[str, Any]]:
        return [copy.deepcopy(self.items[key]) for key in sorted(self.items)]

    async def ping(self) -> bool:
        return True


@pytest.fixture
def document_table() -> InMemoryDocumentTable:
    return InMemoryDocumentTable()


@pytest.fixture
def document_service(document_table):
    from docversions.services.document_service import DocumentService

    return DocumentService(table=document_table)


@pytest.fixture
def mock_gcs_client():
    """Create a mock GCS client."""
    client = Mock()
    client.bucket_name = "test-bucket"
    client.upload_file_to_path_async = AsyncMock(side_effect=lambda path, content, ct: path)
    client.download_file_async = AsyncMock(return_value=(b"%PDF-1.4", "application/pdf"))
    client.list_files_with_prefix_async = AsyncMock(return_value=[])
    client.health_check_async = AsyncMock(return_value=True)
    client.public_url = Mock(
        side_effect=lambda path: f"https://storage.googleapis.com/test-bucket/{path}"
    )
    return client


@pytest.fixture
def file_service(mock_gcs_client):
    from docversions.services.file_service import FileService

    return FileService(storage=mock_gcs_client)


# =============================================================================
# Test Data Generators
# =============================================================================

@pytest.fixture
def document_id() -> str:
    return f"doc-{fake.uuid4()}"


@pytest.fixture
def version_payload() -> Dict[str, Any]:
    return {
        "title": fake.sentence(nb_words=3),
        "username": fake.user_name(),
        "userid": str(fake.random_int(min=1, max=9999)),
        "timestamp": "1700000000",
    }


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def app(document_service, file_service):
    """FastAPI app wired to the in-memory table and mocked object store."""
    from docversions.main import app as fastapi_app
    from docversions.api.common import get_document_service, get_file_service

    fastapi_app.dependency_overrides[get_document_service] = lambda: document_service
    fastapi_app.dependency_overrides[get_file_service] = lambda: file_service
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


# =============================================================================
# File Content Fixtures
# =============================================================================

@pytest.fixture
def sample_pdf_content() -> bytes:
    """Minimal PDF content for upload tests."""
    return b"""%PDF-1.4
1 0 obj
<< /Type /Catalog /Pages 2 0 R >>
endobj
trailer
<< /Root 1 0 R >>
%%EOF"""


@pytest.fixture
def sample_jpeg_content() -> bytes:
    return b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00\xff\xd9"

"""
Shared pytest fixtures for all tests.

Object storage is replaced by an in-memory S3 double and the LLM by the mock
provider; no test touches the network or launches a browser.
"""

import io
from typing import Dict, Iterator, List, Optional

import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient

from form_builder.api import dependencies
from form_builder.api.main import create_app
from form_builder.core.config import Settings
from form_builder.llm.providers.mock import MockLLMProvider
from form_builder.llm.rating_service import RatingService
from form_builder.storage.form_service import FormService
from form_builder.storage.object_store import ObjectStore


# =============================================================================
# ENVIRONMENT
# =============================================================================

@pytest.fixture(autouse=True)
def isolate_env(monkeypatch):
    """Pin the environment so error details and startup checks are predictable."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "test-key-not-real")
    dependencies.clear_caches()
    yield
    dependencies.clear_caches()


# =============================================================================
# OBJECT STORAGE
# =============================================================================

def client_error(code: str, operation: str = "Operation") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class FakePaginator:
    """list_objects_v2 paginator over a FakeS3Client, two keys per page."""

    def __init__(self, client: "FakeS3Client", page_size: int = 2):
        self._client = client
        self._page_size = page_size

    def paginate(self, Bucket: str, Prefix: str = "") -> Iterator[Dict]:
        self._client.maybe_fail("list_objects_v2")
        keys = sorted(k for k in self._client.objects if k.startswith(Prefix))
        if not keys:
            yield {"KeyCount": 0}
            return
        for i in range(0, len(keys), self._page_size):
            yield {"Contents": [{"Key": k} for k in keys[i:i + self._page_size]]}


class FakeS3Client:
    """In-memory stand-in for the subset of the boto3 S3 client we use."""

    def __init__(self, bucket_exists: bool = True):
        self.buckets = {"forms"} if bucket_exists else set()
        self.objects: Dict[str, bytes] = {}
        self.failures: Dict[str, str] = {}
        self.calls: List[str] = []

    def fail(self, operation: str, code: str) -> None:
        """Make ``operation`` raise a ClientError with ``code``."""
        self.failures[operation] = code

    def maybe_fail(self, operation: str) -> None:
        self.calls.append(operation)
        code = self.failures.get(operation)
        if code:
            raise client_error(code, operation)

    def head_bucket(self, Bucket: str) -> Dict:
        self.maybe_fail("head_bucket")
        if Bucket not in self.buckets:
            raise client_error("404", "HeadBucket")
        return {}

    def create_bucket(self, Bucket: str) -> Dict:
        self.maybe_fail("create_bucket")
        self.buckets.add(Bucket)
        return {}

    def put_object(self, Bucket: str, Key: str, Body: bytes, ContentType: Optional[str] = None) -> Dict:
        self.maybe_fail("put_object")
        self.objects[Key] = Body
        return {}

    def get_object(self, Bucket: str, Key: str) -> Dict:
        self.maybe_fail("get_object")
        if Key not in self.objects:
            raise client_error("NoSuchKey", "GetObject")
        return {"Body": io.BytesIO(self.objects[Key])}

    def delete_object(self, Bucket: str, Key: str) -> Dict:
        self.maybe_fail("delete_object")
        self.objects.pop(Key, None)
        return {}

    def get_paginator(self, name: str) -> FakePaginator:
        assert name == "list_objects_v2"
        return FakePaginator(self)


@pytest.fixture
def fake_s3() -> FakeS3Client:
    return FakeS3Client()


@pytest.fixture
def object_store(fake_s3) -> ObjectStore:
    return ObjectStore(fake_s3, "forms")


@pytest.fixture
def form_service(object_store) -> FormService:
    return FormService(object_store)


# =============================================================================
# SPECS
# =============================================================================

@pytest.fixture
def sample_spec() -> Dict:
    """A form using every question type."""
    return {
        "name": "My Test Form!",
        "description": "Used across tests",
        "status": "published",
        "sections": [
            {
                "title": "About you",
                "questions": [
                    {"type": "simple", "question": "What is your role?", "examples": ["Engineer"]},
                    {
                        "type": "option",
                        "question": "Preferred language",
                        "options": ["Python", "Go"],
                        "justification": True,
                    },
                ],
            },
            {
                "title": "Systems",
                "questions": [
                    {
                        "type": "detailed",
                        "question": "List your services",
                        "attributes": [
                            {"name": "Service", "width": 0.4},
                            {"name": "Owner", "width": 0.6, "inputType": "input"},
                        ],
                    },
                    {"type": "image", "question": "Architecture diagram", "url": "https://example.com/a.png"},
                ],
            },
        ],
    }


# =============================================================================
# LLM
# =============================================================================

@pytest.fixture
def mock_provider() -> MockLLMProvider:
    return MockLLMProvider()


@pytest.fixture
def rating_service(mock_provider) -> RatingService:
    return RatingService(provider=mock_provider, model="sonnet", temperature=0.2, max_tokens=512)


# =============================================================================
# API
# =============================================================================

class StubPdfRenderer:
    """Renders a fixed byte string instead of launching a browser."""

    def __init__(self, pdf: bytes = b"%PDF-1.4 stub", error: Optional[Exception] = None):
        self.pdf = pdf
        self.error = error
        self.calls: List = []

    async def render_pdf(self, spec, value) -> bytes:
        self.calls.append((spec, value))
        if self.error:
            raise self.error
        return self.pdf


@pytest.fixture
def pdf_renderer() -> StubPdfRenderer:
    return StubPdfRenderer()


@pytest.fixture
def settings() -> Settings:
    return Settings(rate_limit_max=1000, llm_rate_limit_max=1000)


@pytest.fixture
def app(settings, object_store, form_service, rating_service, pdf_renderer):
    """Application with storage, LLM and PDF dependencies overridden."""
    application = create_app(settings)
    application.dependency_overrides[dependencies.get_object_store] = lambda: object_store
    application.dependency_overrides[dependencies.get_form_service] = lambda: form_service
    application.dependency_overrides[dependencies.get_rating_service] = lambda: rating_service
    application.dependency_overrides[dependencies.get_pdf_renderer] = lambda: pdf_renderer
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)

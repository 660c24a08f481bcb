"""
Shared test configuration and fixtures for quickconvert tests.
"""

from io import BytesIO
from typing import Any, Callable, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from pypdf import PdfWriter

from app import app
from quickconvert.config import SourceKind
from quickconvert.extract.base import ImageRecoder, TextExtractor
from quickconvert.extract.images import PillowImageRecoder
from quickconvert.models import RawExtraction
from quickconvert.router import get_engine
from quickconvert.utils.conversion_core import ConversionEngine

FIXED_EPOCH = 1700000000.0


# ===== FAKE CAPABILITIES =====

class FakeTextExtractor(TextExtractor):
    """Deterministic extractor returning canned text or raising a canned error."""

    def __init__(self, text: str = "", page_count: Optional[int] = 1,
                 error: Optional[Exception] = None, label: str = "PDF"):
        super().__init__()
        self.text = text
        self.page_count = page_count
        self.error = error
        self.document_label = label
        self.empty_causes = ["PDF contains only images (scanned document)"]
        self.calls = 0

    def extract(self, data: bytes) -> RawExtraction:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return RawExtraction(text=self.text, page_count=self.page_count)


class FakeImageRecoder(ImageRecoder):
    """Records calls and tags the payload with the encoder name."""

    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def recode(self, data: bytes, target_format: str, options: Dict[str, Any]) -> bytes:
        self.calls.append({"format": target_format, "options": options})
        if self.error is not None:
            raise self.error
        return target_format.encode() + b":" + data


class ExplodingBytes:
    """Payload stand-in that fails the test if anything reads it."""

    def _fail(self, *args, **kwargs):
        raise AssertionError("payload was read")

    __len__ = _fail
    __iter__ = _fail
    __bytes__ = _fail
    __getitem__ = _fail
    decode = _fail


# ===== ENGINE FIXTURES =====

@pytest.fixture
def make_engine() -> Callable[..., ConversionEngine]:
    """Factory for engines with fake capabilities and a fixed clock."""
    def factory(pdf: Optional[TextExtractor] = None,
                docx: Optional[TextExtractor] = None,
                image_recoder: Optional[ImageRecoder] = None,
                infer_types: bool = True) -> ConversionEngine:
        extractors = {
            SourceKind.PDF: pdf or FakeTextExtractor(text="Hello from PDF", page_count=2),
            SourceKind.DOCX: docx or FakeTextExtractor(text="Hello from Word", page_count=None,
                                                       label="Word document"),
        }
        return ConversionEngine(
            text_extractors=extractors,
            image_recoder=image_recoder or FakeImageRecoder(),
            clock=lambda: FIXED_EPOCH,
            infer_types=infer_types,
        )
    return factory


@pytest.fixture
def engine(make_engine) -> ConversionEngine:
    return make_engine()


@pytest.fixture
def client_for():
    """Factory for test clients bound to a specific engine."""
    clients = []

    def factory(engine: ConversionEngine) -> TestClient:
        app.dependency_overrides[get_engine] = lambda: engine
        client = TestClient(app)
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()
    app.dependency_overrides.clear()


@pytest.fixture
def client(client_for, make_engine) -> TestClient:
    """Client with fake document extractors and the real Pillow recoder."""
    return client_for(make_engine(image_recoder=PillowImageRecoder()))


# ===== SAMPLE PAYLOADS =====

@pytest.fixture
def png_bytes() -> bytes:
    """A small RGBA PNG generated in memory."""
    image = Image.new("RGBA", (4, 3), (255, 0, 0, 128))
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def blank_pdf_bytes() -> Callable[[int], bytes]:
    """Factory for valid PDFs whose pages carry no text."""
    def factory(pages: int = 3) -> bytes:
        writer = PdfWriter()
        for _ in range(pages):
            writer.add_blank_page(width=612, height=792)
        buffer = BytesIO()
        writer.write(buffer)
        return buffer.getvalue()
    return factory

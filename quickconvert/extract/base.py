"""
Base classes for best-effort text extraction and image re-encoding.

The engine only talks to these narrow interfaces; the codec libraries live in
the concrete subclasses so tests can substitute deterministic fakes.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..models import (
    EmptyButValid,
    Extracted,
    ExtractionError,
    ExtractionOutcome,
    RawExtraction,
)

logger = logging.getLogger(__name__)

FAILURE_CAUSES = [
    "Corrupted file upload",
    "Unsupported document version",
    "Server processing limitations",
    "Memory constraints",
]

FAILURE_SUGGESTIONS = [
    "Upload a different file",
    "Ensure the file isn't password-protected",
    "Try a smaller file size",
    "Use alternative conversion tools",
]

WORKING_ALTERNATIVES = [
    "Word documents (DOCX -> Markdown)",
    "Images (PNG, JPG conversions)",
    "Spreadsheets (CSV -> JSON)",
]


class TextExtractor(ABC):
    """
    Base class for raw text extraction from an opaque document format.

    Subclasses raise on corrupt or unsupported input; classification into
    extracted, empty, or failed outcomes happens in extract_text().
    """

    document_label = "document"
    empty_causes: List[str] = []

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @abstractmethod
    def extract(self, data: bytes) -> RawExtraction:
        """Return the raw text and page count of a document."""


class ImageRecoder(ABC):
    """Base class for re-encoding image bytes into another image format."""

    @abstractmethod
    def recode(self, data: bytes, target_format: str, options: Dict[str, Any]) -> bytes:
        """
        Re-encode an image.

        Args:
            data: Source image bytes in any supported format
            target_format: Encoder name (e.g. 'PNG', 'JPEG')
            options: Encoder settings

        Returns:
            Encoded image bytes
        """


def extract_text(extractor: TextExtractor, data: bytes) -> ExtractionOutcome:
    """
    Run an extractor and classify its result.

    Returns Extracted for usable text, EmptyButValid when the document parsed
    but holds no text, and ExtractionError when the extractor raised.
    """
    try:
        raw = extractor.extract(data)
    except Exception as e:
        logger.error(f"{extractor.document_label} extraction error: {e}")
        return ExtractionError(message=str(e) or e.__class__.__name__)

    if raw.text and raw.text.strip():
        logger.info(f"Extracted {len(raw.text)} characters from {extractor.document_label}")
        return Extracted(text=raw.text, page_count=raw.page_count)

    logger.warning(f"{extractor.document_label} parsed but yielded no text ({raw.page_count} pages)")
    return EmptyButValid(page_count=raw.page_count, byte_size=len(data))


def _bullets(items: List[str]) -> List[str]:
    return [f"- {item}" for item in items]


def build_empty_report(outcome: EmptyButValid, extractor: TextExtractor) -> str:
    """Human-readable report for a valid document that produced no text."""
    label = extractor.document_label
    pages = outcome.page_count if outcome.page_count is not None else "unknown"

    lines = [
        f"{label} Processing Issue",
        "",
        f"{label} Information:",
        f"- Total pages: {pages}",
        f"- File size: {outcome.byte_size / 1024:.1f}KB",
        f"- Status: Valid {label} format",
        "",
        "Text Extraction Failed:",
        f"No extractable text found in the {label}.",
        "",
        "Possible reasons:",
        *_bullets(extractor.empty_causes or ["The document contains no text content"]),
        "",
        "This converter works well with:",
        *_bullets(WORKING_ALTERNATIVES),
    ]
    return "\n".join(lines)


def build_failure_diagnostics(outcome: ExtractionError, label: Optional[str] = None) -> Dict[str, Any]:
    """Structured detail attached to an extraction failure."""
    return {
        "error": outcome.message,
        "document": label,
        "likely_causes": list(FAILURE_CAUSES),
        "suggestions": list(FAILURE_SUGGESTIONS),
        "alternatives": ["DOCX, TXT, CSV, and image conversions"],
    }

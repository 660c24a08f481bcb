"""
Binary document conversions: Word to Markdown and best-effort PDF to text.

Both go through extract_text(), so an empty but valid document becomes a
diagnostic report and an extractor failure becomes an ExtractionFailedError.
"""

import logging
from typing import NoReturn

from ..extract.base import (
    TextExtractor,
    build_empty_report,
    build_failure_diagnostics,
    extract_text,
)
from ..models import EmptyButValid, Extracted, ExtractionError, PipelineOutput
from ..utils.error_handling import ExtractionFailedError
from ..utils.mime_detector import strip_extension

logger = logging.getLogger(__name__)

DOCX_PROVENANCE = "Converted from Word document"
PDF_CONTENT_HEADER = "PDF Text Content:"


def _raise_extraction_failure(outcome: ExtractionError, extractor: TextExtractor) -> NoReturn:
    raise ExtractionFailedError(
        f"Unable to process {extractor.document_label}: {outcome.message}",
        details=build_failure_diagnostics(outcome, extractor.document_label),
    )


def docx_to_markdown(file_content: bytes, filename: str, extractor: TextExtractor) -> PipelineOutput:
    """Wrap the raw text of a Word document under a generated heading."""
    heading = f"# {strip_extension(filename, 'docx')}\n\n{DOCX_PROVENANCE}\n\n"
    outcome = extract_text(extractor, file_content)

    if isinstance(outcome, Extracted):
        return PipelineOutput(payload=heading + outcome.text)
    if isinstance(outcome, EmptyButValid):
        return PipelineOutput(payload=heading + build_empty_report(outcome, extractor), diagnostic_report=True)

    _raise_extraction_failure(outcome, extractor)


def pdf_to_text(file_content: bytes, extractor: TextExtractor) -> PipelineOutput:
    """
    Best-effort PDF text extraction.

    A structurally valid PDF without text is reported, not rejected: the
    payload is a diagnostic report with the page count and likely causes.
    """
    outcome = extract_text(extractor, file_content)

    if isinstance(outcome, Extracted):
        return PipelineOutput(payload=f"{PDF_CONTENT_HEADER}\n\n{outcome.text.strip()}")
    if isinstance(outcome, EmptyButValid):
        logger.info(f"PDF yielded no text, returning diagnostic report ({outcome.page_count} pages)")
        return PipelineOutput(payload=build_empty_report(outcome, extractor), diagnostic_report=True)

    _raise_extraction_failure(outcome, extractor)

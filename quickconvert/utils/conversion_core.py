"""
Core conversion logic for the /convert endpoints.

ConversionEngine checks the requested output format against the whitelist,
resolves a pipeline from the conversion matrix, runs it, and wraps the result
into a Success or Failure. It keeps no state between requests.
"""

import logging
import time
from typing import Callable, Dict, Optional, Union

from ..config import KNOWN_GAPS, OUTPUT_MIME_TYPES, TABULAR_TYPE_INFERENCE, SourceKind
from ..extract.base import ImageRecoder, TextExtractor
from ..extract.documents import DocxTextExtractor, PdfTextExtractor
from ..extract.images import PillowImageRecoder
from ..models import ConversionRequest, ConversionResult, ErrorKind, Failure, PipelineEntry, Success
from ..pipelines.factory import PipelineFactory
from .conversion_lookup import get_output_formats, is_known_output_kind, resolve
from .error_handling import ErrorCode
from .mime_detector import base_name, detect_source_kinds, get_extension, is_vector_image

logger = logging.getLogger(__name__)


def default_text_extractors() -> Dict[SourceKind, TextExtractor]:
    return {
        SourceKind.DOCX: DocxTextExtractor(),
        SourceKind.PDF: PdfTextExtractor(),
    }


def default_image_recoder() -> ImageRecoder:
    return PillowImageRecoder()


def suggested_filename(source_name: str, output_kind: str, timestamp_ms: int) -> str:
    """Build '<basename>-converted-<timestamp>.<ext>' for the download."""
    return f"{base_name(source_name)}-converted-{timestamp_ms}.{output_kind}"


class ConversionEngine:
    """
    Entry point for converting one upload.

    Args:
        text_extractors: Extractors per document source kind (pypdf/mammoth by default)
        image_recoder: Image re-encoder (Pillow by default)
        clock: Returns seconds since the epoch, used for suggested filenames
        infer_types: Default for numeric inference on delimited text
    """

    def __init__(
        self,
        text_extractors: Optional[Dict[SourceKind, TextExtractor]] = None,
        image_recoder: Optional[ImageRecoder] = None,
        clock: Callable[[], float] = time.time,
        infer_types: bool = TABULAR_TYPE_INFERENCE,
    ):
        self.factory = PipelineFactory(
            text_extractors if text_extractors is not None else default_text_extractors(),
            image_recoder if image_recoder is not None else default_image_recoder(),
        )
        self.clock = clock
        self.infer_types = infer_types

    def preflight(self, source_name: str, declared_mime: str, output_kind: str) -> Union[PipelineEntry, Failure]:
        """
        Check the output format against the whitelist and resolve a pipeline.

        Only names and types are inspected, never the payload, so the HTTP
        layer can call this before reading the upload.

        Returns:
            The resolved PipelineEntry, or an UNSUPPORTED Failure
        """
        output_kind = (output_kind or "").strip().lower()

        if not is_known_output_kind(output_kind):
            logger.info(f"Rejected unknown output format {output_kind!r} for {source_name!r}")
            return Failure(
                kind=ErrorKind.UNSUPPORTED,
                code=ErrorCode.INVALID_FORMAT,
                message=f"Unsupported output type: {output_kind or '(none)'}",
                diagnostics={"supported_output_formats": get_output_formats()},
            )

        entry = resolve(source_name, declared_mime, output_kind)
        if entry is None:
            source_ext = get_extension(source_name) or "unknown"
            diagnostics = {
                "source_format": source_ext,
                "output_format": output_kind,
                "detected_source_kinds": [
                    kind.value for kind in detect_source_kinds(source_name, declared_mime)
                ],
            }
            if is_vector_image(source_name, declared_mime):
                diagnostics["known_gap"] = KNOWN_GAPS["svg"]
            return Failure(
                kind=ErrorKind.UNSUPPORTED,
                code=ErrorCode.CONVERSION_NOT_SUPPORTED,
                message=(
                    f"Conversion from {source_ext.upper()} to {output_kind.upper()} is not supported. "
                    "Please check the supported conversions list."
                ),
                diagnostics=diagnostics,
            )

        return entry

    def convert(self, request: ConversionRequest) -> ConversionResult:
        """
        Convert a request into a Success or a Failure.

        Unsupported requests are answered by preflight() and never reach a
        pipeline; everything raised inside a pipeline comes back as a Failure.
        """
        entry = self.preflight(request.source_name, request.declared_mime, request.requested_output_kind)
        if isinstance(entry, Failure):
            return entry

        output_kind = entry.output_kind
        infer_types = self.infer_types if request.infer_types is None else request.infer_types
        logger.info(
            f"Processing: {request.source_name} ({request.declared_mime or 'unknown type'}) -> {output_kind} "
            f"via {entry.pipeline_id.value}, {len(request.source_bytes) / 1024:.1f}KB"
        )

        output = self.factory.run(entry, request, infer_types=infer_types)
        if isinstance(output, Failure):
            return output

        filename = suggested_filename(request.source_name, output_kind, int(self.clock() * 1000))
        logger.info(f"Conversion completed: {filename}")
        return Success(
            payload=output.payload,
            content_kind=OUTPUT_MIME_TYPES[output_kind],
            suggested_filename=filename,
            pipeline_id=entry.pipeline_id,
            diagnostic_report=output.diagnostic_report,
        )

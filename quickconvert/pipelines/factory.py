"""
Pipeline factory for quickconvert.

This module maps pipeline identifiers to their handlers and converts every
error raised inside a pipeline into a structured Failure.
"""

import logging
from typing import Callable, Dict, Optional, Union

from ..config import GENERIC_REMEDIATION_HINTS, PipelineId, SourceKind
from ..extract.base import ImageRecoder, TextExtractor
from ..models import (
    ConversionRequest,
    ErrorKind,
    Failure,
    PipelineEntry,
    PipelineOutput,
)
from ..utils.error_handling import (
    ConversionError,
    ErrorCode,
    ExtractionFailedError,
    MalformedInputError,
)
from ..utils.logging_config import log_performance
from .documents import docx_to_markdown, pdf_to_text
from .images import recode_image
from .tabular import csv_to_json, json_to_csv
from .text import text_to_markdown

logger = logging.getLogger(__name__)

Handler = Callable[[ConversionRequest, PipelineEntry, bool], Union[PipelineOutput, bytes, str]]


class PipelineFactory:
    """
    Factory for the local conversion pipelines.

    Text extractors and the image recoder are injected so the codec libraries
    can be replaced in tests.
    """

    def __init__(self, text_extractors: Dict[SourceKind, TextExtractor], image_recoder: ImageRecoder):
        self.text_extractors = text_extractors
        self.image_recoder = image_recoder
        self._converters: Dict[PipelineId, Handler] = {
            PipelineId.DOCUMENT_TO_MARKDOWN: self._convert_docx,
            PipelineId.PDF_TO_TEXT: self._convert_pdf,
            PipelineId.CSV_TO_JSON: self._convert_csv,
            PipelineId.JSON_TO_CSV: self._convert_json,
            PipelineId.IMAGE_TO_IMAGE: self._convert_image,
            PipelineId.TEXT_TO_MARKDOWN: self._convert_text,
        }

    @log_performance(logger, logging.DEBUG)
    def run(
        self,
        entry: PipelineEntry,
        request: ConversionRequest,
        infer_types: bool = True,
    ) -> Union[PipelineOutput, Failure]:
        """
        Run a resolved pipeline.

        Args:
            entry: Resolved conversion matrix entry
            request: The conversion request
            infer_types: Type CSV cells when parsing delimited text

        Returns:
            PipelineOutput on success, Failure for any error inside the pipeline
        """
        converter = self._converters.get(entry.pipeline_id)
        if converter is None:
            logger.error(f"No handler registered for pipeline {entry.pipeline_id.value}")
            return self._internal_fault(f"No handler for pipeline {entry.pipeline_id.value}")

        try:
            output = converter(request, entry, infer_types)
        except MalformedInputError as e:
            logger.warning(f"Malformed input for {entry.pipeline_id.value}: {e.message}")
            return Failure(
                kind=ErrorKind.MALFORMED_INPUT,
                code=e.error_code,
                message=e.message,
                diagnostics=e.details or None,
            )
        except ExtractionFailedError as e:
            return Failure(
                kind=ErrorKind.EXTRACTION_FAILED,
                code=e.error_code,
                message=e.message,
                diagnostics=e.details or None,
            )
        except ConversionError as e:
            logger.error(f"Conversion error in {entry.pipeline_id.value}: {e.message}")
            return self._internal_fault(e.message)
        except Exception as e:
            logger.exception(f"Unhandled error in pipeline {entry.pipeline_id.value}")
            return self._internal_fault(str(e) or e.__class__.__name__)

        if isinstance(output, PipelineOutput):
            return output
        return PipelineOutput(payload=output)

    @staticmethod
    def _internal_fault(message: str) -> Failure:
        return Failure(
            kind=ErrorKind.INTERNAL_FAULT,
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Server error: {message}",
            diagnostics={
                "error": message,
                "likely_causes": [
                    "File upload corruption",
                    "Server configuration issue",
                    "Unsupported file format",
                    "Memory limitations",
                ],
                "suggestions": list(GENERIC_REMEDIATION_HINTS),
            },
        )

    def _extractor(self, kind: SourceKind) -> TextExtractor:
        extractor: Optional[TextExtractor] = self.text_extractors.get(kind)
        if extractor is None:
            raise ConversionError(f"No text extractor configured for {kind.value}")
        return extractor

    def _convert_docx(self, request: ConversionRequest, entry: PipelineEntry, infer_types: bool) -> PipelineOutput:
        return docx_to_markdown(request.source_bytes, request.source_name, self._extractor(SourceKind.DOCX))

    def _convert_pdf(self, request: ConversionRequest, entry: PipelineEntry, infer_types: bool) -> PipelineOutput:
        return pdf_to_text(request.source_bytes, self._extractor(SourceKind.PDF))

    def _convert_csv(self, request: ConversionRequest, entry: PipelineEntry, infer_types: bool) -> str:
        return csv_to_json(request.source_bytes, request.source_name, infer_types=infer_types)

    def _convert_json(self, request: ConversionRequest, entry: PipelineEntry, infer_types: bool) -> str:
        return json_to_csv(request.source_bytes)

    def _convert_image(self, request: ConversionRequest, entry: PipelineEntry, infer_types: bool) -> bytes:
        return recode_image(request.source_bytes, entry.output_kind, self.image_recoder)

    def _convert_text(self, request: ConversionRequest, entry: PipelineEntry, infer_types: bool) -> str:
        return text_to_markdown(request.source_bytes, request.source_name)

"""
Request, result and extraction types shared by the conversion engine.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from .config import PipelineId
from .utils.error_handling import ErrorCode

# Records map keys to scalars, nested records, or sequences (see ValueKind)
Record = Dict[str, Any]
FlatRecord = Dict[str, Any]


class ErrorKind(str, Enum):
    """Failure taxonomy for conversion results."""
    UNSUPPORTED = "unsupported"
    EXTRACTION_DEGRADED = "extraction_degraded"
    EXTRACTION_FAILED = "extraction_failed"
    MALFORMED_INPUT = "malformed_input"
    INTERNAL_FAULT = "internal_fault"


@dataclass(frozen=True)
class ConversionRequest:
    """A single upload to convert. Immutable once constructed."""
    source_bytes: bytes
    source_name: str
    declared_mime: str
    requested_output_kind: str
    infer_types: Optional[bool] = None

    @classmethod
    def create(
        cls,
        source_bytes: bytes,
        source_name: str,
        declared_mime: Optional[str],
        requested_output_kind: Optional[str],
        infer_types: Optional[bool] = None,
    ) -> "ConversionRequest":
        """Build a request with normalized name, MIME type and output kind."""
        return cls(
            source_bytes=source_bytes,
            source_name=source_name or "",
            declared_mime=(declared_mime or "").lower(),
            requested_output_kind=(requested_output_kind or "").strip().lower(),
            infer_types=infer_types,
        )


@dataclass(frozen=True)
class PipelineEntry:
    """A resolved row of the conversion matrix."""
    pipeline_id: PipelineId
    output_kind: str
    description: str


@dataclass
class PipelineOutput:
    """Raw output of a pipeline before it is wrapped into a Success."""
    payload: Union[bytes, str]
    diagnostic_report: bool = False


@dataclass
class Success:
    payload: Union[bytes, str]
    content_kind: str
    suggested_filename: str
    pipeline_id: Optional[PipelineId] = None
    diagnostic_report: bool = False

    @property
    def ok(self) -> bool:
        return True


@dataclass
class Failure:
    kind: ErrorKind
    code: ErrorCode
    message: str
    diagnostics: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return False


ConversionResult = Union[Success, Failure]


# ===== EXTRACTION OUTCOMES =====

@dataclass
class RawExtraction:
    """What a text extractor hands back before outcome classification."""
    text: str
    page_count: Optional[int] = None


@dataclass
class Extracted:
    text: str
    page_count: Optional[int] = None


@dataclass
class EmptyButValid:
    page_count: Optional[int]
    byte_size: int


@dataclass
class ExtractionError:
    message: str


ExtractionOutcome = Union[Extracted, EmptyButValid, ExtractionError]


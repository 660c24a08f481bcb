"""
Conversion configuration for the /convert endpoints.

This module defines the supported output formats, the conversion pairs and
the pipeline that serves each pair, plus the environment-driven settings.
"""

import os
from enum import Enum
from typing import Dict, Tuple


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("true", "1", "yes", "on")


# Upload size limit enforced by the HTTP layer
MAX_UPLOAD_BYTES = int(float(os.getenv("MAX_UPLOAD_MB", "25")) * 1024 * 1024)

# Numeric/boolean inference for delimited text. Leading-zero codes and phone
# numbers are coerced to numbers when this is on.
TABULAR_TYPE_INFERENCE = _env_flag("TABULAR_TYPE_INFERENCE", True)


# Whitelist of requested output formats and the content type served for each.
# pdf and docx are known formats without a producing pipeline.
OUTPUT_MIME_TYPES: Dict[str, str] = {
    "md": "text/markdown; charset=utf-8",
    "txt": "text/plain; charset=utf-8",
    "json": "application/json; charset=utf-8",
    "csv": "text/csv; charset=utf-8",
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
}

IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "bmp", "webp", "tiff")

# Vector images are recognized but never reach the raster image pipeline
VECTOR_IMAGE_EXTENSIONS = ("svg",)
VECTOR_IMAGE_MIME_TYPES = ("image/svg+xml",)

# Recognized sources no pipeline can serve, listed by /convert/supported
KNOWN_GAPS: Dict[str, str] = {
    "svg": "Vector images cannot be rasterized; export to PNG or JPEG first",
}


class SourceKind(Enum):
    """Source kinds recognized from the upload's filename or declared MIME type."""
    DOCX = "docx"
    PDF = "pdf"
    CSV = "csv"
    JSON = "json"
    IMAGE = "image"
    TXT = "txt"


class PipelineId(Enum):
    """Available conversion pipelines."""
    DOCUMENT_TO_MARKDOWN = "docx-md"
    PDF_TO_TEXT = "pdf-txt"
    CSV_TO_JSON = "csv-json"
    JSON_TO_CSV = "json-csv"
    IMAGE_TO_IMAGE = "image-image"
    TEXT_TO_MARKDOWN = "txt-md"


# Conversion matrix: (source kind, output format) -> (pipeline, description).
# Lookup walks the entries in order and the first matching pair wins.
PIPELINE_MATRIX: Dict[Tuple[SourceKind, str], Tuple[PipelineId, str]] = {
    (SourceKind.DOCX, "md"): (PipelineId.DOCUMENT_TO_MARKDOWN, "Word document to Markdown"),
    (SourceKind.PDF, "txt"): (PipelineId.PDF_TO_TEXT, "Best-effort PDF text extraction"),
    (SourceKind.CSV, "json"): (PipelineId.CSV_TO_JSON, "Delimited text to nested JSON records"),
    (SourceKind.JSON, "csv"): (PipelineId.JSON_TO_CSV, "JSON records to flattened CSV"),
    (SourceKind.IMAGE, "png"): (PipelineId.IMAGE_TO_IMAGE, "Lossless PNG re-encode"),
    (SourceKind.IMAGE, "jpg"): (PipelineId.IMAGE_TO_IMAGE, "High-quality JPEG re-encode"),
    (SourceKind.IMAGE, "jpeg"): (PipelineId.IMAGE_TO_IMAGE, "High-quality JPEG re-encode"),
    (SourceKind.TXT, "md"): (PipelineId.TEXT_TO_MARKDOWN, "Plain text to structured Markdown"),
}


# Encoder settings per target image format (Pillow save() arguments)
IMAGE_ENCODER_SETTINGS: Dict[str, Dict] = {
    "png": {"format": "PNG", "options": {"compress_level": 6}},
    "jpg": {"format": "JPEG", "options": {"quality": 95, "progressive": True}},
    "jpeg": {"format": "JPEG", "options": {"quality": 95, "progressive": True}},
}

# Remediation hints attached to every internal fault
GENERIC_REMEDIATION_HINTS = (
    "A smaller file",
    "A different file format",
    "Refreshing and trying again",
)

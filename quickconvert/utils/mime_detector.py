"""
Source kind detection for uploaded files.

Detection uses the filename extension (case-insensitive). The declared MIME
type is consulted only for the image family.
"""

import logging
from pathlib import PurePosixPath
from typing import Callable, Dict, List

from ..config import (
    IMAGE_EXTENSIONS,
    VECTOR_IMAGE_EXTENSIONS,
    VECTOR_IMAGE_MIME_TYPES,
    SourceKind,
)

logger = logging.getLogger(__name__)

SourcePredicate = Callable[[str, str], bool]


def get_extension(filename: str) -> str:
    """Lower-cased extension without the dot, or '' when there is none."""
    if not filename:
        return ""
    return PurePosixPath(filename.replace("\\", "/")).suffix.lstrip(".").lower()


def base_name(filename: str) -> str:
    """Filename up to its first dot, used for suggested output names."""
    name = PurePosixPath((filename or "").replace("\\", "/")).name
    return name.split(".")[0] or "converted"


def strip_extension(filename: str, extension: str) -> str:
    """Drop a trailing ``.extension`` (any case) from a filename."""
    suffix = f".{extension}"
    if filename.lower().endswith(suffix):
        return filename[: -len(suffix)]
    return filename


def is_vector_image(filename: str, declared_mime: str) -> bool:
    """SVG by extension, or by declared MIME type when the name has no raster extension."""
    extension = get_extension(filename)
    if extension in VECTOR_IMAGE_EXTENSIONS:
        return True
    return extension not in IMAGE_EXTENSIONS and (declared_mime or "").lower() in VECTOR_IMAGE_MIME_TYPES


def is_image(filename: str, declared_mime: str) -> bool:
    """Raster images only; vector images are excluded."""
    if is_vector_image(filename, declared_mime):
        return False
    return (declared_mime or "").lower().startswith("image/") or get_extension(filename) in IMAGE_EXTENSIONS


def _suffix_predicate(extension: str) -> SourcePredicate:
    def predicate(filename: str, declared_mime: str) -> bool:
        return get_extension(filename) == extension
    predicate.__name__ = f"is_{extension}"
    return predicate


SOURCE_PREDICATES: Dict[SourceKind, SourcePredicate] = {
    SourceKind.DOCX: _suffix_predicate("docx"),
    SourceKind.PDF: _suffix_predicate("pdf"),
    SourceKind.CSV: _suffix_predicate("csv"),
    SourceKind.JSON: _suffix_predicate("json"),
    SourceKind.IMAGE: is_image,
    SourceKind.TXT: _suffix_predicate("txt"),
}


def detect_source_kinds(filename: str, declared_mime: str) -> List[SourceKind]:
    """All source kinds whose predicate accepts the upload."""
    kinds = [kind for kind, predicate in SOURCE_PREDICATES.items() if predicate(filename, declared_mime)]
    logger.debug(f"Detected source kinds for {filename!r} ({declared_mime}): {[k.value for k in kinds]}")
    return kinds

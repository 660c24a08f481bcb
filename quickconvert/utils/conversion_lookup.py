"""
Conversion lookup utilities for the /convert endpoints.

This module resolves an upload and a requested output format to a pipeline
from the conversion matrix and lists the supported conversions.
"""

import logging
from typing import Dict, List, Optional

from ..config import OUTPUT_MIME_TYPES, PIPELINE_MATRIX
from ..models import PipelineEntry
from .mime_detector import SOURCE_PREDICATES

logger = logging.getLogger(__name__)


def is_known_output_kind(output_kind: str) -> bool:
    """Whether the output format is in the whitelist, pipeline or not."""
    return (output_kind or "").lower() in OUTPUT_MIME_TYPES


def get_output_formats() -> List[str]:
    return list(OUTPUT_MIME_TYPES)


def resolve(source_name: str, declared_mime: str, output_kind: str) -> Optional[PipelineEntry]:
    """
    Find the pipeline for an upload and a requested output format.

    Args:
        source_name: Original filename of the upload
        declared_mime: MIME type declared by the client
        output_kind: Requested output format (e.g. 'json', 'png')

    Returns:
        The first matching PipelineEntry, or None when no pipeline serves the pair
    """
    normalized_output = (output_kind or "").lower()

    for (source_kind, matrix_output), (pipeline_id, description) in PIPELINE_MATRIX.items():
        if matrix_output != normalized_output:
            continue
        if SOURCE_PREDICATES[source_kind](source_name, declared_mime):
            logger.debug(f"Resolved {source_name!r} -> {normalized_output} to {pipeline_id.value}")
            return PipelineEntry(pipeline_id=pipeline_id, output_kind=normalized_output, description=description)

    return None


def get_supported_conversions() -> Dict[str, List[str]]:
    """
    Get all supported source kinds and their possible output formats.

    Returns:
        Dictionary mapping source kinds to lists of output formats
    """
    supported: Dict[str, List[str]] = {}
    for (source_kind, output_kind) in PIPELINE_MATRIX:
        outputs = supported.setdefault(source_kind.value, [])
        if output_kind not in outputs:
            outputs.append(output_kind)

    return supported

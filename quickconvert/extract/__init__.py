"""
Extraction adapters for opaque binary formats.

This package holds the TextExtractor and ImageRecoder interfaces and their
pypdf, mammoth and Pillow implementations.
"""

from .base import (
    ImageRecoder,
    TextExtractor,
    build_empty_report,
    build_failure_diagnostics,
    extract_text,
)
from .documents import DocxTextExtractor, PdfTextExtractor
from .images import PillowImageRecoder

__all__ = [
    'ImageRecoder',
    'TextExtractor',
    'build_empty_report',
    'build_failure_diagnostics',
    'extract_text',
    'DocxTextExtractor',
    'PdfTextExtractor',
    'PillowImageRecoder',
]

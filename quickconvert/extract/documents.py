"""
Document text extractors backed by pypdf and mammoth.
"""

from io import BytesIO

import mammoth
from pypdf import PdfReader

from ..models import RawExtraction
from .base import TextExtractor


class PdfTextExtractor(TextExtractor):
    """
    PDF text extractor.

    Works for PDFs with embedded text. Scanned, image-only PDFs parse fine but
    return no text.
    """

    document_label = "PDF"
    empty_causes = [
        "PDF contains only images (scanned document)",
        "Text is embedded as graphics",
        "PDF uses complex formatting",
        "Password protection or security restrictions",
    ]

    def extract(self, data: bytes) -> RawExtraction:
        reader = PdfReader(BytesIO(data))
        if reader.is_encrypted:
            # Empty-password PDFs open transparently; others fail here
            reader.decrypt("")

        page_texts = []
        for page_no, page in enumerate(reader.pages, start=1):
            page_text = page.extract_text() or ""
            self.logger.debug(f"Page {page_no}: {len(page_text)} characters")
            page_texts.append(page_text)

        return RawExtraction(text="\n\n".join(page_texts), page_count=len(reader.pages))


class DocxTextExtractor(TextExtractor):
    """Word (.docx) raw text extractor. DOCX has no fixed pagination."""

    document_label = "Word document"
    empty_causes = [
        "Document body is empty",
        "Content is made of images or drawing objects",
        "Text lives only in headers, footers or text boxes",
    ]

    def extract(self, data: bytes) -> RawExtraction:
        result = mammoth.extract_raw_text(BytesIO(data))
        for message in result.messages:
            self.logger.debug(f"mammoth: {message}")
        return RawExtraction(text=result.value, page_count=None)

"""Plain text to Markdown conversion."""

from ..utils.mime_detector import strip_extension
from ..utils.text_structuring import structure_text


def text_to_markdown(file_content: bytes, filename: str) -> str:
    text = file_content.decode("utf-8", errors="replace")
    return structure_text(text, strip_extension(filename, "txt"))

"""
Heuristic structuring of plain text into Markdown.

Each line is classified on its own: short single-token lines without
sentence-ending punctuation become subheadings, everything else passes
through. The pass is deterministic and never fails.
"""

import re
from typing import List

PREAMBLE = "Converted from text file"

LABEL_MAX_LENGTH = 60
SENTENCE_END = re.compile(r"[.!?]$")
BULLET_MARKERS = ("- ", "* ")


def is_label_line(line: str) -> bool:
    """Short, single token, and not ending like a sentence."""
    return (
        len(line) < LABEL_MAX_LENGTH
        and not SENTENCE_END.search(line)
        and " " not in line
    )


def structure_text(text: str, title: str) -> str:
    """
    Promote unstructured text into lightweight Markdown.

    Args:
        text: Source text, any line endings
        title: Document title used for the top-level heading

    Returns:
        Markdown text
    """
    markdown: List[str] = [f"# {title}", "", PREAMBLE, ""]

    for raw_line in text.split("\n"):
        line = raw_line.strip()

        if not line:
            markdown.append("")
        elif is_label_line(line):
            markdown.append(f"## {line}")
        elif line.startswith(BULLET_MARKERS):
            # Already a list item
            markdown.append(line)
        else:
            markdown.append(line)

    return "\n".join(markdown)

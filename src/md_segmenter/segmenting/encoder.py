# src/md_segmenter/segmenting/encoder.py

import logging

from .headings import fenced_lines, is_top_level_heading
from .models import (
    ChildSegment,
    EncodedDocument,
    Markers,
    ParentSegment,
    Segment,
)

logger = logging.getLogger(__name__)


def encode_document(markdown: str) -> EncodedDocument:
    """Convert heading/paragraph markdown into parent and child segments.

    Rules:
    - ``# title`` opens a parent segment carrying the heading text verbatim
      (a ``摘要：...`` suffix spliced in earlier stays attached).
    - Consecutive non-blank lines form one child segment; a blank line or
      the next top-level heading closes it.
    - ``##`` and deeper headings are plain paragraph text. The target
      format has exactly two levels.
    - Closed fenced code blocks are copied verbatim into the surrounding
      child. An unclosed fence is ordinary text.

    Example:
        # 技术架构 摘要：本章介绍...

        服务发现模块负责...
        ↓
        {{>1#}} 技术架构 摘要：本章介绍...

        {{>2#}} 服务发现模块负责...
    """
    segments: list[Segment] = []
    paragraph: list[str] = []

    def flush() -> None:
        text = "\n".join(paragraph).strip()
        if text:
            segments.append(ChildSegment(text))
        paragraph.clear()

    lines = markdown.split("\n")
    fenced = fenced_lines(lines)

    for i, line in enumerate(lines):
        stripped = line.strip()

        if i in fenced:
            paragraph.append(line)
        elif is_top_level_heading(stripped):
            flush()
            segments.append(ParentSegment(stripped[2:].strip()))
        elif not stripped:
            flush()
        else:
            paragraph.append(line)

    flush()

    document = EncodedDocument(tuple(segments))
    logger.debug(
        "Encoded %d parent and %d child segments",
        len(document.parents),
        len(document.children),
    )
    return document


def encode(markdown: str, markers: Markers = Markers()) -> str:
    """``encode_document`` rendered straight to marker syntax."""
    return encode_document(markdown).render(markers)

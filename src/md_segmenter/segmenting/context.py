# src/md_segmenter/segmenting/context.py

"""Ancestor-context injection.

A child segment is embedded and retrieved on its own, without its parent.
Prefixing it with the parent title keeps it self-describing:

    {{>1#}} 技术架构
    {{>2#}} 服务发现
    ↓
    {{>1#}} 技术架构
    {{>2#}} (所属章节: 技术架构) 服务发现
"""

import dataclasses
import logging

from .headings import parse_headings
from .models import (
    ChildSegment,
    HeadingNode,
    EncodedDocument,
    Markers,
    ParentSegment,
    Segment,
    parse_encoded,
)

logger = logging.getLogger(__name__)


def inject_parent_context(document: EncodedDocument) -> EncodedDocument:
    """Set every child's context to the title of the closest preceding parent.

    Children before the first parent are left alone. An existing context
    is replaced, never stacked.
    """
    current_title: str | None = None
    segments: list[Segment] = []
    injected = 0

    for segment in document.segments:
        if isinstance(segment, ParentSegment):
            current_title = segment.title or None
        elif isinstance(segment, ChildSegment) and current_title is not None:
            segment = dataclasses.replace(segment, context=current_title)
            injected += 1
        segments.append(segment)

    logger.debug("Injected parent context into %d child segments", injected)
    return EncodedDocument(tuple(segments))


def inject_context(encoded: str, markers: Markers = Markers()) -> str:
    """String form of ``inject_parent_context`` for already-encoded text."""
    return inject_parent_context(parse_encoded(encoded, markers)).render(markers)


def inject_heading_breadcrumbs(markdown: str) -> str:
    """Legacy strategy for documents that keep plain ``#`` structure.

    Inserts ``[章节: 部署 > 环境准备 > JDK 安装]`` before every body line,
    built from a stack of the enclosing headings. Heading, blank and image
    lines get no breadcrumb.
    """
    headings = {node.offset: node for node in parse_headings(markdown)}
    if not headings:
        return markdown

    stack: list[HeadingNode] = []
    out: list[str] = []
    offset = 0

    for line in markdown.split("\n"):
        node = headings.get(offset)
        if node is not None:
            while stack and stack[-1].level >= node.level:
                stack.pop()
            stack.append(node)

        stripped = line.strip()
        if (
            node is None
            and stripped
            and not stripped.startswith("#")
            and not stripped.startswith("!")
            and stack
        ):
            out.append("[章节: " + " > ".join(h.title for h in stack) + "]")

        out.append(line)
        offset += len(line) + 1

    return "\n".join(out)

"""Heading parsing and the two-level parent/child segment encoding."""

from .context import inject_context, inject_heading_breadcrumbs, inject_parent_context
from .encoder import encode, encode_document
from .headings import parse_headings
from .models import (
    CONTEXT_LABEL,
    DEFAULT_CHILD_MARKER,
    DEFAULT_PARENT_MARKER,
    SUMMARY_LABEL,
    ChildSegment,
    EncodedDocument,
    HeadingNode,
    Markers,
    ParentSegment,
    RawSegment,
    Segment,
    parse_encoded,
)
from .rechunk import (
    DEFAULT_LOOKBACK,
    DEFAULT_SAFE_SPLIT_THRESHOLD,
    rechunk,
    rechunk_document,
    split_text,
)

__all__ = [
    # Markers & labels
    "CONTEXT_LABEL",
    "DEFAULT_CHILD_MARKER",
    "DEFAULT_PARENT_MARKER",
    "SUMMARY_LABEL",
    "Markers",
    # Tree
    "ChildSegment",
    "EncodedDocument",
    "HeadingNode",
    "ParentSegment",
    "RawSegment",
    "Segment",
    "parse_encoded",
    # Stages
    "parse_headings",
    "encode",
    "encode_document",
    "inject_context",
    "inject_parent_context",
    "inject_heading_breadcrumbs",
    "DEFAULT_LOOKBACK",
    "DEFAULT_SAFE_SPLIT_THRESHOLD",
    "rechunk",
    "rechunk_document",
    "split_text",
]

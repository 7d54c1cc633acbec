# src/md_segmenter/segmenting/rechunk.py

"""Bounded re-chunking of child segments.

The indexing engine hard-truncates a child segment past its own size
limit, and whatever spills over loses its child marker. Splitting
oversized children beforehand, at the best nearby boundary, keeps every
piece intact and marked.
"""

import bisect
import dataclasses
import logging

from .models import ChildSegment, EncodedDocument, Markers, Segment, parse_encoded

logger = logging.getLogger(__name__)

DEFAULT_SAFE_SPLIT_THRESHOLD = 450
DEFAULT_LOOKBACK = 200

# Highest priority first: line break, sentence end, clause punctuation.
BOUNDARY_CLASSES = ("\n", "。.", "；;，,")


class _BoundaryIndex:
    """Sorted offsets of each boundary class in one text."""

    def __init__(self, text: str) -> None:
        self._positions = [
            [i for i, ch in enumerate(text) if ch in chars] for chars in BOUNDARY_CLASSES
        ]

    def best_split(self, start: int, limit: int, lookback: int) -> int | None:
        """Offset just past the best boundary in ``(limit - lookback, limit)``.

        Classes are tried in priority order; within a class the boundary
        closest to ``limit`` wins. A boundary at ``start`` itself never
        counts, so a split always makes progress.
        """
        floor = max(start, limit - lookback)
        for positions in self._positions:
            i = bisect.bisect_left(positions, limit) - 1
            if i >= 0 and positions[i] > floor:
                return positions[i] + 1
        return None


def split_text(
    text: str,
    threshold: int = DEFAULT_SAFE_SPLIT_THRESHOLD,
    *,
    lookback: int = DEFAULT_LOOKBACK,
) -> list[str]:
    """Split ``text`` into stripped pieces of at most ``threshold`` characters.

    Each step emits the head up to the best boundary before ``threshold``
    (or exactly ``threshold`` characters when the lookback window holds no
    boundary) and continues on the tail. The tail shrinks by at least one
    character per step, so this finishes after roughly
    ``len(text) / threshold`` steps.
    """
    if threshold <= 0:
        raise ValueError("threshold must be > 0")
    if lookback < 0:
        raise ValueError("lookback must be >= 0")

    text = text.strip()
    if len(text) <= threshold:
        return [text] if text else []

    index = _BoundaryIndex(text)
    pieces: list[str] = []
    start = 0
    end = len(text)

    while True:
        while start < end and text[start].isspace():
            start += 1
        if end - start <= threshold:
            pieces.append(text[start:])
            return pieces

        limit = start + threshold
        split = index.best_split(start, limit, lookback)
        if split is None:
            split = limit

        head = text[start:split].strip()
        if head:
            pieces.append(head)
        start = split


def rechunk_document(
    document: EncodedDocument,
    threshold: int = DEFAULT_SAFE_SPLIT_THRESHOLD,
    *,
    lookback: int = DEFAULT_LOOKBACK,
) -> EncodedDocument:
    """Replace every oversized child with sibling children that fit.

    Each piece keeps the original child's context. The context prefix is
    not counted against ``threshold``.
    """
    segments: list[Segment] = []
    split_count = 0

    for segment in document.segments:
        if isinstance(segment, ChildSegment) and len(segment.text) > threshold:
            pieces = split_text(segment.text, threshold, lookback=lookback)
            segments.extend(dataclasses.replace(segment, text=p) for p in pieces)
            split_count += 1
            logger.debug(
                "Split child segment of %d chars into %d pieces",
                len(segment.text),
                len(pieces),
            )
        else:
            segments.append(segment)

    if split_count:
        logger.info(
            "Re-chunked %d oversized child segments (threshold=%d)",
            split_count,
            threshold,
        )
    return EncodedDocument(tuple(segments))


def rechunk(
    encoded: str,
    markers: Markers = Markers(),
    threshold: int = DEFAULT_SAFE_SPLIT_THRESHOLD,
    *,
    lookback: int = DEFAULT_LOOKBACK,
) -> str:
    """String form of ``rechunk_document`` for already-encoded text."""
    document = parse_encoded(encoded, markers)
    return rechunk_document(document, threshold, lookback=lookback).render(markers)

# src/md_segmenter/segmenting/headings.py

import logging
import re

from .models import HeadingNode

logger = logging.getLogger(__name__)

HEADING_PATTERN = re.compile(r"^(#{1,6})[ \t]+(.+)$", re.MULTILINE)
_FENCE_OPENER = re.compile(r"^(`{3,}|~{3,})")


def parse_headings(text: str) -> list[HeadingNode]:
    """Every ATX heading in ``text``, in document order."""
    headings = [
        HeadingNode(level=len(m.group(1)), title=m.group(2).strip(), offset=m.start())
        for m in HEADING_PATTERN.finditer(text)
    ]
    logger.debug("Parsed %d headings", len(headings))
    return headings


def is_top_level_heading(stripped_line: str) -> bool:
    return stripped_line.startswith("# ") and not stripped_line.startswith("##")


def fence_opener(stripped_line: str) -> str | None:
    """The fence run (```` ``` ```` or ``~~~``) opening a code block, if any."""
    match = _FENCE_OPENER.match(stripped_line)
    return match.group(1) if match else None


def closes_fence(stripped_line: str, opener: str) -> bool:
    fence_char = opener[0]
    return len(stripped_line) >= len(opener) and not stripped_line.strip(fence_char)


def fenced_lines(lines: list[str]) -> set[int]:
    """Indices of lines inside closed code fences, fence lines included.

    A fence with no closing run is not a code block. Its opener and
    everything after it stay ordinary text, so a stray ```` ``` ```` in
    parser output cannot swallow the rest of the document.
    """
    fenced: set[int] = set()
    opener: str | None = None
    opened_at = 0

    for i, line in enumerate(lines):
        stripped = line.strip()
        if opener is None:
            opener = fence_opener(stripped)
            opened_at = i
        elif closes_fence(stripped, opener):
            fenced.update(range(opened_at, i + 1))
            opener = None

    return fenced

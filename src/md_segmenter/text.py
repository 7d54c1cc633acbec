# src/md_segmenter/text.py

"""Small text helpers shared by the enrichment and segmenting stages."""

import re
import unicodedata

# Applied in order. Each pattern stops at end of line.
_OCR_NOISE_PATTERNS = (
    re.compile(r"HTTP/1\.\d.*"),  # access-log tails
    re.compile(r"\[GIN\].*"),
    re.compile(r"nginx-\d+-\d+.*"),
    re.compile(r"sandbox-\d+-\d+.*"),
    re.compile(r"[A-Za-z0-9_-]{50,}"),  # opaque tokens, hashes, keys
)
_EXCESS_BLANK_LINES = re.compile(r"\n{3,}")
_THINK_BLOCK = re.compile(r"<think>.*?</think>", re.DOTALL)
_THINK_TAG = re.compile(r"</?think>")
_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """NFKC-normalize parser output.

    OCR-based PDF parsers emit compatibility code points such as Kangxi
    radicals (U+2F00 block) instead of the unified CJK ideographs. NFKC
    folds them back so search and embedding see the ordinary characters.
    """
    if not text:
        return text
    return unicodedata.normalize("NFKC", text)


def clean_ocr_text(text: str) -> str:
    """Strip log lines and opaque tokens that vision models transcribe from screenshots."""
    if not text:
        return ""
    cleaned = text
    for pattern in _OCR_NOISE_PATTERNS:
        cleaned = pattern.sub("", cleaned)
    cleaned = _EXCESS_BLANK_LINES.sub("\n\n", cleaned)
    return cleaned.strip()


def strip_think_tags(text: str) -> str:
    """Remove ``<think>...</think>`` reasoning traces and any stray tags."""
    if not text:
        return ""
    cleaned = _THINK_BLOCK.sub("", text).strip()
    return _THINK_TAG.sub("", cleaned).strip()


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RUN.sub(" ", text).strip()


def truncate(text: str, limit: int, ellipsis: str = "...") -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + ellipsis

# src/md_segmenter/enrichment/summaries.py

import asyncio
import logging
from dataclasses import dataclass, field
from time import monotonic

from md_segmenter.observability import names
from md_segmenter.observability.base import MetricsHook, NoOpMetricsHook
from md_segmenter.segmenting.headings import fenced_lines, is_top_level_heading
from md_segmenter.segmenting.models import SUMMARY_LABEL
from md_segmenter.text import collapse_whitespace, strip_think_tags

from .capabilities import Summarizer

logger = logging.getLogger(__name__)

DEFAULT_MIN_CONTENT_CHARS = 100
DEFAULT_MIN_SUMMARY_CHARS = 1


@dataclass(frozen=True)
class Section:
    title: str
    heading_offset: int
    body: str


@dataclass(frozen=True)
class SummaryOutcome:
    markdown: str
    summaries: dict[str, str] = field(default_factory=dict)
    failed: list[str] = field(default_factory=list)


def extract_sections(markdown: str) -> list[Section]:
    """One section per top-level (``# ``) heading.

    The body runs to the next top-level heading and leaves out blank
    lines, nested headings, image lines and closed fenced code blocks.
    """
    sections: list[Section] = []
    title: str | None = None
    heading_offset = 0
    body: list[str] = []
    offset = 0

    def close() -> None:
        if title is not None:
            sections.append(Section(title, heading_offset, "\n".join(body)))

    lines = markdown.split("\n")
    fenced = fenced_lines(lines)

    for i, line in enumerate(lines):
        stripped = line.strip()
        line_offset = offset
        offset += len(line) + 1

        if i in fenced:
            continue

        if is_top_level_heading(stripped):
            close()
            title = stripped[2:].strip()
            heading_offset = line_offset
            body = []
        elif stripped and not stripped.startswith(("#", "!")):
            body.append(line)

    close()
    return sections


def clean_summary(summary: str) -> str:
    """Drop reasoning traces and fold the summary onto one line."""
    return collapse_whitespace(strip_think_tags(summary))


async def _summarize_one(
    summarizer: Summarizer, section: Section, timeout: float | None
) -> str | None:
    text = f"标题：{section.title}\n\n{section.body}"
    try:
        return await asyncio.wait_for(summarizer.summarize(text), timeout)
    except asyncio.TimeoutError:
        logger.warning("Summary timed out after %ss: %s", timeout, section.title)
    except Exception:
        logger.exception("Summary generation failed: %s", section.title)
    return None


async def summarize_sections(
    markdown: str,
    summarizer: Summarizer,
    *,
    min_content_chars: int = DEFAULT_MIN_CONTENT_CHARS,
    min_summary_chars: int = DEFAULT_MIN_SUMMARY_CHARS,
    timeout: float | None = None,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> SummaryOutcome:
    """Append a short summary to each long enough top-level heading.

    ``# 技术架构`` becomes ``# 技术架构 摘要：本章介绍...`` on the same line,
    so the summary travels with the heading into the parent segment.
    Sections below ``min_content_chars`` are not sent. A failed call leaves
    its heading untouched.
    """
    sections = extract_sections(markdown)
    eligible = [s for s in sections if len(s.body) >= min_content_chars]
    logger.info(
        "Found %d sections, %d long enough to summarize", len(sections), len(eligible)
    )
    metrics_hook.increment(names.SECTIONS_SKIPPED_TOTAL, len(sections) - len(eligible))
    if not eligible:
        return SummaryOutcome(markdown=markdown)

    start = monotonic()
    replies = await asyncio.gather(
        *[_summarize_one(summarizer, s, timeout) for s in eligible]
    )

    by_offset: dict[int, str] = {}
    summaries: dict[str, str] = {}
    failed: list[str] = []
    for section, reply in zip(eligible, replies):
        if reply is None:
            failed.append(section.title)
            continue
        summary = clean_summary(reply)
        if len(summary) < max(min_summary_chars, 1):
            logger.debug("Discarding empty or too short summary: %s", section.title)
            continue
        by_offset[section.heading_offset] = summary
        summaries[section.title] = summary

    elapsed_ms = 1000 * (monotonic() - start)
    metrics_hook.record_latency(names.SECTION_SUMMARY_DURATION, elapsed_ms)
    metrics_hook.increment(names.SECTIONS_SUMMARIZED_TOTAL, len(by_offset))
    metrics_hook.increment(names.SECTION_SUMMARY_ERRORS_TOTAL, len(failed))
    logger.info(
        "Section summaries finished: summarized=%d, failed=%d, elapsed=%.0fms",
        len(by_offset),
        len(failed),
        elapsed_ms,
    )

    return SummaryOutcome(
        markdown=_splice_summaries(markdown, by_offset),
        summaries=summaries,
        failed=failed,
    )


def _splice_summaries(markdown: str, by_offset: dict[int, str]) -> str:
    lines = markdown.split("\n")
    offset = 0
    for i, line in enumerate(lines):
        summary = by_offset.get(offset)
        if summary is not None:
            lines[i] = f"{line.rstrip()} {SUMMARY_LABEL}{summary}"
        offset += len(line) + 1
    return "\n".join(lines)

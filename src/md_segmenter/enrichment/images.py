# src/md_segmenter/enrichment/images.py

import asyncio
import logging
import re
from dataclasses import dataclass, field
from time import monotonic

from md_segmenter.observability import names
from md_segmenter.observability.base import MetricsHook, NoOpMetricsHook
from md_segmenter.text import clean_ocr_text, collapse_whitespace, truncate

from .capabilities import ImageAnalysis, ImageAnalyzer

logger = logging.getLogger(__name__)

IMAGE_PATTERN = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")

DEFAULT_CONTEXT_WINDOW = 30
MAX_DESCRIPTION_CHARS = 200
MAX_OCR_CHARS = 300
OCR_SEPARATOR = " | "
OCR_LABEL = "文字: "


@dataclass(frozen=True)
class ImageReference:
    url: str
    alt_original: str
    markdown: str
    context_before: str
    context_after: str
    span: tuple[int, int]

    @property
    def context_text(self) -> str:
        return f"图片前部分文本：{self.context_before} | 图片后部分文本：{self.context_after}"


@dataclass(frozen=True)
class EnrichmentResult:
    subject_key: str
    description: str = ""
    ocr_text: str = ""
    success: bool = False
    error_reason: str | None = None


@dataclass(frozen=True)
class ImageEnrichmentOutcome:
    markdown: str
    results: list[EnrichmentResult] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    enriched: int = 0


def find_image_references(
    markdown: str, context_window: int = DEFAULT_CONTEXT_WINDOW
) -> list[ImageReference]:
    """All ``![alt](url)`` occurrences with the text windows around them."""
    refs = []
    for match in IMAGE_PATTERN.finditer(markdown):
        start, end = match.span()
        before = markdown[max(0, start - context_window) : start]
        after = markdown[end : end + context_window]
        refs.append(
            ImageReference(
                url=match.group(2),
                alt_original=match.group(1),
                markdown=match.group(0),
                context_before=before.replace("\n", " ").strip(),
                context_after=after.replace("\n", " ").strip(),
                span=(start, end),
            )
        )
    return refs


def build_enriched_alt(analysis: ImageAnalysis) -> str:
    """Fuse description and OCR text into one alt text.

    Format: ``<description> | 文字: <ocr>``. The description is capped at
    200 characters and the cleaned OCR text at 300. The result is a single
    line with backslashes and brackets escaped, safe inside ``![...]``.
    """
    parts = []
    description = collapse_whitespace(analysis.description)
    if description:
        parts.append(truncate(description, MAX_DESCRIPTION_CHARS))

    ocr_text = collapse_whitespace(clean_ocr_text(analysis.ocr_text))
    if ocr_text:
        parts.append(OCR_LABEL + truncate(ocr_text, MAX_OCR_CHARS))

    alt = OCR_SEPARATOR.join(parts)
    return alt.replace("\\", "\\\\").replace("[", r"\[").replace("]", r"\]")


async def _analyze_one(
    analyzer: ImageAnalyzer, ref: ImageReference, timeout: float | None
) -> EnrichmentResult:
    try:
        analysis = await asyncio.wait_for(
            analyzer.analyze(ref.url, ref.context_text), timeout
        )
    except asyncio.TimeoutError:
        logger.warning("Image analysis timed out after %ss: %s", timeout, ref.url)
        return EnrichmentResult(subject_key=ref.url, error_reason="timeout")
    except Exception as e:
        logger.warning("Image analysis failed: %s (%s)", ref.url, e)
        return EnrichmentResult(subject_key=ref.url, error_reason=str(e) or type(e).__name__)

    return EnrichmentResult(
        subject_key=ref.url,
        description=analysis.description,
        ocr_text=analysis.ocr_text,
        success=True,
    )


async def enrich_images(
    markdown: str,
    analyzer: ImageAnalyzer,
    *,
    context_window: int = DEFAULT_CONTEXT_WINDOW,
    timeout: float | None = None,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> ImageEnrichmentOutcome:
    """Rewrite every image's alt text with vision-model output.

    One analyzer call per image, all in flight at once, each with its own
    surrounding-text context and its own timeout. A failed or timed-out
    image keeps its original markdown and its URL is reported in
    ``failed``; it never affects the other images.
    """
    refs = find_image_references(markdown, context_window)
    if not refs:
        return ImageEnrichmentOutcome(markdown=markdown)

    start = monotonic()
    logger.info("Analyzing %d images concurrently", len(refs))

    results = await asyncio.gather(
        *[_analyze_one(analyzer, ref, timeout) for ref in refs]
    )

    # Results line up with refs; splice from the end so earlier spans stay valid
    enriched = 0
    failed: list[str] = []
    pieces: list[str] = []
    cursor = len(markdown)
    for ref, result in reversed(list(zip(refs, results))):
        start_pos, end_pos = ref.span
        replacement = ref.markdown
        if result.success:
            alt = build_enriched_alt(
                ImageAnalysis(description=result.description, ocr_text=result.ocr_text)
            )
            if alt:
                replacement = f"![{alt}]({ref.url})"
                enriched += 1
        else:
            failed.append(ref.url)
        pieces.append(markdown[end_pos:cursor])
        pieces.append(replacement)
        cursor = start_pos
    pieces.append(markdown[:cursor])
    failed.reverse()

    elapsed_ms = 1000 * (monotonic() - start)
    metrics_hook.record_latency(names.IMAGE_ENRICHMENT_DURATION, elapsed_ms)
    metrics_hook.increment(names.IMAGES_ENRICHED_TOTAL, enriched)
    metrics_hook.increment(names.IMAGES_FAILED_TOTAL, len(failed))
    logger.info(
        "Image analysis finished: enriched=%d, failed=%d, elapsed=%.0fms",
        enriched,
        len(failed),
        elapsed_ms,
    )

    return ImageEnrichmentOutcome(
        markdown="".join(reversed(pieces)),
        results=list(results),
        failed=failed,
        enriched=enriched,
    )

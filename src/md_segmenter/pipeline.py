# src/md_segmenter/pipeline.py

"""End-to-end transformation: parsed markdown in, indexable markdown out.

    raw markdown
      -> NFKC normalization            (normalize_text)
      -> image path resolution         (url_resolver + image_refs)
      -> image enrichment              (enable_image_enrichment)
      -> section summaries             (enable_summary)
      -> parent/child encoding         (enable_hierarchical_encoding)
      -> ancestor-context injection
      -> bounded re-chunking
      -> final markdown

Per-item model failures never fail the document. They come back as data
(``failed_images``) so the caller can report partial success.
"""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from time import monotonic

from md_segmenter.enrichment.capabilities import (
    ImageAnalyzer,
    ImageURLResolver,
    Summarizer,
)
from md_segmenter.enrichment.images import DEFAULT_CONTEXT_WINDOW, enrich_images
from md_segmenter.enrichment.paths import resolve_image_paths
from md_segmenter.enrichment.summaries import (
    DEFAULT_MIN_CONTENT_CHARS,
    DEFAULT_MIN_SUMMARY_CHARS,
    summarize_sections,
)
from md_segmenter.observability import names
from md_segmenter.observability.base import MetricsHook, NoOpMetricsHook
from md_segmenter.segmenting.context import (
    inject_heading_breadcrumbs,
    inject_parent_context,
)
from md_segmenter.segmenting.encoder import encode_document
from md_segmenter.segmenting.models import (
    DEFAULT_CHILD_MARKER,
    DEFAULT_PARENT_MARKER,
    Markers,
)
from md_segmenter.segmenting.rechunk import (
    DEFAULT_LOOKBACK,
    DEFAULT_SAFE_SPLIT_THRESHOLD,
    rechunk_document,
)
from md_segmenter.text import normalize_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SegmentOptions:
    """Per-call switches and limits.

    Immutable. Explicit. No magic defaults from environment.
    """

    enable_image_enrichment: bool = False
    enable_summary: bool = False
    enable_hierarchical_encoding: bool = True
    parent_marker: str = DEFAULT_PARENT_MARKER
    child_marker: str = DEFAULT_CHILD_MARKER
    safe_split_threshold: int = DEFAULT_SAFE_SPLIT_THRESHOLD
    context_window_chars: int = DEFAULT_CONTEXT_WINDOW
    summary_min_content_chars: int = DEFAULT_MIN_CONTENT_CHARS
    summary_min_chars: int = DEFAULT_MIN_SUMMARY_CHARS
    split_lookback: int = DEFAULT_LOOKBACK
    # Vision endpoints may queue for minutes behind a busy GPU
    item_timeout: float | None = 600.0
    normalize_text: bool = True
    # Only used when hierarchical encoding is off
    enable_breadcrumbs: bool = False

    def __post_init__(self) -> None:
        if self.safe_split_threshold <= 0:
            raise ValueError("safe_split_threshold must be > 0")
        if self.context_window_chars < 0:
            raise ValueError("context_window_chars must be >= 0")
        if self.split_lookback < 0:
            raise ValueError("split_lookback must be >= 0")
        if self.summary_min_content_chars < 0:
            raise ValueError("summary_min_content_chars must be >= 0")
        if self.summary_min_chars < 0:
            raise ValueError("summary_min_chars must be >= 0")
        if self.item_timeout is not None and self.item_timeout <= 0:
            raise ValueError("item_timeout must be > 0")
        # Validates the marker pair
        self.markers

    @property
    def markers(self) -> Markers:
        return Markers(parent=self.parent_marker, child=self.child_marker)


@dataclass(frozen=True)
class SegmentResult:
    markdown: str
    failed_images: list[str] = field(default_factory=list)
    enriched_images: int = 0
    summaries: dict[str, str] = field(default_factory=dict)
    unresolved_images: list[str] = field(default_factory=list)


class Segmenter:
    """Runs the pipeline with a fixed set of collaborators and options."""

    def __init__(
        self,
        options: SegmentOptions = SegmentOptions(),
        *,
        image_analyzer: ImageAnalyzer | None = None,
        summarizer: Summarizer | None = None,
        url_resolver: ImageURLResolver | None = None,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        if options.enable_image_enrichment and image_analyzer is None:
            raise ValueError("enable_image_enrichment requires an image_analyzer")
        if options.enable_summary and summarizer is None:
            raise ValueError("enable_summary requires a summarizer")

        self.options = options
        self._image_analyzer = image_analyzer
        self._summarizer = summarizer
        self._url_resolver = url_resolver
        self.metrics_hook = metrics_hook

    async def run(
        self, markdown: str, image_refs: Iterable[str] | None = None
    ) -> SegmentResult:
        options = self.options
        start = monotonic()
        logger.info(
            "Segmenting document: chars=%d, images=%s, summary=%s, hierarchical=%s",
            len(markdown),
            options.enable_image_enrichment,
            options.enable_summary,
            options.enable_hierarchical_encoding,
        )

        text = normalize_text(markdown) if options.normalize_text else markdown

        unresolved: list[str] = []
        if image_refs is not None and self._url_resolver is not None:
            text, unresolved = resolve_image_paths(text, image_refs, self._url_resolver)

        failed_images: list[str] = []
        enriched_images = 0
        if options.enable_image_enrichment and self._image_analyzer is not None:
            image_outcome = await enrich_images(
                text,
                self._image_analyzer,
                context_window=options.context_window_chars,
                timeout=options.item_timeout,
                metrics_hook=self.metrics_hook,
            )
            text = image_outcome.markdown
            failed_images = image_outcome.failed
            enriched_images = image_outcome.enriched

        summaries: dict[str, str] = {}
        if options.enable_summary and self._summarizer is not None:
            summary_outcome = await summarize_sections(
                text,
                self._summarizer,
                min_content_chars=options.summary_min_content_chars,
                min_summary_chars=options.summary_min_chars,
                timeout=options.item_timeout,
                metrics_hook=self.metrics_hook,
            )
            text = summary_outcome.markdown
            summaries = summary_outcome.summaries

        if options.enable_hierarchical_encoding:
            text = self._encode(text)
        elif options.enable_breadcrumbs:
            text = inject_heading_breadcrumbs(text)

        elapsed_ms = 1000 * (monotonic() - start)
        self.metrics_hook.record_latency(names.SEGMENTING_DURATION, elapsed_ms)
        logger.info(
            "Segmenting finished: chars=%d, enriched_images=%d, failed_images=%d, "
            "summaries=%d, elapsed=%.0fms",
            len(text),
            enriched_images,
            len(failed_images),
            len(summaries),
            elapsed_ms,
        )

        return SegmentResult(
            markdown=text,
            failed_images=failed_images,
            enriched_images=enriched_images,
            summaries=summaries,
            unresolved_images=unresolved,
        )

    def _encode(self, markdown: str) -> str:
        options = self.options
        encoded = inject_parent_context(encode_document(markdown))
        document = rechunk_document(
            encoded,
            options.safe_split_threshold,
            lookback=options.split_lookback,
        )

        self.metrics_hook.increment(
            names.SEGMENTING_PARENTS_CREATED, len(document.parents)
        )
        self.metrics_hook.increment(
            names.SEGMENTING_CHILDREN_CREATED, len(document.children)
        )
        self.metrics_hook.increment(
            names.SEGMENTING_CHILDREN_SPLIT,
            len(document.children) - len(encoded.children),
        )
        return document.render(options.markers)


async def aenrich_and_segment(
    markdown: str,
    image_refs: Iterable[str] | None = None,
    options: SegmentOptions | None = None,
    *,
    image_analyzer: ImageAnalyzer | None = None,
    summarizer: Summarizer | None = None,
    url_resolver: ImageURLResolver | None = None,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> tuple[str, list[str]]:
    """Async form of ``enrich_and_segment``."""
    segmenter = Segmenter(
        options or SegmentOptions(),
        image_analyzer=image_analyzer,
        summarizer=summarizer,
        url_resolver=url_resolver,
        metrics_hook=metrics_hook,
    )
    result = await segmenter.run(markdown, image_refs)
    return result.markdown, result.failed_images


def enrich_and_segment(
    markdown: str,
    image_refs: Iterable[str] | None = None,
    options: SegmentOptions | None = None,
    *,
    image_analyzer: ImageAnalyzer | None = None,
    summarizer: Summarizer | None = None,
    url_resolver: ImageURLResolver | None = None,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> tuple[str, list[str]]:
    """Transform parsed markdown into parent/child segments for indexing.

    Blocking. Model calls run on a private event loop, so this must not be
    called from inside a running loop; use ``aenrich_and_segment`` there.

    Args:
        markdown: Parser output, images referenced as ``![alt](url)``.
        image_refs: Parse-time image names to resolve through ``url_resolver``.
        options: Pipeline switches and limits. Defaults to encoding only.
        image_analyzer: Required when image enrichment is enabled.
        summarizer: Required when summaries are enabled.
        url_resolver: Maps image names to durable URLs.
        metrics_hook: Optional metrics hook for observability.

    Returns:
        ``(final_markdown, failed_image_urls)``.

    Example:
        >>> markdown, failed = enrich_and_segment("# A\\n\\nHello world.")
        >>> markdown
        '{{>1#}} A\\n\\n{{>2#}} (所属章节: A) Hello world.\\n\\n'
    """
    return asyncio.run(
        aenrich_and_segment(
            markdown,
            image_refs,
            options,
            image_analyzer=image_analyzer,
            summarizer=summarizer,
            url_resolver=url_resolver,
            metrics_hook=metrics_hook,
        )
    )

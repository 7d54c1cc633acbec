"""Model-backed enrichment passes: image alt text and section summaries."""

from .capabilities import (
    ImageAnalysis,
    ImageAnalyzer,
    ImageURLResolver,
    LLMImageAnalyzer,
    LLMSummarizer,
    PrefixURLResolver,
    Summarizer,
    parse_image_analysis,
)
from .images import (
    EnrichmentResult,
    ImageEnrichmentOutcome,
    ImageReference,
    build_enriched_alt,
    enrich_images,
    find_image_references,
)
from .paths import resolve_image_paths
from .summaries import Section, SummaryOutcome, extract_sections, summarize_sections

__all__ = [
    # Capabilities
    "ImageAnalysis",
    "ImageAnalyzer",
    "ImageURLResolver",
    "LLMImageAnalyzer",
    "LLMSummarizer",
    "PrefixURLResolver",
    "Summarizer",
    "parse_image_analysis",
    # Images
    "EnrichmentResult",
    "ImageEnrichmentOutcome",
    "ImageReference",
    "build_enriched_alt",
    "enrich_images",
    "find_image_references",
    "resolve_image_paths",
    # Summaries
    "Section",
    "SummaryOutcome",
    "extract_sections",
    "summarize_sections",
]

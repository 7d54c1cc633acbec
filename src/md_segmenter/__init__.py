# Enrichment
from .enrichment import (
    ImageAnalysis,
    ImageAnalyzer,
    ImageURLResolver,
    LLMImageAnalyzer,
    LLMSummarizer,
    PrefixURLResolver,
    Summarizer,
    enrich_images,
    summarize_sections,
)

# LLMs
from .llms import LLMClient, LLMConfig, create_llm_client

# Observability
from .observability import LoggingMetricsHook, MetricsHook, NoOpMetricsHook

# Pipeline
from .pipeline import (
    SegmentOptions,
    SegmentResult,
    Segmenter,
    aenrich_and_segment,
    enrich_and_segment,
)

# Prompts
from .prompts import Prompt, PromptsLibrary

# Segmenting
from .segmenting import (
    EncodedDocument,
    Markers,
    encode,
    inject_context,
    parse_headings,
    rechunk,
    split_text,
)

__all__ = [
    # Enrichment
    "ImageAnalysis",
    "ImageAnalyzer",
    "ImageURLResolver",
    "LLMImageAnalyzer",
    "LLMSummarizer",
    "PrefixURLResolver",
    "Summarizer",
    "enrich_images",
    "summarize_sections",
    # LLMs
    "LLMClient",
    "LLMConfig",
    "create_llm_client",
    # Observability
    "LoggingMetricsHook",
    "MetricsHook",
    "NoOpMetricsHook",
    # Pipeline
    "SegmentOptions",
    "SegmentResult",
    "Segmenter",
    "aenrich_and_segment",
    "enrich_and_segment",
    # Prompts
    "Prompt",
    "PromptsLibrary",
    # Segmenting
    "EncodedDocument",
    "Markers",
    "encode",
    "inject_context",
    "parse_headings",
    "rechunk",
    "split_text",
]

# src/md_segmenter/observability/names.py

"""Standard metric names for md-segmenter observability.

Use these constants instead of hardcoded strings for consistency
across the codebase.

Note: All duration metrics are in milliseconds by convention.
Units are handled by the metrics backend (e.g., converted to seconds in Prometheus).
"""

# ============================================================================
# LLM Metrics
# ============================================================================

# Duration
LLM_COMPLETION_DURATION = "llm_completion_duration"

# Counters
LLM_REQUESTS_TOTAL = "llm_requests_total"

# Counters (token usage - monotonic over time for cost/rate tracking)
LLM_TOKENS_PROMPT = "llm_tokens_prompt"
LLM_TOKENS_COMPLETION = "llm_tokens_completion"
LLM_TOKENS_TOTAL = "llm_tokens_total"


# ============================================================================
# Image Enrichment Metrics
# ============================================================================

# Duration (whole fan-out, not per image)
IMAGE_ENRICHMENT_DURATION = "image_enrichment_duration"

# Counters
IMAGES_ENRICHED_TOTAL = "images_enriched_total"
IMAGES_FAILED_TOTAL = "images_failed_total"


# ============================================================================
# Section Summary Metrics
# ============================================================================

# Duration (whole fan-out, not per section)
SECTION_SUMMARY_DURATION = "section_summary_duration"

# Counters
SECTIONS_SUMMARIZED_TOTAL = "sections_summarized_total"
SECTIONS_SKIPPED_TOTAL = "sections_skipped_total"
SECTION_SUMMARY_ERRORS_TOTAL = "section_summary_errors_total"


# ============================================================================
# Segmenting Metrics
# ============================================================================

# Duration
SEGMENTING_DURATION = "segmenting_duration"

# Counters (segments accumulate over time)
SEGMENTING_PARENTS_CREATED = "segmenting_parents_created"
SEGMENTING_CHILDREN_CREATED = "segmenting_children_created"
SEGMENTING_CHILDREN_SPLIT = "segmenting_children_split"

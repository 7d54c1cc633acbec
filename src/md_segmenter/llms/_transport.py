# src/md_segmenter/llms/_transport.py

"""Retry policy and completion metrics shared by the provider clients."""

import logging

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from md_segmenter.observability import names
from md_segmenter.observability.base import MetricsHook

from .base import LLMResponse


def transport_retrying(
    max_retries: int,
    errors: type[BaseException] | tuple[type[BaseException], ...],
    log: logging.Logger,
) -> AsyncRetrying:
    """Exponential backoff on transport errors only. Re-raises when exhausted."""
    return AsyncRetrying(
        stop=stop_after_attempt(max(max_retries, 1)),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=10),
        retry=retry_if_exception_type(errors),
        before_sleep=before_sleep_log(log, logging.WARNING),
        reraise=True,
    )


def record_completion(
    hook: MetricsHook, provider: str, model: str, response: LLMResponse
) -> None:
    hook.record_latency(
        names.LLM_COMPLETION_DURATION,
        response.latency_ms,
        labels={"provider": provider, "model": model},
    )
    hook.increment(
        names.LLM_REQUESTS_TOTAL, labels={"provider": provider, "model": model}
    )
    hook.increment(names.LLM_TOKENS_PROMPT, response.usage.prompt_tokens)
    hook.increment(names.LLM_TOKENS_COMPLETION, response.usage.completion_tokens)
    hook.increment(names.LLM_TOKENS_TOTAL, response.usage.total_tokens)

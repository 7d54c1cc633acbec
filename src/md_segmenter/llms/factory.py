# src/md_segmenter/llms/factory.py

from typing import Any

from md_segmenter.observability.base import MetricsHook, NoOpMetricsHook

from .base import LLMClient
from .config import LLMConfig


def create_llm_client(
    config: LLMConfig,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> LLMClient:
    """Create an LLM client from config.

    The provider strategy is resolved here, once. Clients never sniff
    base URLs per request. Settings left unset in ``config`` fall back to
    the client's own defaults.

    Args:
        config: LLM configuration specifying provider, model, etc.
        metrics_hook: Optional metrics hook for observability.

    Returns:
        Configured LLMClient implementation.

    Raises:
        ValueError: If provider is unknown.

    Example:
        >>> config = LLMConfig(provider="ollama", model="qwen2.5vl:7b")
        >>> client = create_llm_client(config)
        >>> response = await client.complete(messages=[...])
    """
    common: dict[str, Any] = {
        "model": config.model,
        "max_retries": config.max_retries,
        "default_max_tokens": config.max_tokens,
        "metrics_hook": metrics_hook,
    }
    if config.timeout is not None:
        common["timeout"] = config.timeout

    if config.provider == "openai":
        from .openai import OpenAILLMClient

        return OpenAILLMClient(
            api_key=config.api_key, base_url=config.base_url, **common
        )

    if config.provider == "ollama":
        from .ollama import OllamaLLMClient

        return OllamaLLMClient(
            base_url=config.base_url or OllamaLLMClient.DEFAULT_BASE_URL, **common
        )

    if config.provider == "anthropic":
        from .anthropic import AnthropicLLMClient

        return AnthropicLLMClient(api_key=config.api_key, **common)

    raise ValueError(f"Unknown LLM provider: {config.provider}")

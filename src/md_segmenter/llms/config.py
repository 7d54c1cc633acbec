# src/md_segmenter/llms/config.py

from dataclasses import dataclass
from typing import Literal

Provider = Literal["openai", "ollama", "anthropic"]


@dataclass(frozen=True)
class LLMConfig:
    """Configuration for LLM clients.

    Immutable. Explicit. No magic defaults from environment.

    ``provider`` selects the transport strategy once, at client creation.
    ``openai`` covers any OpenAI-compatible endpoint (Qwen DashScope,
    ModelVerse, vLLM, ...) through ``base_url``.
    """

    provider: Provider
    model: str
    api_key: str | None = None  # Falls back to provider's env var
    base_url: str | None = None
    # None keeps the client default: 30s for hosted APIs, 600s for Ollama
    timeout: float | None = None
    max_retries: int = 3
    max_tokens: int | None = None

    def __post_init__(self) -> None:
        if not self.model:
            raise ValueError("model must be set")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")
        if self.max_retries < 1:
            raise ValueError("max_retries must be >= 1")

# src/md_segmenter/llms/base.py

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Protocol

from md_segmenter.observability.base import MetricsHook


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """One chat message, optionally carrying an image for a vision model."""

    role: Role
    content: str
    image_url: str | None = None  # http(s) or data: URL, USER messages only

    @property
    def has_image(self) -> bool:
        return bool(self.image_url)


@dataclass(frozen=True)
class Usage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass(frozen=True)
class LLMResponse:
    """Provider-neutral completion result.

    Adapters build this from the raw SDK object and drop the rest.
    """

    content: str | None
    finish_reason: Literal["stop", "length", "error"]
    usage: Usage
    latency_ms: float

    @property
    def text(self) -> str:
        """Reply text, stripped. Empty when the model returned nothing."""
        return (self.content or "").strip()


class LLMClient(Protocol):
    """Chat completion over one provider.

    Image descriptions and section summaries are both single-shot calls:
    the caller sends the full message list and gets one reply. Clients
    retry transport errors only; an unhelpful reply is returned as is.
    """

    metrics_hook: MetricsHook

    async def complete(
        self,
        *,
        messages: list[Message],
        temperature: float = 0.0,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Run one completion.

        Args:
            messages: Full conversation. A USER message may carry an
                ``image_url`` for vision-capable models.
            temperature: Sampling temperature (0.0 = deterministic).
            max_tokens: Reply token cap. ``None`` uses the client default.

        Returns:
            Normalized LLMResponse.

        Raises:
            The provider SDK's error once retries are exhausted.
        """
        ...

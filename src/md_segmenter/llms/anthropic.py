# src/md_segmenter/llms/anthropic.py

import logging
from time import monotonic
from typing import Any, Literal

from anthropic import NOT_GIVEN, APIError, AsyncAnthropic

from md_segmenter.observability.base import MetricsHook, NoOpMetricsHook

from ._transport import record_completion, transport_retrying
from .base import LLMClient, LLMResponse, Message, Role, Usage

logger = logging.getLogger(__name__)


class AnthropicLLMClient(LLMClient):
    """Anthropic LLM client.

    The system message travels in the top-level ``system`` field and an
    image is sent as a URL image block ahead of its text.
    """

    provider_name = "anthropic"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-sonnet-4-20250514",
        timeout: float = 30.0,
        max_retries: int = 3,
        default_max_tokens: int | None = None,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ):
        self._client = AsyncAnthropic(api_key=api_key, timeout=timeout)
        self._model = model
        self._max_retries = max_retries
        self._default_max_tokens = default_max_tokens
        self.metrics_hook = metrics_hook
        logger.info(
            "Initialized AnthropicLLMClient with model=%s, timeout=%s",
            model,
            timeout,
        )

    async def complete(
        self,
        *,
        messages: list[Message],
        temperature: float = 0.0,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        start = monotonic()

        # Extract system message (Anthropic handles it separately)
        system_content, non_system_messages = self._extract_system(messages)

        # Convert to provider format (internal only - never leaks)
        anthropic_messages = self._convert_messages(non_system_messages)

        logger.debug(
            "Calling Anthropic: model=%s, messages=%d",
            self._model,
            len(messages),
        )

        raw = await self._call_api(
            system=system_content,
            messages=anthropic_messages,
            temperature=temperature,
            # Anthropic requires max_tokens
            max_tokens=max_tokens or self._default_max_tokens or 4096,
        )

        elapsed_ms = 1000 * (monotonic() - start)

        # Normalize immediately - provider objects never escape
        response = self._normalize_response(raw, elapsed_ms)

        record_completion(self.metrics_hook, self.provider_name, self._model, response)
        logger.info(
            "Anthropic completion: finish=%s, tokens=%d, latency=%.0fms",
            response.finish_reason,
            response.usage.total_tokens,
            elapsed_ms,
        )

        return response

    async def _call_api(
        self,
        *,
        system: str | None,
        messages: list[dict[str, Any]],
        temperature: float,
        max_tokens: int,
    ) -> Any:
        """Call Anthropic API with transport-only retries."""
        async for attempt in transport_retrying(self._max_retries, APIError, logger):
            with attempt:
                return await self._client.messages.create(
                    model=self._model,
                    messages=messages,  # type: ignore[arg-type]
                    temperature=temperature,
                    max_tokens=max_tokens,
                    system=system if system else NOT_GIVEN,
                )

    def _extract_system(
        self, messages: list[Message]
    ) -> tuple[str | None, list[Message]]:
        """Extract system message from message list.

        Anthropic requires system message as a separate parameter.
        """
        system_content = None
        non_system = []

        for m in messages:
            if m.role == Role.SYSTEM:
                system_content = m.content
            else:
                non_system.append(m)

        return system_content, non_system

    def _convert_messages(self, messages: list[Message]) -> list[dict]:
        """Convert Message objects to Anthropic format.

        Images are sent as URL sources ahead of the text block.
        Internal only. Provider format never leaks outside.
        """
        result = []
        for m in messages:
            if m.has_image:
                result.append(
                    {
                        "role": m.role.value,
                        "content": [
                            {
                                "type": "image",
                                "source": {"type": "url", "url": m.image_url},
                            },
                            {"type": "text", "text": m.content},
                        ],
                    }
                )
            else:
                result.append({"role": m.role.value, "content": m.content})
        return result

    def _normalize_response(self, raw: Any, latency_ms: float) -> LLMResponse:
        """Normalize Anthropic response to LLMResponse.

        This is the boundary. Raw provider objects stop here.
        """
        text_parts = [block.text for block in raw.content if block.type == "text"]
        text_content = "".join(text_parts) if text_parts else None

        finish_reason: Literal["stop", "length", "error"]
        if raw.stop_reason in ("end_turn", "stop_sequence"):
            finish_reason = "stop"
        elif raw.stop_reason == "max_tokens":
            finish_reason = "length"
        else:
            finish_reason = "error"

        return LLMResponse(
            content=text_content,
            finish_reason=finish_reason,
            usage=Usage(
                prompt_tokens=raw.usage.input_tokens,
                completion_tokens=raw.usage.output_tokens,
                total_tokens=raw.usage.input_tokens + raw.usage.output_tokens,
            ),
            latency_ms=latency_ms,
        )

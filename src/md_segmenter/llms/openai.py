# src/md_segmenter/llms/openai.py

import logging
from time import monotonic
from typing import Any, Literal

from openai import NOT_GIVEN, AsyncOpenAI, OpenAIError

from md_segmenter.observability.base import MetricsHook, NoOpMetricsHook

from ._transport import record_completion, transport_retrying
from .base import LLMClient, LLMResponse, Message, Usage

logger = logging.getLogger(__name__)


class OpenAILLMClient(LLMClient):
    """OpenAI-compatible LLM client.

    Works against api.openai.com and any endpoint speaking the same
    chat-completions dialect (DashScope, ModelVerse, vLLM) via ``base_url``.
    Stateless. Transport-only retries. No behavior.
    """

    provider_name = "openai"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o",
        base_url: str | None = None,
        timeout: float = 30.0,
        max_retries: int = 3,
        default_max_tokens: int | None = None,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ):
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout)
        self._model = model
        self._max_retries = max_retries
        self._default_max_tokens = default_max_tokens
        self.metrics_hook = metrics_hook
        logger.info(
            "Initialized %s with model=%s, base_url=%s, timeout=%s",
            type(self).__name__,
            model,
            base_url,
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

        # Convert to provider format (internal only - never leaks)
        openai_messages = self._convert_messages(messages)

        logger.debug(
            "Calling %s: model=%s, messages=%d, images=%d",
            self.provider_name,
            self._model,
            len(messages),
            sum(1 for m in messages if m.has_image),
        )

        raw = await self._call_api(
            messages=openai_messages,
            temperature=temperature,
            max_tokens=max_tokens or self._default_max_tokens,
        )

        elapsed_ms = 1000 * (monotonic() - start)

        # Normalize immediately - provider objects never escape
        response = self._normalize_response(raw, elapsed_ms)

        record_completion(self.metrics_hook, self.provider_name, self._model, response)
        logger.info(
            "%s completion: finish=%s, tokens=%d, latency=%.0fms",
            self.provider_name,
            response.finish_reason,
            response.usage.total_tokens,
            elapsed_ms,
        )

        return response

    async def _call_api(
        self,
        *,
        messages: list[dict[str, Any]],
        temperature: float,
        max_tokens: int | None,
    ) -> Any:
        """Call the chat-completions API with transport-only retries."""
        async for attempt in transport_retrying(self._max_retries, OpenAIError, logger):
            with attempt:
                return await self._client.chat.completions.create(
                    model=self._model,
                    messages=messages,  # type: ignore[arg-type]
                    temperature=temperature,
                    max_tokens=max_tokens if max_tokens else NOT_GIVEN,  # type: ignore[arg-type]
                )

    def _convert_messages(self, messages: list[Message]) -> list[dict]:
        """Convert Message objects to OpenAI format.

        Messages with an image become multi-part content (text + image_url).
        Internal only. Provider format never leaks outside.
        """
        result = []
        for m in messages:
            if m.has_image:
                content: Any = [
                    {"type": "text", "text": m.content},
                    {"type": "image_url", "image_url": {"url": m.image_url}},
                ]
            else:
                content = m.content
            result.append({"role": m.role.value, "content": content})
        return result

    def _normalize_response(self, raw: Any, latency_ms: float) -> LLMResponse:
        """Normalize OpenAI response to LLMResponse.

        This is the boundary. Raw provider objects stop here.
        """
        choice = raw.choices[0]

        finish_reason: Literal["stop", "length", "error"]
        if choice.finish_reason == "stop":
            finish_reason = "stop"
        elif choice.finish_reason == "length":
            finish_reason = "length"
        else:
            finish_reason = "error"

        # Some OpenAI-compatible servers omit usage
        usage = Usage()
        if raw.usage is not None:
            usage = Usage(
                prompt_tokens=raw.usage.prompt_tokens,
                completion_tokens=raw.usage.completion_tokens,
                total_tokens=raw.usage.total_tokens,
            )

        return LLMResponse(
            content=choice.message.content,
            finish_reason=finish_reason,
            usage=usage,
            latency_ms=latency_ms,
        )

# src/md_segmenter/llms/ollama.py

import base64
import dataclasses
import logging

import httpx

from md_segmenter.observability.base import MetricsHook, NoOpMetricsHook

from ._transport import transport_retrying
from .base import LLMResponse, Message
from .openai import OpenAILLMClient

logger = logging.getLogger(__name__)


class OllamaLLMClient(OpenAILLMClient):
    """Ollama client over its OpenAI-compatible ``/v1`` endpoint.

    Ollama cannot fetch remote images, so image URLs are downloaded here
    and inlined as base64 data URLs before the request is sent.
    """

    provider_name = "ollama"
    DEFAULT_BASE_URL = "http://localhost:11434/v1"

    def __init__(
        self,
        model: str = "qwen2.5vl:7b",
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 600.0,
        max_retries: int = 3,
        default_max_tokens: int | None = None,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ):
        # Ollama ignores the key but the SDK insists on one
        super().__init__(
            api_key="ollama",
            model=model,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
            default_max_tokens=default_max_tokens,
            metrics_hook=metrics_hook,
        )
        self._timeout = timeout

    async def complete(
        self,
        *,
        messages: list[Message],
        temperature: float = 0.0,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        inlined = [await self._inline_image(m) for m in messages]
        return await super().complete(
            messages=inlined, temperature=temperature, max_tokens=max_tokens
        )

    async def _inline_image(self, message: Message) -> Message:
        if not message.image_url or message.image_url.startswith("data:"):
            return message
        data_url = await self._download_as_data_url(message.image_url)
        return dataclasses.replace(message, image_url=data_url)

    async def _download_as_data_url(self, url: str) -> str:
        """Fetch an image and encode it as a ``data:`` URL."""
        logger.debug("Downloading image for inline upload: %s", url)
        retrying = transport_retrying(self._max_retries, httpx.HTTPError, logger)
        async for attempt in retrying:
            with attempt:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.get(url)
                    response.raise_for_status()

        mime = response.headers.get("content-type", "image/png").split(";")[0]
        encoded = base64.b64encode(response.content).decode("ascii")
        logger.debug("Downloaded image %s (%d bytes)", url, len(response.content))
        return f"data:{mime};base64,{encoded}"

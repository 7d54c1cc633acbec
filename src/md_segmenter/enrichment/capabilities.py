# src/md_segmenter/enrichment/capabilities.py

"""External capabilities the enrichment passes depend on.

Each is a Protocol so callers can plug in any backend. The ``LLM*``
classes are the default implementations on top of ``md_segmenter.llms``.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from md_segmenter.llms.base import LLMClient, Message, Role
from md_segmenter.prompts import Prompt, PromptsLibrary

logger = logging.getLogger(__name__)

_DESCRIPTION_LABEL = "描述:"
_OCR_LABEL = "OCR:"


@dataclass(frozen=True)
class ImageAnalysis:
    description: str
    ocr_text: str


class ImageAnalyzer(Protocol):
    async def analyze(self, url: str, context: str) -> ImageAnalysis:
        """Describe the image at ``url`` and transcribe its text.

        Raises on failure. Callers treat any exception as a per-image failure.
        """
        ...


class Summarizer(Protocol):
    async def summarize(self, text: str) -> str: ...


class ImageURLResolver(Protocol):
    def resolve(self, image_key: str) -> str | None:
        """Durable public URL for a parse-time image name, or None if unknown."""
        ...


class LLMImageAnalyzer(ImageAnalyzer):
    """Vision-model analyzer.

    The prompt asks for ``描述: ...`` followed by ``OCR: ...``. A reply
    without an ``OCR:`` section is taken as description only.
    """

    def __init__(
        self,
        client: LLMClient,
        prompt: Prompt | None = None,
        max_tokens: int | None = 1000,
    ) -> None:
        self._client = client
        self._prompt = prompt or PromptsLibrary().get("image_analysis")
        self._max_tokens = max_tokens

    async def analyze(self, url: str, context: str) -> ImageAnalysis:
        prompt_text = self._prompt.render(context=context)
        logger.debug("Image analysis prompt for %s: %s", url, prompt_text)

        response = await self._client.complete(
            messages=[Message(role=Role.USER, content=prompt_text, image_url=url)],
            max_tokens=self._max_tokens,
        )
        if response.content is None:
            raise ValueError(f"Vision model returned no content for {url}")
        return parse_image_analysis(response.content)


def parse_image_analysis(content: str) -> ImageAnalysis:
    description, sep, ocr = content.partition(_OCR_LABEL)
    if not sep:
        return ImageAnalysis(description=content.strip(), ocr_text="")
    return ImageAnalysis(
        description=description.replace(_DESCRIPTION_LABEL, "").strip(),
        ocr_text=ocr.strip(),
    )


class LLMSummarizer(Summarizer):
    def __init__(
        self,
        client: LLMClient,
        prompt: Prompt | None = None,
        max_tokens: int | None = 500,
    ) -> None:
        self._client = client
        self._prompt = prompt or PromptsLibrary().get("section_summary")
        self._max_tokens = max_tokens

    async def summarize(self, text: str) -> str:
        if not text.strip():
            return ""
        response = await self._client.complete(
            messages=[
                Message(role=Role.SYSTEM, content=self._prompt.render()),
                Message(role=Role.USER, content=text),
            ],
            max_tokens=self._max_tokens,
        )
        return response.text


class PrefixURLResolver(ImageURLResolver):
    """Resolves image names through a name -> storage key mapping.

    The public URL is ``<prefix>/<storage key>``, the layout of an object
    store bucket served behind a fixed URL prefix.
    """

    def __init__(self, prefix: str, storage_keys: Mapping[str, str]) -> None:
        self._prefix = prefix.rstrip("/")
        self._storage_keys = dict(storage_keys)

    def resolve(self, image_key: str) -> str | None:
        storage_key = self._storage_keys.get(image_key)
        if storage_key is None:
            return None
        return f"{self._prefix}/{storage_key.lstrip('/')}"

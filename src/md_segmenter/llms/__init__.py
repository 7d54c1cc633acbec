# src/md_segmenter/llms/__init__.py

"""LLM client layer for md-segmenter.

Provides a thin, stateless abstraction over the vision and text models used
for image enrichment and section summaries.

Design principles:
- Stateless: Every call receives full message list
- Transport only: Retries only on network/rate-limit errors
- No behavior: No loops, no prompt fixing, no "smart" retries
- No leakage: Provider objects never escape the adapter

Example:
    >>> from md_segmenter.llms import create_llm_client, LLMConfig, Message, Role
    >>>
    >>> config = LLMConfig(provider="openai", model="gpt-4o")
    >>> client = create_llm_client(config)
    >>>
    >>> response = await client.complete(
    ...     messages=[
    ...         Message(
    ...             role=Role.USER,
    ...             content="Describe this figure.",
    ...             image_url="https://example.com/fig1.png",
    ...         )
    ...     ]
    ... )
    >>> print(response.content)
"""

from .base import LLMClient, LLMResponse, Message, Role, Usage
from .config import LLMConfig
from .factory import create_llm_client

__all__ = [
    # Factory
    "create_llm_client",
    # Protocol
    "LLMClient",
    # Config
    "LLMConfig",
    # Types
    "Message",
    "Role",
    "LLMResponse",
    "Usage",
]

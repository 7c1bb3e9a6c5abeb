"""Reasoning engine clients.

The analyzer only needs ``complete(prompt)`` returning a list of content
blocks (objects or dicts with ``type`` and ``text``). ``AnthropicEngine`` is
the production implementation; tests substitute any object with the same
coroutine.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

import anthropic

from bookmark_ai.errors import EngineCallError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-3-5-haiku-20241022"


@runtime_checkable
class ReasoningEngine(Protocol):
    """Protocol for single-prompt completion backends."""

    async def complete(self, prompt: str) -> Sequence[Any]:
        """Send one user prompt and return the response content blocks.

        Raises:
            EngineCallError: If the call fails for any reason.
        """
        ...


class AnthropicEngine:
    """Claude Messages API backend."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 1024,
        client: anthropic.AsyncAnthropic | None = None,
    ) -> None:
        self.model = model
        self.max_tokens = max_tokens
        self._client = client or anthropic.AsyncAnthropic(api_key=api_key)

    async def complete(self, prompt: str) -> Sequence[Any]:
        try:
            message = await self._client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            logger.error("Error calling Anthropic API: %s", e)
            raise EngineCallError(f"Failed to call Claude AI: {e}", cause=e) from e
        return message.content

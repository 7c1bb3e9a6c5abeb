"""Bookmark classification pipeline.

One ``analyze`` call runs, in order:

1. Fetch page content when the caller did not supply a title (best effort).
2. Truncate the content to the configured character limit.
3. Flatten the user's category tree into candidate paths.
4. Build the prompt and make one engine call (no retries).
5. Decode the JSON object from the first text block.
6. Fill in the "Other" sentinel for non-articles without a match, and
   optionally replace a match that was never offered as a candidate.

Nothing is persisted; every call is independent.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

from bookmark_ai.analysis.decoder import decode_analysis_response
from bookmark_ai.analysis.engine import AnthropicEngine, ReasoningEngine
from bookmark_ai.analysis.fetcher import PageFetcher
from bookmark_ai.analysis.models import OTHER_CATEGORY, BookmarkAnalysis
from bookmark_ai.analysis.prompts import build_analysis_prompt, truncate_content
from bookmark_ai.categories import CategoryTree, flatten_categories
from bookmark_ai.config import BookmarkAIConfig, get_config
from bookmark_ai.errors import (
    AnalysisSetupError,
    BookmarkAIError,
    ConfigurationError,
    EngineCallError,
    ErrorCode,
    MalformedResponseError,
)

logger = logging.getLogger(__name__)


class BookmarkAnalyzer:
    """Classifies bookmarks against a user's category tree."""

    def __init__(
        self,
        engine: ReasoningEngine,
        fetcher: PageFetcher | None = None,
        *,
        content_char_limit: int = 8000,
        strict_category_match: bool = True,
    ) -> None:
        self.engine = engine
        self.fetcher = fetcher or PageFetcher()
        self.content_char_limit = content_char_limit
        self.strict_category_match = strict_category_match

    async def analyze(
        self,
        url: str,
        category_tree: CategoryTree | dict[str, Any],
        title: str | None = None,
    ) -> BookmarkAnalysis:
        """Classify one bookmark.

        Args:
            url: Bookmark URL.
            category_tree: The user's tree (CategoryTree or raw stored shape).
            title: Page title if the caller already knows it; skips the fetch.

        Returns:
            The analysis. ``matched_category`` is never empty for non-articles.

        Raises:
            AnalysisSetupError: If the tree cannot be flattened.
            EngineCallError: If the engine call fails.
            MalformedResponseError: If the response has no decodable JSON object.
        """
        content = None
        if not title:
            content = await self.fetcher.fetch(url)
            if content:
                content = truncate_content(content, self.content_char_limit)

        try:
            candidates = flatten_categories(category_tree)
        except Exception as e:
            logger.error("Error extracting categories for %s: %s", url, e)
            raise AnalysisSetupError(
                f"Failed to extract categories: {e}", url=url, cause=e
            ) from e

        prompt = build_analysis_prompt(
            url,
            candidates,
            title=title,
            content=content,
            content_char_limit=self.content_char_limit,
        )

        try:
            blocks = await self.engine.complete(prompt)
        except BookmarkAIError:
            raise
        except Exception as e:
            logger.error("Reasoning engine call failed for %s: %s", url, e)
            raise EngineCallError(f"Failed to call reasoning engine: {e}", url=url, cause=e) from e

        try:
            payload = decode_analysis_response(blocks)
        except MalformedResponseError as e:
            e.details.setdefault("url", url)
            raise

        analysis = BookmarkAnalysis.from_payload(payload)
        if not analysis.title and title:
            analysis.title = title
        return self._resolve_match(analysis, candidates, url)

    def _resolve_match(
        self, analysis: BookmarkAnalysis, candidates: list[str], url: str
    ) -> BookmarkAnalysis:
        matched = analysis.matched_category
        if not analysis.is_article and not matched:
            analysis.matched_category = OTHER_CATEGORY
        elif (
            self.strict_category_match
            and matched
            and matched != OTHER_CATEGORY
            and matched not in candidates
        ):
            logger.warning(
                "Engine matched %s to unknown category %r, using %s",
                url,
                matched,
                OTHER_CATEGORY,
            )
            analysis.matched_category = OTHER_CATEGORY
        return analysis


# Module-level singleton with thread safety
_analyzer: BookmarkAnalyzer | None = None
_analyzer_lock = threading.Lock()


def create_analyzer(config: BookmarkAIConfig | None = None) -> BookmarkAnalyzer:
    """Build an analyzer backed by Anthropic from configuration.

    Raises:
        ConfigurationError: If ANTHROPIC_API_KEY is not set.
    """
    config = config or get_config()
    api_key = config.anthropic_api_key
    if not api_key:
        raise ConfigurationError(
            "ANTHROPIC_API_KEY is not set",
            config_key="ANTHROPIC_API_KEY",
            code=ErrorCode.CFG_MISSING,
        )
    engine = AnthropicEngine(
        api_key=api_key,
        model=config.analysis.model,
        max_tokens=config.analysis.max_tokens,
    )
    fetcher = PageFetcher(
        user_agent=config.analysis.user_agent,
        timeout=config.analysis.fetch_timeout_seconds,
    )
    return BookmarkAnalyzer(
        engine,
        fetcher,
        content_char_limit=config.analysis.content_char_limit,
        strict_category_match=config.analysis.strict_category_match,
    )


def get_analyzer() -> BookmarkAnalyzer:
    """Get the shared analyzer, creating it on first use."""
    global _analyzer
    if _analyzer is None:
        with _analyzer_lock:
            if _analyzer is None:
                _analyzer = create_analyzer()
    return _analyzer


def reset_analyzer() -> None:
    """Reset the shared analyzer (for tests and config reloads)."""
    global _analyzer
    with _analyzer_lock:
        _analyzer = None

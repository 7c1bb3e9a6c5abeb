"""Bookmark classification: prompt, engine call, response decoding."""

from bookmark_ai.analysis.analyzer import (
    BookmarkAnalyzer,
    create_analyzer,
    get_analyzer,
    reset_analyzer,
)
from bookmark_ai.analysis.decoder import (
    decode_analysis_payload,
    decode_analysis_response,
    extract_response_text,
)
from bookmark_ai.analysis.engine import AnthropicEngine, ReasoningEngine
from bookmark_ai.analysis.fetcher import PageFetcher
from bookmark_ai.analysis.models import OTHER_CATEGORY, BookmarkAnalysis
from bookmark_ai.analysis.prompts import (
    build_analysis_prompt,
    requires_category_match,
    truncate_content,
)

__all__ = [
    "AnthropicEngine",
    "BookmarkAnalysis",
    "BookmarkAnalyzer",
    "OTHER_CATEGORY",
    "PageFetcher",
    "ReasoningEngine",
    "build_analysis_prompt",
    "create_analyzer",
    "decode_analysis_payload",
    "decode_analysis_response",
    "extract_response_text",
    "get_analyzer",
    "requires_category_match",
    "reset_analyzer",
    "truncate_content",
]

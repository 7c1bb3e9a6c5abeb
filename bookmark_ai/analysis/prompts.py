"""Prompt construction for bookmark classification."""

from __future__ import annotations

from collections.abc import Sequence

from bookmark_ai.analysis.models import OTHER_CATEGORY

CONTENT_TRUNCATED_MARKER = "\n... [content truncated]"

# URLs containing any of these are assumed to be articles, so the
# category-matching block is left out of the prompt.
ARTICLE_URL_MARKERS = ("article", "blog", "post")

_TASK_HEADER = """Analyze this bookmark and provide:
1. Whether this is a web article/blog post (true) or something else like a tool, homepage, documentation, etc. (false)
2. What type of content this is (e.g., "article", "tool", "documentation", "homepage", "video", "repository", etc.)
3. The title of the page{title_hint}
4. A brief summary (1-2 sentences) of what the page is about
5. 2-3 relevant categories or tags

URL: {url}
{content_block}

"""

_EXTRACT_TITLE_HINT = (
    " - extract this from the HTML content "
    "(check meta tags like og:title, twitter:title, or the <title> tag)"
)

_CATEGORY_MATCH_BLOCK = """
Additionally, if this is NOT an article, you MUST match it to exactly ONE category - the single best match from this list:
{candidates}

IMPORTANT: Return ONLY ONE category path that best matches the URL content. If none of the categories are appropriate, return "{other}".
"""

_RESPONSE_FORMAT = """

Please respond in JSON format:
{{
  "isArticle": true or false,
  "contentType": "article" or "tool" or "documentation" etc.,
  "title": "Title here",
  "summary": "Summary here",
  "categories": ["category1", "category2", "category3"],
  "matchedCategory": "Single/Best/Category/Path" or "{other}" (REQUIRED if not an article - return only ONE category)
}}"""


def truncate_content(content: str, limit: int = 8000) -> str:
    """Cut page content to ``limit`` characters, marking the cut."""
    if len(content) <= limit:
        return content
    return content[:limit] + CONTENT_TRUNCATED_MARKER


def requires_category_match(url: str) -> bool:
    """Whether the prompt should ask the engine to pick a candidate category.

    Case-sensitive substring test: "https://x.com/Blog/1" still gets the block.
    """
    return not any(marker in url for marker in ARTICLE_URL_MARKERS)


def build_analysis_prompt(
    url: str,
    candidates: Sequence[str],
    title: str | None = None,
    content: str | None = None,
    content_char_limit: int = 8000,
) -> str:
    """Build the classification prompt for one bookmark.

    Args:
        url: Bookmark URL.
        candidates: Flattened category paths the engine may choose from.
        title: Caller-supplied page title, if any.
        content: Already-truncated page HTML, if it was fetched.
        content_char_limit: Limit quoted in the content heading.

    Returns:
        Prompt text ending with the expected JSON response format.
    """
    title_hint = f' (the provided title is: "{title}")' if title else _EXTRACT_TITLE_HINT
    content_block = (
        f"\nHTML Content (first {content_char_limit} chars):\n{content}" if content else ""
    )
    prompt = _TASK_HEADER.format(title_hint=title_hint, url=url, content_block=content_block)

    if requires_category_match(url):
        prompt += _CATEGORY_MATCH_BLOCK.format(
            candidates="\n".join(candidates), other=OTHER_CATEGORY
        )

    return prompt + _RESPONSE_FORMAT.format(other=OTHER_CATEGORY)

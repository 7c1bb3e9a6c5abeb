"""Unit tests for classification prompt construction and response decoding."""

import logging
from types import SimpleNamespace

import pytest

from bookmark_ai.analysis import (
    BookmarkAnalysis,
    build_analysis_prompt,
    decode_analysis_payload,
    decode_analysis_response,
    extract_response_text,
    requires_category_match,
    truncate_content,
)
from bookmark_ai.analysis.prompts import CONTENT_TRUNCATED_MARKER
from bookmark_ai.errors import AnalysisError, ErrorCode, MalformedResponseError

CANDIDATES = ["Work", "Work/Docs", "Archive"]


class TestTruncateContent:
    def test_short_content_unchanged(self):
        assert truncate_content("abc", limit=3) == "abc"

    def test_long_content_cut_and_marked(self):
        result = truncate_content("x" * 8001)
        assert result == "x" * 8000 + "\n... [content truncated]"

    def test_custom_limit(self):
        assert truncate_content("abcdef", limit=4) == "abcd" + CONTENT_TRUNCATED_MARKER


class TestRequiresCategoryMatch:
    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/article/1",
            "https://blog.example.com/",
            "https://example.com/posts/hello",
            "https://example.com/?ref=article",
        ],
    )
    def test_article_like_urls_skip_matching(self, url):
        assert requires_category_match(url) is False

    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/psf/requests",
            "https://docs.python.org/3/",
            "https://example.com/Blog/1",
            "https://example.com/ARTICLE",
        ],
    )
    def test_other_urls_need_matching(self, url):
        """The check is a case-sensitive substring test."""
        assert requires_category_match(url) is True


class TestBuildAnalysisPrompt:
    """Tests for build_analysis_prompt."""

    def test_contains_url_and_candidates(self):
        prompt = build_analysis_prompt("https://github.com/psf/requests", CANDIDATES)

        assert "URL: https://github.com/psf/requests" in prompt
        assert "Work\nWork/Docs\nArchive" in prompt
        assert "you MUST match it to exactly ONE category" in prompt
        assert 'If none of the categories are appropriate, return "Other".' in prompt

    def test_article_url_omits_category_block(self):
        prompt = build_analysis_prompt("https://example.com/blog/intro", CANDIDATES)

        assert "you MUST match it" not in prompt
        assert "Work/Docs" not in prompt
        # The response format still mentions the sentinel.
        assert '"matchedCategory"' in prompt

    def test_provided_title_hint(self):
        prompt = build_analysis_prompt("https://x.io", CANDIDATES, title="Hello World")

        assert '3. The title of the page (the provided title is: "Hello World")' in prompt
        assert "og:title" not in prompt

    def test_extract_title_hint_without_title(self):
        prompt = build_analysis_prompt("https://x.io", CANDIDATES)
        assert "extract this from the HTML content" in prompt
        assert "og:title, twitter:title, or the <title> tag" in prompt

    def test_content_block(self):
        prompt = build_analysis_prompt("https://x.io", CANDIDATES, content="<html>hi</html>")
        assert "URL: https://x.io\n\nHTML Content (first 8000 chars):\n<html>hi</html>" in prompt

    def test_content_limit_quoted(self):
        prompt = build_analysis_prompt(
            "https://x.io", CANDIDATES, content="<p>", content_char_limit=1000
        )
        assert "HTML Content (first 1000 chars):" in prompt

    def test_no_content_block_without_content(self):
        prompt = build_analysis_prompt("https://x.io", CANDIDATES)
        assert "HTML Content" not in prompt

    def test_ends_with_json_format(self):
        prompt = build_analysis_prompt("https://x.io", CANDIDATES)

        assert "Please respond in JSON format:" in prompt
        assert prompt.rstrip().endswith("}")
        assert '"Single/Best/Category/Path" or "Other"' in prompt


class TestExtractResponseText:
    def test_first_text_block_from_dicts(self):
        blocks = [{"type": "tool_use", "id": "t1"}, {"type": "text", "text": "hello"}]
        assert extract_response_text(blocks) == "hello"

    def test_sdk_like_objects(self):
        blocks = [
            SimpleNamespace(type="text", text="first"),
            SimpleNamespace(type="text", text="second"),
        ]
        assert extract_response_text(blocks) == "first"

    @pytest.mark.parametrize("blocks", [[], [{"type": "image"}], [{"type": "text", "text": None}]])
    def test_no_text_block(self, blocks):
        with pytest.raises(MalformedResponseError) as exc_info:
            extract_response_text(blocks)
        assert exc_info.value.reason == "no_text"


class TestDecodeAnalysisPayload:
    """Tests for decode_analysis_payload."""

    def test_plain_json(self):
        assert decode_analysis_payload('{"isArticle": true}') == {"isArticle": True}

    def test_json_inside_prose(self):
        text = (
            "Sure! Here is the analysis:\n```json\n"
            '{"isArticle": false, "title": "X"}\n```\nThanks.'
        )
        assert decode_analysis_payload(text) == {"isArticle": False, "title": "X"}

    def test_nested_objects_use_greedy_span(self):
        text = 'prefix {"a": {"b": 1}} suffix'
        assert decode_analysis_payload(text) == {"a": {"b": 1}}

    def test_no_json(self):
        with pytest.raises(MalformedResponseError) as exc_info:
            decode_analysis_payload("I cannot help with that.")

        error = exc_info.value
        assert error.reason == "no_json"
        assert error.code == ErrorCode.CLS_MALFORMED_RESPONSE
        assert error.response_text == "I cannot help with that."
        assert "I cannot help" not in str(error.to_dict())

    def test_invalid_json(self):
        with pytest.raises(MalformedResponseError) as exc_info:
            decode_analysis_payload("{not json}")
        assert exc_info.value.reason == "invalid_json"
        assert exc_info.value.cause is not None

    def test_two_objects_are_invalid(self):
        """The greedy span covers both objects, which is not valid JSON."""
        with pytest.raises(MalformedResponseError) as exc_info:
            decode_analysis_payload('{"a": 1} and {"b": 2}')
        assert exc_info.value.reason == "invalid_json"

    def test_long_response_is_logged_truncated(self, caplog):
        with caplog.at_level(logging.ERROR, logger="bookmark_ai.analysis.decoder"):
            with pytest.raises(MalformedResponseError):
                decode_analysis_payload("x" * 500)

        assert "x" * 200 in caplog.text
        assert "x" * 201 not in caplog.text

    def test_is_analysis_error(self):
        with pytest.raises(AnalysisError):
            decode_analysis_payload("")


class TestDecodeAnalysisResponse:
    def test_end_to_end(self):
        blocks = [{"type": "text", "text": 'Result: {"isArticle": true, "title": "T"}'}]
        assert decode_analysis_response(blocks) == {"isArticle": True, "title": "T"}


class TestBookmarkAnalysis:
    """Tests for BookmarkAnalysis.from_payload / to_dict."""

    def test_from_payload(self):
        analysis = BookmarkAnalysis.from_payload(
            {
                "isArticle": False,
                "contentType": "repository",
                "title": "psf/requests",
                "summary": "HTTP for humans.",
                "categories": ["python", "http"],
                "matchedCategory": "Work/Docs",
            }
        )
        assert analysis == BookmarkAnalysis(
            is_article=False,
            content_type="repository",
            title="psf/requests",
            summary="HTTP for humans.",
            categories=["python", "http"],
            matched_category="Work/Docs",
        )

    def test_missing_fields_default(self):
        analysis = BookmarkAnalysis.from_payload({})

        assert analysis.is_article is False
        assert analysis.content_type == "unknown"
        assert analysis.title == ""
        assert analysis.summary == ""
        assert analysis.categories == []
        assert analysis.matched_category is None

    def test_loose_types_are_coerced(self):
        analysis = BookmarkAnalysis.from_payload(
            {"isArticle": "true", "categories": "single", "matchedCategory": ""}
        )
        assert analysis.is_article is True
        assert analysis.categories == ["single"]
        assert analysis.matched_category is None

    def test_to_dict_uses_camel_case(self):
        analysis = BookmarkAnalysis(
            is_article=True, content_type="article", title="T", summary="S", categories=["a"]
        )
        assert analysis.to_dict() == {
            "isArticle": True,
            "contentType": "article",
            "title": "T",
            "summary": "S",
            "categories": ["a"],
            "matchedCategory": "",
        }

"""Decode reasoning engine responses into analysis payloads."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable
from typing import Any

from bookmark_ai.errors import MalformedResponseError

logger = logging.getLogger(__name__)

# Greedy: first "{" through last "}", so prose around the object is ignored.
_JSON_SPAN_RE = re.compile(r"\{[\s\S]*\}")


def _block_field(block: Any, name: str) -> Any:
    if isinstance(block, dict):
        return block.get(name)
    return getattr(block, name, None)


def extract_response_text(content: Iterable[Any]) -> str:
    """Return the text of the first ``text`` block.

    Blocks may be SDK objects or plain dicts with ``type`` and ``text``.

    Raises:
        MalformedResponseError: If no text block is present.
    """
    for block in content:
        if _block_field(block, "type") == "text":
            text = _block_field(block, "text")
            if isinstance(text, str):
                return text
    logger.error("No text content in engine response")
    raise MalformedResponseError("No text content in engine response", reason="no_text")


def decode_analysis_payload(text: str) -> dict[str, Any]:
    """Find the JSON object in ``text`` and parse it.

    Raises:
        MalformedResponseError: If no ``{...}`` span exists, it is not valid
            JSON, or it does not decode to an object.
    """
    match = _JSON_SPAN_RE.search(text)
    if match is None:
        logger.error("Could not find JSON in engine response: %.200s", text)
        raise MalformedResponseError(
            "Could not find JSON in engine response", reason="no_json", response_text=text
        )

    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        logger.error("Error parsing JSON from engine response: %s: %.200s", e, match.group(0))
        raise MalformedResponseError(
            f"Failed to parse engine response: {e}",
            reason="invalid_json",
            response_text=match.group(0),
            cause=e,
        ) from e

    if not isinstance(payload, dict):
        logger.error("Engine response JSON is not an object: %.200s", match.group(0))
        raise MalformedResponseError(
            "Engine response JSON is not an object",
            reason="not_an_object",
            response_text=match.group(0),
        )
    return payload


def decode_analysis_response(content: Iterable[Any]) -> dict[str, Any]:
    """Turn engine content blocks into the decoded analysis payload."""
    return decode_analysis_payload(extract_response_text(content))

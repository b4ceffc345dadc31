"""
Best-effort extraction of follow-up questions from model output.

The model is asked for a JSON array of strings but nothing enforces it, so
parsing runs two strategies in order and never raises:

1. decode the text as a JSON array and keep its string items;
2. otherwise collect every single- or double-quoted substring.
"""
from __future__ import annotations

import json
import re

import structlog

logger = structlog.get_logger(__name__)

_QUOTED = re.compile(r"[\"'](.+?)[\"']")
_CODE_FENCE = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")


def _decode_json_list(raw_text: str) -> list[str] | None:
    """Strategy one. Returns None when the text is not a JSON array."""
    text = _CODE_FENCE.sub("", raw_text.strip())
    if not text:
        return None
    try:
        decoded = json.loads(text)
    except (ValueError, RecursionError):
        # Deeply nested arrays exhaust the decoder's recursion limit.
        return None
    if not isinstance(decoded, list):
        return None
    return [item for item in decoded if isinstance(item, str)]


def _extract_quoted(raw_text: str) -> list[str]:
    """Strategy two: contents of quoted substrings, in order of appearance."""
    return _QUOTED.findall(raw_text)


def parse_suggestions(raw_text: str | None) -> list[str]:
    if not raw_text:
        return []

    suggestions = _decode_json_list(raw_text)
    if suggestions is not None:
        logger.info("suggestions_parsed", strategy="json", count=len(suggestions))
        return suggestions

    suggestions = _extract_quoted(raw_text)
    logger.info("suggestions_parsed", strategy="quoted", count=len(suggestions))
    return suggestions

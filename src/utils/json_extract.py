"""Recover JSON payloads from free-form LLM replies.

Models asked for "JSON only" still wrap answers in markdown fences or add
a sentence before the object.  Each helper tries, in order:

1. the text as-is (after stripping a ```json fence if present),
2. the substring from the first opening bracket to the last closing one.

Anything that still fails to parse raises ``ValueError``; callers wrap it
in their own domain error.
"""

from __future__ import annotations

import json
import re
from typing import Any

_JSON_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?\s*```", re.DOTALL)


def _unfence(text: str) -> str:
    text = (text or "").strip()
    fence_match = _JSON_FENCE_RE.search(text)
    if fence_match:
        return fence_match.group(1).strip()
    return text


def _loads_with_recovery(text: str, opener: str, closer: str) -> Any:
    text = _unfence(text)
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    start = text.find(opener)
    end = text.rfind(closer)
    if start == -1 or end <= start:
        raise ValueError(f"no {opener}...{closer} block in response")
    try:
        return json.loads(text[start : end + 1])
    except json.JSONDecodeError as exc:
        raise ValueError(f"unparseable JSON block: {exc}") from exc


def extract_json_object(text: str) -> dict[str, Any]:
    """Parse a JSON object out of *text*.

    Raises
    ------
    ValueError
        If no JSON object can be recovered.
    """
    parsed = _loads_with_recovery(text, "{", "}")
    if not isinstance(parsed, dict):
        raise ValueError(f"expected a JSON object, got {type(parsed).__name__}")
    return parsed


def extract_json_array(text: str) -> list[Any]:
    """Parse a JSON array out of *text*.

    Raises
    ------
    ValueError
        If no JSON array can be recovered.
    """
    parsed = _loads_with_recovery(text, "[", "]")
    if not isinstance(parsed, list):
        raise ValueError(f"expected a JSON array, got {type(parsed).__name__}")
    return parsed

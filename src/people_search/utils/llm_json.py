"""Helpers for pulling JSON out of model replies."""

import json
import re
from typing import Any

_JSON_BLOCK = re.compile(r"(\{.*\}|\[.*\])", re.DOTALL)


def _strip_code_fences(text: str) -> str:
    """Remove surrounding ```...``` fences (with or without a language tag)."""
    t = text.strip()
    if t.startswith("```") and t.endswith("```"):
        t = re.sub(r"^```[A-Za-z0-9_-]*\s*", "", t, flags=re.DOTALL)
        t = re.sub(r"\s*```$", "", t, flags=re.DOTALL)
    return t.strip()


def extract_json(text: str) -> Any:
    """
    Parse the first JSON object or array found in a model reply.

    Code fences and leading/trailing prose are tolerated.

    Raises:
        ValueError: If no JSON value can be parsed
    """
    if not text or not text.strip():
        raise ValueError("Empty model response")

    cleaned = _strip_code_fences(text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass

    match = _JSON_BLOCK.search(cleaned)
    if not match:
        raise ValueError("No JSON value found in model response")
    try:
        return json.loads(match.group(1))
    except json.JSONDecodeError as e:
        raise ValueError(f"Malformed JSON in model response: {e}")


def require_object(text: str) -> dict:
    """Like extract_json, but the value must be a JSON object."""
    data = extract_json(text)
    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object")
    return data

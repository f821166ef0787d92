from __future__ import annotations

import json
import re
from typing import Any

_OPENERS = {"{": "}", "[": "]"}


class JSONParseError(ValueError):
    pass


def _strip_fences(text: str) -> str:
    # ```json ... ``` or bare ``` ... ```
    fenced = re.search(r"```(?:json)?\s*(.*?)\s*```", text, flags=re.DOTALL | re.IGNORECASE)
    return fenced.group(1) if fenced else text


def _extract_json_block(text: str) -> str:
    """
    First balanced top-level {...} or [...] in a text response.
    Braces inside string literals are ignored.
    """
    starts = [i for i in (text.find("{"), text.find("[")) if i != -1]
    if not starts:
        raise JSONParseError("No JSON object or array found in response")

    start = min(starts)
    stack = []
    in_str = False
    escaped = False
    for i in range(start, len(text)):
        c = text[i]
        if in_str:
            if escaped:
                escaped = False
            elif c == "\\":
                escaped = True
            elif c == '"':
                in_str = False
            continue
        if c == '"':
            in_str = True
        elif c in _OPENERS:
            stack.append(_OPENERS[c])
        elif stack and c == stack[-1]:
            stack.pop()
            if not stack:
                return text[start : i + 1]

    raise JSONParseError("Unbalanced JSON brackets in response")


def _sanitize_json(text: str) -> str:
    """
    Fix common model JSON mistakes so json.loads can parse it.
    """
    t = text.strip()

    # raw control chars (except \n \r \t) break json.loads
    t = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f]", "", t)

    # Python None / True / False -> JSON
    t = re.sub(r"\bNone\b", "null", t)
    t = re.sub(r"\bTrue\b", "true", t)
    t = re.sub(r"\bFalse\b", "false", t)

    # .7 -> 0.7
    t = re.sub(r":\s*\.(\d+)", r": 0.\1", t)

    # trailing commas before } or ]
    t = re.sub(r",\s*([}\]])", r"\1", t)

    return t


def parse_json_strict(text: str) -> Any:
    """
    Parse JSON from a research response body.
    Accepts:
      - pure JSON
      - JSON inside code fences
      - JSON embedded in text

    Also repairs common model JSON errors.
    """
    if not text or not text.strip():
        raise JSONParseError("Empty response body")

    try:
        return json.loads(text)
    except ValueError:
        pass

    try:
        block = _extract_json_block(_strip_fences(text))
        return json.loads(_sanitize_json(block), strict=False)
    except ValueError as e:
        raise JSONParseError(f"Failed to parse JSON: {e}\n--- Raw ---\n{text[:800]}") from e

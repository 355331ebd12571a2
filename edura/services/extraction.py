"""Recovery of a JSON payload from free-form completion text."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from .errors import ExtractionError

LOGGER = logging.getLogger(__name__)

_FENCE_PATTERN = re.compile(r"```[ \t]*(?:[a-z0-9_+-]+[ \t]*(?=\r?\n|$))?[ \t]*\r?\n?", re.IGNORECASE)

_DELIMITERS = {
    "object": ("{", "}"),
    "array": ("[", "]"),
}


def strip_fences(text: str) -> str:
    """Remove every fenced-block delimiter, tagged or not."""

    return _FENCE_PATTERN.sub("", text or "").strip()


def extract_json(raw_text: Optional[str], expected: Optional[str] = None) -> Any:
    """Return the structured payload embedded in ``raw_text``.

    ``expected`` is ``"object"``, ``"array"`` or ``None``; it only decides
    which delimiters bound the candidate substring when the cleaned text is
    not JSON on its own. The parsed value is returned whatever its type.
    """

    text = strip_fences(raw_text or "")
    if not text:
        raise ExtractionError("no structured payload found")

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    candidate = _isolate(text, expected)
    if candidate is not None:
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            pass

    LOGGER.warning("Unable to recover JSON from completion output: %s", _snippet(text))
    raise ExtractionError("no structured payload found")


def _isolate(text: str, expected: Optional[str]) -> Optional[str]:
    if expected in _DELIMITERS:
        opener, closer = _DELIMITERS[expected]
    else:
        brace_index = text.find("{")
        bracket_index = text.find("[")
        candidates = [index for index in (brace_index, bracket_index) if index != -1]
        if not candidates:
            return None
        opener = text[min(candidates)]
        closer = "}" if opener == "{" else "]"

    start = text.find(opener)
    end = text.rfind(closer)
    if start == -1 or end <= start:
        return None
    return text[start:end + 1]


def _snippet(text: str, limit: int = 500) -> str:
    text = text.replace("\n", " ")
    return (text[:limit] + "…") if len(text) > limit else text

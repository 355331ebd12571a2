"""Prompt → completion → extraction → normalization for a single request."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from .completion import CompletionClient
from .course_outline import normalize_course_outline
from .errors import ValidationError
from .extraction import extract_json
from .normalization import (
    normalize_detailed_roadmap,
    normalize_flashcards,
    normalize_quiz,
    normalize_roadmap,
)
from .prompts import build_prompt
from .requests import GenerationKind, GenerationRequest

LOGGER = logging.getLogger(__name__)

TEXT_KINDS = frozenset({GenerationKind.CHAT, GenerationKind.SUMMARY})

NORMALIZERS: Dict[GenerationKind, Callable[[Any, Optional[Mapping[str, Any]]], Any]] = {
    GenerationKind.FLASHCARDS: normalize_flashcards,
    GenerationKind.QUIZ: normalize_quiz,
    GenerationKind.ROADMAP: normalize_roadmap,
    GenerationKind.DETAILED_ROADMAP: normalize_detailed_roadmap,
    GenerationKind.COURSE: normalize_course_outline,
}

EXPECTED_SHAPES: Dict[GenerationKind, str] = {
    GenerationKind.FLASHCARDS: "array",
    GenerationKind.QUIZ: "array",
    GenerationKind.ROADMAP: "array",
    GenerationKind.DETAILED_ROADMAP: "object",
    GenerationKind.COURSE: "object",
}


def normalize_text_reply(text: str) -> str:
    cleaned = (text or "").strip()
    if not cleaned:
        raise ValidationError("The completion service returned an empty response.")
    return cleaned


def run_generation(client: CompletionClient, request: GenerationRequest) -> Any:
    """Run ``request`` through every stage and return its normalized result.

    Chat and summary replies are plain text; every other kind comes back as
    the dataclass (or list of dataclasses) its normalizer produces. Stage
    errors propagate unchanged.
    """

    kind = GenerationKind(request.kind)
    prompt = build_prompt(kind, request.parameters)
    raw_text = client.complete(prompt)

    if kind in TEXT_KINDS:
        return normalize_text_reply(raw_text)

    payload = extract_json(raw_text, EXPECTED_SHAPES[kind])
    result = NORMALIZERS[kind](payload, request.parameters)
    LOGGER.debug("Normalized %s payload from %d characters of completion text.", kind.value, len(raw_text))
    return result

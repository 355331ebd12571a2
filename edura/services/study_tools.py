"""Public study-content operations.

The lightweight kinds (chat, summary, flashcards, quiz, roadmap) return their
normalized result directly. Detailed roadmaps and course outlines are
persisted and run under a :class:`~edura.models.GenerationJob` so every attempt
leaves an audit row.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..models import Course, GenerationJob, Roadmap
from .completion import CompletionClient
from .errors import InvalidRequestError
from .jobs import run_generation_job
from .normalization import Flashcard, QuizQuestion, RoadmapMilestone
from .persistence import save_course, save_roadmap
from .pipeline import run_generation
from .requests import (
    DURATION_UNITS,
    SKILL_LEVELS,
    CourseGenerationInput,
    GenerationKind,
    GenerationRequest,
    RoadmapQuestionnaire,
)

CHAT_ROLES = ("user", "assistant")


def _require_text(value: Optional[str], label: str) -> str:
    cleaned = (value or "").strip() if isinstance(value, str) else ""
    if not cleaned:
        raise InvalidRequestError(f"{label} is required.")
    return cleaned


def _require_count(count: Optional[int]) -> int:
    if count is None:
        return 10
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise InvalidRequestError("Count must be a positive whole number.")
    return count


def chat_reply(client: CompletionClient, messages: Sequence[Mapping[str, Any]]) -> str:
    client.ensure_configured()
    transcript: List[Dict[str, str]] = []
    for message in messages or []:
        role = message.get("role") if isinstance(message, Mapping) else None
        if role not in CHAT_ROLES:
            raise InvalidRequestError("Each chat message needs a role of 'user' or 'assistant'.")
        transcript.append({"role": role, "content": _require_text(message.get("content"), "Message content")})
    if not transcript:
        raise InvalidRequestError("At least one chat message is required.")
    return run_generation(client, GenerationRequest(GenerationKind.CHAT, {"messages": transcript}))


def generate_summary(client: CompletionClient, content: str) -> str:
    client.ensure_configured()
    parameters = {"content": _require_text(content, "Content")}
    return run_generation(client, GenerationRequest(GenerationKind.SUMMARY, parameters))


def generate_flashcards(client: CompletionClient, content: str, count: Optional[int] = None) -> List[Flashcard]:
    client.ensure_configured()
    parameters = {"content": _require_text(content, "Content"), "count": _require_count(count)}
    return run_generation(client, GenerationRequest(GenerationKind.FLASHCARDS, parameters))


def generate_quiz(client: CompletionClient, content: str, count: Optional[int] = None) -> List[QuizQuestion]:
    client.ensure_configured()
    parameters = {"content": _require_text(content, "Content"), "count": _require_count(count)}
    return run_generation(client, GenerationRequest(GenerationKind.QUIZ, parameters))


def generate_roadmap(client: CompletionClient, goal: str) -> List[RoadmapMilestone]:
    client.ensure_configured()
    parameters = {"goal": _require_text(goal, "Goal")}
    return run_generation(client, GenerationRequest(GenerationKind.ROADMAP, parameters))


def validate_questionnaire(questionnaire: RoadmapQuestionnaire) -> Dict[str, Any]:
    parameters = questionnaire.to_parameters()
    parameters["topic"] = _require_text(questionnaire.topic, "Topic")
    if questionnaire.skill_level not in SKILL_LEVELS:
        raise InvalidRequestError(f"Skill level must be one of: {', '.join(SKILL_LEVELS)}.")
    if questionnaire.duration_unit not in DURATION_UNITS:
        raise InvalidRequestError(f"Duration unit must be one of: {', '.join(DURATION_UNITS)}.")
    if isinstance(questionnaire.duration, bool) or not isinstance(questionnaire.duration, int) or questionnaire.duration < 1:
        raise InvalidRequestError("Duration must be at least 1.")
    for field_name in ("hours_per_day", "hours_per_week"):
        value = parameters.get(field_name)
        if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0):
            raise InvalidRequestError("Study hours must be a positive number.")
    return parameters


def validate_course_input(course_input: CourseGenerationInput) -> Dict[str, Any]:
    parameters = course_input.to_parameters()
    parameters["topic"] = _require_text(course_input.topic, "Topic")
    parameters["goal"] = _require_text(course_input.goal, "Goal")
    parameters["audience"] = _require_text(course_input.audience, "Audience")
    parameters["focus_area"] = _require_text(course_input.focus_area, "Focus area")
    if course_input.level not in SKILL_LEVELS:
        raise InvalidRequestError(f"Level must be one of: {', '.join(SKILL_LEVELS)}.")
    weeks = course_input.duration_weeks
    if isinstance(weeks, bool) or not isinstance(weeks, int) or weeks < 1:
        raise InvalidRequestError("Duration must be at least 1 week.")
    return parameters


def generate_detailed_roadmap(
    client: CompletionClient,
    owner_id: int,
    questionnaire: RoadmapQuestionnaire,
) -> Tuple[GenerationJob, Roadmap]:
    client.ensure_configured()
    parameters = validate_questionnaire(questionnaire)

    def work(job: GenerationJob) -> Tuple[Roadmap, Dict[str, Any]]:
        roadmap = run_generation(client, GenerationRequest(GenerationKind.DETAILED_ROADMAP, parameters))
        record = save_roadmap(owner_id, roadmap, parameters)
        return record, {"roadmap_id": record.id}

    return run_generation_job(owner_id, GenerationKind.DETAILED_ROADMAP, parameters, work)


def generate_course_outline(
    client: CompletionClient,
    owner_id: int,
    course_input: CourseGenerationInput,
) -> Tuple[GenerationJob, Course]:
    client.ensure_configured()
    parameters = validate_course_input(course_input)

    def work(job: GenerationJob) -> Tuple[Course, Dict[str, Any]]:
        outline = run_generation(client, GenerationRequest(GenerationKind.COURSE, parameters))
        course = save_course(owner_id, outline, parameters)
        return course, {"course_id": course.id}

    return run_generation_job(owner_id, GenerationKind.COURSE, parameters, work)

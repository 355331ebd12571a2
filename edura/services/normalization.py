"""Normalization of parsed completion payloads into canonical study content."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .errors import ValidationError
from .prompts import commitment_text, stage_plan

LOGGER = logging.getLogger(__name__)

DIFFICULTIES = ("easy", "medium", "hard")
DEFAULT_DIFFICULTY = "medium"
MILESTONE_FALLBACK_HOURS = 10
STAGE_FALLBACK_HOURS = 5

_DIFFICULTY_SYNONYMS = {
    "beginner": "easy",
    "basic": "easy",
    "simple": "easy",
    "intermediate": "medium",
    "moderate": "medium",
    "advanced": "hard",
    "difficult": "hard",
    "challenging": "hard",
}

STAGE_RESOURCE_TYPES = ("video", "documentation", "practice", "article")
_STAGE_RESOURCE_ALIASES = {
    "doc": "documentation",
    "docs": "documentation",
    "youtube": "video",
    "exercise": "practice",
    "blog": "article",
}


# ---------------------------------------------------------------------------
# Result types


@dataclass
class Flashcard:
    question: str
    answer: str

    def to_dict(self) -> Dict[str, Any]:
        return {"question": self.question, "answer": self.answer}


@dataclass
class QuizQuestion:
    question: str
    options: List[str]
    correct_answer: int
    explanation: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "question": self.question,
            "options": list(self.options),
            "correctAnswer": self.correct_answer,
            "explanation": self.explanation,
        }


@dataclass
class RoadmapMilestone:
    id: str
    title: str
    description: str
    difficulty: str
    estimated_hours: float
    completed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "difficulty": self.difficulty,
            "estimatedHours": self.estimated_hours,
            "completed": self.completed,
        }


@dataclass
class StageResource:
    type: str
    title: str
    url: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type, "title": self.title}
        if self.url:
            data["url"] = self.url
        if self.description:
            data["description"] = self.description
        return data


@dataclass
class RoadmapStage:
    id: str
    stage: str
    title: str
    description: str
    difficulty: str
    estimated_hours: float
    topics: List[str] = field(default_factory=list)
    exercises: List[str] = field(default_factory=list)
    projects: List[str] = field(default_factory=list)
    resources: List[StageResource] = field(default_factory=list)
    completed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "stage": self.stage,
            "title": self.title,
            "description": self.description,
            "topics": list(self.topics),
            "exercises": list(self.exercises),
            "projects": list(self.projects),
            "resources": [resource.to_dict() for resource in self.resources],
            "difficulty": self.difficulty,
            "estimatedHours": self.estimated_hours,
            "completed": self.completed,
        }


@dataclass
class FinalProject:
    title: str
    description: str
    requirements: List[str]
    complexity: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "requirements": list(self.requirements),
            "complexity": self.complexity,
        }


@dataclass
class ResourceItem:
    title: str
    description: str = ""
    url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"title": self.title}
        if self.url:
            data["url"] = self.url
        data["description"] = self.description
        return data


@dataclass
class ResourceCategory:
    category: str
    items: List[ResourceItem]

    def to_dict(self) -> Dict[str, Any]:
        return {"category": self.category, "items": [item.to_dict() for item in self.items]}


@dataclass
class DetailedRoadmap:
    title: str
    user_summary: Dict[str, str]
    stages: List[RoadmapStage]
    final_project: FinalProject
    resource_list: List[ResourceCategory] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "userSummary": dict(self.user_summary),
            "stages": [stage.to_dict() for stage in self.stages],
            "finalProject": self.final_project.to_dict(),
            "resourceList": [category.to_dict() for category in self.resource_list],
        }


# ---------------------------------------------------------------------------
# Shared coercion helpers


def clean_text(value: object) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        value = str(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            return None
        value = str(int(value)) if value.is_integer() else str(value)
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    return cleaned or None


def clean_list(value: object) -> List[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    cleaned: List[str] = []
    for entry in value:
        text = clean_text(entry)
        if text:
            cleaned.append(text)
    return cleaned


def as_list(value: object) -> List[Any]:
    return value if isinstance(value, list) else []


def first_present(entry: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = entry.get(key)
        if value is not None:
            return value
    return None


def coerce_difficulty(value: object) -> str:
    text = clean_text(value)
    if not text:
        return DEFAULT_DIFFICULTY
    lowered = text.lower()
    if lowered in DIFFICULTIES:
        return lowered
    return _DIFFICULTY_SYNONYMS.get(lowered, DEFAULT_DIFFICULTY)


def positive_number(value: object, fallback: float) -> float:
    if isinstance(value, bool):
        return fallback
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return fallback
    if isinstance(value, (int, float)) and value > 0 and math.isfinite(value):
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value
    return fallback


def coerce_index(value: object) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def coerce_identifier(value: object, position: int) -> str:
    if isinstance(value, bool):
        return str(position)
    if isinstance(value, int):
        return str(value)
    return clean_text(value) or str(position)


def entries_from(payload: Any, *keys: str) -> List[Any]:
    """Return the list of raw entries in ``payload``.

    Models sometimes wrap the array in an object (``{"flashcards": [...]}``);
    the first list found under ``keys`` is used in that case.
    """

    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in keys:
            candidate = payload.get(key)
            if isinstance(candidate, list):
                return candidate
    raise ValidationError(f"Expected a list of {keys[0] if keys else 'entries'} in the completion payload.")


def _require_items(items: Sequence[Any], label: str) -> None:
    if not items:
        raise ValidationError(f"The completion produced no usable {label}.")


# ---------------------------------------------------------------------------
# Per-kind routines


def normalize_flashcard(entry: object) -> Optional[Flashcard]:
    if not isinstance(entry, dict):
        return None
    question = clean_text(first_present(entry, "question", "front", "term"))
    answer = clean_text(first_present(entry, "answer", "back", "definition"))
    if not question or not answer:
        return None
    return Flashcard(question=question, answer=answer)


def normalize_flashcard_items(entries: object) -> List[Flashcard]:
    return [card for card in map(normalize_flashcard, as_list(entries)) if card is not None]


def normalize_flashcards(payload: Any, parameters: Optional[Mapping[str, Any]] = None) -> List[Flashcard]:
    cards = normalize_flashcard_items(entries_from(payload, "flashcards", "cards"))
    _require_items(cards, "flashcards")
    return cards


def normalize_quiz_question(entry: object) -> Optional[QuizQuestion]:
    """Return a valid question or ``None`` when ``entry`` must be dropped."""

    if not isinstance(entry, dict):
        return None
    question = clean_text(entry.get("question"))
    raw_options = entry.get("options")
    if not question or not isinstance(raw_options, list):
        return None

    options = [clean_text(option) for option in raw_options]
    if len(options) < 2 or not all(options):
        return None

    index = coerce_index(first_present(entry, "correctAnswer", "correct_answer"))
    if index is None or not 0 <= index < len(options):
        return None

    return QuizQuestion(
        question=question,
        options=[option for option in options if option],
        correct_answer=index,
        explanation=clean_text(entry.get("explanation")) or "",
    )


def normalize_quiz_items(entries: object) -> List[QuizQuestion]:
    questions: List[QuizQuestion] = []
    for entry in as_list(entries):
        normalized = normalize_quiz_question(entry)
        if normalized is None:
            LOGGER.debug("Dropping malformed quiz item: %s", entry)
            continue
        questions.append(normalized)
    return questions


def normalize_quiz(payload: Any, parameters: Optional[Mapping[str, Any]] = None) -> List[QuizQuestion]:
    questions = normalize_quiz_items(entries_from(payload, "questions", "quiz"))
    _require_items(questions, "quiz questions")
    return questions


def normalize_roadmap(payload: Any, parameters: Optional[Mapping[str, Any]] = None) -> List[RoadmapMilestone]:
    milestones: List[RoadmapMilestone] = []
    for entry in entries_from(payload, "milestones", "roadmap"):
        if not isinstance(entry, dict):
            continue
        title = clean_text(entry.get("title"))
        if not title:
            continue
        position = len(milestones) + 1
        milestones.append(
            RoadmapMilestone(
                id=coerce_identifier(entry.get("id"), position),
                title=title,
                description=clean_text(entry.get("description")) or "",
                difficulty=coerce_difficulty(entry.get("difficulty")),
                estimated_hours=positive_number(
                    first_present(entry, "estimatedHours", "estimated_hours"), MILESTONE_FALLBACK_HOURS
                ),
            )
        )
    _require_items(milestones, "roadmap milestones")
    return milestones


def _stage_resource_type(value: object) -> str:
    text = (clean_text(value) or "").lower()
    if text in STAGE_RESOURCE_TYPES:
        return text
    return _STAGE_RESOURCE_ALIASES.get(text, "article")


def _normalize_stage_resources(value: object) -> List[StageResource]:
    resources: List[StageResource] = []
    if not isinstance(value, list):
        return resources
    for entry in value:
        if not isinstance(entry, dict):
            continue
        title = clean_text(entry.get("title"))
        if not title:
            continue
        resources.append(
            StageResource(
                type=_stage_resource_type(entry.get("type")),
                title=title,
                url=clean_text(entry.get("url")),
                description=clean_text(entry.get("description")),
            )
        )
    return resources


def _normalize_stages(entries: Iterable[Any], stage_type: str) -> List[RoadmapStage]:
    stages: List[RoadmapStage] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        title = clean_text(entry.get("title"))
        if not title:
            continue
        position = len(stages) + 1
        stages.append(
            RoadmapStage(
                id=coerce_identifier(entry.get("id"), position),
                stage=clean_text(entry.get("stage")) or f"{stage_type} {position}",
                title=title,
                description=clean_text(entry.get("description")) or "",
                topics=clean_list(entry.get("topics")),
                exercises=clean_list(entry.get("exercises")),
                projects=clean_list(entry.get("projects")),
                resources=_normalize_stage_resources(entry.get("resources")),
                difficulty=coerce_difficulty(entry.get("difficulty")),
                estimated_hours=positive_number(
                    first_present(entry, "estimatedHours", "estimated_hours"), STAGE_FALLBACK_HOURS
                ),
            )
        )
    return stages


def _normalize_resource_list(value: object) -> List[ResourceCategory]:
    categories: List[ResourceCategory] = []
    if not isinstance(value, list):
        return categories
    for entry in value:
        if not isinstance(entry, dict):
            continue
        items: List[ResourceItem] = []
        for item in as_list(entry.get("items")):
            if not isinstance(item, dict):
                continue
            title = clean_text(item.get("title"))
            if not title:
                continue
            items.append(
                ResourceItem(
                    title=title,
                    description=clean_text(item.get("description")) or "",
                    url=clean_text(item.get("url")),
                )
            )
        if items:
            categories.append(ResourceCategory(category=clean_text(entry.get("category")) or "Resources", items=items))
    return categories


def normalize_detailed_roadmap(payload: Any, parameters: Optional[Mapping[str, Any]] = None) -> DetailedRoadmap:
    parameters = parameters or {}
    if isinstance(payload, list):
        payload = {"stages": payload}
    if not isinstance(payload, dict):
        raise ValidationError("Expected a roadmap object in the completion payload.")
    if isinstance(payload.get("roadmap"), dict):
        payload = payload["roadmap"]

    topic = clean_text(parameters.get("topic")) or "your topic"
    stage_type, _, _ = stage_plan(parameters)

    stages = _normalize_stages(as_list(payload.get("stages")), stage_type)
    _require_items(stages, "roadmap stages")

    raw_summary = payload.get("userSummary")
    if not isinstance(raw_summary, dict):
        raw_summary = {}
    timeline = f"{parameters.get('duration')} {parameters.get('duration_unit')}" if parameters.get("duration") else ""
    user_summary = {
        "skill": clean_text(raw_summary.get("skill")) or topic,
        "level": clean_text(raw_summary.get("level")) or parameters.get("skill_level") or "beginner",
        "timeline": clean_text(raw_summary.get("timeline")) or timeline,
        "commitment": clean_text(raw_summary.get("commitment")) or commitment_text(parameters),
    }

    raw_project = payload.get("finalProject")
    if not isinstance(raw_project, dict):
        raw_project = {}
    final_project = FinalProject(
        title=clean_text(raw_project.get("title")) or f"Capstone Project: {topic}",
        description=clean_text(raw_project.get("description")) or "",
        requirements=clean_list(raw_project.get("requirements")),
        complexity=coerce_difficulty(raw_project.get("complexity")),
    )

    return DetailedRoadmap(
        title=clean_text(payload.get("title")) or f"Learning Roadmap: {topic}",
        user_summary=user_summary,
        stages=stages,
        final_project=final_project,
        resource_list=_normalize_resource_list(payload.get("resourceList")),
    )


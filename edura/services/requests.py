"""Request types accepted by the generation pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class GenerationKind(str, Enum):
    CHAT = "chat"
    SUMMARY = "summary"
    FLASHCARDS = "flashcards"
    QUIZ = "quiz"
    ROADMAP = "roadmap"
    DETAILED_ROADMAP = "detailed_roadmap"
    COURSE = "course"


SKILL_LEVELS = ("beginner", "intermediate", "advanced")
DURATION_UNITS = ("days", "weeks", "months")


@dataclass
class GenerationRequest:
    kind: GenerationKind
    parameters: Dict[str, Any]
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class RoadmapQuestionnaire:
    topic: str
    skill_level: str = "beginner"
    duration: int = 4
    duration_unit: str = "weeks"
    hours_per_day: Optional[float] = None
    hours_per_week: Optional[float] = None

    def to_parameters(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CourseGenerationInput:
    """Everything the course builder asks the learner for.

    ``include_ide`` is tri-state: ``None`` lets the topic classifier decide,
    ``True`` always attaches IDE guidance and ``False`` opts out.
    """

    topic: str
    goal: str
    audience: str = "Motivated learners eager to level up"
    level: str = "beginner"
    duration_weeks: int = 4
    preferred_language: str = "English"
    focus_area: str = "Hands-on, project-based learning"
    include_projects: bool = True
    include_ide: Optional[bool] = None
    category: Optional[str] = None

    def to_parameters(self) -> Dict[str, Any]:
        return asdict(self)

"""Course outline normalization and per-module coverage guarantees."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import quote_plus

from .errors import ValidationError
from .normalization import (
    FinalProject,
    Flashcard,
    QuizQuestion,
    as_list,
    clean_list,
    clean_text,
    coerce_difficulty,
    coerce_index,
    first_present,
    normalize_flashcard_items,
    normalize_quiz_items,
    positive_number,
)
from .topic_classifier import is_technical_topic

COURSE_LEVELS = ("beginner", "intermediate", "advanced")
COURSE_RESOURCE_TYPES = ("video", "article", "doc", "practice", "link")
DEFAULT_MODULE_MINUTES = 60
DEFAULT_IDE_TASK_MINUTES = 30

VIDEO_SEARCH_URL = "https://www.youtube.com/results?search_query="
ARTICLE_SEARCH_URL = "https://www.google.com/search?q="

_LEVEL_ALIASES = {
    "easy": "beginner",
    "basic": "beginner",
    "novice": "beginner",
    "medium": "intermediate",
    "moderate": "intermediate",
    "hard": "advanced",
    "expert": "advanced",
}

_RESOURCE_ALIASES = {
    "documentation": "doc",
    "docs": "doc",
    "youtube": "video",
    "blog": "article",
    "tutorial": "article",
    "exercise": "practice",
}

# (keywords, language, editor); first match wins.
_IDE_PROFILES: Tuple[Tuple[Tuple[str, ...], str, str], ...] = (
    (("typescript",), "TypeScript", "Visual Studio Code"),
    (("javascript", "react", "node", "vue", "angular", "frontend", "web"), "JavaScript", "Visual Studio Code"),
    (("python", "django", "flask", "data science", "machine learning"), "Python", "Visual Studio Code"),
    (("kotlin", "android"), "Kotlin", "Android Studio"),
    (("swift", "ios"), "Swift", "Xcode"),
    (("java",), "Java", "IntelliJ IDEA"),
    (("c#", ".net"), "C#", "Visual Studio"),
    (("c++",), "C++", "Visual Studio Code"),
    (("rust",), "Rust", "Visual Studio Code"),
    (("golang",), "Go", "Visual Studio Code"),
    (("sql", "database"), "SQL", "DBeaver"),
    (("html", "css"), "HTML/CSS", "Visual Studio Code"),
)


@dataclass
class CourseResource:
    type: str
    title: str
    url: str
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "title": self.title, "url": self.url, "description": self.description}


@dataclass
class PracticeTask:
    title: str
    description: str
    difficulty: str

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "description": self.description, "difficulty": self.difficulty}


@dataclass
class IdeSetup:
    editor: str
    language: str
    steps: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"editor": self.editor, "language": self.language, "steps": list(self.steps)}


@dataclass
class IdeTestCase:
    input: str
    expected_output: str

    def to_dict(self) -> Dict[str, Any]:
        return {"input": self.input, "expectedOutput": self.expected_output}


@dataclass
class IdeTask:
    """A coding exercise meant to be solved in the in-browser editor."""

    problem_statement: str
    starter_code: str = ""
    expected_output: str = ""
    test_cases: List[IdeTestCase] = field(default_factory=list)
    difficulty: str = "medium"
    hints: List[str] = field(default_factory=list)
    time_estimate: float = DEFAULT_IDE_TASK_MINUTES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "problemStatement": self.problem_statement,
            "starterCode": self.starter_code,
            "expectedOutput": self.expected_output,
            "testCases": [case.to_dict() for case in self.test_cases],
            "difficulty": self.difficulty,
            "hints": list(self.hints),
            "timeEstimate": self.time_estimate,
        }


@dataclass
class WeeklyReview:
    week: int
    topics: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"week": self.week, "topics": list(self.topics)}


@dataclass
class CourseModuleOutline:
    module_number: int
    title: str
    summary: str
    key_concepts: List[str] = field(default_factory=list)
    topics: List[str] = field(default_factory=list)
    examples: List[str] = field(default_factory=list)
    flashcards: List[Flashcard] = field(default_factory=list)
    practice_tasks: List[PracticeTask] = field(default_factory=list)
    quiz: List[QuizQuestion] = field(default_factory=list)
    resources: List[CourseResource] = field(default_factory=list)
    estimated_minutes: float = DEFAULT_MODULE_MINUTES
    ide_setup: Optional[IdeSetup] = None
    ide_tasks: List[IdeTask] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "moduleNumber": self.module_number,
            "title": self.title,
            "summary": self.summary,
            "keyConcepts": list(self.key_concepts),
            "topics": list(self.topics),
            "examples": list(self.examples),
            "flashcards": [card.to_dict() for card in self.flashcards],
            "practiceTasks": [task.to_dict() for task in self.practice_tasks],
            "quiz": [question.to_dict() for question in self.quiz],
            "resources": [resource.to_dict() for resource in self.resources],
            "estimatedMinutes": self.estimated_minutes,
            "ideTasks": [task.to_dict() for task in self.ide_tasks],
        }
        if self.ide_setup is not None:
            data["ideSetup"] = self.ide_setup.to_dict()
        return data


@dataclass
class CourseOutline:
    title: str
    description: str
    level: str
    language: str
    modules: List[CourseModuleOutline]
    tags: List[str] = field(default_factory=list)
    outcomes: List[str] = field(default_factory=list)
    projects: List[FinalProject] = field(default_factory=list)
    final_test: List[QuizQuestion] = field(default_factory=list)
    revision_plan: List[WeeklyReview] = field(default_factory=list)
    progress_curve: str = ""
    motivational_tips: List[str] = field(default_factory=list)

    @property
    def total_minutes(self) -> float:
        return sum(module.estimated_minutes for module in self.modules)

    def extras(self) -> Dict[str, Any]:
        """Course-level material stored alongside the course row."""

        return {
            "outcomes": list(self.outcomes),
            "projects": [project.to_dict() for project in self.projects],
            "finalTest": {"questions": [question.to_dict() for question in self.final_test]},
            "revisionPlan": {"weeklyReviews": [review.to_dict() for review in self.revision_plan]},
            "progressCurve": self.progress_curve,
            "motivationalTips": list(self.motivational_tips),
        }

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "title": self.title,
            "description": self.description,
            "level": self.level,
            "language": self.language,
            "tags": list(self.tags),
        }
        data.update(self.extras())
        data["modules"] = [module.to_dict() for module in self.modules]
        return data


def coerce_level(value: object, default: str = "beginner") -> str:
    text = (clean_text(value) or "").lower()
    if text in COURSE_LEVELS:
        return text
    return _LEVEL_ALIASES.get(text, default if default in COURSE_LEVELS else "beginner")


def _resource_type(value: object) -> str:
    text = (clean_text(value) or "").lower()
    if text in COURSE_RESOURCE_TYPES:
        return text
    return _RESOURCE_ALIASES.get(text, "link")


def _normalize_resources(value: object) -> List[CourseResource]:
    resources: List[CourseResource] = []
    if not isinstance(value, list):
        return resources
    for entry in value:
        if not isinstance(entry, dict):
            continue
        title = clean_text(entry.get("title"))
        if not title:
            continue
        resources.append(
            CourseResource(
                type=_resource_type(entry.get("type")),
                title=title,
                url=clean_text(entry.get("url")) or ARTICLE_SEARCH_URL + quote_plus(title),
                description=clean_text(entry.get("description")) or "",
            )
        )
    return resources


def _normalize_practice_tasks(value: object) -> List[PracticeTask]:
    tasks: List[PracticeTask] = []
    if not isinstance(value, list):
        return tasks
    for entry in value:
        if isinstance(entry, str):
            entry = {"title": entry}
        if not isinstance(entry, dict):
            continue
        title = clean_text(entry.get("title"))
        if not title:
            continue
        tasks.append(
            PracticeTask(
                title=title,
                description=clean_text(entry.get("description")) or "",
                difficulty=coerce_difficulty(entry.get("difficulty")),
            )
        )
    return tasks


def _quiz_entries(entry: Mapping[str, Any]) -> List[Any]:
    raw = first_present(entry, "quiz", "checkpointQuiz", "checkpoint_quiz", "quizQuestions")
    if isinstance(raw, dict):
        raw = raw.get("questions")
    return raw if isinstance(raw, list) else []


def _normalize_ide_setup(value: object, fallback: IdeSetup) -> IdeSetup:
    if not isinstance(value, dict):
        return fallback
    return IdeSetup(
        editor=clean_text(value.get("editor")) or fallback.editor,
        language=clean_text(value.get("language")) or fallback.language,
        steps=clean_list(value.get("steps")) or fallback.steps,
    )


def _normalize_projects(value: object) -> List[FinalProject]:
    projects: List[FinalProject] = []
    if not isinstance(value, list):
        return projects
    for entry in value:
        if not isinstance(entry, dict):
            continue
        title = clean_text(entry.get("title"))
        if not title:
            continue
        projects.append(
            FinalProject(
                title=title,
                description=clean_text(entry.get("description")) or "",
                requirements=clean_list(entry.get("requirements")),
                complexity=coerce_difficulty(first_present(entry, "complexity", "difficulty")),
            )
        )
    return projects


def _code_text(value: object) -> str:
    if not isinstance(value, str):
        return clean_text(value) or ""
    return value.strip("\r\n").rstrip()


def _normalize_test_cases(value: object) -> List[IdeTestCase]:
    cases: List[IdeTestCase] = []
    for entry in as_list(value):
        if not isinstance(entry, dict):
            continue
        expected = _code_text(first_present(entry, "expectedOutput", "expected_output", "output"))
        if not expected:
            continue
        cases.append(IdeTestCase(input=_code_text(entry.get("input")), expected_output=expected))
    return cases


def _normalize_ide_tasks(value: object) -> List[IdeTask]:
    tasks: List[IdeTask] = []
    for entry in as_list(value):
        if not isinstance(entry, dict):
            continue
        statement = clean_text(first_present(entry, "problemStatement", "problem_statement", "title"))
        if not statement:
            continue
        tasks.append(
            IdeTask(
                problem_statement=statement,
                starter_code=_code_text(first_present(entry, "starterCode", "starter_code")),
                expected_output=_code_text(first_present(entry, "expectedOutput", "expected_output")),
                test_cases=_normalize_test_cases(first_present(entry, "testCases", "test_cases")),
                difficulty=coerce_difficulty(entry.get("difficulty")),
                hints=clean_list(entry.get("hints")),
                time_estimate=positive_number(
                    first_present(entry, "timeEstimate", "time_estimate"), DEFAULT_IDE_TASK_MINUTES
                ),
            )
        )
    return tasks


def _final_test_entries(payload: Mapping[str, Any]) -> List[Any]:
    raw = first_present(payload, "finalTest", "final_test")
    if isinstance(raw, dict):
        raw = raw.get("questions")
    return as_list(raw)


def _normalize_revision_plan(value: object) -> List[WeeklyReview]:
    if isinstance(value, dict):
        value = first_present(value, "weeklyReviews", "weekly_reviews")
    reviews: List[WeeklyReview] = []
    for entry in as_list(value):
        if not isinstance(entry, dict):
            continue
        topics = clean_list(entry.get("topics"))
        if not topics:
            continue
        week = coerce_index(entry.get("week"))
        reviews.append(WeeklyReview(week=week if week and week > 0 else len(reviews) + 1, topics=topics))
    return reviews


def _mentions(haystack: str, keyword: str) -> bool:
    return re.search(rf"(?<![a-z0-9]){re.escape(keyword)}(?![a-z0-9])", haystack) is not None


def default_ide_setup(*texts: Optional[str]) -> IdeSetup:
    """Return starter IDE guidance for the language the texts appear to be about."""

    haystack = " ".join(text for text in texts if text).lower()
    language, editor = "your chosen language", "Visual Studio Code"
    for keywords, candidate_language, candidate_editor in _IDE_PROFILES:
        if any(_mentions(haystack, keyword) for keyword in keywords):
            language, editor = candidate_language, candidate_editor
            break
    return IdeSetup(
        editor=editor,
        language=language,
        steps=[
            f"Install {editor}.",
            f"Install the {language} toolchain and the matching {editor} extensions.",
            "Create a project folder for this module and open it in the editor.",
            "Run one of the module examples to confirm the setup works.",
        ],
    )


def placeholder_question(module_title: str) -> QuizQuestion:
    return QuizQuestion(
        question=f'Which statement best describes the focus of "{module_title}"?',
        options=[
            f"It covers the core ideas of {module_title}.",
            "It is unrelated to this course.",
            "It is only relevant to experts.",
            "It repeats the previous module.",
        ],
        correct_answer=0,
        explanation=f"This module is about {module_title}.",
    )


def ensure_module_coverage(
    module: CourseModuleOutline,
    *,
    attach_ide: bool,
    strip_ide: bool,
    topic: Optional[str] = None,
) -> CourseModuleOutline:
    """Guarantee a video, an article/doc and a quiz question on ``module``."""

    if not any(resource.type == "video" for resource in module.resources):
        module.resources.append(
            CourseResource(
                type="video",
                title=f"{module.title} video lessons",
                url=VIDEO_SEARCH_URL + quote_plus(f"{module.title} tutorial"),
                description=f"Video walkthroughs covering {module.title}.",
            )
        )
    if not any(resource.type in ("article", "doc") for resource in module.resources):
        module.resources.append(
            CourseResource(
                type="article",
                title=f"{module.title} reading",
                url=ARTICLE_SEARCH_URL + quote_plus(f"{module.title} guide"),
                description=f"Written guides and articles about {module.title}.",
            )
        )
    if not module.quiz:
        module.quiz.append(placeholder_question(module.title))

    if strip_ide:
        module.ide_setup = None
        module.ide_tasks = []
    elif attach_ide and module.ide_setup is None:
        module.ide_setup = default_ide_setup(topic, module.title)
    return module


def _normalize_module(entry: Mapping[str, Any], position: int, topic: Optional[str]) -> Optional[CourseModuleOutline]:
    title = clean_text(entry.get("title"))
    if not title:
        return None

    key_concepts = clean_list(first_present(entry, "keyConcepts", "key_concepts", "concepts"))
    topics = clean_list(entry.get("topics"))
    summary = (
        clean_text(entry.get("summary"))
        or clean_text(entry.get("description"))
        or f"An introduction to {title}."
    )

    module = CourseModuleOutline(
        module_number=position,
        title=title,
        summary=summary,
        key_concepts=key_concepts or list(topics),
        topics=topics or list(key_concepts),
        examples=clean_list(entry.get("examples")),
        flashcards=normalize_flashcard_items(entry.get("flashcards")),
        practice_tasks=_normalize_practice_tasks(first_present(entry, "practiceTasks", "practice_tasks", "exercises")),
        quiz=normalize_quiz_items(_quiz_entries(entry)),
        resources=_normalize_resources(entry.get("resources")),
        estimated_minutes=positive_number(
            first_present(entry, "estimatedMinutes", "estimated_minutes", "durationMinutes"), DEFAULT_MODULE_MINUTES
        ),
        ide_tasks=_normalize_ide_tasks(first_present(entry, "ideTasks", "ide_tasks")),
    )
    raw_ide = first_present(entry, "ideSetup", "ide_setup")
    if isinstance(raw_ide, dict):
        module.ide_setup = _normalize_ide_setup(raw_ide, default_ide_setup(topic, title))
    return module


def normalize_course_outline(payload: Any, parameters: Optional[Mapping[str, Any]] = None) -> CourseOutline:
    parameters = parameters or {}
    if isinstance(payload, list):
        payload = {"modules": payload}
    if not isinstance(payload, dict):
        raise ValidationError("Expected a course object in the completion payload.")
    if isinstance(payload.get("course"), dict):
        payload = payload["course"]

    topic = clean_text(parameters.get("topic"))
    category = clean_text(parameters.get("category"))
    include_ide = parameters.get("include_ide")

    modules: List[CourseModuleOutline] = []
    for entry in as_list(payload.get("modules")):
        if not isinstance(entry, dict):
            continue
        module = _normalize_module(entry, len(modules) + 1, topic)
        if module is not None:
            modules.append(module)
    if not modules:
        raise ValidationError("The completion produced no usable course modules.")

    title = clean_text(payload.get("title")) or (f"{topic}: Complete Course" if topic else "Untitled Course")
    for module in modules:
        technical = include_ide is None and is_technical_topic(topic, category, title, module.title)
        ensure_module_coverage(
            module,
            attach_ide=include_ide is True or technical,
            strip_ide=include_ide is False,
            topic=topic,
        )

    return CourseOutline(
        title=title,
        description=clean_text(payload.get("description")) or clean_text(parameters.get("goal")) or "",
        level=coerce_level(payload.get("level"), parameters.get("level") or "beginner"),
        language=clean_text(payload.get("language")) or parameters.get("preferred_language") or "English",
        tags=clean_list(payload.get("tags")),
        outcomes=clean_list(first_present(payload, "outcomes", "learningOutcomes", "learning_outcomes")),
        projects=_normalize_projects(payload.get("projects")),
        final_test=normalize_quiz_items(_final_test_entries(payload)),
        revision_plan=_normalize_revision_plan(first_present(payload, "revisionPlan", "revision_plan")),
        progress_curve=clean_text(first_present(payload, "progressCurve", "progress_curve")) or "",
        motivational_tips=clean_list(first_present(payload, "motivationalTips", "motivational_tips")),
        modules=modules,
    )

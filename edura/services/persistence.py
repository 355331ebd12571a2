"""Relational writes for generated content and backend error classification."""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from flask import current_app
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from ..extensions import db
from ..models import Course, CourseModule, Roadmap
from .course_outline import CourseOutline
from .errors import PersistenceError
from .normalization import DetailedRoadmap


class PersistenceIssue(str, Enum):
    SCHEMA_MISSING = "schema_missing"
    LEGACY_OWNER_COLUMN = "legacy_owner_column"
    OWNER_MISSING = "owner_missing"
    UNKNOWN = "unknown"


UNDEFINED_TABLE = "42P01"
NOT_NULL_VIOLATION = "23502"

ISSUE_MESSAGES = {
    PersistenceIssue.SCHEMA_MISSING: (
        "Database tables not found. Please run the database migrations (`flask db upgrade`) "
        "before generating content."
    ),
    PersistenceIssue.LEGACY_OWNER_COLUMN: (
        "Database migration incomplete. The courses table still has user_id constraint. "
        "Please run the courses table migration."
    ),
    PersistenceIssue.OWNER_MISSING: (
        "owner_id is required but was not provided. This should not happen - please report this error."
    ),
}


def classify_backend_error(code: Optional[str], message: Optional[str]) -> PersistenceIssue:
    """Map a backend error code and message onto a known persistence issue.

    PostgreSQL reports SQLSTATE codes; SQLite only has the message text, so
    both are consulted.
    """

    text = (message or "").lower()

    if code == UNDEFINED_TABLE or "does not exist" in text or "no such table" in text:
        return PersistenceIssue.SCHEMA_MISSING

    not_null = code == NOT_NULL_VIOLATION or "not null constraint" in text or "not-null constraint" in text
    if not_null:
        if "user_id" in text:
            return PersistenceIssue.LEGACY_OWNER_COLUMN
        if "owner_id" in text:
            return PersistenceIssue.OWNER_MISSING

    return PersistenceIssue.UNKNOWN


def user_message_for(issue: PersistenceIssue, backend_message: str) -> str:
    return ISSUE_MESSAGES.get(issue) or f"Database write failed: {backend_message}"


def persistence_error_from(exc: SQLAlchemyError) -> PersistenceError:
    orig = exc.orig if isinstance(exc, DBAPIError) else None
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    backend_message = str(orig) if orig is not None else str(exc)
    issue = classify_backend_error(code, backend_message)
    return PersistenceError(user_message_for(issue, backend_message), issue=issue.value, code=code)


def write_rows(rows: Iterable[Any]) -> None:
    db.session.add_all(list(rows))
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        error = persistence_error_from(exc)
        current_app.logger.warning("Database write rejected (%s): %s", error.issue, exc)
        raise error from exc


def save_course(owner_id: Optional[int], outline: CourseOutline, parameters: Mapping[str, Any]) -> Course:
    """Write the course row, then its modules.

    The two writes are separate commits: when the module write fails the
    course row stays behind without modules and the error propagates.
    """

    course = Course(
        owner_id=owner_id,
        title=outline.title,
        description=outline.description,
        primary_language=outline.language,
        level=outline.level,
        category=parameters.get("category"),
        tags=list(outline.tags),
        duration_weeks=parameters.get("duration_weeks"),
        total_modules=len(outline.modules),
        estimated_hours=math.ceil(outline.total_minutes / 60) if outline.total_minutes else None,
        is_ai_generated=True,
        published=False,
        meta={
            "goal": parameters.get("goal"),
            "audience": parameters.get("audience"),
            "focusArea": parameters.get("focus_area"),
            "includeProjects": parameters.get("include_projects"),
            "includeIde": parameters.get("include_ide"),
            **outline.extras(),
        },
    )
    write_rows([course])
    course_id = course.id

    modules = []
    for module in outline.modules:
        data = module.to_dict()
        modules.append(
            CourseModule(
                course_id=course_id,
                module_number=module.module_number,
                title=module.title,
                summary=module.summary,
                content={
                    "keyConcepts": data["keyConcepts"],
                    "topics": data["topics"],
                    "examples": data["examples"],
                    "resources": data["resources"],
                    "ideSetup": data.get("ideSetup"),
                    "ideTasks": data["ideTasks"],
                },
                time_required=math.ceil(module.estimated_minutes) if module.estimated_minutes is not None else None,
                flashcards=data["flashcards"],
                practice_tasks=data["practiceTasks"],
                quiz=data["quiz"],
            )
        )

    try:
        write_rows(modules)
    except PersistenceError:
        current_app.logger.error("Course %s was saved but its modules were not; the row is orphaned.", course_id)
        raise

    return db.session.get(Course, course_id)


def save_roadmap(owner_id: Optional[int], roadmap: DetailedRoadmap, parameters: Mapping[str, Any]) -> Roadmap:
    record = Roadmap(
        owner_id=owner_id,
        title=roadmap.title,
        topic=parameters.get("topic") or roadmap.user_summary.get("skill", ""),
        skill_level=parameters.get("skill_level") or "beginner",
        content=roadmap.to_dict(),
    )
    write_rows([record])
    return record

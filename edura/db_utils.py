"""Database helper utilities for ensuring schema consistency."""
from __future__ import annotations

from typing import Iterable, Set

from sqlalchemy import inspect, text

from .extensions import db


def _get_column_names(table_name: str) -> Set[str]:
    inspector = inspect(db.engine)
    return {column["name"] for column in inspector.get_columns(table_name)}


def ensure_database_schema() -> None:
    """Ensure that essential schema updates are applied.

    Runs on every application start. Missing tables are created and the
    ``users.xp`` column, added after the first deployment, is backfilled with
    a zero default. Migrations managed by Flask-Migrate remain the primary
    path for anything larger.
    """

    inspector = inspect(db.engine)
    table_names: Iterable[str] = inspector.get_table_names()

    if "users" not in table_names:
        db.create_all()
        return

    # Import locally to avoid circular import issues during application setup.
    from .models import Course, CourseModule, GenerationJob, Roadmap, UserCourseProgress

    required_tables = {
        "courses": Course.__table__,
        "course_modules": CourseModule.__table__,
        "roadmaps": Roadmap.__table__,
        "ai_generation_jobs": GenerationJob.__table__,
        "user_course_progress": UserCourseProgress.__table__,
    }

    for table_name, table in required_tables.items():
        if table_name not in table_names:
            table.create(bind=db.engine)

    if "xp" not in _get_column_names("users"):
        with db.engine.begin() as connection:
            connection.execute(text("ALTER TABLE users ADD COLUMN xp INTEGER NOT NULL DEFAULT 0"))

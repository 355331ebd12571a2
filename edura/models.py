from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from flask_login import UserMixin
from werkzeug.security import check_password_hash, generate_password_hash

from .extensions import db, login_manager
from .services.errors import JobStateError


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class User(UserMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    display_name = db.Column(db.String(120), nullable=False)
    xp = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    courses = db.relationship("Course", backref="owner", lazy=True)
    roadmaps = db.relationship("Roadmap", backref="owner", lazy=True, cascade="all, delete-orphan")

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "email": self.email, "displayName": self.display_name, "xp": self.xp or 0}

    def __repr__(self) -> str:  # pragma: no cover - repr for debugging
        return f"<User {self.email}>"


@login_manager.user_loader
def load_user(user_id: str) -> Optional["User"]:
    return db.session.get(User, int(user_id))


class Course(db.Model):
    __tablename__ = "courses"

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    primary_language = db.Column(db.String(50), nullable=False, default="English")
    level = db.Column(db.String(20), nullable=False, default="beginner")
    category = db.Column(db.String(50), nullable=True)
    tags = db.Column(db.JSON, nullable=False, default=list)
    duration_weeks = db.Column(db.Integer, nullable=True)
    total_modules = db.Column(db.Integer, nullable=False, default=0)
    estimated_hours = db.Column(db.Integer, nullable=True)
    is_ai_generated = db.Column(db.Boolean, nullable=False, default=True)
    published = db.Column(db.Boolean, nullable=False, default=False)
    meta = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    modules = db.relationship(
        "CourseModule",
        backref="course",
        lazy=True,
        cascade="all, delete-orphan",
        order_by="CourseModule.module_number",
    )

    def to_dict(self, *, include_modules: bool = False) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "ownerId": self.owner_id,
            "title": self.title,
            "description": self.description or "",
            "language": self.primary_language,
            "level": self.level,
            "category": self.category,
            "tags": list(self.tags or []),
            "durationWeeks": self.duration_weeks,
            "totalModules": self.total_modules,
            "estimatedHours": self.estimated_hours,
            "isAiGenerated": self.is_ai_generated,
            "published": self.published,
            "meta": self.meta or {},
            "createdAt": _isoformat(self.created_at),
        }
        if include_modules:
            data["modules"] = [module.to_dict() for module in self.modules]
        return data

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Course {self.title} ({self.total_modules} modules)>"


class CourseModule(db.Model):
    __tablename__ = "course_modules"
    __table_args__ = (db.UniqueConstraint("course_id", "module_number", name="uq_course_module_number"),)

    id = db.Column(db.Integer, primary_key=True)
    course_id = db.Column(db.Integer, db.ForeignKey("courses.id"), nullable=False, index=True)
    module_number = db.Column(db.Integer, nullable=False)
    title = db.Column(db.String(255), nullable=False)
    summary = db.Column(db.Text, nullable=True)
    content = db.Column(db.JSON, nullable=True)
    time_required = db.Column(db.Integer, nullable=True)
    flashcards = db.Column(db.JSON, nullable=False, default=list)
    practice_tasks = db.Column(db.JSON, nullable=False, default=list)
    quiz = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self) -> Dict[str, Any]:
        content = self.content or {}
        return {
            "id": self.id,
            "courseId": self.course_id,
            "moduleNumber": self.module_number,
            "title": self.title,
            "summary": self.summary or "",
            "keyConcepts": content.get("keyConcepts", []),
            "topics": content.get("topics", []),
            "examples": content.get("examples", []),
            "resources": content.get("resources", []),
            "ideSetup": content.get("ideSetup"),
            "ideTasks": content.get("ideTasks", []),
            "estimatedMinutes": self.time_required,
            "flashcards": list(self.flashcards or []),
            "practiceTasks": list(self.practice_tasks or []),
            "quiz": list(self.quiz or []),
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<CourseModule {self.course_id}#{self.module_number} {self.title}>"


class Roadmap(db.Model):
    __tablename__ = "roadmaps"

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    topic = db.Column(db.String(255), nullable=False)
    skill_level = db.Column(db.String(20), nullable=False, default="beginner")
    content = db.Column(db.JSON, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "ownerId": self.owner_id,
            "title": self.title,
            "topic": self.topic,
            "skillLevel": self.skill_level,
            "roadmap": self.content,
            "createdAt": _isoformat(self.created_at),
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Roadmap {self.title}>"


class GenerationJob(db.Model):
    __tablename__ = "ai_generation_jobs"

    STATUS_RUNNING = "running"
    STATUS_DONE = "done"
    STATUS_FAILED = "failed"

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    kind = db.Column(db.String(32), nullable=False)
    status = db.Column(db.String(16), nullable=False, default=STATUS_RUNNING)
    inputs = db.Column(db.JSON, nullable=False, default=dict)
    result_ref = db.Column(db.JSON, nullable=True)
    error_message = db.Column(db.Text, nullable=True)
    started_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    finished_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    @property
    def is_running(self) -> bool:
        return self.status == self.STATUS_RUNNING

    def _finish(self, status: str) -> None:
        if not self.is_running:
            raise JobStateError(f"Generation job {self.id} is already {self.status}.")
        self.status = status
        self.finished_at = datetime.utcnow()

    def mark_done(self, result_ref: Dict[str, Any]) -> None:
        self._finish(self.STATUS_DONE)
        self.result_ref = result_ref

    def mark_failed(self, message: str) -> None:
        self._finish(self.STATUS_FAILED)
        self.error_message = message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "ownerId": self.owner_id,
            "kind": self.kind,
            "status": self.status,
            "inputs": self.inputs or {},
            "resultRef": self.result_ref,
            "errorMessage": self.error_message,
            "startedAt": _isoformat(self.started_at),
            "finishedAt": _isoformat(self.finished_at),
            "createdAt": _isoformat(self.created_at),
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<GenerationJob {self.id} {self.kind} ({self.status})>"


class UserCourseProgress(db.Model):
    __tablename__ = "user_course_progress"
    __table_args__ = (db.UniqueConstraint("user_id", "course_id", name="uq_user_course_progress"),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    course_id = db.Column(db.Integer, db.ForeignKey("courses.id"), nullable=False, index=True)
    completed_modules = db.Column(db.Integer, nullable=False, default=0)
    progress_percentage = db.Column(db.Integer, nullable=False, default=0)
    quiz_scores = db.Column(db.JSON, nullable=False, default=dict)
    xp_earned = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "courseId": self.course_id,
            "completedModules": self.completed_modules,
            "progressPercentage": self.progress_percentage,
            "quizScores": dict(self.quiz_scores or {}),
            "xpEarned": self.xp_earned,
            "updatedAt": _isoformat(self.updated_at),
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<UserCourseProgress user={self.user_id} course={self.course_id}>"

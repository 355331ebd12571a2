"""Course library reads and learner progress tracking."""

from __future__ import annotations

from typing import List, Optional

from flask import current_app
from sqlalchemy import or_

from ..extensions import db
from ..models import Course, User, UserCourseProgress
from .errors import InvalidRequestError

XP_PER_MODULE = 50
XP_PER_CORRECT_ANSWER = 10


def list_published_courses(
    *,
    level: Optional[str] = None,
    category: Optional[str] = None,
    language: Optional[str] = None,
    search: Optional[str] = None,
) -> List[Course]:
    query = Course.query.filter_by(published=True)
    if level:
        query = query.filter(Course.level == level)
    if category:
        query = query.filter(Course.category == category)
    if language:
        query = query.filter(Course.primary_language == language)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(Course.title.ilike(pattern), Course.description.ilike(pattern)))
    return query.order_by(Course.created_at.desc(), Course.id.desc()).all()


def list_courses_for_owner(owner_id: int) -> List[Course]:
    return (
        Course.query.filter_by(owner_id=owner_id)
        .order_by(Course.created_at.desc(), Course.id.desc())
        .all()
    )


def get_progress(user_id: int, course_id: int) -> Optional[UserCourseProgress]:
    return UserCourseProgress.query.filter_by(user_id=user_id, course_id=course_id).first()


def _progress_for_update(user_id: int, course_id: int) -> UserCourseProgress:
    progress = get_progress(user_id, course_id)
    if progress is None:
        progress = UserCourseProgress(
            user_id=user_id,
            course_id=course_id,
            completed_modules=0,
            progress_percentage=0,
            quiz_scores={},
            xp_earned=0,
        )
        db.session.add(progress)
    return progress


def _award_xp(user: User, progress: UserCourseProgress, amount: int) -> None:
    if amount <= 0:
        return
    user.xp = (user.xp or 0) + amount
    progress.xp_earned = (progress.xp_earned or 0) + amount


def complete_module(user: User, course: Course, module_number: int) -> UserCourseProgress:
    """Record ``module_number`` as reached; only newly completed modules earn XP."""

    total = course.total_modules or 0
    if module_number < 1 or module_number > total:
        raise InvalidRequestError(f"Module number must be between 1 and {total}.")

    progress = _progress_for_update(user.id, course.id)
    previous = progress.completed_modules or 0
    completed = max(previous, module_number)

    progress.completed_modules = completed
    progress.progress_percentage = round(completed / total * 100)
    _award_xp(user, progress, (completed - previous) * XP_PER_MODULE)
    db.session.commit()

    current_app.logger.info(
        "User %s completed module %s of course %s (%s%%).", user.id, module_number, course.id, progress.progress_percentage
    )
    return progress


def submit_quiz_score(
    user: User,
    course: Course,
    module_number: int,
    score: int,
    total_questions: int,
) -> UserCourseProgress:
    """Store the score for a module quiz and award XP per correct answer."""

    if module_number < 1 or module_number > (course.total_modules or 0):
        raise InvalidRequestError("Unknown module for this course.")
    if total_questions < 1 or score < 0 or score > total_questions:
        raise InvalidRequestError("Score must be between 0 and the number of questions.")

    progress = _progress_for_update(user.id, course.id)
    scores = dict(progress.quiz_scores or {})
    scores[f"module_{module_number}"] = score
    progress.quiz_scores = scores
    _award_xp(user, progress, score * XP_PER_CORRECT_ANSWER)
    db.session.commit()
    return progress

from __future__ import annotations

from flask import jsonify, request
from flask_login import current_user, login_required

from ..api_utils import form_error_response
from ..extensions import db
from ..models import Course
from ..services.courses import (
    complete_module,
    get_progress,
    list_courses_for_owner,
    list_published_courses,
    submit_quiz_score,
)
from ..services.errors import InvalidRequestError
from . import bp
from .forms import QuizScoreForm


def _visible_course(course_id: int):
    course = db.get_or_404(Course, course_id)
    if not course.published and course.owner_id != current_user.id:
        return None
    return course


@bp.route("", methods=["GET"])
@login_required
def library():
    courses = list_published_courses(
        level=request.args.get("level") or None,
        category=request.args.get("category") or None,
        language=request.args.get("language") or None,
        search=request.args.get("search") or None,
    )
    return jsonify({"courses": [course.to_dict() for course in courses]})


@bp.route("/mine", methods=["GET"])
@login_required
def mine():
    return jsonify({"courses": [course.to_dict() for course in list_courses_for_owner(current_user.id)]})


@bp.route("/<int:course_id>", methods=["GET"])
@login_required
def detail(course_id: int):
    course = _visible_course(course_id)
    if course is None:
        return jsonify({"error": "Course not found."}), 404
    return jsonify({"course": course.to_dict(include_modules=True)})


@bp.route("/<int:course_id>/progress", methods=["GET"])
@login_required
def progress(course_id: int):
    course = _visible_course(course_id)
    if course is None:
        return jsonify({"error": "Course not found."}), 404
    record = get_progress(current_user.id, course.id)
    return jsonify({"progress": record.to_dict() if record else None})


@bp.route("/<int:course_id>/modules/<int:module_number>/complete", methods=["POST"])
@login_required
def complete(course_id: int, module_number: int):
    course = _visible_course(course_id)
    if course is None:
        return jsonify({"error": "Course not found."}), 404

    try:
        record = complete_module(current_user, course, module_number)
    except InvalidRequestError as exc:
        return jsonify({"error": str(exc)}), 400

    return jsonify({"progress": record.to_dict(), "xp": current_user.xp})


@bp.route("/<int:course_id>/quiz-scores", methods=["POST"])
@login_required
def quiz_score(course_id: int):
    course = _visible_course(course_id)
    if course is None:
        return jsonify({"error": "Course not found."}), 404

    form = QuizScoreForm()
    if not form.validate_on_submit():
        return form_error_response(form)

    try:
        record = submit_quiz_score(
            current_user,
            course,
            form.module_number.data,
            form.score.data,
            form.total_questions.data,
        )
    except InvalidRequestError as exc:
        return jsonify({"error": str(exc)}), 400

    return jsonify({"progress": record.to_dict(), "xp": current_user.xp})

from __future__ import annotations

from flask import current_app, jsonify, request
from flask_login import current_user, login_required

from ..api_utils import form_error_response, optional_bool
from ..services.completion import get_completion_client
from ..services.errors import (
    ConfigurationError,
    GenerationError,
    InvalidRequestError,
    PersistenceError,
)
from ..services.jobs import get_job, list_jobs_for_owner
from ..services.persistence import PersistenceIssue
from ..services.requests import CourseGenerationInput, RoadmapQuestionnaire
from ..services.study_tools import (
    chat_reply,
    generate_course_outline,
    generate_detailed_roadmap,
    generate_flashcards,
    generate_quiz,
    generate_roadmap,
    generate_summary,
)
from . import bp
from .forms import ContentForm, CourseRequestForm, DetailedRoadmapForm, RoadmapGoalForm, SummaryForm


def _generation_error(exc: GenerationError, failure_message: str):
    if isinstance(exc, InvalidRequestError):
        return jsonify({"error": str(exc)}), 400
    if isinstance(exc, ConfigurationError):
        current_app.logger.warning("Completion service is not usable: %s", exc)
        return jsonify({"error": str(exc)}), 503
    if isinstance(exc, PersistenceError) and exc.issue != PersistenceIssue.UNKNOWN.value:
        current_app.logger.error("Generated content could not be stored: %s", exc)
        return jsonify({"error": str(exc)}), 500

    current_app.logger.exception("Generation failed: %s", exc)
    return jsonify({"error": failure_message}), 500


@bp.route("/generate/chat", methods=["POST"])
@login_required
def chat():
    payload = request.get_json(silent=True) or {}
    messages = payload.get("messages")
    if not isinstance(messages, list):
        return jsonify({"error": "Provide the conversation as a list of messages."}), 400

    try:
        reply = chat_reply(get_completion_client(), messages)
    except GenerationError as exc:
        return _generation_error(exc, "Failed to get response from AI. Please try again.")

    return jsonify({"reply": reply})


@bp.route("/generate/summary", methods=["POST"])
@login_required
def summary():
    form = SummaryForm()
    if not form.validate_on_submit():
        return form_error_response(form)

    try:
        text = generate_summary(get_completion_client(), form.content.data)
    except GenerationError as exc:
        return _generation_error(exc, "Failed to generate summary. Please try again.")

    return jsonify({"summary": text})


@bp.route("/generate/flashcards", methods=["POST"])
@login_required
def flashcards():
    form = ContentForm()
    if not form.validate_on_submit():
        return form_error_response(form)

    try:
        cards = generate_flashcards(get_completion_client(), form.content.data, form.count.data)
    except GenerationError as exc:
        return _generation_error(exc, "Failed to generate flashcards. Please try again.")

    return jsonify({"flashcards": [card.to_dict() for card in cards]})


@bp.route("/generate/quiz", methods=["POST"])
@login_required
def quiz():
    form = ContentForm()
    if not form.validate_on_submit():
        return form_error_response(form)

    try:
        questions = generate_quiz(get_completion_client(), form.content.data, form.count.data)
    except GenerationError as exc:
        return _generation_error(exc, "Failed to generate quiz. Please try again.")

    return jsonify({"questions": [question.to_dict() for question in questions]})


@bp.route("/generate/roadmap", methods=["POST"])
@login_required
def roadmap():
    form = RoadmapGoalForm()
    if not form.validate_on_submit():
        return form_error_response(form)

    try:
        milestones = generate_roadmap(get_completion_client(), form.goal.data)
    except GenerationError as exc:
        return _generation_error(exc, "Failed to generate roadmap. Please try again.")

    return jsonify({"milestones": [milestone.to_dict() for milestone in milestones]})


@bp.route("/generate/detailed-roadmap", methods=["POST"])
@login_required
def detailed_roadmap():
    form = DetailedRoadmapForm()
    if not form.validate_on_submit():
        return form_error_response(form)

    questionnaire = RoadmapQuestionnaire(
        topic=form.topic.data.strip(),
        skill_level=form.skill_level.data,
        duration=form.duration.data,
        duration_unit=form.duration_unit.data,
        hours_per_day=form.hours_per_day.data,
        hours_per_week=form.hours_per_week.data,
    )

    try:
        job, record = generate_detailed_roadmap(get_completion_client(), current_user.id, questionnaire)
    except GenerationError as exc:
        return _generation_error(exc, "Failed to generate detailed roadmap. Please try again.")

    return jsonify({"job": job.to_dict(), "roadmap": record.to_dict()}), 201


@bp.route("/generate/course", methods=["POST"])
@login_required
def course():
    form = CourseRequestForm()
    if not form.validate_on_submit():
        return form_error_response(form)

    payload = request.get_json(silent=True) or {}
    course_input = CourseGenerationInput(
        topic=form.topic.data.strip(),
        goal=form.goal.data.strip(),
        audience=form.audience.data.strip(),
        level=form.level.data,
        duration_weeks=form.duration_weeks.data,
        preferred_language=(form.preferred_language.data or "English").strip() or "English",
        focus_area=form.focus_area.data.strip(),
        include_projects=bool(optional_bool(payload, "include_projects", True)),
        include_ide=optional_bool(payload, "include_ide"),
        category=(form.category.data or "").strip() or None,
    )

    try:
        job, created = generate_course_outline(get_completion_client(), current_user.id, course_input)
    except GenerationError as exc:
        return _generation_error(exc, "Failed to generate course. Please try again.")

    return jsonify({"job": job.to_dict(), "course": created.to_dict(include_modules=True)}), 201


@bp.route("/jobs", methods=["GET"])
@login_required
def jobs():
    limit = request.args.get("limit", type=int)
    return jsonify({"jobs": [job.to_dict() for job in list_jobs_for_owner(current_user.id, limit=limit)]})


@bp.route("/jobs/<int:job_id>", methods=["GET"])
@login_required
def job_detail(job_id: int):
    job = get_job(job_id)
    if job is None or job.owner_id != current_user.id:
        return jsonify({"error": "Job not found."}), 404
    return jsonify({"job": job.to_dict()})

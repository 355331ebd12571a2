"""Auditable job records wrapped around persisted generations."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from flask import current_app

from ..extensions import db
from ..models import GenerationJob
from .persistence import write_rows
from .requests import GenerationKind

JobWork = Callable[[GenerationJob], Tuple[Any, Dict[str, Any]]]


def start_job(owner_id: int, kind: GenerationKind, inputs: Mapping[str, Any]) -> GenerationJob:
    """Commit a ``running`` job row holding a snapshot of ``inputs``.

    A rejected insert raises a classified ``PersistenceError``; no job exists
    in that case.
    """

    job = GenerationJob(
        owner_id=owner_id,
        kind=GenerationKind(kind).value,
        status=GenerationJob.STATUS_RUNNING,
        inputs=dict(inputs),
    )
    write_rows([job])
    return job


def run_generation_job(
    owner_id: int,
    kind: GenerationKind,
    inputs: Mapping[str, Any],
    work: JobWork,
) -> Tuple[GenerationJob, Any]:
    """Run ``work`` under a job record and return ``(job, result)``.

    ``work`` receives the committed running job and returns the created entity
    together with the reference stored on the job. Whatever ``work`` raises
    is recorded on the job and then re-raised unchanged.
    """

    job = start_job(owner_id, kind, inputs)
    job_id = job.id

    try:
        result, result_ref = work(job)
        job.mark_done(result_ref)
        db.session.commit()
    except Exception as exc:
        db.session.rollback()
        failed = db.session.get(GenerationJob, job_id)
        if failed is not None and failed.is_running:
            failed.mark_failed(str(exc))
            db.session.commit()
        current_app.logger.warning("Generation job %s (%s) failed: %s", job_id, job.kind, exc)
        raise

    current_app.logger.info("Generation job %s (%s) finished with %s.", job_id, job.kind, result_ref)
    return job, result


def get_job(job_id: int) -> Optional[GenerationJob]:
    return db.session.get(GenerationJob, job_id)


def list_jobs_for_owner(owner_id: int, *, limit: Optional[int] = None) -> List[GenerationJob]:
    query = GenerationJob.query.filter_by(owner_id=owner_id).order_by(
        GenerationJob.created_at.desc(), GenerationJob.id.desc()
    )
    if limit:
        query = query.limit(limit)
    return query.all()

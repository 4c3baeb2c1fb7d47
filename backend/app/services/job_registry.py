"""
Job registry: job postings and their approval lifecycle.

New postings start as pending and stay invisible to students until an admin
approves them. Listings filter on status with an equality predicate and sort
newest first; the (status, createdAt) index on the jobs table serves both
without scanning the collection.
"""
import logging
from typing import Iterable, Optional, Union

from app.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from app.database_types import utcnow
from app.models.application import Application
from app.models.job import Job, JobStatus
from app.models.user import User, UserRole
from app.services.access_policy import Action, RequestContext, ensure_access
from app.services.state_machine import JOB_TRANSITIONS, transition_status
from app.services.store import DocumentStore

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "company", "location", "description", "salary", "employment_type")
EDITABLE_FIELDS = REQUIRED_FIELDS + ("requirements",)
DECISION_STATUSES = frozenset({JobStatus.APPROVED, JobStatus.REJECTED})


def normalize_requirements(value: Union[str, Iterable[str], None]) -> list[str]:
    """
    Turn newline-separated free text (or a list) into an ordered list of
    non-empty, stripped requirement lines.
    """
    if value is None:
        return []
    lines = value.splitlines() if isinstance(value, str) else value
    return [line.strip() for line in lines if line and line.strip()]


def _clean_fields(fields: dict, required: Iterable[str]) -> dict:
    cleaned = {}
    for field in EDITABLE_FIELDS:
        if field not in fields or fields[field] is None:
            continue
        if field == "requirements":
            cleaned[field] = normalize_requirements(fields[field])
        else:
            cleaned[field] = str(fields[field]).strip()

    missing = [field for field in required if not cleaned.get(field)]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}", fields=missing)
    return cleaned


async def submit_job(store: DocumentStore, ctx: RequestContext, fields: dict) -> Job:
    """
    Create a job posting owned by the calling employer, status pending.

    Raises:
        AuthorizationError: If the caller is not an employer
        ValidationError: If a required field is blank
    """
    ensure_access(ctx, Action.SUBMIT_JOB)

    employer = await store.get(User, ctx.uid)
    if employer is None or not employer.is_employer():
        raise AuthorizationError(f"User {ctx.uid} is not a registered employer")

    job_fields = dict(fields)
    if not job_fields.get("company") and employer.company:
        job_fields["company"] = employer.company

    cleaned = _clean_fields(job_fields, REQUIRED_FIELDS + ("requirements",))
    now = utcnow()
    job = await store.create(
        Job, employer_id=employer.uid, status=JobStatus.PENDING, created_at=now, updated_at=now, **cleaned
    )

    logger.info(f"Job {job.id} submitted by employer {employer.uid}: {job.title} at {job.company}")
    return job


async def get_job(store: DocumentStore, ctx: RequestContext, job_id: str) -> Job:
    """
    Fetch a job the caller is allowed to see.

    Approved jobs are public. Pending and rejected jobs are visible only to
    their owner and to admins; anyone else gets NotFoundError so existence is
    not leaked.
    """
    job = await store.get(Job, job_id)
    if job is None:
        raise NotFoundError(f"Job {job_id} not found")

    if job.is_visible_to_students():
        return job
    if ctx.role == UserRole.ADMIN or (ctx.uid is not None and job.employer_id == ctx.uid):
        return job
    raise NotFoundError(f"Job {job_id} not found")


async def list_approved_jobs(store: DocumentStore) -> list[Job]:
    """All approved jobs, newest first. Public listing."""
    return await store.query(Job, {"status": JobStatus.APPROVED}, order_by="created_at")


async def list_pending_jobs(store: DocumentStore, ctx: RequestContext) -> list[Job]:
    """Admin review queue, newest first."""
    ensure_access(ctx, Action.REVIEW_JOBS)
    return await store.query(Job, {"status": JobStatus.PENDING}, order_by="created_at")


async def list_jobs_by_employer(store: DocumentStore, ctx: RequestContext, employer_id: Optional[str] = None) -> list[Job]:
    """An employer's own postings in every status, newest first."""
    ensure_access(ctx, Action.VIEW_OWN_POSTINGS)
    employer_id = employer_id or ctx.uid
    if employer_id != ctx.uid:
        raise AuthorizationError(f"User {ctx.uid} cannot list postings of {employer_id}")
    return await store.query(Job, {"employer_id": employer_id}, order_by="created_at")


async def update_job(store: DocumentStore, ctx: RequestContext, job_id: str, fields: dict) -> Job:
    """
    Edit a posting. Only its owner may edit, and only while it is pending.

    Status and owner are never editable here.
    """
    ensure_access(ctx, Action.EDIT_JOB)
    job = await store.get(Job, job_id)
    if job is None:
        raise NotFoundError(f"Job {job_id} not found")
    ensure_access(ctx, Action.EDIT_JOB, job)

    if job.status != JobStatus.PENDING:
        raise ConflictError(f"Job {job_id} is {job.status.value} and can no longer be edited")

    # Only fields present in the update must be non-blank
    present = [field for field in EDITABLE_FIELDS if fields.get(field) is not None]
    cleaned = _clean_fields(fields, present)
    if not cleaned:
        return job

    updated = await store.update(Job, job_id, cleaned)
    if updated is None:
        raise NotFoundError(f"Job {job_id} not found")

    logger.info(f"Job {job_id} edited by employer {ctx.uid}: {sorted(cleaned)}")
    return updated


async def set_job_status(store: DocumentStore, ctx: RequestContext, job_id: str, status: Union[JobStatus, str]) -> Job:
    """
    Admin decision on a posting: approved or rejected.

    Re-applying the current decision is a no-op write that refreshes
    ``updated_at``. Switching an already-decided job raises
    InvalidTransitionError.
    """
    ensure_access(ctx, Action.REVIEW_JOBS)

    try:
        target = status if isinstance(status, JobStatus) else JobStatus(str(status).strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid job status {status!r}", fields=["status"])
    if target not in DECISION_STATUSES:
        raise ValidationError("Status must be approved or rejected", fields=["status"])

    job = await transition_status(store, Job, job_id, target, JOB_TRANSITIONS, actor=ctx.uid)
    logger.info(f"Job {job_id} {target.value} by admin {ctx.uid}")
    return job


async def delete_job(store: DocumentStore, ctx: RequestContext, job_id: str) -> None:
    """
    Delete a posting and the applications made to it.

    Permitted for the owning employer and for admins.
    """
    ensure_access(ctx, Action.DELETE_JOB)
    job = await store.get(Job, job_id)
    if job is None:
        raise NotFoundError(f"Job {job_id} not found")
    ensure_access(ctx, Action.DELETE_JOB, job)

    # Applications and the job go in one commit
    removed = await store.delete_cascade(Job, job_id, [(Application, "job_id")])
    if removed is None:
        raise NotFoundError(f"Job {job_id} not found")
    if removed:
        logger.warning(f"Deleted job {job_id} with {removed} applications")
    logger.info(f"Deleted job {job_id} (by {ctx.uid})")

"""
Application ledger: student applications and their employer decisions.

One application per (student, job). The pre-insert lookup gives a clean
error in the common case; the uq_applications_student_job constraint
catches the concurrent case where two submissions both pass the lookup.
"""
import logging
from typing import Optional, Union

from app.database_types import utcnow
from app.errors import (
    AuthorizationError,
    DuplicateApplicationError,
    NotFoundError,
    StoreConflict,
    ValidationError,
)
from app.models.application import Application, ApplicationStatus
from app.models.job import Job
from app.services.access_policy import Action, RequestContext, ensure_access
from app.services.resume import validate_document_reference
from app.services.state_machine import APPLICATION_TRANSITIONS, transition_status
from app.services.store import DocumentStore

logger = logging.getLogger(__name__)

DECISION_STATUSES = frozenset({ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED})


async def find_existing(store: DocumentStore, student_id: str, job_id: str) -> Optional[Application]:
    matches = await store.query(Application, {"student_id": student_id, "job_id": job_id})
    return matches[0] if matches else None


async def submit_application(
    store: DocumentStore,
    ctx: RequestContext,
    job_id: str,
    resume: Optional[str],
    cover_letter: Optional[str] = None,
) -> Application:
    """
    Apply the calling student to an approved job.

    Raises:
        AuthorizationError: If the caller is not a student
        NotFoundError: If the job is missing or not approved
        DuplicateApplicationError: If the student already applied to this job
        ValidationError: If the resume reference is missing or invalid
    """
    ensure_access(ctx, Action.APPLY_TO_JOB)

    resume = validate_document_reference(resume, field="resume")
    cover_letter = validate_document_reference(cover_letter, field="coverLetter", required=False)

    job = await store.get(Job, job_id)
    # Students only ever see approved jobs; anything else does not exist for them
    if job is None or not job.is_visible_to_students():
        raise NotFoundError(f"Job {job_id} not found")

    if await find_existing(store, ctx.uid, job_id) is not None:
        raise DuplicateApplicationError("You have already applied for this position")

    now = utcnow()
    try:
        application = await store.create(
            Application,
            job_id=job.id,
            student_id=ctx.uid,
            employer_id=job.employer_id,
            status=ApplicationStatus.PENDING,
            resume=resume,
            cover_letter=cover_letter,
            created_at=now,
            updated_at=now,
        )
    except StoreConflict:
        logger.warning(f"Concurrent duplicate application blocked: student={ctx.uid} job={job_id}")
        raise DuplicateApplicationError("You have already applied for this position")

    logger.info(f"Application {application.id} submitted: student={ctx.uid} job={job_id}")
    return application


async def get_application(store: DocumentStore, ctx: RequestContext, application_id: str) -> Application:
    """Fetch an application visible to the caller (its student or its employer)."""
    application = await store.get(Application, application_id)
    if application is None or ctx.uid not in (application.student_id, application.employer_id):
        raise NotFoundError(f"Application {application_id} not found")
    return application


async def list_applications_by_student(store: DocumentStore, ctx: RequestContext, student_id: Optional[str] = None) -> list[Application]:
    """A student's own applications, newest first."""
    ensure_access(ctx, Action.VIEW_OWN_APPLICATIONS)
    student_id = student_id or ctx.uid
    if student_id != ctx.uid:
        raise AuthorizationError(f"User {ctx.uid} cannot list applications of {student_id}")
    return await store.query(Application, {"student_id": student_id}, order_by="created_at")


async def list_applications_by_employer(store: DocumentStore, ctx: RequestContext, employer_id: Optional[str] = None) -> list[Application]:
    """Applications addressed to an employer across all their jobs, newest first."""
    ensure_access(ctx, Action.VIEW_RECEIVED_APPLICATIONS)
    employer_id = employer_id or ctx.uid
    if employer_id != ctx.uid:
        raise AuthorizationError(f"User {ctx.uid} cannot list applications of {employer_id}")
    return await store.query(Application, {"employer_id": employer_id}, order_by="created_at")


async def list_applications_by_job(store: DocumentStore, ctx: RequestContext, job_id: str) -> list[Application]:
    """Applications to one job, newest first. Only the job's employer."""
    ensure_access(ctx, Action.VIEW_RECEIVED_APPLICATIONS)
    job = await store.get(Job, job_id)
    if job is None:
        raise NotFoundError(f"Job {job_id} not found")
    ensure_access(ctx, Action.VIEW_RECEIVED_APPLICATIONS, job)
    return await store.query(Application, {"job_id": job_id}, order_by="created_at")


async def set_application_status(
    store: DocumentStore,
    ctx: RequestContext,
    application_id: str,
    status: Union[ApplicationStatus, str],
) -> Application:
    """
    Employer decision on an application: accepted or rejected.

    Only the employer recorded on the application may decide it.

    Raises:
        AuthorizationError: If the caller is not the application's employer
        NotFoundError: If the application does not exist
        InvalidTransitionError: If the application was already decided otherwise
    """
    ensure_access(ctx, Action.DECIDE_APPLICATION)

    try:
        target = status if isinstance(status, ApplicationStatus) else ApplicationStatus(str(status).strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid application status {status!r}", fields=["status"])
    if target not in DECISION_STATUSES:
        raise ValidationError("Status must be accepted or rejected", fields=["status"])

    application = await store.get(Application, application_id)
    if application is None:
        raise NotFoundError(f"Application {application_id} not found")
    ensure_access(ctx, Action.DECIDE_APPLICATION, application)

    updated = await transition_status(
        store, Application, application_id, target, APPLICATION_TRANSITIONS, actor=ctx.uid
    )
    logger.info(f"Application {application_id} {target.value} by employer {ctx.uid}")
    return updated

"""
Jobs API endpoints.
Public listing of approved postings plus employer-side posting management.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends

from app.api.auth import get_request_context, get_store, require
from app.schemas.application import ApplicationResponse
from app.schemas.job import JobCreate, JobResponse, JobUpdate
from app.services import application_ledger, job_registry
from app.services.access_policy import Action, RequestContext
from app.services.store import DocumentStore

# Configure logger
logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=List[JobResponse])
async def list_jobs(
    store: DocumentStore = Depends(get_store),
):
    """
    List approved job postings, newest first.
    Public: no sign-in required.
    """
    jobs = await job_registry.list_approved_jobs(store)
    logger.info(f"Listed {len(jobs)} approved jobs")
    return jobs


@router.get("/mine", response_model=List[JobResponse])
async def list_my_jobs(
    ctx: RequestContext = Depends(require(Action.VIEW_OWN_POSTINGS)),
    store: DocumentStore = Depends(get_store),
):
    """The calling employer's postings in every status (pending, approved, rejected)."""
    return await job_registry.list_jobs_by_employer(store, ctx)


@router.post("/", response_model=JobResponse, status_code=201)
async def submit_job(
    job: JobCreate,
    ctx: RequestContext = Depends(require(Action.SUBMIT_JOB)),
    store: DocumentStore = Depends(get_store),
):
    """
    Submit a job posting for admin review.

    The posting starts as pending and is not listed publicly until approved.
    """
    return await job_registry.submit_job(store, ctx, job.model_dump(exclude_unset=True))


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: str,
    ctx: RequestContext = Depends(get_request_context),
    store: DocumentStore = Depends(get_store),
):
    """
    Get a specific job posting by ID.

    Approved postings are public; others are visible to their owner and admins only.
    """
    return await job_registry.get_job(store, ctx, job_id)


@router.put("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: str,
    job: JobUpdate,
    ctx: RequestContext = Depends(require(Action.EDIT_JOB)),
    store: DocumentStore = Depends(get_store),
):
    """Edit an own posting while it is still pending review (partial update)."""
    return await job_registry.update_job(store, ctx, job_id, job.model_dump(exclude_unset=True))


@router.delete("/{job_id}", status_code=204)
async def delete_job(
    job_id: str,
    ctx: RequestContext = Depends(require(Action.DELETE_JOB)),
    store: DocumentStore = Depends(get_store),
):
    """
    Delete a job posting and its applications.
    Owning employer or admin.
    """
    await job_registry.delete_job(store, ctx, job_id)
    return None


@router.get("/{job_id}/applications", response_model=List[ApplicationResponse])
async def list_job_applications(
    job_id: str,
    ctx: RequestContext = Depends(require(Action.VIEW_RECEIVED_APPLICATIONS)),
    store: DocumentStore = Depends(get_store),
):
    """Applications received for one of the caller's postings, newest first."""
    return await application_ledger.list_applications_by_job(store, ctx, job_id)

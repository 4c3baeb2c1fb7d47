"""
Admin API endpoints.
User listing, the job review queue and direct employer account creation.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends

from app.api.auth import get_store, require
from app.schemas.job import JobResponse, JobStatusUpdate
from app.schemas.user import CreateEmployerRequest, UserResponse
from app.services import job_registry, user_directory
from app.services.access_policy import Action, RequestContext
from app.services.store import DocumentStore

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/users", response_model=List[UserResponse])
async def list_users(
    ctx: RequestContext = Depends(require(Action.LIST_USERS)),
    store: DocumentStore = Depends(get_store),
):
    """All users, newest first."""
    return await user_directory.list_users(store, ctx)


@router.get("/jobs/pending", response_model=List[JobResponse])
async def list_pending_jobs(
    ctx: RequestContext = Depends(require(Action.REVIEW_JOBS)),
    store: DocumentStore = Depends(get_store),
):
    """Postings awaiting review, newest first."""
    return await job_registry.list_pending_jobs(store, ctx)


@router.post("/jobs/{job_id}/status", response_model=JobResponse)
async def set_job_status(
    job_id: str,
    action: JobStatusUpdate,
    ctx: RequestContext = Depends(require(Action.REVIEW_JOBS)),
    store: DocumentStore = Depends(get_store),
):
    """
    Approve or reject a posting.

    If approved, the posting appears in the public listing.
    If rejected, it stays hidden (terminal).
    Returns 409 when switching an already-decided posting.
    """
    return await job_registry.set_job_status(store, ctx, job_id, action.status)


@router.post("/employers", response_model=UserResponse, status_code=201)
async def create_employer(
    request: CreateEmployerRequest,
    ctx: RequestContext = Depends(require(Action.CREATE_EMPLOYER)),
    store: DocumentStore = Depends(get_store),
):
    """Create an employer account directly, bypassing self-signup."""
    return await user_directory.create_employer(
        store,
        ctx,
        email=request.email,
        password=request.password,
        name=request.name,
        phone=request.phone,
        company=request.company,
    )

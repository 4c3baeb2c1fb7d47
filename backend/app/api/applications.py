"""
Applications API endpoints.
Students apply and track their applications; employers decide them.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends

from app.api.auth import get_request_context, get_store, require
from app.schemas.application import ApplicationCreate, ApplicationResponse, ApplicationStatusUpdate
from app.services import application_ledger
from app.services.access_policy import Action, RequestContext
from app.services.store import DocumentStore

logger = logging.getLogger(__name__)
router = APIRouter()


# Endpoints
@router.post("/", response_model=ApplicationResponse, status_code=201)
async def submit_application(
    request: ApplicationCreate,
    ctx: RequestContext = Depends(require(Action.APPLY_TO_JOB)),
    store: DocumentStore = Depends(get_store),
):
    """
    Apply to an approved job.

    Returns:
        201: Application created with status pending
        404: Job missing or not approved
        409: Already applied to this job
        422: Missing or invalid resume reference
    """
    return await application_ledger.submit_application(
        store, ctx, request.job_id, resume=request.resume, cover_letter=request.cover_letter
    )


@router.get("/mine", response_model=List[ApplicationResponse])
async def list_my_applications(
    ctx: RequestContext = Depends(require(Action.VIEW_OWN_APPLICATIONS)),
    store: DocumentStore = Depends(get_store),
):
    """The calling student's applications, newest first."""
    return await application_ledger.list_applications_by_student(store, ctx)


@router.get("/received", response_model=List[ApplicationResponse])
async def list_received_applications(
    ctx: RequestContext = Depends(require(Action.VIEW_RECEIVED_APPLICATIONS)),
    store: DocumentStore = Depends(get_store),
):
    """Applications to any of the calling employer's jobs, newest first."""
    return await application_ledger.list_applications_by_employer(store, ctx)


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: str,
    ctx: RequestContext = Depends(get_request_context),
    store: DocumentStore = Depends(get_store),
):
    """Get one application. Only its student and its employer can see it."""
    return await application_ledger.get_application(store, ctx, application_id)


@router.patch("/{application_id}/status", response_model=ApplicationResponse)
async def set_application_status(
    application_id: str,
    action: ApplicationStatusUpdate,
    ctx: RequestContext = Depends(require(Action.DECIDE_APPLICATION)),
    store: DocumentStore = Depends(get_store),
):
    """
    Accept or reject an application to one of the caller's jobs.

    Returns 409 if the application was already decided the other way.
    """
    return await application_ledger.set_application_status(store, ctx, application_id, action.status)

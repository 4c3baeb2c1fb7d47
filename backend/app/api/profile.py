"""
Profile (settings) endpoints.

Every signed-in role can view its directory entry and update display name
and phone. Role, email and company are fixed.
"""
import logging

from fastapi import APIRouter, Depends

from app.api.auth import get_store, require
from app.schemas.user import ProfileUpdateRequest, UserResponse
from app.services import user_directory
from app.services.access_policy import Action, RequestContext
from app.services.store import DocumentStore

logger = logging.getLogger(__name__)
router = APIRouter()


# Endpoints
@router.get("/profile", response_model=UserResponse)
async def get_profile(
    ctx: RequestContext = Depends(require(Action.VIEW_PROFILE)),
    store: DocumentStore = Depends(get_store),
):
    """Get current user's profile."""
    return await user_directory.get_user(store, ctx.uid)


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    profile_data: ProfileUpdateRequest,
    ctx: RequestContext = Depends(require(Action.UPDATE_PROFILE)),
    store: DocumentStore = Depends(get_store),
):
    """Update name and/or phone (partial update)."""
    update_data = profile_data.model_dump(exclude_unset=True)
    return await user_directory.update_profile(store, ctx, update_data)

"""Help centre endpoint. Public."""
from typing import List, Optional

from fastapi import APIRouter, Query

from app.schemas.help import FaqResponse
from app.services.help import search_faqs

router = APIRouter()


@router.get("/", response_model=List[FaqResponse])
async def list_faqs(
    q: Optional[str] = Query(None, description="Search question and answer text"),
):
    """Frequently asked questions, optionally filtered by a search term."""
    return search_faqs(q)

"""Application-related Pydantic schemas."""
from datetime import datetime
from typing import Optional

from app.models.application import ApplicationStatus
from app.schemas.common import CamelModel


class ApplicationCreate(CamelModel):
    """Student application to an approved job."""
    job_id: str
    resume: Optional[str] = None  # URL or filename (.pdf/.doc/.docx)
    cover_letter: Optional[str] = None


class ApplicationResponse(CamelModel):
    """Schema for application response."""
    id: str
    job_id: str
    student_id: str
    employer_id: str
    status: ApplicationStatus
    resume: str
    cover_letter: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ApplicationStatusUpdate(CamelModel):
    """Employer decision on an application."""
    status: str  # accepted | rejected

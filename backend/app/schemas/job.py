"""Job-related Pydantic schemas."""
from datetime import datetime
from typing import Optional, Union
from pydantic import Field

from app.models.job import JobStatus
from app.schemas.common import CamelModel


class JobBase(CamelModel):
    """Base schema with common job posting fields."""
    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    salary: Optional[str] = None
    employment_type: Optional[str] = Field(default=None, alias="type")  # full-time | part-time | internship


class JobCreate(JobBase):
    """
    Schema for submitting a job posting.

    Requirements may be newline-separated text or a list. Company defaults to
    the employer's company when omitted.
    """
    requirements: Union[str, list[str], None] = None


class JobUpdate(JobCreate):
    """Schema for editing a pending job posting (partial update)."""
    pass


class JobResponse(JobBase):
    """Schema for job posting response."""
    id: str
    requirements: list[str]
    employer_id: str
    status: JobStatus
    created_at: datetime
    updated_at: datetime


class JobStatusUpdate(CamelModel):
    """Admin decision on a posting."""
    status: str  # approved | rejected

from enum import Enum
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Index
import uuid

from app.database import Base
from app.database_types import LowercaseEnum, StringList, utcnow


class JobStatus(str, Enum):
    """Approval status of a job posting"""
    PENDING = "pending"  # Awaiting admin review
    APPROVED = "approved"  # Visible to students
    REJECTED = "rejected"  # Terminal, hidden


class Job(Base):
    __tablename__ = "jobs"

    id = Column(String(36), primary_key=True, default=lambda: uuid.uuid4().hex)

    # Job details
    title = Column(String, nullable=False)
    company = Column(String, nullable=False)
    location = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    requirements = Column(StringList, nullable=False, default=list)
    salary = Column(String, nullable=False)
    employment_type = Column("type", String, nullable=False)  # full-time | part-time | internship

    # Owner, immutable after creation
    employer_id = Column("employerId", String(36), ForeignKey("users.uid"), nullable=False, index=True)

    # Approval workflow: only admins move it off pending
    status = Column(LowercaseEnum(JobStatus), nullable=False, default=JobStatus.PENDING)

    # Timestamps (updated_at refreshed on every mutation by the store)
    created_at = Column("createdAt", DateTime, default=utcnow, nullable=False)
    updated_at = Column("updatedAt", DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        # Serves the equality-on-status + newest-first listings
        Index('ix_jobs_status_created', 'status', 'createdAt'),
    )

    def is_visible_to_students(self) -> bool:
        return self.status == JobStatus.APPROVED

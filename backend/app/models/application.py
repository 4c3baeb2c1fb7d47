from enum import Enum
from sqlalchemy import Column, String, DateTime, ForeignKey, Index, UniqueConstraint
import uuid

from app.database import Base
from app.database_types import LowercaseEnum, utcnow


class ApplicationStatus(str, Enum):
    """Status of a student's application, decided by the job's employer"""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Application(Base):
    __tablename__ = "applications"

    id = Column(String(36), primary_key=True, default=lambda: uuid.uuid4().hex)
    job_id = Column("jobId", String(36), ForeignKey("jobs.id"), nullable=False, index=True)
    student_id = Column("studentId", String(36), ForeignKey("users.uid"), nullable=False, index=True)

    # Denormalized from the job for employer-side queries
    employer_id = Column("employerId", String(36), ForeignKey("users.uid"), nullable=False, index=True)

    status = Column(LowercaseEnum(ApplicationStatus), nullable=False, default=ApplicationStatus.PENDING)

    # Resume URL or uploaded filename; cover letter is optional
    resume = Column(String(500), nullable=False)
    cover_letter = Column("coverLetter", String(500), nullable=True)

    # Timestamps
    created_at = Column("createdAt", DateTime, default=utcnow, nullable=False)
    updated_at = Column("updatedAt", DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        # One application per student and job, even under concurrent submits
        UniqueConstraint('studentId', 'jobId', name='uq_applications_student_job'),
        Index('ix_applications_employer_created', 'employerId', 'createdAt'),
    )

"""Database models"""
from app.models.user import User, UserRole, Credential
from app.models.job import Job, JobStatus
from app.models.application import Application, ApplicationStatus

__all__ = [
    "User",
    "UserRole",
    "Credential",
    "Job",
    "JobStatus",
    "Application",
    "ApplicationStatus",
]

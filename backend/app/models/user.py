from sqlalchemy import Column, String, DateTime, Integer
import enum

from app.database import Base
from app.database_types import LowercaseEnum, utcnow


class UserRole(str, enum.Enum):
    """User role for role-based access control (RBAC). Fixed at account creation."""
    STUDENT = "student"  # Browses approved jobs and applies
    EMPLOYER = "employer"  # Posts jobs and decides applications to them
    ADMIN = "admin"  # Reviews jobs, lists users, creates employer accounts


class User(Base):
    """Directory entry mapping an identity to a role and profile."""
    __tablename__ = "users"

    # Keyed by the identity id, so one directory entry per identity
    uid = Column(String(36), primary_key=True)
    email = Column(String, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(30), nullable=False)

    # No update path: role is immutable after creation
    role = Column(LowercaseEnum(UserRole), nullable=False, index=True)

    # Present iff role == employer
    company = Column(String(255), nullable=True)

    # Timestamps
    created_at = Column("createdAt", DateTime, default=utcnow, nullable=False)
    updated_at = Column("updatedAt", DateTime, default=utcnow, nullable=False)

    def is_employer(self) -> bool:
        return self.role == UserRole.EMPLOYER


class Credential(Base):
    """
    Identity provider state: login email, password hash and lockout tracking.

    Kept apart from the user directory so the directory only ever sees the
    identity id and email.
    """
    __tablename__ = "credentials"

    uid = Column(String(36), primary_key=True)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String(100), nullable=False)

    # Security & audit fields
    last_login_at = Column(DateTime, nullable=True)
    last_login_ip = Column(String(45), nullable=True)  # IPv4 or IPv6
    failed_login_attempts = Column(Integer, default=0, nullable=False)
    account_locked_until = Column(DateTime, nullable=True)

    created_at = Column("createdAt", DateTime, default=utcnow, nullable=False)

    def is_account_locked(self) -> bool:
        """Check if account is currently locked due to failed login attempts."""
        if not self.account_locked_until:
            return False
        return utcnow() < self.account_locked_until

"""
Access policy: who may do what.

Pure functions of (identity, role, action, resource). Nothing here touches
the database; callers pass the resource they already loaded when an
ownership rule applies.

Denials are soft: an anonymous caller is sent to the sign-in page, an
authenticated caller with the wrong role (or who does not own the resource)
is sent to the neutral landing page. The two cases are distinguishable only
by redirect target.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Any, Optional

from app.errors import AuthorizationError
from app.models.user import UserRole

logger = logging.getLogger(__name__)

AUTH_PATH = "/auth"
LANDING_PATH = "/"


class Action(str, enum.Enum):
    """Gated operations, one per page or API action."""
    # Public
    BROWSE_JOBS = "browse_jobs"
    VIEW_HELP = "view_help"
    AUTHENTICATE = "authenticate"

    # Any authenticated role
    VIEW_PROFILE = "view_profile"
    UPDATE_PROFILE = "update_profile"

    # Student
    APPLY_TO_JOB = "apply_to_job"
    VIEW_OWN_APPLICATIONS = "view_own_applications"

    # Employer
    SUBMIT_JOB = "submit_job"
    VIEW_OWN_POSTINGS = "view_own_postings"
    EDIT_JOB = "edit_job"
    VIEW_RECEIVED_APPLICATIONS = "view_received_applications"
    DECIDE_APPLICATION = "decide_application"

    # Employer (owner) or admin
    DELETE_JOB = "delete_job"

    # Admin
    LIST_USERS = "list_users"
    REVIEW_JOBS = "review_jobs"
    CREATE_EMPLOYER = "create_employer"


PUBLIC_ACTIONS = frozenset({Action.BROWSE_JOBS, Action.VIEW_HELP, Action.AUTHENTICATE})

ALL_ROLES = frozenset(UserRole)

# Fixed role-to-action table, not user-configurable
ALLOWED_ROLES: dict[Action, frozenset[UserRole]] = {
    Action.VIEW_PROFILE: ALL_ROLES,
    Action.UPDATE_PROFILE: ALL_ROLES,
    Action.APPLY_TO_JOB: frozenset({UserRole.STUDENT}),
    Action.VIEW_OWN_APPLICATIONS: frozenset({UserRole.STUDENT}),
    Action.SUBMIT_JOB: frozenset({UserRole.EMPLOYER}),
    Action.VIEW_OWN_POSTINGS: frozenset({UserRole.EMPLOYER}),
    Action.EDIT_JOB: frozenset({UserRole.EMPLOYER}),
    Action.VIEW_RECEIVED_APPLICATIONS: frozenset({UserRole.EMPLOYER}),
    Action.DECIDE_APPLICATION: frozenset({UserRole.EMPLOYER}),
    Action.DELETE_JOB: frozenset({UserRole.EMPLOYER, UserRole.ADMIN}),
    Action.LIST_USERS: frozenset({UserRole.ADMIN}),
    Action.REVIEW_JOBS: frozenset({UserRole.ADMIN}),
    Action.CREATE_EMPLOYER: frozenset({UserRole.ADMIN}),
}

# Actions whose resource must belong to the caller (via resource.employer_id)
OWNED_BY_EMPLOYER = frozenset({
    Action.EDIT_JOB,
    Action.VIEW_RECEIVED_APPLICATIONS,
    Action.DECIDE_APPLICATION,
    Action.DELETE_JOB,
})

LANDING_PAGES: dict[UserRole, str] = {
    UserRole.STUDENT: "/my-applications",
    UserRole.EMPLOYER: "/employer-dashboard",
    UserRole.ADMIN: "/admin",
}


@dataclass(frozen=True)
class Identity:
    """Stable identity issued by the identity provider."""
    uid: str
    email: str


@dataclass(frozen=True)
class RequestContext:
    """
    The caller of one request: identity (None when anonymous) and the role
    found in the user directory (None when the identity has no entry).
    """
    identity: Optional[Identity] = None
    role: Optional[UserRole] = None

    @property
    def uid(self) -> Optional[str]:
        return self.identity.uid if self.identity else None

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None


ANONYMOUS = RequestContext()


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    redirect_to: Optional[str] = None


ALLOW = AccessDecision(allowed=True)


def allowed_roles(action: Action) -> frozenset[UserRole]:
    if action in PUBLIC_ACTIONS:
        return ALL_ROLES
    return ALLOWED_ROLES.get(action, frozenset())


def can_access(
    identity: Optional[Identity],
    role: Optional[UserRole],
    action: Action,
    resource: Any = None,
) -> AccessDecision:
    """
    Decide whether the caller may perform ``action`` on ``resource``.

    Args:
        identity: Authenticated identity, or None for anonymous callers
        role: Role from the user directory, or None if unknown
        action: The gated action
        resource: Optional record carrying ``employer_id`` for ownership checks

    Returns:
        AccessDecision with the redirect target when denied
    """
    if action in PUBLIC_ACTIONS:
        return ALLOW

    if identity is None:
        return AccessDecision(allowed=False, redirect_to=AUTH_PATH)

    if role is None or role not in allowed_roles(action):
        return AccessDecision(allowed=False, redirect_to=LANDING_PATH)

    # Admins act on any resource; everyone else must own it
    if resource is not None and action in OWNED_BY_EMPLOYER and role != UserRole.ADMIN:
        if getattr(resource, "employer_id", None) != identity.uid:
            return AccessDecision(allowed=False, redirect_to=LANDING_PATH)

    return ALLOW


def ensure_access(ctx: RequestContext, action: Action, resource: Any = None) -> None:
    """
    Raise AuthorizationError unless ``can_access`` allows the action.
    """
    decision = can_access(ctx.identity, ctx.role, action, resource)
    if not decision.allowed:
        role = ctx.role.value if ctx.role else None
        logger.warning(f"Access denied: uid={ctx.uid} role={role} action={action.value}")
        raise AuthorizationError(
            f"{action.value} not permitted for role {role}",
            redirect_to=decision.redirect_to,
        )


def landing_page(role: Optional[UserRole]) -> str:
    """Where a user lands after signing in."""
    if role is None:
        return LANDING_PATH
    return LANDING_PAGES.get(role, LANDING_PATH)

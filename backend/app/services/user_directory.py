"""User directory: maps identities to roles and profile data."""
import logging
from typing import Optional, Union

from app.database_types import utcnow
from app.errors import ConflictError, NotFoundError, StoreConflict, StoreError, ValidationError
from app.models.user import User, UserRole
from app.services import identity as identity_provider
from app.services.access_policy import Action, Identity, RequestContext, ensure_access
from app.services.store import DocumentStore

logger = logging.getLogger(__name__)

# Roles that may be chosen at self-signup; admins are created by the manage command
SELF_SIGNUP_ROLES = frozenset({UserRole.STUDENT, UserRole.EMPLOYER})


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def validate_profile(name: Optional[str], phone: Optional[str], role: UserRole, company: Optional[str]) -> dict:
    """
    Validate and normalize profile fields for a new user.

    Company is required for employers and dropped for everyone else.
    """
    profile = {
        "name": _clean(name),
        "phone": _clean(phone),
        "company": _clean(company) or None,
    }
    missing = [field for field in ("name", "phone") if not profile[field]]
    if role == UserRole.EMPLOYER and not profile["company"]:
        missing.append("company")
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}", fields=missing)

    if role != UserRole.EMPLOYER:
        profile["company"] = None
    return profile


async def create_user(
    store: DocumentStore,
    identity: Identity,
    role: UserRole,
    name: Optional[str],
    phone: Optional[str],
    company: Optional[str] = None,
) -> User:
    """Create the directory entry for an identity. The identity id is the record key."""
    profile = validate_profile(name, phone, role, company)
    try:
        now = utcnow()
        user = await store.create(
            User, uid=identity.uid, email=identity.email, role=role, created_at=now, updated_at=now, **profile
        )
    except StoreConflict:
        raise ConflictError(f"User {identity.uid} already exists")

    logger.info(f"Created {role.value} user {user.uid} ({user.email})")
    return user


async def _register_account(
    store: DocumentStore,
    email: str,
    password: str,
    role: UserRole,
    name: Optional[str],
    phone: Optional[str],
    company: Optional[str] = None,
) -> User:
    """
    Register credentials and create the matching directory entry.

    If the directory entry cannot be written the new credentials are removed
    again, so the email stays free and no identity exists without a role.
    """
    identity = await identity_provider.register(store, email, password)
    try:
        return await create_user(store, identity, role, name, phone, company)
    except (StoreError, ConflictError):
        logger.error(f"Directory entry for {identity.email} failed, removing identity {identity.uid}")
        await identity_provider.remove_identity(store, identity.uid)
        raise


async def get_user(store: DocumentStore, uid: str) -> Optional[User]:
    return await store.get(User, uid)


async def get_role(store: DocumentStore, uid: str) -> Optional[UserRole]:
    user = await store.get(User, uid)
    return user.role if user else None


async def signup(
    store: DocumentStore,
    email: str,
    password: str,
    role: Union[UserRole, str],
    name: Optional[str],
    phone: Optional[str],
    company: Optional[str] = None,
) -> User:
    """
    Self-signup: register credentials, then create the directory entry.

    Only student and employer accounts can be created this way.
    """
    try:
        role = role if isinstance(role, UserRole) else UserRole(str(role).strip().lower())
    except ValueError:
        raise ValidationError("Role must be student or employer", fields=["role"])
    if role not in SELF_SIGNUP_ROLES:
        raise ValidationError("Role must be student or employer", fields=["role"])

    # Validate the profile before creating credentials so a bad form leaves nothing behind
    validate_profile(name, phone, role, company)
    return await _register_account(store, email, password, role, name, phone, company)


async def list_users(store: DocumentStore, ctx: RequestContext) -> list[User]:
    """All users, newest first. Admin only."""
    ensure_access(ctx, Action.LIST_USERS)
    return await store.query(User, order_by="created_at")


async def create_employer(
    store: DocumentStore,
    ctx: RequestContext,
    email: str,
    password: str,
    name: Optional[str],
    phone: Optional[str],
    company: Optional[str],
) -> User:
    """Admin-created employer account, bypassing self-signup."""
    ensure_access(ctx, Action.CREATE_EMPLOYER)

    validate_profile(name, phone, UserRole.EMPLOYER, company)
    user = await _register_account(store, email, password, UserRole.EMPLOYER, name, phone, company)

    logger.info(f"Admin {ctx.uid} created employer account {user.uid} for {user.company}")
    return user


async def create_admin(
    store: DocumentStore,
    email: str,
    password: str,
    name: Optional[str],
    phone: Optional[str],
) -> User:
    """Bootstrap an admin account. Only reachable from the management command."""
    validate_profile(name, phone, UserRole.ADMIN, None)
    return await _register_account(store, email, password, UserRole.ADMIN, name, phone)


async def update_profile(store: DocumentStore, ctx: RequestContext, update_data: dict) -> User:
    """
    Update the caller's display name and/or phone.

    Role, email and company are not editable.
    """
    ensure_access(ctx, Action.UPDATE_PROFILE)

    updates = {}
    for field in ("name", "phone"):
        if field in update_data and update_data[field] is not None:
            value = _clean(update_data[field])
            if not value:
                raise ValidationError(f"{field} cannot be blank", fields=[field])
            updates[field] = value

    user = await store.update(User, ctx.uid, updates)
    if user is None:
        raise NotFoundError(f"User {ctx.uid} not found")

    logger.info(f"Profile updated for user {user.email}")
    return user

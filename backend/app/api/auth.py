"""
Authentication endpoints and request dependencies.

Sign-up, email/password login and logout. The session token is a signed
JWT carried in an httpOnly cookie (a Bearer header is accepted too).

Every request gets an explicit RequestContext (identity + role) built here;
routes gate on it with ``require(action)``.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Header, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from app.schemas.user import UserResponse
from app.services import identity as identity_provider
from app.services import user_directory
from app.services.access_policy import (
    ANONYMOUS,
    Action,
    Identity,
    RequestContext,
    ensure_access,
    landing_page,
)
from app.services.store import DocumentStore

logger = logging.getLogger(__name__)
router = APIRouter()

SESSION_COOKIE = "auth_token"


# Dependencies
async def get_store(db: AsyncSession = Depends(get_db)) -> DocumentStore:
    """Document store bound to this request's session."""
    return DocumentStore(db)


async def get_request_context(
    auth_token: Optional[str] = Cookie(None),
    authorization: Optional[str] = Header(None),
    store: DocumentStore = Depends(get_store),
) -> RequestContext:
    """
    Resolve the caller of this request.

    Missing, expired or tampered tokens yield an anonymous context rather
    than an error: public routes still work and gated routes redirect to
    sign-in.
    """
    token = auth_token
    if not token and authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()

    identity = identity_provider.resolve_session_token(token)
    if identity is None:
        return ANONYMOUS

    role = await user_directory.get_role(store, identity.uid)
    return RequestContext(identity=identity, role=role)


def require(action: Action):
    """
    Route-level gate.

    Example:
        @router.get("/admin/users")
        async def list_all_users(ctx: RequestContext = Depends(require(Action.LIST_USERS))):
            # Only admins get here
    """
    async def dependency(ctx: RequestContext = Depends(get_request_context)) -> RequestContext:
        ensure_access(ctx, action)
        return ctx

    return dependency


def get_client_ip(request: Request) -> str:
    """
    Extract client IP address from request.

    Checks X-Forwarded-For header (for proxies/load balancers) first,
    falls back to direct client IP.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # X-Forwarded-For can be comma-separated list, take first IP
        return forwarded.split(",")[0].strip()

    return request.client.host if request.client else "unknown"


def _start_session(response: Response, identity: Identity, name: Optional[str], role) -> AuthResponse:
    token = identity_provider.issue_session_token(identity)
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,  # Prevents JavaScript access (XSS protection)
        samesite="lax",  # CSRF protection
        max_age=settings.session_ttl_minutes * 60,
        secure=settings.secure_cookies,
    )
    return AuthResponse(
        access_token=token,
        user_id=identity.uid,
        email=identity.email,
        name=name,
        role=role.value if role else None,
        redirect_to=landing_page(role),
    )


# Endpoints
@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    request: RegisterRequest,
    response: Response,
    store: DocumentStore = Depends(get_store),
):
    """
    Self-signup as a student or employer. Signs the new user in.

    Returns:
        201: Account created, session cookie set
        409: Email already registered
        422: Missing profile fields or invalid role
    """
    user = await user_directory.signup(
        store,
        email=request.email,
        password=request.password,
        role=request.role,
        name=request.name,
        phone=request.phone,
        company=request.company,
    )
    identity = Identity(uid=user.uid, email=user.email)
    return _start_session(response, identity, user.name, user.role)


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: LoginRequest,
    request: Request,
    response: Response,
    store: DocumentStore = Depends(get_store),
):
    """
    Authenticate with email and password.

    Returns:
        200: Authenticated, session cookie set; ``redirectTo`` is the role's landing page
        401: Invalid credentials or account locked
    """
    identity = await identity_provider.authenticate(
        store, credentials.email, credentials.password, client_ip=get_client_ip(request)
    )
    user = await user_directory.get_user(store, identity.uid)
    return _start_session(
        response,
        identity,
        user.name if user else None,
        user.role if user else None,
    )


@router.post("/logout")
async def logout(
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
):
    """Logout by clearing the session cookie."""
    response.delete_cookie(
        key=SESSION_COOKIE,
        httponly=True,
        samesite="lax"
    )
    if ctx.is_authenticated:
        logger.info(f"User logged out: {ctx.identity.email}")
    return {"message": "Successfully logged out"}


@router.get("/me", response_model=UserResponse)
async def me(
    ctx: RequestContext = Depends(require(Action.VIEW_PROFILE)),
    store: DocumentStore = Depends(get_store),
):
    """The signed-in user's directory entry."""
    return await user_directory.get_user(store, ctx.uid)

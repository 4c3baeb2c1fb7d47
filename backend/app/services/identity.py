"""
Identity provider: credentials, login and session tokens.

Security features:
- bcrypt password hashes
- Account lockout after 5 failed attempts (30 min cooldown)
- IP address logging for audit trail
- Signed, expiring session tokens (HS256 JWT with the identity id as ``sub``)

The rest of the system only ever sees the ``Identity`` value returned here.
"""
import logging
import uuid
from datetime import timedelta
from typing import Optional

import bcrypt
import jwt

from app.config import settings
from app.database_types import utcnow
from app.errors import AuthError, ConflictError, StoreConflict, ValidationError
from app.models.user import Credential
from app.services.access_policy import Identity
from app.services.store import DocumentStore

logger = logging.getLogger(__name__)

# Security constants
MAX_FAILED_ATTEMPTS = 5
ACCOUNT_LOCK_MINUTES = 30
MIN_PASSWORD_LENGTH = 6
# bcrypt only hashes the first 72 bytes and newer releases refuse longer input
MAX_PASSWORD_BYTES = 72
BCRYPT_ROUNDS = 12
TOKEN_ALGORITHM = "HS256"


def hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def register(store: DocumentStore, email: str, password: str) -> Identity:
    """
    Create credentials for a new identity.

    Raises:
        ValidationError: If the email is blank or the password too short or too long
        ConflictError: If the email is already registered
    """
    email = normalize_email(email)
    if not email:
        raise ValidationError("Email is required", fields=["email"])
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
            fields=["password"],
        )
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(
            f"Password must be at most {MAX_PASSWORD_BYTES} bytes",
            fields=["password"],
        )

    existing = await store.query(Credential, {"email": email})
    if existing:
        raise ConflictError("Email already registered")

    try:
        credential = await store.create(
            Credential,
            uid=uuid.uuid4().hex,
            email=email,
            password_hash=hash_password(password),
        )
    except StoreConflict:
        # Lost a race with a concurrent registration for the same email
        raise ConflictError("Email already registered")

    logger.info(f"Registered identity {credential.uid} for {email}")
    return Identity(uid=credential.uid, email=credential.email)


async def remove_identity(store: DocumentStore, uid: str) -> bool:
    """Delete the credentials of an identity. Returns False if there were none."""
    removed = await store.delete(Credential, uid)
    if removed:
        logger.info(f"Removed identity {uid}")
    return removed


async def authenticate(
    store: DocumentStore,
    email: str,
    password: str,
    client_ip: Optional[str] = None,
) -> Identity:
    """
    Verify email and password.

    Raises:
        AuthError: On unknown email, wrong password or locked account. The
            message does not reveal which.
    """
    email = normalize_email(email)
    matches = await store.query(Credential, {"email": email})
    credential = matches[0] if matches else None

    if credential is None:
        logger.warning(f"Login attempt for unknown email from IP: {client_ip}")
        raise AuthError("Invalid email or password")

    if credential.is_account_locked():
        logger.warning(f"Login attempt on locked account: {email} from IP: {client_ip}")
        raise AuthError(
            f"Account temporarily locked. Try again after {credential.account_locked_until.isoformat()}"
        )

    if not verify_password(password or "", credential.password_hash):
        attempts = credential.failed_login_attempts + 1
        updates = {"failed_login_attempts": attempts}

        # Lock account after too many failed attempts
        if attempts >= MAX_FAILED_ATTEMPTS:
            updates["account_locked_until"] = utcnow() + timedelta(minutes=ACCOUNT_LOCK_MINUTES)
            logger.warning(f"Account locked due to {MAX_FAILED_ATTEMPTS} failed attempts: {email}")

        await store.update(Credential, credential.uid, updates)
        raise AuthError("Invalid email or password")

    await store.update(Credential, credential.uid, {
        "failed_login_attempts": 0,  # Reset failed attempts on successful login
        "account_locked_until": None,
        "last_login_at": utcnow(),
        "last_login_ip": client_ip,
    })

    logger.info(f"Successful login: {email} from IP: {client_ip}")
    return Identity(uid=credential.uid, email=credential.email)


def issue_session_token(identity: Identity, ttl_minutes: Optional[int] = None) -> str:
    ttl = ttl_minutes if ttl_minutes is not None else settings.session_ttl_minutes
    now = utcnow()
    payload = {
        "sub": identity.uid,
        "email": identity.email,
        "iat": now,
        "exp": now + timedelta(minutes=ttl),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=TOKEN_ALGORITHM)


def resolve_session_token(token: Optional[str]) -> Optional[Identity]:
    """
    Decode a session token.

    Returns None for missing, malformed, tampered or expired tokens; the
    caller is then treated as anonymous.
    """
    if not token:
        return None
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[TOKEN_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("Expired session token presented")
        return None
    except jwt.InvalidTokenError:
        logger.warning("Invalid session token presented")
        return None

    uid = payload.get("sub")
    if not uid:
        return None
    return Identity(uid=uid, email=payload.get("email", ""))

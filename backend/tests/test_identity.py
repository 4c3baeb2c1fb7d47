"""
Tests for the identity provider.

Covers registration, password login, lockout after repeated failures and
session token handling.
"""
from datetime import timedelta

import jwt
import pytest

from app.config import settings
from app.database_types import utcnow
from app.errors import AuthError, ConflictError, ValidationError
from app.models.user import Credential
from app.services import identity as identity_provider
from app.services.access_policy import Identity


@pytest.mark.asyncio
async def test_register_normalizes_email_and_hashes_password(store):
    identity = await identity_provider.register(store, "  New.User@Example.com ", "s3cret!")

    assert identity.email == "new.user@example.com"
    credential = await store.get(Credential, identity.uid)
    assert credential.password_hash != "s3cret!"
    assert identity_provider.verify_password("s3cret!", credential.password_hash)


@pytest.mark.asyncio
async def test_register_duplicate_email(store):
    await identity_provider.register(store, "dup@example.com", "s3cret!")

    with pytest.raises(ConflictError):
        await identity_provider.register(store, "DUP@example.com", "another!")


@pytest.mark.asyncio
async def test_register_rejects_short_password(store):
    with pytest.raises(ValidationError) as exc_info:
        await identity_provider.register(store, "short@example.com", "123")

    assert exc_info.value.fields == ["password"]


@pytest.mark.asyncio
async def test_register_rejects_password_over_bcrypt_limit(store):
    # 36 characters, 72 bytes: the longest password bcrypt accepts
    await identity_provider.register(store, "edge@example.com", "\u00e9" * 36)

    with pytest.raises(ValidationError) as exc_info:
        await identity_provider.register(store, "long@example.com", "x" * 80)

    assert exc_info.value.fields == ["password"]
    assert await store.query(Credential, {"email": "long@example.com"}) == []


@pytest.mark.asyncio
async def test_authenticate_success_records_login(store):
    registered = await identity_provider.register(store, "login@example.com", "s3cret!")

    identity = await identity_provider.authenticate(store, "login@example.com", "s3cret!", client_ip="10.0.0.1")

    assert identity == registered
    credential = await store.get(Credential, identity.uid)
    assert credential.last_login_ip == "10.0.0.1"
    assert credential.last_login_at is not None
    assert credential.failed_login_attempts == 0


@pytest.mark.asyncio
async def test_authenticate_unknown_email(store):
    with pytest.raises(AuthError) as exc_info:
        await identity_provider.authenticate(store, "nobody@example.com", "whatever")

    assert str(exc_info.value) == "Invalid email or password"


@pytest.mark.asyncio
async def test_account_locks_after_repeated_failures(store):
    identity = await identity_provider.register(store, "locked@example.com", "s3cret!")

    for _ in range(identity_provider.MAX_FAILED_ATTEMPTS):
        with pytest.raises(AuthError):
            await identity_provider.authenticate(store, "locked@example.com", "wrong-password")

    credential = await store.get(Credential, identity.uid)
    assert credential.failed_login_attempts == identity_provider.MAX_FAILED_ATTEMPTS
    assert credential.is_account_locked()

    # Correct password is refused while locked
    with pytest.raises(AuthError) as exc_info:
        await identity_provider.authenticate(store, "locked@example.com", "s3cret!")
    assert "locked" in str(exc_info.value)


@pytest.mark.asyncio
async def test_expired_lock_allows_login(store):
    identity = await identity_provider.register(store, "unlocked@example.com", "s3cret!")
    await store.update(Credential, identity.uid, {
        "failed_login_attempts": 5,
        "account_locked_until": utcnow() - timedelta(minutes=1),
    })

    await identity_provider.authenticate(store, "unlocked@example.com", "s3cret!")

    credential = await store.get(Credential, identity.uid)
    assert credential.failed_login_attempts == 0
    assert credential.account_locked_until is None


def test_session_token_round_trip():
    identity = Identity(uid="abc123", email="token@example.com")

    token = identity_provider.issue_session_token(identity)

    assert identity_provider.resolve_session_token(token) == identity


def test_expired_session_token_is_anonymous():
    identity = Identity(uid="abc123", email="token@example.com")
    token = identity_provider.issue_session_token(identity, ttl_minutes=-1)

    assert identity_provider.resolve_session_token(token) is None


def test_tampered_session_token_is_anonymous():
    forged = jwt.encode(
        {"sub": "abc123", "exp": utcnow() + timedelta(minutes=5)},
        settings.secret_key + "-wrong",
        algorithm="HS256",
    )

    assert identity_provider.resolve_session_token(forged) is None
    assert identity_provider.resolve_session_token("not-a-jwt") is None
    assert identity_provider.resolve_session_token(None) is None

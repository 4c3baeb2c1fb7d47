"""
Tests for the user directory service.
"""
import pytest

from app.errors import AuthorizationError, ConflictError, StoreError, ValidationError
from app.models.user import Credential, User, UserRole
from app.services import user_directory
from app.services.access_policy import ANONYMOUS


@pytest.mark.asyncio
async def test_signup_student(store):
    user = await user_directory.signup(
        store, "new@example.com", "s3cret!", "Student", name=" Nia ", phone="555-1000",
        company="Ignored Inc",
    )

    assert user.role == UserRole.STUDENT
    assert user.name == "Nia"
    # Company only exists on employer entries
    assert user.company is None
    assert await user_directory.get_role(store, user.uid) == UserRole.STUDENT


@pytest.mark.asyncio
async def test_signup_employer_requires_company(store):
    with pytest.raises(ValidationError) as exc_info:
        await user_directory.signup(
            store, "boss@example.com", "s3cret!", UserRole.EMPLOYER, name="Boss", phone="555-2000"
        )

    assert exc_info.value.fields == ["company"]
    # Nothing is left behind by a rejected form
    assert await store.query(Credential, {"email": "boss@example.com"}) == []


@pytest.mark.asyncio
async def test_signup_missing_profile_fields(store):
    with pytest.raises(ValidationError) as exc_info:
        await user_directory.signup(store, "x@example.com", "s3cret!", "student", name="", phone=None)

    assert set(exc_info.value.fields) == {"name", "phone"}


@pytest.mark.asyncio
@pytest.mark.parametrize("role", ["admin", "ADMIN", "superuser"])
async def test_signup_cannot_choose_admin_or_unknown_role(store, role):
    with pytest.raises(ValidationError) as exc_info:
        await user_directory.signup(store, "x@example.com", "s3cret!", role, name="X", phone="555")

    assert exc_info.value.fields == ["role"]


@pytest.mark.asyncio
async def test_signup_duplicate_email(store, student):
    with pytest.raises(ConflictError):
        await user_directory.signup(
            store, student.email, "s3cret!", "student", name="Twin", phone="555-0000"
        )


@pytest.mark.asyncio
async def test_failed_directory_write_removes_credentials(store, monkeypatch):
    create = store.create

    async def create_without_users(model, **fields):
        if model is User:
            raise StoreError("Store create users failed")
        return await create(model, **fields)

    monkeypatch.setattr(store, "create", create_without_users)
    with pytest.raises(StoreError):
        await user_directory.signup(store, "retry@example.com", "s3cret!", "student", name="Retry", phone="555-0000")
    monkeypatch.undo()

    assert await store.query(Credential, {"email": "retry@example.com"}) == []

    # The email is free again
    user = await user_directory.signup(store, "retry@example.com", "s3cret!", "student", name="Retry", phone="555-0000")
    assert user.role == UserRole.STUDENT


@pytest.mark.asyncio
async def test_list_users_admin_only(store, ctx_for, student, employer, admin):
    users = await user_directory.list_users(store, ctx_for(admin))
    assert {user.uid for user in users} == {student.uid, employer.uid, admin.uid}

    with pytest.raises(AuthorizationError):
        await user_directory.list_users(store, ctx_for(student))
    with pytest.raises(AuthorizationError):
        await user_directory.list_users(store, ANONYMOUS)


@pytest.mark.asyncio
async def test_admin_creates_employer(store, ctx_for, admin):
    user = await user_directory.create_employer(
        store, ctx_for(admin), "hr@example.com", "s3cret!", name="HR", phone="555-3000",
        company="Acme",
    )

    assert user.role == UserRole.EMPLOYER
    assert user.company == "Acme"
    # The new account can sign in
    assert await store.query(Credential, {"email": "hr@example.com"})


@pytest.mark.asyncio
async def test_employer_cannot_create_employer(store, ctx_for, employer):
    with pytest.raises(AuthorizationError):
        await user_directory.create_employer(
            store, ctx_for(employer), "hr@example.com", "s3cret!", name="HR", phone="555",
            company="Acme",
        )


@pytest.mark.asyncio
async def test_update_profile_name_and_phone_only(store, ctx_for, employer):
    updated = await user_directory.update_profile(
        store, ctx_for(employer), {"name": "Erin E.", "role": "admin", "company": "Other"}
    )

    assert updated.name == "Erin E."
    assert updated.phone == employer.phone
    assert updated.role == UserRole.EMPLOYER
    assert updated.company == "Cafe X"


@pytest.mark.asyncio
async def test_update_profile_rejects_blank(store, ctx_for, student):
    with pytest.raises(ValidationError):
        await user_directory.update_profile(store, ctx_for(student), {"phone": "   "})

    reloaded = await store.get(User, student.uid)
    assert reloaded.phone == "555-0101"

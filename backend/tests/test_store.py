"""
Tests for the document store wrapper.

Checks CRUD, equality queries, and the translation of driver failures into
StoreError / StoreConflict / StoreTimeout.
"""
import asyncio

import pytest
from sqlalchemy.exc import OperationalError

from app.errors import StoreConflict, StoreError, StoreTimeout
from app.models.application import Application
from app.models.job import Job
from app.models.user import Credential, User, UserRole
from app.services.store import DocumentStore


@pytest.mark.asyncio
async def test_create_get_update_delete(store, backdate):
    user = await store.create(
        User, uid="u1", email="u1@example.com", name="One", phone="555", role="STUDENT"
    )
    # Role is normalized at write time
    assert user.role == UserRole.STUDENT
    before = await backdate(User, "u1")

    updated = await store.update(User, "u1", {"name": "Uno"})
    assert updated.name == "Uno"
    assert updated.updated_at > before

    assert await store.delete(User, "u1") is True
    assert await store.get(User, "u1") is None
    assert await store.delete(User, "u1") is False
    assert await store.update(User, "u1", {"name": "Ghost"}) is None


@pytest.mark.asyncio
async def test_query_filters_and_orders(store):
    for uid, role in (("a", UserRole.STUDENT), ("b", UserRole.EMPLOYER), ("c", UserRole.STUDENT)):
        await store.create(
            User, uid=uid, email=f"{uid}@example.com", name=uid, phone="555", role=role,
            company="Co" if role == UserRole.EMPLOYER else None,
        )

    students = await store.query(User, {"role": UserRole.STUDENT}, order_by="created_at")
    oldest_first = await store.query(User, order_by="created_at", descending=False)

    assert [user.uid for user in students] == ["c", "a"]
    assert [user.uid for user in oldest_first] == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_unique_violation_raises_store_conflict(store):
    await store.create(Credential, uid="c1", email="same@example.com", password_hash="x")

    with pytest.raises(StoreConflict):
        await store.create(Credential, uid="c2", email="same@example.com", password_hash="y")

    # Session is usable again after the rollback
    assert len(await store.query(Credential, {"email": "same@example.com"})) == 1


@pytest.mark.asyncio
async def test_slow_round_trip_raises_store_timeout(db):
    store = DocumentStore(db, timeout=0.01)

    with pytest.raises(StoreTimeout):
        await store._run("get users", asyncio.sleep(1))


@pytest.mark.asyncio
async def test_driver_failure_raises_store_error(store, monkeypatch):
    async def broken_execute(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    monkeypatch.setattr(store.db, "execute", broken_execute)

    with pytest.raises(StoreError) as exc_info:
        await store.query(User)

    assert not isinstance(exc_info.value, (StoreConflict, StoreTimeout))


async def _job_with_applications(store, count: int) -> str:
    await store.create(User, uid="e1", email="e1@example.com", name="Emp", phone="555", role="employer", company="Cafe X")
    job = await store.create(
        Job, employer_id="e1", title="Barista", company="Cafe X", location="Downtown",
        description="Coffee", requirements=[], salary="$18/hr", employment_type="part-time",
    )
    job_id = job.id
    for n in range(count):
        await store.create(User, uid=f"s{n}", email=f"s{n}@example.com", name="Stu", phone="555", role="student")
        await store.create(Application, job_id=job_id, student_id=f"s{n}", employer_id="e1", resume="cv.pdf")
    return job_id


@pytest.mark.asyncio
async def test_delete_cascade_removes_dependents(store):
    job_id = await _job_with_applications(store, 2)

    removed = await store.delete_cascade(Job, job_id, [(Application, "job_id")])

    assert removed == 2
    assert await store.get(Job, job_id) is None
    assert await store.query(Application, {"job_id": job_id}) == []
    assert await store.delete_cascade(Job, job_id, [(Application, "job_id")]) is None


@pytest.mark.asyncio
async def test_failed_delete_cascade_keeps_everything(store, monkeypatch):
    job_id = await _job_with_applications(store, 2)

    async def broken_commit():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(store.db, "commit", broken_commit)
    with pytest.raises(StoreError):
        await store.delete_cascade(Job, job_id, [(Application, "job_id")])
    monkeypatch.undo()

    assert await store.get(Job, job_id) is not None
    assert len(await store.query(Application, {"job_id": job_id})) == 2

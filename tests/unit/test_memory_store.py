"""In-memory store and repository tests (copy semantics, subscriptions, paging)."""

from datetime import timedelta

import pytest

from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.infrastructure.memory import (
    InMemoryBlobStore,
    InMemoryStore,
    InMemoryTaskRepository,
    InMemoryUserRepository,
)
from tests.factories import CREATED, make_task, make_user


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


async def test_reads_are_copies(store: InMemoryStore) -> None:
    repo = InMemoryTaskRepository(store)
    await repo.create(make_task())
    loaded = await repo.get_by_id("t1")
    loaded.title = "changed"
    assert (await repo.get_by_id("t1")).title == "Task t1"


async def test_update_writes_only_named_fields(store: InMemoryStore) -> None:
    repo = InMemoryTaskRepository(store)
    await repo.create(make_task())
    edited = await repo.get_by_id("t1")
    edited.title = "New title"
    edited.description = "Not written"
    await repo.update(edited, {"title"})
    stored = await repo.get_by_id("t1")
    assert stored.title == "New title"
    assert stored.description == "Prepare the station"


async def test_duplicate_create_and_missing_update(store: InMemoryStore) -> None:
    repo = InMemoryTaskRepository(store)
    await repo.create(make_task())
    with pytest.raises(ValidationException):
        await repo.create(make_task())
    with pytest.raises(ResourceNotFoundException):
        await repo.update(make_task("ghost"), {"title"})
    assert await repo.delete("t1") is True
    assert await repo.delete("t1") is False


async def test_subscription_delivers_initial_and_later_snapshots(store: InMemoryStore) -> None:
    repo = InMemoryTaskRepository(store)
    await repo.create(make_task("t1"))
    snapshots: list[list[str]] = []
    subscription = repo.subscribe(lambda tasks: snapshots.append([t.id for t in tasks]))
    await repo.create(make_task("t2", created=CREATED + timedelta(hours=1)))
    subscription.cancel()
    subscription.cancel()
    await repo.create(make_task("t3"))
    assert snapshots == [["t1"], ["t2", "t1"]]
    assert subscription.active is False


async def test_failing_listener_does_not_break_writes(store: InMemoryStore) -> None:
    repo = InMemoryUserRepository(store)

    def explode(_users):
        if _users:
            raise RuntimeError("listener bug")

    repo.subscribe(explode)
    await repo.create(make_user("u1"))
    assert await repo.get_by_email("u1@example.com") is not None


async def test_unknown_cursor_is_not_found(store: InMemoryStore) -> None:
    repo = InMemoryTaskRepository(store)
    with pytest.raises(ResourceNotFoundException):
        await repo.list_page(10, "missing")


async def test_due_window_is_half_open(store: InMemoryStore) -> None:
    repo = InMemoryTaskRepository(store)
    start = CREATED
    await repo.create(make_task("at-start", due=start))
    await repo.create(make_task("at-end", due=start + timedelta(minutes=30)))
    due = await repo.list_due_between(start, start + timedelta(minutes=30))
    assert [t.id for t in due] == ["at-end"]


async def test_users_sorted_by_name_and_filtered(store: InMemoryStore) -> None:
    repo = InMemoryUserRepository(store)
    await repo.create(make_user("b", name="Bình", dept="FOH"))
    await repo.create(make_user("a", name="An"))
    assert [u.id for u in await repo.list_users()] == ["a", "b"]
    assert [u.id for u in await repo.list_users(dept="FOH")] == ["b"]


async def test_blob_store() -> None:
    blobs = InMemoryBlobStore()
    url = await blobs.upload("tasks/t1/a.txt", b"hi", "text/plain")
    assert url == "memory://tasks/t1/a.txt"
    await blobs.delete("tasks/t1/a.txt")
    await blobs.delete("tasks/t1/a.txt")
    assert blobs.objects == {}

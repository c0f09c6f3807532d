"""Firestore repositories over a scripted REST server."""

import json
from datetime import UTC, datetime, timedelta

import httpx
import pytest

from app.domain.entities.notification import NotificationEntity
from app.domain.entities.task import TaskAssignee
from app.domain.enums import NotificationType, TaskStatus
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.infrastructure.firebase._rest_client import FirestoreRESTClient
from app.infrastructure.firebase._rest_encoding import encode_fields
from app.infrastructure.firebase.mappers import notification_to_doc, task_to_doc, user_to_doc
from app.infrastructure.firebase.repositories import (
    FirestoreNotificationRepository,
    FirestoreTaskRepository,
    FirestoreUserRepository,
)
from tests.factories import CREATED, DUE, make_task, make_user
from tests.firebase_fakes import DOCUMENTS, FakeServer, document, query_results


def task_document(task) -> dict:
    return document("tasks", task.id, encode_fields(task_to_doc(task)))


def structured_query(request: httpx.Request) -> dict:
    return json.loads(request.content)["structuredQuery"]


async def test_task_survives_document_mapping(
    firestore: FirestoreRESTClient, server: FakeServer
) -> None:
    task = make_task(
        "t1",
        assignees=[
            TaskAssignee("u1", 2.0, is_completed=True),
            TaskAssignee("u2", 1.5, notes="plate"),
        ],
        tags=["kitchen"],
    )
    server.handler = lambda request: httpx.Response(200, json=task_document(task))

    loaded = await FirestoreTaskRepository(firestore).get_by_id("t1")

    assert loaded.id == "t1"
    assert loaded.responsible == "u1"
    assert loaded.is_sequential is True
    assert loaded.assignees == task.assignees
    assert loaded.due == DUE
    assert loaded.created == CREATED
    assert loaded.tags == ["kitchen"]
    assert loaded.status == TaskStatus.TODO


async def test_task_timestamps_are_stored_as_iso_z_strings(
    firestore: FirestoreRESTClient, server: FakeServer
) -> None:
    await FirestoreTaskRepository(firestore).create(make_task("t1"))

    fields = json.loads(server.last.content)["fields"]
    assert fields["due"] == {"stringValue": "2024-01-10T10:00:00.000Z"}
    assert fields["isSequential"] == {"booleanValue": False}


async def test_duplicate_create_raises_validation_error(
    firestore: FirestoreRESTClient, server: FakeServer
) -> None:
    server.handler = lambda request: httpx.Response(409, json={})
    with pytest.raises(ValidationException):
        await FirestoreTaskRepository(firestore).create(make_task("t1"))


async def test_update_writes_only_named_fields(
    firestore: FirestoreRESTClient, server: FakeServer
) -> None:
    task = make_task("t1", status=TaskStatus.DONE)
    task.progress = 100

    await FirestoreTaskRepository(firestore).update(task, {"status", "progress"})

    request = server.last
    assert request.method == "PATCH"
    assert set(request.url.params.get_list("updateMask.fieldPaths")) == {"status", "progress"}
    assert json.loads(request.content)["fields"] == {
        "status": {"stringValue": "Done"},
        "progress": {"integerValue": "100"},
    }


async def test_update_with_no_fields_sends_nothing(
    firestore: FirestoreRESTClient, server: FakeServer
) -> None:
    await FirestoreTaskRepository(firestore).update(make_task("t1"), set())
    assert server.requests == []


async def test_update_of_missing_task_raises_not_found(
    firestore: FirestoreRESTClient, server: FakeServer
) -> None:
    server.handler = lambda request: httpx.Response(404, json={})
    with pytest.raises(ResourceNotFoundException):
        await FirestoreTaskRepository(firestore).update(make_task("gone"), {"title"})


async def test_delete_missing_task_returns_false(
    firestore: FirestoreRESTClient, server: FakeServer
) -> None:
    server.handler = lambda request: httpx.Response(404, json={})
    assert await FirestoreTaskRepository(firestore).delete("gone") is False
    assert [r.method for r in server.requests] == ["GET"]


async def test_delete_existing_task(firestore: FirestoreRESTClient, server: FakeServer) -> None:
    task = make_task("t1")
    server.handler = lambda request: httpx.Response(
        200, json=task_document(task) if request.method == "GET" else {}
    )
    assert await FirestoreTaskRepository(firestore).delete("t1") is True
    assert [r.method for r in server.requests] == ["GET", "DELETE"]


async def test_list_tasks_filters_server_side_and_sorts_newest_first(
    firestore: FirestoreRESTClient, server: FakeServer
) -> None:
    older = make_task("t1", created=CREATED)
    newer = make_task("t2", created=CREATED + timedelta(hours=1))
    server.handler = lambda request: httpx.Response(
        200, json=query_results(task_document(older), task_document(newer))
    )

    tasks = await FirestoreTaskRepository(firestore).list_tasks(dept="BOH", status="To Do")

    assert [t.id for t in tasks] == ["t2", "t1"]
    filters = structured_query(server.last)["where"]["compositeFilter"]["filters"]
    assert [f["fieldFilter"]["field"]["fieldPath"] for f in filters] == ["dept", "status"]


async def test_list_page_starts_after_cursor_task(
    firestore: FirestoreRESTClient, server: FakeServer
) -> None:
    anchor = make_task("t3", created=CREATED + timedelta(hours=2))
    rest = [make_task(f"t{i}", created=CREATED - timedelta(hours=i)) for i in (4, 5, 6)]

    def handle(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json=task_document(anchor))
        return httpx.Response(200, json=query_results(*(task_document(t) for t in rest)))

    server.handler = handle
    page, has_more = await FirestoreTaskRepository(firestore).list_page(2, cursor="t3")

    assert [t.id for t in page] == ["t4", "t5"]
    assert has_more is True
    query = structured_query(server.last)
    assert query["limit"] == 3
    assert query["orderBy"] == [{"field": {"fieldPath": "created"}, "direction": "DESCENDING"}]
    assert query["startAt"]["values"] == [{"stringValue": "2024-01-09T10:00:00.000Z"}]


async def test_list_page_with_unknown_cursor_raises(
    firestore: FirestoreRESTClient, server: FakeServer
) -> None:
    server.handler = lambda request: httpx.Response(404, json={})
    with pytest.raises(ResourceNotFoundException):
        await FirestoreTaskRepository(firestore).list_page(2, cursor="missing")


async def test_list_due_between_queries_string_range(
    firestore: FirestoreRESTClient, server: FakeServer
) -> None:
    server.handler = lambda request: httpx.Response(200, json=query_results())
    start = datetime(2024, 1, 10, tzinfo=UTC)

    assert await FirestoreTaskRepository(firestore).list_due_between(
        start, start + timedelta(days=1)
    ) == []

    filters = structured_query(server.last)["where"]["compositeFilter"]["filters"]
    assert [f["fieldFilter"]["value"] for f in filters] == [
        {"stringValue": "2024-01-10T00:00:00.000Z"},
        {"stringValue": "2024-01-11T00:00:00.000Z"},
    ]


async def test_user_lookup_by_email_limits_to_one(
    firestore: FirestoreRESTClient, server: FakeServer
) -> None:
    user = make_user("u1", permissions={"view_tasks", "admin"})
    server.handler = lambda request: httpx.Response(
        200, json=query_results(document("users", "u1", encode_fields(user_to_doc(user))))
    )

    found = await FirestoreUserRepository(firestore).get_by_email("u1@example.com")

    assert found.id == "u1"
    assert found.permissions == {"view_tasks", "admin"}
    assert structured_query(server.last)["limit"] == 1


def _notification(notification_id: str, minutes: int) -> NotificationEntity:
    return NotificationEntity(
        id=notification_id,
        user_id="u1",
        title="New task",
        message="You were assigned",
        type=NotificationType.ASSIGNMENT,
        created_at=CREATED + timedelta(minutes=minutes),
        task_id="t1",
    )


def _notification_document(notification: NotificationEntity) -> dict:
    return document(
        "notifications", notification.id, encode_fields(notification_to_doc(notification))
    )


async def test_notifications_listed_newest_first(
    firestore: FirestoreRESTClient, server: FakeServer
) -> None:
    server.handler = lambda request: httpx.Response(
        200,
        json=query_results(
            _notification_document(_notification("n1", 0)),
            _notification_document(_notification("n2", 5)),
        ),
    )
    items = await FirestoreNotificationRepository(firestore).list_for_user("u1")
    assert [n.id for n in items] == ["n2", "n1"]
    assert items[0].type == NotificationType.ASSIGNMENT


async def test_mark_all_read_commits_one_batch(
    firestore: FirestoreRESTClient, server: FakeServer
) -> None:
    def handle(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith(":runQuery"):
            return httpx.Response(
                200,
                json=query_results(
                    _notification_document(_notification("n1", 0)),
                    _notification_document(_notification("n2", 5)),
                ),
            )
        return httpx.Response(200, json={"writeResults": []})

    server.handler = handle
    read_at = CREATED + timedelta(hours=1)

    assert await FirestoreNotificationRepository(firestore).mark_all_read("u1", read_at) == 2

    commit = server.last
    assert commit.url.path.endswith(f"{DOCUMENTS}:commit")
    writes = json.loads(commit.content)["writes"]
    assert [w["update"]["name"].rsplit("/", 1)[-1] for w in writes] == ["n1", "n2"]
    assert writes[0]["update"]["fields"]["isRead"] == {"booleanValue": True}


async def test_mark_read_of_missing_notification_raises(
    firestore: FirestoreRESTClient, server: FakeServer
) -> None:
    server.handler = lambda request: httpx.Response(404, json={})
    with pytest.raises(ResourceNotFoundException):
        await FirestoreNotificationRepository(firestore).mark_read("gone", CREATED)

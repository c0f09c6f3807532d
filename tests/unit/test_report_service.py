"""ReportService aggregation tests."""

from datetime import UTC, datetime, timedelta

from app.application.services.report_service import ReportService, is_completed_on_time
from app.domain.enums import TaskStatus
from app.infrastructure.backend import build_memory_backend
from tests.factories import DUE, make_task, make_user

NOW = datetime(2024, 1, 10, 12, 0, tzinfo=UTC)

TASKS = [
    make_task("t1", responsible="A", status=TaskStatus.DONE, completed_at=DUE - timedelta(hours=1)),
    make_task("t2", responsible="A", status=TaskStatus.DONE, completed_at=DUE + timedelta(hours=1)),
    make_task("t3", responsible="A", status=TaskStatus.IN_PROGRESS),
    make_task("t4", responsible="B", status=TaskStatus.OVERDUE, dept="FOH"),
]
USERS = [make_user("A", name="Alice"), make_user("B", name="Bob", dept="FOH"), make_user("C")]


def _service() -> ReportService:
    return ReportService(build_memory_backend().tasks)


def test_statistics() -> None:
    stats = _service().compute_statistics(TASKS)
    assert (stats.total, stats.completed, stats.in_progress, stats.todo, stats.overdue) == (
        4,
        2,
        1,
        0,
        1,
    )
    assert stats.completion_rate == 50
    assert stats.department_stats["BOH"].total == 3
    assert stats.department_stats["FOH"].overdue == 1


def test_statistics_of_empty_list() -> None:
    stats = _service().compute_statistics([])
    assert stats.total == 0
    assert stats.completion_rate == 0


async def test_task_statistics_reads_repository() -> None:
    backend = build_memory_backend()
    for task in TASKS:
        await backend.tasks.create(task)
    stats = await ReportService(backend.tasks).task_statistics(dept="FOH")
    assert stats.total == 1
    assert stats.overdue == 1


def test_on_time_uses_completion_time() -> None:
    assert is_completed_on_time(TASKS[0], NOW) is True
    assert is_completed_on_time(TASKS[1], NOW) is False
    assert is_completed_on_time(TASKS[2], NOW) is False
    legacy = make_task(status=TaskStatus.DONE, due=NOW + timedelta(days=1))
    assert is_completed_on_time(legacy, NOW) is True


def test_user_performance_skips_users_without_tasks() -> None:
    rows = _service().user_performance(USERS, TASKS, NOW)
    assert [r.user_id for r in rows] == ["A", "B"]
    alice = rows[0]
    assert (alice.total, alice.completed, alice.completion_rate) == (3, 2, 67)
    assert (alice.on_time, alice.on_time_rate) == (1, 33)


def test_department_performance() -> None:
    rows = _service().department_performance(USERS, TASKS)
    assert [(r.name, r.total, r.completed, r.overdue) for r in rows] == [
        ("BOH", 3, 2, 0),
        ("FOH", 1, 0, 1),
    ]


def test_status_distribution_includes_zero_counts() -> None:
    counts = _service().status_distribution(TASKS)
    assert [(c.status, c.count) for c in counts] == [
        ("To Do", 0),
        ("In Progress", 1),
        ("Done", 2),
        ("Overdue", 1),
    ]


def test_dashboard_stats() -> None:
    user = make_user("boss")
    upcoming_task = make_task("soon", responsible="boss", due=NOW + timedelta(hours=2))
    far_task = make_task("far", due=NOW + timedelta(days=3))
    stats = _service().dashboard_stats(user, [*TASKS, upcoming_task, far_task], NOW)
    assert [t.id for t in stats.upcoming] == ["soon"]
    assert stats.my_open_tasks == 4
    assert stats.pending_approvals == 2

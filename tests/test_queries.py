from __future__ import annotations

from datetime import datetime, timezone

import pytest

from taskboard.models import Task
from taskboard.queries import TaskStats, calculate_task_stats, filter_tasks, sort_tasks


def _task(task_id: str, title: str, description: str, completed: bool, day: int) -> Task:
    stamp = datetime(2024, 1, day, 10, 0, tzinfo=timezone.utc)
    return Task(
        id=task_id,
        title=title,
        description=description,
        completed=completed,
        created_at=stamp,
        updated_at=stamp,
    )


TASKS = [
    _task("1", "Task 1", "First task description", False, 1),
    _task("2", "Task 2", "Second task description", True, 2),
    _task("3", "Buy milk", "Go to the supermarket", False, 3),
]


def test_filter_all_returns_everything_in_order() -> None:
    assert filter_tasks(TASKS, "all") == TASKS


@pytest.mark.parametrize("status_filter", ["all", "pending", "completed", "bogus", None])
def test_filter_only_returns_matching_status(status_filter) -> None:
    result = filter_tasks(TASKS, status_filter)
    for task in result:
        if status_filter == "completed":
            assert task.completed
        elif status_filter == "pending":
            assert not task.completed
    if status_filter not in ("pending", "completed"):
        assert result == TASKS


def test_filter_pending_and_completed_counts() -> None:
    assert [t.id for t in filter_tasks(TASKS, "pending")] == ["1", "3"]
    assert [t.id for t in filter_tasks(TASKS, "completed")] == ["2"]


def test_search_is_case_insensitive_over_title_and_description() -> None:
    assert [t.id for t in filter_tasks(TASKS, "all", "MILK")] == ["3"]
    assert [t.id for t in filter_tasks(TASKS, "all", "supermarket")] == ["3"]


def test_search_combines_with_status() -> None:
    assert filter_tasks(TASKS, "completed", "milk") == []
    assert [t.id for t in filter_tasks(TASKS, "pending", "task")] == ["1"]


def test_blank_search_term_is_ignored() -> None:
    assert filter_tasks(TASKS, "all", "   ") == TASKS


@pytest.mark.parametrize("invalid", [None, "not-a-list", 42, {"id": "1"}])
def test_filter_invalid_input_returns_empty(invalid) -> None:
    assert filter_tasks(invalid, "all") == []


def test_filter_does_not_modify_input() -> None:
    tasks = list(TASKS)
    filter_tasks(tasks, "completed", "task")
    assert tasks == TASKS


def test_stats() -> None:
    stats = calculate_task_stats(TASKS)
    assert stats == TaskStats(total=3, pending=2, completed=1)
    assert stats.pending + stats.completed == stats.total
    assert stats.as_dict() == {"total": 3, "pending": 2, "completed": 1}


@pytest.mark.parametrize("invalid", [None, "tasks", 7])
def test_stats_for_invalid_input_are_zero(invalid) -> None:
    assert calculate_task_stats(invalid) == TaskStats(0, 0, 0)


def test_stats_for_empty_collection() -> None:
    assert calculate_task_stats([]) == TaskStats(0, 0, 0)


def test_sort_by_created_at_desc_is_default() -> None:
    assert [t.id for t in sort_tasks(TASKS)] == ["3", "2", "1"]
    assert [t.id for t in sort_tasks(TASKS, "createdAt", "asc")] == ["1", "2", "3"]


def test_sort_by_title_is_case_insensitive() -> None:
    tasks = [*TASKS, _task("4", "apple", "", False, 4)]
    assert [t.title for t in sort_tasks(tasks, "title", "asc")] == ["apple", "Buy milk", "Task 1", "Task 2"]


def test_sort_by_status_breaks_ties_by_id() -> None:
    assert [t.id for t in sort_tasks(TASKS, "status", "asc")] == ["1", "3", "2"]
    assert [t.id for t in sort_tasks(TASKS, "status", "desc")] == ["2", "3", "1"]


def test_sort_returns_new_list_and_handles_invalid_input() -> None:
    tasks = list(TASKS)
    result = sort_tasks(tasks, "title", "asc")
    assert result is not tasks
    assert tasks == TASKS
    assert sort_tasks(None) == []
    assert [t.id for t in sort_tasks(TASKS, "unknown", "sideways")] == ["3", "2", "1"]

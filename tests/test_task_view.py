"""Search/filter/sort projection tests over plain task payloads."""

from __future__ import annotations

from datetime import date

import pytest

from taskhub.services.task_view import (
    TaskFilters,
    derive_view,
    filter_tasks,
    group_by_status,
    search_tasks,
    sort_tasks,
)


def _task(task_id, title, status="TODO", priority="NONE", **extra):
    return {
        "id": task_id,
        "title": title,
        "description": extra.get("description"),
        "status": status,
        "priority": priority,
        "due_date": extra.get("due_date"),
        "created_at": extra.get("created_at", "2026-01-01T00:00:00Z"),
        "assignee": extra.get("assignee"),
        "tags": extra.get("tags", []),
    }


@pytest.fixture
def tasks():
    return [
        _task(
            "t1", "Write launch post", "TODO", "HIGH",
            due_date="2026-02-10T12:00:00Z", created_at="2026-01-01T09:00:00Z",
            tags=[{"id": "g1", "name": "Marketing"}],
        ),
        _task(
            "t2", "Fix login bug", "IN_PROGRESS", "MEDIUM",
            description="Users see a blank page after SSO",
            created_at="2026-01-03T09:00:00Z",
            assignee={"id": "m1", "user_id": "user_ada", "role": "MEMBER"},
        ),
        _task(
            "t3", "archive old tickets", "DONE", "NONE",
            due_date="2026-02-01", created_at="2026-01-02T09:00:00Z",
            tags=[{"id": "g2", "name": "Chores"}],
        ),
    ]


class TestSearch:
    def test_blank_query_returns_everything(self, tasks):
        assert search_tasks(tasks, "  ") == tasks
        assert search_tasks(tasks, None) == tasks

    def test_matches_title_case_insensitively(self, tasks):
        assert [t["id"] for t in search_tasks(tasks, "LOGIN")] == ["t2"]

    def test_matches_description_and_tag_names(self, tasks):
        assert [t["id"] for t in search_tasks(tasks, "sso")] == ["t2"]
        assert [t["id"] for t in search_tasks(tasks, "chores")] == ["t3"]


class TestFilter:
    def test_no_filters_keeps_all(self, tasks):
        assert filter_tasks(tasks, TaskFilters()) == tasks

    def test_or_within_kind(self, tasks):
        result = filter_tasks(tasks, TaskFilters(status={"TODO", "DONE"}))
        assert [t["id"] for t in result] == ["t1", "t3"]

    def test_and_across_kinds(self, tasks):
        result = filter_tasks(tasks, TaskFilters(status={"TODO", "DONE"}, tags={"g2"}))
        assert [t["id"] for t in result] == ["t3"]

    def test_priority_filter_never_matches_none(self, tasks):
        result = filter_tasks(tasks, TaskFilters(priority={"NONE", "HIGH"}))
        assert [t["id"] for t in result] == ["t1"]

    def test_assignee_filter_uses_user_id(self, tasks):
        result = filter_tasks(tasks, TaskFilters(assignee={"user_ada"}))
        assert [t["id"] for t in result] == ["t2"]

    def test_date_range_is_inclusive_and_requires_due_date(self, tasks):
        result = filter_tasks(
            tasks, TaskFilters(due_from=date(2026, 2, 1), due_to=date(2026, 2, 10))
        )
        assert [t["id"] for t in result] == ["t1", "t3"]

        open_ended = filter_tasks(tasks, TaskFilters(due_from=date(2026, 2, 5)))
        assert [t["id"] for t in open_ended] == ["t1"]

    def test_active_count(self):
        filters = TaskFilters(status={"TODO"}, tags={"a", "b"}, due_to=date(2026, 1, 1))
        assert filters.active_count() == 4
        assert TaskFilters().is_empty() is True


class TestSort:
    def test_created_at_descending_by_default(self, tasks):
        assert [t["id"] for t in sort_tasks(tasks)] == ["t2", "t3", "t1"]

    def test_due_date_puts_missing_last_in_both_directions(self, tasks):
        assert [t["id"] for t in sort_tasks(tasks, "due_date", descending=False)] == ["t3", "t1", "t2"]
        assert [t["id"] for t in sort_tasks(tasks, "due_date", descending=True)] == ["t1", "t3", "t2"]

    def test_priority_ranks_high_first(self, tasks):
        assert [t["id"] for t in sort_tasks(tasks, "priority")] == ["t1", "t2", "t3"]

    def test_title_is_case_insensitive(self, tasks):
        ordered = sort_tasks(tasks, "title", descending=False)
        assert [t["id"] for t in ordered] == ["t3", "t2", "t1"]

    def test_unknown_key_raises(self, tasks):
        with pytest.raises(ValueError):
            sort_tasks(tasks, "colour")


class TestDeriveAndGroup:
    def test_derive_view_combines_search_filter_and_sort(self, tasks):
        view = derive_view(tasks, "o", TaskFilters(status={"TODO", "IN_PROGRESS"}), "title", False)
        assert [t["id"] for t in view] == ["t2", "t1"]

    def test_derive_view_does_not_mutate_input(self, tasks):
        before = [t["id"] for t in tasks]
        derive_view(tasks, "", None, "priority")
        assert [t["id"] for t in tasks] == before

    def test_group_by_status_has_all_columns_in_board_order(self, tasks):
        columns = group_by_status(tasks[:1])
        assert list(columns) == ["TODO", "IN_PROGRESS", "DONE"]
        assert [t["id"] for t in columns["TODO"]] == ["t1"]
        assert columns["DONE"] == []

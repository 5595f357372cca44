"""Client-side board state: the fetched task list plus search/filter/sort settings.

The visible list and kanban columns are derived from scratch on every call,
never cached. Mutations that the user expects to feel instant (moving a card,
deleting a card) are applied locally first and rolled back to the previous
snapshot if the server rejects them.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from taskhub.client.api_client import TaskHubClient
from taskhub.services.task_view import (
    DEFAULT_SORT,
    TaskFilters,
    derive_view,
    group_by_status,
)

logger = logging.getLogger(__name__)

FILTER_KINDS = ("status", "priority", "assignee", "tags")


class BoardStore:
    def __init__(self, client: TaskHubClient, workspace_id: str | None = None) -> None:
        self.client = client
        self.workspace_id = workspace_id
        self.tasks: list[dict] = []
        self.query = ""
        self.filters = TaskFilters()
        self.sort = DEFAULT_SORT
        self.descending = True

    # State

    def load(self) -> list[dict]:
        self.tasks = self.client.list_tasks(self.workspace_id)
        return self.tasks

    def set_tasks(self, tasks: list[dict]) -> None:
        self.tasks = list(tasks)

    def set_query(self, query: str) -> None:
        self.query = query or ""

    def set_sort(self, key: str, descending: bool = True) -> None:
        self.sort = key
        self.descending = descending

    def set_filters(self, filters: TaskFilters) -> None:
        self.filters = filters

    def toggle_filter(self, kind: str, value: str) -> None:
        """Add ``value`` to a filter kind, or remove it if already active."""
        if kind not in FILTER_KINDS:
            raise ValueError(f"Unknown filter kind: {kind}")
        values = set(getattr(self.filters, kind))
        values.symmetric_difference_update({value})
        self.filters = replace(self.filters, **{kind: values})

    def set_due_range(self, due_from=None, due_to=None) -> None:
        self.filters = replace(self.filters, due_from=due_from, due_to=due_to)

    def clear_filters(self) -> None:
        self.filters = TaskFilters()

    @property
    def active_filter_count(self) -> int:
        return self.filters.active_count()

    # Derived views

    def visible(self) -> list[dict]:
        return derive_view(self.tasks, self.query, self.filters, self.sort, self.descending)

    def columns(self) -> dict[str, list[dict]]:
        return group_by_status(self.visible())

    def available_tags(self) -> list[dict]:
        """Distinct tags across the loaded tasks, for the filter menu."""
        seen: dict[str, dict] = {}
        for task in self.tasks:
            for tag in task.get("tags") or []:
                seen.setdefault(tag["id"], tag)
        return sorted(seen.values(), key=lambda t: t["name"].lower())

    def available_assignees(self) -> list[str]:
        return sorted(
            {t["assignee"]["user_id"] for t in self.tasks if t.get("assignee")}
        )

    # Mutations

    def _find(self, task_id: str) -> int:
        for index, task in enumerate(self.tasks):
            if task["id"] == task_id:
                return index
        raise KeyError(task_id)

    def _optimistic(self, apply: Callable[[], None], confirm: Callable[[], Any]) -> Any:
        """Apply a local change, then confirm it remotely; restore the snapshot on failure."""
        snapshot = copy.deepcopy(self.tasks)
        apply()
        try:
            return confirm()
        except Exception:
            logger.warning("Server rejected board change; restoring previous state")
            self.tasks = snapshot
            raise

    def move_task(self, task_id: str, status: str) -> None:
        """Move a card to another column."""
        index = self._find(task_id)
        if self.tasks[index].get("status") == status:
            return

        def apply() -> None:
            self.tasks[index] = {**self.tasks[index], "status": status}

        self._optimistic(apply, lambda: self.client.update_task(task_id, {"status": status}))

    def remove_task(self, task_id: str) -> None:
        index = self._find(task_id)
        self._optimistic(lambda: self.tasks.pop(index), lambda: self.client.delete_task(task_id))

    def add_task(self, title: str, **fields: Any) -> dict:
        """Create on the server, then show it at the top of the board."""
        if self.workspace_id and "workspace_id" not in fields:
            fields["workspace_id"] = self.workspace_id
        task = self.client.create_task(title, **fields)
        self.tasks.insert(0, task)
        return task

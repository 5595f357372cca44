"""Search, filter, sort and grouping over already-fetched task payloads.

Works on ``TaskRead`` models as well as plain dicts decoded from the API,
so the server listing and the client board derive identical views. Every
function is pure and returns new lists.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

STATUS_COLUMNS = ("TODO", "IN_PROGRESS", "DONE")
PRIORITY_RANK = {"HIGH": 3, "MEDIUM": 2, "LOW": 1, "NONE": 0}
SORT_KEYS = ("created_at", "due_date", "priority", "title")
DEFAULT_SORT = "created_at"


@dataclass
class TaskFilters:
    """Active board filters. Empty collections mean "no constraint"."""

    status: set[str] = field(default_factory=set)
    priority: set[str] = field(default_factory=set)
    assignee: set[str] = field(default_factory=set)  # user ids
    tags: set[str] = field(default_factory=set)  # tag ids
    due_from: date | None = None
    due_to: date | None = None

    def active_count(self) -> int:
        count = len(self.status) + len(self.priority) + len(self.assignee) + len(self.tags)
        if self.due_from is not None or self.due_to is not None:
            count += 1
        return count

    def is_empty(self) -> bool:
        return self.active_count() == 0


def _get(item: Any, name: str, default: Any = None) -> Any:
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _as_datetime(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    # Naive values (SQLite round-trips, date-only strings) are taken as UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _as_date(value: Any) -> date | None:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    parsed = _as_datetime(value)
    return parsed.date() if parsed else None


def _tag_names(task: Any) -> list[str]:
    return [_get(tag, "name") or "" for tag in _get(task, "tags") or []]


def _tag_ids(task: Any) -> set[str]:
    return {_get(tag, "id") for tag in _get(task, "tags") or []}


def _assignee_user_id(task: Any) -> str | None:
    assignee = _get(task, "assignee")
    return _get(assignee, "user_id") if assignee is not None else None


def search_tasks(tasks: Iterable[Any], query: str | None) -> list[Any]:
    """Case-insensitive substring match on title, description and tag names."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(tasks)
    matched = []
    for task in tasks:
        haystack = [_get(task, "title") or "", _get(task, "description") or ""]
        haystack.extend(_tag_names(task))
        if any(needle in text.lower() for text in haystack):
            matched.append(task)
    return matched


def _matches(task: Any, filters: TaskFilters) -> bool:
    if filters.status and _plain(_get(task, "status")) not in filters.status:
        return False
    if filters.priority:
        priority = _plain(_get(task, "priority"))
        if priority == "NONE" or priority not in filters.priority:
            return False
    if filters.assignee and _assignee_user_id(task) not in filters.assignee:
        return False
    if filters.tags and not (_tag_ids(task) & filters.tags):
        return False
    if filters.due_from is not None or filters.due_to is not None:
        due = _as_date(_get(task, "due_date"))
        if due is None:
            return False
        if filters.due_from is not None and due < filters.due_from:
            return False
        if filters.due_to is not None and due > filters.due_to:
            return False
    return True


def filter_tasks(tasks: Iterable[Any], filters: TaskFilters | None) -> list[Any]:
    """AND across filter kinds, OR within one kind."""
    if filters is None or filters.is_empty():
        return list(tasks)
    return [task for task in tasks if _matches(task, filters)]


def sort_tasks(tasks: Iterable[Any], key: str = DEFAULT_SORT, descending: bool = True) -> list[Any]:
    """Stable sort by one of SORT_KEYS. Tasks without a due date always sort last."""
    items = list(tasks)
    if key not in SORT_KEYS:
        raise ValueError(f"Unknown sort key: {key}")
    if key == "due_date":
        dated = [t for t in items if _get(t, "due_date") is not None]
        undated = [t for t in items if _get(t, "due_date") is None]
        dated.sort(key=lambda t: _as_datetime(_get(t, "due_date")), reverse=descending)
        return dated + undated
    if key == "priority":
        sort_key = lambda t: PRIORITY_RANK.get(_plain(_get(t, "priority")), 0)  # noqa: E731
    elif key == "title":
        sort_key = lambda t: (_get(t, "title") or "").lower()  # noqa: E731
    else:
        epoch = datetime.min.replace(tzinfo=timezone.utc)
        sort_key = lambda t: _as_datetime(_get(t, "created_at")) or epoch  # noqa: E731
    return sorted(items, key=sort_key, reverse=descending)


def derive_view(
    tasks: Sequence[Any],
    query: str | None = None,
    filters: TaskFilters | None = None,
    sort: str = DEFAULT_SORT,
    descending: bool = True,
) -> list[Any]:
    """Search, then filter, then sort. Recomputed from scratch on every call."""
    return sort_tasks(filter_tasks(search_tasks(tasks, query), filters), sort, descending)


def group_by_status(tasks: Iterable[Any]) -> dict[str, list[Any]]:
    """Kanban columns in board order; input order is kept inside each column."""
    columns: dict[str, list[Any]] = {status: [] for status in STATUS_COLUMNS}
    for task in tasks:
        status = _plain(_get(task, "status"))
        columns.setdefault(status, []).append(task)
    return columns

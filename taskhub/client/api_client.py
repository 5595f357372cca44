"""HTTP client for the TaskHub REST API using httpx."""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

USER_AGENT = "TaskHubClient/0.1"
TIMEOUT = 15.0


class TaskHubAPIError(Exception):
    """Non-2xx response (or transport failure, with ``status_code`` None)."""

    def __init__(self, status_code: int | None, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}" if status_code else message)


class TaskHubClient:
    """Thin synchronous wrapper over the JSON API, authenticated with a bearer token.

    ``transport`` lets tests plug in ``httpx.MockTransport`` or an ASGI transport.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        timeout: float = TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={"Authorization": f"Bearer {token}", "User-Agent": USER_AGENT},
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> TaskHubClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, path, exc)
            raise TaskHubAPIError(None, str(exc)) from exc
        if response.is_error:
            raise TaskHubAPIError(response.status_code, _error_message(response))
        if not response.content:
            return None
        return response.json()

    # Tasks

    def list_tasks(self, workspace_id: str | None = None, **params: Any) -> list[dict]:
        """List top-level tasks. Extra params (search, status, sort, ...) pass through."""
        query = {k: v for k, v in params.items() if v is not None}
        if workspace_id:
            query["workspaceId"] = workspace_id
        return self._request("GET", "/api/tasks", params=query)

    def get_task(self, task_id: str) -> dict:
        return self._request("GET", f"/api/tasks/{task_id}")

    def create_task(self, title: str, **fields: Any) -> dict:
        return self._request("POST", "/api/tasks", json={"title": title, **fields})

    def update_task(self, task_id: str, changes: dict[str, Any]) -> dict:
        """Partial update: only keys in ``changes`` are sent; None values clear fields."""
        return self._request("PATCH", f"/api/tasks/{task_id}", json=changes)

    def delete_task(self, task_id: str) -> None:
        self._request("DELETE", f"/api/tasks/{task_id}")

    # Tags

    def list_tags(self, workspace_id: str) -> list[dict]:
        return self._request("GET", "/api/tags", params={"workspaceId": workspace_id})

    def create_tag(self, workspace_id: str, name: str, color: str | None = None) -> dict:
        payload: dict[str, Any] = {"workspace_id": workspace_id, "name": name}
        if color:
            payload["color"] = color
        return self._request("POST", "/api/tags", json=payload)

    def update_tag(self, tag_id: str, name: str, color: str | None = None) -> dict:
        payload: dict[str, Any] = {"name": name}
        if color:
            payload["color"] = color
        return self._request("PUT", f"/api/tags/{tag_id}", json=payload)

    def delete_tag(self, tag_id: str) -> None:
        self._request("DELETE", f"/api/tags/{tag_id}")

    # Workspaces and members

    def list_workspaces(self) -> list[dict]:
        return self._request("GET", "/api/workspaces")

    def get_workspace(self, workspace_id: str) -> dict:
        return self._request("GET", f"/api/workspaces/{workspace_id}")

    def create_workspace(self, name: str, organization_id: str) -> dict:
        return self._request(
            "POST", "/api/workspaces", json={"name": name, "organizationId": organization_id}
        )

    def rename_workspace(self, workspace_id: str, name: str) -> dict:
        return self._request("PUT", f"/api/workspaces/{workspace_id}", json={"name": name})

    def delete_workspace(self, workspace_id: str) -> None:
        self._request("DELETE", f"/api/workspaces/{workspace_id}")

    def list_members(self, workspace_id: str) -> list[dict]:
        return self._request("GET", f"/api/workspaces/{workspace_id}/members")

    def add_member(self, workspace_id: str, user_id: str, role: str = "MEMBER") -> dict:
        return self._request(
            "POST",
            f"/api/workspaces/{workspace_id}/members",
            json={"user_id": user_id, "role": role},
        )

    # Attachments

    def upload(self, task_id: str, file_name: str, content: bytes, content_type: str) -> dict:
        return self._request(
            "POST",
            "/api/upload",
            data={"taskId": task_id},
            files={"file": (file_name, content, content_type)},
        )

    def delete_attachment(self, attachment_id: str) -> None:
        self._request("DELETE", f"/api/attachments/{attachment_id}")


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.reason_phrase

"""Python client for the TaskHub API and the client-side board store."""

from taskhub.client.api_client import TaskHubAPIError, TaskHubClient
from taskhub.client.board import BoardStore

__all__ = ["BoardStore", "TaskHubAPIError", "TaskHubClient"]

"""Issue contract - operations a tracker exposes for issues."""

from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import Future
from dataclasses import dataclass, fields as dataclass_fields
from typing import Any

from work_mgmt_client_interface.client import RequestCallback

__all__ = ["IssueResource", "IssueUpdate"]


@dataclass
#dataclass so that partial updates can be expressed by leaving fields as None
class IssueUpdate:
    """
    All fields default to None. During an update, only fields explicitly changed to non-None value will be changed.
    """

    title: str | None = None
    description: str | None = None
    assignee: str | None = None
    due_date: str | None = None
    priority: str | None = None

    def set_fields(self) -> dict:
        """Return a dict containing only the fields explicitly set to non-None values (the only ones to be updated)
            """
        return {f.name: getattr(self, f.name) for f in dataclass_fields(self) if getattr(self, f.name) is not None}


class IssueResource(ABC):
    """Issue operations backed by a RequestDispatcher.

    Every operation returns a Future resolving to the decoded response body and,
    when given, calls callback(error, response, body) exactly once.
    """

    @abstractmethod
    def get_issue(
        self,
        issue: str,
        *,
        fields: list[str] | None = None,
        expand: list[str] | None = None,
        callback: RequestCallback | None = None,
    ) -> Future:
        """Fetch a single issue by id or key."""
        raise NotImplementedError

    @abstractmethod
    def create_issue(
        self,
        *,
        project: str,
        title: str,
        issue_type: str = "Task",
        description: str | None = None,
        assignee: str | None = None,
        due_date: str | None = None,
        fields: dict[str, Any] | None = None,
        callback: RequestCallback | None = None,
    ) -> Future:
        """Create an issue."""
        raise NotImplementedError

    @abstractmethod
    def edit_issue(
        self,
        issue: str,
        update: IssueUpdate,
        *,
        callback: RequestCallback | None = None,
    ) -> Future:
        """Apply the set fields of an IssueUpdate to an existing issue."""
        raise NotImplementedError

    @abstractmethod
    def delete_issue(
        self,
        issue: str,
        *,
        delete_subtasks: bool = False,
        callback: RequestCallback | None = None,
    ) -> Future:
        """Delete an issue."""
        """
        Raises (through the Future):
            IssueNotFoundError: If no issue with that ID exists.
        """
        raise NotImplementedError

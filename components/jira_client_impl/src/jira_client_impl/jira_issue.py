"""Jira issue endpoints (REST API v2), dispatched through the owning client."""
from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import Any

from jira_client_impl.errors import IssueNotFoundError, JiraError
from work_mgmt_client_interface.client import RequestCallback, RequestDispatcher
from work_mgmt_client_interface.issue import IssueResource, IssueUpdate

__all__ = ["JiraIssueResource", "error_for_response"]

logger = logging.getLogger(__name__)


def error_for_response(response: Any, body: Any) -> JiraError | None:
    """Return the error a non-2xx response stands for, or None for a successful one."""
    if response is None:
        return None
    if response.status_code == 404:
        return IssueNotFoundError(f"Resource not found: {response.url}", 404)
    if not response.ok:
        detail = body if body not in (None, "") else response.reason
        return JiraError(f"Jira API error {response.status_code}: {detail}", response.status_code)
    return None


def _joined(values: list[str] | None) -> str | None:
    return ",".join(values) if values else None


class JiraIssueResource(IssueResource):
    """Issue operations for a Jira client.

    Args:
        client: Anything exposing build_url() and make_request(), normally the JiraClient
                that created this resource.
    """

    def __init__(self, client: RequestDispatcher) -> None:
        self._client = client

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _issue_path(self, issue: str, suffix: str = "") -> str:
        if not issue:
            raise ValueError("An issue id or key is required")
        return f"/issue/{issue}{suffix}"

    def _request(
        self,
        method: str,
        path: str,
        *,
        qs: dict[str, Any] | None = None,
        body: Any = None,
        callback: RequestCallback | None = None,
    ) -> Future:
        options: dict[str, Any] = {
            "uri": self._client.build_url(path),
            "method": method,
            "json": True,
            "followAllRedirects": True,
        }
        params = {k: v for k, v in (qs or {}).items() if v is not None}
        if params:
            options["qs"] = params
        if body is not None:
            options["body"] = body

        result: Future = Future()

        def _on_complete(error: BaseException | None, response: Any, response_body: Any) -> None:
            if error is None:
                error = error_for_response(response, response_body)
            if error is not None:
                logger.debug("%s %s failed: %s", method, options["uri"], error)
                result.set_exception(error)
            else:
                result.set_result(response_body)
            if callback is not None:
                callback(error, response, response_body)

        self._client.make_request(options, _on_complete)
        return result

    # ------------------------------------------------------------------
    # IssueResource contract
    # ------------------------------------------------------------------

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
        """Create a new issue. Resolves to Jira's {"id", "key", "self"} reply.

        Extra ``fields`` (custom fields, labels, ...) are merged over the named ones.
        """
        #required fields -- project, summary and issue type
        payload: dict[str, Any] = {
            "project": {"key": project},
            "summary": title,
            "issuetype": {"name": issue_type},
        }
        if description:
            payload["description"] = description
        if assignee:
            payload["assignee"] = {"name": assignee}
        if due_date:
            payload["duedate"] = due_date
        if fields:
            payload.update(fields)
        return self._request("POST", "/issue", body={"fields": payload}, callback=callback)

    def get_create_metadata(
        self,
        *,
        project_keys: list[str] | None = None,
        issue_type_names: list[str] | None = None,
        expand: list[str] | None = None,
        callback: RequestCallback | None = None,
    ) -> Future:
        """Fetch the projects and issue types (and their fields) the user may create."""
        qs = {
            "projectKeys": _joined(project_keys),
            "issuetypeNames": _joined(issue_type_names),
            "expand": _joined(expand),
        }
        return self._request("GET", "/issue/createmeta", qs=qs, callback=callback)

    def get_issue(
        self,
        issue: str,
        *,
        fields: list[str] | None = None,
        expand: list[str] | None = None,
        callback: RequestCallback | None = None,
    ) -> Future:
        """Fetch a single Jira issue by id or key."""
        qs = {"fields": _joined(fields), "expand": _joined(expand)}
        return self._request("GET", self._issue_path(issue), qs=qs, callback=callback)

    def edit_issue(
        self,
        issue: str,
        update: IssueUpdate,
        *,
        callback: RequestCallback | None = None,
    ) -> Future:
        """
        Args:
            issue:  The Jira issue id or key
            update: An "IssueUpdate" dataclass instance with the desired changes

        Notes on usage:
            Fields left as "None" are not sent to the API and remain unchanged.
            When nothing is set no request is made and the Future resolves to None.
        """
        path = self._issue_path(issue)
        changed = update.set_fields()

        fields: dict[str, Any] = {}
        if "title" in changed:
            fields["summary"] = changed["title"]
        if "description" in changed:
            fields["description"] = changed["description"]
        if "assignee" in changed:
            fields["assignee"] = {"name": changed["assignee"]}
        if "due_date" in changed:
            fields["duedate"] = changed["due_date"]
        if "priority" in changed:
            fields["priority"] = {"name": changed["priority"]}

        if not fields:
            skipped: Future = Future()
            skipped.set_result(None)
            if callback is not None:
                callback(None, None, None)
            return skipped
        return self._request("PUT", path, body={"fields": fields}, callback=callback)

    def delete_issue(
        self,
        issue: str,
        *,
        delete_subtasks: bool = False,
        callback: RequestCallback | None = None,
    ) -> Future:
        """Delete an issue. Jira refuses to delete an issue with subtasks unless asked to."""
        qs = {"deleteSubtasks": "true"} if delete_subtasks else None
        return self._request("DELETE", self._issue_path(issue), qs=qs, callback=callback)

    # ------------------------------------------------------------------
    # Assignment, comments, transitions and watchers
    # ------------------------------------------------------------------

    def assign_issue(self, issue: str, assignee: str | None, *, callback: RequestCallback | None = None) -> Future:
        """Assign an issue to a user name. None unassigns it."""
        return self._request("PUT", self._issue_path(issue, "/assignee"), body={"name": assignee}, callback=callback)

    def get_comments(self, issue: str, *, callback: RequestCallback | None = None) -> Future:
        return self._request("GET", self._issue_path(issue, "/comment"), callback=callback)

    def add_comment(self, issue: str, comment: str, *, callback: RequestCallback | None = None) -> Future:
        return self._request("POST", self._issue_path(issue, "/comment"), body={"body": comment}, callback=callback)

    def get_transitions(self, issue: str, *, callback: RequestCallback | None = None) -> Future:
        """List the transitions currently available for an issue."""
        return self._request("GET", self._issue_path(issue, "/transitions"), callback=callback)

    def transition_issue(
        self,
        issue: str,
        transition_id: str,
        *,
        fields: dict[str, Any] | None = None,
        callback: RequestCallback | None = None,
    ) -> Future:
        """
        Transitions are named actions in Jira that move one Issue from one status to another.
        Use get_transitions() to find the id of the one to trigger.
        """
        body: dict[str, Any] = {"transition": {"id": transition_id}}
        if fields:
            body["fields"] = fields
        return self._request("POST", self._issue_path(issue, "/transitions"), body=body, callback=callback)

    def get_watchers(self, issue: str, *, callback: RequestCallback | None = None) -> Future:
        return self._request("GET", self._issue_path(issue, "/watchers"), callback=callback)

    def add_watcher(self, issue: str, username: str, *, callback: RequestCallback | None = None) -> Future:
        #the watchers endpoint takes a bare JSON string, not an object
        return self._request("POST", self._issue_path(issue, "/watchers"), body=username, callback=callback)

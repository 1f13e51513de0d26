"""Unit tests for JiraIssueResource.

The owning client is replaced by a MagicMock dispatcher whose make_request answers
synchronously, so every Future returned here is already resolved.
"""

import pytest
from unittest.mock import MagicMock

from jira_client_impl.errors import IssueNotFoundError, JiraError
from jira_client_impl.jira_impl import JiraClient
from jira_client_impl.jira_issue import JiraIssueResource, error_for_response
from work_mgmt_client_interface.client import IssueNotFoundError as BaseIssueNotFoundError
from work_mgmt_client_interface.issue import IssueUpdate

BASE = "https://jira.example.com/rest/api/2"


def _response(status_code=200, url=f"{BASE}/issue/TEST-1"):
    return MagicMock(status_code=status_code, ok=status_code < 400, url=url, reason="Reason")


@pytest.fixture
def dispatcher():
    """A JiraClient stand-in answering every request with a 200 and an empty body."""
    mock_client = MagicMock(spec=JiraClient)
    mock_client.build_url.side_effect = lambda path: f"{BASE}{path}"
    respond(mock_client)
    return mock_client


def respond(mock_client, status_code=200, body=None):
    response = _response(status_code)

    def _make_request(options, callback):
        callback(None, response, body)

    mock_client.make_request.side_effect = _make_request
    return response


@pytest.fixture
def issues(dispatcher):
    return JiraIssueResource(dispatcher)


def sent_options(dispatcher):
    return dispatcher.make_request.call_args[0][0]

#-------------------- request building --------------------

def test_get_issue_builds_get_request(issues, dispatcher):
    respond(dispatcher, body={"key": "TEST-1"})

    result = issues.get_issue("TEST-1", fields=["summary", "status"]).result(timeout=0)

    assert result == {"key": "TEST-1"}
    options = sent_options(dispatcher)
    assert options["method"] == "GET"
    assert options["uri"] == f"{BASE}/issue/TEST-1"
    assert options["qs"] == {"fields": "summary,status"}
    assert options["json"] is True


def test_create_issue_sends_fields(issues, dispatcher):
    respond(dispatcher, status_code=201, body={"id": "10000", "key": "TEST-1"})

    result = issues.create_issue(
        project="TEST",
        title="Broken build",
        description="CI is red",
        assignee="me",
        fields={"labels": ["ci"]},
    ).result(timeout=0)

    assert result["key"] == "TEST-1"
    options = sent_options(dispatcher)
    assert options["method"] == "POST"
    assert options["uri"] == f"{BASE}/issue"
    assert options["body"] == {
        "fields": {
            "project": {"key": "TEST"},
            "summary": "Broken build",
            "issuetype": {"name": "Task"},
            "description": "CI is red",
            "assignee": {"name": "me"},
            "labels": ["ci"],
        }
    }


def test_get_create_metadata_joins_lists(issues, dispatcher):
    issues.get_create_metadata(project_keys=["A", "B"], expand=["projects.issuetypes.fields"])

    options = sent_options(dispatcher)
    assert options["uri"] == f"{BASE}/issue/createmeta"
    assert options["qs"] == {"projectKeys": "A,B", "expand": "projects.issuetypes.fields"}


def test_edit_issue_sends_only_set_fields(issues, dispatcher):
    respond(dispatcher, status_code=204)

    issues.edit_issue("TEST-1", IssueUpdate(title="New Title", priority="High")).result(timeout=0)

    options = sent_options(dispatcher)
    assert options["method"] == "PUT"
    assert options["body"] == {"fields": {"summary": "New Title", "priority": {"name": "High"}}}


def test_edit_issue_with_no_changes_skips_request(issues, dispatcher):
    callback = MagicMock()

    result = issues.edit_issue("TEST-1", IssueUpdate(), callback=callback).result(timeout=0)

    assert result is None
    dispatcher.make_request.assert_not_called()
    callback.assert_called_once_with(None, None, None)


def test_delete_issue_with_subtasks(issues, dispatcher):
    respond(dispatcher, status_code=204)

    issues.delete_issue("TEST-1", delete_subtasks=True).result(timeout=0)

    options = sent_options(dispatcher)
    assert options["method"] == "DELETE"
    assert options["qs"] == {"deleteSubtasks": "true"}


def test_transition_issue_posts_transition_id(issues, dispatcher):
    respond(dispatcher, status_code=204)

    issues.transition_issue("TEST-5", "11", fields={"resolution": {"name": "Done"}}).result(timeout=0)

    options = sent_options(dispatcher)
    assert options["uri"] == f"{BASE}/issue/TEST-5/transitions"
    assert options["body"] == {"transition": {"id": "11"}, "fields": {"resolution": {"name": "Done"}}}


@pytest.mark.parametrize(
    ("call", "method", "suffix", "body"),
    [
        (lambda r: r.assign_issue("TEST-1", "me"), "PUT", "/assignee", {"name": "me"}),
        (lambda r: r.get_comments("TEST-1"), "GET", "/comment", None),
        (lambda r: r.add_comment("TEST-1", "Looks good"), "POST", "/comment", {"body": "Looks good"}),
        (lambda r: r.get_transitions("TEST-1"), "GET", "/transitions", None),
        (lambda r: r.get_watchers("TEST-1"), "GET", "/watchers", None),
        (lambda r: r.add_watcher("TEST-1", "me"), "POST", "/watchers", "me"),
    ],
)
def test_sub_endpoints(issues, dispatcher, call, method, suffix, body):
    call(issues)

    options = sent_options(dispatcher)
    assert options["method"] == method
    assert options["uri"] == f"{BASE}/issue/TEST-1{suffix}"
    assert options.get("body") == body


def test_empty_issue_identifier_raises(issues, dispatcher):
    with pytest.raises(ValueError):
        issues.get_issue("")

    dispatcher.make_request.assert_not_called()

#-------------------- response handling --------------------

def test_not_found_becomes_issue_not_found_error(issues, dispatcher):
    respond(dispatcher, status_code=404, body={"errorMessages": ["Issue does not exist"]})
    callback = MagicMock()

    future = issues.get_issue("FAKE-999", callback=callback)

    error = future.exception(timeout=0)
    assert isinstance(error, IssueNotFoundError)
    assert isinstance(error, BaseIssueNotFoundError)
    assert callback.call_args[0][0] is error


def test_server_error_becomes_jira_error_with_status(issues, dispatcher):
    respond(dispatcher, status_code=500, body={"errorMessages": ["boom"]})

    error = issues.get_issue("TEST-1").exception(timeout=0)

    assert isinstance(error, JiraError)
    assert error.status_code == 500
    assert "boom" in str(error)


def test_transport_error_is_passed_to_future_and_callback(issues, dispatcher):
    failure = ConnectionError("reset by peer")
    dispatcher.make_request.side_effect = lambda options, callback: callback(failure, None, None)
    callback = MagicMock()

    future = issues.get_issue("TEST-1", callback=callback)

    assert future.exception(timeout=0) is failure
    callback.assert_called_once_with(failure, None, None)


def test_error_for_response_ok_returns_none():
    assert error_for_response(_response(200), {}) is None
    assert error_for_response(None, None) is None


def test_error_for_response_falls_back_to_reason():
    error = error_for_response(_response(502), "")

    assert str(error) == "Jira API error 502: Reason"

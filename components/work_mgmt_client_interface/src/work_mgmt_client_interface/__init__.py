"""Tracker-agnostic contracts shared by client implementations."""

from work_mgmt_client_interface.client import IssueNotFoundError, RequestCallback, RequestDispatcher
from work_mgmt_client_interface.issue import IssueResource, IssueUpdate

__all__ = ["IssueNotFoundError", "IssueResource", "IssueUpdate", "RequestCallback", "RequestDispatcher"]

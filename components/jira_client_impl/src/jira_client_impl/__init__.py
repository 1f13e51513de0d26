"""Jira REST API (v2) client."""

from jira_client_impl import oauth_util
from jira_client_impl.config import BasicAuthCredentials, ClientConfig, OAuthConfig, validate
from jira_client_impl.errors import ConfigurationError, ErrorKind, IssueNotFoundError, JiraError
from jira_client_impl.jira_impl import JiraClient, get_client
from jira_client_impl.jira_issue import JiraIssueResource

__all__ = [
    "BasicAuthCredentials",
    "ClientConfig",
    "ConfigurationError",
    "ErrorKind",
    "IssueNotFoundError",
    "JiraClient",
    "JiraError",
    "JiraIssueResource",
    "OAuthConfig",
    "get_client",
    "oauth_util",
    "validate",
]

"""Errors raised by the Jira client."""

from __future__ import annotations

from enum import Enum

from work_mgmt_client_interface.client import IssueNotFoundError as BaseIssueNotFoundError

__all__ = ["ConfigurationError", "ErrorKind", "IssueNotFoundError", "JiraError"]


class ErrorKind(str, Enum):
    """Every way a client configuration can be rejected, with its message."""

    NO_HOST = "You must supply a host for the Jira API."
    NO_AUTHENTICATION = "You must supply authentication information: either 'oauth' or 'basic_auth'."
    NO_CONSUMER_KEY = "You must supply a consumer_key for OAuth authentication."
    NO_PRIVATE_KEY = "You must supply a private_key for OAuth authentication."
    NO_OAUTH_TOKEN = "You must supply a token for OAuth authentication."
    NO_OAUTH_TOKEN_SECRET = "You must supply a token_secret for OAuth authentication."
    NO_VERIFIER = "You must supply an oauth_verifier to swap a request token for an access token."
    NO_USERNAME = "You must supply a username for basic authentication."
    NO_PASSWORD = "You must supply a password for basic authentication."
    INVALID_AUTHENTICATION_PROPERTY = "Authentication must be given as an 'oauth' or 'basic_auth' mapping."
    INVALID_PORT = "The port must be an integer between 1 and 65535."


class ConfigurationError(ValueError):
    """Raised when a client configuration is missing a required field."""

    def __init__(self, kind: ErrorKind) -> None:
        super().__init__(kind.value)
        self.kind = kind


class JiraError(Exception):
    """Raised when the Jira API returns an unexpected response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class IssueNotFoundError(BaseIssueNotFoundError, JiraError):
    """Raised when a requested Jira issue does not exist."""

"""
Authentication
--------------
The client supports two credential modes, and exactly one is active per client:

1. OAuth 1.0a (RSA-SHA1) - consumer_key, private_key, token, token_secret
2. Basic auth - username, password

get_client() reads them from the environment:
        JIRA_HOST                    jira.example.com
        JIRA_PROTOCOL                https (default)
        JIRA_PORT                    8443 (optional)
        JIRA_USERNAME / JIRA_PASSWORD
        JIRA_OAUTH_CONSUMER_KEY, JIRA_OAUTH_PRIVATE_KEY (or JIRA_OAUTH_PRIVATE_KEY_FILE),
        JIRA_OAUTH_TOKEN, JIRA_OAUTH_TOKEN_SECRET

Dependencies:
    uv add requests requests-oauthlib "oauthlib[signedtoken]"

"""
#to avoid having to consider forward declarations, the below line must be first line in the file
from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping, MutableMapping
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from getpass import getpass
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlunsplit

from jira_client_impl.config import BasicAuthCredentials, OAuthConfig, validate
from jira_client_impl.errors import ConfigurationError, ErrorKind
from jira_client_impl.jira_issue import JiraIssueResource
from jira_client_impl.transport import RequestsTransport
from work_mgmt_client_interface.client import RequestCallback, RequestDispatcher

__all__ = ["JiraClient", "Transport", "get_client"]

logger = logging.getLogger(__name__)

#a transport takes request options and returns (response, body), raising on transport failure
Transport = Callable[[Mapping[str, Any]], tuple[Any, Any]]

_API_BASE_PATH = "/rest/api/"


class JiraClient(RequestDispatcher):
    """
    Args:
        config:    Mapping with host, optional protocol/port, and "oauth" or "basic_auth"
                   (see jira_client_impl.config)
        transport: Callable that sends request options; defaults to a RequestsTransport
        executor:  Where requests run; defaults to a thread pool owned by this client

    Raises:
        ConfigurationError: If the configuration is missing a host or usable credentials.
    """

    def __init__(
        self,
        config: Mapping[str, Any],
        *,
        transport: Transport | None = None,
        executor: Executor | None = None,
    ) -> None:
        valid = validate(config)
        self.host = valid.host
        self.protocol = valid.protocol
        self.port = valid.port
        self.version = valid.version

        #exactly one of these is set
        self.oauth_config: OAuthConfig | None = None
        self.basic_auth: BasicAuthCredentials | None = None
        if isinstance(valid.auth, OAuthConfig):
            self.oauth_config = valid.auth
        else:
            self.basic_auth = valid.auth

        self._transport = transport if transport is not None else RequestsTransport()
        self._executor = executor if executor is not None else ThreadPoolExecutor(thread_name_prefix="jira-request")

        self.issue = JiraIssueResource(self)

    def __repr__(self) -> str:
        mode = "oauth" if self.oauth_config is not None else "basic_auth"
        return f"<JiraClient {self.protocol}://{self.host}{f':{self.port}' if self.port else ''} auth={mode}>"

    # ------------------------------------------------------------------
    # RequestDispatcher contract
    # ------------------------------------------------------------------

    def build_url(self, path: str) -> str:
        """Return the decoded URL for a path under rest/api/<version>.

        "issue/TEST-1" and "/issue/TEST-1" both map to
        https://<host>[:<port>]/rest/api/2/issue/TEST-1
        """
        if path and not path.startswith("/"):
            path = "/" + path
        netloc = self.host if self.port is None else f"{self.host}:{self.port}"
        #accept "https", "https:" and "https://"
        scheme = self.protocol.rstrip(":/")
        url = urlunsplit((scheme, netloc, f"{_API_BASE_PATH}{self.version}{path}", "", ""))
        return unquote(url)

    def make_request(
        self,
        options: MutableMapping[str, Any],
        callback: RequestCallback | None = None,
    ) -> Future:
        """Attach credentials to options and hand them to the transport.

        Returns immediately. callback(error, response, body) is called exactly once
        when the transport finishes; transport errors are passed through unmodified.
        """
        if self.oauth_config is not None:
            options["oauth"] = self.oauth_config.as_options()
        elif self.basic_auth is not None:
            options["auth"] = self.basic_auth.as_options()
        else:
            #unreachable after a successful __init__; report through the callback, never raise
            error = ConfigurationError(ErrorKind.NO_AUTHENTICATION)
            logger.error("Refusing to dispatch request without credentials: %s", error)
            failed: Future = Future()
            failed.set_exception(error)
            if callback is not None:
                callback(error, None, None)
            return failed

        logger.debug("Dispatching %s %s", options.get("method", "GET"), options.get("uri") or options.get("url"))
        return self._executor.submit(self._dispatch, options, callback)

    def _dispatch(self, options: Mapping[str, Any], callback: RequestCallback | None) -> tuple[Any, Any]:
        try:
            response, body = self._transport(options)
        except Exception as exc:
            logger.warning("Request to %s failed: %s", options.get("uri") or options.get("url"), exc)
            if callback is not None:
                callback(exc, None, None)
            raise
        if callback is not None:
            callback(None, response, body)
        return response, body


# ---------------------------------------------------------------------------
# Get client
# ---------------------------------------------------------------------------

def _read_private_key(value: str, path: str) -> str:
    if value:
        return value
    if path:
        return Path(path).expanduser().read_text()
    return ""


def get_client(*, interactive: bool = False) -> JiraClient:
    """Return a configured JiraClient.

    Reads connection details from environment variables. OAuth variables take
    precedence when JIRA_OAUTH_CONSUMER_KEY is set. If "interactive = True" and
    the host or basic-auth credentials are missing, the user will be prompted.

    Raises:
        EnvironmentError: When not interactive and the host or all credentials are missing.
        ConfigurationError: When the gathered values are incomplete (e.g. a partial OAuth setup).
    """
    host = os.environ.get("JIRA_HOST", "")
    config: dict[str, Any] = {
        "host": host,
        "protocol": os.environ.get("JIRA_PROTOCOL", ""),
        "port": os.environ.get("JIRA_PORT", ""),
    }

    consumer_key = os.environ.get("JIRA_OAUTH_CONSUMER_KEY", "")
    username = os.environ.get("JIRA_USERNAME", "")
    password = os.environ.get("JIRA_PASSWORD", "")

    if consumer_key:
        config["oauth"] = {
            "consumer_key": consumer_key,
            "private_key": _read_private_key(
                os.environ.get("JIRA_OAUTH_PRIVATE_KEY", ""),
                os.environ.get("JIRA_OAUTH_PRIVATE_KEY_FILE", ""),
            ),
            "token": os.environ.get("JIRA_OAUTH_TOKEN", ""),
            "token_secret": os.environ.get("JIRA_OAUTH_TOKEN_SECRET", ""),
        }
    elif interactive:
        if not host:
            config["host"] = input("Jira host (e.g. jira.example.com): ").strip()
        if not username:
            username = input("Jira username: ").strip()
        if not password:
            password = getpass("Jira password: ")
        config["basic_auth"] = {"username": username, "password": password}
    else:
        #collects the missing fields and raises an error alerting to the missing values
        missing = [name for name, val in [
            ("JIRA_HOST", host),
            ("JIRA_USERNAME", username),
            ("JIRA_PASSWORD", password),
        ] if not val]
        if missing:
            raise EnvironmentError(
                f"Missing required environment variables: {', '.join(missing)}. "
                "Set them, configure JIRA_OAUTH_* instead, or call get_client(interactive=True)."
            )
        config["basic_auth"] = {"username": username, "password": password}

    return JiraClient(config)

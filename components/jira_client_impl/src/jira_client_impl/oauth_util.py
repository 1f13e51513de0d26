"""
Helpers for Jira's OAuth 1.0a dance, used once to obtain the token/token_secret pair
that JiraClient's "oauth" configuration needs.

1. get_authorize_url()  -> send the user to "url", keep "token" and "token_secret"
2. the user approves the application and is shown (or redirected with) a verifier
3. swap_request_token_with_access_token() -> access token for JiraClient

Jira application links only accept RSA-SHA1 signatures.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlunsplit

from oauthlib.oauth1 import SIGNATURE_RSA
from requests_oauthlib import OAuth1Session

from jira_client_impl.config import DEFAULT_PROTOCOL, auth_section
from jira_client_impl.errors import ConfigurationError, ErrorKind

__all__ = ["get_authorize_url", "swap_request_token_with_access_token"]

logger = logging.getLogger(__name__)

_OAUTH_PATH = "/plugins/servlet/oauth"


def _server_url(config: Mapping[str, Any], endpoint: str) -> str:
    protocol = (config.get("protocol") or DEFAULT_PROTOCOL).rstrip(":/")
    port = config.get("port")
    netloc = f"{config['host']}:{port}" if port else config["host"]
    return urlunsplit((protocol, netloc, f"{_OAUTH_PATH}/{endpoint}", "", ""))


def _oauth_section(config: Mapping[str, Any], *required: tuple[str, ErrorKind]) -> Mapping[str, Any]:
    if not config.get("host"):
        raise ConfigurationError(ErrorKind.NO_HOST)
    oauth = auth_section(config, "oauth")
    if oauth is None:
        raise ConfigurationError(ErrorKind.NO_AUTHENTICATION)
    if not isinstance(oauth, Mapping):
        raise ConfigurationError(ErrorKind.INVALID_AUTHENTICATION_PROPERTY)
    for name, kind in required:
        if not oauth.get(name):
            raise ConfigurationError(kind)
    return oauth


def get_authorize_url(config: Mapping[str, Any]) -> dict[str, str]:
    """Fetch a request token and build the URL where the user authorizes it.

    Args:
        config: {"host", "protocol"?, "port"?, "oauth": {"consumer_key", "private_key", "callback_url"?}}

    Returns:
        {"url": authorize URL, "token": request token, "token_secret": request token secret}
    """
    oauth = _oauth_section(
        config,
        ("consumer_key", ErrorKind.NO_CONSUMER_KEY),
        ("private_key", ErrorKind.NO_PRIVATE_KEY),
    )
    session = OAuth1Session(
        oauth["consumer_key"],
        rsa_key=oauth["private_key"],
        signature_method=SIGNATURE_RSA,
        callback_uri=oauth.get("callback_url") or "oob",
    )
    request_token = session.fetch_request_token(_server_url(config, "request-token"))
    logger.debug("Obtained OAuth request token from %s", config["host"])
    return {
        "url": session.authorization_url(_server_url(config, "authorize")),
        "token": request_token["oauth_token"],
        "token_secret": request_token["oauth_token_secret"],
    }


def swap_request_token_with_access_token(config: Mapping[str, Any]) -> str:
    """Exchange an authorized request token for an access token.

    Args:
        config: {"host", "protocol"?, "port"?, "oauth": {"consumer_key", "private_key",
                 "token", "token_secret", "oauth_verifier"}}

    Returns:
        The access token. Jira keeps the request token secret as the access token secret.
    """
    oauth = _oauth_section(
        config,
        ("consumer_key", ErrorKind.NO_CONSUMER_KEY),
        ("private_key", ErrorKind.NO_PRIVATE_KEY),
        ("token", ErrorKind.NO_OAUTH_TOKEN),
        ("token_secret", ErrorKind.NO_OAUTH_TOKEN_SECRET),
        ("oauth_verifier", ErrorKind.NO_VERIFIER),
    )
    session = OAuth1Session(
        oauth["consumer_key"],
        rsa_key=oauth["private_key"],
        resource_owner_key=oauth["token"],
        resource_owner_secret=oauth["token_secret"],
        verifier=oauth["oauth_verifier"],
        signature_method=SIGNATURE_RSA,
    )
    access_token = session.fetch_access_token(_server_url(config, "access-token"))
    logger.debug("Swapped OAuth request token for an access token on %s", config["host"])
    return access_token["oauth_token"]

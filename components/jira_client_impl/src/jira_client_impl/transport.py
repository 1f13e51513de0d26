"""
HTTP transport used by JiraClient.make_request.

Options follow the shape of the "request" library options the Jira REST tooling has
always used (method, uri, qs, headers, body, json, ...). The client only adds
"oauth" or "auth" to them; this module turns the whole mapping into a
requests.Session call.

Dependencies:
    requests, requests-oauthlib and oauthlib[signedtoken] (OAuth 1.0a RSA-SHA1 signing)
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import requests
from requests.auth import AuthBase, HTTPBasicAuth
from requests_oauthlib import OAuth1

__all__ = ["RequestsTransport", "build_auth"]

logger = logging.getLogger(__name__)


def build_auth(options: Mapping[str, Any]) -> AuthBase | None:
    """Return the requests auth object described by options["oauth"] or options["auth"]."""
    oauth = options.get("oauth")
    if oauth:
        return OAuth1(
            client_key=oauth["consumer_key"],
            rsa_key=oauth["private_key"],
            resource_owner_key=oauth["token"],
            resource_owner_secret=oauth["token_secret"],
            signature_method=oauth["signature_method"],
        )
    auth = options.get("auth")
    if auth:
        return HTTPBasicAuth(auth["user"], auth["pass"])
    return None


class RequestsTransport:
    """Callable transport: ``transport(options) -> (response, body)``.

    Args:
        session: Session to send through. A new one with JSON Accept headers is created if omitted.
    """

    def __init__(self, session: requests.Session | None = None) -> None:
        if session is None:
            session = requests.Session()
            session.headers.update({"Accept": "application/json"})
        self._session = session

    def __call__(self, options: Mapping[str, Any]) -> tuple[requests.Response, Any]:
        url = options.get("uri") or options.get("url")
        if not url:
            raise ValueError("Request options must contain 'uri' or 'url'")

        method = options.get("method", "GET").upper()
        wants_json = bool(options.get("json"))
        kwargs: dict[str, Any] = {
            "params": options.get("qs"),
            "headers": options.get("headers"),
            "auth": build_auth(options),
            "allow_redirects": options.get("followAllRedirects", True),
        }
        if "timeout" in options:
            kwargs["timeout"] = options["timeout"]

        #json may be True (send body as JSON) or the payload itself
        if isinstance(options.get("json"), Mapping):
            kwargs["json"] = options["json"]
        elif wants_json and options.get("body") is not None:
            kwargs["json"] = options["body"]
        elif options.get("body") is not None:
            kwargs["data"] = options["body"]

        response = self._session.request(method, url, **kwargs)
        logger.debug("%s %s -> %s", method, url, response.status_code)
        return response, self._read_body(response, wants_json)

    @staticmethod
    def _read_body(response: requests.Response, wants_json: bool) -> Any:
        if not wants_json:
            return response.text
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            #error pages from proxies are often HTML even when JSON was asked for
            return response.text

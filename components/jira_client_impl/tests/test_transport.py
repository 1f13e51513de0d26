"""Tests for RequestsTransport with requests.Session mocked out."""

import pytest
from unittest.mock import MagicMock

from oauthlib.oauth1 import SIGNATURE_RSA
from requests.auth import HTTPBasicAuth
from requests_oauthlib import OAuth1

from jira_client_impl.transport import RequestsTransport, build_auth


@pytest.fixture
def session():
    mock_session = MagicMock()
    response = MagicMock(status_code=200, content=b'{"key": "TEST-1"}', text='{"key": "TEST-1"}')
    response.json.return_value = {"key": "TEST-1"}
    mock_session.request.return_value = response
    return mock_session


def test_json_request_sends_body_as_json_and_parses_reply(session):
    transport = RequestsTransport(session)

    response, body = transport({
        "uri": "https://example.com/rest/api/2/issue",
        "method": "post",
        "json": True,
        "body": {"fields": {"summary": "x"}},
        "qs": {"expand": "names"},
    })

    assert body == {"key": "TEST-1"}
    args, kwargs = session.request.call_args
    assert args == ("POST", "https://example.com/rest/api/2/issue")
    assert kwargs["json"] == {"fields": {"summary": "x"}}
    assert kwargs["params"] == {"expand": "names"}
    assert kwargs["allow_redirects"] is True
    assert kwargs["auth"] is None


def test_plain_request_returns_text(session):
    transport = RequestsTransport(session)

    _, body = transport({"url": "https://example.com/x", "body": "raw", "timeout": 3})

    kwargs = session.request.call_args[1]
    assert kwargs["data"] == "raw"
    assert kwargs["timeout"] == 3
    assert body == '{"key": "TEST-1"}'


def test_json_request_with_empty_reply_returns_none(session):
    session.request.return_value.content = b""

    _, body = RequestsTransport(session)({"uri": "https://example.com/x", "method": "DELETE", "json": True})

    assert body is None


def test_missing_url_raises(session):
    with pytest.raises(ValueError):
        RequestsTransport(session)({"method": "GET"})

    session.request.assert_not_called()


def test_transport_errors_propagate(session):
    session.request.side_effect = ConnectionError("refused")

    with pytest.raises(ConnectionError):
        RequestsTransport(session)({"uri": "https://example.com/x"})


def test_build_auth_for_basic_credentials():
    auth = build_auth({"auth": {"user": "me", "pass": "pw"}})

    assert isinstance(auth, HTTPBasicAuth)
    assert (auth.username, auth.password) == ("me", "pw")


def test_build_auth_for_oauth_uses_rsa_signing():
    auth = build_auth({
        "oauth": {
            "consumer_key": "ck",
            "private_key": "PEM",
            "token": "tok",
            "token_secret": "secret",
            "signature_method": "RSA-SHA1",
        }
    })

    assert isinstance(auth, OAuth1)
    assert auth.client.client_key == "ck"
    assert auth.client.resource_owner_key == "tok"
    assert auth.client.signature_method == SIGNATURE_RSA


def test_build_auth_without_credentials():
    assert build_auth({}) is None

"""Client configuration: typed records and the validation that produces them.

A configuration arrives as a plain mapping, e.g.

    {
        "host": "jira.example.com",
        "protocol": "https",      # optional, defaults to https
        "port": 8080,             # optional
        "basic_auth": {"username": "me", "password": "secret"},
    }

Authentication may also be nested under an "auth" key. When both "oauth" and
"basic_auth" are supplied, OAuth is used.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from jira_client_impl.errors import ConfigurationError, ErrorKind

__all__ = [
    "API_VERSION",
    "DEFAULT_PROTOCOL",
    "SIGNATURE_METHOD",
    "AuthConfig",
    "BasicAuthCredentials",
    "ClientConfig",
    "OAuthConfig",
    "auth_section",
    "validate",
]

API_VERSION = 2
DEFAULT_PROTOCOL = "https"
SIGNATURE_METHOD = "RSA-SHA1"

#each required field paired with the error raised when it is missing, in reporting order
_OAUTH_REQUIRED: tuple[tuple[str, ErrorKind], ...] = (
    ("consumer_key", ErrorKind.NO_CONSUMER_KEY),
    ("private_key", ErrorKind.NO_PRIVATE_KEY),
    ("token", ErrorKind.NO_OAUTH_TOKEN),
    ("token_secret", ErrorKind.NO_OAUTH_TOKEN_SECRET),
)

_BASIC_REQUIRED: tuple[tuple[str, ErrorKind], ...] = (
    ("username", ErrorKind.NO_USERNAME),
    ("password", ErrorKind.NO_PASSWORD),
)


@dataclass(frozen=True)
class OAuthConfig:
    """Credentials handed to the transport's OAuth signing layer."""

    consumer_key: str
    private_key: str
    token: str
    token_secret: str
    signature_method: str = SIGNATURE_METHOD

    def as_options(self) -> dict[str, str]:
        """Return the mapping placed under options["oauth"]."""
        return {
            "consumer_key": self.consumer_key,
            "private_key": self.private_key,
            "token": self.token,
            "token_secret": self.token_secret,
            "signature_method": self.signature_method,
        }

    def __repr__(self) -> str:
        return f"OAuthConfig(consumer_key={self.consumer_key!r}, signature_method={self.signature_method!r})"


@dataclass(frozen=True)
class BasicAuthCredentials:
    """Username/password pair, stored under the names the transport expects."""

    user: str
    password: str

    def as_options(self) -> dict[str, str]:
        """Return the mapping placed under options["auth"]."""
        return {"user": self.user, "pass": self.password}

    def __repr__(self) -> str:
        return f"BasicAuthCredentials(user={self.user!r})"


AuthConfig = Union[OAuthConfig, BasicAuthCredentials]


@dataclass(frozen=True)
class ClientConfig:
    """A configuration that passed validation."""

    host: str
    auth: AuthConfig
    protocol: str = DEFAULT_PROTOCOL
    port: int | None = None
    version: int = API_VERSION


def _require(section: Mapping[str, Any], required: tuple[tuple[str, ErrorKind], ...]) -> dict[str, Any]:
    #first missing field wins, the rest are not reported
    for name, kind in required:
        if not section.get(name):
            raise ConfigurationError(kind)
    return {name: section[name] for name, _ in required}


def _is_present(value: Any) -> bool:
    #an empty mapping still counts as given; "", False, 0 and None do not
    return isinstance(value, Mapping) or bool(value)


def auth_section(config: Mapping[str, Any], name: str) -> Any:
    """Return the "oauth" or "basic_auth" section, top level first, then under "auth"."""
    if _is_present(config.get(name)):
        return config[name]
    nested = config.get("auth")
    if isinstance(nested, Mapping) and _is_present(nested.get(name)):
        return nested[name]
    return None


def _parse_port(port: Any) -> int | None:
    if port is None or port == "":
        return None
    if isinstance(port, bool) or (isinstance(port, float) and not port.is_integer()):
        raise ConfigurationError(ErrorKind.INVALID_PORT)
    try:
        value = int(port)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(ErrorKind.INVALID_PORT) from exc
    if not 1 <= value <= 65535:
        raise ConfigurationError(ErrorKind.INVALID_PORT)
    return value


def validate(config: Mapping[str, Any]) -> ClientConfig:
    """Check a configuration mapping and return the typed ClientConfig.

    Raises:
        ConfigurationError: For the first problem found, in this order: missing host,
            no authentication, then the first missing field of the chosen auth mode.
    """
    if not config.get("host"):
        raise ConfigurationError(ErrorKind.NO_HOST)

    oauth = auth_section(config, "oauth")
    basic_auth = auth_section(config, "basic_auth")
    if oauth is None and basic_auth is None:
        raise ConfigurationError(ErrorKind.NO_AUTHENTICATION)

    auth: AuthConfig
    if oauth is not None:
        if not isinstance(oauth, Mapping):
            raise ConfigurationError(ErrorKind.INVALID_AUTHENTICATION_PROPERTY)
        #signature_method from the caller is ignored, Jira only accepts RSA-SHA1 here
        auth = OAuthConfig(**_require(oauth, _OAUTH_REQUIRED))
    else:
        if not isinstance(basic_auth, Mapping):
            raise ConfigurationError(ErrorKind.INVALID_AUTHENTICATION_PROPERTY)
        values = _require(basic_auth, _BASIC_REQUIRED)
        auth = BasicAuthCredentials(user=values["username"], password=values["password"])

    return ClientConfig(
        host=config["host"],
        auth=auth,
        protocol=config.get("protocol") or DEFAULT_PROTOCOL,
        port=_parse_port(config.get("port")),
    )

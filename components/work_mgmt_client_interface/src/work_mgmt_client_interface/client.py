"""Core client contract definitions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, MutableMapping
from concurrent.futures import Future
from typing import Any

__all__ = ["IssueNotFoundError", "RequestCallback", "RequestDispatcher"]

#(error, response, body) - the same shape every transport callback uses
RequestCallback = Callable[[BaseException | None, Any, Any], None]


class RequestDispatcher(ABC):
    """The slice of a client that sub-resources are allowed to see."""

    @abstractmethod
    def build_url(self, path: str) -> str:
        """Return the fully qualified, decoded URL for a REST path."""
        """Args:
            path: Path relative to the versioned API root, e.g. "/issue/TEST-1"

        Notes on usage: Must be a pure function of the client's configuration and the argument.
        """
        raise NotImplementedError

    @abstractmethod
    def make_request(
        self,
        options: MutableMapping[str, Any],
        callback: RequestCallback | None = None,
    ) -> Future:
        """Attach authentication to options and dispatch them."""
        """Args:
            options:  Request description understood by the transport (method, uri, qs, body, ...)
            callback: Called exactly once with (error, response, body)

        Returns:
            A Future resolving to (response, body), or failing with the transport error.
        """
        raise NotImplementedError


class IssueNotFoundError(Exception):
    """Base exception raised when an issue cannot be found by the client."""

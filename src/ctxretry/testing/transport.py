"""Scripted HTTP transport for exercising retrying client code in tests.

Mount a :class:`MockTransport` on a ``requests.Session`` and every request
sent through that session is answered with the next queued response::

    transport = MockTransport().with_mock_responses(
        [mock_response(status=503), mock_response(body=b"ok")]
    )
    session = transport.mount(requests.Session())
"""

from __future__ import annotations

import unittest
from http.client import responses as HTTP_REASONS
from typing import Iterable, Mapping, Optional

import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict


class NoMockResponseError(requests.ConnectionError):
    """Raised when a request arrives after the queued responses ran out."""


def mock_response(
    status: int = 200,
    body: bytes | str = b"",
    headers: Optional[Mapping[str, str]] = None,
) -> requests.Response:
    """Build a fully-read ``requests.Response``."""

    if isinstance(body, str):
        body = body.encode("utf-8")

    response = requests.Response()
    response.status_code = status
    response.reason = HTTP_REASONS.get(status, "")
    response.headers = CaseInsensitiveDict(headers or {})
    response.headers.setdefault("Content-Length", str(len(body)))
    response._content = body
    response._content_consumed = True
    response.encoding = "utf-8"
    return response


class MockTransport(BaseAdapter):
    """Transport adapter replaying queued responses in order."""

    def __init__(self) -> None:
        super().__init__()
        self.responses: list[requests.Response] = []
        self.requests: list[requests.PreparedRequest] = []
        self.send_options: list[dict[str, object]] = []
        self.index = 0
        self.case: Optional[unittest.TestCase] = None

    def with_test(self, case: unittest.TestCase) -> "MockTransport":
        """Report unexpected requests as failures of ``case``."""
        self.case = case
        return self

    def with_mock_responses(self, responses: Iterable[requests.Response]) -> "MockTransport":
        self.responses = list(responses)
        return self

    def add_mock_response(self, response: requests.Response) -> "MockTransport":
        self.responses.append(response)
        return self

    def mount(self, session: requests.Session) -> requests.Session:
        """Route both http and https traffic of ``session`` through this transport."""

        session.mount("http://", self)
        session.mount("https://", self)
        return session

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        self.requests.append(request)
        self.send_options.append({"stream": stream, "timeout": timeout})
        if self.index >= len(self.responses):
            if self.case is not None:
                self.case.addCleanup(self.case.fail, f"no mock response for request at index {self.index}")
            raise NoMockResponseError("no mock response available", request=request)

        response = self.responses[self.index]
        self.index += 1

        response.request = request
        response.url = request.url
        response.connection = self
        return response

    def close(self) -> None:
        pass


__all__ = ["MockTransport", "NoMockResponseError", "mock_response"]

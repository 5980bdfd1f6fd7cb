"""
Shared pytest fixtures.

Mailchimp is simulated with httpx.MockTransport: FakeMailchimp maps
(method, url) to a canned response or exception and records every request.
"""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import create_app
from oauth.stores import CredentialStore


TOKEN_URL = "https://login.mailchimp.com/oauth2/token"
METADATA_URL = "https://login.mailchimp.com/oauth2/metadata"
MEMBERS_URL = "https://us14.api.mailchimp.com/3.0/lists/list-1/members/"


class FakeMailchimp:
    """Routes outbound requests to canned responses."""

    def __init__(self):
        self.routes = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, url: str, status_code: int = 200, json_body=None, error: Exception = None):
        self.routes[(method, url)] = (status_code, json_body, error)

    def fail(self, method: str, url: str):
        """Make a route raise a transport error."""
        self.add(method, url, error=httpx.ConnectError("connection refused"))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url).split("?")[0]
        route = self.routes.get((request.method, url))
        if route is None:
            return httpx.Response(404, json={"title": "Resource Not Found"})
        status_code, json_body, error = route
        if error is not None:
            raise error
        if json_body is None:
            return httpx.Response(status_code)
        return httpx.Response(status_code, json=json_body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self) -> list[tuple[str, str]]:
        return [(r.method, str(r.url).split("?")[0]) for r in self.requests]

    def body(self, index: int = -1):
        return json.loads(self.requests[index].content)


@pytest.fixture
def settings():
    return Settings({
        "client_id": "client-123",
        "client_secret": "secret-456",
        "api_key": "abcdef-us14",
        "list_id": "list-1",
    })


@pytest.fixture
def store():
    return CredentialStore()


@pytest.fixture
def provider():
    return FakeMailchimp()


@pytest.fixture
def client(settings, store, provider):
    app = create_app(settings, store=store, transport=provider.transport)
    with TestClient(app) as test_client:
        yield test_client

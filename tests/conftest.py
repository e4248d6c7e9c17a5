"""
Test Configuration

Pytest configuration and fixtures for the test suite.
"""

import hashlib
import hmac
import json
from typing import Callable, Dict, Generator, List

import httpx
import pytest
from fastapi.testclient import TestClient

from workplace_relay.config import Settings
from workplace_relay.main import create_app
from workplace_relay.webhook.handler import get_http_client

GRAPH_BASE_URL = "https://graph.test"
SLACK_WEBHOOK_URI = "https://hooks.slack.test/services/T000/B000/XXXX"
APP_SECRET = "test_app_secret"
VERIFICATION_TOKEN = "test_verify_token"
ACCESS_TOKEN = "test_access_token"


class FakeDownstream:
    """
    Fake Graph API and Slack webhook behind an httpx.MockTransport.

    Records every request so tests can assert on call counts and bodies.
    """

    def __init__(self):
        self.names: Dict[str, str] = {"G": "Group G", "A": "Author A"}
        self.graph_status = 200
        self.slack_statuses: List[int] = []
        self.graph_requests: List[httpx.Request] = []
        self.slack_requests: List[httpx.Request] = []

    @property
    def slack_payloads(self) -> List[dict]:
        return [json.loads(r.content) for r in self.slack_requests]

    def handle(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == "graph.test":
            self.graph_requests.append(request)
            object_id = request.url.path.lstrip("/")
            if self.graph_status != 200:
                return httpx.Response(self.graph_status, json={"error": {"message": "boom"}})
            return httpx.Response(200, json={"id": object_id, "name": self.names[object_id]})

        self.slack_requests.append(request)
        if self.slack_statuses:
            return httpx.Response(self.slack_statuses.pop(0), text="invalid_payload")
        return httpx.Response(200, text="ok")

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handle))


@pytest.fixture
def settings() -> Settings:
    """Settings with every Workplace and Slack value configured."""
    return Settings(
        verification_token=VERIFICATION_TOKEN,
        app_secret=APP_SECRET,
        access_token=ACCESS_TOKEN,
        slack_webhook_uri=SLACK_WEBHOOK_URI,
        graph_api_base_url=GRAPH_BASE_URL,
    )


@pytest.fixture
def downstream() -> FakeDownstream:
    return FakeDownstream()


@pytest.fixture
def make_client(downstream: FakeDownstream) -> Generator[Callable[[Settings], TestClient], None, None]:
    """Factory for test clients wired to the fake downstream services."""
    clients: List[TestClient] = []

    def factory(app_settings: Settings) -> TestClient:
        app = create_app(app_settings)
        http_client = downstream.client()
        app.dependency_overrides[get_http_client] = lambda: http_client
        test_client = TestClient(app)
        test_client.__enter__()
        clients.append(test_client)
        return test_client

    yield factory

    for test_client in clients:
        test_client.__exit__(None, None, None)


@pytest.fixture
def client(make_client, settings: Settings) -> TestClient:
    """Create a test client for synchronous tests."""
    return make_client(settings)


@pytest.fixture
def sign() -> Callable[[bytes], str]:
    """Build an X-Hub-Signature-256 header value for a body."""
    def _sign(body: bytes, secret: str = APP_SECRET) -> str:
        digest = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
        return f"sha256={digest}"
    return _sign


def make_entry(
    group_id: str = "G",
    author_id: str = "A",
    verb: str = "add",
    message: str = "hello",
    permalink: str = "https://x/1"
) -> dict:
    return {
        "id": group_id,
        "time": 1700000000,
        "changes": [
            {
                "field": "posts",
                "value": {
                    "created_time": "2024-01-15T10:00:00+0000",
                    "community": {"id": "C1"},
                    "from": {"id": author_id, "name": "Stale Name"},
                    "message": message,
                    "permalink_url": permalink,
                    "post_id": f"{group_id}_99",
                    "target_type": "group",
                    "type": "status",
                    "verb": verb,
                },
            }
        ],
    }


@pytest.fixture
def entry_factory() -> Callable[..., dict]:
    """Build raw webhook entries."""
    return make_entry


@pytest.fixture
def sample_payload() -> dict:
    """Sample group-posts webhook payload with one new post."""
    return {"object": "group", "entry": [make_entry()]}

"""Pytest configuration and fixtures."""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import get_http_client, get_relay
from app.core.config import Settings
from app.domain.relay import ChatRelay
from app.domain.upstream import build_upstream_targets
from app.main import app

TEST_API_KEY = "test-key"


class UpstreamRecorder:
    """Fake upstream built on httpx.MockTransport.

    Every outgoing request is recorded; responses come from the handler the
    test supplies.
    """

    def __init__(self, handler):
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def payloads(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]

    def async_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


def make_relay(recorder: UpstreamRecorder, tick_interval: float = 0.0) -> ChatRelay:
    targets = build_upstream_targets(Settings(a4f_api_key=TEST_API_KEY))
    return ChatRelay(targets, recorder.async_client(), tick_interval=tick_interval)


@pytest.fixture
def client():
    """테스트용 FastAPI 클라이언트 (업스트림 호출 없음)"""
    return TestClient(app)


@pytest.fixture
def relay_client():
    """업스트림을 MockTransport로 대체한 클라이언트를 만드는 팩토리

    사용 예시:
        def test_stream(relay_client):
            client, upstream = relay_client(lambda req: httpx.Response(200, json={...}))
            response = client.post("/api/ai/stream", json={...})
    """

    def _make(handler):
        recorder = UpstreamRecorder(handler)
        relay = make_relay(recorder)
        app.dependency_overrides[get_relay] = lambda: relay
        app.dependency_overrides[get_http_client] = lambda: relay.client
        return TestClient(app), recorder

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def fake_relay():
    """라우터 없이 ChatRelay만 쓰는 테스트용 팩토리 (relay, recorder) 반환"""

    def _make(handler, tick_interval: float = 0.0):
        recorder = UpstreamRecorder(handler)
        return make_relay(recorder, tick_interval), recorder

    return _make

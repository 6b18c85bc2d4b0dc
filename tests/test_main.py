"""메인 애플리케이션 테스트."""

from datetime import datetime

from fastapi.testclient import TestClient

from app.api.dependencies import get_relay
from app.main import app


def test_health_check():
    """헬스 체크 엔드포인트 테스트"""
    client = TestClient(app)
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert datetime.fromisoformat(data["time"])


def test_options_returns_empty_204_on_any_path():
    """OPTIONS 요청은 경로와 상관없이 204"""
    client = TestClient(app)
    for path in ("/api/ai/stream", "/health", "/no/such/path"):
        response = client.options(path)
        assert response.status_code == 204
        assert response.content == b""
        assert "content-type" not in response.headers
        assert response.headers["access-control-allow-origin"] == "*"


def test_unknown_path_is_plain_text_404():
    client = TestClient(app)
    response = client.get("/nope")
    assert response.status_code == 404
    assert response.text == "Not found"
    assert response.headers["content-type"].startswith("text/plain")


def test_unsupported_method_is_404():
    client = TestClient(app)
    response = client.put("/api/ai/stream", json={})
    assert response.status_code == 404
    assert response.text == "Not found"


def test_cors_headers_on_every_response():
    """Origin 헤더가 없어도 CORS 헤더가 붙는지 확인"""
    client = TestClient(app)
    for response in (client.get("/health"), client.get("/nope")):
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["access-control-allow-methods"] == "GET,POST,OPTIONS"
        assert response.headers["access-control-allow-headers"] == "Content-Type, Authorization"


def test_docs_hidden_outside_debug():
    client = TestClient(app)
    assert client.get("/docs").status_code == 404


def test_unhandled_error_is_plain_500_with_cors_headers():
    """처리되지 않은 예외도 CORS 헤더가 붙은 500 응답"""
    def broken_relay():
        raise RuntimeError("relay not ready")

    app.dependency_overrides[get_relay] = broken_relay
    try:
        client = TestClient(app, raise_server_exceptions=False)
        response = client.post("/api/ai/stream", json={"model": "m", "messages": []})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.text == "Internal server error"
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["access-control-allow-methods"] == "GET,POST,OPTIONS"
    assert response.headers["access-control-allow-headers"] == "Content-Type, Authorization"

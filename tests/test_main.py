"""
HTTP tests for the FastAPI app
"""
import pytest
from fastapi.testclient import TestClient

import main
from ai_provider import GeminiBackend
from config import Settings
from fakes import FakeClient, make_response


@pytest.fixture
def client():
    return TestClient(main.app)


@pytest.fixture
def use_backend():
    """Install a backend on app.state for one test, remove it afterwards"""
    def _use(client_obj):
        main.app.state.backend = GeminiBackend(client_obj, model="gemini-2.5-flash")
        return main.app.state.backend
    yield _use
    if hasattr(main.app.state, "backend"):
        del main.app.state.backend


def _payload(nls_database, **extra):
    return {
        "lesson_title": "Em tập gõ phím",
        "nls_codes": ["1.1", "2.3"],
        "nls_database": nls_database,
        "grade": "3",
        **extra,
    }


def test_health(client):
    assert client.get("/").json()["status"] == "ok"
    assert client.get("/api/health").json() == {"ok": True}


@pytest.mark.parametrize("path,extra", [
    ("/api/suggestion", {}),
    ("/api/lesson-plan", {"initial_suggestion": "Trò chơi"}),
    ("/api/integrate", {"lesson_plan_content": "# GA"}),
    ("/api/assessment", {"assessment_type": "rubric"}),
])
def test_routes_return_generated_content(client, use_backend, nls_database, path, extra):
    use_backend(FakeClient(make_response("Nội dung")))
    r = client.post(path, json=_payload(nls_database, **extra))
    assert r.status_code == 200
    assert r.json() == {"content": "Nội dung"}


def test_missing_key_maps_to_503(client, use_backend, nls_database):
    use_backend(None)
    r = client.post("/api/suggestion", json=_payload(nls_database))
    assert r.status_code == 503
    assert r.json()["detail"]


def test_upstream_error_maps_to_502(client, use_backend, nls_database):
    use_backend(FakeClient(error=RuntimeError("boom")))
    r = client.post("/api/lesson-plan", json=_payload(nls_database))
    assert r.status_code == 502
    assert r.json() == {"detail": "Lỗi tạo giáo án."}


def test_invalid_grade_rejected(client, use_backend, nls_database):
    use_backend(FakeClient(make_response("x")))
    r = client.post("/api/suggestion", json=_payload(nls_database, grade="7"))
    assert r.status_code == 422


def test_invalid_assessment_type_rejected(client, use_backend, nls_database):
    use_backend(FakeClient(make_response("x")))
    r = client.post("/api/assessment", json=_payload(nls_database, assessment_type="essay"))
    assert r.status_code == 422


class TestLifespan:

    def test_keeps_injected_backend(self, use_backend, nls_database):
        injected = use_backend(FakeClient(make_response("Nội dung")))
        with TestClient(main.app) as c:
            assert main.app.state.backend is injected
            r = c.post("/api/suggestion", json=_payload(nls_database))
        assert r.json() == {"content": "Nội dung"}

    def test_builds_backend_from_settings(self, use_backend, monkeypatch, nls_database):
        settings = Settings(
            _env_file=None, vite_gemini_api_key=None, api_key=None, gemini_api_key=None,
            gemini_model="gemini-1.5-flash",
        )
        monkeypatch.setattr(main, "settings", settings)
        with TestClient(main.app) as c:
            backend = main.app.state.backend
            r = c.post("/api/suggestion", json=_payload(nls_database))
        assert backend.client is None
        assert backend.model == "gemini-1.5-flash"
        assert r.status_code == 503

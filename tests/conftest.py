"""
Pytest fixtures: fake Gemini client, no network access
"""
import pytest

from ai_provider import GeminiBackend
from fakes import FakeClient, make_response


NLS_DATABASE = {
    "1.1": "Tìm kiếm thông tin trên Internet",
    "2.3": "Giao tiếp an toàn qua thư điện tử",
    "3.2": "Tạo nội dung số đơn giản",
}


@pytest.fixture
def nls_database():
    return dict(NLS_DATABASE)


@pytest.fixture
def make_backend():
    """Create a GeminiBackend around a FakeClient"""
    def _make(text="", error=None, use_search=False, grounding_metadata=None):
        client = FakeClient(make_response(text, grounding_metadata), error)
        return GeminiBackend(client, model="gemini-2.5-flash", temperature=0.7, use_search=use_search)
    return _make

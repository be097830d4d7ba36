import logging
import re
from typing import Any, Dict, Optional

from google import genai
from google.genai import types

from config import Settings
from errors import ConfigurationError, UpstreamError, MISSING_API_KEY
from i18n import (
    build_suggestion_prompt,
    build_lesson_plan_prompt,
    build_integration_prompt,
    build_assessment_prompt,
)
from schema import (
    SuggestionRequest,
    LessonPlanRequest,
    IntegrationRequest,
    AssessmentRequest,
)

logger = logging.getLogger(__name__)

SOURCES_HEADING = "\n\n---\n**🌐 Nguồn tham khảo:**\n"
EMPTY_LESSON_PLAN = "Không có nội dung."
EMPTY_ASSESSMENT = "Không có nội dung đánh giá."

_FENCE_OPEN = re.compile(r"\A\s*```(?:markdown|md)?[ \t]*\r?\n")
_FENCE_CLOSE = re.compile(r"\r?\n?```\s*\Z")


class GeminiBackend:
    """
    Client Gemini dùng chung cho cả tiến trình:
    - tạo một lần lúc khởi động (from_settings) rồi truyền vào từng hàm
    - client=None nghĩa là chưa có API key; mọi lời gọi sẽ báo ConfigurationError
    """

    def __init__(self, client: Any, model: str, temperature: float = 0.7, use_search: bool = False):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.use_search = use_search

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiBackend":
        key = settings.resolved_api_key
        client = genai.Client(api_key=key) if key else None
        return cls(
            client,
            model=settings.gemini_model,
            temperature=settings.temperature,
            use_search=settings.use_google_search,
        )

    def require_client(self) -> Any:
        if self.client is None:
            raise ConfigurationError(MISSING_API_KEY)
        return self.client


async def _generate(
    backend: GeminiBackend,
    prompt: str,
    operation: str,
    error_message: str,
    config: Optional[types.GenerateContentConfig] = None,
    with_sources: bool = False,
) -> str:
    client = backend.require_client()
    logger.debug("%s: generate_content model=%s", operation, backend.model)
    try:
        resp = await client.aio.models.generate_content(
            model=backend.model,
            contents=prompt,
            config=config,
        )
        text = resp.text or ""
        if with_sources:
            text += format_sources(_grounding_metadata(resp))
        return text
    except Exception as e:
        logger.exception("%s: Gemini call failed", operation)
        raise UpstreamError(error_message) from e


# -----------------
# Hậu xử lý
# -----------------
def _field(obj: Any, *names: str) -> Any:
    # Nhận cả object của SDK lẫn dict (snake_case hoặc camelCase)
    if obj is None:
        return None
    for name in names:
        val = obj.get(name) if isinstance(obj, dict) else getattr(obj, name, None)
        if val is not None:
            return val
    return None


def format_sources(grounding_metadata: Any) -> str:
    chunks = _field(grounding_metadata, "grounding_chunks", "groundingChunks") or []
    unique: Dict[str, str] = {}
    for chunk in chunks:
        web = _field(chunk, "web")
        uri, title = _field(web, "uri"), _field(web, "title")
        if uri and title and uri not in unique:
            unique[uri] = title
    if not unique:
        return ""
    return SOURCES_HEADING + "\n".join(f"- [{title}]({uri})" for uri, title in unique.items())


def strip_markdown_fence(text: str) -> str:
    # Chỉ bỏ fence cuối khi đã bỏ fence mở (kết quả có thể bị cắt, thiếu fence đóng)
    m = _FENCE_OPEN.match(text)
    if not m:
        return text
    return _FENCE_CLOSE.sub("", text[m.end():], count=1)


def _grounding_metadata(response: Any) -> Any:
    candidates = getattr(response, "candidates", None) or []
    return getattr(candidates[0], "grounding_metadata", None) if candidates else None


# -----------------
# 4 chức năng chính
# -----------------
async def get_suggestion(backend: GeminiBackend, req: SuggestionRequest) -> str:
    system, prompt = build_suggestion_prompt(req)
    tools = [types.Tool(google_search=types.GoogleSearch())] if backend.use_search else None
    config = types.GenerateContentConfig(
        system_instruction=system,
        temperature=backend.temperature,
        tools=tools,
    )
    return await _generate(
        backend, prompt, "suggestion", "Lỗi kết nối AI. Vui lòng thử lại sau.", config,
        with_sources=backend.use_search,
    )


async def get_lesson_plan(backend: GeminiBackend, req: LessonPlanRequest) -> str:
    text = await _generate(backend, build_lesson_plan_prompt(req), "lesson_plan", "Lỗi tạo giáo án.")
    return text or EMPTY_LESSON_PLAN


async def integrate_nls(backend: GeminiBackend, req: IntegrationRequest) -> str:
    text = await _generate(backend, build_integration_prompt(req), "integrate", "Lỗi tích hợp NLS.")
    return strip_markdown_fence(text)


async def get_assessment(backend: GeminiBackend, req: AssessmentRequest) -> str:
    text = await _generate(
        backend, build_assessment_prompt(req), "assessment", "Lỗi khi tạo công cụ đánh giá."
    )
    return text or EMPTY_ASSESSMENT

# main.py
# Chạy: uvicorn main:app --reload   (hoặc: python main.py)
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import get_settings
from errors import ConfigurationError, UpstreamError
from schema import (
    SuggestionRequest,
    LessonPlanRequest,
    IntegrationRequest,
    AssessmentRequest,
    GeneratedText,
)
from ai_provider import (
    GeminiBackend,
    get_suggestion,
    get_lesson_plan,
    integrate_nls,
    get_assessment,
)

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Tạo client Gemini một lần, dùng chung cho mọi request
    if not hasattr(app.state, "backend"):
        app.state.backend = GeminiBackend.from_settings(settings)
    if app.state.backend.client is None:
        logger.warning("Gemini API key is not configured; generation endpoints will return 503")
    yield


app = FastAPI(title="NLS Lesson Assistant API", lifespan=lifespan)


# ======================
# C O R S   S E T U P
# ======================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_origin_regex=r"https://.*\.vercel\.app$",
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
    max_age=86400,
)


# ======================
# E R R O R S
# ======================
@app.exception_handler(ConfigurationError)
async def _configuration_error(request: Request, exc: ConfigurationError):
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.exception_handler(UpstreamError)
async def _upstream_error(request: Request, exc: UpstreamError):
    return JSONResponse(status_code=502, content={"detail": str(exc)})


def _backend(request: Request) -> GeminiBackend:
    return request.app.state.backend


# ======================
# H E A L T H   C H E C K
# ======================
@app.get("/")
def root():
    return {"status": "ok", "service": "nls-backend"}

@app.get("/api/health")
def health():
    return {"ok": True}


# ======================
# A P I   R O U T E S
# ======================
@app.post("/api/suggestion", response_model=GeneratedText)
async def api_suggestion(req: SuggestionRequest, request: Request) -> GeneratedText:
    return GeneratedText(content=await get_suggestion(_backend(request), req))


@app.post("/api/lesson-plan", response_model=GeneratedText)
async def api_lesson_plan(req: LessonPlanRequest, request: Request) -> GeneratedText:
    return GeneratedText(content=await get_lesson_plan(_backend(request), req))


@app.post("/api/integrate", response_model=GeneratedText)
async def api_integrate(req: IntegrationRequest, request: Request) -> GeneratedText:
    return GeneratedText(content=await integrate_nls(_backend(request), req))


@app.post("/api/assessment", response_model=GeneratedText)
async def api_assessment(req: AssessmentRequest, request: Request) -> GeneratedText:
    return GeneratedText(content=await get_assessment(_backend(request), req))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=settings.port)

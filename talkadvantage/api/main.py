import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from talkadvantage.api.routes.analyses import router as analyses_router
from talkadvantage.api.routes.analysis import router as analysis_router
from talkadvantage.api.routes.chat import router as chat_router
from talkadvantage.api.routes.drift import router as drift_router
from talkadvantage.api.routes.hotlinks import router as hotlinks_router
from talkadvantage.config import settings
from talkadvantage.hotlinks.detector import HotLinkDetector
from talkadvantage.llm.client import build_completion_client
from talkadvantage.logging_config import configure_logging
from talkadvantage.retrieval.embeddings import OpenAIEmbedder
from talkadvantage.retrieval.vector_store import VectorStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging(settings.log_level)

    completion_client = build_completion_client(settings)
    embedder = OpenAIEmbedder(
        api_key=settings.openai_api_key,
        model=settings.embedding_model,
        timeout=settings.llm_timeout_seconds,
    )
    app.state.completion_client = completion_client
    app.state.vector_store = VectorStore(embedder)
    app.state.hotlink_detector = HotLinkDetector(
        cooldown_seconds=settings.hotlink_cooldown_seconds
    )
    logger.info("TalkAdvantage API started")
    try:
        yield
    finally:
        await completion_client.aclose()
        await embedder.aclose()
        logger.info("TalkAdvantage API stopped")


app = FastAPI(
    title="TalkAdvantage Analysis API",
    description="Chunked transcript analysis, topic drift and transcript chat",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
    ],
    allow_origin_regex=r"https://.*\.vercel\.app|http://localhost:\d+",
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analysis_router)
app.include_router(chat_router)
app.include_router(drift_router)
app.include_router(hotlinks_router)
app.include_router(analyses_router)


@app.exception_handler(StarletteHTTPException)
async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid request: {location}: {first.get('msg')}" if location else (
            f"Invalid request: {first.get('msg')}"
        )
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()

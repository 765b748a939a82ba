"""FastAPI application entry point."""

import logging
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.ai.prompts import get_prompt_version
from app.api.v1 import health
from app.api.v1.deps import get_pipeline
from app.api.v1.router import api_router
from app.config import settings
from app.core.exceptions import GENERIC_SERVER_ERROR, APIError, UpstreamError

# Configure structured logging
logging.basicConfig(format="%(message)s", level=logging.DEBUG if settings.debug else logging.INFO)

structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer() if settings.is_production else structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)

# OpenAPI tag descriptions
OPENAPI_TAGS = [
    {
        "name": "Health",
        "description": "Liveness probe for load balancers and uptime monitors.",
    },
    {
        "name": "Chat",
        "description": """
**Conversational Book Recommendations**

Describe what you feel like reading; the assistant asks follow-up questions
(genre, mood, topic, then publication era) until it can search the catalog
and pick a single novel for you.

Ask for "another one" and the previously recommended title is skipped.
        """,
    },
]

API_DESCRIPTION = """
# Readive API

Chat your way to your next novel.

---

## Flow

1. `POST /api/chat` with `{"message": "...", "conversationHistory": []}`
2. If the reply `type` is `question`, show it and send the user's answer with the updated history
3. A `recommendation` reply carries the book, its cover and the reasoning

---

## Error Responses

```json
{"error": "Message required"}
```

| Status | Description |
|--------|-------------|
| 400 | Missing or malformed input |
| 500 | Model or catalog failure |
"""


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    prompts = get_prompt_version(settings.prompt_version)
    # Raises ValueError when the model API key is missing
    get_pipeline()
    logger.info(
        "Starting Readive API",
        version=settings.app_version,
        env=settings.environment,
        model=settings.ai_model,
        prompt_version=prompts.version,
    )

    yield

    logger.info("Shutting down Readive API")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=API_DESCRIPTION,
        openapi_tags=OPENAPI_TAGS,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID middleware
    @app.middleware("http")
    async def add_request_id(request: Request, call_next) -> Response:
        """Add unique request ID to each request for tracing."""
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    # Request logging middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next) -> Response:
        """Log all incoming requests."""
        logger.info(
            "Request started",
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else None,
        )

        response = await call_next(request)

        logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
        )
        return response

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        """Render API errors as ``{"error": message}``."""
        if isinstance(exc, UpstreamError):
            logger.error(
                "Upstream failure",
                code=exc.code,
                source=exc.source,
                reason=exc.reason,
            )
        else:
            logger.warning("Request rejected", code=exc.code, message=exc.error_message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.error_message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Malformed request bodies are client errors (400)."""
        logger.warning("Invalid request body", errors=str(exc.errors())[:500])
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle uncaught exceptions."""
        logger.exception("Unhandled exception", exc_info=exc)
        return JSONResponse(status_code=500, content={"error": GENERIC_SERVER_ERROR})

    # Liveness probe at the root, conversation API under /api
    app.include_router(health.router, tags=["Health"])
    app.include_router(api_router, prefix="/api")

    return app


app = create_app()

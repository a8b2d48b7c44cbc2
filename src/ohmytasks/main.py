import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .logging_setup import configure_logging
from .routers import tasks as tasks_router
from .routers import voice as voice_router
from .settings import get_settings
from .tasks_client import get_task_cache
from .upstream import UpstreamError, UpstreamNotConfigured

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "tasks",
        "description": "Per-user task list, creation, update and deletion backed by the upstream task API.",
    },
    {"name": "voice", "description": "Turn spoken transcripts into task drafts."},
]

_settings = get_settings()
configure_logging(_settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Oh My Tasks Backend",
    description="Task management API with voice entry, proxying an external task store behind a read cache.",
    version="0.1.0",
    openapi_tags=openapi_tags,
)

# Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
allow_all = (_settings.cors_allow_origins == ["*"]) or (len(_settings.cors_allow_origins) == 0)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_all else _settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return a consistent JSON structure for request validation errors.

    Response format:
        {
            "error": "ValidationError",
            "detail": [... pydantic/fastapi error details ...],
            "message": "Request validation failed"
        }
    """
    return JSONResponse(
        status_code=422,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(UpstreamError)
async def upstream_exception_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    """
    Surface upstream failures with the upstream status code, or 502 when the
    upstream could not be reached at all.
    """
    status_code = exc.status_code if exc.status_code and exc.status_code >= 400 else 502
    logger.warning("Upstream error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status_code,
        content={"error": "Upstream error", "message": str(exc), "details": exc.body},
    )


@app.exception_handler(UpstreamNotConfigured)
async def upstream_not_configured_handler(request: Request, exc: UpstreamNotConfigured) -> JSONResponse:
    logger.error("Task API endpoint is not configured")
    return JSONResponse(
        status_code=503,
        content={"error": "Service unavailable", "message": str(exc)},
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Bad request", "message": str(exc)})


# PUBLIC_INTERFACE
@app.get("/", summary="Health Check", tags=["health"])
def health_check():
    """
    Health check endpoint.

    Returns:
        A JSON object indicating service health and the active cache backend.
    """
    return {"message": "Healthy", "cache_backend": get_task_cache().backend}


# Include routers
app.include_router(tasks_router.router)
app.include_router(voice_router.router)

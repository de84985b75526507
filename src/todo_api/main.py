from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .exceptions import RepositoryError, TodoValidationError
from .logging_config import get_logger, setup_logging
from .settings import get_settings
from .routers import todos as todos_router

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "todos",
        "description": "Create, read, update, delete and toggle Todo items.",
    },
]

_settings = get_settings()
setup_logging(_settings.log_level)
logger = get_logger(__name__)

app = FastAPI(
    title="Todo API",
    description="Task management API built on a layered todo core with pluggable storage backends.",
    version="0.1.0",
    openapi_tags=openapi_tags,
)

# Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS)
allow_all = (_settings.cors_allow_origins == ["*"]) or (len(_settings.cors_allow_origins) == 0)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_all else _settings.cors_allow_origins,
    allow_credentials=not allow_all,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _validation_response(message: str, detail: list) -> JSONResponse:
    """
    Response format shared by every 400:
        {
            "error": "ValidationError",
            "message": "...",
            "detail": [...]
        }
    """
    return JSONResponse(
        status_code=400,
        content={
            "error": "ValidationError",
            "message": message,
            "detail": jsonable_encoder(detail),
        },
    )


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and path parameters are reported as 400."""
    return _validation_response("Request validation failed", list(exc.errors()))


@app.exception_handler(TodoValidationError)
async def todo_validation_exception_handler(request: Request, exc: TodoValidationError) -> JSONResponse:
    return _validation_response(
        exc.message,
        [{"loc": ["body", exc.field], "msg": exc.message, "type": "value_error"}],
    )


@app.exception_handler(RepositoryError)
async def repository_exception_handler(request: Request, exc: RepositoryError) -> JSONResponse:
    logger.exception(f"Storage failure during {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={
            "error": "RepositoryError",
            "message": "Storage backend failure",
        },
    )


# PUBLIC_INTERFACE
@app.get("/", summary="Health Check", tags=["health"])
def health_check():
    """
    Health check endpoint.

    Returns:
        A JSON object indicating service health.
    """
    return {"message": "Healthy", "backend": _settings.persistence_backend}


# Include routers
app.include_router(todos_router.router, prefix=_settings.api_prefix)

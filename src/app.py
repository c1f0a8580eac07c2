"""FastAPI application: routers, error envelope and request correlation."""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.models.envelope import fail
from src.routes import auth, favorites, items, ratings, webhooks
from src.routes.deps import validation_message
from src.utils.config import Settings, get_settings
from src.utils.errors import BakeriesError
from src.utils.logging import correlation_context, get_structured_logger
from src.utils.logging_config import LoggingConfig

logger = get_structured_logger(__name__)

SERVICE_NAME = "bakeries-backend"


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(BakeriesError)
    async def handle_domain_error(request: Request, exc: BakeriesError):
        if exc.status_code >= 500:
            logger.error("Request failed", path=request.url.path, error=str(exc), status_code=exc.status_code)
            # Backend details stay in the logs
            message = exc.message if exc.status_code != 500 else "Server error"
        else:
            message = exc.message
        return JSONResponse(status_code=exc.status_code, content=fail(message))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content=fail(str(exc.detail)), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content=fail(validation_message(exc.errors())))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.error("Unhandled error", exc_info=True, path=request.url.path)
        return JSONResponse(status_code=500, content=fail("Server error"))


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API application."""
    settings = settings or get_settings()
    LoggingConfig.setup_logging()

    app = FastAPI(title="Bakeries API", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def bind_correlation_id(request: Request, call_next):
        header = LoggingConfig.LOG_CORRELATION_ID_HEADER
        with correlation_context(request.headers.get(header)) as correlation_id:
            response = await call_next(request)
            response.headers[header] = correlation_id
            return response

    register_error_handlers(app)

    prefix = settings.api_prefix.rstrip("/")
    app.include_router(items.router, prefix=f"{prefix}/items", tags=["items"])
    app.include_router(favorites.router, prefix=f"{prefix}/favorites", tags=["favorites"])
    app.include_router(ratings.router, prefix=f"{prefix}/ratings", tags=["ratings"])
    app.include_router(auth.router, prefix=f"{prefix}/auth", tags=["auth"])
    app.include_router(webhooks.router, prefix=prefix, tags=["webhooks"])

    @app.get(f"{prefix}/health")
    async def health():
        return {"status": "ok", "service": SERVICE_NAME}

    return app


app = create_app()

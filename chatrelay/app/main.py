"""chatrelay FastAPI application.

This is the main application module that:
- Initializes the FastAPI application
- Configures middleware (CORS, exception handling)
- Registers all route handlers
- Manages application lifespan (startup/shutdown)
"""
import logging
import os
from contextlib import asynccontextmanager
from typing import List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from chatrelay import __version__
from chatrelay.adapters.llm.factory import build_adapters
from chatrelay.app.dependencies import get_app_state
from chatrelay.config.loader import ConfigLoader
from chatrelay.core.errors import ErrorCode
from chatrelay.core.profile import ProfileStore

# Configure structured JSON logging
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Loads configuration, applies provider overrides, builds the limits
    table and connects the profile store.
    """
    state = get_app_state()

    config_path = os.getenv("CHATRELAY_CONFIG", "config.yaml")
    redis_url = os.getenv("REDIS_URL")

    logger.info(f"Loading configuration from {config_path}")
    state.config_loader = ConfigLoader(config_path)
    state.config_loader.load()

    state.adapters = build_adapters(state.config_loader.get_providers())
    state.model_limits = state.config_loader.get_model_limits()
    state.profile_store = ProfileStore(
        state.config_loader.get_profiles(),
        redis_url=redis_url,
        key_prefix="chatrelay",
    )

    logger.info(
        f"chatrelay started with providers {sorted(state.adapters)} and "
        f"{len(state.profile_store.profiles)} configured profile(s)"
    )

    yield

    logger.info("Shutting down chatrelay...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title="chatrelay",
        version=__version__,
        description=(
            "Streams chat completions from Anthropic, Groq, Mistral, OpenAI "
            "and Perplexity to the browser as server-sent events."
        ),
        lifespan=lifespan,
    )

    _configure_cors(app)
    _register_exception_handlers(app)
    _register_routes(app)

    return app


def _configure_cors(app: FastAPI) -> None:
    """Configure CORS middleware."""
    cors_origins_env = os.getenv("CORS_ORIGINS", "*")
    is_production = os.getenv("ENVIRONMENT", "").lower() == "production"

    if cors_origins_env == "*":
        if is_production:
            logger.warning(
                "SECURITY WARNING: CORS_ORIGINS is set to '*' in production. "
                "This allows requests from any origin."
            )
        cors_origins = ["*"]
    else:
        cors_origins = _validate_cors_origins(cors_origins_env)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )


def _validate_cors_origins(cors_origins_env: str) -> List[str]:
    """Validate and filter comma-separated CORS origins."""
    validated_origins = []

    for origin in (o.strip() for o in cors_origins_env.split(",")):
        if not origin:
            continue

        if origin != "*" and not (
            origin.startswith("http://") or origin.startswith("https://")
        ):
            logger.warning(f"Invalid CORS origin format (skipping): {origin}")
            continue

        validated_origins.append(origin)

    return validated_origins


def _register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Every error leaves the service in the same {"message": ...} envelope
    the relay endpoints use.
    """

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        detail = first.get("msg", "Invalid request")
        logger.warning(f"{ErrorCode.BAD_REQUEST.value} {request.url.path}: {location}: {detail}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"message": f"Invalid request: {location}: {detail}" if location else detail},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for unhandled errors."""
        logger.error(
            f"{ErrorCode.INTERNAL_ERROR.value} unhandled exception: {type(exc).__name__}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": f"Internal server error: {exc}"},
        )


def _register_routes(app: FastAPI) -> None:
    """Register all route handlers."""
    from chatrelay.app.routes import chat, health

    app.include_router(health.router)
    app.include_router(chat.router)


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

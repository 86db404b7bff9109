from contextlib import asynccontextmanager

from fastapi import FastAPI

from prepdeck.api.middleware import error_handler, request_logger, setup_cors, setup_rate_limit
from prepdeck.api.router import router as api_router
from prepdeck.config import settings
from prepdeck.services.markup_service import MarkupService
from prepdeck.services.solution_service import SolutionService
from prepdeck.utils.exceptions import ServiceUnavailableError
from prepdeck.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

SERVICE_NAME = "PrepDeck Markup Service"
SERVICE_VERSION = "1.0.0"

# ------------------------------------------------------------------
# Global service instances (initialized in lifespan)
# ------------------------------------------------------------------
_markup_service: MarkupService | None = None
_solution_service: SolutionService | None = None
_startup_error: str | None = None


def _service_unavailable_message(default_message: str) -> str:
    return _startup_error or default_message


def get_markup_service() -> MarkupService:
    if _markup_service is None:
        raise ServiceUnavailableError("Markup service is not initialized")
    return _markup_service


def get_solution_service() -> SolutionService:
    if _solution_service is None:
        raise ServiceUnavailableError(
            _service_unavailable_message("Solution service is not initialized")
        )
    return _solution_service


# ------------------------------------------------------------------
# Lifespan
# ------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    global _markup_service, _solution_service, _startup_error

    logger.info(f"Initializing {SERVICE_NAME}...")
    _markup_service = MarkupService()
    _solution_service = None
    _startup_error = None

    solutions_dir = settings.validate_solutions_path()
    if solutions_dir is None:
        _startup_error = f"Solutions directory not found: {settings.solutions_dir}"
        logger.warning(f"{SERVICE_NAME} started in degraded mode: {_startup_error}")
    else:
        try:
            _solution_service = SolutionService(solutions_dir, _markup_service)
            logger.info(f"{SERVICE_NAME} initialized successfully (solutions: {solutions_dir})")
        except Exception as e:
            _startup_error = f"Solution service startup failed: {e}"
            logger.exception(_startup_error)

    yield
    logger.info(f"Shutting down {SERVICE_NAME}...")


# ------------------------------------------------------------------
# App factory
# ------------------------------------------------------------------
def create_app() -> FastAPI:
    setup_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)

    app = FastAPI(
        title=SERVICE_NAME,
        description="Parses escaped, markdown-like interview-prep content into typed blocks",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )

    # Middleware (registered last runs first)
    app.middleware("http")(error_handler)
    app.middleware("http")(request_logger)
    setup_cors(app)
    setup_rate_limit(app)

    app.include_router(api_router)

    @app.get("/", tags=["Health"])
    async def root():
        return {
            "status": "ok" if _startup_error is None else "degraded",
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "startup_error": _startup_error,
        }

    @app.get("/health", tags=["Health"])
    async def health():
        return {
            "status": "ok" if _startup_error is None else "degraded",
            "startup_error": _startup_error,
            "services": {
                "markup_service_initialized": _markup_service is not None,
                "solution_service_initialized": _solution_service is not None,
            },
        }

    return app


app = create_app()

import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from prepdeck.config import settings
from prepdeck.utils.exceptions import PrepDeckError
from prepdeck.utils.logger import get_logger

logger = get_logger(__name__)

PROCESS_TIME_HEADER = "X-Process-Time-Ms"

limiter = Limiter(key_func=get_remote_address)


async def error_handler(request: Request, call_next):
    """Turn service errors into ``{"success": false, "error": ...}`` responses"""
    try:
        return await call_next(request)
    except PrepDeckError as e:
        context = {
            "path": request.url.path,
            "status": e.status_code,
            "error_type": type(e).__name__,
        }
        # 4xx are caller mistakes (unknown problem, oversized input)
        if e.status_code >= 500:
            logger.error(f"Service error: {e.message}", extra=context)
        else:
            logger.warning(f"Request rejected: {e.message}", extra=context)
        return JSONResponse(
            status_code=e.status_code,
            content={"success": False, "error": e.message},
        )
    except Exception:
        logger.exception("Unhandled exception", extra={"path": request.url.path, "status": 500})
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Internal server error"},
        )


async def request_logger(request: Request, call_next):
    """Log one line per request and expose the elapsed time as a header"""
    start = time.perf_counter()
    response = await call_next(request)
    elapsed = (time.perf_counter() - start) * 1000
    response.headers[PROCESS_TIME_HEADER] = f"{elapsed:.1f}"
    logger.info(
        f"{request.method} {request.url.path} → {response.status_code} ({elapsed:.0f}ms)",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round(elapsed, 1),
        },
    )
    return response


def setup_cors(app: FastAPI) -> None:
    origins = settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=[PROCESS_TIME_HEADER],
    )


def setup_rate_limit(app: FastAPI) -> None:
    """Rate limits are declared per route with ``@limiter.limit``"""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

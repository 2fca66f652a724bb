"""
Flatmatch — FastAPI application.

Wires the quiz, user and matching routers under ``/api/v1`` and adds:

- JSON logging through structlog, with a per-request ``request_id`` bound
  into the log context
- a request middleware that enforces ``REQUEST_TIMEOUT_SECONDS`` and counts
  in-flight requests so shutdown can wait for them
- ``/health`` (process up) and ``/health/deep`` (database reachable and the
  ``quiz_results`` table readable)
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from flatmatch.config import get_settings
from flatmatch.database import engine, get_db, ping_database
from flatmatch.models.quiz_result import QuizResult

REQUEST_ID_HEADER = "X-Request-ID"


def configure_logging(level: str) -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


settings = get_settings()
configure_logging(settings.LOG_LEVEL)

logger = structlog.get_logger("flatmatch")


class InFlightRequests:
    """Number of requests currently being served."""

    def __init__(self) -> None:
        self.count = 0
        self._idle = asyncio.Event()
        self._idle.set()

    def enter(self) -> None:
        self.count += 1
        self._idle.clear()

    def leave(self) -> None:
        self.count -= 1
        if self.count <= 0:
            self.count = 0
            self._idle.set()

    async def drain(self, timeout: float) -> bool:
        """Wait for the count to reach zero; False if ``timeout`` ran out first."""
        try:
            await asyncio.wait_for(self._idle.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            return False
        return True


in_flight = InFlightRequests()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("startup", environment=settings.ENVIRONMENT)
    # Fails fast on a bad DATABASE_URL.
    await ping_database()
    logger.info("database_reachable")

    yield

    drained = await in_flight.drain(settings.SHUTDOWN_DRAIN_SECONDS)
    if not drained:
        logger.warning("shutdown_with_requests_in_flight", remaining=in_flight.count)
    await engine.dispose()
    logger.info("shutdown_complete")


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Request id, in-flight tracking, timeout (504) and the access log line."""

    def __init__(
        self,
        app,
        timeout_seconds: float,
        tracker: InFlightRequests,
    ) -> None:
        super().__init__(app)
        self.timeout_seconds = timeout_seconds
        self.tracker = tracker

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id, method=request.method, path=request.url.path
        )

        start = time.perf_counter()
        self.tracker.enter()
        try:
            response = await asyncio.wait_for(call_next(request), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning("request_timeout", timeout=self.timeout_seconds)
            response = JSONResponse(status_code=504, content={"detail": "Request timed out"})
        except Exception:
            logger.exception("request_failed")
            raise
        finally:
            self.tracker.leave()

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            "request_handled",
            status=response.status_code,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return response


app = FastAPI(
    title="Flatmatch",
    description="Flatmate compatibility matching service",
    version="1.0.0",
    lifespan=lifespan,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
)

# Last added runs first: CORS, then request context.
app.add_middleware(
    RequestContextMiddleware,
    timeout_seconds=settings.REQUEST_TIMEOUT_SECONDS,
    tracker=in_flight,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["health"])
async def health_liveness() -> dict:
    return {"status": "healthy"}


@app.get("/health/deep", tags=["health"])
async def health_deep(db: AsyncSession = Depends(get_db)) -> JSONResponse:
    """Readiness: the database answers and ``quiz_results`` can be read."""
    try:
        result = await db.execute(select(func.count()).select_from(QuizResult))
        stored = result.scalar_one()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("health_database_failure", error=str(exc))
        return JSONResponse(
            status_code=503,
            content={"status": "degraded", "database": f"error: {exc}"},
        )
    return JSONResponse(
        content={"status": "healthy", "database": "connected", "quiz_results": stored}
    )


from flatmatch.api.router import router as api_router  # noqa: E402

app.include_router(api_router, prefix="/api/v1")

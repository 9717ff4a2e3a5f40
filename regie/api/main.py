"""
FastAPI application factory.

Domain errors are rendered once, here, as ``{"type", "message", "details"}``
with a status code chosen by error type.
"""

import time
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.middleware.base import BaseHTTPMiddleware

from regie.api.routes import assignments, events, schedules
from regie.core.config import settings
from regie.core.db import create_db_and_tables, get_engine
from regie.core.observability import (
    get_logger,
    set_actor_id,
    set_correlation_id,
    setup_structured_logging,
)
from regie.domain.shared.exceptions import DomainError, ErrorType
from regie.infrastructure.database.repositories import DatabaseError
from regie.infrastructure.database.unit_of_work import (
    UnitOfWorkManager,
    get_unit_of_work_manager,
)

logger = get_logger(__name__)

ERROR_STATUS_CODES: dict[ErrorType, int] = {
    ErrorType.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorType.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorType.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorType.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorType.CONFLICTS_PENDING: status.HTTP_409_CONFLICT,
    ErrorType.DUPLICATE_ASSIGNMENT: status.HTTP_409_CONFLICT,
    ErrorType.CONCURRENT_MODIFICATION: status.HTTP_409_CONFLICT,
    ErrorType.INVALID_RANGE: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorType.OUT_OF_RANGE: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorType.INVALID_CANDIDATE: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorType.EMPTY_SELECTION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorType.VALIDATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """Binds a correlation id to every request and logs its outcome."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        set_correlation_id(correlation_id)
        set_actor_id(request.headers.get("X-Actor-Id", ""))

        start_time = time.perf_counter()
        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id

        logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_seconds=round(time.perf_counter() - start_time, 4),
        )
        return response


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = ERROR_STATUS_CODES.get(exc.error_type, status.HTTP_400_BAD_REQUEST)
    logger.info(
        "domain_error",
        path=request.url.path,
        error_type=exc.error_type.value,
        status_code=status_code,
    )
    body = exc.to_dict()
    body["retryable"] = exc.retryable
    return JSONResponse(status_code=status_code, content=body)


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    logger.error("database_error", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "type": "database_error",
            "message": "The staffing store is unavailable",
            "details": {},
        },
    )


def custom_generate_unique_id(route: APIRoute) -> str:
    return f"{route.tags[0]}-{route.name}"


def create_app(
    uow_manager: UnitOfWorkManager | None = None, create_tables: bool = True
) -> FastAPI:
    """
    Build the API application.

    Args:
        uow_manager: Unit of work manager to serve requests with; the global
            one (default engine) when omitted
        create_tables: Create missing tables on startup
    """
    setup_structured_logging()
    manager = uow_manager or get_unit_of_work_manager()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        if create_tables and uow_manager is None:
            create_db_and_tables(get_engine())
        logger.info(
            "application_started",
            project_name=settings.PROJECT_NAME,
            environment=settings.ENVIRONMENT,
            api_version=settings.API_V1_STR,
        )
        yield
        logger.info("application_stopped")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Event staffing and schedule consistency engine.",
        version="0.1.0",
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        generate_unique_id_function=custom_generate_unique_id,
        lifespan=lifespan,
    )
    app.state.uow_manager = manager

    app.add_middleware(ObservabilityMiddleware)
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)

    api_router = APIRouter()
    api_router.include_router(events.router)
    api_router.include_router(schedules.router)
    api_router.include_router(assignments.router)
    app.include_router(api_router, prefix=settings.API_V1_STR)

    @app.get("/health", include_in_schema=False)
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app

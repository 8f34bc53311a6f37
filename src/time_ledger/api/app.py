"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from time_ledger import __version__
from time_ledger.api.routes import (
    comp_time_router,
    health_router,
    leave_router,
    overtime_router,
    policies_router,
    timesheets_router,
    workdays_router,
)
from time_ledger.calculators.errors import InvalidInputError
from time_ledger.config import configure_logging
from time_ledger.database import dispose_db, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    configure_logging()
    init_db()
    yield
    await dispose_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Time Ledger API",
        description="Attendance ledger, overtime, leave and payroll timesheets",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(InvalidInputError)
    async def invalid_input_handler(
        request: Request, exc: InvalidInputError
    ) -> JSONResponse:
        """Reject malformed input."""
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc), "code": "INVALID_INPUT"},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    app.include_router(health_router)
    app.include_router(workdays_router, prefix="/api/v1")
    app.include_router(overtime_router, prefix="/api/v1")
    app.include_router(leave_router, prefix="/api/v1")
    app.include_router(comp_time_router, prefix="/api/v1")
    app.include_router(timesheets_router, prefix="/api/v1")
    app.include_router(policies_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()

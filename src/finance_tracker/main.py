from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from finance_tracker import __version__
from finance_tracker.api.middleware.error_handler import (
    handle_app_error,
    handle_generic_error,
    handle_http_exception,
    handle_integrity_error,
    handle_validation_error,
)
from finance_tracker.api.middleware.logging import RequestLoggingMiddleware
from finance_tracker.api.routes import router as api_router
from finance_tracker.config import settings
from finance_tracker.core.exceptions import FinanceTrackerError
from finance_tracker.core.logging import setup_logging
from finance_tracker.db.session import async_engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level, settings.log_json)
    yield
    await async_engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Personal Finance Tracker API",
        description="Track income and expenses with per-user summaries",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Middleware added last runs first, so CORS wraps request logging.
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers (order matters - most specific first)
    app.add_exception_handler(FinanceTrackerError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_generic_error)

    app.include_router(api_router)

    return app


app = create_app()

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from cardbook.api.middleware.error_handler import (
    handle_cardbook_error,
    handle_generic_error,
    handle_integrity_error,
    handle_validation_error,
)
from cardbook.api.middleware.logging import RequestLoggingMiddleware
from cardbook.api.v1 import router as v1_router
from cardbook.api.v1.health import router as health_router
from cardbook.categorization.keywords import get_keyword_provider
from cardbook.config import settings
from cardbook.core.exceptions import CardbookError
from cardbook.core.logging import setup_logging
from cardbook.db.session import AsyncSessionLocal

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging(settings.log_level, settings.log_json)
    try:
        async with AsyncSessionLocal() as db:
            await get_keyword_provider().load(db)
    except SQLAlchemyError as e:
        # Requests retry the load lazily; readiness reports keywords_loaded=false.
        logger.error("Keyword table load failed at startup", extra={"error_type": type(e).__name__})
    yield
    # Shutdown


def create_app() -> FastAPI:
    app = FastAPI(
        title="Cardbook API",
        description="Card statement ingestion, categorization and monthly spending analysis",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)

    # Register exception handlers (most specific first)
    app.add_exception_handler(CardbookError, handle_cardbook_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(Exception, handle_generic_error)

    app.include_router(health_router)
    app.include_router(v1_router)

    return app


app = create_app()

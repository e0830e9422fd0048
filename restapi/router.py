"""Application configuration and router setup."""

import logging

import fastapi
from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware import cors
from fastapi.responses import JSONResponse

from components.core import init_db
from components.core.config import get_settings
from components.core.errors import NotFoundError, ValidationError
from components.core.log_config import configure_logging
from restapi.endpoints import auth, budgets, health_check, records

logger = logging.getLogger(__name__)


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"message": exc.message})


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": exc.message, "errors": exc.errors},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": ".".join(str(part) for part in err["loc"][1:]), "message": err["msg"]}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({"message": "Validation failed", "errors": errors}),
    )


def create_app() -> fastapi.FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging()

    app = fastapi.FastAPI(
        title="Finance Ledger API",
        description="Income/expense records, budgets and ledger summaries",
        version="1.0.0",
        debug=settings.DEBUG,
        lifespan=init_db.lifespan,
    )

    # Initialize database
    init_db.init_db(app)

    app.add_middleware(
        cors.CORSMiddleware,
        allow_origins=[settings.CLIENT_URL],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Include routers
    app.include_router(health_check.router)
    app.include_router(auth.router)
    app.include_router(records.router)
    app.include_router(budgets.router)

    if settings.AUTH_MODE == "static":
        logger.warning("AUTH_MODE=static: every request runs as user %s", settings.STATIC_USER_ID)

    return app

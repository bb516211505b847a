"""FastAPI application entry point."""

from dotenv import load_dotenv

load_dotenv()

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from certrelay import __version__
from certrelay.api.routes import analyze, documents, drive, health
from certrelay.core.config import Settings, get_settings
from certrelay.core.error_handlers import (
    handle_app_error,
    handle_http_error,
    handle_unknown_error,
    handle_validation_error,
)
from certrelay.core.lifespan import lifespan
from certrelay.core.logging import configure_logging
from certrelay.core.middleware import TRACE_HEADER, trace_id_middleware
from certrelay.domain.errors import BaseError

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

    app = FastAPI(
        title="certrelay",
        version=__version__,
        description="Civil-status certificate classification, extraction and Google Drive relay",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # 1. Register Middleware (last added runs first)
    app.middleware("http")(trace_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=[TRACE_HEADER],
    )

    # 2. Register Exception Handlers
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(BaseError, handle_app_error)
    app.add_exception_handler(Exception, handle_unknown_error)

    # Routes
    app.include_router(health.router)
    app.include_router(drive.router)
    app.include_router(analyze.router)
    app.include_router(documents.router)

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    logger.info("Starting %s on %s:%d", settings.APP_NAME, settings.HOST, settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)

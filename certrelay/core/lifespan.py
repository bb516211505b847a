import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from certrelay.domain.errors import ConfigurationError
from certrelay.services.factories import build_pipeline, build_storage, build_translation_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build long-lived collaborators once and park them on ``app.state``.

    A missing inference credential does not stop the process: the error is
    stored and reported on every request that needs the pipeline.
    """
    settings = app.state.settings

    logger.info("Initializing inference pipeline (provider=%s)...", settings.INFERENCE_PROVIDER)
    app.state.pipeline_error = None
    try:
        app.state.pipeline = build_pipeline(settings)
        logger.info("Inference pipeline ready")
    except ConfigurationError as e:
        logger.error("Inference pipeline unavailable: %s", e.message)
        app.state.pipeline = None
        app.state.pipeline_error = e

    # Drive credentials resolve lazily on first use
    storage = build_storage(settings)
    app.state.storage = storage
    app.state.translation_service = build_translation_service(settings, storage)

    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Upload directory: %s", settings.upload_dir)

    yield

    logger.info("Shutting down")

"""FastAPI dependency injection functions.

Collaborators are built in the lifespan and read from ``app.state``; tests
replace them through ``app.dependency_overrides``.
"""

from fastapi import Request

from certrelay.core.config import Settings
from certrelay.domain.errors import ConfigurationError
from certrelay.domain.pipeline.orchestrator import DocumentPipeline
from certrelay.domain.ports.storage_port import StoragePort
from certrelay.services.documents import TranslationDocumentService


async def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_pipeline(request: Request) -> DocumentPipeline:
    """Get the inference pipeline from app state.

    Raises:
        ConfigurationError: The pipeline could not be built at startup
    """
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        error = getattr(request.app.state, "pipeline_error", None)
        if error is not None:
            raise error
        raise ConfigurationError("Inference pipeline is not initialized")
    return pipeline


async def get_storage(request: Request) -> StoragePort:
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise ConfigurationError("Storage client is not initialized")
    return storage


async def get_translation_service(request: Request) -> TranslationDocumentService:
    service = getattr(request.app.state, "translation_service", None)
    if service is None:
        raise ConfigurationError("Translation document service is not initialized")
    return service

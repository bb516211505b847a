from __future__ import annotations

from functools import partial

from openai import AsyncOpenAI

from certrelay.core.config import Settings
from certrelay.domain.errors import ConfigurationError
from certrelay.domain.models import DocumentType
from certrelay.domain.pipeline.classifier import DocumentClassifier
from certrelay.domain.pipeline.extractor import DetailExtractor, ExtractionTarget, default_targets
from certrelay.domain.pipeline.orchestrator import DocumentPipeline
from certrelay.domain.ports.inference_port import InferencePort
from certrelay.domain.ports.storage_port import StoragePort
from certrelay.infrastructure.documents.translation_docx import TranslatorDetails
from certrelay.infrastructure.inference.openai_vision import OpenAIVisionAdapter
from certrelay.infrastructure.inference.prediction_http import PredictionApiAdapter
from certrelay.infrastructure.storage.credentials import load_service_account_credentials
from certrelay.infrastructure.storage.google_drive import GoogleDriveStorage
from certrelay.services.documents import TranslationDocumentService


def _prediction_flow_ids(s: Settings) -> dict[DocumentType, str]:
    flow_ids = {
        DocumentType.BIRTH_CERTIFICATE: s.PREDICTION_BIRTH_FLOW_ID,
        DocumentType.MARRIAGE_CERTIFICATE: s.PREDICTION_MARRIAGE_FLOW_ID,
        DocumentType.DEATH_CERTIFICATE: s.PREDICTION_DEATH_FLOW_ID,
    }
    return {doc_type: flow_id for doc_type, flow_id in flow_ids.items() if flow_id}


def build_inference_client(s: Settings) -> InferencePort:
    if s.INFERENCE_PROVIDER == "prediction_api":
        if not s.PREDICTION_API_URL:
            raise ConfigurationError(
                "PREDICTION_API_URL is required when INFERENCE_PROVIDER=prediction_api",
                setting="PREDICTION_API_URL",
            )
        if not s.PREDICTION_CLASSIFY_FLOW_ID:
            raise ConfigurationError(
                "PREDICTION_CLASSIFY_FLOW_ID is required when INFERENCE_PROVIDER=prediction_api",
                setting="PREDICTION_CLASSIFY_FLOW_ID",
            )
        api_key = s.PREDICTION_API_KEY.get_secret_value() if s.PREDICTION_API_KEY else None
        return PredictionApiAdapter(
            base_url=s.PREDICTION_API_URL,
            classify_flow_id=s.PREDICTION_CLASSIFY_FLOW_ID,
            extract_flow_ids=_prediction_flow_ids(s),
            api_key=api_key,
            timeout_seconds=s.INFERENCE_TIMEOUT_SECONDS,
        )

    if s.OPENAI_API_KEY is None or not s.OPENAI_API_KEY.get_secret_value():
        raise ConfigurationError(
            "OPENAI_API_KEY is required when INFERENCE_PROVIDER=openai_vision",
            setting="OPENAI_API_KEY",
        )
    client = AsyncOpenAI(
        api_key=s.OPENAI_API_KEY.get_secret_value(),
        base_url=s.OPENAI_BASE_URL,
        timeout=s.INFERENCE_TIMEOUT_SECONDS,
        max_retries=0,
    )
    return OpenAIVisionAdapter(client, model=s.OPENAI_MODEL, max_tokens=s.OPENAI_MAX_TOKENS)


def build_extraction_targets(s: Settings) -> dict[DocumentType, ExtractionTarget]:
    if s.INFERENCE_PROVIDER == "prediction_api":
        return default_targets(_prediction_flow_ids(s))
    return default_targets()


def build_pipeline(s: Settings, inference: InferencePort | None = None) -> DocumentPipeline:
    inference = inference or build_inference_client(s)
    return DocumentPipeline(
        classifier=DocumentClassifier(inference),
        extractor=DetailExtractor(inference, build_extraction_targets(s)),
    )


def build_storage(s: Settings) -> GoogleDriveStorage:
    return GoogleDriveStorage(partial(load_service_account_credentials, s))


def build_translation_service(s: Settings, storage: StoragePort) -> TranslationDocumentService:
    translator = TranslatorDetails(
        name=s.TRANSLATOR_NAME,
        registry_number=s.TRANSLATOR_REGISTRY_NUMBER,
        place=s.TRANSLATION_PLACE,
    )
    return TranslationDocumentService(storage, translator)

"""
Centralized application settings using Pydantic.

All environment variables are read once at startup, validated and frozen.
The resulting object is injected into collaborators; business logic never
reads the environment directly.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# =============================================================================
# Pipeline constants
# =============================================================================

ERROR_BODY_MAX_CHARS = 200  # Maximum chars kept from upstream error bodies
DEFAULT_SERVICE_ACCOUNT_FILE = "service-account.json"
DRIVE_API_SCOPES = ["https://www.googleapis.com/auth/drive.file"]

ANALYZABLE_CONTENT_TYPES = frozenset(
    {
        "application/pdf",
        "image/jpeg",
        "image/png",
        "image/webp",
        "image/gif",
    }
)

InferenceProvider = Literal["openai_vision", "prediction_api"]


class Settings(BaseSettings):
    """Process-wide configuration, immutable after construction."""

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        extra="ignore",
        frozen=True,
    )

    APP_NAME: str = "certrelay"
    HOST: str = "0.0.0.0"
    PORT: int = 3001
    FRONTEND_URL: str = "*"
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    # Inference
    INFERENCE_PROVIDER: InferenceProvider = "openai_vision"
    INFERENCE_TIMEOUT_SECONDS: float = Field(default=120.0, gt=0)

    OPENAI_API_KEY: SecretStr | None = None
    OPENAI_MODEL: str = "gpt-4o"
    OPENAI_MAX_TOKENS: int = 4000
    OPENAI_BASE_URL: str | None = None

    PREDICTION_API_URL: str | None = None
    PREDICTION_API_KEY: SecretStr | None = None
    PREDICTION_CLASSIFY_FLOW_ID: str | None = None
    PREDICTION_BIRTH_FLOW_ID: str | None = None
    PREDICTION_MARRIAGE_FLOW_ID: str | None = None
    PREDICTION_DEATH_FLOW_ID: str | None = None

    # Storage
    GOOGLE_SERVICE_ACCOUNT_JSON: SecretStr | None = None
    GOOGLE_SERVICE_ACCOUNT_PATH: str | None = None
    GDRIVE_FOLDER_ID: str | None = None

    # Uploads
    UPLOAD_DIR: Path = Path("./uploads")
    MAX_UPLOAD_SIZE_MB: int = Field(default=10, gt=0)

    # Translation document
    TRANSLATOR_NAME: str = "[imię i nazwisko tłumacza]"
    TRANSLATOR_REGISTRY_NUMBER: str = "[numer]"
    TRANSLATION_PLACE: str = "Warszawa"

    @property
    def max_upload_size_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def upload_dir(self) -> Path:
        return self.UPLOAD_DIR.resolve()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]

"""Service-account credential resolution for Google Drive."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from google.oauth2.service_account import Credentials

from certrelay.core.config import DEFAULT_SERVICE_ACCOUNT_FILE, DRIVE_API_SCOPES, Settings
from certrelay.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("client_email", "private_key")


def parse_service_account_json(raw: str) -> dict:
    """Decode inline service-account JSON.

    Deployment platforms sometimes wrap the value in an extra pair of
    quotes; those are stripped before decoding.
    """
    text = raw.strip()
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        text = text[1:-1]

    try:
        info = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(
            f"Invalid service account JSON in GOOGLE_SERVICE_ACCOUNT_JSON: {exc.msg}",
            setting="GOOGLE_SERVICE_ACCOUNT_JSON",
        ) from exc

    if not isinstance(info, dict):
        raise ConfigurationError(
            "GOOGLE_SERVICE_ACCOUNT_JSON must contain a JSON object",
            setting="GOOGLE_SERVICE_ACCOUNT_JSON",
        )
    missing = [key for key in REQUIRED_KEYS if not info.get(key)]
    if missing:
        raise ConfigurationError(
            f"Service account JSON is missing required fields: {', '.join(missing)}",
            setting="GOOGLE_SERVICE_ACCOUNT_JSON",
        )
    return info


def load_service_account_credentials(settings: Settings) -> Credentials:
    """Resolve Drive credentials: inline JSON, then explicit path, then default file.

    Raises:
        ConfigurationError: No usable credential source was found
    """
    if settings.GOOGLE_SERVICE_ACCOUNT_JSON is not None:
        info = parse_service_account_json(settings.GOOGLE_SERVICE_ACCOUNT_JSON.get_secret_value())
        logger.info("Using service account credentials from GOOGLE_SERVICE_ACCOUNT_JSON")
        try:
            return Credentials.from_service_account_info(info, scopes=DRIVE_API_SCOPES)
        except ValueError as exc:
            raise ConfigurationError(
                f"Invalid service account JSON in GOOGLE_SERVICE_ACCOUNT_JSON: {exc}",
                setting="GOOGLE_SERVICE_ACCOUNT_JSON",
            ) from exc

    if settings.GOOGLE_SERVICE_ACCOUNT_PATH:
        path = Path(settings.GOOGLE_SERVICE_ACCOUNT_PATH)
        if not path.is_file():
            raise ConfigurationError(
                f"Service account file does not exist: {path}",
                setting="GOOGLE_SERVICE_ACCOUNT_PATH",
            )
        return _from_file(path, "GOOGLE_SERVICE_ACCOUNT_PATH")

    default_path = Path.cwd() / DEFAULT_SERVICE_ACCOUNT_FILE
    if default_path.is_file():
        return _from_file(default_path, None)

    raise ConfigurationError(
        "Service account credentials not found. Set GOOGLE_SERVICE_ACCOUNT_JSON or "
        f"GOOGLE_SERVICE_ACCOUNT_PATH, or place {DEFAULT_SERVICE_ACCOUNT_FILE} in the "
        "working directory."
    )


def _from_file(path: Path, setting: str | None) -> Credentials:
    logger.info("Using service account credentials from %s", path)
    try:
        return Credentials.from_service_account_file(str(path), scopes=DRIVE_API_SCOPES)
    except (ValueError, OSError) as exc:
        raise ConfigurationError(
            f"Unable to load service account file {path}: {exc}", setting=setting
        ) from exc

"""Transcription provider configuration.

Resolved once when the application is created and injected into the
transcription service. Invalid configuration fails process startup.
"""

from dataclasses import dataclass

from ministering.core.config import Settings
from ministering.db.enums import TranscriptionProvider


class ConfigurationError(Exception):
    """Raised at startup when required configuration is missing or invalid."""

    pass


@dataclass(frozen=True)
class TranscriptionConfig:
    """Immutable transcription settings for the selected provider."""

    provider: TranscriptionProvider
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    google_credentials_file: str = ""
    google_project: str = ""
    language_code: str = "en-US"


def load_transcription_config(settings: Settings) -> TranscriptionConfig:
    """
    Build and validate the transcription configuration.

    Raises:
        ConfigurationError: Unknown provider, or the selected provider's
            credentials are absent.
    """
    name = (settings.TRANSCRIPTION_PROVIDER or "").strip().lower()
    try:
        provider = TranscriptionProvider(name)
    except ValueError:
        raise ConfigurationError(
            f"Invalid transcription provider: {settings.TRANSCRIPTION_PROVIDER!r}. "
            "Must be 'openai' or 'google'"
        )

    if provider == TranscriptionProvider.OPENAI and not settings.OPENAI_API_KEY:
        raise ConfigurationError(
            "OPENAI_API_KEY environment variable is required when using OpenAI transcription"
        )
    if provider == TranscriptionProvider.GOOGLE and not (
        settings.GOOGLE_APPLICATION_CREDENTIALS or settings.GOOGLE_CLOUD_PROJECT
    ):
        raise ConfigurationError(
            "Google Cloud credentials are required when using Google transcription. "
            "Set GOOGLE_APPLICATION_CREDENTIALS or GOOGLE_CLOUD_PROJECT environment variables."
        )

    return TranscriptionConfig(
        provider=provider,
        openai_api_key=settings.OPENAI_API_KEY,
        openai_base_url=settings.OPENAI_BASE_URL,
        google_credentials_file=settings.GOOGLE_APPLICATION_CREDENTIALS,
        google_project=settings.GOOGLE_CLOUD_PROJECT,
        language_code=settings.SPEECH_LANGUAGE_CODE,
    )

"""Speech-to-text service.

Dispatches to OpenAI Whisper or Google Cloud Speech-to-Text according to the
TranscriptionConfig resolved at startup. Both vendors are called over their
REST APIs with httpx.
"""

import base64
import logging
import os
from dataclasses import dataclass
from typing import Any, Callable

import google.auth
import httpx
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request as GoogleAuthRequest
from google.oauth2 import service_account
from starlette.concurrency import run_in_threadpool

from ministering.core.transcription_config import TranscriptionConfig
from ministering.db.enums import TranscriptionProvider

logger = logging.getLogger(__name__)

GOOGLE_SPEECH_URL = "https://speech.googleapis.com/v1/speech:recognize"
GOOGLE_SCOPES = ["https://www.googleapis.com/auth/cloud-platform"]
WHISPER_MODEL = "whisper-1"
SAMPLE_RATE_HERTZ = 44100
GOOGLE_MODEL = "latest_short"

# Extension -> Google RecognitionConfig.AudioEncoding
AUDIO_ENCODINGS = {
    ".wav": "LINEAR16",
    ".flac": "FLAC",
    ".mp3": "MP3",
    ".ogg": "OGG_OPUS",
    ".oga": "OGG_OPUS",
    ".webm": "WEBM_OPUS",
    # m4a/mp4 have no native encoding; sent as MP3
    ".m4a": "MP3",
    ".mp4": "MP3",
}
DEFAULT_AUDIO_ENCODING = "WEBM_OPUS"

PROVIDER_LABELS = {
    TranscriptionProvider.OPENAI: "openai",
    TranscriptionProvider.GOOGLE: "google",
}


class TranscriptionError(Exception):
    """A transcription vendor call failed. The message names the provider."""

    pass


@dataclass
class TranscriptionResult:
    text: str


def get_audio_encoding(file_path: str) -> str:
    ext = os.path.splitext(file_path)[1].lower()
    return AUDIO_ENCODINGS.get(ext, DEFAULT_AUDIO_ENCODING)


def load_google_access_token(config: TranscriptionConfig) -> str:
    """
    Obtain an OAuth access token for Speech-to-Text (blocking).

    Uses the service-account file when configured, else application default
    credentials.
    """
    if config.google_credentials_file:
        credentials = service_account.Credentials.from_service_account_file(
            config.google_credentials_file, scopes=GOOGLE_SCOPES
        )
    else:
        credentials, _ = google.auth.default(scopes=GOOGLE_SCOPES)
    credentials.refresh(GoogleAuthRequest())
    return credentials.token


def build_google_recognize_request(
    audio_bytes: bytes, file_path: str, language_code: str
) -> dict:
    return {
        "config": {
            "encoding": get_audio_encoding(file_path),
            "sampleRateHertz": SAMPLE_RATE_HERTZ,
            "languageCode": language_code,
            "enableAutomaticPunctuation": True,
            "model": GOOGLE_MODEL,
        },
        "audio": {"content": base64.b64encode(audio_bytes).decode("ascii")},
    }


def parse_google_recognize_response(data: Any) -> str:
    """
    Join each result's top alternative. No results means no speech: ''.

    Raises:
        ValueError: The body does not have the recognize response shape
    """
    if not isinstance(data, dict):
        raise ValueError("Google Speech-to-Text response is not a JSON object")
    results = data.get("results") or []
    if not isinstance(results, list):
        raise ValueError("Google Speech-to-Text results are not a list")
    if not results:
        logger.warning("Google Speech-to-Text returned no transcription results")
        return ""
    parts = []
    for result in results:
        if not isinstance(result, dict):
            raise ValueError("Google Speech-to-Text result is not an object")
        alternatives = result.get("alternatives") or []
        if not isinstance(alternatives, list):
            raise ValueError("Google Speech-to-Text alternatives are not a list")
        if not alternatives:
            continue
        if not isinstance(alternatives[0], dict):
            raise ValueError("Google Speech-to-Text alternative is not an object")
        text = alternatives[0].get("transcript")
        if text:
            parts.append(str(text))
    return " ".join(parts)


class TranscriptionService:
    """Transcribes one audio file per call. No retries, no provider fallback."""

    def __init__(
        self,
        config: TranscriptionConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        token_loader: Callable[[TranscriptionConfig], str] = load_google_access_token,
    ):
        self.config = config
        self.transport = transport
        self.token_loader = token_loader

    @property
    def provider_label(self) -> str:
        return PROVIDER_LABELS[self.config.provider]

    async def transcribe(self, file_path: str) -> TranscriptionResult:
        """
        Transcribe an audio file.

        Raises:
            TranscriptionError: The file is unreadable or the vendor call failed
        """
        logger.info("Using %s for audio transcription", self.provider_label)
        try:
            if not os.path.exists(file_path):
                raise FileNotFoundError(f"Audio file not found: {file_path}")
            with open(file_path, "rb") as f:
                audio_bytes = f.read()

            if self.config.provider == TranscriptionProvider.OPENAI:
                text = await self._transcribe_openai(audio_bytes, file_path)
            else:
                text = await self._transcribe_google(audio_bytes, file_path)
        except (httpx.HTTPError, GoogleAuthError, OSError, ValueError, KeyError) as exc:
            raise TranscriptionError(
                f"Failed to transcribe audio with {self.provider_label}: {exc}"
            ) from exc
        return TranscriptionResult(text=text)

    async def _transcribe_openai(self, audio_bytes: bytes, file_path: str) -> str:
        filename = os.path.basename(file_path)
        async with httpx.AsyncClient(timeout=120.0, transport=self.transport) as client:
            response = await client.post(
                f"{self.config.openai_base_url.rstrip('/')}/audio/transcriptions",
                headers={"Authorization": f"Bearer {self.config.openai_api_key}"},
                data={"model": WHISPER_MODEL, "response_format": "text"},
                files={"file": (filename, audio_bytes)},
            )
            response.raise_for_status()
        return response.text.strip()

    async def _transcribe_google(self, audio_bytes: bytes, file_path: str) -> str:
        token = await run_in_threadpool(self.token_loader, self.config)
        headers = {"Authorization": f"Bearer {token}"}
        if self.config.google_project:
            headers["x-goog-user-project"] = self.config.google_project

        body = build_google_recognize_request(
            audio_bytes, file_path, self.config.language_code
        )
        logger.info(
            "Transcribing audio with Google Speech-to-Text (encoding: %s)",
            body["config"]["encoding"],
        )
        async with httpx.AsyncClient(timeout=120.0, transport=self.transport) as client:
            response = await client.post(GOOGLE_SPEECH_URL, headers=headers, json=body)
            response.raise_for_status()
            data = response.json()
        return parse_google_recognize_response(data)

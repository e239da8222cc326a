"""Python client for the Ministering Companion API."""

from ministering.client.api_client import ApiError, MinisteringClient
from ministering.client.recorder import VoiceRecorder
from ministering.client.wizard import DraftStage, InvalidTransitionError, VisitDraft

__all__ = [
    "ApiError",
    "DraftStage",
    "InvalidTransitionError",
    "MinisteringClient",
    "VisitDraft",
    "VoiceRecorder",
]

"""Pydantic schemas for API request/response models."""

from ministering.schemas.ai import (
    AnalyzeRequest,
    InsightEntry,
    TranscribeResponse,
    VisitAnalysis,
    VisitInsights,
)
from ministering.schemas.auth import UserRead, UserSession
from ministering.schemas.content import (
    ContentCreate,
    ContentRead,
    ContentUpdate,
    PublicSettingRead,
    SettingCreate,
    SettingUpdate,
)
from ministering.schemas.entry import EntryCreate, EntryRead, EntryUpdate
from ministering.schemas.person import PersonCreate, PersonListItem, PersonRead, PersonUpdate
from ministering.schemas.resource import ResourceCreate, ResourceRead

__all__ = [
    "AnalyzeRequest",
    "ContentCreate",
    "ContentRead",
    "ContentUpdate",
    "EntryCreate",
    "EntryRead",
    "EntryUpdate",
    "InsightEntry",
    "PersonCreate",
    "PersonListItem",
    "PersonRead",
    "PersonUpdate",
    "PublicSettingRead",
    "ResourceCreate",
    "ResourceRead",
    "SettingCreate",
    "SettingUpdate",
    "TranscribeResponse",
    "UserRead",
    "UserSession",
    "VisitAnalysis",
    "VisitInsights",
]

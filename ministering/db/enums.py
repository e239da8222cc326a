"""Enum definitions for application constants."""

from enum import Enum


class PersonStatus(str, Enum):
    """Ministering status of a person or family."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    FOLLOW_UP = "follow-up"


class ResourceType(str, Enum):
    """Kinds of curated gospel resources."""

    TALK = "talk"
    SCRIPTURE = "scripture"
    ARTICLE = "article"
    SERVICE_IDEA = "service_idea"


class ContentType(str, Enum):
    """Markup of an editable content blurb."""

    TEXT = "text"
    HTML = "html"
    MARKDOWN = "markdown"


class TranscriptionProvider(str, Enum):
    """Speech-to-text vendors."""

    OPENAI = "openai"
    GOOGLE = "google"


DEFAULT_PERSON_STATUS = PersonStatus.ACTIVE

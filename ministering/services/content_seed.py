"""Default landing, dashboard and feature copy plus branding settings."""

import logging

from sqlalchemy.orm import Session

from ministering.schemas.content import ContentCreate, SettingCreate
from ministering.services import content_service, settings_service

logger = logging.getLogger(__name__)

SEED_MARKER_KEY = "landing-hero-title"

DEFAULT_CONTENT: list[dict] = [
    {
        "key": "landing-hero-title",
        "title": "Landing Hero Title",
        "content": "Ministering Companion",
        "category": "landing",
        "sort_order": 1,
    },
    {
        "key": "landing-hero-subtitle",
        "title": "Landing Hero Subtitle",
        "content": (
            "Following Christ's perfect example of love and service. A sacred tool to "
            "help you record, analyze, and enhance your ministering efforts with "
            "AI-powered insights and gospel resources."
        ),
        "category": "landing",
        "sort_order": 2,
    },
    {
        "key": "landing-cta-button",
        "title": "Landing CTA Button",
        "content": "Begin Your Sacred Ministry",
        "category": "landing",
        "sort_order": 3,
    },
    {
        "key": "dashboard-welcome-message",
        "title": "Dashboard Welcome Message",
        "content": "Following Christ's example of love and service through inspired ministering",
        "category": "dashboard",
        "sort_order": 1,
    },
    {
        "key": "feature-voice-recording",
        "title": "Voice Recording Feature",
        "content": (
            "Record your ministering visits using voice notes, making it easy to "
            "capture thoughts and impressions while they're fresh in your mind."
        ),
        "category": "features",
        "sort_order": 1,
    },
    {
        "key": "feature-ai-insights",
        "title": "AI-Powered Insights",
        "content": (
            "Receive thoughtful analysis and suggestions based on your visit records, "
            "helping you better understand and serve those you minister to."
        ),
        "category": "features",
        "sort_order": 2,
    },
    {
        "key": "feature-gospel-resources",
        "title": "Gospel Resources",
        "content": (
            "Access curated scriptures, talks, and service ideas that align with the "
            "needs and circumstances of those you minister to."
        ),
        "category": "features",
        "sort_order": 3,
    },
]

DEFAULT_SETTINGS: list[dict] = [
    {
        "key": "app-name",
        "value": "Ministering Companion",
        "description": "The name of the application",
        "category": "branding",
        "is_public": True,
    },
    {
        "key": "app-tagline",
        "value": "Following Christ's example of love and service",
        "description": "The application tagline",
        "category": "branding",
        "is_public": True,
    },
]


def seed_initial_content(db: Session) -> bool:
    """
    Insert default content and settings once.

    Returns False without writing when the content has already been seeded.
    """
    if content_service.get_content_by_key(db, SEED_MARKER_KEY):
        logger.info("Content already seeded, skipping")
        return False

    for item in DEFAULT_CONTENT:
        content_service.create_content(db, ContentCreate(**item))
    for item in DEFAULT_SETTINGS:
        settings_service.create_setting(db, SettingCreate(**item))

    logger.info(
        "Seeded %d content blocks and %d settings",
        len(DEFAULT_CONTENT),
        len(DEFAULT_SETTINGS),
    )
    return True

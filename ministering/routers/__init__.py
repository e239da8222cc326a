"""API routers."""

from ministering.routers.ai import router as ai_router
from ministering.routers.auth import router as auth_router
from ministering.routers.content import router as content_router
from ministering.routers.entries import router as entries_router
from ministering.routers.people import router as people_router
from ministering.routers.resources import router as resources_router

__all__ = [
    "ai_router",
    "auth_router",
    "content_router",
    "entries_router",
    "people_router",
    "resources_router",
]

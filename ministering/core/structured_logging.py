"""Structured logging helpers (transcript-safe)."""

import logging
from typing import Any

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def build_log_context(
    *,
    user_id: str | None = None,
    person_id: int | None = None,
    request_id: str | None = None,
    route: str | None = None,
    method: str | None = None,
) -> dict[str, Any]:
    """Return a log context dict. Never include transcript or note text."""
    context: dict[str, Any] = {}
    if user_id:
        context["user_id"] = user_id
    if person_id is not None:
        context["person_id"] = person_id
    if request_id:
        context["request_id"] = request_id
    if route:
        context["route"] = route
    if method:
        context["method"] = method
    return context

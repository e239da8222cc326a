"""Helpers for parsing AI JSON responses."""

from __future__ import annotations

import json
import logging
import re

logger = logging.getLogger(__name__)


def _strip_code_fences(text: str) -> str:
    content = text.strip()
    if content.startswith("```"):
        lines = content.splitlines()[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        content = "\n".join(lines).strip()
    return content


def parse_json_object(text: str | None) -> dict | None:
    """
    Parse a JSON object out of model output.

    Tolerates markdown code fences and prose around the object. Returns None
    when no object can be recovered.
    """
    if not text:
        return None
    content = _strip_code_fences(text)
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        match = re.search(r"\{[\s\S]*\}", content)
        if not match:
            logger.warning(f"Failed to parse JSON object: {exc}")
            return None
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError as inner_exc:
            logger.warning(f"Failed to parse JSON object: {inner_exc}")
            return None
    return data if isinstance(data, dict) else None


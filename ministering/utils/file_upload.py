"""Helpers for safe audio upload handling."""

from __future__ import annotations

import logging
import os
import shutil
import uuid
from os import SEEK_END

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

MULTIPART_OVERHEAD_BYTES = 64 * 1024

# Extension -> MIME types browsers and recorders report for it
ALLOWED_AUDIO_TYPES: dict[str, frozenset[str]] = {
    ".wav": frozenset({"audio/wav", "audio/x-wav", "audio/wave", "audio/vnd.wave"}),
    ".mp3": frozenset({"audio/mpeg", "audio/mp3", "audio/mpeg3"}),
    ".m4a": frozenset({"audio/mp4", "audio/m4a", "audio/x-m4a"}),
    ".ogg": frozenset({"audio/ogg", "application/ogg"}),
    ".webm": frozenset({"audio/webm", "video/webm"}),
}
ALLOWED_AUDIO_MIME_TYPES = frozenset().union(*ALLOWED_AUDIO_TYPES.values())


def content_length_exceeds_limit(
    content_length_header: str | None,
    *,
    max_size_bytes: int,
    overhead_bytes: int = MULTIPART_OVERHEAD_BYTES,
) -> bool:
    """Return True when Content-Length clearly exceeds the allowed file size."""
    if not content_length_header:
        return False
    try:
        content_length = int(content_length_header)
    except (TypeError, ValueError):
        return False
    return content_length > (max_size_bytes + overhead_bytes)


async def get_upload_file_size(file: UploadFile) -> int:
    """Read size from the underlying file object without loading into memory."""

    def _get_size() -> int:
        stream = file.file
        original_pos = stream.tell()
        try:
            stream.seek(0, SEEK_END)
            return stream.tell()
        finally:
            stream.seek(original_pos)

    return await run_in_threadpool(_get_size)


def normalize_mime_type(content_type: str | None) -> str:
    """'audio/webm;codecs=opus' -> 'audio/webm'."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def is_allowed_audio(filename: str | None, content_type: str | None) -> bool:
    """Both the file extension and the reported MIME type must be audio we accept."""
    if not filename:
        return False
    ext = os.path.splitext(filename)[1].lower()
    return (
        ext in ALLOWED_AUDIO_TYPES
        and normalize_mime_type(content_type) in ALLOWED_AUDIO_MIME_TYPES
    )


async def save_upload(file: UploadFile, upload_dir: str) -> str:
    """
    Copy an upload to a uniquely named file under `upload_dir`.

    The extension is kept so the transcriber can pick an encoding. Returns the path.
    """
    ext = os.path.splitext(file.filename or "")[1].lower()
    path = os.path.join(upload_dir, f"{uuid.uuid4().hex}{ext}")

    def _write() -> None:
        os.makedirs(upload_dir, exist_ok=True)
        file.file.seek(0)
        with open(path, "wb") as out:
            shutil.copyfileobj(file.file, out)

    await run_in_threadpool(_write)
    return path


def delete_temp_file(path: str | None) -> None:
    """Remove a temporary upload; a missing file is not an error."""
    if not path:
        return
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("Failed to delete temp upload %s: %s", path, exc)

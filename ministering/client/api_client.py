"""HTTP client for the Ministering Companion API.

GET responses are cached per path and query parameters until a mutation
invalidates them, mirroring the page flow of the web client.
"""

import logging
import os

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"

# Must match the server's session cookie and CSRF header
COOKIE_NAME = "ministering_session"
CSRF_HEADER = "X-Requested-With"
CSRF_HEADER_VALUE = "XMLHttpRequest"

# Query keys invalidated by each kind of mutation
PEOPLE_KEYS = ("/api/people",)
ENTRY_KEYS = ("/api/entries", "/api/people", "/api/insights")
RESOURCE_KEYS = ("/api/resources",)


class ApiError(Exception):
    """Non-2xx response. Carries the server's `message` and optional `error`."""

    def __init__(self, status_code: int, message: str, error: str | None = None):
        super().__init__(f"{status_code}: {message}" + (f" ({error})" if error else ""))
        self.status_code = status_code
        self.message = message
        self.error = error


def _cache_key(path: str, params: dict | None) -> tuple:
    items = tuple(sorted((params or {}).items()))
    return (path, items)


class MinisteringClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        session_token: str | None = None,
        transport: httpx.BaseTransport | None = None,
        timeout: float = 120.0,
    ):
        cookies = {COOKIE_NAME: session_token} if session_token else None
        self._http = httpx.Client(
            base_url=base_url,
            cookies=cookies,
            headers={CSRF_HEADER: CSRF_HEADER_VALUE},
            transport=transport,
            timeout=timeout,
        )
        self._cache: dict[tuple, object] = {}

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    # Plumbing --------------------------------------------------------------

    def _handle(self, response: httpx.Response):
        if response.is_success:
            return response.json()
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        raise ApiError(
            response.status_code,
            body.get("message") or response.reason_phrase,
            body.get("error"),
        )

    def _get(self, path: str, params: dict | None = None, refetch: bool = False):
        key = _cache_key(path, params)
        if not refetch and key in self._cache:
            logger.debug("GET %s served from cache", path)
            return self._cache[key]
        data = self._handle(self._http.get(path, params=params))
        self._cache[key] = data
        return data

    def _send(self, method: str, path: str, invalidates: tuple[str, ...] = (), **kwargs):
        data = self._handle(self._http.request(method, path, **kwargs))
        for prefix in invalidates:
            self.invalidate(prefix)
        return data

    def invalidate(self, prefix: str) -> None:
        """Drop every cached GET whose path starts with `prefix`."""
        for key in [k for k in self._cache if k[0].startswith(prefix)]:
            del self._cache[key]

    def refetch(self, path: str, params: dict | None = None):
        """GET bypassing the cache; the fresh result replaces the cached one."""
        return self._get(path, params, refetch=True)

    # Auth ------------------------------------------------------------------

    def get_user(self) -> dict:
        return self._get("/api/auth/user")

    # People ----------------------------------------------------------------

    def list_people(self) -> list[dict]:
        return self._get("/api/people")

    def get_person(self, person_id: int) -> dict:
        return self._get(f"/api/people/{person_id}")

    def create_person(self, name: str, family: str | None = None,
                      tags: list[str] | None = None, status: str | None = None) -> dict:
        body: dict = {"name": name, "family": family, "tags": tags}
        if status:
            body["status"] = status
        return self._send("POST", "/api/people", PEOPLE_KEYS, json=body)

    def update_person(self, person_id: int, **fields) -> dict:
        return self._send("PUT", f"/api/people/{person_id}", ENTRY_KEYS, json=fields)

    def delete_person(self, person_id: int) -> dict:
        return self._send("DELETE", f"/api/people/{person_id}", ENTRY_KEYS)

    # Entries ---------------------------------------------------------------

    def list_entries(self, person_id: int) -> list[dict]:
        return self._get("/api/entries", {"person_id": person_id})

    def get_entry(self, entry_id: int) -> dict:
        return self._get(f"/api/entries/{entry_id}")

    def save_entry(self, payload: dict) -> dict:
        return self._send("POST", "/api/save_entry", ENTRY_KEYS, json=payload)

    def update_entry(self, entry_id: int, **fields) -> dict:
        return self._send("PUT", f"/api/entries/{entry_id}", ENTRY_KEYS, json=fields)

    def delete_entry(self, entry_id: int) -> dict:
        return self._send("DELETE", f"/api/entries/{entry_id}", ENTRY_KEYS)

    # AI --------------------------------------------------------------------

    def transcribe(self, audio_path: str, content_type: str = "audio/wav",
                   **form_fields) -> str:
        """Upload a recording; returns the transcript text (possibly empty)."""
        data = {k: str(v) for k, v in form_fields.items() if v is not None}
        with open(audio_path, "rb") as f:
            files = {"audio": (os.path.basename(audio_path), f, content_type)}
            result = self._send("POST", "/api/transcribe", files=files, data=data)
        return result["transcript"]

    def analyze(self, transcript: str) -> dict:
        return self._send("POST", "/api/analyze", json={"transcript": transcript})

    def get_insights(self, person_id: int) -> dict:
        return self._get(f"/api/insights/{person_id}")

    # Resources and content -------------------------------------------------

    def list_resources(self) -> list[dict]:
        return self._get("/api/resources")

    def featured_resources(self) -> list[dict]:
        return self._get("/api/resources/featured")

    def create_resource(self, **fields) -> dict:
        return self._send("POST", "/api/resources", RESOURCE_KEYS, json=fields)

    def list_content(self, category: str | None = None) -> list[dict]:
        return self._get("/api/content", {"category": category} if category else None)

    def get_content(self, key: str) -> dict:
        return self._get(f"/api/content/{key}")

    def public_settings(self) -> list[dict]:
        return self._get("/api/settings/public")

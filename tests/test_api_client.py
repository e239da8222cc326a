"""Tests for the cached HTTP client."""

import json

import httpx
import pytest

from ministering.client.api_client import COOKIE_NAME, ApiError, MinisteringClient


class FakeServer:
    """Counts requests per path and answers from a route table."""

    def __init__(self, routes: dict):
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def hits(self, method: str, path: str) -> int:
        return sum(1 for r in self.requests if r.method == method and r.url.path == path)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"message": "Not found"})
        status, body = handler(request) if callable(handler) else handler
        return httpx.Response(status, json=body)


@pytest.fixture
def server():
    people = [{"id": 1, "name": "Jane Doe"}]

    def create_person(request: httpx.Request):
        people.append({"id": len(people) + 1, **json.loads(request.content)})
        return 200, people[-1]

    return FakeServer(
        {
            ("GET", "/api/people"): lambda request: (200, list(people)),
            ("POST", "/api/people"): create_person,
            ("GET", "/api/entries"): (200, []),
            ("POST", "/api/save_entry"): (200, {"id": 10}),
            ("GET", "/api/insights/1"): (200, {"patterns": [], "suggestions": []}),
            ("POST", "/api/transcribe"): (200, {"transcript": "hello"}),
            ("POST", "/api/analyze"): (500, {"message": "Failed to analyze entry", "error": "boom"}),
        }
    )


@pytest.fixture
def api(server):
    client = MinisteringClient(
        "http://api.test", session_token="tok", transport=httpx.MockTransport(server)
    )
    yield client
    client.close()


def test_sends_session_cookie_and_csrf_header(api, server):
    api.list_people()

    [request] = server.requests
    assert request.headers["x-requested-with"] == "XMLHttpRequest"
    assert f"{COOKIE_NAME}=tok" in request.headers["cookie"]


def test_gets_are_cached(api, server):
    first = api.list_people()
    second = api.list_people()

    assert first == second
    assert server.hits("GET", "/api/people") == 1


def test_cache_key_includes_params(api, server):
    api.list_entries(1)
    api.list_entries(1)
    api.list_entries(2)

    assert server.hits("GET", "/api/entries") == 2


def test_mutation_invalidates_related_queries(api, server):
    api.list_people()
    api.list_entries(1)
    api.get_insights(1)

    api.save_entry({"personId": 1, "transcript": "t"})
    api.list_people()
    api.list_entries(1)
    api.get_insights(1)

    assert server.hits("GET", "/api/people") == 2
    assert server.hits("GET", "/api/entries") == 2
    assert server.hits("GET", "/api/insights/1") == 2


def test_create_person_refreshes_people_list(api):
    assert len(api.list_people()) == 1

    api.create_person("John Roe", family="Roe")

    assert [p["name"] for p in api.list_people()] == ["Jane Doe", "John Roe"]


def test_refetch_bypasses_cache(api, server):
    api.list_people()
    api.refetch("/api/people")

    assert server.hits("GET", "/api/people") == 2


def test_error_response_raises_api_error(api):
    with pytest.raises(ApiError) as exc_info:
        api.analyze("hello")

    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "Failed to analyze entry"
    assert exc_info.value.error == "boom"


def test_not_found_raises_api_error(api):
    with pytest.raises(ApiError) as exc_info:
        api.get_person(99)

    assert exc_info.value.status_code == 404


def test_transcribe_uploads_file(api, server, tmp_path):
    audio = tmp_path / "visit.wav"
    audio.write_bytes(b"RIFF")

    transcript = api.transcribe(str(audio), content_type="audio/wav", person_id=1, date="")

    assert transcript == "hello"
    request = server.requests[-1]
    assert b'name="audio"; filename="visit.wav"' in request.content
    assert b"Content-Type: audio/wav" in request.content
    assert b'name="person_id"' in request.content

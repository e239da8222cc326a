"""Tests for visit entries: save, list, edit, delete and ownership checks."""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ministering.db.models import MinisteringEntry


async def _person(client: AsyncClient, name: str = "Jane Doe") -> int:
    response = await client.post("/api/people", json={"name": name})
    assert response.status_code == 200, response.text
    return response.json()["id"]


def _entry_count(db: Session) -> int:
    return db.scalar(select(func.count()).select_from(MinisteringEntry))


@pytest.mark.asyncio
async def test_save_entry_round_trip(authed_client: AsyncClient):
    person_id = await _person(authed_client)
    body = {
        "personId": person_id,
        "date": "2024-05-12",
        "transcript": "We talked about the temple.",
        "summary": "Temple preparation visit.",
        "followups": ["Bring a temple recommend booklet"],
        "scriptures": ["D&C 109:8"],
        "talks": ["The Temple Is a House of Learning"],
        "notes": "Sunday afternoon",
    }

    response = await authed_client.post("/api/save_entry", json=body)

    assert response.status_code == 200
    saved = response.json()
    assert saved["personId"] == person_id
    assert saved["userId"] == "google-sub-1"
    assert saved["date"].startswith("2024-05-12T00:00:00")
    for key in ("transcript", "summary", "followups", "scriptures", "talks", "notes"):
        assert saved[key] == body[key]

    listed = (await authed_client.get("/api/entries", params={"person_id": person_id})).json()
    assert [e["id"] for e in listed] == [saved["id"]]
    assert listed[0]["followups"] == body["followups"]


@pytest.mark.asyncio
async def test_save_entry_defaults_date_to_now(authed_client: AsyncClient):
    person_id = await _person(authed_client)

    response = await authed_client.post(
        "/api/save_entry", json={"personId": person_id, "transcript": "hello", "date": ""}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["date"]
    assert data["followups"] == []


@pytest.mark.asyncio
async def test_save_entry_requires_transcript(authed_client: AsyncClient):
    person_id = await _person(authed_client)

    response = await authed_client.post("/api/save_entry", json={"personId": person_id})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_save_entry_for_foreign_person_writes_nothing(
    authed_client: AsyncClient, other_client: AsyncClient, db: Session
):
    person_id = await _person(authed_client)

    response = await other_client.post(
        "/api/save_entry", json={"personId": person_id, "transcript": "sneaky"}
    )

    assert response.status_code == 404
    assert response.json() == {"message": "Person not found"}
    assert _entry_count(db) == 0


@pytest.mark.asyncio
async def test_entries_listed_newest_first(authed_client: AsyncClient):
    person_id = await _person(authed_client)
    for day in ("2024-01-01", "2024-03-01", "2024-02-01"):
        await authed_client.post(
            "/api/save_entry",
            json={"personId": person_id, "date": day, "transcript": day},
        )

    listed = (await authed_client.get("/api/entries", params={"person_id": person_id})).json()

    assert [e["transcript"] for e in listed] == ["2024-03-01", "2024-02-01", "2024-01-01"]


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{}, {"person_id": "abc"}, {"person_id": "0"}])
async def test_list_entries_requires_valid_person_id(authed_client: AsyncClient, params):
    response = await authed_client.get("/api/entries", params=params)

    assert response.status_code == 400
    assert response.json() == {"message": "person_id is required"}


@pytest.mark.asyncio
async def test_list_entries_for_foreign_person_404(
    authed_client: AsyncClient, other_client: AsyncClient
):
    person_id = await _person(authed_client)
    await authed_client.post(
        "/api/save_entry", json={"personId": person_id, "transcript": "private"}
    )

    response = await other_client.get("/api/entries", params={"person_id": person_id})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_get_update_and_delete_entry(authed_client: AsyncClient):
    person_id = await _person(authed_client)
    saved = (
        await authed_client.post(
            "/api/save_entry",
            json={"personId": person_id, "transcript": "first pass", "followups": ["a"]},
        )
    ).json()

    fetched = await authed_client.get(f"/api/entries/{saved['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["transcript"] == "first pass"

    updated = await authed_client.put(
        f"/api/entries/{saved['id']}",
        json={"summary": "Edited summary", "followups": ["b", "c"]},
    )
    assert updated.status_code == 200
    assert updated.json()["summary"] == "Edited summary"
    assert updated.json()["followups"] == ["b", "c"]
    assert updated.json()["transcript"] == "first pass"

    deleted = await authed_client.delete(f"/api/entries/{saved['id']}")
    assert deleted.status_code == 200
    assert deleted.json() == {"message": "Entry deleted successfully"}
    assert (await authed_client.get(f"/api/entries/{saved['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_foreign_entry_is_hidden(authed_client: AsyncClient, other_client: AsyncClient):
    person_id = await _person(authed_client)
    saved = (
        await authed_client.post(
            "/api/save_entry", json={"personId": person_id, "transcript": "mine"}
        )
    ).json()

    assert (await other_client.get(f"/api/entries/{saved['id']}")).status_code == 404
    assert (
        await other_client.put(f"/api/entries/{saved['id']}", json={"summary": "x"})
    ).status_code == 404
    assert (await other_client.delete(f"/api/entries/{saved['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_deleting_person_removes_entries(authed_client: AsyncClient, db: Session):
    person_id = await _person(authed_client)
    for text in ("one", "two"):
        await authed_client.post(
            "/api/save_entry", json={"personId": person_id, "transcript": text}
        )
    assert _entry_count(db) == 2

    response = await authed_client.delete(f"/api/people/{person_id}")

    assert response.status_code == 200
    assert _entry_count(db) == 0

"""Tests for the record → review → summary draft state machine."""

import pytest

from ministering.client.wizard import (
    DraftStage,
    DraftUrlError,
    InvalidTransitionError,
    VisitDraft,
)


ANALYSIS = {
    "summary": "Talked about the new baby.",
    "followups": ["Bring a meal on Friday"],
    "scriptures": ["Mosiah 18:9 - mourn with those that mourn"],
    "talks": ["The Family: A Proclamation"],
}


def test_happy_path_through_all_stages():
    draft = VisitDraft.start(7, date="2024-06-01", notes="evening")
    assert draft.to_url() == "/person/7/record?date=2024-06-01&notes=evening"

    draft = draft.with_transcript("We talked about the new baby.")
    assert draft.stage == DraftStage.TRANSCRIBED
    assert draft.to_url().startswith("/person/7/review?")

    draft = draft.with_analysis(ANALYSIS)
    assert draft.stage == DraftStage.ANALYZED
    assert draft.to_url().startswith("/person/7/summary?")
    assert draft.to_save_payload() == {
        "personId": 7,
        "date": "2024-06-01",
        "transcript": "We talked about the new baby.",
        "summary": "Talked about the new baby.",
        "followups": ["Bring a meal on Friday"],
        "scriptures": ["Mosiah 18:9 - mourn with those that mourn"],
        "talks": ["The Family: A Proclamation"],
        "notes": "evening",
    }

    saved = draft.mark_saved()
    assert saved.to_url() == "/person/7"


def test_summary_url_restores_draft():
    draft = VisitDraft.start(3).with_transcript("a & b = c?").with_analysis(ANALYSIS)

    restored = VisitDraft.from_url(draft.to_url())

    assert restored == draft


def test_review_url_restores_transcript():
    draft = VisitDraft.start(3, notes="porch").with_transcript("Hello, world")

    restored = VisitDraft.from_url(draft.to_url())

    assert restored.stage == DraftStage.TRANSCRIBED
    assert restored.transcript == "Hello, world"
    assert restored.notes == "porch"


def test_empty_transcript_is_allowed():
    draft = VisitDraft.start(1).with_transcript("")

    assert VisitDraft.from_url(draft.to_url()).transcript == ""


def test_blank_date_is_sent_as_null():
    draft = VisitDraft.start(1).with_transcript("hi").with_analysis({})

    payload = draft.to_save_payload()

    assert payload["date"] is None
    assert payload["summary"] == ""
    assert payload["followups"] == []


def test_edit_only_during_review():
    draft = VisitDraft.start(1).with_transcript("teh visit")

    edited = draft.edit(transcript="the visit", date="2024-01-02")
    assert edited.transcript == "the visit"
    assert edited.date == "2024-01-02"

    with pytest.raises(InvalidTransitionError):
        edited.with_analysis(ANALYSIS).edit(transcript="too late")


def test_back_to_review_discards_analysis():
    draft = VisitDraft.start(1).with_transcript("t").with_analysis(ANALYSIS)

    back = draft.back_to_review()

    assert back.stage == DraftStage.TRANSCRIBED
    assert back.summary == ""
    assert back.followups == []
    assert back.transcript == "t"


@pytest.mark.parametrize(
    "step",
    [
        lambda d: d.with_analysis(ANALYSIS),
        lambda d: d.mark_saved(),
        lambda d: d.to_save_payload(),
        lambda d: d.back_to_review(),
    ],
)
def test_steps_out_of_order_are_rejected(step):
    with pytest.raises(InvalidTransitionError):
        step(VisitDraft.start(1))


@pytest.mark.parametrize(
    "url",
    [
        "/people/1/record",
        "/person/abc/record",
        "/person/1/elsewhere",
        "/person/1/summary?followups=not-json",
        '/person/1/summary?talks={"a":1}',
    ],
)
def test_invalid_urls(url):
    with pytest.raises(DraftUrlError):
        VisitDraft.from_url(url)


def test_person_url_is_saved_stage():
    assert VisitDraft.from_url("/person/9").stage == DraftStage.SAVED

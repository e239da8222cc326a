"""Record → review → summary wizard state.

A visit draft moves through fixed stages. Every stage serializes to a URL of
the form ``/person/{id}/{page}?...`` so any step can be resumed from its URL.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from enum import Enum
from urllib.parse import parse_qs, urlencode, urlsplit


class DraftStage(str, Enum):
    RECORDING = "recording"
    TRANSCRIBED = "transcribed"
    ANALYZED = "analyzed"
    SAVED = "saved"


# Stage -> URL page segment. SAVED returns to the person page.
STAGE_PAGES = {
    DraftStage.RECORDING: "record",
    DraftStage.TRANSCRIBED: "review",
    DraftStage.ANALYZED: "summary",
}
PAGE_STAGES = {page: stage for stage, page in STAGE_PAGES.items()}

LIST_FIELDS = ("followups", "scriptures", "talks")


class InvalidTransitionError(Exception):
    """A wizard step was attempted from the wrong stage."""

    def __init__(self, action: str, stage: DraftStage, expected: tuple[DraftStage, ...]):
        names = ", ".join(s.value for s in expected)
        super().__init__(f"Cannot {action} from stage '{stage.value}' (expected: {names})")
        self.stage = stage


class DraftUrlError(ValueError):
    """A URL does not describe a visit draft."""

    pass


@dataclass(frozen=True)
class VisitDraft:
    person_id: int
    stage: DraftStage = DraftStage.RECORDING
    date: str = ""
    notes: str = ""
    transcript: str = ""
    summary: str = ""
    followups: list[str] = field(default_factory=list)
    scriptures: list[str] = field(default_factory=list)
    talks: list[str] = field(default_factory=list)

    @classmethod
    def start(cls, person_id: int, date: str = "", notes: str = "") -> VisitDraft:
        return cls(person_id=person_id, date=date, notes=notes)

    def _require(self, action: str, *allowed: DraftStage) -> None:
        if self.stage not in allowed:
            raise InvalidTransitionError(action, self.stage, allowed)

    # Transitions -----------------------------------------------------------

    def with_transcript(self, transcript: str) -> VisitDraft:
        """Recording finished and was transcribed. An empty transcript is allowed."""
        self._require("attach a transcript", DraftStage.RECORDING)
        return replace(self, stage=DraftStage.TRANSCRIBED, transcript=transcript)

    def edit(self, transcript: str | None = None, date: str | None = None,
             notes: str | None = None) -> VisitDraft:
        """Correct the transcript or visit details before analysis."""
        self._require("edit the transcript", DraftStage.TRANSCRIBED)
        return replace(
            self,
            transcript=self.transcript if transcript is None else transcript,
            date=self.date if date is None else date,
            notes=self.notes if notes is None else notes,
        )

    def with_analysis(self, analysis: dict) -> VisitDraft:
        self._require("attach an analysis", DraftStage.TRANSCRIBED)
        return replace(
            self,
            stage=DraftStage.ANALYZED,
            summary=analysis.get("summary") or "",
            followups=list(analysis.get("followups") or []),
            scriptures=list(analysis.get("scriptures") or []),
            talks=list(analysis.get("talks") or []),
        )

    def back_to_review(self) -> VisitDraft:
        """Discard the analysis and return to transcript review."""
        self._require("return to review", DraftStage.ANALYZED)
        return replace(
            self,
            stage=DraftStage.TRANSCRIBED,
            summary="",
            followups=[],
            scriptures=[],
            talks=[],
        )

    def mark_saved(self) -> VisitDraft:
        self._require("mark as saved", DraftStage.ANALYZED)
        return replace(self, stage=DraftStage.SAVED)

    def to_save_payload(self) -> dict:
        """Body for POST /api/save_entry."""
        self._require("save", DraftStage.ANALYZED)
        return {
            "personId": self.person_id,
            "date": self.date or None,
            "transcript": self.transcript,
            "summary": self.summary,
            "followups": list(self.followups),
            "scriptures": list(self.scriptures),
            "talks": list(self.talks),
            "notes": self.notes,
        }

    # URL round trip --------------------------------------------------------

    def to_url(self) -> str:
        base = f"/person/{self.person_id}"
        if self.stage == DraftStage.SAVED:
            return base

        params: dict[str, str] = {"date": self.date, "notes": self.notes}
        if self.stage in (DraftStage.TRANSCRIBED, DraftStage.ANALYZED):
            params = {"transcript": self.transcript, **params}
        if self.stage == DraftStage.ANALYZED:
            params["summary"] = self.summary
            for name in LIST_FIELDS:
                params[name] = json.dumps(getattr(self, name))
        return f"{base}/{STAGE_PAGES[self.stage]}?{urlencode(params)}"

    @classmethod
    def from_url(cls, url: str) -> VisitDraft:
        parts = urlsplit(url)
        segments = [s for s in parts.path.split("/") if s]
        if len(segments) not in (2, 3) or segments[0] != "person":
            raise DraftUrlError(f"Not a visit draft URL: {url}")
        try:
            person_id = int(segments[1])
        except ValueError:
            raise DraftUrlError(f"Invalid person id in URL: {url}")

        if len(segments) == 2:
            return cls(person_id=person_id, stage=DraftStage.SAVED)

        stage = PAGE_STAGES.get(segments[2])
        if stage is None:
            raise DraftUrlError(f"Unknown wizard page '{segments[2]}' in URL: {url}")

        query = parse_qs(parts.query, keep_blank_values=True)

        def param(name: str) -> str:
            values = query.get(name)
            return values[0] if values else ""

        draft = cls(
            person_id=person_id,
            stage=stage,
            date=param("date"),
            notes=param("notes"),
        )
        if stage == DraftStage.RECORDING:
            return draft

        draft = replace(draft, transcript=param("transcript"))
        if stage == DraftStage.TRANSCRIBED:
            return draft

        lists = {}
        for name in LIST_FIELDS:
            try:
                value = json.loads(param(name) or "[]")
            except json.JSONDecodeError:
                raise DraftUrlError(f"Malformed '{name}' parameter in URL")
            if not isinstance(value, list):
                raise DraftUrlError(f"'{name}' must be a JSON list")
            lists[name] = [str(item) for item in value]
        return replace(draft, summary=param("summary"), **lists)

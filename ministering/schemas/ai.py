"""Pydantic schemas for transcription and AI analysis."""

from pydantic import BaseModel, Field, field_validator

DEFAULT_VISIT_SUMMARY = "Visit completed successfully."


def _as_string_list(value) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None and str(item).strip()]
    return [str(value)]


class TranscribeResponse(BaseModel):
    transcript: str


class AnalyzeRequest(BaseModel):
    transcript: str | None = None


class VisitAnalysis(BaseModel):
    """
    Structured output of a visit analysis.

    Every field is always present; omitted or malformed model output falls
    back to the defaults.
    """

    summary: str = DEFAULT_VISIT_SUMMARY
    followups: list[str] = Field(default_factory=list)
    scriptures: list[str] = Field(default_factory=list)
    talks: list[str] = Field(default_factory=list)

    @field_validator("summary", mode="before")
    @classmethod
    def _default_summary(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_VISIT_SUMMARY
        return str(value)

    @field_validator("followups", "scriptures", "talks", mode="before")
    @classmethod
    def _coerce_list(cls, value):
        return _as_string_list(value)


class VisitInsights(BaseModel):
    """Patterns and suggestions across a person's visit history."""

    patterns: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)

    @field_validator("patterns", "suggestions", mode="before")
    @classmethod
    def _coerce_list(cls, value):
        return _as_string_list(value)


class InsightEntry(BaseModel):
    """One past visit fed into the insights prompt."""

    transcript: str
    date: str

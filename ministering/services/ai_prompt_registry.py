"""Central registry for AI system prompts and templates."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PromptTemplate:
    key: str
    system: str
    user: str | None = None

    def render_user(self, **kwargs) -> str:
        if not self.user:
            raise ValueError(f"Prompt '{self.key}' has no user template")
        return self.user.format(**kwargs)


PROMPTS: dict[str, PromptTemplate] = {
    "visit_analysis": PromptTemplate(
        key="visit_analysis",
        system=(
            "You are a compassionate AI assistant helping LDS church members with "
            "their ministering responsibilities. Provide thoughtful, scripture-based guidance."
        ),
        user="""
You are an AI assistant helping with LDS ministering. Analyze this ministering visit transcript and provide:

1. A thoughtful summary of the conversation (2-3 sentences)
2. Suggested follow-up actions (3-5 specific, actionable items)
3. Relevant scripture references that might help this person (2-4 references with brief context)
4. Suggested LDS conference talks or resources (2-3 talks with titles and speakers)

Focus on spiritual needs, emotional support, and practical help. Be compassionate and Christ-centered in your suggestions.

Transcript: "{transcript}"

Respond with JSON in this exact format:
{{
  "summary": "string",
  "followups": ["string1", "string2", "string3"],
  "scriptures": ["scripture1 - brief context", "scripture2 - brief context"],
  "talks": ["Talk Title by Speaker - brief relevance", "Talk Title by Speaker - brief relevance"]
}}
""",
    ),
    "visit_insights": PromptTemplate(
        key="visit_insights",
        system="You are a wise, compassionate AI assistant helping with LDS ministering insights.",
        user="""
Analyze these ministering visit transcripts to identify patterns and provide insights:

{transcripts}

Provide:
1. Patterns you notice in the person's spiritual journey, challenges, or growth (3-4 observations)
2. Suggestions for future ministering approaches or topics to discuss (3-4 actionable suggestions)

Be encouraging and focus on spiritual growth opportunities.

Respond with JSON in this format:
{{
  "patterns": ["pattern1", "pattern2", "pattern3"],
  "suggestions": ["suggestion1", "suggestion2", "suggestion3"]
}}
""",
    ),
}


def get_prompt(key: str) -> PromptTemplate:
    try:
        return PROMPTS[key]
    except KeyError:
        raise KeyError(f"Unknown prompt key: {key}")

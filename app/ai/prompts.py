"""Versioned prompt templates for preference extraction and book selection.

Each ``PromptVersion`` bundles the two prompts used by one revision of the
conversation flow together with the catalog-filter behaviour that shipped with
it. ``settings.prompt_version`` picks the active row.

Templates use ``string.Template`` placeholders because the prompt bodies are full
of literal JSON braces.
"""

from dataclasses import dataclass
from string import Template

PUBLICATION_QUESTION = (
    "Are you looking for recent books (2020+), older classics (pre-2010), "
    "or popular books that are widely loved (anytime)?"
)

GENRE_QUESTION = (
    "What kind of book are you in the mood for? For example, romance, fantasy, "
    "thriller, mystery, or something else?"
)


@dataclass(frozen=True)
class PromptVersion:
    """One revision of the extraction/selection prompt pair."""

    version: str
    description: str
    extraction_template: Template
    selection_template: Template
    popularity_override: bool = False  # Keep highly rated records regardless of category
    asks_publication: bool = False

    def render_extraction(self, transcript: str) -> str:
        return self.extraction_template.substitute(transcript=transcript)

    def render_selection(self, preferences: str, books: str, exclusion: str = "") -> str:
        return self.selection_template.substitute(
            preferences=preferences,
            books=books,
            exclusion=exclusion,
        )


_BASIC_FIELDS = """\
- GENRE: romance, mystery, fantasy, thriller, sci-fi, horror, literary fiction, etc.
- MOOD: sad, happy, dark, uplifting, emotional, suspenseful, cozy, etc.
- TOPIC/THEME: relationships, coming of age, war, family, adventure, grief, betrayal, etc."""


_EXTRACTION_V1 = Template(f"""You are a friendly book recommendation assistant. Read the conversation and decide whether you know enough to recommend a novel.

You need all three of:
{_BASIC_FIELDS}

If any are missing, ask ONE short question for the missing piece(s).
As soon as all three are known, set readyToRecommend to true and write a Google Books search query.

Conversation history:
$transcript

Respond with ONLY this JSON object:
{{
  "hasBasicInfo": true/false,
  "genre": "identified genre or null",
  "mood": "identified mood or null",
  "topic": "identified topic or null",
  "readyToRecommend": true/false,
  "missingBasicInfo": ["genre/mood/topic still missing"],
  "question": "the question to ask or null",
  "searchQuery": "Google Books query or null"
}}""")


_EXTRACTION_V2 = Template(f"""You are a thoughtful book recommendation assistant. Read the conversation and decide the next step.

STEP 1 - Basic info (all three required):
{_BASIC_FIELDS}

STEP 2 - Once the basics are known, ask about ONE secondary preference you do not yet know, one question at a time:
1. DEALBREAKERS (content the reader wants to avoid)
2. COMPLEXITY (light/easy vs literary/thought-provoking)
Skip this step if the user says they have no further preferences.

Set readyToRecommend to true when the basics are known and at least one secondary preference has been asked about.

Conversation history:
$transcript

Respond with ONLY this JSON object:
{{
  "hasBasicInfo": true/false,
  "genre": "identified genre or null",
  "mood": "identified mood or null",
  "topic": "identified topic or null",
  "needsInvestigation": true/false,
  "investigationCategory": "dealbreakers/complexity or null",
  "investigationQuestion": "natural question or null",
  "preferences": {{
    "complexity": "easy/literary/null",
    "dealbreakers": ["avoided topics, or empty"]
  }},
  "readyToRecommend": true/false,
  "missingBasicInfo": ["genre/mood/topic still missing"],
  "question": "the question to ask or null",
  "searchQuery": "Google Books query or null"
}}""")


_EXTRACTION_V3 = Template(f"""You are a sophisticated book recommendation assistant. Analyze the conversation to decide the next step.

STEP 1 - BASIC INFO (all three required before anything else):
{_BASIC_FIELDS}

STEP 2 - Ask ONE question at a time, in this order:
1. Any missing basic info.
2. PUBLICATION PREFERENCE (always ask when not specified):
   "{PUBLICATION_QUESTION}"
   Map the answer to "recent", "classic" or "popular".
3. DEALBREAKERS (content to avoid).
4. COMPLEXITY (light/easy vs literary/thought-provoking).

Set readyToRecommend to true when:
- all three basics are known AND the publication preference is clear, or
- the user was very specific from the start (e.g. "2023 romance", "classic mystery"), or
- the user just answered the publication question.

Conversation history:
$transcript

Respond with ONLY this JSON object:
{{
  "hasBasicInfo": true/false,
  "genre": "identified genre or null",
  "mood": "identified mood or null",
  "topic": "identified topic or null",
  "needsInvestigation": true/false,
  "investigationCategory": "publication/dealbreakers/complexity or null",
  "investigationQuestion": "natural question or null",
  "preferences": {{
    "publication": "recent/classic/popular/any/null",
    "complexity": "easy/literary/null",
    "dealbreakers": ["avoided topics, or empty"]
  }},
  "readyToRecommend": true/false,
  "missingBasicInfo": ["genre/mood/topic still missing"],
  "question": "the question to ask or null",
  "searchQuery": "Google Books query or null (include a date range for the publication preference)"
}}

EXAMPLE - basics known, publication unknown:
User: "sad romance about heartbreak"
{{"hasBasicInfo": true, "genre": "romance", "mood": "sad", "topic": "heartbreak", "needsInvestigation": true, "investigationCategory": "publication", "investigationQuestion": "{PUBLICATION_QUESTION}", "preferences": {{"publication": null, "complexity": null, "dealbreakers": []}}, "readyToRecommend": false, "missingBasicInfo": [], "question": "{PUBLICATION_QUESTION}", "searchQuery": null}}

EXAMPLE - the user then says "recent please":
{{"hasBasicInfo": true, "genre": "romance", "mood": "sad", "topic": "heartbreak", "needsInvestigation": false, "investigationCategory": null, "investigationQuestion": null, "preferences": {{"publication": "recent", "complexity": null, "dealbreakers": []}}, "readyToRecommend": true, "missingBasicInfo": [], "question": null, "searchQuery": "sad romance heartbreak emotional 2020..2026 subject:fiction"}}""")


_SELECTION_V1 = Template("""Pick the SINGLE BEST novel for this reader from the list below.

PREFERENCES:
$preferences

BOOKS:
$books
$exclusion
Match genre, mood and topic as closely as possible and avoid every listed dealbreaker.

Return ONLY this JSON object:
{
  "title": "exact title from the list",
  "author": "author(s)",
  "description": "1-2 sentence summary",
  "reasoning": "2-3 sentences on why it fits",
  "pageCount": number_or_null,
  "publishedDate": "year or full date or null",
  "rating": number_or_null
}""")


_SELECTION_V3 = Template("""Pick the SINGLE BEST novel matching these preferences from the list:

PREFERENCES:
$preferences

BOOKS:
$books
$exclusion
RULES:
1. MUST match the publication preference (recent=2020+, classic=pre-2010, popular=4+ stars/many reviews)
2. Avoid all dealbreakers completely
3. Match genre/mood/topic as closely as possible
4. For popular: prioritize a 4.0+ rating OR 1000+ reviews

Return ONLY this JSON object:
{
  "title": "exact title from the list",
  "author": "author(s)",
  "description": "1-2 sentence summary",
  "reasoning": "3 sentences: why genre/mood/topic match + why publication fits + why best overall",
  "pageCount": number_or_null,
  "publishedDate": "year or full date or null",
  "rating": number_or_null
}""")


PROMPT_VERSIONS: dict[str, PromptVersion] = {
    "v1": PromptVersion(
        version="v1",
        description="Genre, mood and topic only",
        extraction_template=_EXTRACTION_V1,
        selection_template=_SELECTION_V1,
    ),
    "v2": PromptVersion(
        version="v2",
        description="Adds one secondary question (dealbreakers or complexity)",
        extraction_template=_EXTRACTION_V2,
        selection_template=_SELECTION_V1,
    ),
    "v3": PromptVersion(
        version="v3",
        description="Asks for the publication era first, keeps popular books",
        extraction_template=_EXTRACTION_V3,
        selection_template=_SELECTION_V3,
        popularity_override=True,
        asks_publication=True,
    ),
}


def get_prompt_version(version: str) -> PromptVersion:
    """Look up a prompt version.

    Raises:
        ValueError: If the version is not registered
    """
    if version not in PROMPT_VERSIONS:
        raise ValueError(
            f"Unknown prompt version: {version}. "
            f"Available versions: {', '.join(PROMPT_VERSIONS)}"
        )
    return PROMPT_VERSIONS[version]

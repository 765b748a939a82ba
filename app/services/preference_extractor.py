"""Preference extraction: read the transcript and decide whether to recommend."""

import structlog

from app.ai import AIProvider, AIProviderError, ChatMessage
from app.ai.prompts import PromptVersion
from app.config import Settings
from app.core.exceptions import UpstreamError
from app.schemas.chat import Analysis, ConversationTurn
from app.services.json_parsing import parse_model_json

logger = structlog.get_logger(__name__)


def build_transcript(history: list[ConversationTurn], message: str) -> str:
    """Flatten prior turns plus the new message into ``Speaker: text`` lines."""
    lines = []
    for turn in history:
        speaker = "User" if turn.is_user else "Assistant"
        line = f"{speaker}: {turn.text}"
        if not turn.is_user and turn.recommendation is not None:
            rec = turn.recommendation
            by = f" by {rec.author}" if rec.author else ""
            line = f"{line} (Recommended: {rec.title}{by})"
        lines.append(line)
    lines.append(f"User: {message}")
    return "\n".join(lines)


class PreferenceExtractor:
    """Ask the model for the structured preferences contained in a transcript."""

    def __init__(self, provider: AIProvider, settings: Settings, prompts: PromptVersion):
        self.provider = provider
        self.settings = settings
        self.prompts = prompts

    async def analyze(self, transcript: str) -> Analysis:
        """Extract an ``Analysis`` from the transcript.

        Raises:
            UpstreamError: If the model call fails
            ParseError: If the reply is not a valid Analysis document
        """
        prompt = self.prompts.render_extraction(transcript)
        try:
            response = await self.provider.chat(
                [ChatMessage(role="user", content=prompt)],
                model=self.settings.ai_model,
                max_tokens=self.settings.ai_max_tokens,
                temperature=self.settings.ai_temperature,
                json_mode=True,
            )
        except AIProviderError as e:
            raise UpstreamError(str(e), source="preference_extractor") from e

        analysis = parse_model_json(response.content, Analysis, source="preference_extractor")
        logger.info(
            "Conversation analyzed",
            ready=analysis.ready_to_recommend,
            genre=analysis.genre,
            publication=analysis.preferences.publication,
            prompt_version=self.prompts.version,
            tokens=response.total_tokens,
        )
        return analysis

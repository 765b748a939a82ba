"""Chat API endpoint."""

import structlog
from fastapi import APIRouter

from app.api.v1.deps import MessageRequest, Pipeline
from app.schemas.chat import ChatReply
from app.schemas.common import ErrorResponse

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.post(
    "/chat",
    response_model=ChatReply,
    summary="Send a chat message",
    description="""
Send the user's latest message with the conversation so far.

**Reply types:**
- `question` - more preference detail is needed; `message` is the follow-up question
- `recommendation` - one book was picked, with cover, links and the model's reasoning
- `message` - the search found nothing suitable; broaden the criteria

The server is stateless: send back the previous turns (including any
`recommendation` and `analysis` objects) on every request.
    """,
    responses={
        400: {"model": ErrorResponse, "description": "Missing message"},
        500: {"model": ErrorResponse, "description": "Model or catalog failure"},
    },
)
async def chat(body: MessageRequest, pipeline: Pipeline):
    """Run one conversation turn."""
    logger.info(
        "Chat message received",
        message=body.message[:200],
        history_turns=len(body.conversation_history),
    )
    reply = await pipeline.run(body)
    logger.info("Chat reply sent", type=reply.type)
    return reply

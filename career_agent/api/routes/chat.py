"""Chat API routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sse_starlette.sse import EventSourceResponse

from career_agent.api.dependencies import chat_rate_limit, get_chat_use_case, limiter
from career_agent.application.chat.dto import ChatTurnRequest, ChatTurnResult
from career_agent.application.chat.use_case import ChatUseCase
from career_agent.application.shared.stream_protocol import FAILURE_PREFIX
from career_agent.domain.entities.workflow_state import StreamChunk

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("", response_model=ChatTurnResult)
@limiter.limit(chat_rate_limit)
async def chat(
    request: Request,
    chat_request: ChatTurnRequest,
    use_case: ChatUseCase = Depends(get_chat_use_case),
) -> ChatTurnResult:
    """Run one turn and return the collected reply with the state for the next turn."""
    try:
        return await use_case.execute(chat_request)
    except Exception:
        logger.exception("Chat turn failed for session=%s", chat_request.session_id)
        raise HTTPException(status_code=500, detail="Chat request failed")


@router.post("/stream")
@limiter.limit(chat_rate_limit)
async def chat_stream(
    request: Request,
    chat_request: ChatTurnRequest,
    use_case: ChatUseCase = Depends(get_chat_use_case),
) -> EventSourceResponse:
    """Stream one turn via SSE; each event's data is a StreamChunk in wire form."""

    async def event_generator():
        try:
            async for chunk in use_case.execute_stream(chat_request):
                yield {"data": chunk.to_wire_json()}
        except Exception as e:
            logger.exception("Chat stream failed for session=%s", chat_request.session_id)
            failure = StreamChunk(content=f"{FAILURE_PREFIX}: {e}", finished=True, workflow_state=None)
            yield {"event": "error", "data": failure.to_wire_json()}

    return EventSourceResponse(event_generator())

"""Stream protocol utilities - one terminal chunk per turn, state on the first and last chunk.

wrap_stream buffers the whole turn so the last chunk is known for certain.
passthrough_stream/sse_stream forward chunks as they arrive; if the source fails
mid-flight, the emitted error chunk becomes the terminal one.
"""

from collections.abc import AsyncIterator
from typing import Any

import structlog

from career_agent.domain.entities.workflow_state import StreamChunk, WorkflowState

log = structlog.get_logger()

FAILURE_PREFIX = "处理失败"


async def wrap_stream(
    stream: AsyncIterator[StreamChunk],
    initial_state: WorkflowState | None = None,
) -> AsyncIterator[StreamChunk]:
    """Buffer *stream*, then re-emit it with exactly one terminal chunk (the last)."""
    try:
        chunks = [chunk async for chunk in stream]
    except Exception as e:
        log.warning("stream_wrap_failed", error=str(e))
        yield StreamChunk(content=f"{FAILURE_PREFIX}: {e}", finished=True, workflow_state=None)
        return

    if not chunks:
        yield StreamChunk(content="", finished=True, workflow_state=initial_state)
        return

    last = len(chunks) - 1
    for i, chunk in enumerate(chunks):
        if chunk.has_state:
            state = chunk.workflow_state
        else:
            state = initial_state if i == 0 else None
        yield StreamChunk(content=chunk.content, finished=i == last, workflow_state=state)


async def passthrough_stream(
    stream: AsyncIterator[StreamChunk],
    initial_state: WorkflowState | None = None,
) -> AsyncIterator[StreamChunk]:
    """Non-buffering normalization: defaults the first chunk's state, forwards the rest."""
    emitted = False
    try:
        async for chunk in stream:
            if not emitted and not chunk.has_state:
                chunk = StreamChunk(
                    content=chunk.content,
                    finished=chunk.finished,
                    workflow_state=initial_state,
                )
            emitted = True
            yield chunk
    except Exception as e:
        log.warning("stream_passthrough_failed", error=str(e), emitted=emitted)
        yield StreamChunk(
            content=f"{FAILURE_PREFIX}: {e}",
            finished=True,
            workflow_state=None if emitted else initial_state,
        )
        return

    if not emitted:
        yield StreamChunk(content="", finished=True, workflow_state=initial_state)


def encode_sse(chunk: StreamChunk) -> str:
    """Server-Sent-Events frame for one chunk."""
    return f"data: {chunk.to_wire_json()}\n\n"


async def sse_stream(
    stream: AsyncIterator[StreamChunk],
    initial_state: WorkflowState | None = None,
) -> AsyncIterator[str]:
    """passthrough_stream encoded as `data: {json}` frames."""
    async for chunk in passthrough_stream(stream, initial_state):
        yield encode_sse(chunk)


async def collect_stream_content(
    stream: AsyncIterator[StreamChunk],
) -> tuple[str, WorkflowState | None]:
    """Concatenate content and return it with the terminal chunk's state."""
    parts: list[str] = []
    final_state: WorkflowState | None = None
    async for chunk in stream:
        if chunk.content:
            parts.append(chunk.content)
        if chunk.finished and chunk.has_state:
            final_state = chunk.workflow_state
    return "".join(parts), final_state


async def error_stream(
    message: str,
    workflow_state: WorkflowState | None = None,
) -> AsyncIterator[StreamChunk]:
    """A turn consisting of a single terminal notice."""
    yield StreamChunk(content=message, finished=True, workflow_state=workflow_state)


def validate_stream_chunk(obj: Any) -> bool:
    """Check a decoded wire object has the StreamChunk shape."""
    if not isinstance(obj, dict):
        return False
    content = obj.get("content")
    finished = obj.get("finished")
    state = obj.get("workflowState")
    if content is not None and not isinstance(content, str):
        return False
    if finished is not None and not isinstance(finished, bool):
        return False
    if state is not None and not isinstance(state, dict):
        return False
    if state is not None:
        try:
            WorkflowState.model_validate(state)
        except ValueError:
            return False
    return True

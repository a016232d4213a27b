"""LLM Port - interface for the text-completion backend."""

from typing import AsyncIterator, Literal, Protocol

from pydantic import BaseModel


class LLMMessage(BaseModel):
    """Single message in a conversation."""

    role: Literal["system", "user", "assistant"]
    content: str


class LLMPort(Protocol):
    """Interface for model clients (OpenAI-compatible services)."""

    async def complete(self, messages: list[LLMMessage]) -> str:
        """Generate a single response (non-streaming)."""
        ...

    def stream_complete(self, messages: list[LLMMessage]) -> AsyncIterator[str]:
        """Generate response with streaming (yields text fragments)."""
        ...

    async def is_available(self) -> bool:
        """Check if the backend is reachable."""
        ...

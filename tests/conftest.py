"""Pytest configuration and shared fixtures."""

import pytest

from career_agent.domain.ports.llm import LLMMessage


class FakeLLM:
    """Scripted LLMPort.

    complete() returns the queued replies in order (or raises *error*);
    stream_complete() yields *fragments*, then raises *stream_error* if set.
    Every call records the messages it received.
    """

    def __init__(
        self,
        replies: list[str] | None = None,
        fragments: list[str] | None = None,
        error: Exception | None = None,
        stream_error: Exception | None = None,
        available: bool = True,
    ):
        self.replies = list(replies or [])
        self.fragments = list(fragments or [])
        self.error = error
        self.stream_error = stream_error
        self.available = available
        self.complete_calls: list[list[LLMMessage]] = []
        self.stream_calls: list[list[LLMMessage]] = []

    async def complete(self, messages):
        self.complete_calls.append(list(messages))
        if self.error:
            raise self.error
        return self.replies.pop(0) if self.replies else ""

    async def stream_complete(self, messages):
        self.stream_calls.append(list(messages))
        for fragment in self.fragments:
            yield fragment
        if self.stream_error:
            raise self.stream_error

    async def is_available(self):
        return self.available

    async def close(self):
        pass


@pytest.fixture
def make_llm():
    """Factory for scripted fake model clients."""
    return FakeLLM


@pytest.fixture
def fake_llm():
    """Fake model client that streams a short two-fragment reply."""
    return FakeLLM(replies=["ok"], fragments=["你好", "！"])

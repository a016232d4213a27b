"""Shared application-layer utilities."""

from career_agent.application.shared.stream_protocol import (
    collect_stream_content,
    encode_sse,
    error_stream,
    passthrough_stream,
    sse_stream,
    validate_stream_chunk,
    wrap_stream,
)

__all__ = [
    "collect_stream_content",
    "encode_sse",
    "error_stream",
    "passthrough_stream",
    "sse_stream",
    "validate_stream_chunk",
    "wrap_stream",
]

"""
Utils Package

@file_name: __init__.py
@description: Utility modules for the Skald client

Exports:
- SSEDecoder, iter_sse_events: server-sent event decoding
- Exception hierarchy rooted at SkaldError
"""

from skald.utils.sse import (
    SSEDecoder,
    iter_sse_events,
)

from skald.utils.exceptions import (
    SkaldError,
    InvalidArgumentError,
    TransportError,
    ApiError,
    ProtocolError,
)

__all__ = [
    # SSE
    "SSEDecoder",
    "iter_sse_events",
    # Exceptions
    "SkaldError",
    "InvalidArgumentError",
    "TransportError",
    "ApiError",
    "ProtocolError",
]

"""
@file_name: sse.py
@author: NetMind.AI
@date: 2026-10-12
@description: Server-sent event decoding for streamed chat and document generation

The Skald server streams newline-delimited frames:

    data: {"type": "token", "content": "Hello"}
    : ping
    data: {"type": "done"}

Decoding is split in two:
1. SSEDecoder: a push-based state machine (text buffer + terminal flag) that
   turns raw byte chunks into StreamEvent objects. Chunk boundaries never
   change its output, including boundaries inside a multi-byte character.
2. iter_sse_events: the async driver that pulls chunks one at a time from the
   response body and yields events until the done event or end of data.

Key rules:
- Only lines starting with "data: " carry events; blank lines and ": ping"
  keep-alives are ignored
- A data line whose payload is not a JSON event object is dropped silently
- Nothing after the done event is read or emitted
- An unterminated trailing line at end of data is discarded
"""

from __future__ import annotations

import codecs
import json
from typing import AsyncIterable, AsyncIterator, List, Optional

from pydantic import ValidationError

from skald.schema.chat_schema import StreamEvent
from skald.utils.exceptions import ProtocolError


DATA_PREFIX = "data: "


class SSEDecoder:
    """
    Incremental SSE frame decoder

    Usage:
        >>> decoder = SSEDecoder()
        >>> decoder.feed(b'data: {"type": "token", "content": "Hi"}\\ndata: {"ty')
        [StreamEvent(type='token', content='Hi')]
        >>> decoder.feed(b'pe": "done"}\\n')
        [StreamEvent(type='done', content=None)]
        >>> decoder.done
        True
    """

    def __init__(self):
        # Stateful so a character split across chunks is completed by the next feed
        self._text_decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self.done = False

    def feed(self, chunk: bytes) -> List[StreamEvent]:
        """
        Consume one chunk of the body

        Args:
            chunk: Raw bytes as read from the response

        Returns:
            Events completed by this chunk, in the order their lines appear.
            Empty once the done event has been seen.
        """
        if self.done:
            return []

        self._buffer += self._text_decoder.decode(chunk)
        lines = self._buffer.split("\n")
        # The last piece is incomplete until a newline arrives
        self._buffer = lines.pop()

        events: List[StreamEvent] = []
        for line in lines:
            event = self.parse_line(line)
            if event is None:
                continue
            events.append(event)
            if event.is_done:
                self.done = True
                self._buffer = ""
                break
        return events

    @staticmethod
    def parse_line(line: str) -> Optional[StreamEvent]:
        """Return the event carried by a single line, or None if the line carries none"""
        if not line.startswith(DATA_PREFIX):
            return None
        try:
            return StreamEvent.model_validate(json.loads(line[len(DATA_PREFIX):]))
        except (ValueError, ValidationError):
            return None


async def iter_sse_events(
    chunks: Optional[AsyncIterable[bytes]],
) -> AsyncIterator[StreamEvent]:
    """
    Lazily decode a streamed body into StreamEvent objects

    Reads are strictly sequential. The caller owns the underlying response and
    is responsible for releasing it; this generator only stops reading.

    Args:
        chunks: Async iterable of body chunks, or None when the response has no body

    Raises:
        ProtocolError: On the first iteration step if there is no body to read
    """
    if chunks is None:
        raise ProtocolError("empty body")

    decoder = SSEDecoder()
    async for chunk in chunks:
        for event in decoder.feed(chunk):
            yield event
        if decoder.done:
            return

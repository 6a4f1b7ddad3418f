"""
@file_name: chat_schema.py
@author: NetMind.AI
@date: 2026-10-12
@description: Chat, document generation and stream event data models

Chat and document generation share one response shape. Their streaming
variants yield StreamEvent objects decoded from the server-sent event body:

    {"type": "token", "content": "Hello"}
    {"type": "done"}

Usage:
    async for event in skald.streamed_chat("What changed in Q1?"):
        if event.is_token:
            print(event.content, end="")
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field

from .memo_schema import ApiModel
from .search_schema import Filter


STREAM_EVENT_TOKEN = "token"
STREAM_EVENT_DONE = "done"


# ===== Requests =====

class ChatRequest(BaseModel):
    """Body of POST /api/v1/chat; stream is always set by the client"""

    query: str
    stream: bool = False
    filters: Optional[List[Filter]] = None


class GenerateDocRequest(BaseModel):
    """Body of POST /api/v1/generate; stream is always set by the client"""

    prompt: str
    rules: Optional[str] = Field(
        default=None,
        description="Style/format rules, e.g. 'Use formal business language'"
    )
    stream: bool = False
    filters: Optional[List[Filter]] = None


# ===== Responses =====

class ChatResponse(ApiModel):
    ok: bool
    response: Optional[str] = None
    intermediate_steps: List[Any] = Field(default_factory=list)


class GenerateDocResponse(ApiModel):
    ok: bool
    response: Optional[str] = None
    intermediate_steps: List[Any] = Field(default_factory=list)


# ===== Streaming =====

class StreamEvent(ApiModel):
    """
    One event of a streamed chat or document generation

    type is "token" (content carries the text delta) or "done" (terminal).
    Any other type string is passed through as-is.
    """

    type: str
    content: Optional[str] = None

    @property
    def is_token(self) -> bool:
        return self.type == STREAM_EVENT_TOKEN

    @property
    def is_done(self) -> bool:
        return self.type == STREAM_EVENT_DONE

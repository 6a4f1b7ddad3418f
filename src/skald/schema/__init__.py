"""
@file_name: __init__.py
@author: NetMind.AI
@date: 2026-10-12
@description: Schema package exports

Centralized management of all request/response models

Usage:
    from skald.schema import (
        MemoData,
        Filter,
        StreamEvent,
        ...
    )
"""

# ===== Memo Schema =====
from .memo_schema import (
    IdType,
    ID_TYPES,
    MemoData,
    UpdateMemoData,
    CreateMemoResponse,
    UpdateMemoResponse,
    MemoTag,
    MemoChunk,
    Memo,
    MemoListItem,
    ListMemosResponse,
)

# ===== Search Schema =====
from .search_schema import (
    FilterOperator,
    FilterType,
    SearchMethod,
    Filter,
    SearchRequest,
    SearchResult,
    SearchResponse,
)

# ===== Chat Schema =====
from .chat_schema import (
    STREAM_EVENT_TOKEN,
    STREAM_EVENT_DONE,
    ChatRequest,
    ChatResponse,
    GenerateDocRequest,
    GenerateDocResponse,
    StreamEvent,
)

__all__ = [
    # Memo
    "IdType",
    "ID_TYPES",
    "MemoData",
    "UpdateMemoData",
    "CreateMemoResponse",
    "UpdateMemoResponse",
    "MemoTag",
    "MemoChunk",
    "Memo",
    "MemoListItem",
    "ListMemosResponse",
    # Search
    "FilterOperator",
    "FilterType",
    "SearchMethod",
    "Filter",
    "SearchRequest",
    "SearchResult",
    "SearchResponse",
    # Chat
    "STREAM_EVENT_TOKEN",
    "STREAM_EVENT_DONE",
    "ChatRequest",
    "ChatResponse",
    "GenerateDocRequest",
    "GenerateDocResponse",
    "StreamEvent",
]

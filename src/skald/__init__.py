"""
Skald - Python client for the Skald knowledge-base API

Provides async access to:
- Memos: create, get, list, update, delete
- Search: vector and title search with filters
- Chat / Generate: retrieval-augmented answers and documents, plain or streamed

Logging goes through loguru and is disabled for this package by default;
enable it with ``logger.enable("skald")``.
"""

__version__ = "0.1.0"

from loguru import logger

# 1. Schema (data structures, no dependencies)
from .schema import (
    MemoData,
    UpdateMemoData,
    Memo,
    MemoListItem,
    ListMemosResponse,
    CreateMemoResponse,
    UpdateMemoResponse,
    Filter,
    SearchResult,
    SearchResponse,
    ChatResponse,
    GenerateDocResponse,
    StreamEvent,
)

# 2. Utils (exceptions, SSE decoding)
from .utils import (
    SkaldError,
    InvalidArgumentError,
    TransportError,
    ApiError,
    ProtocolError,
)

# 3. Settings and client
from .settings import ClientConfig, SkaldSettings, DEFAULT_BASE_URL
from .client import Skald

logger.disable("skald")

__all__ = [
    "__version__",
    "Skald",
    "ClientConfig",
    "SkaldSettings",
    "DEFAULT_BASE_URL",
    "MemoData",
    "UpdateMemoData",
    "Memo",
    "MemoListItem",
    "ListMemosResponse",
    "CreateMemoResponse",
    "UpdateMemoResponse",
    "Filter",
    "SearchResult",
    "SearchResponse",
    "ChatResponse",
    "GenerateDocResponse",
    "StreamEvent",
    "SkaldError",
    "InvalidArgumentError",
    "TransportError",
    "ApiError",
    "ProtocolError",
]

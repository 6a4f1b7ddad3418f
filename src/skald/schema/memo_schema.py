"""
Memo Schema - Memo request/response data models

@file_name: memo_schema.py
@author: NetMind.AI
@date: 2026-10-12
@description: Data models for the memo CRUD endpoints

A memo is the core content resource of a Skald knowledge base. After creation
the server summarizes, chunks and indexes it; the client never caches memos.

Includes:
- Requests: MemoData (create), UpdateMemoData (partial update)
- Responses: Memo, MemoTag, MemoChunk, MemoListItem, ListMemosResponse,
  CreateMemoResponse, UpdateMemoResponse
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


IdType = Literal["memo_uuid", "reference_id"]

ID_TYPES = ("memo_uuid", "reference_id")


class ApiModel(BaseModel):
    """Base for server responses; unknown fields are kept rather than dropped"""

    model_config = ConfigDict(extra="allow")


# ===== Requests =====

class MemoData(BaseModel):
    """
    Memo creation payload

    Only title and content are required. Optional fields that are not set are
    left out of the request body entirely.
    Keys the model does not declare are passed to the server unchanged.
    """

    model_config = ConfigDict(extra="allow")

    title: str = Field(..., description="Memo title (max 255 characters)")
    content: str = Field(..., description="Full memo content")
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Custom JSON metadata, sent as {} when not provided"
    )
    reference_id: Optional[str] = Field(
        default=None,
        description="External reference ID linking the memo to an ID on the caller's side"
    )
    tags: Optional[List[str]] = None
    source: Optional[str] = Field(
        default=None,
        description="Source system name, e.g. 'notion', 'confluence', 'email'"
    )
    expiration_date: Optional[str] = None

    @field_validator("metadata", mode="before")
    @classmethod
    def _default_metadata(cls, value: Any) -> Any:
        return {} if value is None else value


class UpdateMemoData(BaseModel):
    """Partial memo update; only the fields that were set are sent, extra keys included"""

    model_config = ConfigDict(extra="allow")

    title: Optional[str] = None
    content: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    client_reference_id: Optional[str] = None
    source: Optional[str] = None
    expiration_date: Optional[str] = None


# ===== Responses =====

class CreateMemoResponse(ApiModel):
    ok: bool


class UpdateMemoResponse(ApiModel):
    ok: bool


class MemoTag(ApiModel):
    uuid: str
    tag: str


class MemoChunk(ApiModel):
    uuid: str
    chunk_content: str
    chunk_index: int


class Memo(ApiModel):
    """Full memo as returned by GET /api/v1/memo/{id}; summary stays None while the memo is pending"""

    uuid: str
    created_at: str
    updated_at: str
    title: str
    content: str
    summary: Optional[str] = None
    content_length: int
    metadata: Dict[str, Any] = Field(default_factory=dict)
    client_reference_id: Optional[str] = None
    source: Optional[str] = None
    type: str
    expiration_date: Optional[str] = None
    archived: bool = False
    pending: bool = False
    tags: List[MemoTag] = Field(default_factory=list)
    chunks: List[MemoChunk] = Field(default_factory=list)


class MemoListItem(ApiModel):
    """Memo summary row of a list page (no content, tags or chunks)"""

    uuid: str
    created_at: str
    updated_at: str
    title: str
    summary: Optional[str] = None
    content_length: int
    metadata: Dict[str, Any] = Field(default_factory=dict)
    client_reference_id: Optional[str] = None


class ListMemosResponse(ApiModel):
    """Page envelope of GET /api/v1/memo"""

    count: int
    next: Optional[str] = None
    previous: Optional[str] = None
    results: List[MemoListItem] = Field(default_factory=list)

"""
@file_name: search_schema.py
@author: NetMind.AI
@date: 2026-10-12
@description: Filter and search data models

Filters narrow which memos are considered by search, chat and document
generation. Several filters are combined with AND semantics by the server.

Search methods:
- chunk_vector_search: semantic search on memo chunks
- title_contains: case-insensitive substring match on memo titles
- title_startswith: case-insensitive prefix match on memo titles
"""

from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from .memo_schema import ApiModel


FilterOperator = Literal[
    "eq",
    "neq",
    "contains",
    "startswith",
    "endswith",
    "in",
    "not_in",
]

FilterType = Literal["native_field", "custom_metadata"]

SearchMethod = Literal["chunk_vector_search", "title_contains", "title_startswith"]


class Filter(BaseModel):
    """
    A single filter predicate

    Example:
        >>> Filter(field="source", operator="eq", value="notion", filter_type="native_field")
        >>> Filter(field="tags", operator="in", value=["security", "compliance"],
        ...        filter_type="native_field")
    """

    field: str
    operator: FilterOperator
    value: Union[str, List[str]]
    filter_type: FilterType


class SearchRequest(BaseModel):
    """Body of POST /api/v1/search; limit and filters are omitted when not set"""

    query: str
    search_method: SearchMethod
    limit: Optional[int] = Field(default=None, description="1-50, server default 10")
    filters: Optional[List[Filter]] = None


class SearchResult(ApiModel):
    """
    A single search match

    distance is only populated by chunk_vector_search and is None for the
    title-based methods.
    """

    uuid: str
    title: str
    summary: Optional[str] = None
    content_snippet: Optional[str] = None
    distance: Optional[float] = None


class SearchResponse(ApiModel):
    results: List[SearchResult] = Field(default_factory=list)

"""
@file_name: client.py
@author: NetMind.AI
@date: 2026-10-12
@description: Skald HTTP API client

Exposes the Skald knowledge-base API as async methods:
1. Memos: create / get / list / update / delete
2. Search: POST /api/v1/search
3. Chat and document generation, plain or streamed (server-sent events)

Every method performs exactly one HTTP request. There are no retries and no
caching; a failed request surfaces as one of the exceptions in
skald.utils.exceptions.

Usage:
>>> from skald import Skald
>>> skald = Skald("sk_...")
>>> await skald.create_memo({"title": "Meeting Notes", "content": "..."})
>>> async for event in skald.streamed_chat("What did we decide?"):
...     if event.is_token:
...         print(event.content, end="")
"""

from __future__ import annotations

from contextlib import aclosing, asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence, Tuple, Type, TypeVar, Union
from urllib.parse import quote

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from skald.schema import (
    ID_TYPES,
    ChatRequest,
    ChatResponse,
    CreateMemoResponse,
    Filter,
    GenerateDocRequest,
    GenerateDocResponse,
    IdType,
    ListMemosResponse,
    Memo,
    MemoData,
    SearchMethod,
    SearchRequest,
    SearchResponse,
    StreamEvent,
    UpdateMemoData,
    UpdateMemoResponse,
)
from skald.settings import ClientConfig, settings
from skald.utils.exceptions import (
    ApiError,
    InvalidArgumentError,
    ProtocolError,
    TransportError,
)
from skald.utils.sse import iter_sse_events


ModelT = TypeVar("ModelT", bound=BaseModel)

FilterInput = Union[Filter, Dict[str, Any]]

# Status codes that never carry a body
_BODYLESS_STATUSES = (204, 205, 304)


class Skald:
    """
    Skald HTTP API Client

    Args:
        api_key: API key, falls back to SKALD_API_KEY
        base_url: API base URL, falls back to SKALD_BASE_URL
        timeout: Request timeout in seconds, falls back to SKALD_TIMEOUT (None = no timeout)
        http_client: Optional httpx.AsyncClient to send requests with. The
            caller owns its lifecycle and its timeout settings. When omitted,
            every call opens and closes its own client.

    Raises:
        InvalidArgumentError: If no API key is available
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        api_key = api_key or settings.api_key
        if not api_key:
            raise InvalidArgumentError(
                "api_key is required (pass it explicitly or set SKALD_API_KEY)"
            )

        self._config = ClientConfig(api_key=api_key, base_url=base_url or settings.base_url)
        self.timeout = timeout if timeout is not None else settings.timeout
        self._http_client = http_client

    @property
    def api_key(self) -> str:
        return self._config.api_key

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def __repr__(self) -> str:
        return f"Skald(base_url={self.base_url!r})"

    # =========================================================================
    # Memos
    # =========================================================================

    async def create_memo(self, memo: Union[MemoData, Dict[str, Any]]) -> CreateMemoResponse:
        """
        Create a new memo

        The memo is processed asynchronously by the server (summarized, chunked
        and indexed for search). metadata is sent as {} when not provided.

        Args:
            memo: MemoData or an equivalent dict (title and content are required);
                keys beyond the declared fields are sent as given

        Returns:
            CreateMemoResponse: {ok: true} on success
        """
        memo = _coerce(MemoData, memo)
        payload = memo.model_dump(exclude_unset=True)
        payload["metadata"] = memo.metadata

        data = await self._request("POST", "/api/v1/memo", json_body=payload)
        return _parse(CreateMemoResponse, data, "/api/v1/memo")

    async def get_memo(self, memo_id: str, id_type: IdType = "memo_uuid") -> Memo:
        """
        Get a memo by UUID or reference ID

        Args:
            memo_id: Memo UUID or client reference ID
            id_type: 'memo_uuid' (default) or 'reference_id'

        Returns:
            Memo: Memo details including content, summary, tags and chunks
        """
        path, params = _memo_path(memo_id, id_type)
        data = await self._request("GET", path, params=params)
        return _parse(Memo, data, path)

    async def list_memos(
        self,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> ListMemosResponse:
        """
        List memos in the project with pagination

        Args:
            page: Page number (server default 1)
            page_size: Results per page (server default 20, max 100)

        Parameters left as None are not sent; any other value, 0 included, is.

        Returns:
            ListMemosResponse: {count, next, previous, results}
        """
        params: Dict[str, str] = {}
        if page is not None:
            params["page"] = str(page)
        if page_size is not None:
            params["page_size"] = str(page_size)

        data = await self._request("GET", "/api/v1/memo", params=params)
        return _parse(ListMemosResponse, data, "/api/v1/memo")

    async def update_memo(
        self,
        memo_id: str,
        update_data: Union[UpdateMemoData, Dict[str, Any]],
        id_type: IdType = "memo_uuid",
    ) -> UpdateMemoResponse:
        """
        Update an existing memo

        Only the fields present in update_data are sent; the server merges them.
        Updating content makes the server reprocess the memo.

        Args:
            memo_id: Memo UUID or client reference ID
            update_data: UpdateMemoData or an equivalent dict; undeclared keys are sent as given
            id_type: 'memo_uuid' (default) or 'reference_id'
        """
        path, params = _memo_path(memo_id, id_type)
        payload = _coerce(UpdateMemoData, update_data).model_dump(exclude_unset=True)

        data = await self._request("PATCH", path, json_body=payload, params=params)
        return _parse(UpdateMemoResponse, data, path)

    async def delete_memo(self, memo_id: str, id_type: IdType = "memo_uuid") -> None:
        """
        Permanently delete a memo and all associated data

        Args:
            memo_id: Memo UUID or client reference ID
            id_type: 'memo_uuid' (default) or 'reference_id'
        """
        path, params = _memo_path(memo_id, id_type)
        await self._request("DELETE", path, params=params)

    # =========================================================================
    # Search
    # =========================================================================

    async def search(
        self,
        query: str,
        search_method: SearchMethod,
        limit: Optional[int] = None,
        filters: Optional[Sequence[FilterInput]] = None,
    ) -> SearchResponse:
        """
        Search memos

        Args:
            query: Search query
            search_method: 'chunk_vector_search', 'title_contains' or 'title_startswith'
            limit: Maximum number of results (1-50, server default 10)
            filters: Filters combined with AND semantics

        Returns:
            SearchResponse: Ordered matches; distance is only set for chunk_vector_search
        """
        request = _build(
            SearchRequest,
            query=query,
            search_method=search_method,
            limit=limit,
            filters=_filters(filters),
        )
        data = await self._request(
            "POST", "/api/v1/search", json_body=request.model_dump(exclude_none=True)
        )
        return _parse(SearchResponse, data, "/api/v1/search")

    # =========================================================================
    # Chat / Generate
    # =========================================================================

    async def chat(
        self,
        query: str,
        filters: Optional[Sequence[FilterInput]] = None,
    ) -> ChatResponse:
        """Ask a question about the knowledge base (non-streaming)"""
        request = _build(ChatRequest, query=query, stream=False, filters=_filters(filters))
        data = await self._request(
            "POST", "/api/v1/chat", json_body=request.model_dump(exclude_none=True)
        )
        return _parse(ChatResponse, data, "/api/v1/chat")

    def streamed_chat(
        self,
        query: str,
        filters: Optional[Sequence[FilterInput]] = None,
    ) -> AsyncIterator[StreamEvent]:
        """
        Ask a question and stream the answer

        The request is sent on the first iteration step. Token events carry
        text deltas; the done event ends the stream.

        To stop early and release the connection right away, close the
        iterator, e.g. with contextlib.aclosing:

            async with aclosing(skald.streamed_chat(query)) as stream:
                async for event in stream:
                    ...

        Raises:
            InvalidArgumentError: Immediately, if a filter is malformed
            ApiError: On the first iteration step if the server rejects the request
            ProtocolError: On the first iteration step if the response has no body
        """
        request = _build(ChatRequest, query=query, stream=True, filters=_filters(filters))
        return self._stream_events("/api/v1/chat", request.model_dump(exclude_none=True))

    async def generate_doc(
        self,
        prompt: str,
        rules: Optional[str] = None,
        filters: Optional[Sequence[FilterInput]] = None,
    ) -> GenerateDocResponse:
        """
        Generate a document from the knowledge base (non-streaming)

        Args:
            prompt: What to generate
            rules: Optional style/format rules
            filters: Filters choosing which memos are used as context
        """
        request = _build(
            GenerateDocRequest,
            prompt=prompt,
            rules=rules,
            stream=False,
            filters=_filters(filters),
        )
        data = await self._request(
            "POST", "/api/v1/generate", json_body=request.model_dump(exclude_none=True)
        )
        return _parse(GenerateDocResponse, data, "/api/v1/generate")

    def streamed_generate_doc(
        self,
        prompt: str,
        rules: Optional[str] = None,
        filters: Optional[Sequence[FilterInput]] = None,
    ) -> AsyncIterator[StreamEvent]:
        """Generate a document and stream it; same event and error semantics as streamed_chat"""
        request = _build(
            GenerateDocRequest,
            prompt=prompt,
            rules=rules,
            stream=True,
            filters=_filters(filters),
        )
        return self._stream_events("/api/v1/generate", request.model_dump(exclude_none=True))

    # =========================================================================
    # Request executor
    # =========================================================================

    def _headers(self, has_body: bool) -> Dict[str, str]:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            yield client

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json_body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Send one request and return the decoded JSON body (None for an empty body)

        Raises:
            TransportError: No HTTP response was received
            ApiError: Non-2xx response
            ProtocolError: 2xx response whose body is not valid JSON
        """
        logger.debug(f"[Skald] {method} {path}")

        try:
            async with self._client() as client:
                response = await client.request(
                    method,
                    f"{self.base_url}{path}",
                    headers=self._headers(json_body is not None),
                    json=json_body,
                    params=params or None,
                )
        except httpx.TransportError as e:
            logger.error(f"Cannot reach Skald API: {self.base_url} ({type(e).__name__}: {e})")
            raise TransportError(f"{method} {path} failed", cause=e) from e

        _raise_for_status(response, method, path)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ProtocolError("response body is not valid JSON", cause=e, path=path) from e

    async def _stream_events(self, path: str, payload: Dict[str, Any]) -> AsyncIterator[StreamEvent]:
        """
        POST a streaming request and yield decoded events

        The response is opened in an async with block, so it is released
        exactly once whether the stream ends with done, at end of data, by
        an exception, or because the consumer closed the iterator.
        """
        logger.debug(f"[Skald] POST {path} (stream)")

        try:
            async with self._client() as client:
                async with client.stream(
                    "POST",
                    f"{self.base_url}{path}",
                    headers=self._headers(True),
                    json=payload,
                ) as response:
                    if not response.is_success:
                        await response.aread()
                        _raise_for_status(response, "POST", path)

                    chunks = response.aiter_bytes() if _has_body(response) else None
                    async with aclosing(iter_sse_events(chunks)) as events:
                        async for event in events:
                            yield event
        except httpx.TransportError as e:
            logger.error(f"Skald stream failed: {path} ({type(e).__name__}: {e})")
            raise TransportError(f"POST {path} stream failed", cause=e) from e


# =============================================================================
# Helpers
# =============================================================================

def _raise_for_status(response: httpx.Response, method: str, path: str) -> None:
    if response.is_success:
        return
    error = ApiError(response.status_code, response.text)
    logger.bind(**error.to_dict()).warning(
        f"[Skald] {method} {path} -> HTTP {response.status_code}: {error.body[:200]}"
    )
    raise error


def _parse(model: Type[ModelT], data: Any, path: str) -> ModelT:
    """Validate a 2xx body; a shape the model cannot read is a ProtocolError"""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ProtocolError(f"unexpected {model.__name__} response", cause=e, path=path) from e


def _has_body(response: httpx.Response) -> bool:
    if response.status_code in _BODYLESS_STATUSES:
        return False
    return response.headers.get("content-length") != "0"


def _memo_path(memo_id: str, id_type: str) -> Tuple[str, Dict[str, str]]:
    """Build the memo URL path and query parameters, validating id_type"""
    if id_type not in ID_TYPES:
        raise InvalidArgumentError(
            f"Invalid id_type: {id_type!r}. Must be 'memo_uuid' or 'reference_id'."
        )

    params: Dict[str, str] = {}
    if id_type != "memo_uuid":
        params["id_type"] = id_type
    # safe="" so '/' inside reference IDs is encoded too
    return f"/api/v1/memo/{quote(memo_id, safe='')}", params


def _coerce(model: Type[ModelT], value: Union[ModelT, Dict[str, Any]]) -> ModelT:
    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except ValidationError as e:
        raise InvalidArgumentError(f"Invalid {model.__name__}", cause=e) from e


def _build(model: Type[ModelT], **fields: Any) -> ModelT:
    try:
        return model(**fields)
    except ValidationError as e:
        raise InvalidArgumentError(f"Invalid {model.__name__}", cause=e) from e


def _filters(filters: Optional[Sequence[FilterInput]]) -> Optional[List[Filter]]:
    if filters is None:
        return None
    return [_coerce(Filter, f) for f in filters]

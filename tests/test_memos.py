import json

import httpx
import pytest
from loguru import logger

from conftest import API_KEY, BASE_URL
from skald import (
    ApiError,
    InvalidArgumentError,
    Memo,
    MemoData,
    ProtocolError,
    Skald,
    SkaldError,
    TransportError,
    UpdateMemoData,
)
from skald.settings import DEFAULT_BASE_URL, SkaldSettings


MEMO = {
    "uuid": "test-uuid",
    "created_at": "2024-01-15T10:30:00Z",
    "updated_at": "2024-01-15T10:30:00Z",
    "title": "Test Memo",
    "content": "Test content",
    "summary": "Test summary",
    "content_length": 1234,
    "metadata": {"type": "test"},
    "client_reference_id": None,
    "source": "notion",
    "type": "document",
    "expiration_date": None,
    "archived": False,
    "pending": False,
    "tags": [{"uuid": "tag-uuid", "tag": "test"}],
    "chunks": [{"uuid": "chunk-uuid", "chunk_content": "chunk", "chunk_index": 0}],
}


def _json_ok(payload):
    return lambda request: httpx.Response(200, json=payload)


def _error(status, text):
    return lambda request: httpx.Response(status, text=text)


# ===== Constructor =====

def test_constructor_keeps_key_and_base_url():
    skald = Skald(API_KEY, BASE_URL)
    assert skald.api_key == API_KEY
    assert skald.base_url == BASE_URL


def test_constructor_default_base_url(monkeypatch):
    monkeypatch.setattr("skald.client.settings", SkaldSettings(_env_file=None))
    assert Skald(API_KEY).base_url == DEFAULT_BASE_URL == "https://api.useskald.com"


def test_constructor_strips_trailing_slash():
    assert Skald(API_KEY, "https://api.test.com/").base_url == BASE_URL


def test_constructor_reads_settings(monkeypatch):
    monkeypatch.setattr(
        "skald.client.settings",
        SkaldSettings(_env_file=None, api_key="env-key", base_url="https://env.test/", timeout=5),
    )
    skald = Skald()
    assert skald.api_key == "env-key"
    assert skald.base_url == "https://env.test"
    assert skald.timeout == 5


def test_constructor_requires_api_key(monkeypatch):
    monkeypatch.setattr("skald.client.settings", SkaldSettings(_env_file=None))
    with pytest.raises(InvalidArgumentError):
        Skald()


def test_repr_hides_api_key():
    assert API_KEY not in repr(Skald(API_KEY, BASE_URL))


# ===== create_memo =====

@pytest.mark.asyncio
async def test_create_memo(make_skald):
    skald, requests = make_skald(_json_ok({"ok": True}))
    memo = {
        "title": "Meeting Notes",
        "content": "Discussion about Q1 roadmap...",
        "metadata": {"type": "notes", "author": "John Doe"},
        "tags": ["meeting", "q1"],
        "source": "notion",
    }

    result = await skald.create_memo(memo)

    assert result.ok is True
    request = requests[0]
    assert request.method == "POST"
    assert str(request.url) == f"{BASE_URL}/api/v1/memo"
    assert request.headers["Authorization"] == f"Bearer {API_KEY}"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == memo


@pytest.mark.asyncio
async def test_create_memo_defaults_metadata(make_skald):
    skald, requests = make_skald(_json_ok({"ok": True}))

    await skald.create_memo(MemoData(title="Test Memo", content="Test content"))

    assert json.loads(requests[0].content) == {
        "title": "Test Memo",
        "content": "Test content",
        "metadata": {},
    }


@pytest.mark.asyncio
async def test_create_memo_explicit_none_metadata(make_skald):
    skald, requests = make_skald(_json_ok({"ok": True}))

    await skald.create_memo({"title": "T", "content": "C", "metadata": None})

    assert json.loads(requests[0].content)["metadata"] == {}


@pytest.mark.asyncio
async def test_create_memo_api_error(make_skald):
    skald, _ = make_skald(_error(400, "Bad Request"))

    with pytest.raises(ApiError) as exc_info:
        await skald.create_memo({"title": "T", "content": "C"})

    assert exc_info.value.status_code == 400
    assert exc_info.value.body == "Bad Request"
    assert str(exc_info.value) == "Skald API error (400): Bad Request"


@pytest.mark.asyncio
async def test_create_memo_network_error(make_skald):
    def handler(request):
        raise httpx.ConnectError("Network error", request=request)

    skald, _ = make_skald(handler)

    with pytest.raises(TransportError) as exc_info:
        await skald.create_memo({"title": "T", "content": "C"})

    assert not isinstance(exc_info.value, ApiError)
    assert isinstance(exc_info.value.cause, httpx.ConnectError)
    assert exc_info.value.__cause__ is exc_info.value.cause


@pytest.mark.asyncio
async def test_create_memo_passes_unknown_keys_through(make_skald):
    skald, requests = make_skald(_json_ok({"ok": True}))

    await skald.create_memo({"title": "T", "content": "C", "priority": "high"})

    assert json.loads(requests[0].content) == {
        "title": "T",
        "content": "C",
        "metadata": {},
        "priority": "high",
    }


@pytest.mark.asyncio
async def test_create_memo_empty_created_response(make_skald):
    skald, requests = make_skald(lambda request: httpx.Response(201))

    with pytest.raises(ProtocolError) as exc_info:
        await skald.create_memo({"title": "T", "content": "C"})

    assert isinstance(exc_info.value, SkaldError)
    assert exc_info.value.context["path"] == "/api/v1/memo"
    assert len(requests) == 1


@pytest.mark.asyncio
async def test_create_memo_error_is_logged_with_details(make_skald):
    skald, _ = make_skald(_error(400, "Bad Request"))
    records = []
    logger.enable("skald")
    sink_id = logger.add(lambda message: records.append(message.record), level="WARNING")
    try:
        with pytest.raises(ApiError):
            await skald.create_memo({"title": "T", "content": "C"})
    finally:
        logger.remove(sink_id)
        logger.disable("skald")

    assert len(records) == 1
    extra = records[0]["extra"]
    assert extra["error_type"] == "ApiError"
    assert extra["status_code"] == 400
    assert extra["body"] == "Bad Request"


# ===== get_memo =====

@pytest.mark.asyncio
async def test_get_memo_by_uuid(make_skald):
    skald, requests = make_skald(_json_ok(MEMO))

    memo = await skald.get_memo("test-uuid")

    assert isinstance(memo, Memo)
    assert memo.model_dump() == MEMO
    request = requests[0]
    assert request.method == "GET"
    assert str(request.url) == f"{BASE_URL}/api/v1/memo/test-uuid"
    assert request.headers["Authorization"] == f"Bearer {API_KEY}"
    assert "Content-Type" not in request.headers


@pytest.mark.asyncio
async def test_get_memo_by_reference_id(make_skald):
    skald, requests = make_skald(_json_ok({**MEMO, "client_reference_id": "ref-123"}))

    memo = await skald.get_memo("ref-123", "reference_id")

    assert memo.client_reference_id == "ref-123"
    assert requests[0].url.path == "/api/v1/memo/ref-123"
    assert requests[0].url.params["id_type"] == "reference_id"


@pytest.mark.asyncio
async def test_get_memo_encodes_slashes(make_skald):
    skald, requests = make_skald(_json_ok(MEMO))

    await skald.get_memo("ref/with/slashes", "reference_id")

    assert "ref%2Fwith%2Fslashes" in str(requests[0].url)


@pytest.mark.asyncio
async def test_get_memo_keeps_unknown_fields(make_skald):
    skald, _ = make_skald(_json_ok({**MEMO, "project": "p-1"}))

    memo = await skald.get_memo("test-uuid")

    assert memo.model_dump()["project"] == "p-1"


@pytest.mark.asyncio
async def test_get_memo_pending_without_summary(make_skald):
    skald, _ = make_skald(_json_ok({**MEMO, "summary": None, "pending": True}))

    memo = await skald.get_memo("test-uuid")

    assert memo.summary is None
    assert memo.pending is True


@pytest.mark.asyncio
async def test_get_memo_unexpected_response_shape(make_skald):
    skald, _ = make_skald(_json_ok({"detail": "not a memo"}))

    with pytest.raises(ProtocolError, match="unexpected Memo response"):
        await skald.get_memo("test-uuid")


@pytest.mark.asyncio
async def test_get_memo_not_found(make_skald):
    skald, _ = make_skald(_error(404, "Memo not found"))

    with pytest.raises(ApiError, match=r"Skald API error \(404\): Memo not found"):
        await skald.get_memo("nonexistent")


# ===== list_memos =====

@pytest.mark.asyncio
async def test_list_memos_default(make_skald):
    page = {
        "count": 45,
        "next": "http://api.example.com/api/v1/memo?page=2",
        "previous": None,
        "results": [
            {
                "uuid": "memo-1",
                "created_at": "2024-01-15T10:30:00Z",
                "updated_at": "2024-01-15T10:30:00Z",
                "title": "Memo 1",
                "summary": "Summary 1",
                "content_length": 100,
                "metadata": {},
                "client_reference_id": None,
            }
        ],
    }
    skald, requests = make_skald(_json_ok(page))

    result = await skald.list_memos()

    assert result.count == 45
    assert result.results[0].title == "Memo 1"
    assert str(requests[0].url) == f"{BASE_URL}/api/v1/memo"


@pytest.mark.asyncio
async def test_list_memos_pagination(make_skald):
    skald, requests = make_skald(
        _json_ok({"count": 100, "next": None, "previous": None, "results": []})
    )

    await skald.list_memos(page=2, page_size=50)

    params = requests[0].url.params
    assert params["page"] == "2"
    assert params["page_size"] == "50"


@pytest.mark.asyncio
async def test_list_memos_sends_zero_values(make_skald):
    skald, requests = make_skald(
        _json_ok({"count": 0, "next": None, "previous": None, "results": []})
    )

    await skald.list_memos(page=0)

    assert requests[0].url.params["page"] == "0"
    assert "page_size" not in requests[0].url.params


@pytest.mark.asyncio
async def test_list_memos_api_error(make_skald):
    skald, _ = make_skald(_error(500, "Internal Server Error"))

    with pytest.raises(ApiError, match=r"Skald API error \(500\): Internal Server Error"):
        await skald.list_memos()


# ===== update_memo =====

@pytest.mark.asyncio
async def test_update_memo_sends_only_given_fields(make_skald):
    skald, requests = make_skald(_json_ok({"ok": True}))

    result = await skald.update_memo(
        "test-uuid", {"title": "Updated Title", "metadata": {"status": "reviewed"}}
    )

    assert result.ok is True
    request = requests[0]
    assert request.method == "PATCH"
    assert str(request.url) == f"{BASE_URL}/api/v1/memo/test-uuid"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == {
        "title": "Updated Title",
        "metadata": {"status": "reviewed"},
    }


@pytest.mark.asyncio
async def test_update_memo_by_reference_id(make_skald):
    skald, requests = make_skald(_json_ok({"ok": True}))

    await skald.update_memo(
        "external-id-123", UpdateMemoData(content="New content"), "reference_id"
    )

    assert requests[0].url.params["id_type"] == "reference_id"
    assert json.loads(requests[0].content) == {"content": "New content"}


@pytest.mark.asyncio
async def test_update_memo_explicit_null_is_sent(make_skald):
    skald, requests = make_skald(_json_ok({"ok": True}))

    await skald.update_memo("test-uuid", {"source": None})

    assert json.loads(requests[0].content) == {"source": None}


@pytest.mark.asyncio
async def test_update_memo_passes_unknown_keys_through(make_skald):
    skald, requests = make_skald(_json_ok({"ok": True}))

    await skald.update_memo("test-uuid", {"tags": ["a"]})

    assert len(requests) == 1
    assert json.loads(requests[0].content) == {"tags": ["a"]}


@pytest.mark.asyncio
async def test_update_memo_api_error(make_skald):
    skald, _ = make_skald(_error(403, "Access denied"))

    with pytest.raises(ApiError, match=r"\(403\): Access denied"):
        await skald.update_memo("test-uuid", {"title": "x"})


# ===== delete_memo =====

@pytest.mark.asyncio
async def test_delete_memo(make_skald):
    skald, requests = make_skald(lambda request: httpx.Response(204))

    result = await skald.delete_memo("test-uuid")

    assert result is None
    assert requests[0].method == "DELETE"
    assert str(requests[0].url) == f"{BASE_URL}/api/v1/memo/test-uuid"


@pytest.mark.asyncio
async def test_delete_memo_by_reference_id(make_skald):
    skald, requests = make_skald(lambda request: httpx.Response(204))

    await skald.delete_memo("ref/1", "reference_id")

    assert "ref%2F1" in str(requests[0].url)
    assert requests[0].url.params["id_type"] == "reference_id"


@pytest.mark.asyncio
async def test_delete_memo_not_found(make_skald):
    skald, _ = make_skald(_error(404, "Memo not found"))

    with pytest.raises(ApiError) as exc_info:
        await skald.delete_memo("nonexistent")
    assert exc_info.value.status_code == 404


# ===== id_type validation =====

@pytest.mark.asyncio
@pytest.mark.parametrize(
    "call",
    [
        lambda skald: skald.get_memo("id", "slug"),
        lambda skald: skald.update_memo("id", {"title": "x"}, "slug"),
        lambda skald: skald.delete_memo("id", "slug"),
    ],
)
async def test_invalid_id_type_sends_nothing(make_skald, call):
    skald, requests = make_skald(_json_ok({"ok": True}))

    with pytest.raises(InvalidArgumentError, match="Invalid id_type"):
        await call(skald)
    assert requests == []

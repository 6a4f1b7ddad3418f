"""Pytest configuration and fixtures."""

from typing import Callable, List, Optional, Tuple

import httpx
import pytest

from skald import Skald


API_KEY = "test-api-key"
BASE_URL = "https://api.test.com"


class TrackingStream(httpx.AsyncByteStream):
    """Response body that records how many chunks were read and how often it was closed

    When ``error`` is given it is raised after the last chunk, like a dropped connection.
    """

    def __init__(self, chunks: List[bytes], error: Optional[Exception] = None):
        self.chunks = chunks
        self.error = error
        self.reads = 0
        self.closed = 0

    async def __aiter__(self):
        for chunk in self.chunks:
            self.reads += 1
            yield chunk
        if self.error is not None:
            raise self.error

    async def aclose(self) -> None:
        self.closed += 1


Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def make_skald() -> Callable[..., Tuple[Skald, List[httpx.Request]]]:
    """Build a Skald client whose requests are answered by ``handler`` and recorded."""

    def _make(handler: Handler, base_url: str = BASE_URL) -> Tuple[Skald, List[httpx.Request]]:
        requests: List[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(_record))
        return Skald(API_KEY, base_url, http_client=http_client), requests

    return _make


def sse_response(
    chunks: List[bytes],
    status_code: int = 200,
    error: Optional[Exception] = None,
) -> Tuple[httpx.Response, TrackingStream]:
    stream = TrackingStream(chunks, error)
    response = httpx.Response(
        status_code,
        headers={"Content-Type": "text/event-stream"},
        stream=stream,
    )
    return response, stream

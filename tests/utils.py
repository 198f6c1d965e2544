from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Optional


def sse_frame(content: str) -> bytes:
    payload = {"choices": [{"index": 0, "delta": {"content": content}}]}
    return f"data: {json.dumps(payload)}\n\n".encode("utf-8")


class FakeResponse:
    """Stand-in for a streamed ``requests.Response``."""

    def __init__(
        self,
        chunks: Iterable[bytes] = (),
        *,
        status_code: int = 200,
        reason: str = "OK",
        error: Optional[BaseException] = None,
    ) -> None:
        self._chunks = list(chunks)
        self.status_code = status_code
        self.reason = reason
        self.error = error
        self.closed = False

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def iter_content(self, chunk_size=None):
        for chunk in self._chunks:
            if callable(chunk):
                chunk = chunk()
            yield chunk
        if self.error is not None:
            raise self.error

    def close(self) -> None:
        self.closed = True


class FakeSession:
    """Records ``post`` calls and hands out queued responses."""

    def __init__(self, *responses: Any) -> None:
        self._responses: List[Any] = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def post(self, url: str, **kwargs: Any):
        self.calls.append({"url": url, **kwargs})
        item = self._responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

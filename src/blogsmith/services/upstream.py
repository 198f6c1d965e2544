from __future__ import annotations

import logging
from contextlib import closing
from typing import Any, Dict, Iterator, List, Optional

import requests
from requests.adapters import HTTPAdapter

from ..config import MAX_TOKENS, TEMPERATURE, Settings
from ..errors import UpstreamError
from .stream_decoder import StreamDecoder

LOG = logging.getLogger("blogsmith.upstream")


def _build_session() -> requests.Session:
    session = requests.Session()
    # Upstream failures are reported, never retried.
    adapter = HTTPAdapter(max_retries=0, pool_connections=10, pool_maxsize=10)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


class ChatCompletionClient:
    """Streams chat completions from an OpenAI-compatible endpoint."""

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None) -> None:
        self.settings = settings
        self._session = session or _build_session()

    def build_payload(self, prompt: str) -> Dict[str, Any]:
        messages: List[Dict[str, str]] = [{"role": "user", "content": prompt}]
        return {
            "model": self.settings.model,
            "messages": messages,
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
            "stream": True,
        }

    def open_stream(self, prompt: str) -> requests.Response:
        """Issue the streamed completion request and return the open response.

        The caller owns the response and must close it. Raises ``UpstreamError``
        when the request cannot be sent or the status is not 2xx; in that case
        the response is already closed.
        """
        api_key = self.settings.require_api_key()
        LOG.debug(
            "upstream_stream_open",
            extra={"url": self.settings.api_url, "model": self.settings.model},
        )
        try:
            resp = self._session.post(
                self.settings.api_url,
                json=self.build_payload(prompt),
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {api_key}",
                },
                timeout=self.settings.timeout,
                stream=True,
            )
        except requests.exceptions.RequestException as exc:
            LOG.error("upstream_request_failed", extra={"url": self.settings.api_url, "err": str(exc)})
            raise UpstreamError(f"Deepseek API request failed: {exc}") from exc

        if not resp.ok:
            status_code, reason = resp.status_code, resp.reason
            resp.close()
            LOG.error(
                "upstream_status_error",
                extra={"url": self.settings.api_url, "status": status_code, "reason": reason},
            )
            raise UpstreamError(f"Deepseek API error: {reason}", status_code=status_code)
        return resp


def stream_fragments(resp: requests.Response, decoder: Optional[StreamDecoder] = None) -> Iterator[str]:
    """Yield decoded text fragments from an open upstream response.

    The response is closed on every exit path, including when the consumer
    stops iterating early. Read errors propagate to the caller.
    """
    decoder = decoder or StreamDecoder()
    with closing(resp):
        for chunk in resp.iter_content(chunk_size=None):
            yield from decoder.feed(chunk)
        dropped = decoder.close()
        LOG.debug(
            "upstream_stream_finished",
            extra={
                "fragments": decoder.fragments_emitted,
                "skipped": decoder.frames_skipped,
                "dropped_bytes": dropped,
                "done_seen": decoder.finished,
            },
        )

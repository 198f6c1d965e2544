"""Client-side consumption loop for the ``/api/generate`` relay.

The controller owns the two UI states (``idle`` and ``generating``), the
accumulated text of the current run, and the cancellation token of the
in-flight request. Every received chunk re-formats the whole accumulated text.
"""

from __future__ import annotations

import codecs
import logging
import threading
from contextlib import closing
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import requests

from ..config import relay_url
from ..domain.blog_models import DEFAULT_PERSPECTIVE, Perspective
from ..errors import GenerationCancelled, GenerationError
from .formatting import format_content

LOG = logging.getLogger("blogsmith.client")

CANCELLED_MESSAGE = "Generation stopped by user."
FAILED_MESSAGE = "Failed to generate blog post. Please try again."

UpdateCallback = Callable[[str], None]


class GenerationState(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"


def parse_keywords(text: Optional[str]) -> List[str]:
    """Split a comma separated keyword field, dropping blank entries."""
    if not text:
        return []
    return [part.strip() for part in text.split(",") if part.strip()]


def normalize_perspective(value: Optional[str]) -> str:
    """Client-side fallback: anything unknown becomes the default perspective."""
    try:
        return Perspective(value).value
    except ValueError:
        return DEFAULT_PERSPECTIVE.value


def can_submit(title: Optional[str], keywords: Optional[str]) -> bool:
    return bool((title or "").strip() or (keywords or "").strip())


class CancellationToken:
    """One per request. Cancelling closes the attached response."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._response: Optional[requests.Response] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def attach(self, response: requests.Response) -> None:
        with self._lock:
            self._response = response
        if self.cancelled:
            response.close()
            raise GenerationCancelled()

    def cancel(self) -> None:
        self._event.set()
        with self._lock:
            response = self._response
        if response is not None:
            response.close()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise GenerationCancelled()


class BlogGenerationController:
    def __init__(self, base_url: Optional[str] = None, session: Optional[requests.Session] = None) -> None:
        self.base_url = (base_url or relay_url()).rstrip("/")
        self._session = session or requests.Session()
        self._lock = threading.Lock()
        self._token: Optional[CancellationToken] = None
        self._raw = ""
        self.state = GenerationState.IDLE
        self.content = ""
        self.error = ""

    @property
    def is_generating(self) -> bool:
        return self.state is GenerationState.GENERATING

    def generate(
        self,
        title: Optional[str] = None,
        keywords: Union[str, Sequence[str], None] = None,
        perspective: Optional[str] = None,
        on_update: Optional[UpdateCallback] = None,
    ) -> str:
        """Run one generation to completion, error or cancellation.

        Starting a new generation cancels the previous in-flight one; the
        superseded run stops publishing into this controller.
        """
        if keywords is None or isinstance(keywords, str):
            keyword_list = parse_keywords(keywords)
        else:
            keyword_list = [k.strip() for k in keywords if k and k.strip()]
        payload: Dict[str, Any] = {
            "title": title or "",
            "keywords": keyword_list,
            "perspective": normalize_perspective(perspective),
        }

        token = CancellationToken()
        with self._lock:
            previous = self._token
            self._token = token
            self._raw = ""
            self.content = ""
            self.error = ""
            self.state = GenerationState.GENERATING
        if previous is not None:
            LOG.info("generation_superseded")
            previous.cancel()

        try:
            self._consume(token, payload, on_update)
        except GenerationCancelled:
            self._finish(token, CANCELLED_MESSAGE)
        except Exception as exc:
            if token.cancelled:
                # Closing the response mid-read surfaces as a transport error
                self._finish(token, CANCELLED_MESSAGE)
            else:
                LOG.warning("generation_failed", extra={"err": str(exc)})
                self._finish(token, FAILED_MESSAGE)
        else:
            self._finish(token, "")
        return self.content

    def stop(self) -> bool:
        """Cancel the in-flight generation. Returns False when idle."""
        with self._lock:
            token = self._token
            if token is None:
                return False
            self._token = None
            self.state = GenerationState.IDLE
            self.error = CANCELLED_MESSAGE
        token.cancel()
        LOG.info("generation_stopped_by_user")
        return True

    def _consume(self, token: CancellationToken, payload: Dict[str, Any], on_update: Optional[UpdateCallback]) -> None:
        resp = self._session.post(f"{self.base_url}/api/generate", json=payload, stream=True)
        token.attach(resp)
        with closing(resp):
            if not resp.ok:
                raise GenerationError(f"relay returned HTTP {resp.status_code}")
            decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
            for chunk in resp.iter_content(chunk_size=None):
                token.raise_if_cancelled()
                self._append(token, decoder.decode(chunk), on_update)
            self._append(token, decoder.decode(b"", final=True), on_update)
            token.raise_if_cancelled()

    def _append(self, token: CancellationToken, text: str, on_update: Optional[UpdateCallback]) -> None:
        if not text:
            return
        with self._lock:
            if self._token is not token:
                raise GenerationCancelled()
            self._raw += text
            self.content = format_content(self._raw)
            content = self.content
        if on_update is not None:
            on_update(content)

    def _finish(self, token: CancellationToken, error: str) -> None:
        with self._lock:
            if self._token is not token:
                return
            self._token = None
            self.state = GenerationState.IDLE
            self.error = error

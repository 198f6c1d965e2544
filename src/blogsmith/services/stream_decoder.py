"""Incremental decoder for OpenAI-style ``data: <json>`` streaming responses.

Bytes are fed in whatever chunks the transport delivers. Only complete lines
are interpreted; a trailing partial line is held until more bytes arrive and
is discarded if the stream ends first.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Iterable, Iterator, List, Optional

LOG = logging.getLogger("blogsmith.decoder")

DATA_PREFIX = "data: "
DONE_TOKEN = "[DONE]"

_JSON_SHAPE = re.compile(r"^[\[{].*[\]}]$", re.DOTALL)


def extract_delta_content(payload: Any) -> Optional[str]:
    """Return ``choices[0].delta.content`` when it is a non-empty string."""
    try:
        content = payload["choices"][0]["delta"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    if isinstance(content, str) and content:
        return content
    return None


class StreamDecoder:
    """Turns upstream frames into text fragments.

    ``feed`` returns the fragments completed by a chunk, in arrival order.
    ``close`` drops any unterminated trailing line.
    """

    def __init__(self) -> None:
        self._pending = b""
        self.fragments_emitted = 0
        self.frames_skipped = 0
        self.finished = False

    def feed(self, chunk: bytes) -> List[str]:
        if not chunk:
            return []
        self._pending += chunk
        *lines, self._pending = self._pending.split(b"\n")
        fragments: List[str] = []
        for raw in lines:
            fragment = self._decode_line(raw)
            if fragment is not None:
                fragments.append(fragment)
        return fragments

    def close(self) -> int:
        """Discard the incomplete trailing line and return its size in bytes."""
        dropped = len(self._pending)
        if dropped:
            LOG.debug("stream_partial_line_discarded", extra={"bytes": dropped})
        self._pending = b""
        return dropped

    def _decode_line(self, raw: bytes) -> Optional[str]:
        line = raw.decode("utf-8", errors="replace")
        if not line.startswith(DATA_PREFIX):
            return None
        data = line[len(DATA_PREFIX):].strip()
        if not data:
            return None
        if data == DONE_TOKEN:
            self.finished = True
            return None
        if not _JSON_SHAPE.match(data):
            self.frames_skipped += 1
            LOG.warning("stream_frame_not_json", extra={"data": data[:200]})
            return None
        try:
            payload = json.loads(data)
        except json.JSONDecodeError as exc:
            self.frames_skipped += 1
            LOG.warning("stream_frame_parse_failed", extra={"data": data[:200], "err": str(exc)})
            return None
        content = extract_delta_content(payload)
        if content is None:
            # Role-only or finish_reason frames carry no text
            LOG.debug("stream_frame_without_content")
            return None
        self.fragments_emitted += 1
        return content


def iter_fragments(chunks: Iterable[bytes], decoder: Optional[StreamDecoder] = None) -> Iterator[str]:
    """Decode an iterable of byte chunks into text fragments."""
    decoder = decoder or StreamDecoder()
    for chunk in chunks:
        yield from decoder.feed(chunk)
    decoder.close()

import json

import pytest

from src.blogsmith.services.stream_decoder import StreamDecoder, extract_delta_content, iter_fragments

from .utils import sse_frame


def test_data_frame_then_done_emits_single_fragment():
    decoder = StreamDecoder()
    out = decoder.feed(b'data: {"choices":[{"delta":{"content":"Hi"}}]}\n' + b"data: [DONE]\n")
    assert out == ["Hi"]
    assert decoder.finished is True
    assert decoder.fragments_emitted == 1


def test_not_json_line_is_skipped_without_raising():
    decoder = StreamDecoder()
    assert decoder.feed(b"data: not-json\n") == []
    assert decoder.frames_skipped == 1


def test_json_shaped_but_invalid_line_is_skipped():
    decoder = StreamDecoder()
    assert decoder.feed(b"data: {not really json}\n") == []
    assert decoder.frames_skipped == 1


def test_frame_split_at_every_offset_emits_one_fragment():
    frame = b'data: {"choices":[{"delta":{"content":"Hello there"}}]}\n'
    for offset in range(1, len(frame)):
        decoder = StreamDecoder()
        first = decoder.feed(frame[:offset])
        second = decoder.feed(frame[offset:])
        assert first == []
        assert second == ["Hello there"], offset


def test_multibyte_character_split_across_chunks():
    frame = sse_frame("café ☃")
    # json.dumps escapes non-ascii by default; force raw utf-8 bytes instead
    raw = ("data: " + json.dumps({"choices": [{"delta": {"content": "café ☃"}}]}, ensure_ascii=False) + "\n").encode("utf-8")
    split = raw.index("é".encode("utf-8")) + 1
    decoder = StreamDecoder()
    assert decoder.feed(raw[:split]) == []
    assert decoder.feed(raw[split:]) == ["café ☃"]
    assert list(iter_fragments([frame])) == ["café ☃"]


def test_noise_and_blank_lines_are_ignored():
    decoder = StreamDecoder()
    chunk = (
        b": keep-alive\n"
        b"\n"
        b"event: message\n"
        b"data:\n"
        b"data: \n"
        b'data: {"choices":[{"delta":{"content":"ok"}}]}\r\n'
    )
    assert decoder.feed(chunk) == ["ok"]
    assert decoder.frames_skipped == 0


def test_frames_without_content_emit_nothing():
    decoder = StreamDecoder()
    chunk = (
        b'data: {"choices":[{"delta":{"role":"assistant"}}]}\n'
        b'data: {"choices":[{"delta":{"content":""}}]}\n'
        b'data: {"choices":[]}\n'
        b'data: [1, 2, 3]\n'
        b'data: {"choices":[{"delta":{},"finish_reason":"stop"}]}\n'
    )
    assert decoder.feed(chunk) == []


def test_malformed_frame_does_not_abort_following_frames():
    chunks = [sse_frame("one"), b"data: {broken\n", sse_frame("two"), b"data: [DONE]\n\n"]
    assert list(iter_fragments(chunks)) == ["one", "two"]


def test_incomplete_trailing_line_is_discarded_on_close():
    decoder = StreamDecoder()
    tail = b'data: {"choices":[{"delta":{"content":"lost"}}]}'
    assert decoder.feed(tail) == []
    assert decoder.close() == len(tail)
    assert decoder.feed(b"\n") == []


def test_fragments_preserve_arrival_order():
    words = ["The ", "quick ", "brown ", "fox"]
    stream = b"".join(sse_frame(w) for w in words)
    chunks = [stream[i : i + 7] for i in range(0, len(stream), 7)]
    assert "".join(iter_fragments(chunks)) == "The quick brown fox"


@pytest.mark.parametrize(
    "payload,expected",
    [
        ({"choices": [{"delta": {"content": "x"}}]}, "x"),
        ({"choices": [{"delta": {"content": None}}]}, None),
        ({"choices": [{"delta": {"content": 5}}]}, None),
        ({"choices": "nope"}, None),
        ([], None),
        ({}, None),
    ],
)
def test_extract_delta_content(payload, expected):
    assert extract_delta_content(payload) == expected

from __future__ import annotations

from pytraveller._sse import SseDecoder, SseEvent, decode_text


def test_named_event_with_json_data() -> None:
    events = decode_text('event: current-value\nretry: 15000\ndata: {"data":{"lat":1,"lon":2}}\n\n\n')

    assert events == [SseEvent(event="current-value", data='{"data":{"lat":1,"lon":2}}')]


def test_unnamed_event_defaults_to_message_type() -> None:
    assert decode_text("data: hello\n\n") == [SseEvent(event="message", data="hello")]


def test_multiline_data_joined_with_newline() -> None:
    events = decode_text("data: first\ndata: second\n\n")

    assert events[0].data == "first\nsecond"


def test_comment_lines_are_ignored() -> None:
    events = decode_text(":keepalive\n:keepalive\ndata: x\n\n")

    assert events == [SseEvent(event="message", data="x")]


def test_block_without_data_dispatches_nothing_and_resets_event_type() -> None:
    events = decode_text("event: current-value\n\ndata: y\n\n")

    assert events == [SseEvent(event="message", data="y")]


def test_only_one_leading_space_is_stripped() -> None:
    events = decode_text("data:  padded\ndata:tight\n\n")

    assert events[0].data == " padded\ntight"


def test_retry_and_id_are_tracked() -> None:
    decoder = SseDecoder()

    assert decoder.feed_line("retry: 15000\n") is None
    assert decoder.feed_line("retry: soon\n") is None
    decoder.feed_line("id: 42\n")
    decoder.feed_line("data: x\n")
    event = decoder.feed_line("\n")

    assert decoder.retry_ms == 15000
    assert event is not None
    assert event.last_event_id == "42"


def test_id_with_nul_is_ignored() -> None:
    decoder = SseDecoder()
    decoder.feed_line("id: a\0b")

    assert decoder.last_event_id == ""


def test_crlf_line_endings() -> None:
    decoder = SseDecoder()
    decoder.feed_line("event: current-value\r\n")
    decoder.feed_line("data: z\r\n")

    assert decoder.feed_line("\r\n") == SseEvent(event="current-value", data="z")


def test_reset_drops_partial_event_but_keeps_id() -> None:
    decoder = SseDecoder()
    decoder.feed_line("id: 7")
    decoder.feed_line("data: partial")
    decoder.reset()

    assert decoder.feed_line("") is None
    assert decoder.last_event_id == "7"


def test_leading_byte_order_mark_is_stripped() -> None:
    events = decode_text('\ufeffevent: current-value\ndata: {"data":{}}\n\n')

    assert events == [SseEvent(event="current-value", data='{"data":{}}')]


def test_byte_order_mark_only_stripped_at_stream_start() -> None:
    decoder = SseDecoder()
    decoder.feed_line("data: a")
    decoder.feed_line("\ufeffevent: current-value")

    assert decoder.feed_line("") == SseEvent(event="message", data="a")

    decoder.reset()
    decoder.feed_line("\ufeffevent: current-value")
    decoder.feed_line("data: b")

    assert decoder.feed_line("") == SseEvent(event="current-value", data="b")

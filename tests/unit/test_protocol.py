"""Unit tests for the marker-tagged output protocol."""

import pytest

from kwindo.models import Channel, LogRecord
from kwindo.protocol import channel_tag, decode_line, decode_log


class TestChannelTag:

    def test_channel_tag(self):
        assert channel_tag("m", Channel.ERROR) == "m ERROR"

    @pytest.mark.parametrize("channel", list(Channel))
    def test_printed_line_decodes(self, channel):
        # print(tag, message) joins its arguments with a space
        line = f"js: {channel_tag('m', channel)} payload text"
        assert decode_line(line, "m") == LogRecord(channel=channel, payload="payload text")


class TestDecodeLine:

    def test_result(self):
        record = decode_line("js: kwindo-abc RESULT Mozilla Firefox", "kwindo-abc")
        assert record == LogRecord(channel=Channel.RESULT, payload="Mozilla Firefox")

    def test_payload_whitespace_is_verbatim(self):
        record = decode_line("js: m RESULT   Position: 10,20", "m")
        assert record.payload == "  Position: 10,20"

    def test_empty_payload(self):
        assert decode_line("js: m START", "m") == LogRecord(channel=Channel.START)

    def test_trailing_space_from_print(self):
        assert decode_line("js: m RESULT ", "m") == LogRecord(channel=Channel.RESULT, payload="")

    def test_other_marker_ignored(self):
        assert decode_line("js: kwindo-other RESULT x", "kwindo-abc") is None

    def test_marker_prefix_of_other_marker_ignored(self):
        assert decode_line("js: kwindo-abcd RESULT x", "kwindo-abc") is None

    def test_missing_transport_prefix_ignored(self):
        assert decode_line("m RESULT x", "m") is None

    def test_unrelated_line_ignored(self):
        assert decode_line("kwin_wayland: something happened", "m") is None

    def test_unknown_channel_ignored(self):
        assert decode_line("js: m WARN x", "m") is None

    def test_custom_prefix(self):
        record = decode_line("qml: m ERROR oops", "m", prefix="qml: ")
        assert record == LogRecord(channel=Channel.ERROR, payload="oops")


class TestDecodeLog:

    def test_interleaved_invocations_are_separated(self, make_journal):
        journal = (
            make_journal("kwindo-a", "START")
            + make_journal("kwindo-b", "START", "RESULT from-b")
            + make_journal("kwindo-a", "RESULT one", "ERROR bad", "RESULT two")
            + "kwin_wayland: unrelated\n"
            + make_journal("kwindo-b", "FINISH")
            + make_journal("kwindo-a", "FINISH")
        )

        output = decode_log(journal, "kwindo-a")

        assert output.results == ["one", "two"]
        assert output.errors == ["bad"]
        assert output.started
        assert output.finished
        assert [r.channel for r in output.records] == [
            Channel.START, Channel.RESULT, Channel.ERROR, Channel.RESULT, Channel.FINISH,
        ]

    def test_accepts_line_iterable(self):
        output = decode_log(["js: m RESULT x\n", "js: m RESULT y\r\n"], "m")
        assert output.results == ["x", "y"]

    def test_debug_records(self, make_journal):
        output = decode_log(make_journal("m", "DEBUG STEP search x"), "m")
        assert output.debug == ["STEP search x"]

    def test_missing_finish(self, make_journal):
        output = decode_log(make_journal("m", "START", "RESULT x"), "m")

        assert output.started
        assert not output.finished

    def test_empty_log(self):
        output = decode_log("", "m")

        assert output.records == []
        assert not output.started

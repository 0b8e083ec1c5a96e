"""Tests for control-line framing."""

import pytest

from unixy.core.model import (
    ConnectionClosedError,
    Direction,
    InvalidArgumentError,
    ProtocolViolationError,
    ReadOverflowError,
    UnexpectedEofError,
)
from unixy.protocol import (
    REPLY_LINE_MAX,
    STAT_LINE,
    expect_ok,
    new_session_line,
    parse_stat_reply,
    read_reply,
    run_session_line,
    send_all,
    transfer_line,
)

from fakes import FakeConnection


class TestCommandLines:
    def test_lines(self):
        assert new_session_line(Direction.READ, 7) == b"new_session read 7\n"
        assert new_session_line(Direction.WRITE, 1) == b"new_session write 1\n"
        assert run_session_line(12) == b"run_session 12\n"
        assert transfer_line(Direction.READ, 0) == b"read 0\n"
        assert transfer_line(Direction.WRITE, 4294967296) == b"write 4294967296\n"
        assert STAT_LINE == b"stat\n"


class TestSendAll:
    """Partial-send loop."""

    def test_retries_short_sends(self):
        conn = FakeConnection(send_limit=3)
        send_all(conn, b"run_session 42\n")
        assert conn.sent == b"run_session 42\n"
        assert conn.send_calls == 5

    def test_zero_send_is_closed_stream(self):
        conn = FakeConnection()
        conn.send_zero = True
        with pytest.raises(ConnectionClosedError):
            send_all(conn, b"stat\n")

    def test_socket_error_passes_through(self):
        conn = FakeConnection()
        conn.send_error = BrokenPipeError(32, "Broken pipe")
        with pytest.raises(BrokenPipeError):
            send_all(conn, b"stat\n")


class TestReadReply:
    """One-byte-at-a-time reply framing with a fixed cap."""

    def test_reads_up_to_newline_only(self):
        conn = FakeConnection(b"ok\nleftover")
        assert read_reply(conn) == "ok"
        assert conn.incoming == b"leftover"

    def test_empty_line(self):
        assert read_reply(FakeConnection(b"\n")) == ""

    def test_eof_mid_reply(self):
        with pytest.raises(UnexpectedEofError):
            read_reply(FakeConnection(b"o"))

    def test_longest_reply_that_fits(self):
        body = b"9" * (REPLY_LINE_MAX - 1)
        assert read_reply(FakeConnection(body + b"\n")) == body.decode()

    def test_overflow(self):
        conn = FakeConnection(b"x" * REPLY_LINE_MAX + b"\n")
        with pytest.raises(ReadOverflowError):
            read_reply(conn)
        # the cap is exact: nothing past it was consumed
        assert conn.incoming == b"\n"


class TestReplies:
    def test_expect_ok(self):
        expect_ok("ok")
        for bad in ("OK", "ok ", "", "error"):
            with pytest.raises(ProtocolViolationError) as exc:
                expect_ok(bad)
            assert exc.value.reply == bad

    def test_parse_stat(self):
        assert parse_stat_reply("200") == 200
        assert parse_stat_reply("0") == 0
        assert parse_stat_reply("-1") == -1
        assert parse_stat_reply(" 42\r") == 42
        assert parse_stat_reply("9223372036854775807") == 2 ** 63 - 1

    @pytest.mark.parametrize("reply", ["", "abc", "12abc", "1.5", "0x10", "9223372036854775808", "٣"])
    def test_parse_stat_rejects(self, reply):
        with pytest.raises(InvalidArgumentError):
            parse_stat_reply(reply)

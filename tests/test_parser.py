"""Tests for fetch record parsing."""

from datetime import datetime

import pytest

from fakes import make_record
from mailpull.errors import ParseError
from mailpull.parser import is_complete, parse_record, split_message


class TestIsComplete:
    def test_complete_record(self):
        assert is_complete(make_record(1)) is True

    def test_flags_only_record(self):
        assert is_complete({"UID": 1, "FLAGS": (b"\\Seen",)}) is False

    def test_missing_header_block(self):
        record = make_record(1)
        del record["RFC822.HEADER"]
        assert is_complete(record) is False

    @pytest.mark.parametrize("missing", ["INTERNALDATE", "BODY[]"])
    def test_header_block_is_enough(self, missing):
        record = make_record(1)
        del record[missing]
        assert is_complete(record) is True


class TestSplitMessage:
    def test_splits_at_first_blank_line(self):
        lines, body = split_message(b"A: 1\r\nB: 2\r\n\r\nbody\r\n\r\nmore")
        assert lines == [b"A: 1\r\n", b"B: 2\r\n"]
        assert body == b"body\r\n\r\nmore"

    def test_bare_newlines(self):
        lines, body = split_message(b"A: 1\n\nbody")
        assert lines == [b"A: 1\n"]
        assert body == b"body"


class TestParseRecord:
    def test_basic_fields(self):
        email = parse_record(make_record(42, subject="Hello there", from_addr="a@example.com"))

        assert email.uid == 42
        assert email.subject == "Hello there"
        assert email.from_addr == "a@example.com"
        assert email.message_id == "<msg42@example.com>"
        assert email.internal_date == datetime(2024, 1, 15, 9, 30)

    def test_header_order_preserved(self):
        email = parse_record(make_record(1))
        assert [name for name, _ in email.header_items] == ["From", "Subject", "Message-ID"]
        assert list(email.headers) == ["From", "Subject", "Message-ID"]

    def test_body_follows_header_block(self):
        record = {
            "INTERNALDATE": datetime(2024, 1, 1),
            "BODY[]": b"<p>Hi</p>",
            "UID": 3,
            "RFC822.HEADER": b"Subject: no trailing blank line",
        }
        email = parse_record(record)
        assert email.raw_body == b"<p>Hi</p>"
        assert email.body().read() == b"<p>Hi</p>"

    def test_body_keeps_raw_bytes(self):
        email = parse_record(make_record(1, body=b"caf\xc3\xa9 \xff"))
        assert email.raw_body.endswith(b"caf\xc3\xa9 \xff")

    def test_body_stream_is_fresh_each_call(self):
        email = parse_record(make_record(1, body=b"payload"))
        first = email.body().read()
        second = email.body().read()
        assert first == second
        assert first.endswith(b"payload")

    def test_repeated_headers(self):
        header = b"Received: from a\r\nReceived: from b\r\nSubject: x\r\n\r\n"
        email = parse_record(make_record(1, header=header))
        assert email.headers["Received"] == ["from a", "from b"]
        assert email.get_all("received") == ["from a", "from b"]

    def test_folded_header_unfolded(self):
        header = b"Subject: a very\r\n long subject\r\n\r\n"
        email = parse_record(make_record(1, header=header))
        assert email.subject == "a very long subject"

    def test_case_insensitive_lookup(self):
        email = parse_record(make_record(1, subject="Case"))
        assert email.get_header("SUBJECT") == "Case"
        assert email.get_header("X-Missing") is None
        assert email.get_header("X-Missing", "default") == "default"

    def test_encoded_subject_decoded(self):
        email = parse_record(make_record(1, subject="=?UTF-8?B?SGVsbG8gV29ybGQ=?="))
        assert email.subject == "Hello World"

    def test_unknown_charset_subject(self):
        email = parse_record(make_record(1, subject="=?unknown-8bit?q?caf=E9?="))
        assert email.subject == "caf\ufffd"

    def test_message_id_fallback(self):
        email = parse_record(make_record(7, header=b"Subject: x\r\n\r\n"))
        assert email.message_id == "<uid-7@local>"

    def test_uid_as_bytes(self):
        record = make_record(1)
        record["UID"] = b"77"
        assert parse_record(record).uid == 77

    def test_missing_body_is_empty(self):
        record = make_record(1, header=b"Subject: x")
        del record["BODY[]"]
        email = parse_record(record)
        assert email.subject == "x"
        assert email.raw_body == b""

    def test_missing_internal_date(self):
        record = make_record(1)
        del record["INTERNALDATE"]
        assert parse_record(record).internal_date is None

    def test_non_datetime_internal_date_dropped(self):
        record = make_record(1)
        record["INTERNALDATE"] = b"15-Jan-2024 09:30:00 +0000"
        assert parse_record(record).internal_date is None

    def test_to_message(self):
        email = parse_record(make_record(1, subject="Rebuilt"))
        msg = email.to_message()
        assert msg["Subject"] == "Rebuilt"

    def test_malformed_header_line(self):
        header = b"Subject: ok\r\nthis line has no colon\r\n\r\n"
        with pytest.raises(ParseError, match="malformed header line"):
            parse_record(make_record(1, header=header))

    def test_leading_continuation_line(self):
        header = b"  continued\r\nSubject: x\r\n\r\n"
        with pytest.raises(ParseError, match="initial header line"):
            parse_record(make_record(1, header=header))

    def test_invalid_uid(self):
        record = make_record(1)
        record["UID"] = b"not-a-number"
        with pytest.raises(ParseError, match="invalid UID"):
            parse_record(record)

    def test_email_is_immutable(self):
        email = parse_record(make_record(1))
        with pytest.raises(AttributeError):
            email.uid = 2

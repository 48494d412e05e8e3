"""
Tests for the body module.
"""

import base64
import binascii
from datetime import datetime, timezone

import pytest

from inboxer.body import BodyNotFoundError, from_base64, get_body, received_time
from inboxer.models import Message


def _encode(text: str) -> str:
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii")


def _part(mime_type: str, text: str = "", size: int | None = None, parts=None) -> dict:
    part = {
        "mimeType": mime_type,
        "body": {"size": len(text) if size is None else size, "data": _encode(text) if text else ""},
    }
    if parts is not None:
        part["parts"] = parts
    return part


def _message(*parts: dict) -> Message:
    return Message.model_validate(
        {"id": "msg-1", "payload": {"mimeType": "multipart/mixed", "parts": list(parts)}}
    )


class TestFromBase64:
    """Tests for base64url decoding."""

    def test_decodes_url_safe_alphabet(self) -> None:
        data = _encode("<p>¿ok?</p>~~~")

        assert from_base64(data) == "<p>¿ok?</p>~~~"

    def test_url_safe_characters_and_invalid_utf8(self) -> None:
        # b"\xfb\xff" encodes to "-_8=" in the URL-safe alphabet
        assert from_base64("-_8=") == "��"

    def test_accepts_unpadded_data(self) -> None:
        data = _encode("hello").rstrip("=")

        assert from_base64(data) == "hello"

    def test_invalid_data_raises(self) -> None:
        with pytest.raises(binascii.Error):
            from_base64("a")

    def test_characters_outside_alphabet_raise(self) -> None:
        with pytest.raises(binascii.Error):
            from_base64("SGVsbG8!!")

    def test_embedded_whitespace_raises(self) -> None:
        with pytest.raises(binascii.Error):
            from_base64("SGVs bG8=")


class TestGetBody:
    """Tests for MIME part selection."""

    def test_top_level_plain_part(self) -> None:
        message = _message(_part("text/plain", "plain body"), _part("text/html", "<b>html</b>"))

        assert get_body(message, "text/plain") == "plain body"
        assert get_body(message, "text/html") == "<b>html</b>"

    def test_alternative_with_empty_plain_part(self) -> None:
        """Zero-size text/plain inside multipart/alternative is skipped."""

        message = _message(
            _part(
                "multipart/alternative",
                size=0,
                parts=[
                    _part("text/plain", size=0),
                    _part("text/html", "<p>only html</p>"),
                ],
            )
        )

        assert get_body(message, "text/html") == "<p>only html</p>"
        with pytest.raises(BodyNotFoundError, match="couldn't read body"):
            get_body(message, "text/plain")

    def test_first_match_wins(self) -> None:
        message = _message(
            _part("multipart/alternative", size=0, parts=[_part("text/plain", "nested")]),
            _part("text/plain", "top level"),
        )

        assert get_body(message, "text/plain") == "nested"

    def test_only_one_level_of_nesting_is_searched(self) -> None:
        message = _message(
            _part(
                "multipart/alternative",
                size=0,
                parts=[
                    _part("multipart/related", size=0, parts=[_part("text/html", "<p>deep</p>")]),
                ],
            )
        )

        with pytest.raises(BodyNotFoundError):
            get_body(message, "text/html")

    def test_single_part_payload_is_not_matched(self) -> None:
        message = Message.model_validate(
            {"id": "msg-1", "payload": _part("text/plain", "no parts list")}
        )

        with pytest.raises(BodyNotFoundError):
            get_body(message, "text/plain")

    def test_not_found_is_lookup_error(self) -> None:
        with pytest.raises(LookupError):
            get_body(Message(id="empty"), "text/plain")


def test_received_time_truncates_milliseconds() -> None:
    """internalDate milliseconds are converted to a UTC datetime in seconds."""

    result = received_time(1500000000999)

    assert result == datetime(2017, 7, 14, 2, 40, tzinfo=timezone.utc)


def test_received_time_accepts_api_string() -> None:
    """The API returns internalDate as a string."""

    assert received_time("1500000000000") == datetime(2017, 7, 14, 2, 40, tzinfo=timezone.utc)


def test_received_time_requires_fetched_message() -> None:
    """List results carry no internalDate."""

    with pytest.raises(ValueError, match="internalDate"):
        received_time(Message(id="listed-only").internal_date)

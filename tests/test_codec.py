"""Tests for the cookie token codec."""

import base64
import gzip
import struct

import pytest

from resumption.codec import (
    MAGIC,
    VERSION,
    decode_payload,
    deserialize,
    encode_payload,
    serialize,
)
from resumption.cookie import ResumptionCookie
from resumption.errors import DecodeError
from resumption.models import Address


def _cookie():
    return ResumptionCookie.from_identity(
        user_id="u1",
        bot_id="b1",
        conversation_id="c1",
        channel_id="test",
        service_url="https://trusted.example.com",
        locale="en-US",
    )


def _token(payload: bytes) -> str:
    return base64.b64encode(gzip.compress(payload)).decode("ascii")


def _str_field(tag: int, value: str) -> bytes:
    data = value.encode("utf-8")
    return struct.pack(">BBI", tag, 1, len(data)) + data


def _address_fields() -> bytes:
    return (
        _str_field(1, "b1")
        + _str_field(2, "test")
        + _str_field(3, "u1")
        + _str_field(4, "c1")
        + _str_field(5, "https://x.example.com")
    )


# ── Round trip ────────────────────────────────────────────

class TestRoundTrip:

    def test_identity_cookie(self):
        cookie = _cookie()
        restored = deserialize(serialize(cookie))
        assert restored == cookie
        assert restored.locale == "en-US"
        assert restored.is_trusted_service_url is True

    def test_message_cookie(self, activity):
        cookie = ResumptionCookie.from_message(activity)
        assert deserialize(serialize(cookie)) == cookie

    def test_none_fields_survive(self, address):
        cookie = ResumptionCookie(address)
        restored = deserialize(serialize(cookie))
        assert restored.user_name is None
        assert restored.locale is None

    def test_unicode_fields(self):
        cookie = _cookie()
        cookie.user_name = "Zoë 🚀"
        cookie.locale = "ja-JP"
        assert deserialize(serialize(cookie)).user_name == "Zoë 🚀"

    def test_stored_trust_flag_kept(self, fresh_default_trust_list):
        """Decoding does not consult the trust list again."""
        cookie = ResumptionCookie(Address("b1", "test", "u1", "c1", "https://x.example.com"), trust=lambda url: True)
        restored = deserialize(serialize(cookie))
        assert fresh_default_trust_list.is_trusted_service_url("https://x.example.com") is False
        assert restored.is_trusted_service_url is True

    def test_deterministic(self):
        assert serialize(_cookie()) == serialize(_cookie())

    def test_cookie_methods(self):
        cookie = _cookie()
        assert ResumptionCookie.deserialize(cookie.serialize()) == cookie

    def test_compress_level(self):
        cookie = _cookie()
        assert deserialize(serialize(cookie, compress_level=1)) == cookie

    def test_token_is_ascii_base64(self):
        token = serialize(_cookie())
        base64.b64decode(token, validate=True)


# ── Binary record ─────────────────────────────────────────

class TestPayload:

    def test_header(self):
        payload = encode_payload(_cookie())
        assert payload[:3] == MAGIC
        assert payload[3] == VERSION

    def test_decode_encode(self):
        cookie = _cookie()
        assert decode_payload(encode_payload(cookie)) == cookie

    def test_field_order_not_required(self):
        payload = (
            MAGIC + bytes([VERSION])
            + _str_field(5, "https://x.example.com")
            + _str_field(4, "c1")
            + _str_field(3, "u1")
            + _str_field(2, "test")
            + _str_field(1, "b1")
        )
        cookie = decode_payload(payload)
        assert cookie.address == Address("b1", "test", "u1", "c1", "https://x.example.com")

    def test_optional_fields_default(self):
        cookie = decode_payload(MAGIC + bytes([VERSION]) + _address_fields())
        assert cookie.user_name is None
        assert cookie.locale is None
        assert cookie.is_group is False
        assert cookie.is_trusted_service_url is False


# ── Failures ──────────────────────────────────────────────

class TestDecodeErrors:

    def test_random_string(self):
        with pytest.raises(DecodeError):
            deserialize("this is definitely not a cookie")

    def test_valid_base64_not_gzip(self):
        with pytest.raises(DecodeError, match="gzip"):
            deserialize(base64.b64encode(b"random bytes here").decode())

    def test_truncated_token(self):
        token = serialize(_cookie())
        for cut in (len(token) // 2, len(token) - 4, 8):
            with pytest.raises(DecodeError):
                deserialize(token[:cut])

    def test_empty_token(self):
        with pytest.raises(DecodeError):
            deserialize("")

    def test_non_string(self):
        with pytest.raises(DecodeError):
            deserialize(None)

    def test_bad_magic(self):
        with pytest.raises(DecodeError, match="magic"):
            deserialize(_token(b"XYZ" + bytes([VERSION]) + _address_fields()))

    def test_unsupported_version(self):
        with pytest.raises(DecodeError, match="version"):
            deserialize(_token(MAGIC + bytes([99]) + _address_fields()))

    def test_unknown_tag(self):
        with pytest.raises(DecodeError, match="unknown field tag"):
            deserialize(_token(MAGIC + bytes([VERSION]) + _address_fields() + _str_field(42, "x")))

    def test_duplicate_tag(self):
        with pytest.raises(DecodeError, match="duplicate"):
            deserialize(_token(MAGIC + bytes([VERSION]) + _address_fields() + _str_field(1, "b2")))

    def test_wrong_kind(self):
        bad = struct.pack(">BBB", 6, 2, 1)  # user_name as bool
        with pytest.raises(DecodeError, match="unexpected kind"):
            deserialize(_token(MAGIC + bytes([VERSION]) + _address_fields() + bad))

    def test_null_address_field(self):
        null_bot = struct.pack(">BB", 1, 0)
        with pytest.raises(DecodeError, match="unexpected kind"):
            deserialize(_token(MAGIC + bytes([VERSION]) + null_bot))

    def test_missing_address_field(self):
        payload = MAGIC + bytes([VERSION]) + _str_field(1, "b1") + _str_field(2, "test")
        with pytest.raises(DecodeError, match="missing address fields"):
            deserialize(_token(payload))

    def test_truncated_string(self):
        payload = MAGIC + bytes([VERSION]) + _address_fields() + struct.pack(">BBI", 9, 1, 50) + b"en"
        with pytest.raises(DecodeError, match="truncated"):
            deserialize(_token(payload))

    def test_trailing_partial_field(self):
        with pytest.raises(DecodeError, match="truncated"):
            deserialize(_token(MAGIC + bytes([VERSION]) + _address_fields() + b"\x06"))

    def test_invalid_bool_byte(self):
        bad = struct.pack(">BBB", 8, 2, 7)
        with pytest.raises(DecodeError, match="bool"):
            deserialize(_token(MAGIC + bytes([VERSION]) + _address_fields() + bad))

    def test_invalid_utf8(self):
        bad = struct.pack(">BBI", 6, 1, 2) + b"\xff\xfe"
        with pytest.raises(DecodeError, match="utf-8"):
            deserialize(_token(MAGIC + bytes([VERSION]) + _address_fields() + bad))

    def test_short_header(self):
        with pytest.raises(DecodeError, match="header"):
            deserialize(_token(b"RC"))

    def test_decode_error_is_value_error(self):
        with pytest.raises(ValueError):
            deserialize("@@@")

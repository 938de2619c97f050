"""Cookie token codec — base64(gzip(tagged binary record)).

Binary record, version 1 (big-endian):

    b"RCK"  magic
    0x01    version
    then fields until the end of the buffer, each:
        tag   u8
        kind  u8    0 = null, 1 = utf-8 string, 2 = bool
        value       null: nothing | string: u32 length + bytes | bool: u8 0/1

The encoder writes every tag in order. The decoder accepts any order,
requires the five address tags, and rejects unknown or repeated tags,
trailing bytes and anything truncated.
"""

import base64
import binascii
import gzip
import io
import logging
import struct
import zlib
from typing import Optional

from .cookie import ResumptionCookie
from .errors import DecodeError, InvalidArgument
from .models import Address

logger = logging.getLogger("resumption.codec")

MAGIC = b"RCK"
VERSION = 1

KIND_NULL = 0
KIND_STR = 1
KIND_BOOL = 2

TAG_BOT_ID = 1
TAG_CHANNEL_ID = 2
TAG_USER_ID = 3
TAG_CONVERSATION_ID = 4
TAG_SERVICE_URL = 5
TAG_USER_NAME = 6
TAG_IS_TRUSTED_SERVICE_URL = 7
TAG_IS_GROUP = 8
TAG_LOCALE = 9

# tag → (field name, allowed kinds)
FIELDS = {
    TAG_BOT_ID: ("bot_id", (KIND_STR,)),
    TAG_CHANNEL_ID: ("channel_id", (KIND_STR,)),
    TAG_USER_ID: ("user_id", (KIND_STR,)),
    TAG_CONVERSATION_ID: ("conversation_id", (KIND_STR,)),
    TAG_SERVICE_URL: ("service_url", (KIND_STR,)),
    TAG_USER_NAME: ("user_name", (KIND_STR, KIND_NULL)),
    TAG_IS_TRUSTED_SERVICE_URL: ("is_trusted_service_url", (KIND_BOOL,)),
    TAG_IS_GROUP: ("is_group", (KIND_BOOL,)),
    TAG_LOCALE: ("locale", (KIND_STR, KIND_NULL)),
}

ADDRESS_TAGS = (TAG_BOT_ID, TAG_CHANNEL_ID, TAG_USER_ID, TAG_CONVERSATION_ID, TAG_SERVICE_URL)

_HEADER = struct.Struct(">3sB")
_FIELD = struct.Struct(">BB")
_LENGTH = struct.Struct(">I")


# ============================================================
# BINARY RECORD
# ============================================================

def _write_str(out: io.BytesIO, tag: int, value: Optional[str]) -> None:
    if value is None:
        out.write(_FIELD.pack(tag, KIND_NULL))
        return
    data = value.encode("utf-8")
    out.write(_FIELD.pack(tag, KIND_STR))
    out.write(_LENGTH.pack(len(data)))
    out.write(data)


def _write_bool(out: io.BytesIO, tag: int, value: bool) -> None:
    out.write(_FIELD.pack(tag, KIND_BOOL))
    out.write(b"\x01" if value else b"\x00")


def encode_payload(cookie: ResumptionCookie) -> bytes:
    """Encode all cookie fields as an uncompressed binary record."""
    address = cookie.address
    with io.BytesIO() as out:
        out.write(_HEADER.pack(MAGIC, VERSION))
        _write_str(out, TAG_BOT_ID, address.bot_id)
        _write_str(out, TAG_CHANNEL_ID, address.channel_id)
        _write_str(out, TAG_USER_ID, address.user_id)
        _write_str(out, TAG_CONVERSATION_ID, address.conversation_id)
        _write_str(out, TAG_SERVICE_URL, address.service_url)
        _write_str(out, TAG_USER_NAME, cookie.user_name)
        _write_bool(out, TAG_IS_TRUSTED_SERVICE_URL, cookie.is_trusted_service_url)
        _write_bool(out, TAG_IS_GROUP, cookie.is_group)
        _write_str(out, TAG_LOCALE, cookie.locale)
        return out.getvalue()


def _read_exact(buf: io.BytesIO, n: int, what: str) -> bytes:
    data = buf.read(n)
    if len(data) != n:
        raise DecodeError(f"truncated payload while reading {what}")
    return data


def decode_payload(payload: bytes) -> ResumptionCookie:
    """Decode a binary record produced by encode_payload()."""
    with io.BytesIO(payload) as buf:
        magic, version = _HEADER.unpack(_read_exact(buf, _HEADER.size, "header"))
        if magic != MAGIC:
            raise DecodeError(f"bad magic {magic!r}")
        if version != VERSION:
            raise DecodeError(f"unsupported cookie format version {version}")

        values = {}
        while True:
            head = buf.read(_FIELD.size)
            if not head:
                break
            if len(head) != _FIELD.size:
                raise DecodeError("truncated payload while reading field header")
            tag, kind = _FIELD.unpack(head)

            if tag not in FIELDS:
                raise DecodeError(f"unknown field tag {tag}")
            name, kinds = FIELDS[tag]
            if name in values:
                raise DecodeError(f"duplicate field {name}")
            if kind not in kinds:
                raise DecodeError(f"field {name} has unexpected kind {kind}")

            if kind == KIND_NULL:
                values[name] = None
            elif kind == KIND_BOOL:
                flag = _read_exact(buf, 1, name)[0]
                if flag not in (0, 1):
                    raise DecodeError(f"field {name} has invalid bool byte {flag}")
                values[name] = bool(flag)
            else:
                (length,) = _LENGTH.unpack(_read_exact(buf, _LENGTH.size, name))
                raw = _read_exact(buf, length, name)
                try:
                    values[name] = raw.decode("utf-8")
                except UnicodeDecodeError as e:
                    raise DecodeError(f"field {name} is not valid utf-8") from e

    missing = [FIELDS[t][0] for t in ADDRESS_TAGS if FIELDS[t][0] not in values]
    if missing:
        raise DecodeError(f"missing address fields: {', '.join(missing)}")

    try:
        address = Address(**{FIELDS[t][0]: values[FIELDS[t][0]] for t in ADDRESS_TAGS})
    except InvalidArgument as e:
        raise DecodeError(str(e)) from e

    return ResumptionCookie._restore(
        address=address,
        user_name=values.get("user_name"),
        is_trusted_service_url=values.get("is_trusted_service_url", False),
        is_group=values.get("is_group", False),
        locale=values.get("locale"),
    )


# ============================================================
# TOKEN
# ============================================================

def serialize(cookie: ResumptionCookie, compress_level: int = 9) -> str:
    """Binary-encode, gzip and base64 a cookie.

    gzip runs with mtime=0 so equal cookies give equal tokens.
    """
    payload = encode_payload(cookie)
    compressed = gzip.compress(payload, compresslevel=compress_level, mtime=0)
    return base64.b64encode(compressed).decode("ascii")


def deserialize(token: str) -> ResumptionCookie:
    """Reverse serialize().

    Raises:
        DecodeError: bad base64, corrupt gzip stream or malformed record
    """
    if not isinstance(token, str):
        raise DecodeError(f"token must be a string, got {type(token).__name__}")

    try:
        compressed = base64.b64decode(token.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        logger.debug(f"Rejected cookie token: bad base64 ({e})")
        raise DecodeError(f"token is not valid base64: {e}") from e

    try:
        payload = gzip.decompress(compressed)
    except (OSError, EOFError, zlib.error) as e:
        logger.debug(f"Rejected cookie token: bad gzip stream ({e})")
        raise DecodeError(f"token is not a valid gzip stream: {e}") from e

    try:
        return decode_payload(payload)
    except DecodeError as e:
        logger.debug(f"Rejected cookie token: {e}")
        raise

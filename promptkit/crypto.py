"""Hashing, HMAC, hex, URI and base64 helpers."""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
from urllib.parse import quote


def sha256(text: str) -> str:
    """Lowercase hex SHA-256 digest of ``text``."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def hmac_sha256(key: bytes, msg: str) -> bytes:
    """HMAC-SHA256 of ``msg`` under ``key``."""
    return hmac.new(key, msg.encode("utf-8"), hashlib.sha256).digest()


def hex_encode(data: bytes) -> str:
    """Lowercase hex encoding of ``data``."""
    return bytes(data).hex()


def encode_uri(uri: str) -> str:
    """Percent-encode each path segment of ``uri``, keeping the slashes."""
    return "/".join(quote(segment, safe="") for segment in uri.split("/"))


def _as_bytes(data: str | bytes) -> bytes:
    return data.encode("utf-8") if isinstance(data, str) else bytes(data)


def base64_encode(data: str | bytes) -> str:
    """Standard base64 with padding."""
    return base64.b64encode(_as_bytes(data)).decode("ascii")


def base64_decode(data: str | bytes) -> bytes:
    """Decode standard padded base64; raises ``ValueError`` on bad input."""
    try:
        return base64.b64decode(_as_bytes(data), validate=True)
    except binascii.Error as exc:
        raise ValueError(f"Invalid base64 input: {exc}") from exc
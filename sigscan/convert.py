"""Conversions between hex text, strings and wire bytes."""

from __future__ import annotations

import re

_HEX_PAIR = re.compile(r"[0-9A-Fa-f]{2}")
_ENCODING = "utf-16-le"


def hex_string_to_bytes(text: str) -> bytes:
    """Decode a hex string; an odd length gets a leading zero."""
    if len(text) % 2:
        text = "0" + text
    pairs = [text[pos:pos + 2] for pos in range(0, len(text), 2)]
    for pair in pairs:
        if not _HEX_PAIR.fullmatch(pair):
            raise ValueError(f"invalid hex digits: {pair!r}")
    return bytes(int(pair, 16) for pair in pairs)


def encode_text(text: str) -> bytes:
    """Encode text as two-byte little-endian characters."""
    return text.encode(_ENCODING, errors="surrogatepass")


def decode_text(data: bytes) -> str:
    """Decode two-byte characters, stopping at the first NUL character."""
    if len(data) % 2:
        data = bytes(data) + b"\x00"
    text = bytes(data).decode(_ENCODING, errors="surrogatepass")
    return text.split("\x00", 1)[0]
"""Byte-signature database loaded from a text file of ``HEX.{GUID}`` lines."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from types import MappingProxyType

from .config import NORMAL
from .convert import encode_text, hex_string_to_bytes
from .errors import ERROR_FILE_NOT_FOUND, ERROR_INVALID_PARAMETER, SignatureDatabaseError

_LINE = re.compile(
    r"([0-9A-Fa-f]+)\."
    r"(\{[0-9A-Fa-f]{8}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{12}\})"
)


def parse_signature_line(line: str) -> tuple[bytes, str] | None:
    """Split a database line into its signature bytes and GUID, or None if malformed."""
    match = _LINE.fullmatch(line)
    if match is None:
        return None
    return hex_string_to_bytes(match.group(1)), match.group(2)


class SignatureDatabase:
    """Signatures mapped to the GUID that names them."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = path
        self._signatures: dict[bytes, str] = {}
        self._ordered: list[tuple[bytes, str]] = []

    @property
    def signatures(self) -> Mapping[bytes, str]:
        """Read-only view of the loaded signatures."""
        return MappingProxyType(self._signatures)

    def __len__(self) -> int:
        return len(self._signatures)

    def load(self) -> SignatureDatabase:
        """Read the database file; malformed lines are ignored, the first of duplicates kept."""
        try:
            with open(self.path, encoding="latin-1") as stream:
                lines = stream.read().splitlines()
        except OSError as exc:
            raise SignatureDatabaseError(str(self.path), ERROR_FILE_NOT_FOUND) from exc

        for line in lines:
            parsed = parse_signature_line(line)
            if parsed is None:
                continue
            signature, guid = parsed
            self._signatures.setdefault(signature, guid)

        self._ordered = sorted(self._signatures.items())
        return self

    def check(self, data: bytes | bytearray | memoryview) -> bytes:
        """Encoded GUID of the first signature found in data, or the encoded normal verdict.

        Positions are tried from the start; at each one, signatures are tried
        in ascending byte order.
        """
        if not data:
            raise SignatureDatabaseError("Check", ERROR_INVALID_PARAMETER)
        buffer = data if isinstance(data, bytes) else bytes(data)
        for pos in range(len(buffer)):
            for signature, guid in self._ordered:
                if buffer.startswith(signature, pos):
                    return encode_text(guid)
        return encode_text(NORMAL)
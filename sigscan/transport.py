"""Length-prefixed messages over stream sockets."""

from __future__ import annotations

import socket
import struct

from .config import DEFAULT_ADDRESS, PIPE_BUFFER_SIZE
from .errors import (
    ERROR_BROKEN_PIPE,
    ERROR_FILE_NOT_FOUND,
    ERROR_INVALID_PARAMETER,
    TransportError,
)

_HEADER = struct.Struct(">I")
MAX_MESSAGE = PIPE_BUFFER_SIZE


def send_message(sock: socket.socket, data: bytes) -> int:
    """Send one message; returns the number of payload bytes written."""
    payload = bytes(data)
    if len(payload) > MAX_MESSAGE:
        raise TransportError("Error WriteFile: message too large", ERROR_INVALID_PARAMETER)
    try:
        sock.sendall(_HEADER.pack(len(payload)) + payload)
    except OSError as exc:
        raise TransportError("Error WriteFile", exc.errno or ERROR_BROKEN_PIPE) from exc
    return len(payload)


def _recv_exact(sock: socket.socket, size: int) -> bytes:
    chunks = bytearray()
    while len(chunks) < size:
        try:
            chunk = sock.recv(size - len(chunks))
        except OSError as exc:
            raise TransportError("Error ReadFile", exc.errno or ERROR_BROKEN_PIPE) from exc
        if not chunk:
            raise TransportError("Error ReadFile", ERROR_BROKEN_PIPE)
        chunks += chunk
    return bytes(chunks)


def recv_message(sock: socket.socket) -> bytes:
    """Receive one message; a closed connection raises a broken-pipe error."""
    (size,) = _HEADER.unpack(_recv_exact(sock, _HEADER.size))
    if size > MAX_MESSAGE:
        raise TransportError("Error ReadFile: message too large", ERROR_INVALID_PARAMETER)
    return _recv_exact(sock, size) if size else b""


def connect(address: tuple[str, int] = DEFAULT_ADDRESS) -> socket.socket:
    """Open a connection to a scanning server."""
    try:
        return socket.create_connection(tuple(address))
    except OSError as exc:
        raise TransportError(
            f"Error connecting to {address[0]}:{address[1]}",
            exc.errno or ERROR_FILE_NOT_FOUND,
        ) from exc
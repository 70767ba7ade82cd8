"""Signature-based file scanning with a TCP scan server and a directory client."""

__version__ = "1.0.0"

__all__ = [
    "client",
    "config",
    "convert",
    "directory",
    "errors",
    "file_scanner",
    "pool",
    "server",
    "signatures",
    "transport",
]
"""Exception hierarchy carrying a textual context and a numeric error code."""

from __future__ import annotations

ERROR_FILE_NOT_FOUND = 2
ERROR_NOT_SUPPORTED = 50
ERROR_INVALID_PARAMETER = 87
ERROR_BROKEN_PIPE = 109
ERROR_CONTINUE = 1246

_MESSAGES = {
    ERROR_FILE_NOT_FOUND: "The system cannot find the file specified.",
    ERROR_NOT_SUPPORTED: "The request is not supported.",
    ERROR_INVALID_PARAMETER: "The parameter is incorrect.",
    ERROR_BROKEN_PIPE: "The pipe has been ended.",
    ERROR_CONTINUE: "Return that wants caller to continue with work in progress.",
}


class ScanError(Exception):
    """Base error: a context text plus an optional error code (0 means none)."""

    def __init__(self, text: str = "", code: int = 0) -> None:
        super().__init__(text, code)
        self.text = text
        self.code = code

    def what(self) -> str:
        """Describe the error, including the code's message when a code is set."""
        if not self.code:
            return self.text
        parts = [self.text, "\n"]
        message = _MESSAGES.get(self.code)
        if message:
            parts.append(message + "\n")
        parts.append(f"Error code {self.code}\n")
        return "".join(parts)

    def __str__(self) -> str:
        return self.what()


class ArgumentError(ScanError):
    """Invalid command line arguments."""


class DirectoryError(ScanError):
    """A directory could not be listed."""


class SignatureDatabaseError(ScanError):
    """The signature database could not be used."""


class PoolError(ScanError):
    """The worker pool was misused or failed."""


class TransportError(ScanError):
    """Sending or receiving over a connection failed."""


class ServerScannerError(ScanError):
    """The scanning server failed."""


class ClientScannerError(ScanError):
    """The scanning client failed."""
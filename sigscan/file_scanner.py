"""Scanner that checks buffers and files against a signature database."""

from __future__ import annotations

import mmap
import os
from pathlib import Path

from .config import program_dir
from .errors import ERROR_FILE_NOT_FOUND, ERROR_INVALID_PARAMETER, ScanError, SignatureDatabaseError
from .signatures import SignatureDatabase

SIGNATURES_FILE = "Signatures.txt"


class FileScanner:
    """Checks memory buffers and whole files for known signatures."""

    def __init__(self, signatures_path: str | os.PathLike[str] | None = None) -> None:
        self.signatures_path = signatures_path
        self._database: SignatureDatabase | None = None

    def load(self) -> FileScanner:
        """Load the signature database; by default the one beside the program."""
        path = self.signatures_path
        if path is None:
            path = program_dir() / SIGNATURES_FILE
        self._database = SignatureDatabase(path).load()
        return self

    def _db(self) -> SignatureDatabase:
        if self._database is None:
            raise SignatureDatabaseError("Signatures are not loaded", ERROR_INVALID_PARAMETER)
        return self._database

    def scan_buffer(self, data: bytes | bytearray | memoryview) -> bytes:
        """Verdict for a memory buffer."""
        return self._db().check(data)

    def scan_file(self, path: str | os.PathLike[str]) -> bytes:
        """Verdict for a file's contents; an empty file gives empty bytes."""
        database = self._db()
        target = Path(path)
        if not target.exists():
            raise ScanError(f"Error GetFileAttributes: {target}", ERROR_FILE_NOT_FOUND)
        try:
            with open(target, "rb") as stream:
                size = os.fstat(stream.fileno()).st_size
                if not size:
                    return b""
                with mmap.mmap(stream.fileno(), 0, access=mmap.ACCESS_READ) as view:
                    return database.check(view[:])
        except OSError as exc:
            raise ScanError(f"Error opening {target}", exc.errno or ERROR_FILE_NOT_FOUND) from exc
"""Client that sends the files of a directory tree to a scanning server."""

from __future__ import annotations

import os
import socket
import sys
import threading
from pathlib import Path
from typing import Protocol, TextIO

from .config import DEFAULT_ADDRESS, NORMAL, VIRUS, command_line, program_dir, worker_count
from .convert import decode_text, encode_text
from .directory import get_files
from .errors import (
    ERROR_INVALID_PARAMETER,
    ArgumentError,
    ClientScannerError,
    ScanError,
)
from .pool import Worker, WorkerPool, wait_all, wait_any
from .transport import connect, recv_message, send_message

TITLE = "Scanning"
HUNDRED = 100
REPORT_FILE = "Client.log"

EXTENSIONS = (
    ".exe",
    ".dll",
    ".sys",
    ".drv",
    ".ocx",
    ".bat",
    ".bin",
    ".cmd",
    ".com",
    ".cpl",
    ".inf",
    ".pif",
    ".vb",
    ".vbe",
    ".vbs",
    ".vbscript",
    ".ws",
    ".wsf",
    ".dat",
)


class Progress(Protocol):
    """Anything that can display a titled percentage."""

    def show(self, title: str, percent: int) -> object: ...


class ConsoleProgress:
    """Progress shown on one console line, rewritten in place."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream

    def show(self, title: str, percent: int) -> ConsoleProgress:
        """Write the title and percentage over the current line."""
        stream = self.stream if self.stream is not None else sys.stdout
        stream.write(f"\r{title} {percent} %")
        stream.flush()
        return self


class _ScanTask(Worker):
    """Sends one path over its connection and records a non-normal verdict."""

    def __init__(self, sock: socket.socket, results: bytearray, lock: threading.Lock) -> None:
        super().__init__()
        self.sock = sock
        self.path = ""
        self._results = results
        self._lock = lock

    def run(self) -> None:
        path = self.path
        send_message(self.sock, encode_text(path))
        verdict = decode_text(recv_message(self.sock))
        if verdict != NORMAL:
            line = encode_text(f"{path} -> {VIRUS} [GUID: {verdict}]\r\n")
            with self._lock:
                self._results += line


class ClientScanner:
    """Scans a directory tree by handing its files to a server over parallel connections."""

    def __init__(self, address: tuple[str, int] = DEFAULT_ADDRESS,
                 workers: int | None = None, progress: Progress | None = None) -> None:
        self.address = tuple(address)
        self.workers = worker_count() if workers is None else workers
        if self.workers < 1:
            raise ClientScannerError("ClientScanner", ERROR_INVALID_PARAMETER)
        self.progress = progress if progress is not None else ConsoleProgress()
        self._lock = threading.Lock()
        self._results = bytearray()
        self._tasks: list[_ScanTask] = []
        self._pool: WorkerPool | None = None
        self._files: list[str] = []
        self._outstanding: list[_ScanTask] = []
        self._bad = 0
        self._done = 0
        self._total = 0
        self._percent = 0

    @property
    def loaded(self) -> bool:
        """Whether the connections and the worker threads are up."""
        return self._pool is not None

    def load(self) -> ClientScanner:
        """Open one connection per worker and start the worker threads."""
        if self.loaded:
            return self
        tasks: list[_ScanTask] = []
        try:
            for _ in range(self.workers):
                tasks.append(_ScanTask(connect(self.address), self._results, self._lock))
        except ScanError:
            for task in tasks:
                task.sock.close()
            raise
        self._tasks = tasks
        self._pool = WorkerPool(self.workers).start()
        return self

    def scan(self, directory: str | os.PathLike[str]) -> bytes:
        """Scan the matching files under directory; returns the encoded report lines."""
        if not self.loaded:
            raise ClientScannerError("ClientScanner is not loaded", ERROR_INVALID_PARAMETER)
        files = get_files(os.fspath(directory), EXTENSIONS, True)
        if not files:
            return b""
        with self._lock:
            self._results.clear()
        self._files = files
        self._outstanding = []
        self._bad = 0
        self._done = 0
        self._total = len(files)

        for task in self._tasks:
            if not self._files:
                break
            self._dispatch(task)

        while self._files and self._bad != len(self._tasks):
            index = wait_any(self._outstanding)
            self._dispatch(self._outstanding.pop(index))

        if self._outstanding:
            wait_all(self._outstanding)
            self._outstanding = []

        with self._lock:
            return bytes(self._results)

    def _dispatch(self, task: _ScanTask) -> None:
        with self._lock:
            if not task.is_worked():
                self._bad += 1
                if self._bad == len(self._tasks):
                    raise ClientScannerError("Server is not available")
                return
            task.path = self._files.pop(0)
            self._outstanding.append(task)
            self._pool.add(task)
            self._done += 1
            percent = self._done * HUNDRED // self._total
            if percent != self._percent:
                self._percent = percent
                self.progress.show(TITLE, percent)

    def close(self) -> None:
        """Close every connection and stop the worker threads."""
        for task in self._tasks:
            try:
                task.sock.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
        if self._pool is not None:
            self._pool.close()
            self._pool = None
        for task in self._tasks:
            task.sock.close()
        self._tasks = []

    def __enter__(self) -> ClientScanner:
        return self.load()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def save_report(data: bytes, path: str | os.PathLike[str] | None = None) -> Path:
    """Write the report, replacing any earlier one; by default beside the program."""
    target = Path(path) if path is not None else program_dir() / REPORT_FILE
    target.write_bytes(bytes(data))
    return target


def _show(text: str) -> None:
    print()
    print(text)


def _help() -> None:
    print("Invalid arguments")
    print("Example: client C:\\Windows")


def main(argv: list[str] | None = None) -> int:
    """Scan the directory named on the command line and save the report."""
    try:
        args = command_line(argv)
        if len(args) != 1:
            raise ArgumentError("", ERROR_INVALID_PARAMETER)
        with ClientScanner() as scanner:
            save_report(scanner.scan(args[0]))
        _show("Done")
        return 0
    except ArgumentError as exc:
        _help()
        return exc.code or -1
    except ScanError as exc:
        _show(exc.what())
        return exc.code or -1
    except Exception as exc:
        print(exc)
        return -1
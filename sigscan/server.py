"""Server that scans the files its clients name and answers with verdicts."""

from __future__ import annotations

import selectors
import socket
import threading

from .config import DEFAULT_ADDRESS, command_line, worker_count
from .convert import decode_text, encode_text
from .errors import (
    ERROR_BROKEN_PIPE,
    ERROR_CONTINUE,
    ERROR_INVALID_PARAMETER,
    ScanError,
    ServerScannerError,
)
from .file_scanner import FileScanner
from .pool import Worker, WorkerPool
from .transport import recv_message, send_message

_LISTEN = object()
_WAKE = object()


class _Connection(Worker):
    """One client connection; each run serves a single request."""

    def __init__(self, server: ScanServer, sock: socket.socket) -> None:
        super().__init__()
        self.server = server
        self.sock = sock

    def run(self) -> None:
        try:
            request = recv_message(self.sock)
            reply = self.server.scan(decode_text(request))
            send_message(self.sock, reply)
        except ScanError as exc:
            if exc.code != ERROR_BROKEN_PIPE:
                self.set_error(exc.code or ERROR_CONTINUE)
            self.server._drop(self)
            return
        except OSError:
            self.set_error(ERROR_CONTINUE)
            self.server._drop(self)
            return
        self.server._resume(self)


class ScanServer:
    """Accepts connections and scans, on a pool of threads, the paths they send."""

    def __init__(self, scanner, address: tuple[str, int] = DEFAULT_ADDRESS,
                 workers: int | None = None) -> None:
        self.scanner = scanner
        self.address = tuple(address)
        self.workers = worker_count() if workers is None else workers
        if self.workers < 1:
            raise ServerScannerError("ScanServer", ERROR_INVALID_PARAMETER)
        self._lock = threading.Lock()
        self._stopping = threading.Event()
        self._connections: set[_Connection] = set()
        self._pending: list[_Connection] = []
        self._pool: WorkerPool | None = None
        self._listener: socket.socket | None = None
        self._selector: selectors.BaseSelector | None = None
        self._wake_r: socket.socket | None = None
        self._wake_w: socket.socket | None = None
        self._dispatcher: threading.Thread | None = None
        self._running = False

    @property
    def running(self) -> bool:
        """Whether the server is accepting connections."""
        return self._running

    def start(self) -> ScanServer:
        """Load the scanner, start listening and start the worker threads."""
        if self._running:
            raise ServerScannerError("ScanServer is already running", ERROR_INVALID_PARAMETER)
        self.scanner.load()
        try:
            listener = socket.create_server(self.address)
        except OSError as exc:
            raise ServerScannerError(
                f"Error listening on {self.address[0]}:{self.address[1]}",
                exc.errno or ERROR_INVALID_PARAMETER,
            ) from exc
        listener.setblocking(False)
        self.address = tuple(listener.getsockname()[:2])
        self._listener = listener
        self._wake_r, self._wake_w = socket.socketpair()
        self._wake_r.setblocking(False)
        self._selector = selectors.DefaultSelector()
        self._selector.register(listener, selectors.EVENT_READ, _LISTEN)
        self._selector.register(self._wake_r, selectors.EVENT_READ, _WAKE)
        self._pool = WorkerPool(self.workers).start()
        self._stopping.clear()
        self._dispatcher = threading.Thread(target=self._dispatch, daemon=True)
        self._dispatcher.start()
        self._running = True
        return self

    def stop(self) -> None:
        """Stop accepting, close every connection and wait for the workers."""
        if not self._running:
            return
        self._running = False
        self._stopping.set()
        self._wake()
        if self._dispatcher is not None:
            self._dispatcher.join()
        with self._lock:
            connections = list(self._connections)
        for conn in connections:
            try:
                conn.sock.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
        if self._pool is not None:
            self._pool.close()
        with self._lock:
            connections = list(self._connections)
            self._connections.clear()
            self._pending.clear()
        for conn in connections:
            conn.sock.close()
        if self._selector is not None:
            self._selector.close()
        for sock in (self._listener, self._wake_r, self._wake_w):
            if sock is not None:
                sock.close()

    def scan(self, path: str) -> bytes:
        """Verdict for a file; a failure becomes its description as the reply."""
        try:
            return self.scanner.scan_file(path)
        except ScanError as exc:
            return encode_text(exc.what())
        except Exception:
            return encode_text("Unhandled exception...")

    def _wake(self) -> None:
        if self._wake_w is None:
            return
        try:
            self._wake_w.send(b"\0")
        except OSError:
            pass

    def _resume(self, conn: _Connection) -> None:
        with self._lock:
            if self._stopping.is_set():
                stopped = True
            else:
                stopped = False
                self._pending.append(conn)
        if stopped:
            self._drop(conn)
        else:
            self._wake()

    def _drop(self, conn: _Connection) -> None:
        with self._lock:
            self._connections.discard(conn)
        conn.sock.close()

    def _register_pending(self) -> None:
        with self._lock:
            pending, self._pending = self._pending, []
        for conn in pending:
            try:
                self._selector.register(conn.sock, selectors.EVENT_READ, conn)
            except (ValueError, KeyError, OSError):
                self._drop(conn)

    def _accept(self) -> None:
        try:
            sock, _ = self._listener.accept()
        except (BlockingIOError, InterruptedError):
            return
        except OSError:
            return
        sock.setblocking(True)
        conn = _Connection(self, sock)
        with self._lock:
            self._connections.add(conn)
        self._selector.register(sock, selectors.EVENT_READ, conn)

    def _dispatch(self) -> None:
        while not self._stopping.is_set():
            for key, _ in self._selector.select(timeout=0.5):
                if key.data is _LISTEN:
                    self._accept()
                elif key.data is _WAKE:
                    try:
                        self._wake_r.recv(4096)
                    except OSError:
                        pass
                else:
                    self._selector.unregister(key.fileobj)
                    self._pool.add(key.data)
            self._register_pending()

    def __enter__(self) -> ScanServer:
        if not self._running:
            self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


def main(argv: list[str] | None = None) -> int:
    """Run the scanning server until enter is pressed."""
    try:
        command_line(argv)
        with ScanServer(FileScanner()):
            print("Press enter to exit...", flush=True)
            try:
                input()
            except EOFError:
                pass
        return 0
    except ScanError as exc:
        print(exc.what())
        return exc.code or -1
    except Exception as exc:
        print(exc)
        return -1
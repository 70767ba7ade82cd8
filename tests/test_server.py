import socket
import sys

import pytest

from sigscan.convert import decode_text, encode_text
from sigscan.errors import (
    ERROR_FILE_NOT_FOUND,
    ERROR_INVALID_PARAMETER,
    ServerScannerError,
    SignatureDatabaseError,
    TransportError,
)
from sigscan.file_scanner import FileScanner
from sigscan.server import ScanServer, main
from sigscan.transport import connect, recv_message, send_message

GUID = "{12345678-1234-1234-1234-123456789ABC}"


class RecordingScanner:
    def __init__(self, error=None):
        self.loaded = False
        self.error = error
        self.seen = []

    def load(self):
        self.loaded = True
        return self

    def scan_file(self, path):
        self.seen.append(path)
        if self.error is not None:
            raise self.error
        return encode_text("Normal")


@pytest.fixture
def signatures(tmp_path):
    path = tmp_path / "Signatures.txt"
    path.write_text(f"4D5A90.{GUID}\n", encoding="latin-1")
    return path


@pytest.fixture
def server(signatures):
    srv = ScanServer(FileScanner(signatures), ("127.0.0.1", 0), 2)
    srv.start()
    yield srv
    srv.stop()


def _ask(sock, path):
    send_message(sock, encode_text(str(path)))
    return decode_text(recv_message(sock))


def _client(server):
    sock = connect(server.address)
    sock.settimeout(10)
    return sock


def test_infected_file_reports_guid(server, tmp_path):
    target = tmp_path / "bad.exe"
    target.write_bytes(b"\x00\x01\x4d\x5a\x90\x00")
    with _client(server) as sock:
        assert _ask(sock, target) == GUID


def test_clean_file_reports_normal(server, tmp_path):
    target = tmp_path / "good.exe"
    target.write_bytes(b"nothing to see")
    with _client(server) as sock:
        assert _ask(sock, target) == "Normal"


def test_missing_file_reports_error_text(server, tmp_path):
    with _client(server) as sock:
        reply = _ask(sock, tmp_path / "absent.exe")
    assert f"Error code {ERROR_FILE_NOT_FOUND}" in reply


def test_several_requests_on_one_connection(server, tmp_path):
    bad = tmp_path / "bad.dll"
    bad.write_bytes(b"\x4d\x5a\x90")
    good = tmp_path / "good.dll"
    good.write_bytes(b"plain")
    with _client(server) as sock:
        replies = [_ask(sock, bad), _ask(sock, good), _ask(sock, bad)]
    assert replies == [GUID, "Normal", GUID]


def test_many_connections_interleaved(server, tmp_path):
    bad = tmp_path / "bad.sys"
    bad.write_bytes(b"xx\x4d\x5a\x90")
    clients = [_client(server) for _ in range(4)]
    try:
        for sock in clients:
            send_message(sock, encode_text(str(bad)))
        replies = [decode_text(recv_message(sock)) for sock in clients]
    finally:
        for sock in clients:
            sock.close()
    assert replies == [GUID] * 4


def test_server_survives_client_disconnect(server, tmp_path):
    good = tmp_path / "good.bat"
    good.write_bytes(b"echo")
    first = _client(server)
    first.close()
    with _client(server) as sock:
        assert _ask(sock, good) == "Normal"


def test_start_loads_scanner_and_binds_port():
    scanner = RecordingScanner()
    with ScanServer(scanner, ("127.0.0.1", 0), 1) as srv:
        assert scanner.loaded is True
        assert srv.address[1] > 0
        assert srv.running is True
        with _client(srv) as sock:
            assert _ask(sock, "some/file.exe") == "Normal"
    assert scanner.seen == ["some/file.exe"]
    assert srv.running is False


def test_scan_turns_unknown_failure_into_text():
    srv = ScanServer(RecordingScanner(RuntimeError("boom")), ("127.0.0.1", 0), 1)
    assert decode_text(srv.scan("x")) == "Unhandled exception..."


def test_scan_turns_scan_error_into_description():
    error = SignatureDatabaseError("Check", ERROR_INVALID_PARAMETER)
    srv = ScanServer(RecordingScanner(error), ("127.0.0.1", 0), 1)
    assert decode_text(srv.scan("x")) == error.what()


def test_start_fails_when_signatures_missing(tmp_path):
    srv = ScanServer(FileScanner(tmp_path / "none.txt"), ("127.0.0.1", 0), 1)
    with pytest.raises(SignatureDatabaseError):
        srv.start()
    assert srv.running is False


def test_start_twice_rejected():
    with ScanServer(RecordingScanner(), ("127.0.0.1", 0), 1) as srv:
        with pytest.raises(ServerScannerError) as info:
            srv.start()
        assert info.value.code == ERROR_INVALID_PARAMETER


def test_zero_workers_rejected():
    with pytest.raises(ServerScannerError):
        ScanServer(RecordingScanner(), ("127.0.0.1", 0), 0)


def test_connect_fails_after_stop():
    srv = ScanServer(RecordingScanner(), ("127.0.0.1", 0), 1).start()
    address = srv.address
    srv.stop()
    with pytest.raises(TransportError):
        connect(address)


def test_open_connection_closed_on_stop():
    srv = ScanServer(RecordingScanner(), ("127.0.0.1", 0), 1).start()
    sock = _client(srv)
    with sock:
        assert _ask(sock, "a") == "Normal"
        srv.stop()
        with pytest.raises((TransportError, OSError)):
            _ask(sock, "b")
            _ask(sock, "c")


def test_main_without_signatures_returns_error_code(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", [str(tmp_path / "server")])
    assert main([]) == ERROR_FILE_NOT_FOUND
    assert f"Error code {ERROR_FILE_NOT_FOUND}" in capsys.readouterr().out
import socket
import threading

import pytest

from tftpclient.cli import main
from tftpclient.parser import (
    Acknowledgment,
    Data,
    ErrorCode,
    ErrorPacket,
    ReadRequest,
    WriteRequest,
    parse_packet,
)


class _FakeServer:
    """Runs a one-shot handler on a local UDP socket in a thread."""

    def __init__(self, handler):
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.settimeout(5)
        self.port = self.sock.getsockname()[1]
        self.seen = []
        self.received = bytearray()
        self._handler = handler
        self._thread = threading.Thread(target=self._run, daemon=True)

    def _run(self):
        try:
            self._handler(self)
        finally:
            self.sock.close()

    def recv(self):
        raw, addr = self.sock.recvfrom(2048)
        packet = parse_packet(raw)
        self.seen.append(packet)
        return packet, addr

    def __enter__(self):
        self._thread.start()
        return self

    def __exit__(self, *exc):
        self._thread.join(timeout=5)


def _serve_file(payload):
    def handler(server):
        _, addr = server.recv()
        server.sock.sendto(Data(1, payload).to_bytes(), addr)
        server.recv()

    return handler


def _accept_file(server):
    _, addr = server.recv()
    server.sock.sendto(Acknowledgment(0).to_bytes(), addr)
    while True:
        packet, addr = server.recv()
        server.received += packet.data
        server.sock.sendto(Acknowledgment(packet.block_n).to_bytes(), addr)
        if len(packet.data) < 512:
            break


def _refuse(server):
    _, addr = server.recv()
    server.sock.sendto(ErrorPacket(ErrorCode.NO_FILE, "nope").to_bytes(), addr)


def test_get_writes_downloaded_file(tmp_path):
    payload = bytes([0xB0, 0xBA, 0xCA, 0xFE])
    target = tmp_path / "out.bin"
    with _FakeServer(_serve_file(payload)) as server:
        status = main(["get", f"127.0.0.1:{server.port}", "/test", "-o", str(target)])
    assert status == 0
    assert target.read_bytes() == payload
    assert server.seen[0] == ReadRequest("/test")
    assert server.seen[1] == Acknowledgment(1)


def test_put_sends_small_file(tmp_path):
    payload = bytes([0xDE, 0xAD, 0xCA, 0xFE])
    source = tmp_path / "in.bin"
    source.write_bytes(payload)
    with _FakeServer(_accept_file) as server:
        status = main(["put", f"127.0.0.1:{server.port}", "/test", str(source)])
    assert status == 0
    assert bytes(server.received) == payload
    assert server.seen[0] == WriteRequest("/test")


def test_put_sends_multi_block_file(tmp_path):
    payload = bytes(range(256)) * 3
    source = tmp_path / "in.bin"
    source.write_bytes(payload)
    with _FakeServer(_accept_file) as server:
        status = main(["put", f"127.0.0.1:{server.port}", "/big", str(source)])
    assert status == 0
    assert bytes(server.received) == payload
    assert [p.block_n for p in server.seen[1:]] == [1, 2]


def test_get_reports_server_error(tmp_path, capsys):
    target = tmp_path / "out.bin"
    with _FakeServer(_refuse) as server:
        status = main(["get", f"127.0.0.1:{server.port}", "/missing", "-o", str(target)])
    assert status == 1
    assert "nope" in capsys.readouterr().err
    assert not target.exists()


def test_put_missing_local_file_fails(tmp_path, capsys):
    status = main(["put", "127.0.0.1:6969", "/x", str(tmp_path / "absent.bin")])
    assert status == 1
    assert "tftpclient:" in capsys.readouterr().err


@pytest.mark.parametrize(
    "extra",
    [
        ["--retries", "0"],
        ["--timeout", "-1"],
        ["--max-timeout", "abc"],
    ],
)
def test_bad_settings_are_rejected(extra):
    with pytest.raises(SystemExit) as info:
        main([*extra, "get", "127.0.0.1", "/x"])
    assert info.value.code == 2


@pytest.mark.parametrize("server", ["127.0.0.1:notaport", "127.0.0.1:70000", ":69", "[::1"])
def test_bad_server_address_is_rejected(server):
    with pytest.raises(SystemExit) as info:
        main(["get", server, "/x"])
    assert info.value.code == 2


def test_missing_command_is_rejected():
    with pytest.raises(SystemExit) as info:
        main([])
    assert info.value.code == 2
"""Asynchronous TFTP client built on asyncio's socket operations."""

from __future__ import annotations

import asyncio
import logging
import socket
from typing import Any

from .blocking import BLOCK_SIZE
from .errors import (
    BadFilename,
    PacketParseError,
    ProtocolError,
    SocketIoError,
    TransferTimeout,
    UnexpectedPacket,
)
from .parser import (
    Acknowledgment,
    Data,
    ErrorPacket,
    Packet,
    ParseError,
    ReadRequest,
    WriteRequest,
    parse_packet,
)

__all__ = ["download", "upload"]

_RECV_SIZE = BLOCK_SIZE + 4

log = logging.getLogger(__name__)

Address = tuple[Any, ...]


def _check_settings(timeout: float, max_timeout: float, retries: int) -> None:
    if timeout <= 0:
        raise ValueError("timeout must be positive")
    if max_timeout <= 0:
        raise ValueError("max_timeout must be positive")
    if retries < 1:
        raise ValueError("retries must be at least 1")


def _request(kind: type[ReadRequest] | type[WriteRequest], filename: object) -> Packet:
    try:
        return kind(str(filename))
    except ValueError:
        raise BadFilename() from None


class _Channel:
    """Sends packets to the server and awaits its answers with retries and backoff."""

    def __init__(
        self,
        sock: socket.socket,
        server: Address,
        timeout: float,
        max_timeout: float,
        retries: int,
    ) -> None:
        self._sock = sock
        self._loop = asyncio.get_running_loop()
        self.server = server
        self._timeout = timeout
        self._max_timeout = max_timeout
        self._retries = retries
        self._local_timeout = timeout
        self._local_retries = retries
        self._last: Packet | None = None

    async def send(self, packet: Packet) -> None:
        self._local_retries = self._retries
        self._local_timeout = self._timeout
        self._last = packet
        log.debug("│ TX - %s", packet)
        await self._transmit()

    async def _transmit(self) -> None:
        assert self._last is not None
        try:
            await self._loop.sock_sendto(self._sock, self._last.to_bytes(), self.server)
        except OSError as exc:
            raise SocketIoError(exc) from exc

    async def _back_off(self) -> None:
        log.debug("│ Timeout")
        self._local_retries -= 1
        if self._local_retries <= 0:
            raise TransferTimeout()
        self._local_timeout = min(self._local_timeout * 1.5, self._max_timeout)
        log.debug("│ TX - %s (Retry)", self._last)
        await self._transmit()

    async def receive(self) -> Packet:
        while True:
            try:
                raw, address = await asyncio.wait_for(
                    self._loop.sock_recvfrom(self._sock, _RECV_SIZE),
                    self._local_timeout,
                )
            except TimeoutError:
                await self._back_off()
                continue
            except OSError as exc:
                raise SocketIoError(exc) from exc
            # The server may answer from a new port, as the protocol allows.
            self.server = address
            try:
                packet = parse_packet(raw)
            except ParseError as exc:
                raise PacketParseError(exc) from exc
            log.debug("│ RX - %s", packet)
            return packet


async def download(
    filename: str,
    sock: socket.socket,
    server: Address,
    timeout: float,
    max_timeout: float,
    retries: int,
) -> bytes:
    """Fetch ``filename`` from ``server`` and return its contents.

    The socket is switched to non-blocking mode for the transfer and its
    previous timeout is restored afterwards. Timeouts are in seconds.
    """
    _check_settings(timeout, max_timeout, retries)
    request = _request(ReadRequest, filename)
    old_timeout = sock.gettimeout()
    sock.setblocking(False)
    log.debug("┌── GET %s", filename)
    received = bytearray()
    try:
        channel = _Channel(sock, server, timeout, max_timeout, retries)
        await channel.send(request)
        while True:
            packet = await channel.receive()
            match packet:
                case Data(block_n=block_n, data=chunk):
                    received += chunk
                    await channel.send(Acknowledgment(block_n))
                    if len(chunk) < BLOCK_SIZE:
                        break
                case ErrorPacket(code=code, msg=msg):
                    raise ProtocolError(code, msg)
                case _:
                    raise UnexpectedPacket(packet)
    finally:
        sock.settimeout(old_timeout)
    log.debug("└")
    return bytes(received)


async def upload(
    filename: str,
    data: bytes,
    sock: socket.socket,
    server: Address,
    timeout: float,
    max_timeout: float,
    retries: int,
) -> None:
    """Send ``data`` to ``server`` as ``filename``.

    The socket is switched to non-blocking mode for the transfer and its
    previous timeout is restored afterwards. Timeouts are in seconds.
    """
    _check_settings(timeout, max_timeout, retries)
    request = _request(WriteRequest, filename)
    data = bytes(data)
    chunks = [data[start : start + BLOCK_SIZE] for start in range(0, len(data), BLOCK_SIZE)]
    old_timeout = sock.gettimeout()
    sock.setblocking(False)
    log.debug("┌── PUT %s", filename)
    last_block: int | None = None
    try:
        channel = _Channel(sock, server, timeout, max_timeout, retries)
        await channel.send(request)
        while True:
            packet = await channel.receive()
            match packet:
                case Acknowledgment(block_n=block_n):
                    # A repeated ACK must not trigger a resend (Sorcerer's Apprentice).
                    if block_n == last_block:
                        continue
                    last_block = block_n
                    if block_n == len(chunks):
                        break
                    if block_n > len(chunks):
                        raise UnexpectedPacket(packet)
                    await channel.send(Data(block_n + 1, chunks[block_n]))
                case ErrorPacket(code=code, msg=msg):
                    raise ProtocolError(code, msg)
                case _:
                    raise UnexpectedPacket(packet)
    finally:
        sock.settimeout(old_timeout)
    log.debug("└")
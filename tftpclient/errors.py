"""Errors raised by TFTP transfers."""

from __future__ import annotations

from .parser import ErrorCode, Packet, ParseError

__all__ = [
    "TftpError",
    "BadFilename",
    "SocketIoError",
    "TransferTimeout",
    "PacketParseError",
    "UnexpectedPacket",
    "ProtocolError",
]


class TftpError(Exception):
    """Base class for every failure of a TFTP transfer."""


class BadFilename(TftpError):
    """The filename cannot be sent as a NUL-terminated string."""

    def __init__(self) -> None:
        super().__init__("Bad filename (not a valid CString)")


class SocketIoError(TftpError):
    """The socket reported an I/O error."""

    def __init__(self, error: OSError) -> None:
        super().__init__(f"Socket IO error - `{error}`")
        self.error = error


class TransferTimeout(TftpError):
    """All retries ran out without an answer."""

    def __init__(self) -> None:
        super().__init__("Timeout while trying to complete transaction")


class PacketParseError(TftpError):
    """An incoming packet could not be parsed."""

    def __init__(self, error: ParseError) -> None:
        super().__init__(f"Failed to parse incoming packet - `{error}`")
        self.error = error


class UnexpectedPacket(TftpError):
    """The server answered with a packet of the wrong kind."""

    def __init__(self, packet: Packet) -> None:
        super().__init__("The packet we got back was unexpected")
        self.packet = packet


class ProtocolError(TftpError):
    """The server sent an ERROR packet."""

    def __init__(self, code: ErrorCode, msg: str) -> None:
        super().__init__(
            f"The protocol itself gave us an error with code `{code.name}` and msg `{msg}`"
        )
        self.code = code
        self.msg = msg
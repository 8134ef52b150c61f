"""Parsing and serialisation of TFTP packets (RFC 1350)."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import TypeAlias

__all__ = [
    "ErrorCode",
    "RequestMode",
    "ParseError",
    "Incomplete",
    "BadOpcode",
    "BadString",
    "BadErrorCode",
    "ReadRequest",
    "WriteRequest",
    "Data",
    "Acknowledgment",
    "ErrorPacket",
    "Packet",
    "parse_packet",
]

_OP_RRQ = 1
_OP_WRQ = 2
_OP_DATA = 3
_OP_ACK = 4
_OP_ERROR = 5

_U16 = struct.Struct(">H")


class ErrorCode(enum.IntEnum):
    """Error codes carried by a TFTP ERROR packet."""

    UNSPEC = 0
    NO_FILE = 1
    ACCESS = 2
    WRITE = 3
    OP = 4
    BAD_ID = 5
    EXIST = 6
    BAD_USER = 7
    BAD_OPT = 8

    def __str__(self) -> str:
        return _ERROR_CODE_TEXT[self]


_ERROR_CODE_TEXT = {
    ErrorCode.UNSPEC: "Not defined, see error message",
    ErrorCode.NO_FILE: "File not found",
    ErrorCode.ACCESS: "Access violation",
    ErrorCode.WRITE: "Disk full or allocation exceeded",
    ErrorCode.OP: "Illegal TFTP operation",
    ErrorCode.BAD_ID: "Unknown transfer ID",
    ErrorCode.EXIST: "File already exists",
    ErrorCode.BAD_USER: "No such user",
    ErrorCode.BAD_OPT: "Bad option",
}


class RequestMode(enum.Enum):
    """Transfer mode of a read or write request."""

    OCTET = "octet"
    NETASCII = "netascii"
    MAIL = "mail"

    def __str__(self) -> str:
        return self.value


class ParseError(Exception):
    """An incoming packet could not be parsed."""


class Incomplete(ParseError):
    """Too few bytes to make up a packet."""

    def __init__(self, count: int) -> None:
        super().__init__(f"Too few bytes received - `{count}`")
        self.count = count


class BadOpcode(ParseError):
    """The opcode is not one TFTP defines."""

    def __init__(self, opcode: int) -> None:
        super().__init__(f"Opcode wasn't expected - `{opcode}`")
        self.opcode = opcode


class BadString(ParseError):
    """A string in the payload was malformed."""

    def __init__(self) -> None:
        super().__init__(
            "String in payload wasn't a valid CString or was otherwise invalid"
        )


class BadErrorCode(ParseError):
    """The error code of an ERROR packet is not recognised."""

    def __init__(self, code: int) -> None:
        super().__init__(f"Error code wasn't recognized - `{code}`")
        self.code = code


def _check_text(value: str, what: str) -> None:
    if "\0" in value:
        raise ValueError(f"{what} must not contain a NUL character")


def _check_block(block_n: int) -> None:
    if not 0 <= block_n <= 0xFFFF:
        raise ValueError(f"block number {block_n} does not fit in 16 bits")


def _cstr(value: str) -> bytes:
    return value.encode("utf-8") + b"\0"


@dataclass(frozen=True)
class ReadRequest:
    """RRQ: ask the server for a file."""

    filename: str
    mode: RequestMode = RequestMode.OCTET

    def __post_init__(self) -> None:
        _check_text(self.filename, "filename")

    def to_bytes(self) -> bytes:
        return _U16.pack(_OP_RRQ) + _cstr(self.filename) + _cstr(self.mode.value)

    def __str__(self) -> str:
        return f"RRQ {self.filename} {self.mode}"


@dataclass(frozen=True)
class WriteRequest:
    """WRQ: ask the server to accept a file."""

    filename: str
    mode: RequestMode = RequestMode.OCTET

    def __post_init__(self) -> None:
        _check_text(self.filename, "filename")

    def to_bytes(self) -> bytes:
        return _U16.pack(_OP_WRQ) + _cstr(self.filename) + _cstr(self.mode.value)

    def __str__(self) -> str:
        return f"WRQ {self.filename} {self.mode}"


@dataclass(frozen=True)
class Data:
    """DATA: one block of file contents."""

    block_n: int
    data: bytes = b""

    def __post_init__(self) -> None:
        _check_block(self.block_n)

    def to_bytes(self) -> bytes:
        return _U16.pack(_OP_DATA) + _U16.pack(self.block_n) + bytes(self.data)

    def __str__(self) -> str:
        return f"DATA block:{self.block_n}"


@dataclass(frozen=True)
class Acknowledgment:
    """ACK: acknowledges a block."""

    block_n: int

    def __post_init__(self) -> None:
        _check_block(self.block_n)

    def to_bytes(self) -> bytes:
        return _U16.pack(_OP_ACK) + _U16.pack(self.block_n)

    def __str__(self) -> str:
        return f"ACK block:{self.block_n}"


@dataclass(frozen=True)
class ErrorPacket:
    """ERROR: the transfer failed."""

    code: ErrorCode
    msg: str = ""

    def __post_init__(self) -> None:
        _check_text(self.msg, "message")

    def to_bytes(self) -> bytes:
        return _U16.pack(_OP_ERROR) + _U16.pack(int(self.code)) + _cstr(self.msg)

    def __str__(self) -> str:
        return f"ERROR code:{self.code} msg:{self.msg}"


Packet: TypeAlias = ReadRequest | WriteRequest | Data | Acknowledgment | ErrorPacket


def _decode(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        raise BadString() from None


def _parse_request(body: bytes) -> tuple[str, RequestMode]:
    # Smallest body: a one-character filename plus its NUL, and "mail" plus its NUL.
    if len(body) < 7:
        raise Incomplete(len(body))
    parts = body.split(b"\0", 2)
    if len(parts) < 2:
        raise Incomplete(0)
    filename = _decode(parts[0])
    try:
        mode = RequestMode(parts[1].lower().decode("ascii"))
    except (UnicodeDecodeError, ValueError):
        raise BadString() from None
    return filename, mode


def parse_packet(data: bytes) -> Packet:
    """Parse one TFTP packet from its wire bytes."""
    data = bytes(data)
    if len(data) < 4:
        raise Incomplete(len(data))
    (opcode,) = _U16.unpack_from(data)
    body = data[2:]

    if opcode == _OP_RRQ:
        return ReadRequest(*_parse_request(body))
    if opcode == _OP_WRQ:
        return WriteRequest(*_parse_request(body))
    if opcode == _OP_DATA:
        (block_n,) = _U16.unpack_from(body)
        return Data(block_n, body[2:])
    if opcode == _OP_ACK:
        (block_n,) = _U16.unpack_from(body)
        return Acknowledgment(block_n)
    if opcode == _OP_ERROR:
        if len(body) < 3:
            raise Incomplete(len(body))
        (raw_code,) = _U16.unpack_from(body)
        try:
            code = ErrorCode(raw_code)
        except ValueError:
            raise BadErrorCode(raw_code) from None
        text = body[2:]
        if text[-1] != 0:
            raise BadString()
        msg = text[:-1]
        if b"\0" in msg:
            raise BadString()
        return ErrorPacket(code, _decode(msg))
    raise BadOpcode(opcode)
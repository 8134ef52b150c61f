from tftpclient.errors import (
    BadFilename,
    PacketParseError,
    ProtocolError,
    SocketIoError,
    TftpError,
    TransferTimeout,
    UnexpectedPacket,
)
from tftpclient.parser import Acknowledgment, BadOpcode, ErrorCode


def test_bad_filename_message():
    err = BadFilename()
    assert isinstance(err, TftpError)
    assert str(err) == "Bad filename (not a valid CString)"


def test_timeout_message():
    err = TransferTimeout()
    assert isinstance(err, TftpError)
    assert str(err) == "Timeout while trying to complete transaction"


def test_socket_io_wraps_error():
    cause = OSError("boom")
    err = SocketIoError(cause)
    assert err.error is cause
    assert "boom" in str(err)
    assert str(err).startswith("Socket IO error - ")


def test_parse_error_wraps_parser_error():
    cause = BadOpcode(9)
    err = PacketParseError(cause)
    assert err.error is cause
    assert str(err) == f"Failed to parse incoming packet - `{cause}`"


def test_unexpected_packet_keeps_packet():
    packet = Acknowledgment(3)
    err = UnexpectedPacket(packet)
    assert err.packet == packet
    assert str(err) == "The packet we got back was unexpected"


def test_protocol_error_fields():
    err = ProtocolError(ErrorCode.NO_FILE, "missing")
    assert err.code == ErrorCode.NO_FILE
    assert err.msg == "missing"
    assert "missing" in str(err)
    assert "NO_FILE" in str(err)


def test_all_share_base():
    errors = [
        BadFilename(),
        SocketIoError(OSError()),
        TransferTimeout(),
        PacketParseError(BadOpcode(7)),
        UnexpectedPacket(Acknowledgment(0)),
        ProtocolError(ErrorCode.UNSPEC, ""),
    ]
    assert all(isinstance(e, TftpError) for e in errors)
    assert len({type(e) for e in errors}) == len(errors)
# tftpclient

A small TFTP client that follows RFC 1350. It reads and writes files in
`octet` mode over UDP. Lost packets are retried, and each retry waits longer
than the one before, up to a ceiling that you choose. It uses only the
standard library.

The package contains:

- `tftpclient.blocking`: `download` and `upload` over an ordinary UDP socket.
- `tftpclient.asynchronous`: the same two operations as coroutines, for asyncio.
- `tftpclient.parser`: the TFTP packet types (`ReadRequest`, `WriteRequest`,
  `Data`, `Acknowledgment`, `ErrorPacket`), which encode themselves with
  `to_bytes()`, and `parse_packet()`, which decodes them.
- `tftpclient.errors`: the exceptions raised when a transfer fails.
- `tftpclient.cli`: the `tftpclient` command.

## Installation

```
pip install tftpclient
```

The test suite needs the `test` extra (pytest and pytest-asyncio):

```
pip install "tftpclient[test]"
```

## Blocking use

```python
import socket

from tftpclient.blocking import download, upload

sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
sock.bind(("0.0.0.0", 0))
server = ("127.0.0.1", 69)

upload("/test", b"\xb0\xba\xca\xfe", sock, server, 0.1, 5.0, 8)
payload = download("/test", sock, server, 0.1, 5.0, 8)
assert payload == b"\xb0\xba\xca\xfe"
```

The arguments, in order, are:

- the file name on the server
- the data to send (`upload` only)
- a bound UDP socket
- the server's address, as passed to `socket.sendto`
- the first receive timeout, in seconds
- the largest timeout that backoff may reach
- how many times a packet is sent before giving up

`download` returns the file's contents as `bytes`; `upload` returns `None`.
A timeout or maximum timeout that is not positive, or a retry count below 1,
raises `ValueError`. The socket's previous timeout is restored when the
transfer ends, whether it succeeded or not.

After every timeout the last packet is sent again and the timeout grows by
half, up to the largest timeout. Each new packet starts again from the first
timeout and the full retry count. The server may answer from a different port
than the one you first contacted; the client follows it there, as the
protocol allows.

Data is sent in blocks of 512 bytes (`tftpclient.blocking.BLOCK_SIZE`). A
download ends at the first block shorter than that. A duplicate
acknowledgment during an upload does not cause a data block to be sent again,
which avoids the "Sorcerer's Apprentice" problem.

## Asynchronous use

`tftpclient.asynchronous` has coroutines with the same names and arguments.
Await them from inside a running asyncio event loop:

```python
from tftpclient.asynchronous import download, upload

payload = await download("/test", sock, ("127.0.0.1", 69), 0.1, 5.0, 8)
```

The socket is switched to non-blocking mode for the transfer, and its previous
timeout is restored afterwards.

## Errors

Every transfer failure raises a subclass of `tftpclient.errors.TftpError`:

| Exception | Raised when |
|---|---|
| `BadFilename` | the file name contains a NUL character |
| `SocketIoError` | the socket reported an error (the `OSError` is in `.error`) |
| `TransferTimeout` | every retry ran out without an answer |
| `PacketParseError` | the server sent bytes that are not a valid TFTP packet (the `ParseError` is in `.error`) |
| `UnexpectedPacket` | the packet was valid but does not belong at that point in the transfer (it is in `.packet`) |
| `ProtocolError` | the server sent an ERROR packet; it carries `.code` (an `ErrorCode`) and `.msg` |

When a packet fails to decode, `tftpclient.parser` raises a subclass of
`ParseError` that gives the reason: `Incomplete`, `BadOpcode`, `BadString` or
`BadErrorCode`.

## Working with packets directly

```python
from tftpclient.parser import Acknowledgment, ErrorCode, ErrorPacket, parse_packet

raw = Acknowledgment(42).to_bytes()
assert parse_packet(raw) == Acknowledgment(42)

err = ErrorPacket(ErrorCode.NO_FILE, "missing")
assert str(err) == "ERROR code:File not found msg:missing"
```

Requests take a `RequestMode` (`OCTET`, `NETASCII` or `MAIL`); the mode is
matched without regard to case when parsed. Packet constructors raise
`ValueError` for a NUL inside a file name or message, or for a block number
outside 0–65535.

## Command line

Installing the package also installs a `tftpclient` command:

```
tftpclient [--timeout SECONDS] [--max-timeout SECONDS] [--retries N] [-v] get HOST[:PORT] REMOTE [-o FILE]
tftpclient [--timeout SECONDS] [--max-timeout SECONDS] [--retries N] [-v] put HOST[:PORT] REMOTE LOCAL
```

- `get` downloads `REMOTE` and writes it to standard output, or to `FILE`
  with `-o`.
- `put` uploads `LOCAL` under the name `REMOTE`; `-` reads standard input.
- The port defaults to 69. IPv6 addresses with a port are written
  `[address]:port`.
- `--timeout` (default 0.1), `--max-timeout` (default 5.0) and `--retries`
  (default 8) set the backoff; `-v` logs every packet to standard error.

The command exits with status 0 on success and 1 on failure, printing the
reason to standard error. For the full list of options, run:

```
tftpclient --help
```

## What it does not do

- It is a client only; there is no TFTP server.
- Transfers always use `octet` mode; `netascii` and `mail` exist only as
  packet fields.
- TFTP options such as a larger block size are not negotiated.
- Block numbers do not roll over, so an upload is limited to 65535 blocks.
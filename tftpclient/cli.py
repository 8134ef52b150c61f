"""Command-line front end: fetch or send a single file over TFTP."""

from __future__ import annotations

import argparse
import logging
import socket
import sys
from pathlib import Path
from typing import Any, Sequence

from .blocking import download, upload
from .errors import TftpError

__all__ = ["main"]

DEFAULT_PORT = 69
DEFAULT_TIMEOUT = 0.1
DEFAULT_MAX_TIMEOUT = 5.0
DEFAULT_RETRIES = 8


def _positive_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {text!r}")
    return value


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {text!r}")
    return value


def _server(text: str) -> tuple[str, int]:
    """Split ``host``, ``host:port`` or ``[v6-host]:port`` into host and port."""
    if text.startswith("["):
        host, sep, rest = text[1:].partition("]")
        if not sep or not host:
            raise argparse.ArgumentTypeError(f"bad server address: {text!r}")
        if not rest:
            return host, DEFAULT_PORT
        if not rest.startswith(":"):
            raise argparse.ArgumentTypeError(f"bad server address: {text!r}")
        port_text = rest[1:]
    elif text.count(":") == 1:
        host, _, port_text = text.partition(":")
    else:
        # No port given, or a bare IPv6 address.
        host, port_text = text, ""
    if not host:
        raise argparse.ArgumentTypeError(f"bad server address: {text!r}")
    if not port_text:
        return host, DEFAULT_PORT
    try:
        port = int(port_text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"bad port in {text!r}") from None
    if not 0 < port <= 0xFFFF:
        raise argparse.ArgumentTypeError(f"port out of range in {text!r}")
    return host, port


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tftpclient", description="Transfer a file with a TFTP server."
    )
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=DEFAULT_TIMEOUT,
        help="initial receive timeout in seconds (default: %(default)s)",
    )
    parser.add_argument(
        "--max-timeout",
        type=_positive_float,
        default=DEFAULT_MAX_TIMEOUT,
        help="upper bound for the backed-off timeout (default: %(default)s)",
    )
    parser.add_argument(
        "--retries",
        type=_positive_int,
        default=DEFAULT_RETRIES,
        help="attempts per packet before giving up (default: %(default)s)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="log every packet"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    get = commands.add_parser("get", help="download a file")
    get.add_argument("server", type=_server, help="host[:port]")
    get.add_argument("remote", help="name of the file on the server")
    get.add_argument(
        "-o",
        "--output",
        default="-",
        help="where to write the file; '-' for standard output (default)",
    )

    put = commands.add_parser("put", help="upload a file")
    put.add_argument("server", type=_server, help="host[:port]")
    put.add_argument("remote", help="name to store the file under")
    put.add_argument("local", help="file to send; '-' for standard input")
    return parser


def _open_socket(host: str, port: int) -> tuple[socket.socket, Any]:
    family, kind, proto, _, address = socket.getaddrinfo(
        host, port, type=socket.SOCK_DGRAM
    )[0]
    sock = socket.socket(family, kind, proto)
    try:
        sock.bind(("::", 0) if family == socket.AF_INET6 else ("0.0.0.0", 0))
    except OSError:
        sock.close()
        raise
    return sock, address


def _read_input(local: str) -> bytes:
    if local == "-":
        return sys.stdin.buffer.read()
    return Path(local).read_bytes()


def _write_output(output: str, contents: bytes) -> None:
    if output == "-":
        sys.stdout.buffer.write(contents)
        sys.stdout.buffer.flush()
    else:
        Path(output).write_bytes(contents)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line; returns the process exit status."""
    args = _build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(message)s")

    host, port = args.server
    try:
        payload = _read_input(args.local) if args.command == "put" else b""
        sock, address = _open_socket(host, port)
    except OSError as exc:
        print(f"tftpclient: {exc}", file=sys.stderr)
        return 1

    with sock:
        try:
            if args.command == "get":
                contents = download(
                    args.remote, sock, address, args.timeout, args.max_timeout, args.retries
                )
            else:
                upload(
                    args.remote,
                    payload,
                    sock,
                    address,
                    args.timeout,
                    args.max_timeout,
                    args.retries,
                )
        except TftpError as exc:
            print(f"tftpclient: {exc}", file=sys.stderr)
            return 1

    if args.command == "get":
        try:
            _write_output(args.output, contents)
        except OSError as exc:
            print(f"tftpclient: {exc}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
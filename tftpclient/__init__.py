"""TFTP (RFC 1350) client: packet codec, blocking and asyncio transfers, and a command line."""

__version__ = "0.3.0"

__all__ = ["asynchronous", "blocking", "cli", "errors", "parser"]
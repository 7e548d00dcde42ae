"""Framed TCP client that sends a message and prints the server's reply."""

from __future__ import annotations

import socket
import sys

from . import connection
from .connection import MAX_MSGLEN, TCPConnection, read_frame, write_frame

DEFAULT_PORT = "3490"


class TCPClient(TCPConnection):
    """A TCP socket connected to ``host`` on ``port``."""

    def __init__(self, host, port=DEFAULT_PORT, family=socket.AF_INET, blocking=True):
        super().__init__(family, passive=False, blocking=blocking)
        self._open(host, port)

    def _establish(self, sock, address):
        sock.connect(address)

    def send(self, data):
        """Send what the socket accepts of ``data``; return the bytes sent."""
        return self.sock.send(data)

    def recv(self, size=MAX_MSGLEN):
        """Receive up to ``size`` bytes."""
        return self.sock.recv(size)

    def send_all(self, data):
        """Send every byte of ``data``."""
        connection.send_all(self.sock, data)

    def recv_exactly(self, size):
        """Receive exactly ``size`` bytes."""
        return connection.recv_exactly(self.sock, size)

    def query(self, message):
        """Send ``message`` as one frame and return the reply frame's payload."""
        write_frame(self.sock, message)
        text = message if isinstance(message, str) else bytes(message).decode(errors="replace")
        print(f"Sent Message: {text}")
        reply = read_frame(self.sock)
        print(f"Received: {reply.decode(errors='replace')}")
        return reply


def main(argv=None):
    """Send a greeting to the server at the given address."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) not in (1, 2):
        print("Usage: kvnet-client <ip_address> [port]", file=sys.stderr)
        return 1
    host = args[0]
    port = args[1] if len(args) == 2 else DEFAULT_PORT
    try:
        with TCPClient(host, port, socket.AF_INET) as client:
            client.query("Hello")
    except (OSError, EOFError, ValueError) as exc:
        print(f"query failed: {exc}", file=sys.stderr)
        return 1
    return 0
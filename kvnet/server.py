"""Framed TCP server that acknowledges every message it receives."""

from __future__ import annotations

import logging
import socket
import sys

from .connection import FrameError, TCPConnection, format_address, read_frame, write_frame
from .eventloop import EVENT_READ, EventLoop

logger = logging.getLogger(__name__)

BACKLOG = 10
DEFAULT_PORT = "3490"
REPLY = "Message Received"


class TCPServer(TCPConnection):
    """A listening TCP socket bound to every local address on ``port``."""

    def __init__(self, port=DEFAULT_PORT, family=socket.AF_INET, blocking=True):
        super().__init__(family, passive=True, blocking=blocking)
        self._open(None, port)
        self.sock.listen(BACKLOG)
        logger.info("server: waiting for connections...")

    def _establish(self, sock, address):
        sock.bind(address)

    def accept(self):
        """Accept one queued connection and return ``(socket, address)``."""
        conn, address = self.sock.accept()
        conn.setblocking(True)
        return conn, address

    def handle_request(self, sock):
        """Read one frame from ``sock``, print it and send the acknowledgement.

        Returns the payload that was received.
        """
        payload = read_frame(sock)
        print(f"Client Says: {payload.decode(errors='replace')}")
        write_frame(sock, REPLY)
        return payload


def handle_event(key, mask, loop, server):
    """Accept new connections on the server socket or answer a ready client."""
    if key.fileobj is server.sock:
        try:
            conn, address = server.accept()
        except OSError as exc:
            logger.error("accept: %s", exc)
            return
        host = format_address(address)
        print(f"conn: got connection from {host}")
        loop.add(conn, EVENT_READ)
        logger.info("added connection %s to event loop", host)
        return

    if not mask & EVENT_READ:
        return
    sock = key.fileobj
    logger.info("handling request from %d", key.fd)
    try:
        server.handle_request(sock)
    except FrameError as exc:
        logger.error("received message rejected: %s", exc)
    except (EOFError, OSError) as exc:
        logger.info("client on fd %d dropped: %s", key.fd, exc)
        try:
            loop.remove(sock)
        finally:
            sock.close()


def serve(port=DEFAULT_PORT, family=socket.AF_INET):
    """Run the server forever on ``port``."""
    with TCPServer(port, family) as server, EventLoop([(server.sock, EVENT_READ)]) as loop:
        while True:
            loop.run_once(handle_event, server)


def main(argv=None):
    """Start the server; an optional first argument overrides the port."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) > 1:
        print("Usage: kvnet-server [port]", file=sys.stderr)
        return 1
    port = args[0] if args else DEFAULT_PORT
    logging.basicConfig(level=logging.INFO)
    try:
        serve(port)
    except KeyboardInterrupt:
        return 0
    except OSError as exc:
        print(f"server failed: {exc}", file=sys.stderr)
        return 1
    return 0
"""TCP connection base class and length-prefixed framing helpers."""

from __future__ import annotations

import abc
import logging
import socket
import struct

logger = logging.getLogger(__name__)

MAX_MSGLEN = 4096
HEADER = struct.Struct("<i")


class FrameError(ValueError):
    """Raised when a frame header announces an invalid payload length."""


class TCPConnection(abc.ABC):
    """A TCP endpoint; subclasses decide whether it binds or connects."""

    def __init__(self, family=socket.AF_INET, passive=False, blocking=True):
        self.family = family
        self.flags = socket.AI_PASSIVE if passive else 0
        self.blocking = blocking
        self.sock: socket.socket | None = None

    @abc.abstractmethod
    def _establish(self, sock, address):
        """Bind or connect ``sock`` to ``address``."""

    def _open(self, host, port):
        """Create a socket on the first address that accepts ``_establish``."""
        candidates = socket.getaddrinfo(
            host, port, self.family, socket.SOCK_STREAM, 0, self.flags
        )
        for family, socktype, proto, _canonname, address in candidates:
            try:
                sock = socket.socket(family, socktype, proto)
            except OSError as exc:
                logger.warning("socket: %s", exc)
                continue
            try:
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
                self._establish(sock, address)
            except OSError as exc:
                sock.close()
                logger.warning("establishing endpoint %s failed: %s", address, exc)
                continue
            sock.setblocking(self.blocking)
            self.sock = sock
            return sock
        raise ConnectionError(f"failed to establish endpoint for {host}:{port}")

    def fileno(self):
        """Return the socket's descriptor, or -1 when no socket is open."""
        return self.sock.fileno() if self.sock is not None else -1

    def close(self):
        if self.sock is not None:
            self.sock.close()
            self.sock = None
            logger.debug("closed socket")

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def send_all(sock, data):
    """Send every byte of ``data``, raising ``OSError`` on failure."""
    sock.sendall(data)


def recv_exactly(sock, size):
    """Receive exactly ``size`` bytes, raising ``EOFError`` if the peer closes."""
    buffer = bytearray()
    while len(buffer) < size:
        chunk = sock.recv(size - len(buffer))
        if not chunk:
            raise EOFError(
                f"connection closed after {len(buffer)} of {size} bytes"
            )
        buffer += chunk
    return bytes(buffer)


def encode_frame(payload):
    """Prefix ``payload`` with its length as a 4-byte header."""
    if isinstance(payload, str):
        payload = payload.encode()
    return HEADER.pack(len(payload)) + bytes(payload)


def read_frame(sock):
    """Read one length-prefixed frame and return its payload."""
    (length,) = HEADER.unpack(recv_exactly(sock, HEADER.size))
    if length < 0 or length > MAX_MSGLEN:
        raise FrameError(f"frame length {length} outside 0..{MAX_MSGLEN}")
    return recv_exactly(sock, length)


def write_frame(sock, payload):
    """Send ``payload`` as one length-prefixed frame."""
    send_all(sock, encode_frame(payload))


def format_address(address):
    """Return the host part of an IPv4 or IPv6 socket address."""
    if isinstance(address, (tuple, list)):
        return address[0]
    return str(address)
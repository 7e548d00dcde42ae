"""A small readiness loop over the platform's best selector."""

from __future__ import annotations

import logging
import selectors
import socket

logger = logging.getLogger(__name__)

MAX_EVENTS = 1024
EVENT_READ = selectors.EVENT_READ
EVENT_WRITE = selectors.EVENT_WRITE

_MSG_DONTWAIT = getattr(socket, "MSG_DONTWAIT", 0)


def _hung_up(fileobj):
    """Report whether a readable connected socket has been closed by its peer."""
    if not isinstance(fileobj, socket.socket):
        return False
    try:
        data = fileobj.recv(1, socket.MSG_PEEK | _MSG_DONTWAIT)
    except (BlockingIOError, InterruptedError):
        return False
    except (ConnectionResetError, ConnectionAbortedError):
        return True
    except OSError:
        # Listening or otherwise unconnected sockets cannot be peeked.
        return False
    return data == b""


class EventLoop:
    """Watches file objects and dispatches the ready ones to a callback.

    Watched file objects are never closed by the loop itself, except for
    connections found hung up by ``run_once``.
    """

    def __init__(self, entries=()):
        logger.debug("initializing event loop")
        self._selector = selectors.DefaultSelector()
        for fileobj, events in entries:
            fd = fileobj if isinstance(fileobj, int) else fileobj.fileno()
            if fd < 0:
                logger.warning("could not add file descriptor %d: not a valid fd", fd)
                continue
            self._selector.register(fileobj, events)

    def add(self, fileobj, events):
        """Start watching ``fileobj`` for ``events``."""
        self._selector.register(fileobj, events)

    def remove(self, fileobj):
        """Stop watching ``fileobj``."""
        self._selector.unregister(fileobj)

    def _select(self, timeout):
        return self._selector.select(timeout)[:MAX_EVENTS]

    def run_once(self, callback, userdata=None, timeout=None):
        """Wait once and call ``callback(key, mask, loop, userdata)`` per ready object.

        Sockets whose peer has hung up are removed, closed and not dispatched.
        Returns the number of ready objects.
        """
        ready = self._select(timeout)
        for key, mask in ready:
            if mask & EVENT_READ and _hung_up(key.fileobj):
                logger.info("client on fd %d disconnected", key.fd)
                try:
                    self.remove(key.fileobj)
                finally:
                    key.fileobj.close()
                continue
            callback(key, mask, self, userdata)
        return len(ready)

    def run_batch(self, callback, userdata=None, timeout=None):
        """Wait once and hand every ready ``(key, mask)`` pair to ``callback`` at once.

        Hang-ups are left to the callback. Returns the number of ready objects.
        """
        ready = self._select(timeout)
        if ready:
            callback(ready, self, userdata)
        return len(ready)

    def close(self):
        """Release the selector; watched file objects stay open."""
        logger.debug("closing event loop")
        self._selector.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
# kvnet

A small TCP server and client that exchange length-prefixed messages.
Each message on the wire is a 4-byte little-endian signed length header
followed by that many bytes of payload. A received payload may be at most
4096 bytes.

The server listens on port 3490 by default. It watches its listening socket
and every client connection with a selector-based event loop. For each
message it receives, it prints `Client Says: <message>` and replies with
`Message Received`. The client connects, sends `Hello`, prints what it sent
and the reply, and exits.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install ".[test]"
```

## Command-line use

Start the server (an optional argument sets the port):

```
kvnet-server
kvnet-server 4000
```

In another terminal, query it (an optional second argument sets the port):

```
kvnet-client 127.0.0.1
kvnet-client 127.0.0.1 4000
```

`kvnet-client` takes the server address and, optionally, a port. It exits
with status 1 if the arguments are wrong or the query fails. `kvnet-server`
exits with status 1 if given more than one argument or if the socket cannot
be set up, and with status 0 on Ctrl-C.

## Library use

```python
from kvnet.client import TCPClient

with TCPClient("127.0.0.1", "3490") as client:
    reply = client.query("Hello")   # b"Message Received"
```

`TCPClient` also offers `send`, `recv`, `send_all` and `recv_exactly` on its
connected socket.

### Framing helpers (`kvnet.connection`)

- `encode_frame(payload)` returns the header and payload as bytes; a `str`
  payload is UTF-8 encoded.
- `write_frame(sock, payload)` sends one frame.
- `read_frame(sock)` reads one frame and returns its payload. A header
  announcing a length below 0 or above 4096 raises `FrameError` (a
  `ValueError`).
- `send_all(sock, data)` sends a whole buffer.
- `recv_exactly(sock, size)` reads exactly `size` bytes and raises
  `EOFError` if the peer closes first.
- `format_address(address)` returns the host part of a socket address.

`TCPConnection` is the common base of `TCPClient` and `TCPServer`; it is a
context manager that closes its socket on exit.

### Event loop (`kvnet.eventloop`)

`EventLoop` wraps the standard `selectors` module. It is built from an
iterable of `(fileobj, events)` pairs and has `add`, `remove` and `close`.

- `run_once(callback, userdata=None, timeout=None)` waits once and calls
  `callback(key, mask, loop, userdata)` for each ready file object. Sockets
  whose peer has hung up are removed, closed and not passed on.
- `run_batch(callback, userdata=None, timeout=None)` waits once and calls
  `callback(ready, loop, userdata)` with the whole list of ready
  `(key, mask)` pairs; hang-ups are left to the callback.

Both return the number of ready file objects.

### Server (`kvnet.server`)

`TCPServer(port, family, blocking)` binds and listens; `accept()` returns
`(socket, address)` and `handle_request(sock)` answers one frame and returns
its payload. `handle_event` is the callback the server uses with
`EventLoop.run_once`, and `serve(port, family)` runs the server forever.

## What this package does not do

The server stores nothing and understands no commands: every message,
whatever it says, is answered with `Message Received`. There is no key-value
storage, no command protocol and no persistence.

## Tests

```
pytest
```
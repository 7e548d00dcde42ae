"""Length-prefixed TCP messaging: framing helpers, a selector event loop, server and client."""

__version__ = "0.1.0"
__all__ = ["connection", "eventloop", "server", "client"]
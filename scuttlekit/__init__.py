"""Secure Scuttlebutt identities, feed messages, private boxes, MUXRPC framing and API calls."""

__version__ = "0.1.0"
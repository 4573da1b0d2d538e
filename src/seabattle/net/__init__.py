"""Peer-to-peer wire protocol, transport and session loop."""

from .protocol import ProtocolError, decode_move, decode_result, encode_move, encode_result
from .session import PeerSession
from .transport import Connection, ConnectionClosedError, TransportError, connect, listen

__all__ = [
    "Connection",
    "ConnectionClosedError",
    "PeerSession",
    "ProtocolError",
    "TransportError",
    "connect",
    "decode_move",
    "decode_result",
    "encode_move",
    "encode_result",
    "listen",
]

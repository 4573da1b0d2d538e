"""Exact-length byte exchange over a single TCP connection."""

from __future__ import annotations

import ipaddress
import logging
import socket
from types import TracebackType
from typing import Optional, Type

logger = logging.getLogger(__name__)


class TransportError(ConnectionError):
    """The connection to the peer failed."""


class ConnectionClosedError(TransportError):
    """The peer closed the connection before a full message arrived."""


class Connection:
    """Blocking socket wrapper that only moves whole messages."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock

    def read_exact(self, size: int) -> bytes:
        chunks: list[bytes] = []
        remaining = size
        while remaining:
            try:
                chunk = self._sock.recv(remaining)
            except OSError as exc:
                raise TransportError(f"Receive failed: {exc}") from exc
            if not chunk:
                logger.warning(
                    "peer_closed", extra={"expected": size, "received": size - remaining}
                )
                raise ConnectionClosedError(
                    f"Peer closed the connection after {size - remaining} of {size} bytes."
                )
            chunks.append(chunk)
            remaining -= len(chunk)
        data = b"".join(chunks)
        logger.debug("bytes_received", extra={"payload": data})
        return data

    def write_exact(self, data: bytes) -> None:
        try:
            self._sock.sendall(data)
        except OSError as exc:
            raise TransportError(f"Send failed: {exc}") from exc
        logger.debug("bytes_sent", extra={"payload": data})

    def close(self) -> None:
        self._sock.close()

    def __enter__(self) -> Connection:
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()


def listen(port: int, host: str = "0.0.0.0") -> Connection:
    """Wait for exactly one peer on ``port`` and return its connection."""
    try:
        with socket.create_server((host, port)) as server:
            logger.info("listening", extra={"host": host, "port": port})
            peer, address = server.accept()
    except OSError as exc:
        raise TransportError(f"Can't accept connection on port {port}: {exc}") from exc
    logger.info("peer_connected", extra={"peer": f"{address[0]}:{address[1]}"})
    return Connection(peer)


def connect(host: str, port: int) -> Connection:
    """Connect to a listening peer; ``host`` must be an IP address literal."""
    try:
        address = ipaddress.ip_address(host)
    except ValueError as exc:
        raise ValueError(f"Wrong IP format: {host!r}") from exc
    try:
        sock = socket.create_connection((str(address), port))
    except OSError as exc:
        raise TransportError(f"Can't connect to {host}:{port}: {exc}") from exc
    logger.info("connected", extra={"host": host, "port": port})
    return Connection(sock)

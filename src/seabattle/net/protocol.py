"""Byte codec for moves (2 bytes) and shot results (1 byte)."""

from __future__ import annotations

from seabattle.engine.board import ShotResult
from seabattle.engine.fleet import BOARD_SIZE, COLUMN_LABELS, ROW_LABELS, Coordinate

MOVE_SIZE = 2
RESULT_SIZE = 1


class ProtocolError(ValueError):
    """Bytes or text that do not form a valid move or result."""


def encode_move(coord: Coordinate) -> bytes:
    """``Coordinate(x=2, y=0)`` becomes ``b"A3"``: row letter, then column digit."""
    if not coord.is_on_board():
        raise ProtocolError(f"Move {coord} is off the board.")
    return f"{ROW_LABELS[coord.y]}{COLUMN_LABELS[coord.x]}".encode("ascii")


def decode_move(data: bytes) -> Coordinate:
    if len(data) != MOVE_SIZE:
        raise ProtocolError(f"Move must be {MOVE_SIZE} bytes, got {len(data)}.")
    try:
        text = data.decode("ascii")
    except UnicodeDecodeError as exc:
        raise ProtocolError(f"Move {data!r} is not ASCII.") from exc
    return _parse_move(text)


def parse_move_text(text: str) -> Coordinate:
    """Parse a move typed by the player, e.g. ``" c5 "``."""
    return _parse_move(text.strip().upper())


def move_label(coord: Coordinate) -> str:
    return encode_move(coord).decode("ascii")


def encode_result(result: ShotResult) -> bytes:
    return str(result.value).encode("ascii")


def decode_result(data: bytes) -> ShotResult:
    if len(data) != RESULT_SIZE:
        raise ProtocolError(f"Result must be {RESULT_SIZE} byte, got {len(data)}.")
    code = data[0] - ord("0")
    try:
        return ShotResult(code)
    except ValueError as exc:
        raise ProtocolError(f"Unknown result code {data!r}.") from exc


def _parse_move(text: str) -> Coordinate:
    if len(text) != MOVE_SIZE:
        raise ProtocolError(f"Move must be a letter and a digit, got {text!r}.")
    row, column = text[0], text[1]
    if row not in ROW_LABELS or column not in COLUMN_LABELS:
        raise ProtocolError(
            f"Move {text!r} is outside A-{ROW_LABELS[-1]} / 1-{BOARD_SIZE}."
        )
    return Coordinate(COLUMN_LABELS.index(column), ROW_LABELS.index(row))

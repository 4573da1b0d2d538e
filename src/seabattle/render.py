"""Console rendering of the own board next to the tracking board."""

from __future__ import annotations

from seabattle.engine.board import Board
from seabattle.engine.fleet import BOARD_SIZE, COLUMN_LABELS, ROW_LABELS

LEFT_PAD = "  "
GAP = "    "


def digit_line() -> str:
    return "  " + " ".join(COLUMN_LABELS) + "  "


def board_line(board: Board, y: int) -> str:
    label = ROW_LABELS[y]
    return f"{label} {board.render_row(y)} {label}"


def format_board_pair(left: Board, right: Board) -> str:
    """Both boards side by side, framed by row letters and column digits."""
    header = LEFT_PAD + digit_line() + GAP + digit_line()
    lines = [header]
    for y in range(BOARD_SIZE):
        lines.append(LEFT_PAD + board_line(left, y) + GAP + board_line(right, y))
    lines.append(header)
    return "\n".join(lines)

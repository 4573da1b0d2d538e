"""Shared fixtures: a scripted random source and the layout it produces."""

from __future__ import annotations

from typing import Iterable

import pytest
from seabattle.engine.board import Board

# (start index into the sorted free cells, direction index) per ship, in fleet order.
LAYOUT_SCRIPT = [56, 0, 40, 0, 24, 0, 11, 0, 12, 1, 15, 0, 0, 0, 1, 0, 0, 0, 0, 0]

LAYOUT_ROWS = [
    "o . . o . o . o",
    ". . . o . o . o",
    ". . . o . o . o",
    ". o . . . . . o",
    ". o . o . o . .",
    ". . . . . . . .",
    ". . . o o . . o",
    "o . . . . . . o",
]


class ScriptedRandom:
    """Random source that replays fixed ``randint`` results."""

    def __init__(self, values: Iterable[int]) -> None:
        self._values = iter(values)
        self.calls = 0

    def randint(self, a: int, b: int) -> int:
        value = next(self._values)
        self.calls += 1
        assert a <= value <= b, f"scripted value {value} outside [{a}, {b}]"
        return value


@pytest.fixture
def scripted_random():
    return ScriptedRandom


@pytest.fixture
def layout_board() -> Board:
    return Board.generate_random(ScriptedRandom(LAYOUT_SCRIPT))


@pytest.fixture
def layout_rows() -> list[str]:
    return list(LAYOUT_ROWS)


@pytest.fixture
def layout_script() -> list[int]:
    return list(LAYOUT_SCRIPT)


@pytest.fixture
def layout_ship_cells() -> list[tuple[int, int]]:
    """(x, y) of every ship segment in the scripted layout."""
    return [
        (x, y)
        for y, row in enumerate(LAYOUT_ROWS)
        for x, symbol in enumerate(row.split())
        if symbol == "o"
    ]

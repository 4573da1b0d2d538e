"""Fleet and geometry primitives for the sea battle engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

BOARD_SIZE = 8
ROW_LABELS = "ABCDEFGH"
COLUMN_LABELS = "12345678"


@dataclass(frozen=True)
class Coordinate:
    """Immutable board coordinate (``x`` is the column, ``y`` the row)."""

    x: int
    y: int

    def is_on_board(self) -> bool:
        return 0 <= self.x < BOARD_SIZE and 0 <= self.y < BOARD_SIZE

    def step(self, direction: Direction, distance: int = 1) -> Coordinate:
        """Return the coordinate ``distance`` cells away along ``direction``."""
        return Coordinate(self.x + direction.dx * distance, self.y + direction.dy * distance)


class Direction(Enum):
    """Axis-aligned unit vectors, ordered as drawn during placement."""

    DOWN = (0, 1)
    RIGHT = (1, 0)
    UP = (0, -1)
    LEFT = (-1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    def flanks(self) -> tuple[tuple[int, int], tuple[int, int]]:
        """Offsets of the two cells beside a walk in this direction."""
        return (self.dy, self.dx), (-self.dy, -self.dx)


class ShipType(Enum):
    """Ship classes and their lengths."""

    BATTLESHIP = 4
    CRUISER = 3
    DESTROYER = 2
    SUBMARINE = 1

    @property
    def length(self) -> int:
        """Return the number of contiguous cells the ship occupies."""
        return self.value


FLEET: tuple[ShipType, ...] = (
    ShipType.BATTLESHIP,
    ShipType.CRUISER,
    ShipType.CRUISER,
    ShipType.DESTROYER,
    ShipType.DESTROYER,
    ShipType.DESTROYER,
    ShipType.SUBMARINE,
    ShipType.SUBMARINE,
    ShipType.SUBMARINE,
    ShipType.SUBMARINE,
)

FLEET_WEIGHT = sum(ship_type.length for ship_type in FLEET)


def ship_cells(start: Coordinate, direction: Direction, length: int) -> list[Coordinate]:
    """Return the ordered cells a ship of ``length`` covers from ``start``."""
    return [start.step(direction, offset) for offset in range(length)]


def neighbourhood(coord: Coordinate) -> list[Coordinate]:
    """Return the cell itself and its up-to-8 on-board neighbours."""
    cells: list[Coordinate] = []
    for delta_y in (-1, 0, 1):
        for delta_x in (-1, 0, 1):
            neighbour = Coordinate(coord.x + delta_x, coord.y + delta_y)
            if neighbour.is_on_board():
                cells.append(neighbour)
    return cells

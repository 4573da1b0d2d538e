"""Single-player board: random fleet layout, shot resolution, kill deduction."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum

from seabattle.telemetry import get_meter, get_tracer

from .fleet import (
    BOARD_SIZE,
    FLEET,
    FLEET_WEIGHT,
    Coordinate,
    Direction,
    neighbourhood,
    ship_cells,
)

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.board")
meter = get_meter("seabattle.engine.board")

GENERATION_COUNTER = meter.create_counter(
    "seabattle_engine_generation_attempts",
    unit="1",
    description="Whole-board layout attempts, by outcome",
)

SHOT_COUNTER = meter.create_counter(
    "seabattle_engine_shots",
    unit="1",
    description="Shots resolved against an own board",
)

MAX_PLACEMENT_ATTEMPTS = 100
PLACEMENT_DIRECTIONS: tuple[Direction, ...] = tuple(Direction)


class CellState(Enum):
    """What a board knows about one cell. Values are the display symbols."""

    UNKNOWN = "?"
    EMPTY = "."
    SHIP = "o"
    KILLED = "x"

    @property
    def symbol(self) -> str:
        return self.value


class ShotResult(Enum):
    """Outcome of a shot; values double as the wire codes."""

    MISS = 0
    HIT = 1
    KILL = 2


def _full_grid(state: CellState) -> list[CellState]:
    return [state] * (BOARD_SIZE * BOARD_SIZE)


@dataclass
class Board:
    """An 8×8 grid plus the number of ship segments still afloat.

    The same structure serves as the owner's own board (true layout, cells turn
    ``KILLED`` as the peer hits them) and as the tracking board for the peer,
    which starts ``UNKNOWN`` and only ever learns ``EMPTY``/``KILLED`` facts.
    """

    cells: list[CellState] = field(default_factory=lambda: _full_grid(CellState.UNKNOWN))
    remaining_ship_weight: int = FLEET_WEIGHT
    owner: str = "unknown"

    @classmethod
    def unknown(cls, owner: str = "opponent") -> Board:
        """Tracking board with nothing known yet."""
        return cls(cells=_full_grid(CellState.UNKNOWN), owner=owner)

    @classmethod
    def empty(cls, owner: str = "me") -> Board:
        return cls(cells=_full_grid(CellState.EMPTY), owner=owner)

    @classmethod
    def generate_random(cls, rng: random.Random, owner: str = "me") -> Board:
        """Lay the whole fleet out at random, restarting from scratch on a dead end.

        ``rng`` only needs ``randint(a, b)``; given the same seeded source the
        layout is always the same.
        """
        with tracer.start_as_current_span("board.generate_random") as span:
            span.set_attribute("board.owner", owner)
            restarts = 0
            while True:
                board = cls._try_generate(rng, owner)
                if board is not None:
                    break
                restarts += 1
                GENERATION_COUNTER.add(1, attributes={"result": "restart", "owner": owner})
                logger.debug(
                    "board_generation_restart", extra={"owner": owner, "restarts": restarts}
                )
            GENERATION_COUNTER.add(1, attributes={"result": "success", "owner": owner})
            span.set_attribute("board.restarts", restarts)
            logger.info("board_generated", extra={"owner": owner, "restarts": restarts})
            return board

    @classmethod
    def _try_generate(cls, rng: random.Random, owner: str) -> Board | None:
        board = cls.empty(owner)
        available = {Coordinate(x, y) for x in range(BOARD_SIZE) for y in range(BOARD_SIZE)}
        for ship_type in FLEET:
            placement = _draw_placement(rng, available, ship_type.length)
            if placement is None:
                return None
            for coord in placement:
                board._set(coord, CellState.SHIP)
                available.difference_update(neighbourhood(coord))
        return board

    def cell(self, x: int, y: int) -> CellState:
        return self._get(Coordinate(x, y))

    def shoot(self, x: int, y: int) -> ShotResult:
        """Resolve the peer's shot at ``(x, y)`` against this (own) board."""
        with tracer.start_as_current_span("board.shoot") as span:
            span.set_attribute("shot.x", x)
            span.set_attribute("shot.y", y)
            span.set_attribute("board.owner", self.owner)
            target = Coordinate(x, y)
            if self._get(target) is not CellState.SHIP:
                result = ShotResult.MISS
            else:
                self._set(target, CellState.KILLED)
                self.remaining_ship_weight -= 1
                result = ShotResult.KILL if self._is_sunk(target) else ShotResult.HIT

            span.set_attribute("shot.outcome", result.name.lower())
            SHOT_COUNTER.add(1, attributes={"outcome": result.name.lower(), "owner": self.owner})
            logger.info(
                "shot_resolved",
                extra={
                    "x": x,
                    "y": y,
                    "outcome": result.name,
                    "remaining": self.remaining_ship_weight,
                    "owner": self.owner,
                },
            )
            return result

    def mark_miss(self, x: int, y: int) -> None:
        target = Coordinate(x, y)
        if self._get(target) is CellState.UNKNOWN:
            self._set(target, CellState.EMPTY)

    def mark_hit(self, x: int, y: int) -> None:
        target = Coordinate(x, y)
        if self._get(target) is not CellState.UNKNOWN:
            return
        self.remaining_ship_weight -= 1
        self._set(target, CellState.KILLED)

    def mark_kill(self, x: int, y: int) -> None:
        """Record a reported kill and rule out every cell around the sunk ship.

        The ship's other segments are the ``KILLED`` cells already recorded in
        line with ``(x, y)``; the walk passes through them and stops at the
        first cell beyond.
        """
        target = Coordinate(x, y)
        if self._get(target) is not CellState.UNKNOWN:
            return
        self.mark_hit(x, y)
        for direction in Direction:
            self._mark_perimeter_towards(target, direction)
        logger.debug("kill_marked", extra={"x": x, "y": y, "owner": self.owner})

    def apply_result(self, x: int, y: int, result: ShotResult) -> None:
        """Record the peer's answer to our shot at ``(x, y)``."""
        if result is ShotResult.MISS:
            self.mark_miss(x, y)
        elif result is ShotResult.HIT:
            self.mark_hit(x, y)
        else:
            self.mark_kill(x, y)

    def is_destroyed(self) -> bool:
        return self.remaining_ship_weight == 0

    def render_row(self, y: int) -> str:
        """Symbols of row ``y`` separated by single spaces."""
        return " ".join(self.cell(x, y).symbol for x in range(BOARD_SIZE))

    def _is_sunk(self, coord: Coordinate) -> bool:
        return all(self._is_sunk_towards(coord, direction) for direction in Direction)

    def _is_sunk_towards(self, coord: Coordinate, direction: Direction) -> bool:
        cursor = coord
        while cursor.is_on_board():
            state = self._get(cursor)
            if state is CellState.EMPTY:
                return True
            if state is not CellState.KILLED:
                return False
            cursor = cursor.step(direction)
        return True

    def _mark_perimeter_towards(self, coord: Coordinate, direction: Direction) -> None:
        cursor = coord
        while cursor.is_on_board():
            for delta_x, delta_y in direction.flanks():
                self._mark_empty(Coordinate(cursor.x + delta_x, cursor.y + delta_y))
            self._mark_empty(cursor)
            if self._get(cursor) is not CellState.KILLED:
                return
            cursor = cursor.step(direction)

    def _mark_empty(self, coord: Coordinate) -> None:
        if coord.is_on_board() and self._get(coord) is CellState.UNKNOWN:
            self._set(coord, CellState.EMPTY)

    def _get(self, coord: Coordinate) -> CellState:
        return self.cells[coord.x + coord.y * BOARD_SIZE]

    def _set(self, coord: Coordinate, state: CellState) -> None:
        self.cells[coord.x + coord.y * BOARD_SIZE] = state


def _draw_placement(
    rng: random.Random, available: set[Coordinate], length: int
) -> list[Coordinate] | None:
    """Draw start cells and directions until a ship of ``length`` fits."""
    for _ in range(MAX_PLACEMENT_ATTEMPTS):
        if not available:
            return None
        candidates = sorted(available, key=lambda coord: (coord.x, coord.y))
        start = candidates[rng.randint(0, len(candidates) - 1)]
        direction = PLACEMENT_DIRECTIONS[rng.randint(0, len(PLACEMENT_DIRECTIONS) - 1)]
        cells = ship_cells(start, direction, length)
        if all(cell.is_on_board() and cell in available for cell in cells):
            return cells
    return None

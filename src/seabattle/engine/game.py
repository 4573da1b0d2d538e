"""Turn-taking state for one side of a two-peer match."""

from __future__ import annotations

import logging
from enum import Enum

from seabattle.telemetry import get_meter, get_tracer

from .board import Board, ShotResult
from .fleet import Coordinate

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.game")
meter = get_meter("seabattle.engine.game")

TURN_COUNTER = meter.create_counter(
    "seabattle_engine_turns",
    unit="1",
    description="Shots exchanged in a SeabattleGame, by side and outcome",
)


class GamePhase(Enum):
    """High-level lifecycle of a match."""

    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


class Side(Enum):
    """The two participants, seen from this process."""

    ME = "me"
    PEER = "peer"

    def opponent(self) -> Side:
        return Side.PEER if self is Side.ME else Side.ME


class SeabattleGame:
    """Owns this side's boards and decides whose turn it is.

    A hit or a kill lets the shooter fire again; a miss hands the turn over.
    """

    def __init__(self, own: Board, *, my_turn: bool, tracking: Board | None = None) -> None:
        self.own = own
        self.tracking = tracking if tracking is not None else Board.unknown()
        self.current: Side = Side.ME if my_turn else Side.PEER
        self.phase: GamePhase = GamePhase.IN_PROGRESS
        self.winner: Side | None = None
        self._refresh_phase()

    @property
    def my_turn(self) -> bool:
        return self.current is Side.ME

    @property
    def is_over(self) -> bool:
        return self.phase is GamePhase.FINISHED

    def receive_shot(self, coord: Coordinate) -> ShotResult:
        """Resolve the peer's shot against the own board."""
        with tracer.start_as_current_span("game.receive_shot") as span:
            span.set_attribute("x", coord.x)
            span.set_attribute("y", coord.y)
            self._require_turn(Side.PEER)
            result = self.own.shoot(coord.x, coord.y)
            self._advance(Side.PEER, result)
            span.set_attribute("result", result.name.lower())
            return result

    def apply_result(self, coord: Coordinate, result: ShotResult) -> None:
        """Record the peer's answer to our shot on the tracking board."""
        with tracer.start_as_current_span("game.apply_result") as span:
            span.set_attribute("x", coord.x)
            span.set_attribute("y", coord.y)
            span.set_attribute("result", result.name.lower())
            self._require_turn(Side.ME)
            self.tracking.apply_result(coord.x, coord.y, result)
            self._advance(Side.ME, result)

    def _require_turn(self, side: Side) -> None:
        if self.phase is not GamePhase.IN_PROGRESS:
            logger.error("turn_rejected_game_finished", extra={"side": side.value})
            raise RuntimeError("Game is already finished.")
        if side is not self.current:
            logger.error(
                "turn_rejected_wrong_side",
                extra={"side": side.value, "current": self.current.value},
            )
            raise RuntimeError(f"It is not the {side.value} side's turn.")

    def _advance(self, shooter: Side, result: ShotResult) -> None:
        TURN_COUNTER.add(1, attributes={"shooter": shooter.value, "result": result.name.lower()})
        if result is ShotResult.MISS:
            self.current = shooter.opponent()
        self._refresh_phase()

    def _refresh_phase(self) -> None:
        if self.own.is_destroyed():
            self.winner = Side.PEER
        elif self.tracking.is_destroyed():
            self.winner = Side.ME
        else:
            return
        self.phase = GamePhase.FINISHED
        logger.info("game_finished", extra={"winner": self.winner.value})

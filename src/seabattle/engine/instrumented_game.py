"""SeabattleGame with per-match spans, metrics and log lines."""

from __future__ import annotations

import time

from seabattle.engine.board import Board, ShotResult
from seabattle.engine.fleet import Coordinate
from seabattle.engine.game import SeabattleGame
from seabattle.telemetry import get_logger, get_tracer, record_duration, record_game_metric


class InstrumentedSeabattleGame(SeabattleGame):
    """Wraps SeabattleGame with tracing, metrics, and logging."""

    def __init__(self, own: Board, *, my_turn: bool, tracking: Board | None = None) -> None:
        self._logger = get_logger("seabattle.engine")
        self._tracer = get_tracer("seabattle.engine")
        self._game_span_cm = None
        self._game_span = None
        self._game_start_time = time.perf_counter()
        self._shots_fired = 0
        self._shots_received = 0
        self._completed = False
        super().__init__(own, my_turn=my_turn, tracking=tracking)
        self._start_game_span(my_turn)

    def receive_shot(self, coord: Coordinate) -> ShotResult:
        with self._tracer.start_as_current_span("seabattle.engine.receive_shot") as span:
            span.set_attribute("coord.x", coord.x)
            span.set_attribute("coord.y", coord.y)
            try:
                result = super().receive_shot(coord)
            except RuntimeError as exc:
                self._reject(span, exc, "receive_shot")
                raise

            self._shots_received += 1
            span.set_attribute("shot_outcome", result.name)
            record_game_metric(
                "seabattle_shots_received_total", 1, {"result": result.name.lower()}
            )
            self._logger.info(
                "receive_shot coord=(%d,%d) outcome=%s remaining=%d",
                coord.x,
                coord.y,
                result.name,
                self.own.remaining_ship_weight,
            )
            self._finish_if_over()
            return result

    def apply_result(self, coord: Coordinate, result: ShotResult) -> None:
        with self._tracer.start_as_current_span("seabattle.engine.apply_result") as span:
            span.set_attribute("coord.x", coord.x)
            span.set_attribute("coord.y", coord.y)
            span.set_attribute("shot_outcome", result.name)
            try:
                super().apply_result(coord, result)
            except RuntimeError as exc:
                self._reject(span, exc, "apply_result")
                raise

            self._shots_fired += 1
            record_game_metric(
                "seabattle_results_applied_total", 1, {"result": result.name.lower()}
            )
            self._logger.info(
                "apply_result coord=(%d,%d) outcome=%s", coord.x, coord.y, result.name
            )
            self._finish_if_over()

    def _reject(self, span, exc: RuntimeError, operation: str) -> None:
        record_game_metric(
            "seabattle_game_rejected_turns_total", 1, {"operation": operation}
        )
        span.record_exception(exc)
        span.set_attribute("error", True)
        self._logger.error("Rejected %s: %s", operation, exc)

    def _start_game_span(self, my_turn: bool) -> None:
        self._game_span_cm = self._tracer.start_as_current_span("seabattle.engine.game")
        self._game_span = self._game_span_cm.__enter__()
        self._game_span.set_attribute("first_move", "me" if my_turn else "peer")

    def _finish_if_over(self) -> None:
        if not self.is_over or self._completed:
            return
        self._completed = True
        duration = time.perf_counter() - self._game_start_time
        winner = self.winner.value if self.winner else "unknown"
        turns = self._shots_fired + self._shots_received

        record_game_metric("seabattle_game_completed_total", 1, {"winner": winner})
        record_duration("seabattle_game_duration_seconds", duration, {"winner": winner})

        with self._tracer.start_as_current_span("seabattle.engine.game_complete") as span:
            span.set_attribute("winner", winner)
            span.set_attribute("turns", turns)
            span.set_attribute("duration_ms", duration * 1000)

        if self._game_span is not None:
            self._game_span.set_attribute("winner", winner)
            self._game_span.set_attribute("turns", turns)

        self._logger.info("Game finished. Winner=%s turns=%d duration_s=%.3f", winner, turns, duration)
        self._close_game_span()

    def _close_game_span(self) -> None:
        if self._game_span_cm is not None:
            self._game_span_cm.__exit__(None, None, None)
            self._game_span_cm = None
            self._game_span = None

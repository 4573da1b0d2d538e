"""Board engine and turn-taking game state."""

from .board import Board, CellState, ShotResult
from .fleet import BOARD_SIZE, FLEET, FLEET_WEIGHT, Coordinate, Direction, ShipType
from .game import GamePhase, SeabattleGame, Side

__all__ = [
    "BOARD_SIZE",
    "FLEET",
    "FLEET_WEIGHT",
    "Board",
    "CellState",
    "Coordinate",
    "Direction",
    "GamePhase",
    "SeabattleGame",
    "ShipType",
    "ShotResult",
    "Side",
]

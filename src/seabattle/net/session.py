"""Interactive turn loop that plays one game over a peer connection."""

from __future__ import annotations

import logging
from typing import Callable

from seabattle.engine.board import ShotResult
from seabattle.engine.fleet import Coordinate
from seabattle.engine.game import SeabattleGame, Side
from seabattle.render import format_board_pair

from .protocol import (
    MOVE_SIZE,
    RESULT_SIZE,
    ProtocolError,
    decode_move,
    decode_result,
    encode_move,
    encode_result,
    move_label,
    parse_move_text,
)
from .transport import Connection

logger = logging.getLogger(__name__)

RESULT_MESSAGES = {
    ShotResult.MISS: "Miss!",
    ShotResult.HIT: "Hit!",
    ShotResult.KILL: "Kill!",
}


class PeerSession:
    """Drives a SeabattleGame: prompts on our turn, answers the peer on theirs."""

    def __init__(
        self,
        game: SeabattleGame,
        connection: Connection,
        prompt: Callable[[str], str] = input,
        output: Callable[[str], None] = print,
    ) -> None:
        self.game = game
        self.connection = connection
        self._prompt = prompt
        self._output = output

    def run(self) -> Side | None:
        """Play until one fleet is destroyed and return the winning side."""
        while not self.game.is_over:
            self._output(format_board_pair(self.game.own, self.game.tracking))
            if self.game.my_turn:
                self.play_my_turn()
            else:
                self.answer_peer_turn()

        self._output(format_board_pair(self.game.own, self.game.tracking))
        winner = self.game.winner
        self._output("You won!" if winner is Side.ME else "You lost.")
        return winner

    def play_my_turn(self) -> ShotResult:
        coord = self._ask_move()
        self.connection.write_exact(encode_move(coord))
        logger.info("move_sent", extra={"move": move_label(coord)})

        data = self.connection.read_exact(RESULT_SIZE)
        try:
            result = decode_result(data)
        except ProtocolError:
            logger.error("malformed_result_received", extra={"payload": data})
            raise
        self.game.apply_result(coord, result)
        self._output(RESULT_MESSAGES[result])
        return result

    def answer_peer_turn(self) -> ShotResult:
        self._output("Waiting for turn...")
        data = self.connection.read_exact(MOVE_SIZE)
        try:
            coord = decode_move(data)
        except ProtocolError:
            logger.error("malformed_move_received", extra={"payload": data})
            raise
        self._output(f"Shot to {move_label(coord)}")

        result = self.game.receive_shot(coord)
        self.connection.write_exact(encode_result(result))
        logger.info("result_sent", extra={"move": move_label(coord), "outcome": result.name})
        return result

    def _ask_move(self) -> Coordinate:
        while True:
            text = self._prompt("Your turn: ")
            try:
                return parse_move_text(text)
            except ProtocolError:
                self._output("This move is incorrect")

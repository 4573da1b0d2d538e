"""Command-line entry point: ``seabattle <seed> [<host>] <port>``."""

from __future__ import annotations

import argparse
import logging
import random
import sys
from typing import Sequence

from opentelemetry.instrumentation.logging import LoggingInstrumentor
from pydantic import ValidationError

from seabattle.config import SessionConfig
from seabattle.engine.board import Board
from seabattle.engine.instrumented_game import InstrumentedSeabattleGame
from seabattle.net.protocol import ProtocolError
from seabattle.net.session import PeerSession
from seabattle.net.transport import Connection, TransportError, connect, listen
from seabattle.telemetry import configure_console_logging, init_telemetry, shutdown_tracing

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="seabattle",
        description=(
            "Play sea battle against a peer. With only a port, wait for the peer "
            "to connect; with a host and port, connect and fire first."
        ),
    )
    parser.add_argument("seed", type=int, help="RNG seed for the fleet layout.")
    parser.add_argument("endpoint", nargs="+", metavar="[HOST] PORT")
    parser.add_argument(
        "--log-level", default="WARNING", help="Logging level for stderr (default: WARNING)."
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> SessionConfig:
    parser = build_parser()
    args = parser.parse_args(argv)
    if len(args.endpoint) > 2:
        parser.error("expected <seed> [<host>] <port>")
    *host, port = args.endpoint
    try:
        return SessionConfig(
            seed=args.seed,
            host=host[0] if host else None,
            port=port,
            log_level=args.log_level,
        )
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        parser.error(problems)


def open_connection(config: SessionConfig) -> Connection:
    if config.host is None:
        print("Waiting for connection...")
        return listen(config.port)
    return connect(config.host, config.port)


def main(argv: Sequence[str] | None = None) -> int:
    config = parse_args(argv)
    configure_console_logging(config.log_level)
    telemetry = init_telemetry()
    if telemetry.enable_logging:
        LoggingInstrumentor().instrument()

    board = Board.generate_random(random.Random(config.seed))
    logger.info("session_starting", extra={"mode": config.mode.value, "port": config.port})
    try:
        with open_connection(config) as connection:
            game = InstrumentedSeabattleGame(board, my_turn=config.shoots_first)
            PeerSession(game, connection).run()
    except (ProtocolError, TransportError) as exc:
        logger.error("session_failed", extra={"error": str(exc)})
        print(f"Game aborted: {exc}", file=sys.stderr)
        return 1
    except (KeyboardInterrupt, EOFError):
        print("\nGoodbye!")
        return 130
    finally:
        shutdown_tracing()
    return 0


if __name__ == "__main__":
    sys.exit(main())

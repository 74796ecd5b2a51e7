from __future__ import annotations

# Facade module that re-exports Monad 2048 core functionality.
# Used by the Flask app, the CLI entry point and the tests.
# Single-responsibility modules live under monad2048_core/*.

from monad2048_core.board import (  # noqa: F401
    EMPTY,
    SIZE,
    Board,
    Tile,
    is_tile_value,
)
from monad2048_core.direction import ALL_DIRECTIONS, Direction  # noqa: F401
from monad2048_core.collapse import LineResult, collapse_line  # noqa: F401
from monad2048_core.spawn import (  # noqa: F401
    SPAWN_WEIGHTS,
    RandomSource,
    choose_spawn,
    seeded_source,
    spawn_tile,
)
from monad2048_core.engine import (  # noqa: F401
    MoveResult,
    available_directions,
    can_move,
    is_terminal,
    slide,
    transition,
)
from monad2048_core.session import (  # noqa: F401
    GameOverError,
    GameSession,
    MoveOutcome,
    SessionNotStartedError,
    SessionStateError,
    SessionStatus,
)
from monad2048_core.ledger import LedgerClient, LedgerForwarder, LoggingLedgerClient  # noqa: F401
from monad2048_core.registry import SessionRegistry, UnknownSessionError  # noqa: F401


def new_session(seed: int | None = None) -> GameSession:
    """Creates and starts a session, seeded for reproducible spawns when seed is given."""
    session = GameSession(rng=seeded_source(seed) if seed is not None else None)
    session.start()
    return session


def main() -> None:
    # CLI driver delegated to monad2048_core.cli
    from monad2048_core.cli import main as _main
    _main()


if __name__ == '__main__':
    main()

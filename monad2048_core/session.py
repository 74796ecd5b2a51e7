from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Union

from .board import Board, Tile
from .direction import Direction
from .engine import available_directions, is_terminal, transition
from .spawn import RandomSource, spawn_tile

logger = logging.getLogger(__name__)


class SessionStatus(Enum):
    NOT_STARTED = 'not_started'
    IN_PROGRESS = 'in_progress'
    TERMINAL = 'terminal'


class SessionStateError(RuntimeError):
    """A session operation was called in a state that does not allow it."""


class SessionNotStartedError(SessionStateError):
    pass


class GameOverError(SessionStateError):
    """Raised when a move is requested after the session reached its terminal state."""


@dataclass(frozen=True)
class MoveOutcome:
    committed: bool
    score_delta: int
    is_terminal: bool
    board: Board
    spawned: Optional[Tile] = None


class GameSession:
    """
    Owns the board and score of one game and is the only place they change.

    Listeners are plain objects that may define any of:
      on_new_game(board), on_move(direction, outcome), on_game_over(score)
    They are notified after the local state has been updated. A listener that
    raises is logged and skipped; it cannot roll back or block a move.

    Not safe for concurrent apply_move calls: callers must serialize moves.
    """

    def __init__(self, rng: Optional[RandomSource] = None) -> None:
        self._rng = rng
        self._board = Board.empty()
        self._score = 0
        self._status = SessionStatus.NOT_STARTED
        self._move_count = 0
        self._listeners: List[Any] = []

    @classmethod
    def from_board(cls, board: Board, score: int = 0, rng: Optional[RandomSource] = None) -> 'GameSession':
        """Resumes a session at an existing position, already in progress (or terminal)."""
        if not isinstance(board, Board):
            raise TypeError(f'Expected Board, got {type(board).__name__}')
        if score < 0:
            raise ValueError('Score cannot be negative')
        session = cls(rng=rng)
        session._board = board
        session._score = int(score)
        session._status = SessionStatus.TERMINAL if is_terminal(board) else SessionStatus.IN_PROGRESS
        return session

    @property
    def board(self) -> Board:
        return self._board

    @property
    def score(self) -> int:
        return self._score

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def move_count(self) -> int:
        return self._move_count

    @property
    def best_tile(self) -> int:
        return self._board.max_tile()

    @property
    def is_terminal(self) -> bool:
        return self._status is SessionStatus.TERMINAL

    def add_listener(self, listener: Any) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: Any) -> None:
        self._listeners.remove(listener)

    def _notify(self, event_name: str, *args: Any) -> None:
        for listener in list(self._listeners):
            handler = getattr(listener, event_name, None)
            if handler is None:
                continue
            try:
                handler(*args)
            except Exception:
                logger.exception('Listener %r failed handling %s', listener, event_name)

    def start(self) -> Board:
        """Resets to an empty board with two spawned tiles and zero score."""
        board = Board.empty()
        board = spawn_tile(board, self._rng)
        board = spawn_tile(board, self._rng)
        self._board = board
        self._score = 0
        self._move_count = 0
        self._status = SessionStatus.IN_PROGRESS
        logger.debug('New session started:\n%s', board.pretty())
        self._notify('on_new_game', board)
        return board

    def available_directions(self) -> List[Direction]:
        if self._status is not SessionStatus.IN_PROGRESS:
            return []
        return available_directions(self._board)

    def apply_move(self, direction: Union[Direction, str]) -> MoveOutcome:
        """
        Applies one move. A no-op move returns committed=False and leaves the
        session untouched. Raises GameOverError on a terminal session and
        SessionNotStartedError before start().
        """
        direction = Direction.parse(direction)
        if self._status is SessionStatus.NOT_STARTED:
            raise SessionNotStartedError('Session has not been started')
        if self._status is SessionStatus.TERMINAL:
            raise GameOverError('Game is over; start a new session')

        res = transition(self._board, direction, self._rng)
        if not res.changed:
            logger.debug('No-op move %s', direction.value)
            return MoveOutcome(committed=False, score_delta=0, is_terminal=False, board=self._board)

        self._board = res.board
        self._score += res.score_delta
        self._move_count += 1
        terminal = is_terminal(self._board)
        if terminal:
            self._status = SessionStatus.TERMINAL
        outcome = MoveOutcome(
            committed=True,
            score_delta=res.score_delta,
            is_terminal=terminal,
            board=self._board,
            spawned=res.spawned,
        )
        logger.debug('Move %s committed: +%d (score %d)', direction.value, res.score_delta, self._score)
        self._notify('on_move', direction, outcome)
        if terminal:
            logger.debug('Session reached terminal state with score %d', self._score)
            self._notify('on_game_over', self._score)
        return outcome

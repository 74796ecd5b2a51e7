from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .board import SIZE, Board, Cell, Tile
from .collapse import collapse_line
from .direction import ALL_DIRECTIONS, Direction
from .spawn import RandomSource, choose_spawn


@dataclass(frozen=True)
class MoveResult:
    """Outcome of one board transition. `spawned` is set only when a tile was added."""
    board: Board
    score_delta: int
    changed: bool
    spawned: Optional[Tile] = None


def _require_board(board: Board) -> None:
    if not isinstance(board, Board):
        raise TypeError(f'Expected Board, got {type(board).__name__}')


def slide(board: Board, direction: Direction) -> MoveResult:
    """
    Collapses all four rows (left/right) or columns (up/down) without spawning.
    This is the dry run used for legality and terminal checks.
    """
    _require_board(board)
    direction = Direction.parse(direction)
    toward_start = direction.toward_start
    cells: List[Cell] = list(board.grid)
    score = 0
    changed = False
    for i in range(SIZE):
        line = board.row(i) if direction.horizontal else board.column(i)
        res = collapse_line(line, toward_start)
        score += res.score
        changed = changed or res.changed
        for j, value in enumerate(res.line):
            idx = i * SIZE + j if direction.horizontal else j * SIZE + i
            cells[idx] = value
    if not changed:
        return MoveResult(board=board, score_delta=0, changed=False)
    return MoveResult(board=Board(grid=tuple(cells)), score_delta=score, changed=True)


def transition(board: Board, direction: Direction, rng: Optional[RandomSource] = None) -> MoveResult:
    """Applies a move and, if anything moved, spawns exactly one tile on the result."""
    res = slide(board, direction)
    if not res.changed:
        return res
    tile = choose_spawn(res.board, rng)
    if tile is None:
        return res
    spawned_board = res.board.with_cell(tile.row, tile.col, tile.value)
    return MoveResult(board=spawned_board, score_delta=res.score_delta, changed=True, spawned=tile)


def can_move(board: Board, direction: Direction) -> bool:
    return slide(board, direction).changed


def available_directions(board: Board) -> List[Direction]:
    """Directions that would change the board, in a fixed order."""
    return [d for d in ALL_DIRECTIONS if can_move(board, d)]


def is_terminal(board: Board) -> bool:
    """True when no direction changes the board."""
    return not available_directions(board)

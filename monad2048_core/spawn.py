from __future__ import annotations

import random
from typing import Callable, Optional, Tuple

from .board import Board, Tile

RandomSource = Callable[[], float]  # uniform in [0, 1)

# (value, probability) pairs; probabilities sum to 1.
SPAWN_WEIGHTS: Tuple[Tuple[int, float], ...] = ((2, 0.9), (4, 0.1))


def seeded_source(seed: Optional[int] = None) -> RandomSource:
    """Returns a random source backed by its own generator, reproducible for a given seed."""
    return random.Random(seed).random


def _draw(rng: RandomSource) -> float:
    value = rng()
    if not 0.0 <= value < 1.0:
        raise ValueError(f'Random source returned {value!r}, expected a value in [0, 1)')
    return value


def _weighted_value(u: float) -> int:
    acc = 0.0
    for value, weight in SPAWN_WEIGHTS:
        acc += weight
        if u < acc:
            return value
    return SPAWN_WEIGHTS[-1][0]


def choose_spawn(board: Board, rng: Optional[RandomSource] = None) -> Optional[Tile]:
    """
    Picks an empty cell uniformly at random and a value from SPAWN_WEIGHTS.
    Uses two draws from the random source: cell first, then value.
    Returns None when the board has no empty cell.
    """
    rng = rng or random.random
    empty = board.empty_cells()
    if not empty:
        return None
    i = min(int(_draw(rng) * len(empty)), len(empty) - 1)
    r, c = empty[i]
    return Tile(r, c, _weighted_value(_draw(rng)))


def spawn_tile(board: Board, rng: Optional[RandomSource] = None) -> Board:
    """Returns the board with one new tile placed, or the same board if it is full."""
    tile = choose_spawn(board, rng)
    if tile is None:
        return board
    return board.with_cell(tile.row, tile.col, tile.value)

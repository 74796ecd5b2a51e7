from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, NamedTuple, Sequence, Tuple

SIZE = 4
EMPTY = 0

Cell = int  # 0 for empty, otherwise a power of two
Coord = Tuple[int, int]


class Tile(NamedTuple):
    """A single placed tile: its position and value."""
    row: int
    col: int
    value: int


def is_tile_value(value: int) -> bool:
    """True for 2, 4, 8, ... (positive powers of two above one)."""
    return isinstance(value, int) and value >= 2 and (value & (value - 1)) == 0


@dataclass(frozen=True)
class Board:
    """Immutable 4x4 grid of tile values, stored row-major in a flat tuple."""
    grid: Tuple[Cell, ...]

    def __post_init__(self) -> None:
        if len(self.grid) != SIZE * SIZE:
            raise ValueError(f'Board must have {SIZE * SIZE} cells, got {len(self.grid)}')
        for value in self.grid:
            if value != EMPTY and not is_tile_value(value):
                raise ValueError(f'Invalid tile value: {value!r}')

    @classmethod
    def empty(cls) -> 'Board':
        return cls(grid=(EMPTY,) * (SIZE * SIZE))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> 'Board':
        """Builds a board from 4 rows of 4 values each."""
        if len(rows) != SIZE or any(len(r) != SIZE for r in rows):
            raise ValueError(f'Board must be {SIZE}x{SIZE}')
        flat: List[Cell] = []
        for r in rows:
            flat.extend(r)
        return cls(grid=tuple(flat))

    def index(self, r: int, c: int) -> int:
        """Calculates the 1D index for a given row and column."""
        if not (0 <= r < SIZE and 0 <= c < SIZE):
            raise IndexError(f'Cell ({r}, {c}) is off the board')
        return r * SIZE + c

    def at(self, r: int, c: int) -> Cell:
        return self.grid[self.index(r, c)]

    def row(self, r: int) -> Tuple[Cell, ...]:
        start = self.index(r, 0)
        return self.grid[start:start + SIZE]

    def column(self, c: int) -> Tuple[Cell, ...]:
        return tuple(self.grid[self.index(r, c)] for r in range(SIZE))

    def rows(self) -> List[List[Cell]]:
        """Returns the board as a fresh list of row lists."""
        return [list(self.row(r)) for r in range(SIZE)]

    def coords(self) -> Iterable[Coord]:
        for r in range(SIZE):
            for c in range(SIZE):
                yield (r, c)

    def empty_cells(self) -> List[Coord]:
        """All empty coordinates in row-major order."""
        return [(r, c) for (r, c) in self.coords() if self.at(r, c) == EMPTY]

    def is_full(self) -> bool:
        return EMPTY not in self.grid

    def with_cell(self, r: int, c: int, value: Cell) -> 'Board':
        cells = list(self.grid)
        cells[self.index(r, c)] = value
        return Board(grid=tuple(cells))

    def total(self) -> int:
        """Sum of all tile values."""
        return sum(self.grid)

    def max_tile(self) -> int:
        return max(self.grid)

    def tile_count(self) -> int:
        return sum(1 for v in self.grid if v != EMPTY)

    def mirrored(self) -> 'Board':
        """Left/right mirror image."""
        return Board.from_rows([list(reversed(self.row(r))) for r in range(SIZE)])

    def transposed(self) -> 'Board':
        """Rows become columns."""
        return Board.from_rows([list(self.column(c)) for c in range(SIZE)])

    def pretty(self) -> str:
        """Generates a human-readable string representation of the board."""
        width = max(4, len(str(self.max_tile())))
        lines: List[str] = []
        for r in range(SIZE):
            cells = [str(v).rjust(width) if v != EMPTY else '.'.rjust(width) for v in self.row(r)]
            lines.append(' '.join(cells))
        return '\n'.join(lines)

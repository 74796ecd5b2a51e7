from __future__ import annotations

from typing import List, NamedTuple, Sequence, Tuple

from .board import EMPTY, SIZE, Cell


class LineResult(NamedTuple):
    line: Tuple[Cell, ...]
    score: int
    changed: bool


def collapse_line(line: Sequence[Cell], toward_start: bool = True) -> LineResult:
    """
    Compacts one row or column toward one end, merging equal neighbours.

    Tiles are processed from the target end outward. Each tile slides through
    empty cells until it hits another tile; if that tile has the same value and
    has not already absorbed a merge in this call, the two merge and the moving
    tile stops there. A cell merges at most once, so 2,2,2,2 becomes 4,4,0,0.
    The score is the sum of the merged values.
    """
    if len(line) != SIZE:
        raise ValueError(f'Line must have {SIZE} cells, got {len(line)}')
    cells: List[Cell] = list(line) if toward_start else list(reversed(line))
    merged = [False] * SIZE
    score = 0
    changed = False

    for j in range(1, SIZE):
        if cells[j] == EMPTY:
            continue
        k = j
        while k > 0:
            target = cells[k - 1]
            if target == EMPTY:
                cells[k - 1] = cells[k]
                cells[k] = EMPTY
                k -= 1
                changed = True
            elif target == cells[k] and not merged[k - 1]:
                cells[k - 1] = target * 2
                cells[k] = EMPTY
                merged[k - 1] = True
                score += cells[k - 1]
                changed = True
                break
            else:
                break

    if not toward_start:
        cells.reverse()
    return LineResult(tuple(cells), score, changed)

from __future__ import annotations

from enum import Enum
from typing import Dict, Union

_ALIASES: Dict[str, str] = {'u': 'up', 'd': 'down', 'l': 'left', 'r': 'right'}


class Direction(Enum):
    UP = 'up'
    DOWN = 'down'
    LEFT = 'left'
    RIGHT = 'right'

    @property
    def horizontal(self) -> bool:
        """Left/right moves operate on rows, up/down on columns."""
        return self in (Direction.LEFT, Direction.RIGHT)

    @property
    def toward_start(self) -> bool:
        """Left and up compact toward index 0 of each line."""
        return self in (Direction.LEFT, Direction.UP)

    @classmethod
    def parse(cls, value: Union['Direction', str]) -> 'Direction':
        """Accepts a Direction, a name ('left', 'UP') or a one-letter alias (u, d, l, r)."""
        if isinstance(value, Direction):
            return value
        if not isinstance(value, str):
            raise ValueError(f'Invalid direction: {value!r}')
        text = value.strip().lower()
        text = _ALIASES.get(text, text)
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"Invalid direction: {value!r}. Must be 'up', 'down', 'left' or 'right'") from None


ALL_DIRECTIONS = (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT)

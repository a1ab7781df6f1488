from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class SpecialType(Enum):
    """Area-of-effect carried by a tile; NORMAL tiles have none."""
    NORMAL = "normal"
    ROW_CLEAR = "row_clear"
    COLUMN_CLEAR = "column_clear"
    BOMB = "bomb"


@dataclass(frozen=True, slots=True)
class Tile:
    """Per-cell tile value. Empty cells are stored as None on the Board.

    ``primed`` marks a special caught in another special's blast; it fires on
    the next cascade iteration instead of being cleared silently.
    """
    kind: int
    special: SpecialType = SpecialType.NORMAL
    primed: bool = False

    @property
    def is_special(self) -> bool:
        return self.special is not SpecialType.NORMAL

    def primed_copy(self) -> Tile:
        return replace(self, primed=True)

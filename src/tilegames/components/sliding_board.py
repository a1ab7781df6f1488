from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

Position = Tuple[int, int]


def solved_cells(size: int) -> List[List[int]]:
    """Row-major ascending labels with the empty slot (0) last."""
    cells = [[r * size + c + 1 for c in range(size)] for r in range(size)]
    cells[size - 1][size - 1] = 0
    return cells


@dataclass(slots=True)
class SlidingBoard:
    """Permutation grid for the sliding puzzle; exactly one cell holds 0."""

    size: int = 4
    cells: List[List[int]] = field(default_factory=list)
    empty: Position = (0, 0)
    moves: int = 0
    active: bool = False
    elapsed: float = 0.0

    def __post_init__(self) -> None:
        if not self.cells:
            self.cells = solved_cells(self.size)
            self.empty = (self.size - 1, self.size - 1)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size


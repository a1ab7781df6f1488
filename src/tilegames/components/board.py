from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from tilegames.components.tile import Tile

Position = Tuple[int, int]
Cells = List[List[Optional[Tile]]]
Snapshot = Tuple[Tuple[Optional[Tile], ...], ...]


@dataclass(slots=True)
class Board:
    """Fixed-size match-3 grid. Row 0 is the top; gravity pulls toward higher rows.

    Out-of-range reads return None and out-of-range writes are ignored so edge
    scans never need their own bounds checks.
    """
    rows: int
    cols: int
    cells: Cells = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.cells:
            self.cells = [[None for _ in range(self.cols)] for _ in range(self.rows)]

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def get(self, row: int, col: int) -> Optional[Tile]:
        if not self.in_bounds(row, col):
            return None
        return self.cells[row][col]

    def set(self, row: int, col: int, value: Optional[Tile]) -> bool:
        if not self.in_bounds(row, col):
            return False
        self.cells[row][col] = value
        return True

    def kind_at(self, row: int, col: int) -> Optional[int]:
        tile = self.get(row, col)
        return tile.kind if tile is not None else None

    def positions(self) -> List[Position]:
        return [(r, c) for r in range(self.rows) for c in range(self.cols)]

    def swap(self, a: Position, b: Position) -> bool:
        if not (self.in_bounds(*a) and self.in_bounds(*b)):
            return False
        ar, ac = a
        br, bc = b
        self.cells[ar][ac], self.cells[br][bc] = self.cells[br][bc], self.cells[ar][ac]
        return True

    @staticmethod
    def is_adjacent(a: Position, b: Position) -> bool:
        ar, ac = a
        br, bc = b
        return (abs(ar - br) == 1 and ac == bc) or (abs(ac - bc) == 1 and ar == br)

    def snapshot(self) -> Snapshot:
        return tuple(tuple(row) for row in self.cells)

    def restore(self, snapshot: Snapshot) -> None:
        self.rows = len(snapshot)
        self.cols = len(snapshot[0]) if snapshot else 0
        self.cells = [list(row) for row in snapshot]

    def empty_positions(self) -> List[Position]:
        return [(r, c) for r in range(self.rows) for c in range(self.cols) if self.cells[r][c] is None]

    @classmethod
    def from_kinds(cls, kinds: List[List[Optional[int]]]) -> "Board":
        """Build a board from a 2D list of kind integers (None for empty)."""
        rows = len(kinds)
        cols = len(kinds[0]) if rows else 0
        cells: Cells = [[Tile(kind) if kind is not None else None for kind in row] for row in kinds]
        return cls(rows=rows, cols=cols, cells=cells)

    def kinds(self) -> List[List[Optional[int]]]:
        return [[tile.kind if tile is not None else None for tile in row] for row in self.cells]

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from esper import World

from tilegames.components.board import Board, Position
from tilegames.components.tile import Tile
from tilegames.constants import INITIAL_BOARD_RETRIES, MIN_RUN, SHUFFLE_CLEAR_PASSES

logger = logging.getLogger(__name__)

HORIZONTAL = "horizontal"
VERTICAL = "vertical"


@dataclass(frozen=True, slots=True)
class Run:
    """Maximal run of equal kinds along one axis.

    ``fixed_index`` is the row of a horizontal run or the column of a vertical one.
    """
    direction: str
    fixed_index: int
    start_index: int
    length: int
    kind: int

    @property
    def positions(self) -> List[Position]:
        if self.direction == HORIZONTAL:
            return [(self.fixed_index, self.start_index + i) for i in range(self.length)]
        return [(self.start_index + i, self.fixed_index) for i in range(self.length)]

    @property
    def first(self) -> Position:
        return self.positions[0]

    def contains(self, pos: Position) -> bool:
        row, col = pos
        if self.direction == HORIZONTAL:
            return row == self.fixed_index and self.start_index <= col < self.start_index + self.length
        return col == self.fixed_index and self.start_index <= row < self.start_index + self.length


@dataclass(slots=True)
class MatchResult:
    positions: Set[Position] = field(default_factory=set)
    runs: List[Run] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.positions)

    def __len__(self) -> int:
        return len(self.positions)


@dataclass(frozen=True, slots=True)
class GravityMove:
    source: Position
    target: Position


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board component not found")


def random_tile(rng: random.Random, tile_kinds: int) -> Tile:
    return Tile(kind=rng.randrange(tile_kinds))


def _scan_line(board: Board, direction: str, fixed: int, length: int, result: MatchResult) -> None:
    run_start = 0
    run_kind: Optional[int] = None
    for idx in range(length + 1):
        if idx < length:
            kind = board.kind_at(fixed, idx) if direction == HORIZONTAL else board.kind_at(idx, fixed)
        else:
            kind = None
        if idx < length and kind is not None and kind == run_kind:
            continue
        run_length = idx - run_start
        if run_kind is not None and run_length >= MIN_RUN:
            run = Run(direction, fixed, run_start, run_length, run_kind)
            result.runs.append(run)
            result.positions.update(run.positions)
        run_start = idx
        run_kind = kind


def find_matches(board: Board) -> MatchResult:
    """Detect every horizontal and vertical run of length >= 3."""
    result = MatchResult()
    for r in range(board.rows):
        _scan_line(board, HORIZONTAL, r, board.cols, result)
    for c in range(board.cols):
        _scan_line(board, VERTICAL, c, board.rows, result)
    return result


def would_create_match_at(board: Board, row: int, col: int, kind: int) -> bool:
    """Return True if ``kind`` at (row, col) completes a run with its two left or two upper neighbours."""
    if board.kind_at(row, col - 1) == kind and board.kind_at(row, col - 2) == kind:
        return True
    if board.kind_at(row - 1, col) == kind and board.kind_at(row - 2, col) == kind:
        return True
    return False


def creates_match(board: Board, src: Position, dst: Position) -> bool:
    """Speculatively swap src/dst, detect, and swap back."""
    if not (board.in_bounds(*src) and board.in_bounds(*dst)):
        return False
    if board.get(*src) is None or board.get(*dst) is None:
        return False
    board.swap(src, dst)
    try:
        return bool(find_matches(board))
    finally:
        board.swap(src, dst)


def find_valid_swaps(board: Board) -> List[Tuple[Position, Position]]:
    """Enumerate right/down neighbour swaps that would produce a match."""
    swaps: List[Tuple[Position, Position]] = []
    for row in range(board.rows):
        for col in range(board.cols):
            pos = (row, col)
            for other in ((row, col + 1), (row + 1, col)):
                if board.in_bounds(*other) and creates_match(board, pos, other):
                    swaps.append((pos, other))
    return swaps


def has_any_valid_move(board: Board) -> bool:
    for row in range(board.rows):
        for col in range(board.cols):
            pos = (row, col)
            for other in ((row, col + 1), (row + 1, col)):
                if board.in_bounds(*other) and creates_match(board, pos, other):
                    return True
    return False


def clear_positions(board: Board, positions) -> List[Position]:
    cleared: List[Position] = []
    for row, col in sorted(positions):
        if board.get(row, col) is None:
            continue
        board.set(row, col, None)
        cleared.append((row, col))
    return cleared


def apply_gravity(board: Board) -> List[GravityMove]:
    """Compact each column so tiles fall toward the highest row, keeping their order."""
    moves: List[GravityMove] = []
    for col in range(board.cols):
        write_row = board.rows - 1
        for row in range(board.rows - 1, -1, -1):
            tile = board.get(row, col)
            if tile is None:
                continue
            if row != write_row:
                board.set(write_row, col, tile)
                board.set(row, col, None)
                moves.append(GravityMove(source=(row, col), target=(write_row, col)))
            write_row -= 1
    return moves


def refill_board(board: Board, rng: random.Random, tile_kinds: int) -> List[Position]:
    spawned: List[Position] = []
    for row in range(board.rows):
        for col in range(board.cols):
            if board.get(row, col) is None:
                board.set(row, col, random_tile(rng, tile_kinds))
                spawned.append((row, col))
    return spawned


def shuffle_board(
    board: Board,
    rng: random.Random,
    tile_kinds: int,
    *,
    max_passes: int = SHUFFLE_CLEAR_PASSES,
) -> None:
    """Permute every tile, then run non-scoring clear/gravity/refill passes.

    The pass count is capped, so the result may still contain a match.
    """
    tiles = [board.get(r, c) for r, c in board.positions()]
    for i in range(len(tiles) - 1, 0, -1):
        j = rng.randint(0, i)
        tiles[i], tiles[j] = tiles[j], tiles[i]
    for idx, (r, c) in enumerate(board.positions()):
        board.set(r, c, tiles[idx])
    passes = 0
    matches = find_matches(board)
    while matches and passes < max_passes:
        clear_positions(board, matches.positions)
        apply_gravity(board)
        refill_board(board, rng, tile_kinds)
        passes += 1
        matches = find_matches(board)
    if matches:
        logger.warning("Shuffle left %d matched tiles after %d passes", len(matches), passes)


def fill_without_matches(board: Board, rng: random.Random, tile_kinds: int) -> None:
    """Fill every cell, rejecting kinds that would complete a run with left/up neighbours."""
    choices = list(range(tile_kinds))
    for row in range(board.rows):
        for col in range(board.cols):
            board.set(row, col, None)
    for row in range(board.rows):
        for col in range(board.cols):
            available = [kind for kind in choices if not would_create_match_at(board, row, col, kind)]
            kind = rng.choice(available) if available else rng.choice(choices)
            board.set(row, col, Tile(kind=kind))


def generate_initial_board(
    board: Board,
    rng: random.Random,
    tile_kinds: int,
    *,
    max_attempts: int = INITIAL_BOARD_RETRIES,
) -> None:
    """Fill the board with no initial runs and, best effort, at least one valid move."""
    fill_without_matches(board, rng, tile_kinds)
    attempts = 0
    while not has_any_valid_move(board) and attempts < max_attempts:
        shuffle_board(board, rng, tile_kinds)
        attempts += 1
    if attempts >= max_attempts and not has_any_valid_move(board):
        logger.warning("Initial board has no valid move after %d shuffles", attempts)

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from tilegames.components.board import Board, Position
from tilegames.components.tile import SpecialType, Tile
from tilegames.constants import BOMB_RADIUS, BOMB_RUN, LINE_SPECIAL_RUN
from tilegames.systems.board_ops import HORIZONTAL, Run

SwapPair = Tuple[Position, Position]


@dataclass(slots=True)
class Expansion:
    """Outcome of one special-activation pass over a matched set.

    ``clear`` holds every cell to empty this step, ``activated`` maps each fired
    special to its area, and ``primed`` lists specials caught by a blast that
    survive until the next cascade iteration.
    """
    clear: Set[Position] = field(default_factory=set)
    activated: Dict[Position, List[Position]] = field(default_factory=dict)
    primed: List[Position] = field(default_factory=list)


def special_for_run(run: Run) -> Optional[SpecialType]:
    if run.length >= BOMB_RUN:
        return SpecialType.BOMB
    if run.length >= LINE_SPECIAL_RUN:
        return SpecialType.ROW_CLEAR if run.direction == HORIZONTAL else SpecialType.COLUMN_CLEAR
    return None


def placement_for_run(run: Run, swap: Optional[SwapPair]) -> Position:
    """Prefer a swap endpoint inside the run, else the run's first cell."""
    if swap is not None:
        for endpoint in swap:
            if run.contains(endpoint):
                return endpoint
    return run.first


def plan_specials(runs: Iterable[Run], swap: Optional[SwapPair] = None) -> Dict[Position, Tile]:
    """Map placement cells to the special tiles created by runs of length >= 4.

    When two runs claim the same cell the first run in scan order wins.
    """
    planned: Dict[Position, Tile] = {}
    for run in runs:
        special = special_for_run(run)
        if special is None:
            continue
        pos = placement_for_run(run, swap)
        if pos in planned:
            continue
        planned[pos] = Tile(kind=run.kind, special=special)
    return planned


def area_of_effect(board: Board, pos: Position, special: SpecialType) -> List[Position]:
    row, col = pos
    if special is SpecialType.ROW_CLEAR:
        return [(row, c) for c in range(board.cols)]
    if special is SpecialType.COLUMN_CLEAR:
        return [(r, col) for r in range(board.rows)]
    if special is SpecialType.BOMB:
        return [
            (r, c)
            for r in range(row - BOMB_RADIUS, row + BOMB_RADIUS + 1)
            for c in range(col - BOMB_RADIUS, col + BOMB_RADIUS + 1)
            if board.in_bounds(r, c)
        ]
    return [pos]


def expand_with_specials(
    board: Board,
    matched: Iterable[Position],
    *,
    keep: Iterable[Position] = (),
) -> Expansion:
    """Run a single expansion pass: each special in ``matched`` adds its area.

    Specials reached only through another blast are primed rather than fired,
    so chains advance one step per cascade iteration. Cells in ``keep`` (the
    placement cells of newly created specials) are never cleared.
    """
    seeds = sorted(set(matched))
    keep_set = set(keep)
    expansion = Expansion(clear=set(seeds))
    for pos in seeds:
        tile = board.get(*pos)
        if tile is None or not tile.is_special:
            continue
        area = area_of_effect(board, pos, tile.special)
        expansion.activated[pos] = area
        expansion.clear.update(area)
    seed_set = set(seeds)
    for pos in sorted(expansion.clear - seed_set):
        tile = board.get(*pos)
        if tile is not None and tile.is_special:
            expansion.primed.append(pos)
    expansion.clear.difference_update(expansion.primed)
    expansion.clear.difference_update(keep_set)
    expansion.clear = {pos for pos in expansion.clear if board.get(*pos) is not None}
    return expansion

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from esper import World

from tilegames.components.sliding_board import SlidingBoard, solved_cells
from tilegames.events.bus import (
    EVENT_PUZZLE_ARROW,
    EVENT_PUZZLE_AUTO_SOLVED,
    EVENT_PUZZLE_HINT,
    EVENT_PUZZLE_HINT_REQUEST,
    EVENT_PUZZLE_NEW_GAME_REQUEST,
    EVENT_PUZZLE_SHUFFLED,
    EVENT_PUZZLE_SOLVE_REQUEST,
    EVENT_PUZZLE_SOLVED,
    EVENT_PUZZLE_TILE_MOVED,
    EVENT_TICK,
    EVENT_TILE_CLICK,
    EventBus,
)
from tilegames.systems.session_utils import get_rng, get_settings

logger = logging.getLogger(__name__)

Position = Tuple[int, int]

# Arrow keys slide the neighbour on the opposite side of the hole toward it.
ARROW_OFFSETS = {
    "up": (1, 0),
    "down": (-1, 0),
    "left": (0, 1),
    "right": (0, -1),
}


class SlidingPuzzleSystem:
    """Move, shuffle and win-check logic for the N x N sliding puzzle.

    Solvability comes only from shuffling by legal moves; arbitrary
    permutations are never validated.
    """

    def __init__(self, world: World, event_bus: EventBus, size: Optional[int] = None):
        self.world = world
        self.event_bus = event_bus
        self.puzzle_entity = self.world.create_entity(
            SlidingBoard(size=size or get_settings(world).puzzle_size)
        )
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)
        self.event_bus.subscribe(EVENT_PUZZLE_ARROW, self.on_arrow)
        self.event_bus.subscribe(EVENT_PUZZLE_NEW_GAME_REQUEST, self.on_new_game_request)
        self.event_bus.subscribe(EVENT_PUZZLE_SOLVE_REQUEST, self.on_solve_request)
        self.event_bus.subscribe(EVENT_PUZZLE_HINT_REQUEST, self.on_hint_request)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)

    @property
    def puzzle(self) -> SlidingBoard:
        return self.world.component_for_entity(self.puzzle_entity, SlidingBoard)

    def can_move(self, row: int, col: int) -> bool:
        puzzle = self.puzzle
        if not puzzle.in_bounds(row, col):
            return False
        empty_row, empty_col = puzzle.empty
        return (
            (abs(row - empty_row) == 1 and col == empty_col)
            or (abs(col - empty_col) == 1 and row == empty_row)
        )

    def possible_moves(self) -> List[Position]:
        puzzle = self.puzzle
        row, col = puzzle.empty
        candidates = [(row - 1, col), (row + 1, col), (row, col - 1), (row, col + 1)]
        return [pos for pos in candidates if puzzle.in_bounds(*pos)]

    def _slide(self, row: int, col: int) -> int:
        puzzle = self.puzzle
        empty_row, empty_col = puzzle.empty
        value = puzzle.cells[row][col]
        puzzle.cells[empty_row][empty_col] = value
        puzzle.cells[row][col] = 0
        puzzle.empty = (row, col)
        return value

    def move(self, row: int, col: int) -> bool:
        """Slide the tile at (row, col) into the hole; illegal or inactive moves do nothing."""
        puzzle = self.puzzle
        if not puzzle.active or not self.can_move(row, col):
            return False
        dst = puzzle.empty
        value = self._slide(row, col)
        puzzle.moves += 1
        self.event_bus.emit(EVENT_PUZZLE_TILE_MOVED, src=(row, col), dst=dst, value=value, moves=puzzle.moves)
        if self.check_win():
            puzzle.active = False
            self.event_bus.emit(EVENT_PUZZLE_SOLVED, moves=puzzle.moves, elapsed=puzzle.elapsed)
        return True

    def shuffle(self, steps: Optional[int] = None) -> None:
        """Random walk of the hole starting from solved; every result is solvable."""
        self.reset()
        rng = get_rng(self.world)
        walk = get_settings(self.world).shuffle_walk_steps if steps is None else steps
        for _ in range(walk):
            options = self.possible_moves()
            if options:
                self._slide(*rng.choice(options))
        puzzle = self.puzzle
        puzzle.moves = 0
        puzzle.elapsed = 0.0
        puzzle.active = True
        logger.debug("Sliding puzzle shuffled with %d steps", walk)
        self.event_bus.emit(EVENT_PUZZLE_SHUFFLED)

    def check_win(self) -> bool:
        puzzle = self.puzzle
        return puzzle.cells == solved_cells(puzzle.size)

    def reset(self) -> None:
        puzzle = self.puzzle
        puzzle.cells = solved_cells(puzzle.size)
        puzzle.empty = (puzzle.size - 1, puzzle.size - 1)
        puzzle.moves = 0
        puzzle.elapsed = 0.0
        puzzle.active = False

    def new_game(self) -> None:
        self.shuffle()

    def auto_solve(self) -> bool:
        """Jump straight to the solved layout; this is not a search."""
        if not self.puzzle.active:
            return False
        moves = self.puzzle.moves
        self.reset()
        self.puzzle.moves = moves
        self.event_bus.emit(EVENT_PUZZLE_AUTO_SOLVED)
        return True

    def hint(self) -> List[Position]:
        if not self.puzzle.active:
            return []
        movable = self.possible_moves()
        self.event_bus.emit(EVENT_PUZZLE_HINT, positions=movable)
        return movable

    def press_arrow(self, key: str) -> bool:
        offset = ARROW_OFFSETS.get(key)
        if offset is None or not self.puzzle.active:
            return False
        row, col = self.puzzle.empty
        return self.move(row + offset[0], col + offset[1])

    def on_tile_click(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        if row is None or col is None:
            return
        self.move(row, col)

    def on_arrow(self, sender, **kwargs):
        key = kwargs.get('key')
        if key:
            self.press_arrow(key)

    def on_new_game_request(self, sender, **kwargs):
        self.new_game()

    def on_solve_request(self, sender, **kwargs):
        self.auto_solve()

    def on_hint_request(self, sender, **kwargs):
        self.hint()

    def on_tick(self, sender, **kwargs):
        puzzle = self.puzzle
        if puzzle.active:
            puzzle.elapsed += float(kwargs.get('dt', 1/60))

from typing import Any, Dict, List, Optional, Tuple

from esper import World

from tilegames.components.board import Board
from tilegames.components.game_state import GameKind, GameState
from tilegames.components.sliding_board import SlidingBoard
from tilegames.components.tile import SpecialType
from tilegames.events.bus import (
    EventBus,
    EVENT_FEEDBACK,
    EVENT_GAME_OVER,
    EVENT_GAME_RESET,
    EVENT_HINT,
    EVENT_PUZZLE_HINT,
    EVENT_PUZZLE_SOLVED,
    EVENT_PUZZLE_SHUFFLED,
    EVENT_TICK,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
)
from tilegames.systems.session_utils import get_session
from tilegames.ui.layout import cell_center, compute_board_geometry

PADDING = 4
HINT_SECONDS = 1.0

# Tile kind -> fill colour; kinds beyond the palette wrap around.
KIND_COLORS: List[Tuple[int, int, int]] = [
    (214, 48, 49),    # cherry
    (253, 203, 110),  # lemon
    (108, 92, 231),   # grape
    (0, 184, 148),    # apple
    (225, 112, 85),   # orange
    (232, 67, 147),   # candy
]
SPECIAL_MARKS = {
    SpecialType.ROW_CLEAR: "=",
    SpecialType.COLUMN_CLEAR: "||",
    SpecialType.BOMB: "*",
}


class RenderSystem:
    """Draws whichever board the world hosts plus a one-line HUD.

    Feedback tones are kept as ``last_feedback`` so an audio layer or the HUD
    can react; the core never waits on rendering.
    """

    def __init__(self, world: World, event_bus: EventBus, window):
        self.world = world
        self.event_bus = event_bus
        self.window = window
        self.selected: Optional[Tuple[int, int]] = None
        self.hint_cells: List[Tuple[int, int]] = []
        self._hint_timer = 0.0
        self.last_feedback: Optional[str] = None
        self.status = ""
        self._time = 0.0
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self.event_bus.subscribe(EVENT_TILE_SELECTED, self.on_tile_selected)
        self.event_bus.subscribe(EVENT_TILE_DESELECTED, self.on_tile_deselected)
        self.event_bus.subscribe(EVENT_FEEDBACK, self.on_feedback)
        self.event_bus.subscribe(EVENT_HINT, self.on_hint)
        self.event_bus.subscribe(EVENT_PUZZLE_HINT, self.on_puzzle_hint)
        self.event_bus.subscribe(EVENT_GAME_OVER, self.on_game_over)
        self.event_bus.subscribe(EVENT_GAME_RESET, self.on_status_clear)
        self.event_bus.subscribe(EVENT_PUZZLE_SHUFFLED, self.on_status_clear)
        self.event_bus.subscribe(EVENT_PUZZLE_SOLVED, self.on_puzzle_solved)

    def _game_kind(self) -> GameKind:
        states = list(self.world.get_component(GameState))
        return states[0][1].kind if states else GameKind.MATCH3

    def on_tick(self, sender, **kwargs):
        dt = float(kwargs.get('dt', 1/60))
        self._time += dt
        if self._hint_timer > 0.0:
            self._hint_timer -= dt
            if self._hint_timer <= 0.0:
                self.hint_cells = []

    def on_tile_selected(self, sender, **kwargs):
        self.selected = (kwargs.get('row'), kwargs.get('col'))

    def on_tile_deselected(self, sender, **kwargs):
        self.selected = None

    def on_feedback(self, sender, **kwargs):
        self.last_feedback = kwargs.get('tone')

    def on_hint(self, sender, **kwargs):
        cells = [pos for pos in (kwargs.get('src'), kwargs.get('dst')) if pos is not None]
        self._show_hint(cells)

    def on_puzzle_hint(self, sender, **kwargs):
        self._show_hint(list(kwargs.get('positions') or []))

    def _show_hint(self, cells: List[Tuple[int, int]]) -> None:
        self.hint_cells = cells
        self._hint_timer = HINT_SECONDS if cells else 0.0

    def on_game_over(self, sender, **kwargs):
        self.status = f"Game over - score {kwargs.get('score', 0)} (press R)"

    def on_puzzle_solved(self, sender, **kwargs):
        self.status = f"Solved in {kwargs.get('moves', 0)} moves! (press N)"

    def on_status_clear(self, sender, **kwargs):
        self.status = ""

    def hud_text(self) -> str:
        if self._game_kind() is GameKind.SLIDING:
            for _, puzzle in self.world.get_component(SlidingBoard):
                minutes, seconds = divmod(int(puzzle.elapsed), 60)
                return f"Moves {puzzle.moves}   Time {minutes:02d}:{seconds:02d}"
            return ""
        session = get_session(self.world)
        return (
            f"Score {session.score}   Best {session.best_score}   Moves {session.moves_remaining}   "
            f"Level {session.level} ({session.target_score})   Hammers {session.hammers}"
        )

    def cell_draw_list(self) -> List[Dict[str, Any]]:
        """Flatten the current board into draw commands; usable headless."""
        commands: List[Dict[str, Any]] = []
        if self._game_kind() is GameKind.SLIDING:
            for _, puzzle in self.world.get_component(SlidingBoard):
                geometry = compute_board_geometry(self.window.width, self.window.height, puzzle.size, puzzle.size)
                for r in range(puzzle.size):
                    for c in range(puzzle.size):
                        value = puzzle.cells[r][c]
                        if value == 0:
                            continue
                        commands.append({
                            "center": cell_center(r, c, geometry, puzzle.size),
                            "size": geometry[0] - PADDING,
                            "color": (70, 90, 180),
                            "label": str(value),
                            "highlight": (r, c) in self.hint_cells,
                        })
            return commands
        for _, board in self.world.get_component(Board):
            geometry = compute_board_geometry(self.window.width, self.window.height, board.rows, board.cols)
            for r in range(board.rows):
                for c in range(board.cols):
                    tile = board.get(r, c)
                    if tile is None:
                        continue
                    commands.append({
                        "center": cell_center(r, c, geometry, board.rows),
                        "size": geometry[0] - PADDING,
                        "color": KIND_COLORS[tile.kind % len(KIND_COLORS)],
                        "label": SPECIAL_MARKS.get(tile.special, ""),
                        "highlight": (r, c) == self.selected or (r, c) in self.hint_cells,
                    })
            break
        return commands

    def process(self):
        # Local import keeps tests headless without creating a window.
        import arcade
        commands = self.cell_draw_list()
        for cmd in commands:
            x, y = cmd["center"]
            half = cmd["size"] / 2
            arcade.draw_lrbt_rectangle_filled(x - half, x + half, y - half, y + half, cmd["color"])
            if cmd["highlight"]:
                arcade.draw_lrbt_rectangle_outline(x - half, x + half, y - half, y + half, arcade.color.WHITE, 3)
            if cmd["label"]:
                arcade.draw_text(
                    cmd["label"], x, y, arcade.color.WHITE, 18,
                    anchor_x="center", anchor_y="center", bold=True,
                )
        arcade.draw_text(self.hud_text(), 12, self.window.height - 28, arcade.color.WHITE, 14)
        if self.status:
            arcade.draw_text(self.status, 12, self.window.height - 52, arcade.color.YELLOW, 14)

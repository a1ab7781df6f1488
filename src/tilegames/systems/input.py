from typing import Optional, Tuple

from tilegames.components.game_state import GameKind, GameState
from tilegames.constants import DRAG_THRESHOLD
from tilegames.events.bus import (
    EventBus,
    EVENT_GAME_RESET_REQUEST,
    EVENT_HAMMER_REQUEST,
    EVENT_HINT_REQUEST,
    EVENT_KEY_PRESS,
    EVENT_MOUSE_DRAG,
    EVENT_MOUSE_PRESS,
    EVENT_MOUSE_RELEASE,
    EVENT_PUZZLE_ARROW,
    EVENT_PUZZLE_HINT_REQUEST,
    EVENT_PUZZLE_NEW_GAME_REQUEST,
    EVENT_PUZZLE_SOLVE_REQUEST,
    EVENT_SHUFFLE_REQUEST,
    EVENT_TILE_CLICK,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_UNDO_REQUEST,
)
from tilegames.systems.session_utils import get_settings
from tilegames.ui.layout import cell_at_point, compute_board_geometry, drag_direction

LEFT_MOUSE_BUTTON = 1
ARROW_KEYS = ("up", "down", "left", "right")

MATCH3_KEYS = {
    "h": EVENT_HINT_REQUEST,
    "s": EVENT_SHUFFLE_REQUEST,
    "u": EVENT_UNDO_REQUEST,
    "r": EVENT_GAME_RESET_REQUEST,
}
SLIDING_KEYS = {
    "h": EVENT_PUZZLE_HINT_REQUEST,
    "n": EVENT_PUZZLE_NEW_GAME_REQUEST,
    "r": EVENT_PUZZLE_NEW_GAME_REQUEST,
    "enter": EVENT_PUZZLE_SOLVE_REQUEST,
}


class InputSystem:
    """Normalizes pointer and keyboard input into board intents.

    A press followed by a release is a tile click; a press followed by a drag
    past the threshold becomes a swap toward the drag direction (match-3 only).
    Arrow keys drive the sliding puzzle; ``m`` arms the hammer for the next click.
    """

    def __init__(self, event_bus: EventBus, window, world=None, drag_threshold: float = DRAG_THRESHOLD):
        self.event_bus = event_bus
        self.window = window
        self.world = world
        self.drag_threshold = drag_threshold
        self.hammer_armed = False
        self._press_cell: Optional[Tuple[int, int]] = None
        self._press_xy: Optional[Tuple[float, float]] = None
        self._drag_consumed = False
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)
        self.event_bus.subscribe(EVENT_MOUSE_DRAG, self.on_mouse_drag)
        self.event_bus.subscribe(EVENT_MOUSE_RELEASE, self.on_mouse_release)
        self.event_bus.subscribe(EVENT_KEY_PRESS, self.on_key_press)

    def _game_kind(self) -> GameKind:
        if self.world is None:
            return GameKind.MATCH3
        states = list(self.world.get_component(GameState))
        if not states:
            return GameKind.MATCH3
        return states[0][1].kind

    def _dimensions(self) -> Tuple[int, int]:
        if self.world is None:
            from tilegames.constants import GRID_COLS, GRID_ROWS
            return GRID_ROWS, GRID_COLS
        settings = get_settings(self.world)
        if self._game_kind() is GameKind.SLIDING:
            return settings.puzzle_size, settings.puzzle_size
        return settings.rows, settings.cols

    def _cell_at(self, x: float, y: float) -> Optional[Tuple[int, int]]:
        rows, cols = self._dimensions()
        geometry = compute_board_geometry(self.window.width, self.window.height, rows, cols)
        return cell_at_point(x, y, geometry, rows, cols)

    def on_mouse_press(self, sender, **kwargs):
        x = kwargs.get('x')
        y = kwargs.get('y')
        if x is None or y is None or kwargs.get('button') != LEFT_MOUSE_BUTTON:
            return
        self._press_cell = self._cell_at(x, y)
        self._press_xy = (x, y)
        self._drag_consumed = False

    def on_mouse_drag(self, sender, **kwargs):
        if self._press_cell is None or self._press_xy is None or self._drag_consumed:
            return
        if self._game_kind() is not GameKind.MATCH3 or self.hammer_armed:
            return
        x = kwargs.get('x')
        y = kwargs.get('y')
        if x is None or y is None:
            return
        step = drag_direction(x - self._press_xy[0], y - self._press_xy[1], self.drag_threshold)
        if step is None:
            return
        rows, cols = self._dimensions()
        src = self._press_cell
        dst = (src[0] + step[0], src[1] + step[1])
        self._drag_consumed = True
        if 0 <= dst[0] < rows and 0 <= dst[1] < cols:
            self.event_bus.emit(EVENT_TILE_SWAP_REQUEST, src=src, dst=dst)

    def on_mouse_release(self, sender, **kwargs):
        cell = self._press_cell
        consumed = self._drag_consumed
        self._press_cell = None
        self._press_xy = None
        self._drag_consumed = False
        if cell is None or consumed:
            return
        row, col = cell
        if self.hammer_armed and self._game_kind() is GameKind.MATCH3:
            self.hammer_armed = False
            self.event_bus.emit(EVENT_HAMMER_REQUEST, row=row, col=col)
            return
        self.event_bus.emit(EVENT_TILE_CLICK, row=row, col=col)

    def on_key_press(self, sender, **kwargs):
        key = kwargs.get('key')
        if not key:
            return
        key = str(key).lower()
        if self._game_kind() is GameKind.SLIDING:
            if key in ARROW_KEYS:
                self.event_bus.emit(EVENT_PUZZLE_ARROW, key=key)
                return
            event = SLIDING_KEYS.get(key)
        else:
            if key == "m":
                self.hammer_armed = not self.hammer_armed
                return
            event = MATCH3_KEYS.get(key)
        if event is not None:
            self.event_bus.emit(event)

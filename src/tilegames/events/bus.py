from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems that are not stored anywhere alive.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# INPUT & INTERACTION
# ============================================================================
EVENT_MOUSE_PRESS = "mouse_press"                  # payload: x, y, button
EVENT_MOUSE_DRAG = "mouse_drag"                    # payload: x, y, dx, dy
EVENT_MOUSE_RELEASE = "mouse_release"              # payload: x, y, button
EVENT_KEY_PRESS = "key_press"                      # payload: key=str
EVENT_TILE_CLICK = "tile_click"                    # payload: row, col


# ============================================================================
# MATCH-3 BOARD
# ============================================================================
EVENT_TILE_SELECTED = "tile_selected"              # payload: row, col
EVENT_TILE_DESELECTED = "tile_deselected"          # payload: reason=str
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_VALID = "tile_swap_valid"          # payload: src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_INVALID = "tile_swap_invalid"      # payload: src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_REVERTED = "tile_swap_reverted"    # payload: src=(r,c), dst=(r,c)
EVENT_MATCH_FOUND = "match_found"                  # payload: positions=[(r,c),...], size=int, reason=str
EVENT_SPECIAL_CREATED = "special_created"          # payload: position=(r,c), special=SpecialType, kind=int
EVENT_SPECIAL_ACTIVATED = "special_activated"      # payload: position=(r,c), special=SpecialType, area=[(r,c),...], depth=int
EVENT_MATCH_CLEARED = "match_cleared"              # payload: positions=[(r,c),...], gained=int, depth=int
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: moves=[((r,c),(r,c)),...]
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[(r,c),...]
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, positions=[(r,c),...]
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int
EVENT_BOARD_CHANGED = "board_changed"              # payload: reason=str
EVENT_BOARD_RESHUFFLED = "board_reshuffled"        # payload: reason=str
EVENT_SHUFFLE_REQUEST = "shuffle_request"          # payload: None
EVENT_HINT_REQUEST = "hint_request"                # payload: None
EVENT_HINT = "hint"                                # payload: src=(r,c)|None, dst=(r,c)|None
EVENT_HAMMER_REQUEST = "hammer_request"            # payload: row, col
EVENT_HAMMER_USED = "hammer_used"                  # payload: row, col, remaining=int
EVENT_UNDO_REQUEST = "undo_request"                # payload: None
EVENT_UNDO_APPLIED = "undo_applied"                # payload: remaining=int
EVENT_FEEDBACK = "feedback"                        # payload: tone in {"ok", "bad", "clear"}


# ============================================================================
# SESSION & SCORE
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"              # payload: score=int, gained=int
EVENT_MOVES_CHANGED = "moves_changed"              # payload: moves_remaining=int
EVENT_BEST_SCORE_CHANGED = "best_score_changed"    # payload: best_score=int
EVENT_LEVEL_COMPLETE = "level_complete"            # payload: level=int, next_target=int
EVENT_GAME_OVER = "game_over"                      # payload: score=int, best_score=int
EVENT_GAME_RESET_REQUEST = "game_reset_request"    # payload: None
EVENT_GAME_RESET = "game_reset"                    # payload: None


# ============================================================================
# SLIDING PUZZLE
# ============================================================================
EVENT_PUZZLE_ARROW = "puzzle_arrow"                # payload: key in {"up", "down", "left", "right"}
EVENT_PUZZLE_TILE_MOVED = "puzzle_tile_moved"      # payload: src=(r,c), dst=(r,c), value=int, moves=int
EVENT_PUZZLE_SHUFFLED = "puzzle_shuffled"          # payload: None
EVENT_PUZZLE_SOLVED = "puzzle_solved"              # payload: moves=int, elapsed=float
EVENT_PUZZLE_AUTO_SOLVED = "puzzle_auto_solved"    # payload: None
EVENT_PUZZLE_HINT = "puzzle_hint"                  # payload: positions=[(r,c),...]
EVENT_PUZZLE_NEW_GAME_REQUEST = "puzzle_new_game_request"  # payload: None
EVENT_PUZZLE_SOLVE_REQUEST = "puzzle_solve_request"        # payload: None
EVENT_PUZZLE_HINT_REQUEST = "puzzle_hint_request"          # payload: None

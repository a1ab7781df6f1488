import logging
from typing import List, Optional, Tuple

from esper import World

from tilegames.components.board import Board, Position
from tilegames.components.session import SessionSnapshot
from tilegames.events.bus import (
    EventBus,
    EVENT_BOARD_CHANGED,
    EVENT_BOARD_RESHUFFLED,
    EVENT_FEEDBACK,
    EVENT_GAME_RESET,
    EVENT_GAME_RESET_REQUEST,
    EVENT_HAMMER_REQUEST,
    EVENT_HAMMER_USED,
    EVENT_HINT,
    EVENT_HINT_REQUEST,
    EVENT_MOUSE_PRESS,
    EVENT_MOVES_CHANGED,
    EVENT_SCORE_CHANGED,
    EVENT_SHUFFLE_REQUEST,
    EVENT_TICK,
    EVENT_TILE_CLICK,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TILE_SWAP_REVERTED,
    EVENT_TILE_SWAP_VALID,
    EVENT_UNDO_APPLIED,
    EVENT_UNDO_REQUEST,
)
from tilegames.systems.board_ops import (
    find_matches,
    find_valid_swaps,
    generate_initial_board,
    shuffle_board,
)
from tilegames.systems.session_utils import (
    get_rng,
    get_selection,
    get_session,
    get_settings,
    get_undo_history,
)

logger = logging.getLogger(__name__)

RIGHT_MOUSE_BUTTON = 4


class BoardSystem:
    """Owns the match-3 board and turns player intents into board mutations.

    Every rejected intent (out of bounds, not adjacent, mid-cascade, game over,
    no hammers left, nothing to undo) is a silent no-op.
    """

    def __init__(self, world: World, event_bus: EventBus, rows: Optional[int] = None, cols: Optional[int] = None):
        self.world = world
        self.event_bus = event_bus
        settings = get_settings(world)
        self.board_entity = self.world.create_entity()
        self.world.add_component(
            self.board_entity,
            Board(rows=rows or settings.rows, cols=cols or settings.cols),
        )
        self._pending_revert: Optional[Tuple[Position, Position]] = None
        self._revert_timer = 0.0
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)
        self.event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)
        self.event_bus.subscribe(EVENT_SHUFFLE_REQUEST, self.on_shuffle_request)
        self.event_bus.subscribe(EVENT_HINT_REQUEST, self.on_hint_request)
        self.event_bus.subscribe(EVENT_HAMMER_REQUEST, self.on_hammer_request)
        self.event_bus.subscribe(EVENT_UNDO_REQUEST, self.on_undo_request)
        self.event_bus.subscribe(EVENT_GAME_RESET_REQUEST, self.on_reset_request)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self._init_board()

    @property
    def board(self) -> Board:
        return self.world.component_for_entity(self.board_entity, Board)

    @property
    def selected(self) -> Optional[Position]:
        return get_selection(self.world).position

    def _init_board(self):
        settings = get_settings(self.world)
        generate_initial_board(
            self.board,
            get_rng(self.world),
            settings.tile_kinds,
            max_attempts=settings.initial_board_retries,
        )

    def _input_blocked(self) -> bool:
        session = get_session(self.world)
        return session.is_resolving or session.game_over or self._pending_revert is not None

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def on_tile_click(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        if row is None or col is None:
            return
        self.click(row, col)

    def click(self, row: int, col: int) -> None:
        if self._input_blocked() or not self.board.in_bounds(row, col):
            return
        selection = get_selection(self.world)
        current = (row, col)
        if selection.position is None:
            selection.position = current
            self.event_bus.emit(EVENT_TILE_SELECTED, row=row, col=col)
        elif selection.position == current:
            self._deselect(reason='reselect')
        elif Board.is_adjacent(selection.position, current):
            src = selection.position
            self.attempt_swap(src, current)
        else:
            selection.position = current
            self.event_bus.emit(EVENT_TILE_SELECTED, row=row, col=col)

    def on_mouse_press(self, sender, **kwargs):
        # Right-click always clears the current selection.
        if kwargs.get('button') != RIGHT_MOUSE_BUTTON:
            return
        if get_selection(self.world).position is not None:
            self._deselect(reason='right_click')

    def _deselect(self, reason: str) -> None:
        selection = get_selection(self.world)
        prev = selection.position
        selection.position = None
        if prev is not None:
            self.event_bus.emit(EVENT_TILE_DESELECTED, reason=reason, prev_row=prev[0], prev_col=prev[1])

    # ------------------------------------------------------------------
    # Swaps
    # ------------------------------------------------------------------
    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        self.attempt_swap(tuple(src), tuple(dst))

    def attempt_swap(self, src: Position, dst: Position) -> bool:
        """Swap two adjacent tiles; keep the swap only if it produces a match."""
        if self._input_blocked():
            return False
        board = self.board
        if not (board.in_bounds(*src) and board.in_bounds(*dst)) or not Board.is_adjacent(src, dst):
            return False
        self._deselect(reason='swap')
        before = self._snapshot()
        board.swap(src, dst)
        matches = find_matches(board)
        if not matches:
            self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst)
            self.event_bus.emit(EVENT_FEEDBACK, tone="bad")
            delay = get_settings(self.world).swap_revert_delay
            self._pending_revert = (src, dst)
            self._revert_timer = delay
            if delay <= 0.0:
                self._finish_revert()
            return False

        session = get_session(self.world)
        get_undo_history(self.world).push(before)
        session.moves_remaining = max(0, session.moves_remaining - 1)
        self.event_bus.emit(EVENT_MOVES_CHANGED, moves_remaining=session.moves_remaining)
        self.event_bus.emit(EVENT_FEEDBACK, tone="ok")
        self.event_bus.emit(EVENT_TILE_SWAP_VALID, src=src, dst=dst, matches=matches)
        return True

    def on_tick(self, sender, **kwargs):
        if self._pending_revert is None:
            return
        self._revert_timer -= float(kwargs.get('dt', 1/60))
        if self._revert_timer <= 0.0:
            self._finish_revert()

    def _finish_revert(self) -> None:
        if self._pending_revert is None:
            return
        src, dst = self._pending_revert
        self._pending_revert = None
        self._revert_timer = 0.0
        self.board.swap(src, dst)
        self.event_bus.emit(EVENT_TILE_SWAP_REVERTED, src=src, dst=dst)

    # ------------------------------------------------------------------
    # Consumables and helpers
    # ------------------------------------------------------------------
    def on_hammer_request(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        if row is None or col is None:
            return
        self.use_hammer(row, col)

    def use_hammer(self, row: int, col: int) -> bool:
        """Smash one tile; special tiles fire their area. Does not cost a move."""
        if self._input_blocked():
            return False
        session = get_session(self.world)
        if session.hammers <= 0 or self.board.get(row, col) is None:
            return False
        get_undo_history(self.world).push(self._snapshot())
        session.hammers -= 1
        self._deselect(reason='hammer')
        self.event_bus.emit(EVENT_HAMMER_USED, row=row, col=col, remaining=session.hammers)
        return True

    def on_undo_request(self, sender, **kwargs):
        self.undo()

    def undo(self) -> bool:
        session = get_session(self.world)
        if session.is_resolving or self._pending_revert is not None:
            return False
        history = get_undo_history(self.world)
        snapshot = history.pop()
        if snapshot is None:
            return False
        self.board.restore(snapshot.board)
        session.score = snapshot.score
        session.moves_remaining = snapshot.moves_remaining
        session.level = snapshot.level
        session.target_score = snapshot.target_score
        session.hammers = snapshot.hammers
        session.game_over = False
        self._deselect(reason='undo')
        self.event_bus.emit(EVENT_UNDO_APPLIED, remaining=len(history))
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=session.score, gained=0)
        self.event_bus.emit(EVENT_MOVES_CHANGED, moves_remaining=session.moves_remaining)
        self.event_bus.emit(EVENT_BOARD_CHANGED, reason='undo')
        return True

    def on_shuffle_request(self, sender, **kwargs):
        self.shuffle()

    def shuffle(self) -> bool:
        """Player-requested reshuffle; scores nothing and costs no move."""
        if self._input_blocked():
            return False
        settings = get_settings(self.world)
        self._deselect(reason='shuffle')
        shuffle_board(self.board, get_rng(self.world), settings.tile_kinds, max_passes=settings.shuffle_clear_passes)
        self.event_bus.emit(EVENT_BOARD_RESHUFFLED, reason='manual')
        return True

    def on_hint_request(self, sender, **kwargs):
        self.hint()

    def hint(self) -> Optional[Tuple[Position, Position]]:
        if self._input_blocked():
            return None
        swaps: List[Tuple[Position, Position]] = find_valid_swaps(self.board)
        first = swaps[0] if swaps else None
        self.event_bus.emit(EVENT_HINT, src=first[0] if first else None, dst=first[1] if first else None)
        return first

    def on_reset_request(self, sender, **kwargs):
        self.reset()

    def reset(self) -> bool:
        """Start a fresh game; the best score survives."""
        session = get_session(self.world)
        if session.is_resolving:
            return False
        settings = get_settings(self.world)
        self._pending_revert = None
        self._revert_timer = 0.0
        session.score = 0
        session.moves_remaining = settings.initial_moves
        session.level = 1
        session.target_score = settings.level_target_score
        session.hammers = settings.starting_hammers
        session.game_over = False
        get_undo_history(self.world).clear()
        self._deselect(reason='reset')
        self._init_board()
        self.event_bus.emit(EVENT_GAME_RESET)
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=0, gained=0)
        self.event_bus.emit(EVENT_MOVES_CHANGED, moves_remaining=session.moves_remaining)
        self.event_bus.emit(EVENT_BOARD_CHANGED, reason='reset')
        return True

    def _snapshot(self) -> SessionSnapshot:
        session = get_session(self.world)
        return SessionSnapshot(
            board=self.board.snapshot(),
            score=session.score,
            moves_remaining=session.moves_remaining,
            level=session.level,
            target_score=session.target_score,
            hammers=session.hammers,
        )

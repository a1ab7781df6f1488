from __future__ import annotations

import logging
import math
from enum import Enum, auto
from typing import List, Optional, Set, Tuple

from esper import World

from tilegames.components.board import Position
from tilegames.events.bus import (
    EVENT_BEST_SCORE_CHANGED,
    EVENT_BOARD_RESHUFFLED,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_FEEDBACK,
    EVENT_GAME_OVER,
    EVENT_GRAVITY_APPLIED,
    EVENT_HAMMER_USED,
    EVENT_LEVEL_COMPLETE,
    EVENT_MATCH_CLEARED,
    EVENT_MATCH_FOUND,
    EVENT_MOVES_CHANGED,
    EVENT_REFILL_COMPLETED,
    EVENT_SCORE_CHANGED,
    EVENT_SPECIAL_ACTIVATED,
    EVENT_SPECIAL_CREATED,
    EVENT_TICK,
    EVENT_TILE_SWAP_VALID,
    EventBus,
)
from tilegames.systems.board_ops import (
    MatchResult,
    Run,
    apply_gravity,
    clear_positions,
    find_matches,
    get_board,
    has_any_valid_move,
    refill_board,
    shuffle_board,
)
from tilegames.systems.session_utils import get_cascade_state, get_session, get_settings, get_rng
from tilegames.systems.special_tiles import expand_with_specials, plan_specials

logger = logging.getLogger(__name__)

SwapPair = Tuple[Position, Position]


class ResolutionPhase(Enum):
    IDLE = auto()
    CLEARING = auto()
    COLLAPSING = auto()
    REFILLING = auto()
    RECHECKING = auto()


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_score_gain(
    num_tiles: int,
    cascade_depth: int,
    points_per_tile: int = 10,
    cascade_bonus_per_step: float = 0.25,
) -> int:
    """Points for one clearing iteration; depth 1 is the swap's own clear."""
    base = num_tiles * points_per_tile
    multiplier = 1 + (max(cascade_depth, 1) - 1) * cascade_bonus_per_step
    return round_half_up(base * multiplier)


class MatchResolutionSystem:
    """Drives clear -> collapse -> refill -> recheck until the board is stable.

    Each phase waits for its configured settle delay (advanced by ticks). With
    zero delays the whole cascade completes inside ``start``.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.phase = ResolutionPhase.IDLE
        self._timer = 0.0
        self._seeds: Set[Position] = set()
        self._runs: List[Run] = []
        self._swap: Optional[SwapPair] = None
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self.event_bus.subscribe(EVENT_TILE_SWAP_VALID, self.on_swap_valid)
        self.event_bus.subscribe(EVENT_HAMMER_USED, self.on_hammer_used)

    @property
    def active(self) -> bool:
        return self.phase is not ResolutionPhase.IDLE

    def start(
        self,
        matches: MatchResult | Set[Position],
        *,
        swap: Optional[SwapPair] = None,
        reason: str = "swap",
    ) -> bool:
        """Begin resolving ``matches``. Returns False if a cascade is already running."""
        if self.active:
            return False
        if isinstance(matches, MatchResult):
            seeds, runs = set(matches.positions), list(matches.runs)
        else:
            seeds, runs = set(matches), []
        if not seeds:
            return False
        session = get_session(self.world)
        cascade = get_cascade_state(self.world)
        session.is_resolving = True
        cascade.depth = 0
        self._seeds = seeds
        self._runs = runs
        self._swap = swap
        self._enter(ResolutionPhase.CLEARING, get_settings(self.world).clear_delay)
        self.event_bus.emit(EVENT_MATCH_FOUND, positions=sorted(seeds), size=len(seeds), reason=reason)
        self._advance_ready()
        return True

    def on_swap_valid(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        matches = kwargs.get('matches') or find_matches(get_board(self.world))
        self.start(matches, swap=(tuple(src), tuple(dst)), reason="swap")

    def on_hammer_used(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        if row is None or col is None:
            return
        self.start({(row, col)}, reason="hammer")

    def resolve_now(self) -> None:
        """Run the remaining phases without waiting for their settle delays."""
        while self.active:
            self._step()

    def on_tick(self, sender, **kwargs):
        if not self.active:
            return
        dt = kwargs.get('dt', 1/60)
        self._timer -= float(dt)
        self._advance_ready()

    def _advance_ready(self) -> None:
        while self.active and self._timer <= 0.0:
            self._step()

    def _enter(self, phase: ResolutionPhase, delay: float) -> None:
        logger.debug("Cascade phase %s -> %s", self.phase.name, phase.name)
        self.phase = phase
        self._timer = max(0.0, float(delay))

    def _step(self) -> None:
        if self.phase is ResolutionPhase.CLEARING:
            self._clear_step()
        elif self.phase is ResolutionPhase.COLLAPSING:
            self._collapse_step()
        elif self.phase is ResolutionPhase.REFILLING:
            self._refill_step()
        elif self.phase is ResolutionPhase.RECHECKING:
            self._recheck_step()

    def _clear_step(self) -> None:
        board = get_board(self.world)
        session = get_session(self.world)
        cascade = get_cascade_state(self.world)
        settings = get_settings(self.world)
        cascade.depth += 1

        specials = plan_specials(self._runs, self._swap)
        expansion = expand_with_specials(board, self._seeds, keep=specials.keys())
        for pos, area in expansion.activated.items():
            tile = board.get(*pos)
            self.event_bus.emit(
                EVENT_SPECIAL_ACTIVATED,
                position=pos,
                special=tile.special,
                area=sorted(area),
                depth=cascade.depth,
            )
        for pos in expansion.primed:
            board.set(*pos, board.get(*pos).primed_copy())
        cleared = clear_positions(board, expansion.clear)
        for pos, tile in specials.items():
            board.set(*pos, tile)
            self.event_bus.emit(EVENT_SPECIAL_CREATED, position=pos, special=tile.special, kind=tile.kind)

        # New specials stay on the board but their cells still count as matched.
        gained = compute_score_gain(
            len(cleared) + len(specials),
            cascade.depth,
            settings.points_per_tile,
            settings.cascade_bonus_per_step,
        )
        session.score += gained
        self.event_bus.emit(EVENT_MATCH_CLEARED, positions=cleared, gained=gained, depth=cascade.depth)
        self.event_bus.emit(EVENT_FEEDBACK, tone="clear")
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=session.score, gained=gained)
        if session.score > session.best_score:
            session.best_score = session.score
            self.event_bus.emit(EVENT_BEST_SCORE_CHANGED, best_score=session.best_score)
        self.event_bus.emit(EVENT_CASCADE_STEP, depth=cascade.depth, positions=cleared)
        # Swap endpoints only steer placement on the first iteration.
        self._swap = None
        self._enter(ResolutionPhase.COLLAPSING, settings.collapse_delay)

    def _collapse_step(self) -> None:
        board = get_board(self.world)
        moves = apply_gravity(board)
        self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=[(m.source, m.target) for m in moves])
        self._enter(ResolutionPhase.REFILLING, get_settings(self.world).refill_delay)

    def _refill_step(self) -> None:
        board = get_board(self.world)
        settings = get_settings(self.world)
        spawned = refill_board(board, get_rng(self.world), settings.tile_kinds)
        self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=spawned)
        self._enter(ResolutionPhase.RECHECKING, 0.0)

    def _recheck_step(self) -> None:
        board = get_board(self.world)
        cascade = get_cascade_state(self.world)
        settings = get_settings(self.world)
        matches = find_matches(board)
        primed: List[Position] = []
        for pos in board.positions():
            tile = board.get(*pos)
            if tile is not None and tile.primed:
                primed.append(pos)
        if not matches and not primed:
            self._finish()
            return
        if cascade.depth >= settings.max_cascade_depth:
            logger.warning("Cascade stopped at depth %d with %d tiles still matched", cascade.depth, len(matches))
            self._finish()
            return
        self._seeds = set(matches.positions) | set(primed)
        self._runs = list(matches.runs)
        self._enter(ResolutionPhase.CLEARING, settings.clear_delay)
        self.event_bus.emit(EVENT_MATCH_FOUND, positions=sorted(self._seeds), size=len(self._seeds), reason="cascade")

    def _finish(self) -> None:
        session = get_session(self.world)
        cascade = get_cascade_state(self.world)
        settings = get_settings(self.world)
        self.phase = ResolutionPhase.IDLE
        self._timer = 0.0
        self._seeds = set()
        self._runs = []
        self._swap = None
        self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=cascade.depth)

        if session.target_score > 0 and session.score >= session.target_score:
            completed = session.level
            session.level += 1
            session.target_score = round_half_up(session.target_score * settings.level_target_growth)
            session.moves_remaining = settings.initial_moves
            self.event_bus.emit(EVENT_LEVEL_COMPLETE, level=completed, next_target=session.target_score)
            self.event_bus.emit(EVENT_MOVES_CHANGED, moves_remaining=session.moves_remaining)

        if session.moves_remaining <= 0:
            session.game_over = True
            session.is_resolving = False
            self.event_bus.emit(EVENT_GAME_OVER, score=session.score, best_score=session.best_score)
            return
        board = get_board(self.world)
        if not has_any_valid_move(board):
            logger.info("No valid moves left, reshuffling board")
            shuffle_board(board, get_rng(self.world), settings.tile_kinds, max_passes=settings.shuffle_clear_passes)
            self.event_bus.emit(EVENT_BOARD_RESHUFFLED, reason="deadlock")
        session.is_resolving = False

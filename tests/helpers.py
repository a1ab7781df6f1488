from __future__ import annotations

import random
from typing import List, Optional

from tilegames.components.board import Board
from tilegames.events.bus import EVENT_TICK, EventBus
from tilegames.settings import GameSettings
from tilegames.systems.board import BoardSystem
from tilegames.systems.match_resolution import MatchResolutionSystem
from tilegames.world import create_world


def base_pattern(rows: int = 8, cols: int = 8) -> List[List[Optional[int]]]:
    """Kinds 0-3 laid out so no row or column holds a run of three."""
    return [[(2 * r + c) % 4 for c in range(cols)] for r in range(rows)]


BASE_PATTERN = base_pattern()


def stalemate_pattern(rows: int = 5, cols: int = 5) -> List[List[Optional[int]]]:
    """Diagonal stripes of three kinds: no matches and no match-producing swap."""
    return [[(r + c) % 3 for c in range(cols)] for r in range(rows)]


def load_kinds(board: Board, kinds: List[List[Optional[int]]]) -> None:
    board.restore(Board.from_kinds(kinds).snapshot())


def build_match3(settings: GameSettings | None = None, *, seed: int = 1234, rows: int | None = None, cols: int | None = None):
    """Return (bus, world, board_system, resolver) wired the way main.py does."""
    bus = EventBus()
    settings = settings or GameSettings.instant()
    world = create_world(bus, settings=settings, rng=random.Random(seed))
    resolver = MatchResolutionSystem(world, bus)
    board_system = BoardSystem(world, bus, rows=rows, cols=cols)
    return bus, world, board_system, resolver


def drive_ticks(bus: EventBus, count: int = 60, dt: float = 0.05) -> None:
    for _ in range(count):
        bus.emit(EVENT_TICK, dt=dt)


def row_clear_layout() -> List[List[Optional[int]]]:
    """Swapping (2,2) down into (3,2) completes a horizontal run of four 5s."""
    kinds = base_pattern()
    kinds[3][0] = 5
    kinds[3][1] = 5
    kinds[3][3] = 5
    kinds[2][2] = 5
    return kinds

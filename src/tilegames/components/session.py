from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Optional

from tilegames.components.board import Position, Snapshot


@dataclass(slots=True)
class Session:
    """Score and move bookkeeping for one match-3 game."""

    score: int = 0
    moves_remaining: int = 0
    best_score: int = 0
    level: int = 1
    target_score: int = 0
    hammers: int = 0
    game_over: bool = False
    is_resolving: bool = False


@dataclass(slots=True)
class Selection:
    """At most one selected board coordinate."""

    position: Optional[Position] = None


@dataclass(slots=True)
class CascadeState:
    """Tracks the in-flight resolution shared between board and resolver systems."""

    depth: int = 0


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    board: Snapshot
    score: int
    moves_remaining: int
    level: int
    target_score: int
    hammers: int


@dataclass(slots=True)
class UndoHistory:
    """Bounded stack of copy-on-push snapshots; the oldest entry drops first."""

    depth: int = 10
    entries: Deque[SessionSnapshot] = field(init=False)

    def __post_init__(self) -> None:
        self.entries = deque(maxlen=max(0, self.depth))

    def push(self, snapshot: SessionSnapshot) -> None:
        if self.depth <= 0:
            return
        self.entries.append(snapshot)

    def pop(self) -> Optional[SessionSnapshot]:
        if not self.entries:
            return None
        return self.entries.pop()

    def clear(self) -> None:
        self.entries.clear()

    def __len__(self) -> int:
        return len(self.entries)

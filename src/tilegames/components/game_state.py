"""Game state resource describing which tile game a world hosts."""
from dataclasses import dataclass
from enum import Enum, auto


class GameKind(Enum):
    MATCH3 = auto()
    SLIDING = auto()


@dataclass
class GameState:
    """Singleton component storing the active game kind."""
    kind: GameKind = GameKind.MATCH3

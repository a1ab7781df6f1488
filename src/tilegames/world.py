import random

from esper import World
from .events.bus import EventBus
from tilegames.components.game_state import GameKind, GameState
from tilegames.components.session import CascadeState, Selection, Session, UndoHistory
from tilegames.settings import GameSettings


def create_world(
    event_bus: EventBus,
    game: GameKind = GameKind.MATCH3,
    *,
    settings: GameSettings | None = None,
    rng: random.Random | None = None,
    best_score: int = 0,
) -> World:
    """Create a world holding the shared resources for one tile game.

    Systems (board, resolver, puzzle, persistence, input, rendering) are
    constructed separately against the returned world and ``event_bus``.
    """
    world = World()
    settings = settings or GameSettings()
    setattr(world, "random", rng or random.Random())
    setattr(world, "settings", settings)

    world.create_entity(GameState(kind=game))
    if game is GameKind.MATCH3:
        world.create_entity(
            Session(
                moves_remaining=settings.initial_moves,
                best_score=max(0, best_score),
                target_score=settings.level_target_score,
                hammers=settings.starting_hammers,
            ),
            CascadeState(),
            Selection(),
            UndoHistory(depth=settings.undo_depth),
        )
    elif game is not GameKind.SLIDING:
        raise ValueError(f"Unknown game kind: {game!r}")
    return world

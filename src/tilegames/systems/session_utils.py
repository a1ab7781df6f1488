import random

from esper import World

from tilegames.components.session import CascadeState, Selection, Session, UndoHistory
from tilegames.settings import GameSettings


def get_session(world: World) -> Session:
    """Return the shared Session component, creating it if absent."""
    existing = list(world.get_component(Session))
    if existing:
        return existing[0][1]
    world.create_entity(Session())
    return list(world.get_component(Session))[0][1]


def get_cascade_state(world: World) -> CascadeState:
    existing = list(world.get_component(CascadeState))
    if existing:
        return existing[0][1]
    world.create_entity(CascadeState())
    return list(world.get_component(CascadeState))[0][1]


def get_selection(world: World) -> Selection:
    existing = list(world.get_component(Selection))
    if existing:
        return existing[0][1]
    world.create_entity(Selection())
    return list(world.get_component(Selection))[0][1]


def get_undo_history(world: World) -> UndoHistory:
    existing = list(world.get_component(UndoHistory))
    if existing:
        return existing[0][1]
    world.create_entity(UndoHistory(depth=get_settings(world).undo_depth))
    return list(world.get_component(UndoHistory))[0][1]


def get_settings(world: World) -> GameSettings:
    settings = getattr(world, "settings", None)
    if isinstance(settings, GameSettings):
        return settings
    settings = GameSettings()
    setattr(world, "settings", settings)
    return settings


def get_rng(world: World) -> random.Random:
    rng = getattr(world, "random", None)
    if isinstance(rng, random.Random):
        return rng
    rng = random.Random()
    setattr(world, "random", rng)
    return rng

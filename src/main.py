"""Entry point for the tile games.

Sets up the ECS world, event bus, systems, and Arcade window. Run with
``python src/main.py`` for match-3 or ``python src/main.py sliding`` for the
sliding puzzle.
"""
import logging
import sys

from arcade import Window, color, key, run, set_background_color

from tilegames.components.game_state import GameKind
from tilegames.events.bus import (
    EVENT_KEY_PRESS,
    EVENT_MOUSE_DRAG,
    EVENT_MOUSE_PRESS,
    EVENT_MOUSE_RELEASE,
    EVENT_TICK,
    EventBus,
)
from tilegames.settings import load_settings
from tilegames.systems.best_score_system import BestScoreSystem
from tilegames.systems.board import BoardSystem
from tilegames.systems.input import InputSystem
from tilegames.systems.match_resolution import MatchResolutionSystem
from tilegames.systems.render import RenderSystem
from tilegames.systems.sliding_puzzle import SlidingPuzzleSystem
from tilegames.world import create_world

KEY_NAMES = {
    key.UP: "up",
    key.DOWN: "down",
    key.LEFT: "left",
    key.RIGHT: "right",
    key.ENTER: "enter",
    key.RETURN: "enter",
}


class TileGamesWindow(Window):
    def __init__(self, game: GameKind = GameKind.MATCH3):
        title = "Chandy Crave" if game is GameKind.MATCH3 else "Sliding Puzzle"
        super().__init__(800, 640, title)
        self.set_update_rate(1/60)
        self.event_bus = EventBus()
        self.world = create_world(self.event_bus, game, settings=load_settings("config.json"))
        if game is GameKind.MATCH3:
            self.best_score_system = BestScoreSystem(self.world, self.event_bus)
            self.match_resolution_system = MatchResolutionSystem(self.world, self.event_bus)
            self.board_system = BoardSystem(self.world, self.event_bus)
        else:
            self.sliding_puzzle_system = SlidingPuzzleSystem(self.world, self.event_bus)
            self.sliding_puzzle_system.new_game()
        self.render_system = RenderSystem(self.world, self.event_bus, self)
        self.input_system = InputSystem(self.event_bus, self, self.world)
        set_background_color(color.BLACK)

    def on_draw(self):
        self.clear()
        self.render_system.process()

    def on_update(self, delta_time: float):
        self.event_bus.emit(EVENT_TICK, dt=delta_time)

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        self.event_bus.emit(EVENT_MOUSE_PRESS, x=x, y=y, button=button)

    def on_mouse_drag(self, x: float, y: float, dx: float, dy: float, buttons: int, modifiers: int):
        self.event_bus.emit(EVENT_MOUSE_DRAG, x=x, y=y, dx=dx, dy=dy)

    def on_mouse_release(self, x: float, y: float, button: int, modifiers: int):
        self.event_bus.emit(EVENT_MOUSE_RELEASE, x=x, y=y, button=button)

    def on_key_press(self, symbol: int, modifiers: int):
        name = KEY_NAMES.get(symbol)
        if name is None:
            try:
                name = chr(symbol)
            except (ValueError, OverflowError):
                return
        self.event_bus.emit(EVENT_KEY_PRESS, key=name)


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    game = GameKind.SLIDING if "sliding" in sys.argv[1:] else GameKind.MATCH3
    window = TileGamesWindow(game)
    run()

if __name__ == "__main__":
    main()

from tilegames.components.game_state import GameKind
from tilegames.components.tile import SpecialType, Tile
from tilegames.events.bus import EVENT_FEEDBACK, EVENT_TICK, EVENT_TILE_SELECTED, EventBus
from tilegames.systems.render import KIND_COLORS, RenderSystem
from tilegames.systems.sliding_puzzle import SlidingPuzzleSystem
from tilegames.world import create_world
from tests.helpers import BASE_PATTERN, build_match3, load_kinds


class DummyWindow:
    def __init__(self, width=800, height=640):
        self.width = width
        self.height = height


def test_match3_draw_list_covers_filled_cells():
    bus, world, board_system, _ = build_match3()
    load_kinds(board_system.board, BASE_PATTERN)
    board_system.board.set(0, 0, None)
    board_system.board.set(1, 1, Tile(2, SpecialType.BOMB))
    render = RenderSystem(world, bus, DummyWindow())
    commands = render.cell_draw_list()
    assert len(commands) == 63
    labels = [cmd["label"] for cmd in commands if cmd["label"]]
    assert labels == ["*"]
    assert all(cmd["color"] in KIND_COLORS for cmd in commands)


def test_selection_and_hint_highlight_then_expire():
    bus, world, board_system, _ = build_match3()
    render = RenderSystem(world, bus, DummyWindow())
    bus.emit(EVENT_TILE_SELECTED, row=2, col=2)
    assert sum(1 for cmd in render.cell_draw_list() if cmd["highlight"]) == 1
    render.on_hint(None, src=(5, 5), dst=(5, 6))
    assert render.hint_cells == [(5, 5), (5, 6)]
    for _ in range(25):
        bus.emit(EVENT_TICK, dt=0.05)
    assert render.hint_cells == []


def test_hud_text_and_feedback():
    bus, world, board_system, _ = build_match3()
    render = RenderSystem(world, bus, DummyWindow())
    assert "Moves 24" in render.hud_text()
    bus.emit(EVENT_FEEDBACK, tone="bad")
    assert render.last_feedback == "bad"


def test_sliding_draw_list_skips_hole():
    bus = EventBus()
    world = create_world(bus, GameKind.SLIDING)
    SlidingPuzzleSystem(world, bus)
    render = RenderSystem(world, bus, DummyWindow())
    commands = render.cell_draw_list()
    assert len(commands) == 15
    assert sorted(int(cmd["label"]) for cmd in commands) == list(range(1, 16))
    assert render.hud_text() == "Moves 0   Time 00:00"

from tilegames.components.tile import SpecialType, Tile
from tilegames.events.bus import (
    EVENT_BOARD_RESHUFFLED,
    EVENT_GAME_OVER,
    EVENT_GAME_RESET,
    EVENT_GAME_RESET_REQUEST,
    EVENT_HINT,
    EVENT_LEVEL_COMPLETE,
    EVENT_MATCH_CLEARED,
    EVENT_SPECIAL_ACTIVATED,
    EVENT_UNDO_APPLIED,
)
from tilegames.settings import GameSettings
from tilegames.systems.board_ops import creates_match
from tilegames.systems.session_utils import get_session, get_undo_history
from tests.helpers import BASE_PATTERN, build_match3, load_kinds, row_clear_layout, stalemate_pattern


def record(bus, event):
    seen = []
    bus.subscribe(event, lambda sender, **payload: seen.append(payload))
    return seen


def test_last_move_ends_game_and_blocks_input():
    bus, world, board_system, _ = build_match3(GameSettings.instant(initial_moves=1, level_target_score=0))
    load_kinds(board_system.board, row_clear_layout())
    over = record(bus, EVENT_GAME_OVER)
    assert board_system.attempt_swap((2, 2), (3, 2))
    session = get_session(world)
    assert session.moves_remaining == 0
    assert session.game_over
    assert over and over[0]['score'] == session.score
    assert board_system.attempt_swap((0, 0), (0, 1)) is False
    board_system.click(0, 0)
    assert board_system.selected is None


def test_reaching_target_advances_level_and_restores_moves():
    bus, world, board_system, _ = build_match3(GameSettings.instant(initial_moves=5, level_target_score=20))
    load_kinds(board_system.board, row_clear_layout())
    levels = record(bus, EVENT_LEVEL_COMPLETE)
    assert board_system.attempt_swap((2, 2), (3, 2))
    session = get_session(world)
    assert levels == [{'level': 1, 'next_target': 30}]
    assert session.level == 2
    assert session.target_score == 30
    assert session.moves_remaining == 5
    assert not session.game_over


def test_hammer_clears_one_tile_without_costing_a_move():
    bus, world, board_system, _ = build_match3()
    load_kinds(board_system.board, BASE_PATTERN)
    cleared = record(bus, EVENT_MATCH_CLEARED)
    session = get_session(world)
    assert board_system.use_hammer(7, 0) is True
    assert session.hammers == 2
    assert session.moves_remaining == 24
    assert cleared[0]['positions'] == [(7, 0)]
    assert cleared[0]['gained'] == 10
    assert session.score >= 10


def test_hammer_on_bomb_fires_blast():
    bus, world, board_system, _ = build_match3()
    load_kinds(board_system.board, BASE_PATTERN)
    board_system.board.set(4, 4, Tile(1, SpecialType.BOMB))
    activated = record(bus, EVENT_SPECIAL_ACTIVATED)
    cleared = record(bus, EVENT_MATCH_CLEARED)
    board_system.use_hammer(4, 4)
    assert activated[0]['position'] == (4, 4)
    assert len(activated[0]['area']) == 9
    assert len(cleared[0]['positions']) == 9


def test_hammer_requires_charges():
    bus, world, board_system, _ = build_match3(GameSettings.instant(starting_hammers=0))
    before = board_system.board.snapshot()
    assert board_system.use_hammer(0, 0) is False
    assert board_system.board.snapshot() == before


def test_undo_restores_board_score_and_moves():
    bus, world, board_system, _ = build_match3()
    layout = row_clear_layout()
    load_kinds(board_system.board, layout)
    before = board_system.board.snapshot()
    undone = record(bus, EVENT_UNDO_APPLIED)
    assert board_system.attempt_swap((2, 2), (3, 2))
    session = get_session(world)
    best = session.best_score
    assert session.score > 0
    assert board_system.undo() is True
    assert board_system.board.snapshot() == before
    assert session.score == 0
    assert session.moves_remaining == 24
    assert session.best_score == best
    assert undone == [{'remaining': 0}]
    assert board_system.undo() is False


def test_undo_history_is_bounded():
    bus, world, board_system, _ = build_match3(GameSettings.instant(undo_depth=2, starting_hammers=5))
    for col in range(4):
        board_system.use_hammer(7, col)
    assert len(get_undo_history(world)) == 2


def test_hint_points_at_a_valid_swap():
    bus, world, board_system, _ = build_match3()
    load_kinds(board_system.board, row_clear_layout())
    hints = record(bus, EVENT_HINT)
    swap = board_system.hint()
    assert swap is not None
    assert creates_match(board_system.board, *swap)
    assert hints == [{'src': swap[0], 'dst': swap[1]}]


def test_hint_on_stalemate_reports_nothing():
    bus, world, board_system, _ = build_match3(rows=5, cols=5)
    load_kinds(board_system.board, stalemate_pattern())
    assert board_system.hint() is None


def test_manual_shuffle_scores_nothing():
    bus, world, board_system, _ = build_match3()
    reshuffles = record(bus, EVENT_BOARD_RESHUFFLED)
    assert board_system.shuffle() is True
    session = get_session(world)
    assert reshuffles == [{'reason': 'manual'}]
    assert session.score == 0
    assert session.moves_remaining == 24
    assert not board_system.board.empty_positions()


def test_reset_keeps_best_score():
    bus, world, board_system, _ = build_match3()
    load_kinds(board_system.board, row_clear_layout())
    board_system.attempt_swap((2, 2), (3, 2))
    session = get_session(world)
    best = session.best_score
    resets = record(bus, EVENT_GAME_RESET)
    bus.emit(EVENT_GAME_RESET_REQUEST)
    assert resets == [{}]
    assert session.score == 0
    assert session.moves_remaining == 24
    assert session.level == 1
    assert session.hammers == 3
    assert session.best_score == best > 0
    assert len(get_undo_history(world)) == 0

import json

from tilegames.events.bus import EVENT_BEST_SCORE_CHANGED, EventBus
from tilegames.systems.best_score_system import BestScoreSystem
from tilegames.systems.session_utils import get_session
from tilegames.world import create_world
from tests.helpers import build_match3, load_kinds, row_clear_layout


def test_missing_file_reads_as_zero(tmp_path):
    bus = EventBus()
    world = create_world(bus)
    system = BestScoreSystem(world, bus, save_path=tmp_path / "best.json")
    assert system.read_best_score() == 0
    assert get_session(world).best_score == 0


def test_loads_stored_best_into_session(tmp_path):
    path = tmp_path / "best.json"
    path.write_text(json.dumps({"best_score": 420}), encoding="utf-8")
    bus = EventBus()
    world = create_world(bus)
    BestScoreSystem(world, bus, save_path=path)
    assert get_session(world).best_score == 420


def test_corrupt_file_is_ignored(tmp_path):
    path = tmp_path / "best.json"
    path.write_text("{not json", encoding="utf-8")
    bus = EventBus()
    world = create_world(bus)
    system = BestScoreSystem(world, bus, save_path=path)
    assert system.read_best_score() == 0
    path.write_text(json.dumps({"best_score": "lots"}), encoding="utf-8")
    assert system.read_best_score() == 0
    path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
    assert system.read_best_score() == 0


def test_new_best_is_written_only_when_higher(tmp_path):
    path = tmp_path / "nested" / "best.json"
    bus = EventBus()
    world = create_world(bus)
    system = BestScoreSystem(world, bus, save_path=path)
    bus.emit(EVENT_BEST_SCORE_CHANGED, best_score=150)
    assert json.loads(path.read_text(encoding="utf-8")) == {"best_score": 150}
    bus.emit(EVENT_BEST_SCORE_CHANGED, best_score=90)
    assert system.read_best_score() == 150


def test_scoring_swap_persists_best(tmp_path):
    path = tmp_path / "best.json"
    bus, world, board_system, _ = build_match3()
    BestScoreSystem(world, bus, save_path=path)
    load_kinds(board_system.board, row_clear_layout())
    board_system.attempt_swap((2, 2), (3, 2))
    session = get_session(world)
    assert json.loads(path.read_text(encoding="utf-8"))["best_score"] == session.best_score


def test_default_path_is_under_working_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    bus = EventBus()
    world = create_world(bus)
    system = BestScoreSystem(world, bus)
    assert system.save_path == tmp_path / "data" / "best_score.json"
    bus.emit(EVENT_BEST_SCORE_CHANGED, best_score=12)
    assert json.loads((tmp_path / "data" / "best_score.json").read_text(encoding="utf-8")) == {"best_score": 12}

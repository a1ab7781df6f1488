import json

from tilegames import constants
from tilegames.settings import GameSettings, load_settings


def test_defaults_mirror_constants():
    settings = GameSettings()
    assert settings.rows == constants.GRID_ROWS
    assert settings.tile_kinds == constants.TILE_KINDS
    assert settings.initial_moves == constants.INITIAL_MOVES
    assert settings.clear_delay == constants.CLEAR_DELAY


def test_instant_zeroes_delays_and_accepts_overrides():
    settings = GameSettings.instant(initial_moves=3)
    assert settings.initial_moves == 3
    assert settings.swap_revert_delay == 0.0
    assert settings.clear_delay == settings.collapse_delay == settings.refill_delay == 0.0


def test_load_missing_or_none_gives_defaults(tmp_path):
    assert load_settings(None) == GameSettings()
    assert load_settings(tmp_path / "absent.json") == GameSettings()


def test_load_merges_known_keys(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"initial_moves": 30, "clear_delay": 1, "bogus": True}), encoding="utf-8")
    settings = load_settings(path)
    assert settings.initial_moves == 30
    assert settings.clear_delay == 1.0
    assert isinstance(settings.clear_delay, float)
    assert settings.rows == constants.GRID_ROWS


def test_bad_payloads_fall_back(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("not json at all", encoding="utf-8")
    assert load_settings(path) == GameSettings()
    path.write_text(json.dumps([1, 2]), encoding="utf-8")
    assert load_settings(path) == GameSettings()
    path.write_text(json.dumps({"rows": "many"}), encoding="utf-8")
    assert load_settings(path).rows == constants.GRID_ROWS
    path.write_text(json.dumps({"tile_kinds": 0, "initial_moves": -3, "rows": 2.9}), encoding="utf-8")
    settings = load_settings(path)
    assert settings.tile_kinds == constants.TILE_KINDS
    assert settings.initial_moves == constants.INITIAL_MOVES
    assert settings.rows == constants.GRID_ROWS
    path.write_text(json.dumps({"cols": True, "clear_delay": -0.5}), encoding="utf-8")
    settings = load_settings(path)
    assert settings.cols == constants.GRID_COLS
    assert settings.clear_delay == constants.CLEAR_DELAY


"""Tunable game settings.

Defaults come from ``tilegames.constants``; an optional JSON file can override
any field. Unknown keys are ignored and unreadable files fall back to defaults.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict

from tilegames import constants

logger = logging.getLogger(__name__)

# Smallest accepted value per field; loaded values below it keep the default.
MINIMUMS: Dict[str, float] = {
    "rows": constants.MIN_RUN,
    "cols": constants.MIN_RUN,
    "tile_kinds": 3,
    "initial_moves": 1,
    "points_per_tile": 0,
    "cascade_bonus_per_step": 0.0,
    "initial_board_retries": 0,
    "shuffle_clear_passes": 0,
    "max_cascade_depth": 1,
    "undo_depth": 0,
    "starting_hammers": 0,
    "level_target_score": 0,
    "level_target_growth": 1.0,
    "swap_revert_delay": 0.0,
    "clear_delay": 0.0,
    "collapse_delay": 0.0,
    "refill_delay": 0.0,
    "puzzle_size": 2,
    "shuffle_walk_steps": 0,
}


@dataclass(slots=True)
class GameSettings:
    rows: int = constants.GRID_ROWS
    cols: int = constants.GRID_COLS
    tile_kinds: int = constants.TILE_KINDS
    initial_moves: int = constants.INITIAL_MOVES
    points_per_tile: int = constants.POINTS_PER_TILE
    cascade_bonus_per_step: float = constants.CASCADE_BONUS_PER_STEP
    initial_board_retries: int = constants.INITIAL_BOARD_RETRIES
    shuffle_clear_passes: int = constants.SHUFFLE_CLEAR_PASSES
    max_cascade_depth: int = constants.MAX_CASCADE_DEPTH
    undo_depth: int = constants.UNDO_DEPTH
    starting_hammers: int = constants.STARTING_HAMMERS
    level_target_score: int = constants.LEVEL_TARGET_SCORE
    level_target_growth: float = constants.LEVEL_TARGET_GROWTH
    swap_revert_delay: float = constants.SWAP_REVERT_DELAY
    clear_delay: float = constants.CLEAR_DELAY
    collapse_delay: float = constants.COLLAPSE_DELAY
    refill_delay: float = constants.REFILL_DELAY
    puzzle_size: int = constants.PUZZLE_SIZE
    shuffle_walk_steps: int = constants.SHUFFLE_WALK_STEPS

    @classmethod
    def instant(cls, **overrides: Any) -> "GameSettings":
        """Settings with every presentation pause collapsed to zero."""
        values: Dict[str, Any] = {
            "swap_revert_delay": 0.0,
            "clear_delay": 0.0,
            "collapse_delay": 0.0,
            "refill_delay": 0.0,
        }
        values.update(overrides)
        return cls(**values)


def _coerce_setting(key: str, value: Any, default: Any) -> Any:
    """Return ``value`` typed like ``default``; raise ValueError if it does not fit."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number")
    if isinstance(default, int):
        if not isinstance(value, int):
            raise ValueError(f"{key} must be a whole number")
    else:
        value = float(value)
    minimum = MINIMUMS.get(key)
    if minimum is not None and value < minimum:
        raise ValueError(f"{key} must be at least {minimum}")
    return value


def load_settings(path: Path | str | None) -> GameSettings:
    """Load settings from a JSON file, merged over the defaults."""
    if path is None:
        return GameSettings()
    settings_path = Path(path)
    if not settings_path.exists():
        logger.debug("Settings file %s not found, using defaults", settings_path)
        return GameSettings()
    try:
        with settings_path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Failed to load settings from %s: %s, using defaults", settings_path, exc)
        return GameSettings()
    if not isinstance(payload, dict):
        logger.warning("Settings file %s does not hold an object, using defaults", settings_path)
        return GameSettings()
    known = {f.name for f in fields(GameSettings)}
    defaults = GameSettings()
    overrides: Dict[str, Any] = {}
    for key, value in payload.items():
        if key not in known:
            continue
        default_value = getattr(defaults, key)
        try:
            overrides[key] = _coerce_setting(key, value, default_value)
        except ValueError as exc:
            logger.warning("Ignoring invalid setting %s=%r: %s", key, value, exc)
    return GameSettings(**overrides)

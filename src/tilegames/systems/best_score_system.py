from __future__ import annotations

import json
import logging
from pathlib import Path

from esper import World

from tilegames.constants import BEST_SCORE_KEY
from tilegames.events.bus import EVENT_BEST_SCORE_CHANGED, EventBus
from tilegames.systems.session_utils import get_session

logger = logging.getLogger(__name__)


class BestScoreSystem:
    """Persists the single best-score integer across sessions."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        save_path: Path | None = None,
        load_existing: bool = True,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self._save_path = Path(save_path) if save_path is not None else self._default_save_path()
        self.event_bus.subscribe(EVENT_BEST_SCORE_CHANGED, self._on_best_score_changed)
        if load_existing:
            self.load()

    @staticmethod
    def _default_save_path() -> Path:
        return Path.cwd() / "data" / "best_score.json"

    @property
    def save_path(self) -> Path:
        return self._save_path

    def read_best_score(self) -> int:
        try:
            with self._save_path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except FileNotFoundError:
            return 0
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Ignoring unreadable best score file %s: %s", self._save_path, exc)
            return 0
        if not isinstance(payload, dict):
            return 0
        try:
            return max(0, int(payload.get(BEST_SCORE_KEY, 0)))
        except (TypeError, ValueError):
            return 0

    def load(self) -> int:
        session = get_session(self.world)
        stored = self.read_best_score()
        if stored > session.best_score:
            session.best_score = stored
        return session.best_score

    def save(self, best_score: int | None = None) -> None:
        value = get_session(self.world).best_score if best_score is None else best_score
        try:
            self._save_path.parent.mkdir(parents=True, exist_ok=True)
            with self._save_path.open("w", encoding="utf-8") as handle:
                json.dump({BEST_SCORE_KEY: int(value)}, handle)
        except OSError as exc:
            logger.error("Failed to save best score to %s: %s", self._save_path, exc)

    def _on_best_score_changed(self, sender, **kwargs):
        best = kwargs.get("best_score")
        if best is None:
            return
        if int(best) > self.read_best_score():
            self.save(int(best))

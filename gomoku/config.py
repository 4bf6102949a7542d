# gomoku/config.py
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Any
import logging
import os
import tomllib

logger = logging.getLogger(__name__)

# Pattern scores, keyed by name (see Evaluator.pattern_score)
PATTERN_SCORES = {
    "WIN": 100000,
    "OPEN_FOUR": 50000,
    "FOUR": 10000,
    "OPEN_THREE": 5000,
    "THREE": 1000,
    "OPEN_TWO": 500,
    "TWO": 100,
    "ONE": 10,
}


class Difficulty(IntEnum):
    """AI strength; the value is the search depth handed to the engine."""

    EASY = 2
    MEDIUM = 3
    HARD = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @property
    def description(self) -> str:
        return _DIFFICULTY_DESCRIPTIONS[self]

    @property
    def depth(self) -> int:
        return int(self)

    @classmethod
    def from_name(cls, name: str) -> "Difficulty":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown difficulty: {name!r}") from None


_DIFFICULTY_DESCRIPTIONS = {
    Difficulty.EASY: "Depth 2 - Quick response",
    Difficulty.MEDIUM: "Depth 3 - Balanced",
    Difficulty.HARD: "Depth 4 - Strong AI",
}


@dataclass
class SearchConfig:
    depth: int = 3
    search_width: int = 10  # best N ordered candidates tried per interior node
    neighbor_radius: int = 2  # Chebyshev radius around stones for candidates


@dataclass
class EvalConfig:
    pattern_scores: Dict[str, int] = field(default_factory=lambda: PATTERN_SCORES.copy())
    defense_weight: float = 0.9
    center_bonus_base: int = 15


@dataclass
class GameConfig:
    human_side: str = "black"
    difficulty: str = "medium"


@dataclass
class UIConfig:
    engine_name: str = "GomokuEngine"
    api_port: int = 8000


@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    eval: EvalConfig = field(default_factory=EvalConfig)
    game: GameConfig = field(default_factory=GameConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "eval", "game", "ui"):
            if section in raw:
                _merge(getattr(cfg, section), raw[section])
        if "log_level" in raw:
            cfg.log_level = str(raw["log_level"])
        return cfg


def _merge(target: Any, values: Dict[str, Any]):
    for k, v in values.items():
        if not hasattr(target, k):
            logger.warning("Ignoring unknown config key %r", k)
            continue
        current = getattr(target, k)
        # tables merge key by key so a partial [eval.pattern_scores] keeps the rest
        if isinstance(current, dict) and isinstance(v, dict):
            current.update(v)
        else:
            setattr(target, k, v)


# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("GOMOKU_CONFIG_TOML", "config.toml"))
# allow env override of depth for quick debugging
override_depth = os.environ.get("GOMOKU_SEARCH_DEPTH")
if override_depth:
    try:
        CONFIG.search.depth = int(override_depth)
    except ValueError:
        logger.warning("GOMOKU_SEARCH_DEPTH=%r is not an integer, keeping depth %d",
                       override_depth, CONFIG.search.depth)

"""Difficulty presets and environment-driven settings."""
import os
from datetime import timedelta
from typing import Dict

from minefield.types import GameConfig

DIFFICULTY_PRESETS: Dict[str, GameConfig] = {
    'easy': GameConfig(rows=9, columns=9, mine_count=5),
    'medium': GameConfig(rows=16, columns=16, mine_count=40),
    'hard': GameConfig(rows=16, columns=30, mine_count=99),
}

TASK_QUEUE = os.getenv("MINESWEEPER_TASK_QUEUE", "minesweeper-task-queue")
DEFAULT_DIFFICULTY = os.getenv("MINESWEEPER_DEFAULT_DIFFICULTY", "easy")

# Workflow clock and lifetime
CHECK_INTERVAL = timedelta(minutes=1)
TICK_INTERVAL = timedelta(seconds=1)
CLOCK_IDLE_LIMIT = timedelta(minutes=30)
INACTIVITY_TIMEOUT = timedelta(hours=24)


def get_preset(name: str) -> GameConfig:
    """Return a copy of the named preset."""
    try:
        preset = DIFFICULTY_PRESETS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown difficulty {name!r}, expected one of {', '.join(DIFFICULTY_PRESETS)}"
        ) from None
    return GameConfig(rows=preset.rows, columns=preset.columns, mine_count=preset.mine_count)


def default_config() -> GameConfig:
    return get_preset(DEFAULT_DIFFICULTY)

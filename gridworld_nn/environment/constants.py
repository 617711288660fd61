"""Constants for the goal-seeking grid environment."""

from __future__ import annotations

from typing import Dict, Tuple

# Actions
UP: int = 0
DOWN: int = 1
LEFT: int = 2
RIGHT: int = 3

NUM_ACTIONS: int = 4

ACTION_DELTAS: Dict[int, Tuple[int, int]] = {
    UP: (0, -1),
    DOWN: (0, 1),
    LEFT: (-1, 0),
    RIGHT: (1, 0),
}

ACTION_NAMES: Dict[int, str] = {UP: "UP", DOWN: "DOWN", LEFT: "LEFT", RIGHT: "RIGHT"}
ACTION_ARROWS: Dict[int, str] = {UP: "^", DOWN: "v", LEFT: "<", RIGHT: ">"}

# Rewards
GOAL_REWARD: float = 10.0
STEP_REWARD: float = -1.0

METADATA = {
    "render_modes": ["ansi"],
    "render_fps": 10,
}

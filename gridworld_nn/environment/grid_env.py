"""Goal-seeking GridWorld Gymnasium environment.

Open rectangular grid, no obstacles. The agent starts in the top-left
corner and has to reach the bottom-right corner.

    reward  +10 on the step that reaches the goal, -1 for every other step
    moves   UP / DOWN / LEFT / RIGHT, clamped at the border
"""

from __future__ import annotations

from typing import Any, Dict, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .constants import (
    UP, DOWN, LEFT, RIGHT,
    ACTION_DELTAS,
    GOAL_REWARD, STEP_REWARD,
    NUM_ACTIONS,
    METADATA,
)


class GoalGridEnv(gym.Env):
    UP = UP
    DOWN = DOWN
    LEFT = LEFT
    RIGHT = RIGHT
    ACTION_DELTAS = ACTION_DELTAS

    metadata = METADATA

    def __init__(
        self,
        width: int = 15,
        height: int = 15,
        max_steps: int | None = None,
        render_mode: str | None = None,
    ):
        self.width = int(width)
        self.height = int(height)
        if self.width < 1 or self.height < 1 or self.width * self.height < 2:
            raise ValueError("Grid needs at least two cells")
        self.render_mode = render_mode

        if max_steps is None:
            max_steps = 4 * self.width * self.height
        self.max_steps = int(max_steps)

        self.start_pos: Tuple[int, int] = (0, 0)
        self.goal_pos: Tuple[int, int] = (self.width - 1, self.height - 1)

        # Episode state
        self.steps: int = 0
        self.agent_pos: Tuple[int, int] | None = None

        self.action_space = spaces.Discrete(NUM_ACTIONS)
        self.observation_space = spaces.Box(
            low=0,
            high=max(self.width, self.height) - 1,
            shape=(2,),
            dtype=np.int32,
        )

    def is_terminal(self, x: int, y: int) -> bool:
        return (int(x), int(y)) == self.goal_pos

    def reset(self, seed: int | None = None, options: dict | None = None
    ) -> tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        self.steps = 0
        self.agent_pos = self.start_pos
        return self._get_obs(), self._get_info()

    def _get_obs(self) -> np.ndarray:
        assert self.agent_pos is not None
        return np.array(self.agent_pos, dtype=np.int32)

    def _get_info(self) -> Dict[str, Any]:
        assert self.agent_pos is not None
        ax, ay = self.agent_pos
        gx, gy = self.goal_pos
        return {
            "steps": int(self.steps),
            "dist_to_goal": abs(gx - ax) + abs(gy - ay),
        }

    def step(self, action: int) -> tuple[np.ndarray, float, bool, bool, Dict[str, Any]]:
        assert self.agent_pos is not None, "Call reset() before step()"
        assert self.action_space.contains(int(action)), f"Invalid action: {action}"

        self.steps += 1

        dx, dy = ACTION_DELTAS[int(action)]
        new_x = min(max(self.agent_pos[0] + dx, 0), self.width - 1)
        new_y = min(max(self.agent_pos[1] + dy, 0), self.height - 1)
        self.agent_pos = (new_x, new_y)

        terminated = self.is_terminal(new_x, new_y)
        truncated = (not terminated) and self.steps >= self.max_steps
        reward = GOAL_REWARD if terminated else STEP_REWARD

        return self._get_obs(), float(reward), bool(terminated), bool(truncated), self._get_info()

    # -------------------- Rendering --------------------

    def render(self) -> str | None:
        if self.render_mode != "ansi" or self.agent_pos is None:
            return None
        rows = []
        for y in range(self.height):
            row = []
            for x in range(self.width):
                if (x, y) == self.agent_pos:
                    row.append("A")
                elif (x, y) == self.goal_pos:
                    row.append("G")
                else:
                    row.append(".")
            rows.append(" ".join(row))
        return "\n".join(rows)

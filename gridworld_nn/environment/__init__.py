"""Grid environment used to drive and observe the Q-network."""

from .constants import ACTION_NAMES, NUM_ACTIONS, UP, DOWN, LEFT, RIGHT
from .grid_env import GoalGridEnv

__all__ = ["GoalGridEnv", "ACTION_NAMES", "NUM_ACTIONS", "UP", "DOWN", "LEFT", "RIGHT"]

"""Q-learning on top of the feedforward network: update rule, policy, loops."""

from .checkpoint import load_checkpoint, save_checkpoint
from .core import epsilon_for, train
from .encoder import StateEncoder
from .eval import evaluate
from .policy import EpsilonGreedyPolicy, argmax
from .q_update import QUpdateRule, Transition, bellman_target
from .schedules import exponential_epsilon, linear_epsilon

__all__ = [
    "load_checkpoint", "save_checkpoint",
    "epsilon_for", "train", "evaluate",
    "StateEncoder", "EpsilonGreedyPolicy", "argmax",
    "QUpdateRule", "Transition", "bellman_target",
    "exponential_epsilon", "linear_epsilon",
]

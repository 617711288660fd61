"""
GridWorld NN Q-Learning
=======================
Q-learning with a from-scratch feedforward network as the value function.

This package provides:
- FeedforwardNetwork: NumPy MLP with manual backpropagation
- QUpdateRule: Bellman targets and online / mini-batch training steps
- GoalGridEnv: small Gymnasium grid used to drive training

Usage:
    from gridworld_nn import FeedforwardNetwork, QUpdateRule, Transition

    net = FeedforwardNetwork([2, 100, 4], "relu", "none", rng=0)
    rule = QUpdateRule(net, gamma=0.9, learning_rate=0.09)
    loss = rule.update(Transition(state, action, reward, next_state, done))
"""

__version__ = "1.0.0"

from .environment import GoalGridEnv
from .nn import FeedforwardNetwork, LossFunction
from .training import QUpdateRule, StateEncoder, Transition

__all__ = [
    "FeedforwardNetwork", "LossFunction",
    "QUpdateRule", "Transition", "StateEncoder",
    "GoalGridEnv",
]

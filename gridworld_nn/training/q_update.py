"""Naive online Q-learning update on top of the feedforward network.

Each environment transition becomes one supervised sample:

    q_s     = Q(s)                      # all actions, current weights
    target  = copy(q_s)
    target[a] = r                       if terminal
              = r + gamma * max Q(s')   otherwise
    train Q(s) -> target

Only the taken action's entry differs from the prediction, so the other
outputs get a zero error signal.

This is semi-gradient Q-learning with no target network and no replay
buffer. The same weights produce both Q(s) and the bootstrap value Q(s'), so
every update also moves the targets of later updates. That instability is a
known property of the method and is intentionally left in place.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..nn import FeedforwardNetwork, LossFunction


@dataclass(slots=True)
class Transition:
    """A single experience tuple."""

    state: np.ndarray
    action: int
    reward: float
    next_state: np.ndarray
    done: bool


def bellman_target(
    q_s: np.ndarray,
    q_sp: np.ndarray | None,
    action: int,
    reward: float,
    done: bool,
    gamma: float,
) -> np.ndarray:
    """Regression target for one transition.

    ``q_sp`` is never read when ``done`` is True and may be None.
    """
    target = np.array(q_s, dtype=np.float64, copy=True)
    if not 0 <= int(action) < target.shape[0]:
        raise ValueError(f"action {action} out of range [0, {target.shape[0]})")
    if done:
        target[int(action)] = float(reward)
    else:
        if q_sp is None:
            raise ValueError("q_sp is required for non-terminal transitions")
        target[int(action)] = float(reward) + float(gamma) * float(np.max(q_sp))
    return target


class QUpdateRule:
    """Turns transitions into training steps on ``network``.

    Args:
        network: Q-network, one output per action.
        gamma: Discount factor in [0, 1].
        learning_rate: Step size passed to the network.
        loss: Loss used for the regression (MSE).
        mini_batch: If True, use ``train_mini_batch_step`` and update the
            weights every ``network.batch_size`` transitions.
    """

    def __init__(
        self,
        network: FeedforwardNetwork,
        gamma: float = 0.9,
        learning_rate: float = 0.01,
        loss: str | LossFunction = LossFunction.MSE,
        mini_batch: bool = False,
    ):
        if not 0.0 <= float(gamma) <= 1.0:
            raise ValueError(f"gamma must be in [0, 1], got {gamma}")
        self.network = network
        self.gamma = float(gamma)
        self.learning_rate = float(learning_rate)
        self.loss = LossFunction.from_name(loss)
        self.mini_batch = bool(mini_batch)

    def build_target(self, t: Transition) -> np.ndarray:
        q_s = self.network.predict(t.state)
        # Terminal transitions never look at s'.
        q_sp = None if t.done else self.network.predict(t.next_state)
        return bellman_target(q_s, q_sp, t.action, t.reward, t.done, self.gamma)

    def update(self, t: Transition) -> float:
        """Apply one transition. Returns the sample loss before the update."""
        target = self.build_target(t)
        if self.mini_batch:
            return self.network.train_mini_batch_step(t.state, target, self.learning_rate, self.loss)
        return self.network.train_step(t.state, target, self.learning_rate, self.loss)

"""Epsilon-greedy action selection over the Q-network."""

from __future__ import annotations

import numpy as np

from ..nn import FeedforwardNetwork


def argmax(values) -> int:
    """Index of the largest value; ties go to the lowest index."""
    return int(np.argmax(np.asarray(values)))


class EpsilonGreedyPolicy:
    """Random action with probability epsilon, otherwise argmax Q(s, .)."""

    def __init__(
        self,
        network: FeedforwardNetwork,
        n_actions: int | None = None,
        rng: np.random.Generator | int | None = None,
    ):
        self.network = network
        self.n_actions = int(n_actions if n_actions is not None else network.n_actions)
        if self.n_actions != network.n_actions:
            raise ValueError(
                f"n_actions={self.n_actions} does not match network output width {network.n_actions}"
            )
        self.rng = rng if isinstance(rng, np.random.Generator) else np.random.default_rng(rng)

    def greedy(self, state) -> int:
        return argmax(self.network.predict(state))

    def select(self, state, epsilon: float) -> int:
        if self.rng.random() < epsilon:
            # Explore
            return int(self.rng.integers(self.n_actions))
        # Exploit
        return self.greedy(state)

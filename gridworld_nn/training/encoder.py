"""State encoding for the goal grid.

The network only ever sees a fixed-length float vector. For this grid the
vector is the agent position normalized by the grid size:

    [x / width, y / height]

The same mapping is used for training states and for per-cell Q snapshots,
so both must go through this class.
"""

from __future__ import annotations

import numpy as np


class StateEncoder:
    """Encodes an agent position into a flat float64 feature vector."""

    feature_dim = 2

    def __init__(self, width: int, height: int):
        self.width = int(width)
        self.height = int(height)

    def encode_position(self, x: int, y: int) -> np.ndarray:
        return np.array([x / self.width, y / self.height], dtype=np.float64)

    def encode(self, obs) -> np.ndarray:
        """Return a 1D vector of length `feature_dim` for an observation."""
        return self.encode_position(int(obs[0]), int(obs[1]))

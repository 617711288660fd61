"""
Utility functions for monitoring training.

Nothing here changes the network: snapshots only call ``predict``.
"""

from __future__ import annotations

import os
from typing import List, Tuple

import numpy as np
import matplotlib.pyplot as plt

from .environment.constants import ACTION_ARROWS
from .nn import FeedforwardNetwork
from .training.encoder import StateEncoder


def q_value_snapshot(
    network: FeedforwardNetwork,
    encoder: StateEncoder,
    width: int,
    height: int,
) -> np.ndarray:
    """Predicted Q-values for every cell, shaped (width, height, n_actions)."""
    q = np.zeros((int(width), int(height), network.n_actions), dtype=np.float64)
    for x in range(int(width)):
        for y in range(int(height)):
            q[x, y] = network.predict(encoder.encode_position(x, y))
    return q


def mean_state_value(snapshot: np.ndarray) -> float:
    """Mean over all cells of max_a Q(s, a). Drifts upward when Q diverges."""
    snapshot = np.asarray(snapshot, dtype=np.float64)
    if snapshot.ndim != 3 or snapshot.shape[0] * snapshot.shape[1] == 0:
        raise ValueError(f"snapshot must be shaped (width, height, n_actions), got {snapshot.shape}")
    return float(np.mean(np.max(snapshot, axis=2)))


def render_policy_text(snapshot: np.ndarray, goal: Tuple[int, int] | None = None) -> str:
    """Greedy action per cell as arrows, one text row per grid row."""
    width, height, _ = snapshot.shape
    rows = []
    for y in range(height):
        row = []
        for x in range(width):
            if goal is not None and (x, y) == tuple(goal):
                row.append("G")
            else:
                row.append(ACTION_ARROWS[int(np.argmax(snapshot[x, y]))])
        rows.append(" ".join(row))
    return "\n".join(rows)


def moving_average(values: List[float], window: int) -> np.ndarray:
    """Trailing moving average (``valid`` mode: len(values) - window + 1 points)."""
    values = np.asarray(values, dtype=np.float64)
    window = int(window)
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}")
    if len(values) < window:
        return np.zeros(0, dtype=np.float64)
    return np.convolve(values, np.ones(window) / window, mode="valid")


def plot_training_stats(
    rewards: List[float],
    lengths: List[float],
    window: int = 50,
    save_path: str | None = None,
):
    """
    Plot training statistics with moving average.

    Args:
        rewards: List of episode rewards.
        lengths: List of episode lengths.
        window: Window size for moving average.
        save_path: Optional path to save the plot.
    """
    fig, axes = plt.subplots(2, 1, figsize=(10, 8))

    for ax, values, color, label, ylabel, title in (
        (axes[0], rewards, "blue", "Episode Reward", "Reward", "Training Rewards"),
        (axes[1], lengths, "green", "Episode Length", "Steps", "Episode Lengths"),
    ):
        ax.plot(values, alpha=0.3, color=color, label=label)
        if len(values) >= window:
            ax.plot(
                range(window - 1, len(values)),
                moving_average(values, window),
                color="red",
                label=f"Moving Avg ({window})",
            )
        ax.set_xlabel("Episode")
        ax.set_ylabel(ylabel)
        ax.set_title(title)
        ax.legend()
        ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        os.makedirs(os.path.dirname(save_path) or ".", exist_ok=True)
        plt.savefig(save_path, dpi=150)
        print(f"Plot saved to {save_path}")
    else:
        plt.show()

    plt.close(fig)

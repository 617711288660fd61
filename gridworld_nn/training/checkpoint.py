"""Checkpoint save/load.

We save enough to rebuild the Q-network and resume training:
  - topology, activation names, mini-batch size
  - every weight matrix and bias vector
  - episode counter and current epsilon
  - any extra JSON-serialisable metadata

Everything goes into one NumPy ``.npz`` archive, readable without pickle.
"""

from __future__ import annotations

import json
import os
from typing import Any

import numpy as np

from ..nn import FeedforwardNetwork


def save_checkpoint(
    filepath: str,
    network: FeedforwardNetwork,
    *,
    episode: int,
    epsilon: float,
    extra: dict[str, Any] | None = None,
) -> None:
    """Save a training checkpoint."""
    os.makedirs(os.path.dirname(filepath) or ".", exist_ok=True)

    state = network.state_dict()
    arrays: dict[str, np.ndarray] = {
        "sizes": np.array(state["sizes"], dtype=np.int64),
        "hidden_activation": np.array(state["hidden_activation"]),
        "output_activation": np.array(state["output_activation"]),
        "batch_size": np.array(state["batch_size"], dtype=np.int64),
        "episode": np.array(int(episode), dtype=np.int64),
        "epsilon": np.array(float(epsilon), dtype=np.float64),
        "extra": np.array(json.dumps(extra or {})),
    }
    for l, (w, b) in enumerate(zip(state["weights"], state["biases"])):
        arrays[f"W{l}"] = w
        arrays[f"b{l}"] = b

    # np.savez appends ".npz" to names without it; write through a handle to keep the path as given.
    with open(filepath, "wb") as f:
        np.savez(f, **arrays)


def load_checkpoint(filepath: str, rng: np.random.Generator | int | None = None):
    """Rebuild a network from a checkpoint.

    Returns:
        (network, meta) where meta holds episode, epsilon and extra.
    """
    with np.load(filepath, allow_pickle=False) as data:
        sizes = [int(s) for s in data["sizes"]]
        network = FeedforwardNetwork(
            sizes,
            hidden_activation=str(data["hidden_activation"]),
            output_activation=str(data["output_activation"]),
            batch_size=int(data["batch_size"]),
            rng=rng,
        )
        n_layers = len(sizes) - 1
        network.load_state_dict({
            "weights": [data[f"W{l}"] for l in range(n_layers)],
            "biases": [data[f"b{l}"] for l in range(n_layers)],
        })
        meta = {
            "episode": int(data["episode"]),
            "epsilon": float(data["epsilon"]),
            "extra": json.loads(str(data["extra"])),
        }
    return network, meta

"""Loss functions.

A loss is a pair of pure functions: the scalar loss and its gradient with
respect to the network output (dL/da). Only mean-squared error exists:

    loss       = mean_i 0.5 * (p_i - t_i)^2
    gradient_i = (p_i - t_i) / n
"""

from __future__ import annotations

from enum import Enum

import numpy as np

from .errors import DimensionMismatch


def _as_pair(predictions, targets) -> tuple[np.ndarray, np.ndarray]:
    p = np.asarray(predictions, dtype=np.float64).reshape(-1)
    t = np.asarray(targets, dtype=np.float64).reshape(-1)
    if p.shape != t.shape:
        raise DimensionMismatch("targets", expected=p.shape[0], got=t.shape[0])
    return p, t


class LossFunction(str, Enum):
    MSE = "mse"

    @classmethod
    def from_name(cls, name: "str | LossFunction") -> "LossFunction":
        if isinstance(name, LossFunction):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown loss function: {name!r}") from None

    def loss(self, predictions, targets) -> float:
        p, t = _as_pair(predictions, targets)
        diff = p - t
        return float(np.mean(0.5 * diff * diff))

    def gradient(self, predictions, targets) -> np.ndarray:
        p, t = _as_pair(predictions, targets)
        return (p - t) / p.shape[0]


MEAN_SQUARED_ERROR = LossFunction.MSE

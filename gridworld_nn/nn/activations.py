"""Activation functions and their derivatives.

Activations are a closed set, resolved once from their config name when the
network is built:

    sigm     1 / (1 + e^-x)
    tanh     tanh(x)
    relu     max(0, x)
    none     x  (identity, the usual Q-value output)
    softmax  vector-level only, no elementwise derivative

Derivatives take both the pre-activation ``z`` and the forward value ``a``.
Sigmoid and tanh reuse ``a`` instead of recomputing the function from ``z``.
"""

from __future__ import annotations

from enum import Enum

import numpy as np

from .errors import UnknownActivation, UnsupportedGradientPath


class Activation(str, Enum):
    SIGMOID = "sigm"
    TANH = "tanh"
    RELU = "relu"
    IDENTITY = "none"
    SOFTMAX = "softmax"

    @classmethod
    def from_name(cls, name: "str | Activation") -> "Activation":
        """Resolve a config name (case-insensitive) to an Activation."""
        if isinstance(name, Activation):
            return name
        if not isinstance(name, str):
            # None must not fall through to "none" (identity)
            raise UnknownActivation(f"Activation name must be a string, got {name!r}")
        try:
            return cls(name.strip().lower())
        except ValueError:
            valid = ", ".join(a.value for a in cls)
            raise UnknownActivation(f"Unknown activation: {name!r} (expected one of {valid})") from None

    @property
    def is_elementwise(self) -> bool:
        return self is not Activation.SOFTMAX


def sigmoid(z: np.ndarray) -> np.ndarray:
    # exp overflows to inf for very negative z; 1/(1+inf) is still the right limit.
    with np.errstate(over="ignore"):
        return 1.0 / (1.0 + np.exp(-z))


def softmax(z: np.ndarray) -> np.ndarray:
    """Numerically stable softmax (max logit subtracted before exp)."""
    z = np.asarray(z, dtype=np.float64)
    e = np.exp(z - np.max(z))
    return e / np.sum(e)


def activate(z: np.ndarray, activation: Activation) -> np.ndarray:
    """Apply ``activation`` to the pre-activation vector ``z``."""
    z = np.asarray(z, dtype=np.float64)
    if activation is Activation.SIGMOID:
        return sigmoid(z)
    if activation is Activation.TANH:
        return np.tanh(z)
    if activation is Activation.RELU:
        return np.maximum(z, 0.0)
    if activation is Activation.IDENTITY:
        return z.copy()
    if activation is Activation.SOFTMAX:
        return softmax(z)
    raise UnknownActivation(f"Unknown activation: {activation!r}")


def derivative(z: np.ndarray, a: np.ndarray, activation: Activation) -> np.ndarray:
    """Elementwise d activation / d z.

    Args:
        z: Pre-activation values of the layer.
        a: Forward values ``activate(z, activation)``.
        activation: Which function produced ``a``.

    Raises:
        UnsupportedGradientPath: for softmax, whose Jacobian is not diagonal.
    """
    if activation is Activation.SIGMOID:
        return a * (1.0 - a)
    if activation is Activation.TANH:
        return 1.0 - a * a
    if activation is Activation.RELU:
        # sub-gradient at exactly 0 is 0
        return (np.asarray(z) > 0.0).astype(np.float64)
    if activation is Activation.IDENTITY:
        return np.ones_like(z, dtype=np.float64)
    if activation is Activation.SOFTMAX:
        raise UnsupportedGradientPath(
            "softmax has no elementwise derivative; pair it with a loss whose "
            "gradient already accounts for the softmax Jacobian"
        )
    raise UnknownActivation(f"Unknown activation: {activation!r}")

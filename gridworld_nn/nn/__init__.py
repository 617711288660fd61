"""From-scratch feedforward network used as the Q-value approximator."""

from .activations import Activation, activate, derivative, softmax
from .errors import (
    DimensionMismatch,
    NetworkError,
    StaleForwardPass,
    UnknownActivation,
    UnsupportedGradientPath,
)
from .losses import LossFunction, MEAN_SQUARED_ERROR
from .network import FeedforwardNetwork, ForwardPass, Gradients

__all__ = [
    "Activation", "activate", "derivative", "softmax",
    "DimensionMismatch", "NetworkError", "StaleForwardPass",
    "UnknownActivation", "UnsupportedGradientPath",
    "LossFunction", "MEAN_SQUARED_ERROR",
    "FeedforwardNetwork", "ForwardPass", "Gradients",
]

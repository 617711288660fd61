"""Exceptions raised by the feedforward network core.

All of them are raised before any weight is touched, so a failed call never
leaves the network half-updated.
"""

from __future__ import annotations


class NetworkError(Exception):
    """Base class for every error raised by :mod:`gridworld_nn.nn`."""


class DimensionMismatch(NetworkError, ValueError):
    """Input, target or gradient shape disagrees with the configured layer widths.

    ``expected`` and ``got`` are lengths for vectors, or shapes when the
    offending value is not a plain vector.
    """

    def __init__(self, what: str, expected, got):
        self.what = what
        self.expected = expected
        self.got = got
        if isinstance(expected, tuple) or isinstance(got, tuple):
            message = f"{what} has shape {tuple(got)}, expected {tuple(expected)}"
        else:
            message = f"{what} has length {int(got)}, expected {int(expected)}"
        super().__init__(message)


class UnknownActivation(NetworkError, ValueError):
    """Activation name is not one of sigm / tanh / relu / none / softmax."""


class UnsupportedGradientPath(NetworkError, NotImplementedError):
    """An elementwise derivative was requested where none exists (softmax)."""


class StaleForwardPass(NetworkError, RuntimeError):
    """A forward pass was used after the weights it was computed on changed."""

"""Fully-connected feedforward network with manual backpropagation.

The network is the Q-function approximator: one input per state feature,
one linear output per action. Everything is plain NumPy, one sample at a
time.

Forward and backward are coupled through an explicit record instead of
hidden instance fields:

    fp = net.forward(state)                  # ForwardPass
    grads = net.compute_gradients(fp, target, LossFunction.MSE)
    net.apply_update(0.01, grads)            # per-sample SGD

or, for mini-batches:

    net.accumulate(grads)                    # repeat batch_size times
    net.apply_update(0.01)                   # averaged update + reset

A ForwardPass remembers the weight version it was computed on. Using it after
an update raises StaleForwardPass rather than silently mixing old activations
with new weights.

Layers are indexed from 0 over the weight layers: layer ``l`` maps
``sizes[l]`` inputs to ``sizes[l + 1]`` outputs, with weights shaped
``(sizes[l + 1], sizes[l])``.

Note: NaN/Inf from diverging updates is not detected here. Callers that care
should watch the loss returned by the training steps.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .activations import Activation, activate, derivative
from .errors import DimensionMismatch, StaleForwardPass
from .losses import LossFunction


def _frozen(x: np.ndarray) -> np.ndarray:
    x.setflags(write=False)
    return x


@dataclass(frozen=True, eq=False)
class ForwardPass:
    """Activations of one forward pass.

    ``activations[0]`` is the input, ``activations[l + 1]`` the output of
    weight layer ``l``. ``pre_activations[l]`` is ``z`` of weight layer ``l``.
    Arrays are read-only.
    """

    activations: Tuple[np.ndarray, ...]
    pre_activations: Tuple[np.ndarray, ...]
    _owner: object = field(repr=False, compare=False)
    _version: int = field(repr=False, compare=False)

    @property
    def input(self) -> np.ndarray:
        return self.activations[0].copy()

    @property
    def output(self) -> np.ndarray:
        """Q-values, one per action (a fresh, writable copy)."""
        return self.activations[-1].copy()


@dataclass(frozen=True, eq=False)
class Gradients:
    """Per-layer dL/dW and dL/db for one sample."""

    weights: Tuple[np.ndarray, ...]
    biases: Tuple[np.ndarray, ...]


class FeedforwardNetwork:
    """Multi-layer perceptron trained by plain gradient descent.

    Args:
        sizes: Layer widths, input first, output (number of actions) last.
        hidden_activation: Activation name for every hidden layer.
        output_activation: Activation name for the output layer. ``"none"``
            is the supported choice for Q-values.
        batch_size: Samples per averaged update in mini-batch mode.
        rng: ``numpy.random.Generator`` or integer seed for weight init.
            ``None`` draws fresh OS entropy.
    """

    def __init__(
        self,
        sizes: Sequence[int],
        hidden_activation: str | Activation = "relu",
        output_activation: str | Activation = "none",
        batch_size: int = 1,
        rng: np.random.Generator | int | None = None,
    ):
        sizes = tuple(int(s) for s in sizes)
        if len(sizes) < 2:
            raise ValueError(f"Topology needs at least an input and an output layer, got {sizes}")
        if any(s < 1 for s in sizes):
            raise ValueError(f"Layer widths must be positive, got {sizes}")
        if int(batch_size) < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")

        self._sizes = sizes
        self._hidden = Activation.from_name(hidden_activation)
        self._output = Activation.from_name(output_activation)
        self._batch_size = int(batch_size)

        if not isinstance(rng, np.random.Generator):
            rng = np.random.default_rng(rng)

        # Uniform in [-0.5, 0.5) for every weight and bias.
        self._weights: List[np.ndarray] = []
        self._biases: List[np.ndarray] = []
        for n_in, n_out in zip(sizes[:-1], sizes[1:]):
            self._weights.append(rng.random((n_out, n_in)) - 0.5)
            self._biases.append(rng.random(n_out) - 0.5)

        self._grad_w: List[np.ndarray] = [np.zeros_like(w) for w in self._weights]
        self._grad_b: List[np.ndarray] = [np.zeros_like(b) for b in self._biases]
        self._pending = 0

        self._token = object()
        self._version = 0

    # ------------------------------------------------------------------ info

    @property
    def sizes(self) -> Tuple[int, ...]:
        return self._sizes

    @property
    def num_layers(self) -> int:
        """Number of weight layers (len(sizes) - 1)."""
        return len(self._sizes) - 1

    @property
    def n_inputs(self) -> int:
        return self._sizes[0]

    @property
    def n_actions(self) -> int:
        return self._sizes[-1]

    @property
    def hidden_activation(self) -> Activation:
        return self._hidden

    @property
    def output_activation(self) -> Activation:
        return self._output

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def pending_samples(self) -> int:
        """Samples accumulated since the last mini-batch update."""
        return self._pending

    def weights(self, layer: int) -> np.ndarray:
        return self._weights[layer].copy()

    def biases(self, layer: int) -> np.ndarray:
        return self._biases[layer].copy()

    def __repr__(self) -> str:
        return (
            f"FeedforwardNetwork(sizes={list(self._sizes)}, "
            f"hidden={self._hidden.value!r}, output={self._output.value!r}, "
            f"batch_size={self._batch_size})"
        )

    # --------------------------------------------------------------- forward

    def _check_input(self, x) -> np.ndarray:
        x = np.asarray(x, dtype=np.float64)
        if x.ndim != 1:
            raise DimensionMismatch("input", expected=(self._sizes[0],), got=x.shape)
        if x.shape[0] != self._sizes[0]:
            raise DimensionMismatch("input", expected=self._sizes[0], got=x.shape[0])
        return x

    def _check_target(self, target) -> np.ndarray:
        t = np.asarray(target, dtype=np.float64)
        if t.ndim != 1:
            raise DimensionMismatch("target", expected=(self._sizes[-1],), got=t.shape)
        if t.shape[0] != self._sizes[-1]:
            raise DimensionMismatch("target", expected=self._sizes[-1], got=t.shape[0])
        return t

    def forward(self, x) -> ForwardPass:
        """Run one input through the network and keep every activation."""
        a = _frozen(self._check_input(x).copy())
        activations = [a]
        pre_activations = []
        last = self.num_layers - 1
        for l, (w, b) in enumerate(zip(self._weights, self._biases)):
            z = w @ a + b
            a = activate(z, self._output if l == last else self._hidden)
            pre_activations.append(_frozen(z))
            activations.append(_frozen(a))
        return ForwardPass(
            activations=tuple(activations),
            pre_activations=tuple(pre_activations),
            _owner=self._token,
            _version=self._version,
        )

    def predict(self, x) -> np.ndarray:
        """Q-values for one state (length ``n_actions``)."""
        return self.forward(x).output

    # -------------------------------------------------------------- backward

    def compute_gradients(
        self,
        forward_pass: ForwardPass,
        target,
        loss: str | LossFunction = LossFunction.MSE,
    ) -> Gradients:
        """Backpropagate ``loss(output, target)`` through ``forward_pass``.

        Raises:
            StaleForwardPass: ``forward_pass`` came from another network or
                from weights that have since been updated.
            DimensionMismatch: ``target`` length differs from the output width.
            UnsupportedGradientPath: a softmax layer sits on the path.
        """
        if forward_pass._owner is not self._token:
            raise StaleForwardPass("forward pass was produced by a different network")
        if forward_pass._version != self._version:
            raise StaleForwardPass(
                f"forward pass was computed on weight version {forward_pass._version}, "
                f"network is at version {self._version}"
            )
        target = self._check_target(target)
        loss = LossFunction.from_name(loss)

        acts = forward_pass.activations
        zs = forward_pass.pre_activations
        L = self.num_layers

        grad_w: List[np.ndarray] = [None] * L  # type: ignore[list-item]
        grad_b: List[np.ndarray] = [None] * L  # type: ignore[list-item]

        delta = loss.gradient(acts[-1], target) * derivative(zs[-1], acts[-1], self._output)
        for l in range(L - 1, -1, -1):
            grad_w[l] = np.outer(delta, acts[l])
            grad_b[l] = delta.copy()
            if l > 0:
                delta = (self._weights[l].T @ delta) * derivative(zs[l - 1], acts[l], self._hidden)

        return Gradients(weights=tuple(grad_w), biases=tuple(grad_b))

    # --------------------------------------------------------------- updates

    def _check_gradients(self, gradients: Gradients) -> None:
        """Every gradient must match its parameter's shape exactly.

        Runs before any in-place arithmetic so a bad record changes nothing.
        """
        if len(gradients.weights) != self.num_layers or len(gradients.biases) != self.num_layers:
            raise DimensionMismatch(
                "gradient layers",
                expected=self.num_layers,
                got=min(len(gradients.weights), len(gradients.biases)),
            )
        for l, (dw, db) in enumerate(zip(gradients.weights, gradients.biases)):
            if np.shape(dw) != self._weights[l].shape:
                raise DimensionMismatch(f"weight gradient {l}", expected=self._weights[l].shape, got=np.shape(dw))
            if np.shape(db) != self._biases[l].shape:
                raise DimensionMismatch(f"bias gradient {l}", expected=self._biases[l].shape, got=np.shape(db))

    def accumulate(self, gradients: Gradients) -> None:
        """Add one sample's gradients to the mini-batch accumulator."""
        self._check_gradients(gradients)
        for gw, gb, dw, db in zip(self._grad_w, self._grad_b, gradients.weights, gradients.biases):
            gw += dw
            gb += db
        self._pending += 1

    def apply_update(self, learning_rate: float, gradients: Optional[Gradients] = None) -> None:
        """Gradient descent step.

        With ``gradients``: ``W -= lr * g`` for that one sample.
        Without: apply the accumulated sum divided by ``batch_size``, then
        zero the accumulator.
        """
        lr = float(learning_rate)
        if gradients is not None:
            self._check_gradients(gradients)
            for w, b, dw, db in zip(self._weights, self._biases, gradients.weights, gradients.biases):
                w -= lr * dw
                b -= lr * db
            self._version += 1
            return

        if self._pending == 0:
            return
        scale = lr / self._batch_size
        for w, b, gw, gb in zip(self._weights, self._biases, self._grad_w, self._grad_b):
            w -= scale * gw
            b -= scale * gb
            gw.fill(0.0)
            gb.fill(0.0)
        self._pending = 0
        self._version += 1

    def train_step(
        self,
        state,
        target,
        learning_rate: float,
        loss: str | LossFunction = LossFunction.MSE,
    ) -> float:
        """One online SGD step. Returns the loss before the update."""
        self._check_input(state)
        self._check_target(target)
        loss = LossFunction.from_name(loss)

        fp = self.forward(state)
        value = loss.loss(fp.activations[-1], target)
        self.apply_update(learning_rate, self.compute_gradients(fp, target, loss))
        return value

    def train_mini_batch_step(
        self,
        state,
        target,
        learning_rate: float,
        loss: str | LossFunction = LossFunction.MSE,
    ) -> float:
        """Accumulate one sample; update once ``batch_size`` samples are in.

        Returns the loss of this sample before any update.
        """
        self._check_input(state)
        self._check_target(target)
        loss = LossFunction.from_name(loss)

        fp = self.forward(state)
        value = loss.loss(fp.activations[-1], target)
        self.accumulate(self.compute_gradients(fp, target, loss))
        if self._pending >= self._batch_size:
            self.apply_update(learning_rate)
        return value

    # ----------------------------------------------------------- persistence

    def state_dict(self) -> Dict[str, Any]:
        """Copy of the topology and all parameters."""
        return {
            "sizes": list(self._sizes),
            "hidden_activation": self._hidden.value,
            "output_activation": self._output.value,
            "batch_size": self._batch_size,
            "weights": [w.copy() for w in self._weights],
            "biases": [b.copy() for b in self._biases],
        }

    def load_state_dict(self, state: Dict[str, Any]) -> None:
        """Replace all parameters with copies from ``state``.

        Shapes must match this network exactly. Pending mini-batch gradients
        are discarded, and earlier forward passes become stale.
        """
        weights = [np.array(w, dtype=np.float64) for w in state["weights"]]
        biases = [np.array(b, dtype=np.float64) for b in state["biases"]]
        if len(weights) != self.num_layers or len(biases) != self.num_layers:
            raise ValueError(
                f"state has {len(weights)} weight layers, network has {self.num_layers}"
            )
        for l, (w, b) in enumerate(zip(weights, biases)):
            if w.shape != self._weights[l].shape:
                raise ValueError(f"layer {l}: weight shape {w.shape} != {self._weights[l].shape}")
            if b.shape != self._biases[l].shape:
                raise ValueError(f"layer {l}: bias shape {b.shape} != {self._biases[l].shape}")

        self._weights = weights
        self._biases = biases
        for gw, gb in zip(self._grad_w, self._grad_b):
            gw.fill(0.0)
            gb.fill(0.0)
        self._pending = 0
        self._version += 1

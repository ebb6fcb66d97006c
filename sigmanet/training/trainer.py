"""Backpropagation training loop for sigmoid networks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List

import numpy as np

from ..core.activations import sigmoid_deriv
from ..core.errors import ConfigurationError, DataMismatchError
from ..core.network import Network
from ..core.types import ActivationState, Array
from ..core.weights import WeightMatrix
from ..data.training_data import TrainingData
from .metrics import SquaredError, calc_error

DEFAULT_ALPHA = 0.1

IterationCallback = Callable[["Trainer", "SquaredError | None", int, "Exception | None"], None]
TrainingCallback = Callable[["Trainer"], None]


def output_deltas(outputs: Array, expected: Array) -> Array:
    """Error signal of the output layer weighted by the sigmoid derivative."""

    return (outputs - expected) * sigmoid_deriv(outputs)


def backprop_deltas(network: Network, activations: ActivationState, expected: Array) -> List[Array]:
    """Return one delta vector per layer, last layer first computed.

    A hidden layer's delta is the downstream delta pushed back through the
    next layer's weights (bias column excluded), scaled by the derivative at
    this layer's own activation from the same forward pass.
    """

    layers = network.layers
    records = activations.layers
    last = len(layers) - 1
    deltas: List[Array] = [np.empty(0)] * len(layers)
    deltas[last] = output_deltas(records[last].outputs, expected)
    for idx in reversed(range(last)):
        downstream = layers[idx + 1].weights.values[:, :-1]
        deltas[idx] = (downstream.T @ deltas[idx + 1]) * sigmoid_deriv(records[idx].outputs)
    return deltas


def weight_update(biased_inputs: Array, deltas: Array, alpha: float) -> WeightMatrix:
    """Gradient descent step ``-alpha * delta[row] * input[col]``."""

    return WeightMatrix(np.outer(deltas, biased_inputs) * -alpha)


@dataclass
class Trainer:
    """Fit a :class:`Network` to :class:`TrainingData` with backpropagation.

    ``alpha`` is the learning rate.  With ``batch_update`` the updates of a
    whole pass are summed and applied once at the end of the pass, otherwise
    every example updates the weights as soon as it is presented.  When
    ``shuffle_rounds`` is positive the data is shuffled in place before each
    pass.

    Training runs until an iteration-end handler calls
    :meth:`request_termination`, so at least one stopping criterion has to
    be registered::

        trainer = Trainer(alpha=0.5)
        trainer.add_simple_stopping_criteria(50000, 0.001)
        trainer.train(network, data)
    """

    alpha: float = DEFAULT_ALPHA
    batch_update: bool = False
    shuffle_rounds: int = 0
    rng: np.random.Generator | None = field(default=None, repr=False)
    iteration_end_handlers: List[IterationCallback] = field(default_factory=list, repr=False)
    training_begin_handlers: List[TrainingCallback] = field(default_factory=list, repr=False)
    training_end_handlers: List[TrainingCallback] = field(default_factory=list, repr=False)
    terminate_requested: bool = field(default=False, init=False, repr=False)

    # ------------------------------------------------------------------
    # Callback registration

    def add_iteration_end_handler(self, handler: IterationCallback) -> None:
        self.iteration_end_handlers.append(handler)

    def add_training_begin_handler(self, handler: TrainingCallback) -> None:
        self.training_begin_handlers.append(handler)

    def add_training_end_handler(self, handler: TrainingCallback) -> None:
        self.training_end_handlers.append(handler)

    def request_termination(self) -> None:
        """Stop training once the current iteration's handlers have run."""

        self.terminate_requested = True

    def add_simple_stopping_criteria(self, max_iterations: int, min_error: float) -> None:
        """Stop after ``max_iterations`` or once the combined error drops below ``min_error``."""

        def _check(trainer: Trainer, mse: SquaredError | None, iteration: int, error) -> None:
            if iteration > max_iterations:
                trainer.request_termination()
            if mse is not None and mse.combine() < min_error:
                trainer.request_termination()

        self.add_iteration_end_handler(_check)

    def add_patience_stopping_criteria(self, patience: int, min_delta: float = 0.0) -> None:
        """Stop once ``patience`` iterations pass without the combined error improving."""

        state = {"best": float("inf"), "stale": 0}

        def _reset(trainer: Trainer) -> None:
            state["best"] = float("inf")
            state["stale"] = 0

        def _check(trainer: Trainer, mse: SquaredError | None, iteration: int, error) -> None:
            if mse is None:
                return
            current = mse.combine()
            if current < state["best"] - min_delta:
                state["best"] = current
                state["stale"] = 0
            else:
                state["stale"] += 1
                if state["stale"] >= patience:
                    trainer.request_termination()

        self.add_training_begin_handler(_reset)
        self.add_iteration_end_handler(_check)

    # ------------------------------------------------------------------
    # Training

    def one_iteration(self, network: Network, data: TrainingData) -> SquaredError:
        """Present every example once and return the mean squared error per output."""

        if len(data) == 0:
            raise ConfigurationError("Cannot train on an empty data set")
        if self.shuffle_rounds > 0:
            data.shuffle(self.shuffle_rounds, self.rng)

        total = SquaredError.zeros(network.output_size())
        pending: List[WeightMatrix] = []
        if self.batch_update:
            pending = [WeightMatrix(np.zeros(layer.weights.shape)) for layer in network.layers]

        for datum in data:
            outputs, activations = network.trace(datum.inputs)
            if datum.expected.shape[0] != outputs.shape[0]:
                raise DataMismatchError(
                    f"Failed to process data with length {datum.expected.shape[0]} "
                    f"against expected output of length {outputs.shape[0]}"
                )
            total.accumulate(calc_error(datum.expected, outputs))

            deltas = backprop_deltas(network, activations, datum.expected)
            for idx, layer in enumerate(network.layers):
                update = weight_update(
                    activations.layers[idx].biased_inputs, deltas[idx], self.alpha
                )
                if self.batch_update:
                    pending[idx] = pending[idx].add(update)
                else:
                    layer.apply_update(update)

        if self.batch_update:
            for layer, update in zip(network.layers, pending):
                layer.apply_update(update)

        total.average(len(data))
        return total

    def train(self, network: Network, data: TrainingData) -> int:
        """Run iterations until termination is requested; return the iteration count.

        Iteration-end handlers see every iteration, including a failing one
        (with ``mse=None`` and the exception), before the exception is
        re-raised.
        """

        if not self.alpha:
            self.alpha = DEFAULT_ALPHA
        self.terminate_requested = False

        for handler in self.training_begin_handlers:
            handler(self)

        iteration = 0
        while True:
            iteration += 1
            mse: SquaredError | None = None
            failure: Exception | None = None
            try:
                mse = self.one_iteration(network, data)
            except Exception as exc:
                failure = exc

            for handler in self.iteration_end_handlers:
                handler(self, mse, iteration, failure)

            if failure is not None:
                raise failure
            if self.terminate_requested:
                break

        for handler in self.training_end_handlers:
            handler(self)
        return iteration


__all__ = [
    "DEFAULT_ALPHA",
    "IterationCallback",
    "Trainer",
    "TrainingCallback",
    "backprop_deltas",
    "output_deltas",
    "weight_update",
]

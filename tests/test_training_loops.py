from __future__ import annotations

from typing import List

import numpy as np
import pytest

from sigmanet.core.errors import ConfigurationError, DataMismatchError, ShapeError
from sigmanet.core.network import Network
from sigmanet.data import TrainingData, TrainingDatum
from sigmanet.data.xor import xor_data
from sigmanet.training.metrics import SquaredError
from sigmanet.training.trainer import (
    DEFAULT_ALPHA,
    Trainer,
    backprop_deltas,
    weight_update,
)


def _half_sse(network: Network, datum: TrainingDatum) -> float:
    out = network.forward(datum.inputs)
    return 0.5 * float(np.sum((out - datum.expected) ** 2))


def _train_xor(batch: bool, seed: int, shuffle_rounds: int = 0) -> tuple[Network, SquaredError, int]:
    data = xor_data()
    net = Network(2, 4, 1)
    net.randomize(np.random.default_rng(seed))
    trainer = Trainer(
        alpha=0.7,
        batch_update=batch,
        shuffle_rounds=shuffle_rounds,
        rng=np.random.default_rng(seed + 100),
    )
    trainer.add_simple_stopping_criteria(20000, 0.01)
    history: List[SquaredError] = []
    trainer.add_iteration_end_handler(lambda t, mse, it, err: history.append(mse))
    iterations = trainer.train(net, data)
    return net, history[-1], iterations


def test_backprop_deltas_match_numerical_gradient():
    net = Network(3, 4, 2)
    net.randomize(np.random.default_rng(5))
    datum = TrainingDatum([0.2, -0.4, 0.9], [1.0, 0.0])
    _, activations = net.trace(datum.inputs)
    deltas = backprop_deltas(net, activations, datum.expected)

    eps = 1e-6
    for idx, layer in enumerate(net.layers):
        analytic = -weight_update(activations.layers[idx].biased_inputs, deltas[idx], 1.0).values
        numeric = np.zeros_like(analytic)
        for row in range(analytic.shape[0]):
            for col in range(analytic.shape[1]):
                original = layer.weights.values[row, col]
                layer.weights.values[row, col] = original + eps
                plus = _half_sse(net, datum)
                layer.weights.values[row, col] = original - eps
                minus = _half_sse(net, datum)
                layer.weights.values[row, col] = original
                numeric[row, col] = (plus - minus) / (2 * eps)
        assert np.allclose(analytic, numeric, atol=1e-7)


def test_weight_update_sign_and_scale():
    update = weight_update(np.array([0.5, 0.5, 1.0]), np.array([0.25, -0.5]), 2.0)
    assert update.shape == (2, 3)
    assert np.allclose(update.values[0], [-0.25, -0.25, -0.5])
    assert np.allclose(update.values[1], [0.5, 0.5, 1.0])


def test_one_iteration_returns_nonzero_error():
    net = Network(2, 3, 1)
    net.randomize(np.random.default_rng(0))
    mse = Trainer().one_iteration(net, xor_data())
    assert len(mse) == 1
    assert mse.combine() > 0.0


def _ramp_data(size: int = 10) -> TrainingData:
    data = TrainingData()
    for i in range(size):
        data.append(TrainingDatum([i / size], [float(i % 2)]))
    return data


def test_one_iteration_shuffles_in_place_when_requested():
    net = Network(1, 2, 1)
    net.randomize(np.random.default_rng(0))
    data = _ramp_data()
    before = list(data.examples)
    Trainer(shuffle_rounds=2, rng=np.random.default_rng(5)).one_iteration(net, data)
    after = list(data.examples)
    assert [id(d) for d in after] != [id(d) for d in before]
    assert sorted(map(id, after)) == sorted(map(id, before))


def test_one_iteration_keeps_order_without_shuffle_rounds():
    net = Network(1, 2, 1)
    net.randomize(np.random.default_rng(0))
    data = _ramp_data()
    before = list(data.examples)
    Trainer(shuffle_rounds=0, rng=np.random.default_rng(5)).one_iteration(net, data)
    assert [id(d) for d in data.examples] == [id(d) for d in before]


def test_batch_update_applies_summed_updates_once():
    data = xor_data()
    online_net = Network(2, 3, 1)
    online_net.randomize(np.random.default_rng(9))
    batch_net = Network(2, 3, 1)
    for src, dst in zip(online_net.layers, batch_net.layers):
        dst.weights = src.weights.copy()

    expected = [np.zeros(layer.weights.shape) for layer in batch_net.layers]
    for datum in data:
        _, activations = batch_net.trace(datum.inputs)
        deltas = backprop_deltas(batch_net, activations, datum.expected)
        for idx in range(len(expected)):
            expected[idx] += weight_update(
                activations.layers[idx].biased_inputs, deltas[idx], 0.3
            ).values
    before = [layer.weights.values.copy() for layer in batch_net.layers]

    Trainer(alpha=0.3, batch_update=True).one_iteration(batch_net, data)
    Trainer(alpha=0.3).one_iteration(online_net, data)
    for idx, layer in enumerate(batch_net.layers):
        assert np.allclose(layer.weights.values, before[idx] + expected[idx])
    assert not np.allclose(online_net.layers[0].weights.values, batch_net.layers[0].weights.values)


def test_single_example_online_equals_batch():
    data = TrainingData([TrainingDatum([0.3, 0.7], [1.0])])
    nets = [Network(2, 2, 1), Network(2, 2, 1)]
    nets[0].randomize(np.random.default_rng(2))
    for src, dst in zip(nets[0].layers, nets[1].layers):
        dst.weights = src.weights.copy()
    Trainer(alpha=0.5).one_iteration(nets[0], data)
    Trainer(alpha=0.5, batch_update=True).one_iteration(nets[1], data)
    for a, b in zip(nets[0].layers, nets[1].layers):
        assert np.allclose(a.weights.values, b.weights.values)


@pytest.mark.parametrize("batch", [False, True])
def test_xor_converges(batch: bool):
    converged = False
    for seed in range(3):
        net, mse, iterations = _train_xor(batch, seed, shuffle_rounds=3 if batch else 0)
        if mse.combine() < 0.05:
            converged = True
            break
    assert converged, f"XOR did not converge, last error {mse.combine()}"
    predictions = [float(net.forward(d.inputs)[0]) for d in xor_data()]
    assert predictions[0] > 0.5 and predictions[1] > 0.5
    assert predictions[2] < 0.5 and predictions[3] < 0.5


def test_train_callbacks_order_and_iteration_cap():
    data = xor_data()
    net = Network(2, 2, 1)
    net.randomize(np.random.default_rng(1))
    trainer = Trainer(alpha=0.0)
    events: List[str] = []
    trainer.add_training_begin_handler(lambda t: events.append("begin"))
    trainer.add_iteration_end_handler(lambda t, mse, it, err: events.append(f"iter{it}"))
    trainer.add_training_end_handler(lambda t: events.append("end"))
    trainer.add_simple_stopping_criteria(3, 0.0)

    iterations = trainer.train(net, data)
    assert iterations == 4
    assert events == ["begin", "iter1", "iter2", "iter3", "iter4", "end"]
    assert trainer.alpha == DEFAULT_ALPHA


def test_trainer_is_reusable_after_termination():
    data = xor_data()
    net = Network(2, 2, 1)
    trainer = Trainer()
    trainer.add_simple_stopping_criteria(1, 0.0)
    assert trainer.train(net, data) == 2
    assert trainer.train(net, data) == 2


def test_patience_stopping_criteria():
    data = xor_data()
    net = Network(2, 2, 1)
    trainer = Trainer(alpha=1e-12)
    trainer.add_patience_stopping_criteria(2, min_delta=1.0)
    trainer.add_simple_stopping_criteria(100, 0.0)
    assert trainer.train(net, data) == 3


def test_data_mismatch_aborts_training_after_notifying():
    data = TrainingData([TrainingDatum([1.0, 0.0], [1.0, 0.0])])
    net = Network(2, 2, 1)
    trainer = Trainer()
    seen = []
    ended = []
    trainer.add_iteration_end_handler(lambda t, mse, it, err: seen.append((mse, it, err)))
    trainer.add_training_end_handler(lambda t: ended.append(True))
    trainer.add_simple_stopping_criteria(10, 0.0)

    with pytest.raises(DataMismatchError):
        trainer.train(net, data)
    assert len(seen) == 1
    mse, iteration, error = seen[0]
    assert mse is None and iteration == 1
    assert isinstance(error, DataMismatchError)
    assert ended == []


def test_shape_error_propagates_from_one_iteration():
    data = TrainingData([TrainingDatum([1.0, 0.0, 1.0], [1.0])])
    with pytest.raises(ShapeError):
        Trainer().one_iteration(Network(2, 2, 1), data)


def test_empty_data_is_rejected():
    with pytest.raises(ConfigurationError):
        Trainer().one_iteration(Network(2, 1), TrainingData())

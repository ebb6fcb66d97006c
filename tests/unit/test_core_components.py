import math
import warnings

import numpy as np
import pytest

from sigmanet.core.activations import dot_product, sigmoid, sigmoid_deriv
from sigmanet.core.errors import ShapeError
from sigmanet.core.layer import Layer
from sigmanet.core.network import Network
from sigmanet.core.weights import WeightMatrix


def test_sigmoid_limits_and_monotonicity():
    assert sigmoid(0.0) == 0.5
    assert sigmoid(50.0) == pytest.approx(1.0)
    assert sigmoid(-50.0) == pytest.approx(0.0, abs=1e-12)
    assert sigmoid(1e6) == 1.0
    xs = np.linspace(-10.0, 10.0, 101)
    ys = sigmoid(xs)
    assert np.all(np.diff(ys) > 0)
    assert np.all((ys > 0) & (ys < 1))


def test_sigmoid_stays_monotone_far_into_the_tails():
    ys = sigmoid(np.array([-700.0, -600.0, -500.0, -300.0]))
    assert np.all(np.diff(ys) > 0)
    assert sigmoid(-600.0) == pytest.approx(np.exp(-600.0), rel=1e-12)
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert sigmoid(-1e6) == 0.0


def test_sigmoid_deriv_uses_activation():
    a = np.array([0.5, 0.25])
    assert np.allclose(sigmoid_deriv(a), [0.25, 0.1875])


def test_dot_product_matches_definition():
    left = np.array([1.0, 2.0, 3.0])
    right = np.array([4.0, -5.0, 0.5])
    assert dot_product(left, right) == pytest.approx(4.0 - 10.0 + 1.5)
    with pytest.raises(ShapeError):
        dot_product(left, right[:2])


def test_weight_matrix_shape_and_process():
    weights = WeightMatrix.zeros(3, 2)
    assert weights.shape == (2, 3)
    assert weights.input_size() == 3
    assert weights.output_size() == 2
    weights.values[:] = [[1.0, 2.0, 3.0], [0.0, -1.0, 1.0]]
    assert np.allclose(weights.process(np.array([1.0, 1.0, 2.0])), [9.0, 1.0])
    with pytest.raises(ShapeError):
        weights.process(np.array([1.0, 1.0]))


def test_weight_matrix_randomize_bounds():
    weights = WeightMatrix.zeros(5, 4)
    weights.randomize(np.random.default_rng(0))
    assert np.all(weights.values != 0.0)
    assert np.all(weights.values >= -0.5)
    assert np.all(weights.values < 0.5)


def test_weight_matrix_add():
    left = WeightMatrix(np.ones((2, 3)))
    right = WeightMatrix(np.full((2, 3), 2.0))
    total = left.add(right)
    assert np.allclose(total.values, 3.0)
    assert np.allclose(left.values, 1.0)
    with pytest.raises(ShapeError):
        left.add(WeightMatrix(np.ones((3, 2))))


def test_layer_forward_known_weights():
    layer = Layer(2, 1)
    assert layer.weights.shape == (1, 3)
    layer.weights.values[:] = [[1.0, 1.0, 0.0]]
    out = layer.forward(np.array([0.5, 0.25]))
    assert out.shape == (1,)
    assert out[0] == pytest.approx(1.0 / (1.0 + math.exp(-0.75)), rel=1e-15)
    assert np.array_equal(layer.forward(np.array([0.5, 0.25])), out)


def test_layer_trace_records_activation():
    layer = Layer(3, 2)
    layer.randomize(np.random.default_rng(1))
    x = np.array([0.1, 0.2, 0.3])
    out, record = layer.trace(x)
    assert np.array_equal(record.inputs, x)
    assert np.array_equal(record.outputs, out)
    assert np.array_equal(record.biased_inputs, [0.1, 0.2, 0.3, 1.0])
    assert np.all((out > 0) & (out < 1))


def test_layer_apply_update_shape_contract():
    layer = Layer(2, 2)
    layer.apply_update(WeightMatrix(np.ones((2, 3))))
    assert np.allclose(layer.weights.values, 1.0)
    with pytest.raises(ShapeError):
        layer.apply_update(WeightMatrix(np.ones((2, 2))))


def test_network_construction():
    net = Network(3, 4, 1)
    assert len(net.layers) == 2
    assert net.layers[0].weights.shape == (4, 4)
    assert net.layers[1].weights.shape == (1, 5)
    assert net.input_size() == 3
    assert net.output_size() == 1
    assert net.parameter_count() == (3 + 1) * 4 + (4 + 1) * 1


def test_network_randomize_changes_every_weight():
    net = Network(2, 3, 1)
    for layer in net.layers:
        assert np.all(layer.weights.values == 0.0)
    net.randomize(np.random.default_rng(3))
    for layer in net.layers:
        assert np.all(layer.weights.values != 0.0)


def test_network_forward_and_cache():
    net = Network(2, 3, 1)
    net.randomize(np.random.default_rng(4))
    first = net.forward(np.array([1.0, 1.0]))
    second = net.forward(np.array([1.0, 1.0]))
    assert first.shape == (1,)
    assert np.array_equal(first, second)
    assert np.array_equal(net.last_output, second)


def test_network_rejects_wrong_input_size():
    net = Network(2, 3, 1)
    net.forward(np.array([1.0, 1.0]))
    with pytest.raises(ShapeError):
        net.forward(np.array([1.0, 1.0, 1.0]))
    assert net.last_output is None

import numpy as np
import pytest

from sigmanet.core.backprop import (
    accumulate,
    backprop,
    batch_gradients,
    squared_error,
    zero_gradients,
)
from sigmanet.core.network import construct
from sigmanet.core.types import Example


def _numeric_gradient(model, params, idx, x, y, eps=1e-6):
    original = params[idx].copy()
    grad = np.zeros_like(original)
    for pos in np.ndindex(*original.shape):
        params[idx][pos] = original[pos] + eps
        plus = squared_error(model, x, y)
        params[idx][pos] = original[pos] - eps
        minus = squared_error(model, x, y)
        params[idx][pos] = original[pos]
        grad[pos] = (plus - minus) / (2 * eps)
    return grad


@pytest.mark.parametrize("sizes", [[2, 1], [3, 4, 2], [3, 4, 5, 2]])
def test_backprop_matches_finite_differences(sizes):
    rng = np.random.default_rng(7)
    model = construct(sizes, rng=rng)
    x = rng.uniform(-1.0, 1.0, size=(sizes[0], 1))
    y = rng.uniform(0.0, 1.0, size=(sizes[-1], 1))

    bias_grads, weight_grads = backprop(model, x, y)

    for idx in range(len(sizes) - 1):
        numeric_w = _numeric_gradient(model, model.weights, idx, x, y)
        numeric_b = _numeric_gradient(model, model.biases, idx, x, y)
        assert np.allclose(weight_grads[idx], numeric_w, atol=1e-6, rtol=1e-4)
        assert np.allclose(bias_grads[idx], numeric_b, atol=1e-6, rtol=1e-4)


def test_gradient_shapes_match_parameters():
    model = construct([5, 4, 3], rng=0)
    bias_grads, weight_grads = backprop(model, np.ones((5, 1)), np.zeros((3, 1)))
    assert [g.shape for g in bias_grads] == [b.shape for b in model.biases]
    assert [g.shape for g in weight_grads] == [W.shape for W in model.weights]


def test_backprop_does_not_mutate_model():
    model = construct([2, 3, 1], rng=0)
    before = model.copy()
    backprop(model, np.ones((2, 1)), np.zeros((1, 1)))
    for a, b in zip(model.weights + model.biases, before.weights + before.biases):
        assert np.array_equal(a, b)


def test_gradients_are_summed_not_averaged():
    model = construct([2, 3, 1], rng=0)
    examples = [
        Example.from_pair([0.0, 1.0], [1.0]),
        Example.from_pair([1.0, 1.0], [0.0]),
        Example.from_pair([1.0, 0.0], [1.0]),
    ]
    total_b, total_w = batch_gradients(model, examples)
    singles = [backprop(model, e.inputs, e.targets) for e in examples]
    for idx in range(2):
        assert np.allclose(total_w[idx], sum(s[1][idx] for s in singles))
        assert np.allclose(total_b[idx], sum(s[0][idx] for s in singles))


def test_zero_gradients_and_accumulate():
    model = construct([2, 2], rng=0)
    total = zero_gradients(model)
    assert all(not g.any() for g in total[0] + total[1])
    delta = ([np.ones((2, 1))], [np.full((2, 2), 2.0)])
    accumulate(total, delta)
    accumulate(total, delta)
    assert np.array_equal(total[0][0], np.full((2, 1), 2.0))
    assert np.array_equal(total[1][0], np.full((2, 2), 4.0))

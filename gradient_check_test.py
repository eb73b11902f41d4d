import numpy as np
import pytest
from gradient_check import check_gradients
from layers.dense import Dense
from layers.split_dense import SplitDense
from neural_network import NeuralNetwork


class SwappedDerivativeSplitDense(SplitDense):
    """Applies each half's derivative to the wrong half."""

    def backprop_gradient(self, epsilon, mask=None):
        split = self.split_index
        delta = np.empty_like(epsilon)
        delta[:, :split] = self.second_activation.derivative(epsilon[:, :split])
        delta[:, split:] = self.activation.derivative(epsilon[:, split:])
        return self.backprop_delta(delta, mask)


@pytest.fixture
def classification_batch():
    rng = np.random.default_rng(12345)
    X = rng.normal(size=(5, 3))
    Y = np.zeros((5, 3))
    Y[np.arange(5), rng.integers(0, 3, 5)] = 1
    return X, Y


def test_split_layer_passes_with_softmax_output(classification_batch):
    np.random.seed(12345)
    X, Y = classification_batch
    network = NeuralNetwork(
        [
            SplitDense(3, 4, activation="sigmoid", second_activation="tanh"),
            Dense(4, 3, activation="softmax"),
        ]
    )
    assert check_gradients(network, X, Y, print_results=True)


def test_split_layer_passes_with_mse_and_mask():
    np.random.seed(1)
    rng = np.random.default_rng(1)
    X = rng.normal(size=(6, 4))
    Y = rng.normal(size=(6, 2))
    network = NeuralNetwork(
        [
            Dense(4, 5, activation="tanh"),
            SplitDense(5, 5, activation="gelu", second_activation="silu"),
            Dense(5, 2, activation="identity"),
        ],
        loss="mse",
    )
    mask = np.array([1, 0, 1, 1, 0, 1])
    assert check_gradients(network, X, Y, mask=mask)


def test_parameters_are_restored(classification_batch):
    X, Y = classification_batch
    network = NeuralNetwork([SplitDense(3, 4, "sigmoid", "tanh"), Dense(4, 3, "softmax")])
    before = network.params().copy()

    check_gradients(network, X, Y)

    assert np.array_equal(network.params(), before)


def test_wrong_backward_pass_is_detected(classification_batch):
    np.random.seed(12345)
    X, Y = classification_batch
    network = NeuralNetwork(
        [
            SwappedDerivativeSplitDense(3, 4, "sigmoid", "tanh"),
            Dense(4, 3, activation="softmax"),
        ]
    )
    assert not check_gradients(network, X, Y)


def test_float32_input_is_rejected(classification_batch):
    X, Y = classification_batch
    network = NeuralNetwork([Dense(3, 3, activation="softmax")])
    with pytest.raises(ValueError):
        check_gradients(network, X.astype(np.float32), Y)

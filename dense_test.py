import numpy as np
import pytest
from Activations import ReLU, Softmax
from layers.cross_entropy_loss import CrossEntropyLoss
from layers.dense import Dense
from layers.gradient import BIAS_KEY, WEIGHT_KEY

BATCH_SIZE = 4
INPUT_SIZE = 50
HIDDEN_SIZE = 20
OUTPUT_CLASSES = 10
LEARN_RATE = 0.01


@pytest.fixture
def batch():
    np.random.seed(0)
    input_data = np.random.randn(BATCH_SIZE, INPUT_SIZE)
    # Dummy Targets: (B, C) - One-hot encoded labels
    targets = np.zeros((BATCH_SIZE, OUTPUT_CLASSES))
    targets[np.arange(BATCH_SIZE), np.random.randint(0, OUTPUT_CLASSES, BATCH_SIZE)] = (
        1.0
    )
    return input_data, targets


def test_dense_network(batch):
    input_data, targets = batch

    dense_hidden = Dense(INPUT_SIZE, HIDDEN_SIZE, activation=ReLU())
    dense_output = Dense(HIDDEN_SIZE, OUTPUT_CLASSES, activation=Softmax())
    loss_layer = CrossEntropyLoss()

    initial_W1 = dense_hidden.weights.copy()
    initial_B1 = dense_hidden.biases.copy()
    initial_W2 = dense_output.weights.copy()
    initial_B2 = dense_output.biases.copy()

    # --- FORWARD PASS ---
    hidden_output = dense_hidden.forward(input_data)
    final_output = dense_output.forward(hidden_output)

    assert hidden_output.shape == (BATCH_SIZE, HIDDEN_SIZE)
    assert final_output.shape == (BATCH_SIZE, OUTPUT_CLASSES)
    # Softmax: all probabilities should be positive and sum to 1
    assert np.allclose(np.sum(final_output, axis=1), 1.0)
    assert np.all(final_output >= 0)

    loss = loss_layer.forward(final_output, targets)
    assert loss > 0

    # --- BACKWARD PASS ---
    d_L_d_Z_output = loss_layer.derivative()
    d_L_d_hidden_output = dense_output.backprop(d_L_d_Z_output, LEARN_RATE)
    d_L_d_input = dense_hidden.backprop(d_L_d_hidden_output, LEARN_RATE)

    assert d_L_d_input.shape == input_data.shape

    assert not np.array_equal(initial_W2, dense_output.weights)
    assert not np.array_equal(initial_B2, dense_output.biases)
    assert not np.array_equal(initial_W1, dense_hidden.weights)
    assert not np.array_equal(initial_B1, dense_hidden.biases)


def test_backprop_gradient_matches_closed_form(batch):
    input_data, _ = batch
    layer = Dense(INPUT_SIZE, HIDDEN_SIZE, activation="identity")
    layer.forward(input_data)

    epsilon = np.random.randn(BATCH_SIZE, HIDDEN_SIZE)
    gradient, epsilon_next = layer.backprop_gradient(epsilon)

    assert np.allclose(gradient[WEIGHT_KEY], input_data.T @ epsilon)
    assert np.allclose(gradient[BIAS_KEY], epsilon.sum(axis=0, keepdims=True))
    assert np.allclose(epsilon_next, epsilon @ layer.weights.T)


def test_gradients_are_written_into_the_gradient_views(batch):
    input_data, _ = batch
    layer = Dense(INPUT_SIZE, HIDDEN_SIZE)
    layer.forward(input_data)

    gradient, _ = layer.backprop_gradient(np.ones((BATCH_SIZE, HIDDEN_SIZE)))

    assert gradient[WEIGHT_KEY] is layer.gradient_views[WEIGHT_KEY]
    assert gradient[BIAS_KEY] is layer.gradient_views[BIAS_KEY]
    assert gradient.flattened().shape == (layer.num_params(),)


def test_backprop_does_not_change_parameters(batch):
    input_data, _ = batch
    layer = Dense(INPUT_SIZE, HIDDEN_SIZE)
    before = layer.weights.copy()
    layer.forward(input_data)
    layer.backprop_gradient(np.ones((BATCH_SIZE, HIDDEN_SIZE)))

    assert np.array_equal(before, layer.weights)


def test_mask_zeroes_masked_examples(batch):
    input_data, _ = batch
    layer = Dense(INPUT_SIZE, HIDDEN_SIZE, activation="tanh")
    layer.forward(input_data)
    epsilon = np.random.randn(BATCH_SIZE, HIDDEN_SIZE)

    mask = np.array([1.0, 0.0, 1.0, 0.0])
    gradient, epsilon_next = layer.backprop_gradient(epsilon, mask=mask)
    masked_W = gradient[WEIGHT_KEY].copy()

    assert np.allclose(epsilon_next[1], 0.0)
    assert np.allclose(epsilon_next[3], 0.0)

    # Same as running only the unmasked examples
    layer.forward(input_data[[0, 2]])
    gradient, _ = layer.backprop_gradient(epsilon[[0, 2]])
    assert np.allclose(masked_W, gradient[WEIGHT_KEY])


def test_backprop_uses_latest_pre_output(batch):
    input_data, _ = batch
    layer = Dense(INPUT_SIZE, HIDDEN_SIZE, activation="tanh")
    other_input = np.random.randn(BATCH_SIZE, INPUT_SIZE)
    epsilon = np.random.randn(BATCH_SIZE, HIDDEN_SIZE)

    layer.forward(input_data)
    expected, _ = layer.backprop_gradient(epsilon)
    expected_W = expected[WEIGHT_KEY].copy()

    layer.forward(other_input)
    layer.pre_output(input_data)
    gradient, _ = layer.backprop_gradient(epsilon)

    assert np.allclose(gradient[WEIGHT_KEY], expected_W)


def test_wrong_input_width_raises():
    layer = Dense(3, 2)
    with pytest.raises(ValueError):
        layer.forward(np.zeros((4, 5)))


def test_backprop_before_forward_raises():
    layer = Dense(3, 2)
    with pytest.raises(RuntimeError):
        layer.backprop_gradient(np.zeros((4, 2)))


def test_epsilon_shape_mismatch_raises():
    layer = Dense(3, 2)
    layer.forward(np.zeros((4, 3)))
    with pytest.raises(ValueError):
        layer.backprop_gradient(np.zeros((4, 3)))


def test_config_round_trip():
    layer = Dense(3, 2, activation="sigmoid")
    config = layer.get_config()

    assert config == {
        "type": "Dense",
        "input_size": 3,
        "output_size": 2,
        "activation": "sigmoid",
    }
    rebuilt = Dense.from_config(config)
    assert rebuilt.get_config() == config


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__]))

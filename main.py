import numpy as np
from gradient_check import check_gradients
from layers.dense import Dense
from layers.split_dense import SplitDense
from neural_network import NeuralNetwork

# --- 1. Data Utility Functions ---


def create_dummy_data(num_samples=1000, num_features=4, num_classes=3, seed=None):
    """
    Creates a separable classification set: each class is a Gaussian blob
    around its own random center.
    """
    rng = np.random.default_rng(seed)
    centers = rng.normal(scale=3.0, size=(num_classes, num_features))

    # True Labels (Indices): (B,)
    y_indices = rng.integers(0, num_classes, num_samples)
    X = centers[y_indices] + rng.normal(size=(num_samples, num_features))

    # One-Hot Encoded Targets (Y): (B, C)
    Y_true = np.zeros((num_samples, num_classes))
    Y_true[np.arange(num_samples), y_indices] = 1

    return X, Y_true, y_indices


def accuracy(y_pred_indices, y_true_indices):
    """Calculates the classification accuracy."""
    return np.mean(y_pred_indices == y_true_indices)


def split_data(X, Y, y_indices, test_ratio=0.2):
    """Splits data into training and testing sets using shuffled indices."""
    size = X.shape[0]
    full_indices = np.random.permutation(size)
    test_size = int(size * test_ratio)

    test_indices = full_indices[:test_size]
    train_indices = full_indices[test_size:]

    print(f"Data Split: Total={size}, Train={len(train_indices)}, Test={test_size}")

    return (
        X[train_indices],
        Y[train_indices],
        y_indices[train_indices],
        X[test_indices],
        Y[test_indices],
        y_indices[test_indices],
    )


# --- 2. Model Definition ---


def define_model(num_features, num_classes, hidden_size=16):
    """Dense -> SplitDense (sigmoid | tanh) -> Dense (softmax)."""
    layers = [
        Dense(input_size=num_features, output_size=hidden_size, activation="relu"),
        # First half of the columns use sigmoid, second half tanh
        SplitDense(
            input_size=hidden_size,
            output_size=hidden_size,
            activation="sigmoid",
            second_activation="tanh",
        ),
        Dense(input_size=hidden_size, output_size=num_classes, activation="softmax"),
    ]
    return NeuralNetwork(layers=layers, loss="cross_entropy")


def run_gradient_check():
    """Checks the custom layer's backward pass on a tiny float64 network."""
    print("--- Gradient Check ---")
    X, Y, _ = create_dummy_data(num_samples=5, num_features=3, num_classes=3, seed=12345)
    network = NeuralNetwork(
        [
            SplitDense(3, 4, activation="sigmoid", second_activation="tanh"),
            Dense(4, 3, activation="softmax"),
        ]
    )
    return check_gradients(network, X, Y, print_results=True)


# --- 3. Main Execution Function ---


def main(mode="train"):
    # Hyperparameters
    NUM_FEATURES = 4
    NUM_CLASSES = 3
    EPOCHS = 20
    BATCH_SIZE = 32
    LEARN_RATE = 0.1
    PARAM_FILE = "trained_split_dense_params.npz"
    SEED = 12345

    np.random.seed(SEED)
    X_all, Y_all, y_all_indices = create_dummy_data(
        num_features=NUM_FEATURES, num_classes=NUM_CLASSES, seed=SEED
    )
    X_train, Y_train, y_train_indices, X_test, Y_test, y_test_indices = split_data(
        X_all, Y_all, y_all_indices, test_ratio=0.2
    )

    model = define_model(NUM_FEATURES, NUM_CLASSES)

    if mode == "train":
        if not run_gradient_check():
            print("Gradient check failed, not training.")
            return None

        # The configuration round trip must rebuild the same architecture
        config_json = model.to_json()
        restored = NeuralNetwork.from_json(config_json)
        print(f"Configuration round trip OK: {[repr(l) for l in restored.layers]}")

        print("--- Starting Training ---")
        model.fit(
            X_train=X_train,
            Y_train=Y_train,
            epochs=EPOCHS,
            batch_size=BATCH_SIZE,
            learn_rate=LEARN_RATE,
        )
        model.save_params(PARAM_FILE)

        trained_acc = accuracy(model.predict(X_test), y_test_indices)
        print(f"\nTraining Complete. Final Test Accuracy: {trained_acc * 100:.2f}%")

        # Reload the saved parameters into the network rebuilt from JSON
        restored.load_params(PARAM_FILE)
        acc = accuracy(restored.predict(X_test), y_test_indices)
        print(f"Rebuilt Model Test Accuracy (Loaded Params): {acc * 100:.2f}%")
        return acc

    elif mode == "predict":
        print("--- Starting Inference from Saved Parameters ---")
        model.load_params(PARAM_FILE)

        y_pred_indices = model.predict(X_test)
        acc = accuracy(y_pred_indices, y_test_indices)
        print(f"Inference Complete. Test Accuracy (Loaded Model): {acc * 100:.2f}%")
        return acc

    else:
        print("Invalid mode. Use 'train' or 'predict'.")


if __name__ == "__main__":
    # Run the full training and evaluation sequence
    main(mode="train")

    # If you want to test loading, uncomment the line below after running train once:
    # main(mode="predict")

import json

import numpy as np
from layers.cross_entropy_loss import CrossEntropyLoss
from layers.dense import Dense
from layers.mse_loss import MSELoss
from layers.split_dense import SplitDense

LAYER_TYPES = {"Dense": Dense, "SplitDense": SplitDense}
LOSSES = {"cross_entropy": CrossEntropyLoss, "mse": MSELoss}


def get_loss(loss):
    if not isinstance(loss, str):
        return loss
    if loss not in LOSSES:
        raise ValueError(f"Unknown loss '{loss}'. Use one of: {', '.join(LOSSES)}.")
    return LOSSES[loss]()


class NeuralNetwork:
    def __init__(self, layers, loss="cross_entropy"):
        """
        Initializes the model with a list of layers.

        Args:
            layers (list): An ordered list of layer objects (Dense, SplitDense).
            loss (str or object): "cross_entropy" (last layer should use softmax)
                                  or "mse", or a loss object.
        """
        if not layers:
            raise ValueError("A network needs at least one layer.")
        for below, above in zip(layers, layers[1:]):
            if below.output_size != above.input_size:
                raise ValueError(
                    f"{above!r} expects {above.input_size} inputs but {below!r} produces {below.output_size}."
                )

        self.layers = layers
        # The loss function is not part of the layers list,
        # but is managed separately during training.
        self.loss_fn = get_loss(loss)

        # One flat array for all parameters and one for all gradients.
        # Every layer works on views (slices) of these two arrays.
        total = sum(layer.num_params() for layer in layers)
        self._params = np.zeros(total)
        self._gradients = np.zeros(total)

        offset = 0
        for layer in layers:
            n = layer.num_params()
            layer.set_param_views(self._params[offset : offset + n])
            layer.set_gradient_views(self._gradients[offset : offset + n])
            offset += n

    def num_params(self):
        return self._params.size

    def params(self):
        """The flat parameter array. It is shared with the layers, so edits are live."""
        return self._params

    def set_params(self, flat_params):
        flat_params = np.asarray(flat_params)
        if flat_params.shape != self._params.shape:
            raise ValueError(
                f"Expected {self._params.size} parameters, got shape {flat_params.shape}."
            )
        self._params[...] = flat_params

    def save_params(self, filename):
        """
        Saves all learnable parameters (weights and biases) to a file.
        Uses np.savez_compressed for efficient storage.
        """
        params = {}
        for i, layer in enumerate(self.layers):
            params[f"W{i}"] = layer.weights
            params[f"B{i}"] = layer.biases

        np.savez_compressed(filename, **params)
        print(f"Parameters saved successfully to {filename}")

    def load_params(self, filename):
        """
        Loads parameters from a file and sets them in the corresponding layers.
        """
        try:
            params = np.load(filename)
        except FileNotFoundError:
            print(f"❌ Error: Parameter file not found at {filename}")
            return

        with params:
            for i, layer in enumerate(self.layers):
                if f"W{i}" in params:
                    layer.weights = params[f"W{i}"]
                if f"B{i}" in params:
                    layer.biases = params[f"B{i}"]

        print(f"Parameters loaded successfully from {filename}")

    def to_json(self):
        """Serialises the architecture (not the parameters) to a JSON string."""
        loss_name = getattr(self.loss_fn, "name", None)
        if loss_name not in LOSSES:
            raise ValueError(
                f"{type(self.loss_fn).__name__} is not a registered loss and cannot be serialised."
            )
        return json.dumps(
            {
                "loss": loss_name,
                "layers": [layer.get_config() for layer in self.layers],
            },
            indent=2,
        )

    @classmethod
    def from_json(cls, text):
        config = json.loads(text)
        layers = []
        for layer_config in config["layers"]:
            layer_type = layer_config.get("type")
            if layer_type not in LAYER_TYPES:
                raise ValueError(f"Unknown layer type '{layer_type}'.")
            layers.append(LAYER_TYPES[layer_type].from_config(layer_config))
        return cls(layers, loss=config.get("loss", "cross_entropy"))

    def forward(self, input):
        """
        Performs a forward pass through all layers.
        """
        output = input
        for layer in self.layers:
            output = layer.forward(output)
        return output

    def score(self, X, Y, mask=None):
        """Loss for a batch, without touching the gradients."""
        return self.loss_fn.forward(self.forward(X), Y, mask)

    def compute_gradient_and_score(self, X_batch, Y_batch, mask=None):
        """
        Forward pass, loss and backward pass. The gradients of every layer are
        written into the shared gradient array.

        Returns:
            (float, np.array): The batch loss and a copy of the flat gradient.
        """
        loss = self.score(X_batch, Y_batch, mask)

        # Start from dL/dA of the last layer; for softmax + cross-entropy this
        # is already dL/dZ and Softmax.derivative passes it through.
        grad_out = self.loss_fn.derivative()
        for layer in reversed(self.layers):
            _, grad_out = layer.backprop_gradient(grad_out, mask)

        return loss, self._gradients.copy()

    def train_step(self, X_batch, Y_batch, learn_rate, mask=None):
        """
        Performs one full training step: forward pass, loss calculation,
        backward pass, and one SGD update over the flat parameter array.

        Returns:
            float: The calculated loss for the batch.
        """
        loss, _ = self.compute_gradient_and_score(X_batch, Y_batch, mask)
        self._params -= learn_rate * self._gradients
        return loss

    def fit(self, X_train, Y_train, epochs, batch_size, learn_rate):
        """
        Training loop for the entire dataset. Returns the average loss per epoch.
        """
        num_samples = X_train.shape[0]
        history = []

        for epoch in range(epochs):
            # Shuffle data at the start of each epoch
            permutation = np.random.permutation(num_samples)
            X_shuffled = X_train[permutation]
            Y_shuffled = Y_train[permutation]

            epoch_loss = 0
            num_batches = 0

            for i in range(0, num_samples, batch_size):
                X_batch = X_shuffled[i : i + batch_size]
                Y_batch = Y_shuffled[i : i + batch_size]

                batch_loss = self.train_step(X_batch, Y_batch, learn_rate)
                epoch_loss += batch_loss
                num_batches += 1

                # Log the batch loss every 100 steps to monitor in-epoch progress
                if num_batches % 100 == 0:
                    print(
                        f"Epoch {epoch + 1}/{epochs} - Step {num_batches} - Batch Loss: {batch_loss:.4f}"
                    )

            avg_loss = epoch_loss / max(num_batches, 1)
            history.append(avg_loss)
            print(f"Epoch {epoch + 1}/{epochs} - Loss: {avg_loss:.4f}")

        return history

    def predict(self, X_test):
        """
        Class indices for a cross-entropy model, raw outputs otherwise.
        """
        output = self.forward(X_test)
        if isinstance(self.loss_fn, CrossEntropyLoss):
            return np.argmax(output, axis=1)
        return output

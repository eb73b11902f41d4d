import copy

import numpy as np
from Activations import Softmax, activation_name, get_activation
from layers.dense import Dense


class SplitDense(Dense):
    """
    Dense layer with two activation functions: `activation` is applied to the
    first half of the output columns, `second_activation` to the second half.

    Only the activation step differs from Dense. The pre-activation Z = X * W + B
    and the parameter gradient computation are inherited unchanged.
    """

    def __init__(
        self, input_size, output_size, activation="relu", second_activation="tanh"
    ):
        super().__init__(input_size, output_size, activation)
        self.second_activation = get_activation(second_activation)
        if self.second_activation is self.activation:
            # Each half needs its own cached forward state
            self.second_activation = copy.deepcopy(self.activation)

        # Softmax normalises across a whole row, so it cannot act on half of one
        for act in (self.activation, self.second_activation):
            if isinstance(act, Softmax):
                raise ValueError("SplitDense activations must be element-wise.")

    @property
    def split_index(self):
        # Columns [0, split) use the first activation. An odd column goes to the second half.
        return self.output_size // 2

    def pre_output(self, input):
        # Nothing different from a standard dense layer here
        return super().pre_output(input)

    def activate(self, input):
        output_raw = self.pre_output(input)
        split = self.split_index

        output = np.empty_like(output_raw, dtype=float)
        output[:, :split] = self.activation.forward(output_raw[:, :split])
        output[:, split:] = self.second_activation.forward(output_raw[:, split:])
        return output

    def backprop_gradient(self, epsilon, mask=None):
        """
        Same as Dense.backprop_gradient, except that dL/dZ is assembled from the
        two activation derivatives, each over its own column range.
        """
        self._check_backprop_ready(epsilon)
        epsilon = np.asarray(epsilon)
        split = self.split_index

        # Refresh both caches from the stored Z, as Dense.backprop_gradient does
        output_raw = self.last_output_raw
        self.activation.forward(output_raw[:, :split])
        self.second_activation.forward(output_raw[:, split:])

        delta = np.empty_like(epsilon, dtype=float)
        delta[:, :split] = self.activation.derivative(epsilon[:, :split])
        delta[:, split:] = self.second_activation.derivative(epsilon[:, split:])

        return self.backprop_delta(delta, mask)

    def get_config(self):
        config = super().get_config()
        config["second_activation"] = activation_name(self.second_activation)
        return config

    def __repr__(self):
        first = getattr(self.activation, "name", type(self.activation).__name__)
        second = getattr(
            self.second_activation, "name", type(self.second_activation).__name__
        )
        return f"SplitDense({self.input_size} -> {self.output_size}, {first} | {second})"

import numpy as np
from Activations import activation_name, get_activation
from layers.gradient import BIAS_KEY, WEIGHT_KEY, Gradient


def views_over(flat, shapes):
    """
    Cuts a 1D buffer into consecutive reshaped views, one per (key, shape).
    Writing into a view writes into `flat`.
    """
    views = {}
    offset = 0
    for key, shape in shapes.items():
        size = int(np.prod(shape))
        views[key] = flat[offset : offset + size].reshape(shape)
        offset += size
    if offset != flat.size:
        raise ValueError(f"Buffer has {flat.size} values but the shapes need {offset}.")
    return views


class Dense:
    def __init__(self, input_size, output_size, activation="relu"):
        self.input_size = int(input_size)
        self.output_size = int(output_size)
        self.activation = get_activation(activation)  # Store activation object

        self.last_input = None
        self.last_output_raw = None

        # The layer owns private buffers until a network hands it views into
        # its shared parameter and gradient arrays.
        self.param_views = views_over(np.zeros(self.num_params()), self.param_shapes())
        self.gradient_views = views_over(
            np.zeros(self.num_params()), self.param_shapes()
        )

        # Weights (W): Shape (input_size, output_size)
        # He initialization; biases stay at zero
        std_dev = np.sqrt(2.0 / self.input_size)
        self.param_views[WEIGHT_KEY][...] = (
            np.random.randn(self.input_size, self.output_size) * std_dev
        )

    # --- Parameters -------------------------------------------------------

    def param_shapes(self):
        # Biases (B): Shape (1, output_size) - Batch dimension is handled by broadcasting
        return {
            WEIGHT_KEY: (self.input_size, self.output_size),
            BIAS_KEY: (1, self.output_size),
        }

    def num_params(self):
        return self.input_size * self.output_size + self.output_size

    def set_param_views(self, flat_params):
        """Moves the parameters into `flat_params`, keeping their current values."""
        views = views_over(flat_params, self.param_shapes())
        for key, view in views.items():
            view[...] = self.param_views[key]
        self.param_views = views

    def set_gradient_views(self, flat_gradients):
        self.gradient_views = views_over(flat_gradients, self.param_shapes())

    @property
    def weights(self):
        return self.param_views[WEIGHT_KEY]

    @weights.setter
    def weights(self, value):
        self.param_views[WEIGHT_KEY][...] = value

    @property
    def biases(self):
        return self.param_views[BIAS_KEY]

    @biases.setter
    def biases(self, value):
        self.param_views[BIAS_KEY][...] = value

    # --- Forward ----------------------------------------------------------

    def pre_output(self, input):
        """
        Linear transformation Z = X * W + B, before any activation.
        - input is a 2D numpy array (Batch Size, input_size).
        """
        input = np.asarray(input)
        if input.ndim != 2 or input.shape[1] != self.input_size:
            raise ValueError(
                f"Expected input of shape (B, {self.input_size}), got {input.shape}."
            )
        self.last_input = input

        output_raw = np.dot(input, self.weights) + self.biases
        self.last_output_raw = output_raw  # Store Z before activation
        return output_raw

    def activate(self, input):
        """Performs: Z = X * W + B, followed by A = f(Z)."""
        output_raw = self.pre_output(input)
        return self.activation.forward(output_raw)

    def forward(self, input):
        return self.activate(input)

    # --- Backward ---------------------------------------------------------

    def backprop_gradient(self, epsilon, mask=None):
        """
        Computes the parameter gradients and the epsilon for the layer below.

        - epsilon is dL/dA, the gradient of the loss w.r.t. this layer's
          activated output. It has the same shape as the output.
        - mask optionally zeroes the contribution of some examples, shape (B,)
          or (B, 1).

        Returns (Gradient, epsilon_next). The gradient arrays are this layer's
        gradient views, filled in place.
        """
        self._check_backprop_ready(epsilon)

        # Re-run the activation on the stored Z so its cached state belongs to
        # the same batch as last_input, even after a bare pre_output call
        self.activation.forward(self.last_output_raw)

        # dL/dZ = dL/dA * f'(Z)
        delta = self.activation.derivative(epsilon)
        return self.backprop_delta(delta, mask)

    def backprop_delta(self, delta, mask=None):
        """Shared gradient path once delta = dL/dZ is known."""
        if mask is not None:
            delta = delta * np.asarray(mask).reshape(-1, 1)

        gradient = Gradient()

        # dL/dW = X^T * dL/dZ, written into the gradient view
        weight_grad = self.gradient_views[WEIGHT_KEY]
        weight_grad[...] = np.dot(self.last_input.T, delta)

        # dL/dB = Sum(dL/dZ, axis=0)
        bias_grad = self.gradient_views[BIAS_KEY]
        bias_grad[...] = np.sum(delta, axis=0, keepdims=True)

        gradient.set_gradient_for(WEIGHT_KEY, weight_grad)
        gradient.set_gradient_for(BIAS_KEY, bias_grad)

        # dL/dX = dL/dZ * W^T
        epsilon_next = np.dot(delta, self.weights.T)
        return gradient, epsilon_next

    def _check_backprop_ready(self, epsilon):
        if self.last_input is None or self.last_output_raw is None:
            raise RuntimeError(
                f"{type(self).__name__} backprop called before forward pass."
            )
        if np.shape(epsilon) != self.last_output_raw.shape:
            raise ValueError(
                f"Epsilon shape {np.shape(epsilon)} does not match output shape {self.last_output_raw.shape}."
            )

    def backprop(self, d_L_d_out, learn_rate, mask=None):
        """
        Backward pass followed by an SGD update of this layer's parameters.
        Returns the gradient w.r.t. the input.
        """
        gradient, d_L_d_input = self.backprop_gradient(d_L_d_out, mask)

        for key, grad in gradient.items():
            self.param_views[key] -= learn_rate * grad

        return d_L_d_input

    # --- Config -----------------------------------------------------------

    def get_config(self):
        return {
            "type": type(self).__name__,
            "input_size": self.input_size,
            "output_size": self.output_size,
            "activation": activation_name(self.activation),
        }

    @classmethod
    def from_config(cls, config):
        config = {k: v for k, v in config.items() if k != "type"}
        return cls(**config)

    def __repr__(self):
        name = getattr(self.activation, "name", type(self.activation).__name__)
        return f"{type(self).__name__}({self.input_size} -> {self.output_size}, {name})"

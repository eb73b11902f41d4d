import numpy as np


class Softmax:
    """
    Softmax activation for the final classification layer.

    Only meant to be paired with CrossEntropyLoss: the loss already returns
    dL/dZ = A - Y, so derivative() passes the incoming gradient through.
    """

    name = "softmax"

    def __init__(self):
        self.output = None

    def forward(self, input):
        # Prevent overflow by subtracting max value (numerical stability)
        exp_vals = np.exp(input - np.max(input, axis=1, keepdims=True))
        probabilities = exp_vals / np.sum(exp_vals, axis=1, keepdims=True)
        self.output = probabilities
        return self.output

    def derivative(self, d_L_d_out):
        return d_L_d_out

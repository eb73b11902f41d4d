import numpy as np


class Sigmoid:
    name = "sigmoid"

    def __init__(self):
        self.output = None

    def forward(self, x):
        # Split on sign so np.exp never sees a large positive argument
        x = np.asarray(x, dtype=float)
        exp_neg = np.exp(-np.abs(x))
        self.output = np.where(x >= 0, 1 / (1 + exp_neg), exp_neg / (1 + exp_neg))
        return self.output

    def derivative(self, grad_out):
        if self.output is None:
            raise ValueError("Sigmoid derivative called before forward pass.")
        # d sigma / dx = sigma * (1 - sigma), reusing the forward output
        return grad_out * self.output * (1 - self.output)


class Tanh:
    name = "tanh"

    def __init__(self):
        self.output = None

    def forward(self, x):
        self.output = np.tanh(x)
        return self.output

    def derivative(self, grad_out):
        if self.output is None:
            raise ValueError("Tanh derivative called before forward pass.")
        return grad_out * (1 - self.output**2)

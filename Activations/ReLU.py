import numpy as np


class ReLU:
    name = "relu"

    def __init__(self):
        self.mask = None

    def forward(self, x):
        self.mask = x > 0
        return x * self.mask

    def derivative(self, grad_out):
        if self.mask is None:
            raise ValueError("ReLU derivative called before forward pass.")
        return grad_out * self.mask


class LeakyReLU:
    name = "leakyrelu"

    def __init__(self, alpha=0.01):
        self.alpha = alpha
        self.mask = None

    def forward(self, x):
        self.mask = x > 0
        return np.where(self.mask, x, self.alpha * x)

    def derivative(self, grad_out):
        if self.mask is None:
            raise ValueError("LeakyReLU derivative called before forward pass.")
        return grad_out * np.where(self.mask, 1.0, self.alpha)

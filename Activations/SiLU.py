import numpy as np


class SiLU:
    """x * sigmoid(x), also registered as "swish"."""

    name = "silu"

    def __init__(self):
        self.x = None
        self.sigma_x = None

    def forward(self, x):
        self.x = np.array(x, copy=True)
        self.sigma_x = 1 / (1 + np.exp(-self.x))
        return self.x * self.sigma_x

    def derivative(self, grad_out):
        if self.x is None or self.sigma_x is None:
            raise ValueError(
                "SiLU derivative called before forward pass. State (self.x, self.sigma_x) is None."
            )
        d_A_d_Z = self.sigma_x * (1 + self.x * (1 - self.sigma_x))

        # return d_L_d_Z
        return grad_out * d_A_d_Z


class GELU:
    """Tanh approximation of the Gaussian error linear unit."""

    name = "gelu"

    def __init__(self):
        self.x = None
        self.tanh_u = None

    def forward(self, x: np.ndarray):
        self.x = np.array(x, copy=True)
        u = np.sqrt(2 / np.pi) * (self.x + 0.044715 * self.x**3)
        self.tanh_u = np.tanh(u)
        return 0.5 * self.x * (1 + self.tanh_u)

    def derivative(self, grad_out):
        if self.x is None or self.tanh_u is None:
            raise ValueError(
                "GELU derivative called before forward pass. State (self.x, self.tanh_u) is None."
            )

        du_dx = np.sqrt(2 / np.pi) * (1 + 3 * 0.044715 * self.x**2)
        grad = 0.5 * (1 + self.tanh_u) + 0.5 * self.x * (1 - self.tanh_u**2) * du_dx
        return grad_out * grad

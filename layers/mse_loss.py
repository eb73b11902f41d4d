import numpy as np
from layers.cross_entropy_loss import _check_targets


class MSELoss:
    """Squared error 0.5 * sum((pred - y)^2), averaged over the batch."""

    name = "mse"

    def __init__(self):
        self.predictions = None
        self.targets = None
        self.mask = None

    def forward(self, predictions, targets, mask=None):
        predictions = np.asarray(predictions)
        targets = np.asarray(targets)
        self.mask = _check_targets(predictions, targets, mask)
        self.predictions = predictions
        self.targets = targets

        per_example = 0.5 * np.sum((predictions - targets) ** 2, axis=1, keepdims=True)
        if self.mask is not None:
            per_example = per_example * self.mask

        return float(np.sum(per_example) / targets.shape[0])

    def derivative(self):
        if self.predictions is None:
            raise RuntimeError("MSELoss derivative called before forward.")

        d_L_d_out = self.predictions - self.targets
        if self.mask is not None:
            d_L_d_out = d_L_d_out * self.mask
        return d_L_d_out / self.targets.shape[0]

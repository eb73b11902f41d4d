import numpy as np


def _check_targets(predictions, targets, mask):
    if predictions.shape != targets.shape:
        raise ValueError(
            f"Predictions {predictions.shape} and targets {targets.shape} must have the same shape."
        )
    if mask is None:
        return None
    mask = np.asarray(mask, dtype=float).reshape(-1, 1)
    if mask.shape[0] != targets.shape[0]:
        raise ValueError(
            f"Mask has {mask.shape[0]} entries for a batch of {targets.shape[0]}."
        )
    return mask


class CrossEntropyLoss:
    """
    Calculates Cross-Entropy Loss and the simplified gradient
    (dL/dZ) for Softmax inputs.
    """

    name = "cross_entropy"

    def __init__(self):
        self.activation_output = None
        self.targets = None
        self.mask = None

    def forward(self, activation_output, targets, mask=None):
        """
        Calculates the Cross-Entropy Loss L.
        - activation_output (A_hat): Probabilities from Softmax (B, C)
        - targets (Y): One-hot encoded true labels (B, C)
        - mask: optional 0/1 weight per example (B,)
        """
        activation_output = np.asarray(activation_output)
        targets = np.asarray(targets)
        self.mask = _check_targets(activation_output, targets, mask)
        self.activation_output = activation_output
        self.targets = targets

        # Add a tiny epsilon to probabilities to prevent log(0), ensuring numerical stability
        epsilon = 1e-10
        A_hat = activation_output + epsilon

        # L = - sum(y * log(y_hat)), averaged over the batch
        per_example = -np.sum(targets * np.log(A_hat), axis=1, keepdims=True)
        if self.mask is not None:
            per_example = per_example * self.mask

        return float(np.sum(per_example) / targets.shape[0])

    def derivative(self):
        """
        Calculates the simplified gradient of the loss with respect to the
        raw input scores (Z) to the Softmax layer: dL/dZ = A_hat - Y.

        Returns a gradient tensor of shape (B, C).
        """
        if self.activation_output is None:
            raise RuntimeError("CrossEntropyLoss derivative called before forward.")

        d_L_d_Z = self.activation_output - self.targets
        if self.mask is not None:
            d_L_d_Z = d_L_d_Z * self.mask

        # The loss was averaged over the batch in the forward pass
        return d_L_d_Z / self.targets.shape[0]

import numpy as np

WEIGHT_KEY = "W"
BIAS_KEY = "b"


class Gradient:
    """
    Ordered map of parameter name -> gradient array for one backward pass.

    The arrays are normally views into a layer's gradient buffer, so they
    stay valid (and get overwritten) on the next backward pass.
    """

    def __init__(self):
        self._gradients = {}

    def set_gradient_for(self, key, gradient):
        self._gradients[key] = gradient

    def get_gradient_for(self, key):
        return self._gradients[key]

    def gradient_for_variable(self):
        return self._gradients

    def flattened(self):
        """Concatenates all gradients (in insertion order) into one 1D array."""
        if not self._gradients:
            return np.zeros(0)
        return np.concatenate([g.ravel() for g in self._gradients.values()])

    def keys(self):
        return self._gradients.keys()

    def items(self):
        return self._gradients.items()

    def __getitem__(self, key):
        return self._gradients[key]

    def __contains__(self, key):
        return key in self._gradients

    def __len__(self):
        return len(self._gradients)

    def __repr__(self):
        shapes = {k: v.shape for k, v in self._gradients.items()}
        return f"Gradient({shapes})"

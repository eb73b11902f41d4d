from .Linear import Linear
from .ReLU import LeakyReLU, ReLU
from .sigmoid import Sigmoid, Tanh
from .SiLU import GELU, SiLU
from .softmax import Softmax

# Name -> class. Lookups are case-insensitive and always build a new instance,
# since every activation caches state from its last forward pass.
ACTIVATIONS = {
    "identity": Linear,
    "linear": Linear,
    "relu": ReLU,
    "leakyrelu": LeakyReLU,
    "sigmoid": Sigmoid,
    "tanh": Tanh,
    "silu": SiLU,
    "swish": SiLU,
    "gelu": GELU,
    "softmax": Softmax,
}


def get_activation(activation):
    """
    Resolves an activation given by name (e.g. "relu", "TanH") into a fresh
    activation object. Objects that already implement forward/derivative are
    returned unchanged.
    """
    if not isinstance(activation, str):
        if not (hasattr(activation, "forward") and hasattr(activation, "derivative")):
            raise ValueError(
                f"Activation must be a name or expose forward/derivative, got {activation!r}."
            )
        return activation

    key = activation.strip().lower()
    if key not in ACTIVATIONS:
        raise ValueError(
            f"Unknown activation '{activation}'. Known activations: {', '.join(sorted(ACTIVATIONS))}."
        )
    return ACTIVATIONS[key]()


def activation_name(activation) -> str:
    """Returns the registry name used to rebuild `activation` from a config."""
    name = getattr(activation, "name", None)
    if name is None or name not in ACTIVATIONS:
        raise ValueError(
            f"{type(activation).__name__} is not a registered activation and cannot be serialised."
        )
    return name

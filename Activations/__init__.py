from .Linear import Linear
from .ReLU import LeakyReLU, ReLU
from .registry import ACTIVATIONS, activation_name, get_activation
from .sigmoid import Sigmoid, Tanh
from .SiLU import GELU, SiLU
from .softmax import Softmax

__all__ = [
    "ReLU",
    "LeakyReLU",
    "SiLU",
    "GELU",
    "Sigmoid",
    "Tanh",
    "Softmax",
    "Linear",
    "ACTIVATIONS",
    "get_activation",
    "activation_name",
]

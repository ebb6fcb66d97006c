"""Core numerical building blocks for sigmanet."""

from . import activations, errors, types
from .layer import Layer
from .network import Network
from .weights import WeightMatrix

__all__ = ["activations", "errors", "types", "Layer", "Network", "WeightMatrix"]

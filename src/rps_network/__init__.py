"""Online-trained rock-paper-scissors predictor.

A two-layer tanh/softmax network over a sliding window of recent rounds,
updated one example at a time with hand-derived gradients.
"""

from __future__ import annotations

from .errors import ContractViolation, InvalidDimension, OutOfRange, RPSNetworkError
from .nn.model import ForwardSnapshot, Network
from .schemas import NetworkConfig

__version__ = "0.1.0"

__all__ = [
    "ContractViolation",
    "ForwardSnapshot",
    "InvalidDimension",
    "Network",
    "NetworkConfig",
    "OutOfRange",
    "RPSNetworkError",
    "__version__",
]

from __future__ import annotations


class RPSNetworkError(Exception):
    """Base class for host misuse of the network."""


class InvalidDimension(RPSNetworkError, ValueError):
    """An input vector or a constructor size does not match the network shape."""


class OutOfRange(RPSNetworkError, ValueError):
    """A label index, learning rate or input value is outside its valid range."""


class ContractViolation(RPSNetworkError, RuntimeError):
    """An operation was called in a state that does not allow it."""

from __future__ import annotations

import numpy as np

from .errors import OutOfRange


def softmax(logits: np.ndarray) -> np.ndarray:
    # shift by the max so exp never overflows
    z = np.asarray(logits, dtype=float)
    e = np.exp(z - np.max(z))
    return e / e.sum()


def tanh_grad(hidden: np.ndarray) -> np.ndarray:
    """Derivative of tanh expressed through its output: 1 - tanh(x)^2."""
    return 1.0 - hidden * hidden


def cross_entropy(probs: np.ndarray, label: int, eps: float = 1e-12) -> float:
    return float(-np.log(max(float(probs[label]), eps)))


def one_hot(index: int, size: int, dtype=np.float64) -> np.ndarray:
    if not 0 <= index < size:
        raise OutOfRange(f"index must be in [0, {size}), got {index}")
    v = np.zeros((size,), dtype=dtype)
    v[index] = 1.0
    return v

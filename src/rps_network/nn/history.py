from __future__ import annotations

from typing import Sequence

import numpy as np

from ..errors import InvalidDimension, OutOfRange


class HistoryBuffer:
    """Fixed-capacity FIFO of input vectors, stored flat oldest -> newest.

    The flat layout is what layer 1 consumes directly: slot ``k`` occupies
    ``[k*input_size, (k+1)*input_size)`` and slot ``history_size-1`` is the
    most recent push.
    """

    def __init__(self, input_size: int, history_size: int, dtype=np.float64):
        if input_size < 1 or history_size < 1:
            raise InvalidDimension(
                f"input_size and history_size must be >= 1, got ({input_size}, {history_size})"
            )
        self.input_size = int(input_size)
        self.history_size = int(history_size)
        self._buf = np.zeros((self.input_size * self.history_size,), dtype=dtype)

    def __len__(self) -> int:
        return self._buf.shape[0]

    def push(self, x: Sequence[float] | np.ndarray) -> None:
        v = np.asarray(x, dtype=self._buf.dtype)
        if v.ndim != 1 or v.shape[0] != self.input_size:
            raise InvalidDimension(f"input must have shape ({self.input_size},), got {v.shape}")
        if not np.isfinite(v).all():
            raise OutOfRange(f"input must be finite, got {v.tolist()}")

        n = self.input_size
        # overlapping slices: numpy buffers the copy
        self._buf[:-n] = self._buf[n:]
        self._buf[-n:] = v

    def flat(self) -> np.ndarray:
        return self._buf.copy()

    def entries(self) -> np.ndarray:
        """(history_size, input_size) copy, row 0 is the oldest entry."""
        return self._buf.reshape(self.history_size, self.input_size).copy()

    def reset(self) -> None:
        self._buf.fill(0.0)

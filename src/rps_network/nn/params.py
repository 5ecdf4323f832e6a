from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass
class Parameters:
    W1: np.ndarray  # (input_size*history_size, hidden_size)
    b1: np.ndarray  # (hidden_size,)
    W2: np.ndarray  # (hidden_size, output_size)
    b2: np.ndarray  # (output_size,)

    @property
    def in_features(self) -> int:
        return self.W1.shape[0]

    @property
    def hidden_size(self) -> int:
        return self.W1.shape[1]

    @property
    def output_size(self) -> int:
        return self.W2.shape[1]

    def check(self) -> None:
        assert self.W1.ndim == 2 and self.W2.ndim == 2, "weights must be 2-D"
        assert self.b1.shape == (self.hidden_size,), \
            f"b1 must be ({self.hidden_size},), got {self.b1.shape}"
        assert self.W2.shape[0] == self.hidden_size, \
            f"W2 must have {self.hidden_size} rows, got {self.W2.shape}"
        assert self.b2.shape == (self.output_size,), \
            f"b2 must be ({self.output_size},), got {self.b2.shape}"

    def copy(self) -> "Parameters":
        return Parameters(W1=self.W1.copy(), b1=self.b1.copy(), W2=self.W2.copy(), b2=self.b2.copy())


def init_parameters(
    *,
    in_features: int,
    hidden_size: int,
    output_size: int,
    rng: np.random.Generator,
    init: str = "uniform",
    scale: float = 0.1,
    dtype=np.float64,
) -> Parameters:
    """Draw independent small weights to break symmetry; biases start at zero."""

    if init == "uniform":
        def draw(shape: tuple[int, int]) -> np.ndarray:
            return rng.uniform(-scale, scale, size=shape)
    elif init == "normal":
        def draw(shape: tuple[int, int]) -> np.ndarray:
            return scale * rng.standard_normal(size=shape)
    else:
        raise ValueError(f"Unsupported init: {init!r} (expected 'uniform' or 'normal')")

    # W1 first, then W2: the draw order fixes what a given seed produces
    W1 = draw((in_features, hidden_size)).astype(dtype)
    W2 = draw((hidden_size, output_size)).astype(dtype)

    params = Parameters(
        W1=W1,
        b1=np.zeros((hidden_size,), dtype=dtype),
        W2=W2,
        b2=np.zeros((output_size,), dtype=dtype),
    )
    params.check()
    return params

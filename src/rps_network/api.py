"""Procedural surface for host loops that prefer free functions."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .nn.model import Network


def construct(
    input_size: int,
    history_size: int,
    hidden_size: int,
    output_size: int,
    seed: int | None = None,
    *,
    rng: np.random.Generator | None = None,
    init: str = "uniform",
    init_scale: float | None = None,
) -> Network:
    return Network(
        input_size,
        history_size,
        hidden_size,
        output_size,
        seed=seed,
        rng=rng,
        init=init,
        init_scale=init_scale,
    )


def forward(net: Network, x: Sequence[float]) -> None:
    net.forward(x)


def probs(net: Network) -> list[float]:
    return [float(p) for p in net.probs()]


def backward(net: Network, label: int, learning_rate: float) -> None:
    net.backward(label, learning_rate)

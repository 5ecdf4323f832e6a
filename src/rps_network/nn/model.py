from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ..errors import ContractViolation, OutOfRange
from ..math_utils import softmax, tanh_grad
from ..schemas import NetworkConfig
from .history import HistoryBuffer
from .params import Parameters, init_parameters


def _frozen(a: np.ndarray) -> np.ndarray:
    out = np.array(a, copy=True)
    out.setflags(write=False)
    return out


@dataclass(frozen=True)
class ForwardSnapshot:
    """Everything one forward call produced, as read-only arrays.

    The backward pass reads these instead of the live network state, so a
    snapshot stays valid however the parameters change after it was taken.
    """

    history: np.ndarray  # (in_features,) flattened window that was fed in
    hidden: np.ndarray  # (hidden_size,) tanh activations
    logits: np.ndarray  # (output_size,) pre-softmax scores
    probs: np.ndarray  # (output_size,)


@dataclass(frozen=True)
class Gradients:
    W1: np.ndarray
    b1: np.ndarray
    W2: np.ndarray
    b2: np.ndarray


def forward_pass(history: np.ndarray, params: Parameters) -> ForwardSnapshot:
    """history -> linear -> tanh -> linear -> softmax."""
    pre = history @ params.W1 + params.b1
    hidden = np.tanh(pre)
    logits = hidden @ params.W2 + params.b2
    probs = softmax(logits)
    return ForwardSnapshot(
        history=_frozen(history),
        hidden=_frozen(hidden),
        logits=_frozen(logits),
        probs=_frozen(probs),
    )


def check_label(label: int, output_size: int) -> int:
    if isinstance(label, (bool, np.bool_)) or not isinstance(label, numbers.Integral):
        raise OutOfRange(f"label must be an integer in [0, {output_size}), got {label!r}")
    if not 0 <= label < output_size:
        raise OutOfRange(f"label must be in [0, {output_size}), got {label}")
    return int(label)


def check_learning_rate(learning_rate: float) -> float:
    if isinstance(learning_rate, (bool, np.bool_)):
        raise OutOfRange(f"learning_rate must be a finite positive number, got {learning_rate!r}")
    try:
        lr = float(learning_rate)
    except (TypeError, ValueError):
        raise OutOfRange(f"learning_rate must be a finite positive number, got {learning_rate!r}") from None
    if not (math.isfinite(lr) and lr > 0.0):
        raise OutOfRange(f"learning_rate must be a finite positive number, got {learning_rate!r}")
    return lr


def compute_gradients(snapshot: ForwardSnapshot, params: Parameters, label: int) -> Gradients:
    """Closed-form gradients of cross-entropy(softmax(logits), onehot(label)).

    softmax + cross-entropy collapses to ``probs - onehot(label)`` at the
    logits; tanh backpropagates through ``1 - hidden^2``.
    """

    dprobs = np.array(snapshot.probs, copy=True)
    dprobs[label] -= 1.0

    # uses W2 before it is updated
    dhidden = (params.W2 @ dprobs) * tanh_grad(snapshot.hidden)

    return Gradients(
        W1=np.outer(snapshot.history, dhidden),
        b1=dhidden,
        W2=np.outer(snapshot.hidden, dprobs),
        b2=dprobs,
    )


def apply_gradients(params: Parameters, grads: Gradients, learning_rate: float) -> None:
    """Plain SGD step, in place."""
    params.W2 -= learning_rate * grads.W2
    params.W1 -= learning_rate * grads.W1
    params.b1 -= learning_rate * grads.b1
    params.b2 -= learning_rate * grads.b2


def backward_pass(
    snapshot: ForwardSnapshot,
    params: Parameters,
    label: int,
    learning_rate: float,
) -> Gradients:
    label = check_label(label, params.output_size)
    lr = check_learning_rate(learning_rate)
    grads = compute_gradients(snapshot, params, label)
    apply_gradients(params, grads, lr)
    return grads


class Network:
    """Two-layer classifier over a sliding window of input vectors.

    Usage from a host loop::

        net = Network(input_size=6, history_size=5, hidden_size=40, output_size=3, seed=0)
        net.forward(x)          # push x, recompute probs
        p = net.probs()
        net.backward(label, 0.1)  # SGD step on the last forward

    ``backward`` always trains on the snapshot of the most recent
    ``forward``; calling it before any ``forward`` raises ContractViolation.
    """

    def __init__(
        self,
        input_size: int,
        history_size: int,
        hidden_size: int,
        output_size: int,
        *,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
        init: str = "uniform",
        init_scale: float | None = None,
    ):
        cfg = NetworkConfig(
            input_size=input_size,
            history_size=history_size,
            hidden_size=hidden_size,
            output_size=output_size,
            init=init,
            init_scale=init_scale,
            seed=seed,
        )
        cfg.validate()
        self._cfg = cfg

        if rng is None:
            rng = np.random.default_rng(seed)

        self._history = HistoryBuffer(cfg.input_size, cfg.history_size)
        self._params = init_parameters(
            in_features=cfg.in_features,
            hidden_size=cfg.hidden_size,
            output_size=cfg.output_size,
            rng=rng,
            init=cfg.init,
            scale=cfg.resolved_init_scale,
        )
        self._probs = np.full((cfg.output_size,), 1.0 / cfg.output_size)
        self._snapshot: ForwardSnapshot | None = None

    @classmethod
    def from_config(cls, cfg: NetworkConfig, *, rng: np.random.Generator | None = None) -> "Network":
        return cls(
            cfg.input_size,
            cfg.history_size,
            cfg.hidden_size,
            cfg.output_size,
            seed=cfg.seed,
            rng=rng,
            init=cfg.init,
            init_scale=cfg.init_scale,
        )

    @property
    def config(self) -> NetworkConfig:
        return self._cfg

    @property
    def input_size(self) -> int:
        return self._cfg.input_size

    @property
    def history_size(self) -> int:
        return self._cfg.history_size

    @property
    def hidden_size(self) -> int:
        return self._cfg.hidden_size

    @property
    def output_size(self) -> int:
        return self._cfg.output_size

    @property
    def params(self) -> Parameters:
        return self._params

    @property
    def history(self) -> HistoryBuffer:
        return self._history

    @property
    def snapshot(self) -> ForwardSnapshot | None:
        return self._snapshot

    @property
    def has_forward_cache(self) -> bool:
        return self._snapshot is not None

    def forward(self, x: Sequence[float] | np.ndarray) -> None:
        self._history.push(x)
        self._snapshot = forward_pass(self._history.flat(), self._params)
        self._probs = np.array(self._snapshot.probs, copy=True)

    def probs(self) -> np.ndarray:
        return self._probs.copy()

    def predict(self) -> int:
        return int(np.argmax(self._probs))

    def backward(self, label: int, learning_rate: float) -> None:
        label = check_label(label, self.output_size)
        if self._snapshot is None:
            raise ContractViolation("backward() called before any forward()")
        backward_pass(self._snapshot, self._params, label, learning_rate)

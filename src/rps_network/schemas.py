from __future__ import annotations

import numbers
from dataclasses import asdict, dataclass
from typing import Any

from .errors import InvalidDimension

INIT_SCHEMES = ("uniform", "normal")


@dataclass(frozen=True)
class NetworkConfig:
    input_size: int
    history_size: int
    hidden_size: int
    output_size: int

    # "uniform": U(-scale, scale); "normal": scale * N(0, 1)
    init: str = "uniform"
    init_scale: float | None = None

    seed: int | None = None

    @property
    def in_features(self) -> int:
        return self.input_size * self.history_size

    @property
    def resolved_init_scale(self) -> float:
        if self.init_scale is not None:
            return float(self.init_scale)
        return 0.1 if self.init == "uniform" else 1.0

    def validate(self) -> None:
        for name in ("input_size", "history_size", "hidden_size", "output_size"):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, numbers.Integral) or v < 1:
                raise InvalidDimension(f"{name} must be a positive integer, got {v!r}")
        if self.init not in INIT_SCHEMES:
            raise ValueError(f"Unsupported init: {self.init!r} (expected 'uniform' or 'normal')")
        if self.init_scale is not None and not self.init_scale > 0:
            raise ValueError(f"init_scale must be > 0, got {self.init_scale!r}")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RoundRecord:
    index: int
    player: int
    computer: int
    outcome: str
    probs: list[float]  # distribution the computer chose from

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MatchSummary:
    opponent: str
    rounds: int
    player_wins: int
    computer_wins: int
    draws: int
    mean_loss: float
    final_probs: list[float]

    @property
    def computer_win_rate(self) -> float:
        return self.computer_wins / self.rounds if self.rounds else 0.0

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["computer_win_rate"] = self.computer_win_rate
        return d

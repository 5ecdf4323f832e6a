"""Scripted human stand-ins for offline matches against the network."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Sequence

import numpy as np

from .game import N_CHOICES, Choice, wins_over


def _rng(seed: int | np.random.SeedSequence | None) -> np.random.Generator:
    return np.random.default_rng(seed)


class Opponent(ABC):
    name: str = "?"

    @abstractmethod
    def choose(self, round_num: int, own_history: list[Choice], computer_history: list[Choice]) -> Choice:
        ...

    def __repr__(self) -> str:
        return f"<{self.name}>"


class Constant(Opponent):
    name = "constant"

    def __init__(self, choice: Choice = Choice.ROCK):
        self.choice = Choice(choice)

    def choose(self, round_num, own_history, computer_history):
        return self.choice


class Cycle(Opponent):
    """Walks through ``sequence`` forever (rock, paper, scissors by default)."""

    name = "cycle"

    def __init__(self, sequence: Sequence[Choice] = (Choice.ROCK, Choice.PAPER, Choice.SCISSORS)):
        if not sequence:
            raise ValueError("cycle sequence must not be empty")
        self.sequence = tuple(Choice(c) for c in sequence)

    def choose(self, round_num, own_history, computer_history):
        return self.sequence[round_num % len(self.sequence)]


class Uniform(Opponent):
    name = "random"

    def __init__(self, rng: np.random.Generator):
        self.rng = rng

    def choose(self, round_num, own_history, computer_history):
        return Choice(int(self.rng.integers(N_CHOICES)))


class Biased(Opponent):
    name = "biased"

    def __init__(self, rng: np.random.Generator, weights: Sequence[float] = (0.6, 0.2, 0.2)):
        w = np.asarray(weights, dtype=np.float64)
        if w.shape != (N_CHOICES,) or np.any(w < 0) or w.sum() <= 0:
            raise ValueError(f"weights must be {N_CHOICES} non-negative numbers with a positive sum")
        self.rng = rng
        self.p = w / w.sum()

    def choose(self, round_num, own_history, computer_history):
        return Choice(int(self.rng.choice(N_CHOICES, p=self.p)))


class CopyLast(Opponent):
    """Repeats whatever the computer played last round."""

    name = "copy"

    def choose(self, round_num, own_history, computer_history):
        if not computer_history:
            return Choice.ROCK
        return computer_history[-1]


class BeatLast(Opponent):
    """Plays the move that beats the computer's previous move."""

    name = "beat-last"

    def choose(self, round_num, own_history, computer_history):
        if not computer_history:
            return Choice.PAPER
        return wins_over(computer_history[-1])


OPPONENTS: dict[str, Callable[..., Opponent]] = {
    "constant": lambda *, rng, choice: Constant(choice),
    "cycle": lambda *, rng, choice: Cycle(),
    "random": lambda *, rng, choice: Uniform(rng),
    "biased": lambda *, rng, choice: Biased(rng),
    "copy": lambda *, rng, choice: CopyLast(),
    "beat-last": lambda *, rng, choice: BeatLast(),
}


def make_opponent(
    name: str,
    *,
    seed: int | np.random.SeedSequence | None = None,
    choice: Choice = Choice.ROCK,
) -> Opponent:
    try:
        factory = OPPONENTS[name]
    except KeyError:
        raise ValueError(f"Unsupported opponent: {name!r} (expected one of {sorted(OPPONENTS)})") from None
    return factory(rng=_rng(seed), choice=choice)

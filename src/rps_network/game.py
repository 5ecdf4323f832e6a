from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum

import numpy as np

from .math_utils import one_hot
from .nn.model import Network, check_learning_rate
from .schemas import RoundRecord

N_CHOICES = 3
# one-hot player move followed by one-hot computer move
ROUND_INPUT_SIZE = 2 * N_CHOICES

STRATEGIES = ("argmax", "sample")


class Choice(IntEnum):
    ROCK = 0
    PAPER = 1
    SCISSORS = 2

    @classmethod
    def parse(cls, text: str) -> "Choice":
        t = text.strip().lower()
        for c in cls:
            if t in (c.name.lower(), c.name[0].lower(), str(int(c))):
                return c
        raise ValueError(f"Unknown move: {text!r} (expected r/p/s, rock/paper/scissors or 0/1/2)")

    @property
    def emoji(self) -> str:
        return _EMOJI[self]


_EMOJI = {Choice.ROCK: "👊", Choice.PAPER: "✋", Choice.SCISSORS: "✌️"}


class Outcome(str, Enum):
    PLAYER = "Player"
    COMPUTER = "Computer"
    DRAW = "Draw"


def wins_over(choice: Choice) -> Choice:
    """The move that beats ``choice``."""
    return Choice((int(choice) + 1) % N_CHOICES)


def outcome_of(player: Choice, computer: Choice) -> Outcome:
    if wins_over(player) == computer:
        return Outcome.COMPUTER
    if wins_over(computer) == player:
        return Outcome.PLAYER
    return Outcome.DRAW


def encode_round(player: Choice, computer: Choice) -> np.ndarray:
    return np.concatenate([one_hot(int(player), N_CHOICES), one_hot(int(computer), N_CHOICES)])


def pick_move(
    probs: np.ndarray,
    *,
    strategy: str = "argmax",
    rng: np.random.Generator | None = None,
) -> Choice:
    """Turn a distribution over moves into a move.

    argmax ties resolve to the lowest index; "sample" draws from ``probs``.
    """

    p = np.asarray(probs, dtype=np.float64)
    if strategy == "argmax":
        return Choice(int(np.argmax(p)))
    if strategy == "sample":
        if rng is None:
            raise ValueError("strategy='sample' requires an rng")
        return Choice(int(rng.choice(N_CHOICES, p=p / p.sum())))
    raise ValueError(f"Unsupported strategy: {strategy!r} (expected 'argmax' or 'sample')")


@dataclass
class NetworkPlayer:
    """Computer side of the game, driven by a Network.

    Each round the computer commits to a move from the probs computed after
    the previous round, then learns that the right answer would have been
    the move beating the player's, and finally feeds the round into the
    history window.
    """

    network: Network
    learning_rate: float = 0.1
    strategy: str = "argmax"
    rng: np.random.Generator | None = None
    rounds_played: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.learning_rate = check_learning_rate(self.learning_rate)
        if self.strategy not in STRATEGIES:
            raise ValueError(f"Unsupported strategy: {self.strategy!r} (expected 'argmax' or 'sample')")
        if self.strategy == "sample" and self.rng is None:
            self.rng = np.random.default_rng()
        if self.network.input_size != ROUND_INPUT_SIZE or self.network.output_size != N_CHOICES:
            raise ValueError(
                f"network must map {ROUND_INPUT_SIZE} inputs to {N_CHOICES} outputs, "
                f"got {self.network.input_size} -> {self.network.output_size}"
            )

    def choose(self) -> Choice:
        return pick_move(self.network.probs(), strategy=self.strategy, rng=self.rng)

    def observe(self, player: Choice, computer: Choice) -> None:
        # the first round has nothing to learn from yet
        if self.network.has_forward_cache:
            self.network.backward(int(wins_over(player)), self.learning_rate)
        self.network.forward(encode_round(player, computer))

    def play(self, player: Choice) -> RoundRecord:
        probs = self.network.probs()
        computer = self.choose()
        self.observe(player, computer)
        rec = RoundRecord(
            index=self.rounds_played,
            player=int(player),
            computer=int(computer),
            outcome=outcome_of(player, computer).value,
            probs=[float(v) for v in probs],
        )
        self.rounds_played += 1
        return rec


def new_network_player(
    *,
    history_size: int = 5,
    hidden_size: int = 40,
    learning_rate: float = 0.1,
    strategy: str = "argmax",
    init: str = "uniform",
    init_scale: float | None = None,
    seed: int | None = None,
    rng: np.random.Generator | None = None,
) -> NetworkPlayer:
    """Build a player with a freshly initialized network.

    ``rng`` drives sampling only; weights come from ``seed``.
    """

    net = Network(
        ROUND_INPUT_SIZE,
        history_size,
        hidden_size,
        N_CHOICES,
        seed=seed,
        init=init,
        init_scale=init_scale,
    )
    return NetworkPlayer(network=net, learning_rate=learning_rate, strategy=strategy, rng=rng)

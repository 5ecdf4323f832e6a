from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path

import numpy as np
import pandas as pd
from tqdm import tqdm

from ..dataset import make_round_row, write_jsonl
from ..game import N_CHOICES, ROUND_INPUT_SIZE, Choice, NetworkPlayer, Outcome, wins_over
from ..math_utils import cross_entropy
from ..opponents import make_opponent
from ..schemas import MatchSummary, RoundRecord
from .model import Network
from .plots import write_metric


@dataclass(frozen=True)
class TrainConfig:
    out_dir: str | None = None

    opponent: str = "cycle"
    opponent_choice: int = int(Choice.ROCK)  # only used by the "constant" opponent
    rounds: int = 500

    # Defaults of the browser game the network was built for
    history_size: int = 5
    hidden_size: int = 40
    learning_rate: float = 0.1

    init: str = "uniform"
    init_scale: float | None = None
    strategy: str = "argmax"

    seed: int = 0

    # Rolling window for outcome-rate metrics
    window: int = 50
    progress: bool = True


def _window_metrics(records: list[RoundRecord], losses: list[float]) -> dict[str, float]:
    n = len(records)
    outcomes = [r.outcome for r in records]
    return {
        "computer_win_rate": outcomes.count(Outcome.COMPUTER.value) / n,
        "player_win_rate": outcomes.count(Outcome.PLAYER.value) / n,
        "draw_rate": outcomes.count(Outcome.DRAW.value) / n,
        "loss": float(np.mean(losses)),
    }


def train(cfg: TrainConfig) -> MatchSummary:
    """Play ``cfg.rounds`` rounds against a scripted opponent, training online.

    The network, the move sampler and the opponent each get an independent
    stream spawned from ``cfg.seed``, so a run is fully reproducible.
    """

    if cfg.rounds < 1:
        raise ValueError(f"rounds must be >= 1, got {cfg.rounds}")
    if cfg.window < 1:
        raise ValueError(f"window must be >= 1, got {cfg.window}")

    net_ss, pick_ss, opp_ss = np.random.SeedSequence(cfg.seed).spawn(3)

    net = Network(
        ROUND_INPUT_SIZE,
        cfg.history_size,
        cfg.hidden_size,
        N_CHOICES,
        rng=np.random.default_rng(net_ss),
        init=cfg.init,
        init_scale=cfg.init_scale,
    )
    player = NetworkPlayer(
        network=net,
        learning_rate=cfg.learning_rate,
        strategy=cfg.strategy,
        rng=np.random.default_rng(pick_ss),
    )
    opponent = make_opponent(cfg.opponent, seed=opp_ss, choice=Choice(cfg.opponent_choice))

    out_dir = Path(cfg.out_dir) if cfg.out_dir is not None else None
    metrics_path: Path | None = None
    if out_dir is not None:
        out_dir.mkdir(parents=True, exist_ok=True)
        (out_dir / "config.json").write_text(json.dumps(asdict(cfg), indent=2), encoding="utf-8")
        metrics_path = out_dir / "metrics.jsonl"
        if metrics_path.exists():
            metrics_path.unlink()

    own_history: list[Choice] = []
    computer_history: list[Choice] = []
    records: list[RoundRecord] = []
    losses: list[float] = []

    for i in tqdm(range(cfg.rounds), desc="Playing", disable=not cfg.progress):
        move = opponent.choose(i, own_history, computer_history)
        rec = player.play(move)
        # loss of the prediction the computer acted on, before this round's update
        losses.append(cross_entropy(np.asarray(rec.probs), int(wins_over(move))))

        records.append(rec)
        own_history.append(move)
        computer_history.append(Choice(rec.computer))

        if metrics_path is not None and ((i + 1) % cfg.window == 0 or i + 1 == cfg.rounds):
            lo = max(0, len(records) - cfg.window)
            for name, value in _window_metrics(records[lo:], losses[lo:]).items():
                write_metric(path=metrics_path, round=i + 1, name=name, value=value)

    outcomes = [r.outcome for r in records]
    summary = MatchSummary(
        opponent=cfg.opponent,
        rounds=len(records),
        player_wins=outcomes.count(Outcome.PLAYER.value),
        computer_wins=outcomes.count(Outcome.COMPUTER.value),
        draws=outcomes.count(Outcome.DRAW.value),
        mean_loss=float(np.mean(losses)),
        final_probs=[float(p) for p in net.probs()],
    )

    if out_dir is not None:
        write_jsonl(out_dir / "rounds.jsonl", (make_round_row(r) for r in records))

        df = pd.DataFrame(
            {
                "round": [r.index for r in records],
                "player": [Choice(r.player).name.lower() for r in records],
                "computer": [Choice(r.computer).name.lower() for r in records],
                "outcome": outcomes,
                "p_rock": [r.probs[Choice.ROCK] for r in records],
                "p_paper": [r.probs[Choice.PAPER] for r in records],
                "p_scissors": [r.probs[Choice.SCISSORS] for r in records],
                "loss": losses,
            }
        )
        df.to_csv(out_dir / "rounds.csv", index=False)
        pd.DataFrame([summary.to_dict()]).to_csv(out_dir / "summary.csv", index=False)

    return summary

from __future__ import annotations

from pathlib import Path

import numpy as np
import typer

from .dataset import make_round_row, write_jsonl
from .game import STRATEGIES, Choice, new_network_player
from .opponents import OPPONENTS
from .schemas import INIT_SCHEMES, RoundRecord

app = typer.Typer(no_args_is_help=True)


@app.callback()
def _root() -> None:
    """Rock-paper-scissors against an online-trained neural network."""
    return


def _check_choice(value: str, allowed: tuple[str, ...] | list[str], what: str) -> str:
    if value not in allowed:
        raise typer.BadParameter(f"Unsupported {what}: {value!r} (expected one of {list(allowed)})")
    return value


def _format_probs(probs: list[float]) -> str:
    return "  ".join(f"{c.emoji} {probs[c]:.2f}" for c in Choice)


@app.command("play")
def play(
    rounds: int = typer.Option(0, help="Stop after this many rounds (0 = until you quit)"),
    history_size: int = typer.Option(5, help="Rounds remembered by the network"),
    hidden_size: int = typer.Option(40, help="Hidden units"),
    lr: float = typer.Option(0.1, help="Learning rate of each online update"),
    strategy: str = typer.Option("argmax", help="How the computer picks from its probs: argmax or sample"),
    init: str = typer.Option("uniform", help="Weight init: uniform or normal"),
    seed: int | None = typer.Option(None, help="Random seed (weights and sampling)"),
    show_probs: bool = typer.Option(False, help="Print the computer's distribution each round"),
    out: Path | None = typer.Option(None, help="Optional JSONL export of the played rounds"),
) -> None:
    """Play interactively: type r/p/s each round, q to quit."""

    _check_choice(strategy, STRATEGIES, "strategy")
    _check_choice(init, INIT_SCHEMES, "init")

    ss = np.random.SeedSequence(seed)
    net_ss, pick_ss = ss.spawn(2)
    try:
        player = new_network_player(
            history_size=history_size,
            hidden_size=hidden_size,
            learning_rate=lr,
            strategy=strategy,
            init=init,
            seed=int(net_ss.generate_state(1)[0]),
            rng=np.random.default_rng(pick_ss),
        )
    except ValueError as e:
        raise typer.BadParameter(str(e))

    records: list[RoundRecord] = []
    score = {"Player": 0, "Computer": 0, "Draw": 0}
    while rounds <= 0 or len(records) < rounds:
        text = typer.prompt("Your move [r/p/s, q to quit]")
        if text.strip().lower() in ("q", "quit", "exit"):
            break
        try:
            move = Choice.parse(text)
        except ValueError as e:
            typer.echo(str(e))
            continue

        rec = player.play(move)
        records.append(rec)
        score[rec.outcome] += 1

        if show_probs:
            typer.echo(f"  probs: {_format_probs(rec.probs)}")
        typer.echo(f"You {move.emoji}  Computer {Choice(rec.computer).emoji}  -> {rec.outcome}")

    typer.echo(f"Score: you {score['Player']} / computer {score['Computer']} / draws {score['Draw']}")

    if out is not None and records:
        write_jsonl(out, (make_round_row(r) for r in records))
        typer.echo(f"Wrote {len(records)} rows -> {out}")


@app.command("simulate")
def simulate(
    opponent: str = typer.Option("cycle", help=f"Scripted opponent: {', '.join(OPPONENTS)}"),
    opponent_move: str = typer.Option("rock", help="Move of the 'constant' opponent"),
    rounds: int = typer.Option(500, help="Rounds to play"),
    history_size: int = typer.Option(5, help="Rounds remembered by the network"),
    hidden_size: int = typer.Option(40, help="Hidden units"),
    lr: float = typer.Option(0.1, help="Learning rate of each online update"),
    strategy: str = typer.Option("argmax", help="argmax or sample"),
    init: str = typer.Option("uniform", help="Weight init: uniform or normal"),
    init_scale: float | None = typer.Option(None, help="Init scale (default 0.1 uniform / 1.0 normal)"),
    seed: int = typer.Option(0, help="Random seed"),
    window: int = typer.Option(50, help="Rolling window for rate metrics"),
    out_dir: Path | None = typer.Option(None, help="Output dir (config/rounds/metrics/summary)"),
    plot: bool = typer.Option(False, help="Render metric plots into out_dir/plots (needs matplotlib)"),
    progress: bool = typer.Option(True, help="Show a progress bar"),
) -> None:
    """Train the network online against a scripted opponent and report the score."""

    from .nn.train import TrainConfig, train

    _check_choice(opponent, list(OPPONENTS), "opponent")
    _check_choice(strategy, STRATEGIES, "strategy")
    _check_choice(init, INIT_SCHEMES, "init")
    try:
        move = Choice.parse(opponent_move)
    except ValueError as e:
        raise typer.BadParameter(str(e))
    if plot and out_dir is None:
        raise typer.BadParameter("--plot needs --out-dir")

    cfg = TrainConfig(
        out_dir=(None if out_dir is None else str(out_dir)),
        opponent=opponent,
        opponent_choice=int(move),
        rounds=int(rounds),
        history_size=int(history_size),
        hidden_size=int(hidden_size),
        learning_rate=float(lr),
        init=init,
        init_scale=init_scale,
        strategy=strategy,
        seed=int(seed),
        window=int(window),
        progress=bool(progress),
    )
    try:
        summary = train(cfg)
    except ValueError as e:
        raise typer.BadParameter(str(e))

    typer.echo(
        f"{summary.opponent}: computer {summary.computer_wins} / player {summary.player_wins} / "
        f"draws {summary.draws} over {summary.rounds} rounds "
        f"(computer win rate {summary.computer_win_rate:.3f}, mean loss {summary.mean_loss:.4f})"
    )
    typer.echo(f"Final probs: {_format_probs(summary.final_probs)}")

    if out_dir is not None:
        typer.echo(f"Wrote run -> {out_dir}")
        if plot:
            from .nn.plots import plot_metrics

            saved = plot_metrics(out_dir / "metrics.jsonl", out_dir)
            typer.echo(f"Wrote {len(saved)} plots -> {out_dir / 'plots'}")


@app.command("plot-metrics")
def plot_metrics_cmd(
    metrics: Path = typer.Option(..., help="metrics.jsonl written by simulate"),
    out_dir: Path = typer.Option(..., help="Directory to write plots/ into"),
) -> None:
    """Render line charts from an existing metrics.jsonl."""

    from .nn.plots import plot_metrics

    if not metrics.exists():
        raise typer.BadParameter(f"metrics file does not exist: {metrics}")
    saved = plot_metrics(metrics, out_dir)
    typer.echo(f"Wrote {len(saved)} plots -> {out_dir / 'plots'}")


@app.command("version")
def version() -> None:
    from . import __version__

    typer.echo(__version__)


if __name__ == "__main__":
    app()

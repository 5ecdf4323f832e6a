from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class MetricRow:
    round: int
    name: str
    value: float


def read_metrics(path: str | Path) -> list[MetricRow]:
    rows: list[MetricRow] = []
    p = Path(path)
    if not p.exists():
        return rows
    with p.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            d = json.loads(line)
            rows.append(MetricRow(round=int(d["round"]), name=str(d["name"]), value=float(d["value"])))
    return rows


def write_metric(*, path: Path, round: int, name: str, value: float) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    row = {"round": int(round), "name": name, "value": float(value)}
    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(row, ensure_ascii=False) + "\n")


def plot_metrics(metrics_path: str | Path, out_dir: str | Path, *, subdir: str = "plots") -> list[Path]:
    """Render one line chart per metric name from metrics.jsonl.

    Outputs PNGs into out_dir/subdir; the win/loss/draw rates also get a
    combined chart.
    """

    # Import lazily to keep the core usable without plotting deps.
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    rows = read_metrics(metrics_path)
    if not rows:
        return []

    out = Path(out_dir) / subdir
    out.mkdir(parents=True, exist_ok=True)

    def _series(name: str) -> tuple[list[int], list[float]]:
        pts = sorted((r.round, r.value) for r in rows if r.name == name)
        return [p[0] for p in pts], [p[1] for p in pts]

    saved: list[Path] = []

    for name in sorted({r.name for r in rows}):
        xs, ys = _series(name)
        plt.figure()
        plt.plot(xs, ys, linewidth=2)
        plt.title(name)
        plt.xlabel("round")
        plt.ylabel(name)
        plt.grid(True, alpha=0.25)
        plt.tight_layout()
        p = out / f"{name}.png"
        plt.savefig(p, dpi=160)
        plt.close()
        saved.append(p)

    rate_names = [n for n in ("computer_win_rate", "player_win_rate", "draw_rate") if _series(n)[0]]
    if rate_names:
        plt.figure()
        for name in rate_names:
            xs, ys = _series(name)
            plt.plot(xs, ys, label=name, linewidth=2)
        plt.title("rolling outcome rates")
        plt.xlabel("round")
        plt.ylabel("rate")
        plt.ylim(0.0, 1.0)
        plt.legend()
        plt.grid(True, alpha=0.25)
        plt.tight_layout()
        p = out / "outcome_rates.png"
        plt.savefig(p, dpi=160)
        plt.close()
        saved.append(p)

    return saved

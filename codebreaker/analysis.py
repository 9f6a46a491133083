"""Analysis, reporting and plotting tools for the codebreaker solver."""

from typing import Dict, List, Optional, Sequence, Union

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure

from .benchmark import (
    BenchmarkConfig,
    StrategyResult,
    generate_random_targets,
    run_benchmark_blocking,
    simulate_game,
    summarize_steps,
)
from .engine import Codebreaker, code_to_string
from .knowledge import KnowledgeState
from .solver import CodebreakerSolver, Round, Strategy
from .utils import Code


def format_solver_knowledge(knowledge: KnowledgeState, *, show_header: bool = True) -> str:
    """
    Format per-digit knowledge as a human-readable table.

    Args:
        knowledge: Knowledge state to display.
        show_header: If True, include a column header and separator.

    Returns:
        One line per digit with its status and count bounds. Unknown counts
        are shown as '?'.
    """
    lines: List[str] = []
    if show_header:
        lines.append("digit  status      count  min  max")
        lines.append("-" * 34)

    for entry in knowledge.digits:
        if entry.digit in knowledge.confirmed_digits:
            status = "confirmed"
        elif entry.digit in knowledge.eliminated_digits:
            status = "eliminated"
        else:
            status = "unknown"
        count = "?" if entry.confirmed_count is None else str(entry.confirmed_count)
        lines.append(
            f"{entry.digit:>5}  {status:<10}  {count:>5}  {entry.min_count:>3}  {entry.max_count:>3}"
        )

    if knowledge.composition_known:
        lines.append("composition known")
    return "\n".join(lines)


def format_round(round_: Round) -> str:
    """Summarize one round on a single line."""
    feedback = "-" if round_.feedback is None else str(round_.feedback)
    text = f"#{round_.round_index + 1:<3} {code_to_string(round_.guess)}  feedback {feedback}"
    if round_.is_correct:
        text += "  exact match"
    if round_.analysis is not None:
        analysis = round_.analysis
        text += f"  [{analysis.strategy_name}, {analysis.candidates_before} candidates]"
    return text


def format_benchmark_results(results: Sequence[StrategyResult]) -> str:
    """Render benchmark results as a fixed-width table."""
    header = f"{'strategy':<24}{'games':>7}{'mean':>8}{'median':>8}{'std':>7}{'min':>5}{'max':>5}{'capped':>8}{'time':>9}"
    lines = [header, "-" * len(header)]
    for r in results:
        lines.append(
            f"{r.display_name:<24}{r.total_games:>7}{r.mean_steps:>8.3f}{r.median:>8.1f}"
            f"{r.std_dev:>7.3f}{r.min_steps:>5}{r.max_steps:>5}{r.capped_games:>8}"
            f"{r.time_seconds:>8.1f}s"
        )
    return "\n".join(lines)


def run_solver_single_test(
    target: Optional[Union[Code, str]] = None,
    strategy: Union[Strategy, str] = Strategy.HYBRID,
    *,
    max_steps: int = 20,
    show_rounds: bool = False,
) -> Dict[str, object]:
    """
    Run one end-to-end game with CodebreakerSolver on a fresh Codebreaker game.

    Args:
        target: Hidden code; random when omitted.
        strategy: Strategy the solver plays.
        max_steps: Step cap of the game.
        show_rounds: If True, print every round and the final knowledge state.

    Returns:
        The solver's terminal payload augmented with "status" (-1 not solved, 1 solved).
    """
    game = Codebreaker(target, max_steps=max_steps)
    solver = CodebreakerSolver(game, strategy, record_analysis=show_rounds)

    status, payload = solver.solve()

    if show_rounds:
        print(f"Strategy: {Strategy(strategy).display_name}")
        print(f"Target: {code_to_string(game.target)}")
        for round_ in solver.history:
            print(format_round(round_))
            if round_.analysis is not None:
                print(f"     {round_.analysis.guess_rationale}")
        last = solver.history[-1].analysis if solver.history else None
        if last is not None:
            print()
            print(format_solver_knowledge(last.knowledge))
        print()
        print(f"Finished with status {status} after {payload['steps']} steps ({payload['reason']}).")

    out = dict(payload)
    out["status"] = status
    return out


def run_solver_many_tests(
    runs: int,
    strategy: Union[Strategy, str] = Strategy.HYBRID,
    *,
    seed: Optional[int] = None,
    max_steps: int = 20,
) -> Dict[str, float]:
    """
    Run many independent games against distinct random targets.

    Args:
        runs: Number of games.
        strategy: Strategy the solver plays.
        seed: Seed for target generation.
        max_steps: Step cap of each game.

    Returns:
        Dict with avg_steps, median_steps, std_steps, min_steps, max_steps,
        win_rate and capped_rate.

    Raises:
        ValueError: If runs is not positive.
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    steps: List[int] = []
    wins = 0
    for target in generate_random_targets(runs, seed):
        result = simulate_game(strategy, target, max_steps=max_steps)
        steps.append(result.steps)
        if result.won:
            wins += 1

    stats = summarize_steps(steps)
    return {
        "avg_steps": stats["mean"],
        "median_steps": stats["median"],
        "std_steps": stats["std_dev"],
        "min_steps": stats["min"],
        "max_steps": stats["max"],
        "win_rate": wins / runs,
        "capped_rate": (runs - wins) / runs,
    }


def plot_benchmark_results(
    results: Sequence[StrategyResult], *, show: bool = True
) -> Figure:
    """
    Plot step distributions and mean/max steps for each benchmarked strategy.

    Args:
        results: Results as returned by the benchmark runners.
        show: If True, call plt.show() before returning.

    Returns:
        The matplotlib figure with two axes.

    Raises:
        ValueError: If results is empty.
    """
    if not results:
        raise ValueError("Nothing to plot.")

    fig, (ax_dist, ax_summary) = plt.subplots(1, 2, figsize=(12, 4.5))

    # 1) Step-count distribution per strategy
    all_steps = sorted({s for r in results for s in r.distribution})
    x = np.arange(len(all_steps))
    bar_w = 0.8 / len(results)
    for i, r in enumerate(results):
        freqs = [r.distribution.get(s, 0) / r.total_games for s in all_steps]
        ax_dist.bar(x + (i - (len(results) - 1) / 2) * bar_w, freqs, width=bar_w, label=r.display_name)
    ax_dist.set_xticks(x)
    ax_dist.set_xticklabels([str(s) for s in all_steps])
    ax_dist.set_xlabel("Steps to solve")
    ax_dist.set_ylabel("Share of games")
    ax_dist.set_title("Step distribution")
    ax_dist.legend()

    # 2) Mean (with std) and max steps
    names = [r.display_name for r in results]
    x = np.arange(len(names))
    ax_summary.bar(
        x - 0.2,
        [r.mean_steps for r in results],
        width=0.4,
        yerr=[r.std_dev for r in results],
        label="mean",
    )
    ax_summary.bar(x + 0.2, [r.max_steps for r in results], width=0.4, label="max")
    ax_summary.set_xticks(x)
    ax_summary.set_xticklabels(names, rotation=15)
    ax_summary.set_ylabel("Steps")
    ax_summary.set_title("Mean and worst case")
    ax_summary.legend()

    fig.tight_layout()
    if show:
        plt.show()
    return fig


def run_strategy_comparison(
    runs: int, *, seed: Optional[int] = 42, show_plots: bool = True
) -> List[StrategyResult]:
    """
    Benchmark all four strategies on the same targets, print a table and plot it.

    Args:
        runs: Number of targets per strategy.
        seed: Seed for target generation.
        show_plots: If True, display the comparison plots.

    Returns:
        One StrategyResult per strategy.
    """
    config = BenchmarkConfig(num_targets=runs, strategies=list(Strategy), seed=seed)
    results = run_benchmark_blocking(config, show_progress=True)
    print(format_benchmark_results(results))
    if show_plots:
        plot_benchmark_results(results, show=True)
    return results

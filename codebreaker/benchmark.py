"""Benchmark harness comparing guess-selection strategies over many random games."""

import asyncio
import logging
import random
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Union

import numpy as np
from tqdm import tqdm

from .engine import Codebreaker, code_to_string, generate_all_codes
from .solver import CodebreakerSolver, Strategy
from .utils import CODE_LENGTH, CODE_SPACE_SIZE, NUM_DIGITS, Code

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 20
DEFAULT_CHUNK_SIZE = 5

# Sample retention: the first games, plus outliers, up to a hard cap
SAMPLE_HEAD = 10
SAMPLE_LIMIT = 30
SLOW_GAME_STEPS = 10
FAST_GAME_STEPS = 2


@dataclass
class BenchmarkConfig:
    """What to run: how many targets, which strategies, and the target seed."""

    num_targets: int
    strategies: List[Strategy] = field(default_factory=lambda: list(Strategy))
    seed: Optional[int] = None
    max_steps: int = DEFAULT_MAX_STEPS
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def __post_init__(self) -> None:
        if self.num_targets < 1:
            raise ValueError("num_targets must be at least 1.")
        if self.num_targets > CODE_SPACE_SIZE:
            raise ValueError(f"num_targets cannot exceed {CODE_SPACE_SIZE}.")
        if not self.strategies:
            raise ValueError("At least one strategy is required.")
        if self.max_steps < 1:
            raise ValueError("max_steps must be positive.")
        if self.chunk_size < 1:
            raise ValueError("chunk_size must be positive.")
        self.strategies = [Strategy(s) for s in self.strategies]


@dataclass
class GameResult:
    """Outcome of one simulated game."""

    target: Code
    steps: int
    guesses: List[Code]
    won: bool


@dataclass
class StrategyResult:
    """Aggregate statistics of one strategy over all benchmark games."""

    strategy: Strategy
    display_name: str
    total_games: int
    mean_steps: float
    max_steps: int
    min_steps: int
    std_dev: float
    median: float
    distribution: Dict[int, int]
    sample_games: List[GameResult]
    time_seconds: float
    capped_games: int = 0


@dataclass
class BenchmarkProgress:
    """Progress report emitted once per processed chunk."""

    strategy: Strategy
    strategy_index: int
    total_strategies: int
    games_completed: int
    total_games: int
    current_target: str
    elapsed_seconds: float


class BenchmarkState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    DONE = "done"


ProgressCallback = Callable[[BenchmarkProgress], None]
CompleteCallback = Callable[[List[StrategyResult]], None]


def generate_random_targets(count: int, seed: Optional[int] = None) -> List[Code]:
    """
    Draw distinct random target codes.

    Args:
        count: Number of targets, in [0, 10000].
        seed: Seed for the generator. The same seed always yields the same
            ordered list; None draws from system entropy.

    Returns:
        List of `count` distinct codes.

    Raises:
        ValueError: If count is negative or larger than the code space.
    """
    if count < 0 or count > CODE_SPACE_SIZE:
        raise ValueError(f"count must be in [0, {CODE_SPACE_SIZE}], got {count}.")

    rng = random.Random(seed)
    targets: List[Code] = []
    seen = set()
    while len(targets) < count:
        code = tuple(rng.randrange(NUM_DIGITS) for _ in range(CODE_LENGTH))
        if code not in seen:
            seen.add(code)
            targets.append(code)  # type: ignore[arg-type]
    return targets


def simulate_game(
    strategy: Union[Strategy, str],
    target: Code,
    all_codes: Optional[Sequence[Code]] = None,
    max_steps: int = DEFAULT_MAX_STEPS,
) -> GameResult:
    """
    Play one strategy against one fixed target.

    Args:
        strategy: Strategy to play.
        target: Hidden code.
        all_codes: Full code space; defaults to the cached space.
        max_steps: Step cap; a game reaching it unresolved is not won.

    Returns:
        The GameResult. Games stopped by an empty candidate set report the
        step count at which they stopped and are not won.
    """
    game = Codebreaker(target, max_steps=max_steps)
    solver = CodebreakerSolver(game, strategy, record_analysis=False, all_codes=all_codes)
    status, payload = solver.solve()
    return GameResult(
        target=game.target,
        steps=payload["steps"],
        guesses=payload["guesses"],
        won=status == 1,
    )


def summarize_steps(steps: Sequence[int]) -> Dict[str, float]:
    """
    Compute mean, population standard deviation, min, max and median.

    Raises:
        ValueError: If `steps` is empty.
    """
    if len(steps) == 0:
        raise ValueError("Cannot summarize an empty step list.")
    values = np.asarray(steps, dtype=float)
    return {
        "mean": float(values.mean()),
        "std_dev": float(values.std()),
        "min": int(values.min()),
        "max": int(values.max()),
        "median": float(np.median(values)),
    }


@dataclass
class _StrategyAccumulator:
    started_at: float = field(default_factory=time.perf_counter)
    steps: List[int] = field(default_factory=list)
    distribution: Dict[int, int] = field(default_factory=dict)
    samples: List[GameResult] = field(default_factory=list)
    capped: int = 0

    def add(self, result: GameResult) -> None:
        self.steps.append(result.steps)
        self.distribution[result.steps] = self.distribution.get(result.steps, 0) + 1
        if not result.won:
            self.capped += 1

        interesting = (
            len(self.samples) < SAMPLE_HEAD
            or result.steps >= SLOW_GAME_STEPS
            or result.steps <= FAST_GAME_STEPS
        )
        if interesting and len(self.samples) < SAMPLE_LIMIT:
            self.samples.append(result)


class BenchmarkRunner:
    """
    Chunked benchmark state machine: IDLE -> RUNNING -> DONE.

    Cancelling a running benchmark returns it to IDLE without results. All
    per-strategy accumulators live on the instance, so several runners can
    be active at once.
    """

    def __init__(
        self, config: BenchmarkConfig, all_codes: Optional[Sequence[Code]] = None
    ) -> None:
        self.config = config
        self.all_codes: Sequence[Code] = (
            all_codes if all_codes is not None else generate_all_codes()
        )
        self.state: BenchmarkState = BenchmarkState.IDLE
        self.targets: List[Code] = []
        self.results: List[StrategyResult] = []

        self._strategy_index = 0
        self._game_index = 0
        self._acc = _StrategyAccumulator()

    def start(self) -> None:
        """
        Generate the targets and enter the RUNNING state.

        Raises:
            RuntimeError: If the runner is not idle.
        """
        if self.state is not BenchmarkState.IDLE:
            raise RuntimeError(f"Cannot start a benchmark in state {self.state.value}.")

        self.targets = generate_random_targets(self.config.num_targets, self.config.seed)
        self.results = []
        self._strategy_index = 0
        self._game_index = 0
        self._acc = _StrategyAccumulator()
        self.state = BenchmarkState.RUNNING
        logger.info(
            "Benchmark started: %d targets, strategies %s",
            len(self.targets),
            ", ".join(s.value for s in self.config.strategies),
        )

    def cancel(self) -> None:
        """Stop a running benchmark; no results are delivered."""
        if self.state is BenchmarkState.RUNNING:
            self.state = BenchmarkState.IDLE
            logger.info("Benchmark cancelled")

    def process_chunk(self) -> BenchmarkProgress:
        """
        Run the next chunk of games for the active strategy.

        Returns:
            Progress after the chunk.

        Raises:
            RuntimeError: If the runner is not RUNNING.
        """
        if self.state is not BenchmarkState.RUNNING:
            raise RuntimeError(f"Cannot process a chunk in state {self.state.value}.")

        strategies = self.config.strategies
        strategy = strategies[self._strategy_index]
        total = len(self.targets)

        for _ in range(self.config.chunk_size):
            if self._game_index >= total:
                break
            result = simulate_game(
                strategy,
                self.targets[self._game_index],
                self.all_codes,
                self.config.max_steps,
            )
            self._acc.add(result)
            self._game_index += 1

        progress = BenchmarkProgress(
            strategy=strategy,
            strategy_index=self._strategy_index,
            total_strategies=len(strategies),
            games_completed=self._game_index,
            total_games=total,
            current_target=(
                code_to_string(self.targets[self._game_index])
                if self._game_index < total
                else ""
            ),
            elapsed_seconds=time.perf_counter() - self._acc.started_at,
        )

        if self._game_index >= total:
            self.results.append(self._finalize(strategy))
            self._strategy_index += 1
            self._game_index = 0
            self._acc = _StrategyAccumulator()
            if self._strategy_index >= len(strategies):
                self.state = BenchmarkState.DONE
                logger.info("Benchmark finished")

        return progress

    def _finalize(self, strategy: Strategy) -> StrategyResult:
        acc = self._acc
        stats = summarize_steps(acc.steps)
        result = StrategyResult(
            strategy=strategy,
            display_name=strategy.display_name,
            total_games=len(acc.steps),
            mean_steps=stats["mean"],
            max_steps=int(stats["max"]),
            min_steps=int(stats["min"]),
            std_dev=stats["std_dev"],
            median=stats["median"],
            distribution=dict(sorted(acc.distribution.items())),
            sample_games=acc.samples,
            time_seconds=time.perf_counter() - acc.started_at,
            capped_games=acc.capped,
        )
        logger.debug(
            "%s: mean %.3f, max %d, %d capped",
            strategy.value,
            result.mean_steps,
            result.max_steps,
            result.capped_games,
        )
        return result


class BenchmarkHandle:
    """Drives a BenchmarkRunner on an asyncio event loop, one chunk per callback."""

    def __init__(
        self,
        runner: BenchmarkRunner,
        loop: asyncio.AbstractEventLoop,
        on_progress: ProgressCallback,
        on_complete: CompleteCallback,
    ) -> None:
        self.runner = runner
        self._loop = loop
        self._on_progress = on_progress
        self._on_complete = on_complete
        self._pending: Optional[asyncio.Handle] = None

    @property
    def state(self) -> BenchmarkState:
        return self.runner.state

    def cancel(self) -> None:
        """Stop scheduling chunks. Neither callback fires afterwards."""
        self.runner.cancel()
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _schedule(self) -> None:
        self._pending = self._loop.call_soon(self._tick)

    def _tick(self) -> None:
        self._pending = None
        if self.runner.state is not BenchmarkState.RUNNING:
            return

        progress = self.runner.process_chunk()
        try:
            self._on_progress(progress)
        except Exception:
            logger.exception("Progress callback failed")

        # The progress callback may have cancelled the run.
        if self.runner.state is BenchmarkState.IDLE:
            return
        if self.runner.state is BenchmarkState.DONE:
            self._on_complete(list(self.runner.results))
            return
        self._schedule()


def run_benchmark(
    config: BenchmarkConfig,
    on_progress: ProgressCallback,
    on_complete: CompleteCallback,
    loop: Optional[asyncio.AbstractEventLoop] = None,
) -> BenchmarkHandle:
    """
    Start a benchmark without blocking the event loop.

    Games are processed in chunks of `config.chunk_size`; control returns to
    the loop between chunks.

    Args:
        config: Benchmark configuration.
        on_progress: Called after every chunk.
        on_complete: Called once with the ordered results, unless cancelled.
        loop: Event loop to schedule on; defaults to the running loop.

    Returns:
        A handle whose cancel() stops the run.

    Raises:
        RuntimeError: If no loop is given and none is running.
    """
    if loop is None:
        loop = asyncio.get_running_loop()

    runner = BenchmarkRunner(config)
    runner.start()
    handle = BenchmarkHandle(runner, loop, on_progress, on_complete)
    handle._schedule()
    return handle


async def run_benchmark_async(
    config: BenchmarkConfig, on_progress: Optional[ProgressCallback] = None
) -> List[StrategyResult]:
    """Run a benchmark cooperatively and return its results; cancellation stops it."""
    loop = asyncio.get_running_loop()
    future: "asyncio.Future[List[StrategyResult]]" = loop.create_future()

    def _complete(results: List[StrategyResult]) -> None:
        if not future.done():
            future.set_result(results)

    handle = run_benchmark(config, on_progress or (lambda _: None), _complete, loop)
    try:
        return await future
    except asyncio.CancelledError:
        handle.cancel()
        raise


def run_benchmark_blocking(
    config: BenchmarkConfig,
    *,
    show_progress: bool = False,
    on_progress: Optional[ProgressCallback] = None,
) -> List[StrategyResult]:
    """
    Run a benchmark to completion in the calling thread.

    Args:
        config: Benchmark configuration.
        show_progress: If True, display a tqdm progress bar.
        on_progress: Optional callback after every chunk.

    Returns:
        One StrategyResult per configured strategy, in order.
    """
    runner = BenchmarkRunner(config)
    runner.start()

    total = len(config.strategies) * config.num_targets
    reported = 0
    with tqdm(total=total, desc="Benchmark", disable=not show_progress) as pbar:
        while runner.state is BenchmarkState.RUNNING:
            progress = runner.process_chunk()
            completed = progress.strategy_index * progress.total_games + progress.games_completed
            pbar.set_description(f"Running {progress.strategy.value}")
            pbar.update(completed - reported)
            reported = completed
            if on_progress is not None:
                on_progress(progress)

    return runner.results

"""
Codebreaker Solver

A solver for a 4-digit, base-10 codebreaking game where feedback counts the
digits shared by guess and target, regardless of position. Strategies:
- Frequency probing: fixed probes that cover the digit range
- Maximum entropy: maximise expected information per guess
- Minimax: minimise the worst-case remaining candidates
- Hybrid: probing, then entropy, then minimax as the pool shrinks
"""

from .engine import (
    Codebreaker,
    InvalidFeedback,
    InvalidFormat,
    code_to_string,
    compute_feedback,
    exclude_code,
    filter_candidates,
    generate_all_codes,
    is_exact_match,
    string_to_code,
    validate_feedback,
)
from .knowledge import DigitKnowledge, KnowledgeState, analyze_knowledge
from .solver import (
    CodebreakerSolver,
    Round,
    Strategy,
    StrategyAnalysis,
    StrategyChoice,
    choose_guess,
    get_next_guess,
)
from .benchmark import (
    BenchmarkConfig,
    BenchmarkProgress,
    BenchmarkState,
    GameResult,
    StrategyResult,
    generate_random_targets,
    run_benchmark,
    run_benchmark_async,
    run_benchmark_blocking,
    simulate_game,
)
from .analysis import (
    format_benchmark_results,
    format_solver_knowledge,
    plot_benchmark_results,
    run_solver_many_tests,
    run_solver_single_test,
    run_strategy_comparison,
)

__version__ = "1.0.0"

__all__ = [
    # Core classes
    "Codebreaker",
    "CodebreakerSolver",
    "Strategy",
    # Code model
    "InvalidFormat",
    "InvalidFeedback",
    "compute_feedback",
    "is_exact_match",
    "generate_all_codes",
    "filter_candidates",
    "exclude_code",
    "code_to_string",
    "string_to_code",
    "validate_feedback",
    # Knowledge
    "DigitKnowledge",
    "KnowledgeState",
    "analyze_knowledge",
    # Strategies
    "Round",
    "StrategyAnalysis",
    "StrategyChoice",
    "choose_guess",
    "get_next_guess",
    # Benchmark
    "BenchmarkConfig",
    "BenchmarkProgress",
    "BenchmarkState",
    "GameResult",
    "StrategyResult",
    "generate_random_targets",
    "simulate_game",
    "run_benchmark",
    "run_benchmark_async",
    "run_benchmark_blocking",
    # Analysis functions
    "format_solver_knowledge",
    "format_benchmark_results",
    "plot_benchmark_results",
    "run_solver_single_test",
    "run_solver_many_tests",
    "run_strategy_comparison",
]

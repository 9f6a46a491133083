"""
Quickstart example for the Codebreaker Solver.

This script demonstrates basic usage of the solver.
"""

from codebreaker import (
    Codebreaker,
    CodebreakerSolver,
    code_to_string,
    generate_all_codes,
    get_next_guess,
    run_solver_many_tests,
    string_to_code,
)
from codebreaker.analysis import format_round, format_solver_knowledge


def main():
    print("=" * 60)
    print("Codebreaker Solver - Quickstart Example")
    print("=" * 60)

    # Example 1: Solve a single game
    print("\n1. Solving a single game against 7703 with the hybrid strategy...")
    print("-" * 60)

    game = Codebreaker(string_to_code("7703"))
    solver = CodebreakerSolver(game)
    status, payload = solver.solve()

    result = "SOLVED" if status == 1 else "NOT SOLVED"
    print(f"Result: {result} in {payload['steps']} steps")
    for round_ in solver.history:
        print(format_round(round_))

    # Example 2: Show what the solver knows at the end
    print("\n2. Final digit knowledge:")
    print("-" * 60)
    last = solver.history[-1].analysis
    print(format_solver_knowledge(last.knowledge))

    # Example 3: Ask for a suggestion, as an interactive front end would
    print("\n3. Opening suggestion with its analysis...")
    print("-" * 60)

    all_codes = generate_all_codes()
    guess, analysis = get_next_guess(list(all_codes), all_codes, 0, [])
    print(f"Suggested guess: {code_to_string(guess)} ({analysis.strategy_name})")
    for line in analysis.reasoning:
        print(f"  {line}")
    for preview in analysis.feedback_preview:
        print(f"  feedback {preview.feedback}: {preview.remaining} candidates left")

    # Example 4: Run multiple games for statistics
    print("\n4. Running 30 games per strategy...")
    print("-" * 60)

    for strategy in ("frequency-probe", "max-entropy", "minimax", "hybrid"):
        results = run_solver_many_tests(runs=30, strategy=strategy, seed=42)
        print(
            f"{strategy:16s} avg {results['avg_steps']:.2f} steps, "
            f"max {results['max_steps']}, win rate {results['win_rate']*100:5.1f}%"
        )

    print("\n" + "=" * 60)
    print("Done! See DESIGN.md for more details.")
    print("=" * 60)


if __name__ == "__main__":
    main()

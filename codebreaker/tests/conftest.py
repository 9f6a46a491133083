"""
Shared test utilities for codebreaker tests.

- Non-interactive matplotlib backend for plotting tests
- Small candidate sets with known structure (CANDIDATE_SETS)
- Round-history helper
"""

import matplotlib

matplotlib.use("Agg")

import pytest

from codebreaker.engine import filter_candidates, generate_all_codes
from codebreaker.solver import Round

CANDIDATE_SETS = {
    # Three codes only a mixed guess can fully separate
    "monochromatic_3": [(0, 0, 0, 0), (1, 1, 1, 1), (2, 2, 2, 2)],
    # Two permutations of one multiset plus an unrelated code
    "pair_and_outsider": [(1, 1, 2, 2), (1, 2, 1, 2), (3, 3, 4, 4)],
    # Permutations of one multiset: no guess can split them
    "permutations_only": [(1, 2, 3, 4), (1, 2, 4, 3), (2, 1, 3, 4)],
}


def make_history(*rounds):
    """Build a history from (guess, feedback) pairs."""
    return [
        Round(round_index=i, guess=guess, feedback=feedback)
        for i, (guess, feedback) in enumerate(rounds)
    ]


def assert_valid_code(code):
    """Assert that a value is a 4-tuple of digits"""
    assert isinstance(code, tuple), "Code must be a tuple"
    assert len(code) == 4, "Code must have 4 slots"
    assert all(isinstance(d, int) and 0 <= d <= 9 for d in code), "Digits must be in 0-9"


@pytest.fixture
def all_codes():
    return generate_all_codes()


@pytest.fixture
def two_zeros(all_codes):
    """Codes with exactly two zeros (486 codes)."""
    return filter_candidates(all_codes, (0, 0, 0, 0), 2)


@pytest.fixture
def three_zeros(all_codes):
    """Codes with exactly three zeros (36 codes)."""
    return filter_candidates(all_codes, (0, 0, 0, 0), 3)

"""
Tests for the code model, feedback rules, candidate filtering and game engine.
"""

import random

import numpy as np
import pytest

from codebreaker.engine import (
    Codebreaker,
    InvalidFeedback,
    InvalidFormat,
    code_index,
    code_to_string,
    compute_feedback,
    exclude_code,
    filter_candidates,
    generate_all_codes,
    is_exact_match,
    string_to_code,
    validate_feedback,
)


class TestFeedback:
    """Multiset-intersection feedback"""

    def test_single_shared_digit(self):
        assert compute_feedback((4, 5, 2, 7), (1, 3, 0, 2)) == 1

    def test_permutation_scores_four_but_is_not_exact(self):
        assert compute_feedback((2, 2, 1, 1), (1, 1, 2, 2)) == 4
        assert not is_exact_match((2, 2, 1, 1), (1, 1, 2, 2))

    def test_repeats_are_capped_by_the_other_side(self):
        assert compute_feedback((7, 7, 7, 7), (7, 1, 7, 2)) == 2
        assert compute_feedback((7, 1, 7, 2), (7, 7, 7, 7)) == 2

    def test_no_shared_digits(self):
        assert compute_feedback((0, 1, 2, 3), (4, 5, 6, 7)) == 0

    def test_symmetric_and_in_range(self):
        rng = random.Random(7)
        codes = generate_all_codes()
        for _ in range(500):
            a, b = rng.choice(codes), rng.choice(codes)
            fb = compute_feedback(a, b)
            assert fb == compute_feedback(b, a)
            assert 0 <= fb <= 4

    def test_self_feedback_is_four(self):
        for code in generate_all_codes()[::97]:
            assert compute_feedback(code, code) == 4
            assert is_exact_match(code, code)


class TestCodeSpace:
    """Full code space generation"""

    def test_size_and_order(self, all_codes):
        assert len(all_codes) == 10000
        assert all_codes[0] == (0, 0, 0, 0)
        assert all_codes[1234] == (1, 2, 3, 4)
        assert all_codes[-1] == (9, 9, 9, 9)
        assert list(all_codes) == sorted(all_codes)

    def test_generated_once(self):
        assert generate_all_codes() is generate_all_codes()

    def test_code_index_matches_position(self, all_codes):
        for i in (0, 1, 99, 4321, 9999):
            assert code_index(all_codes[i]) == i


class TestConversions:
    """String <-> code conversions"""

    def test_round_trip(self):
        assert string_to_code("0123") == (0, 1, 2, 3)
        assert code_to_string((0, 0, 7, 9)) == "0079"

    @pytest.mark.parametrize("text", ["", "123", "12345", "12a4", " 123", "-123", "1.23"])
    def test_invalid_strings(self, text):
        with pytest.raises(InvalidFormat):
            string_to_code(text)

    def test_non_string_input(self):
        with pytest.raises(InvalidFormat):
            string_to_code(1234)

    def test_invalid_format_is_value_error(self):
        with pytest.raises(ValueError):
            string_to_code("abcd")


class TestValidateFeedback:
    """Boundary validation of externally supplied feedback"""

    @pytest.mark.parametrize("value", [0, 1, 2, 3, 4])
    def test_accepts_valid_values(self, value):
        assert validate_feedback(value) == value

    def test_accepts_numpy_integers(self):
        assert validate_feedback(np.int64(3)) == 3

    @pytest.mark.parametrize("value", [-1, 5, 2.5, "3", None, True])
    def test_rejects_invalid_values(self, value):
        with pytest.raises(InvalidFeedback):
            validate_feedback(value)


class TestFilterCandidates:
    """Candidate filtering by one (guess, feedback) constraint"""

    def test_matches_brute_force(self, all_codes):
        guess = (0, 1, 2, 3)
        for fb in range(5):
            expected = [c for c in all_codes if compute_feedback(guess, c) == fb]
            assert filter_candidates(all_codes, guess, fb) == expected

    def test_known_group_sizes(self, all_codes):
        assert len(filter_candidates(all_codes, (0, 1, 2, 3), 0)) == 6**4
        assert len(filter_candidates(all_codes, (0, 1, 2, 3), 1)) == 4420
        assert len(filter_candidates(all_codes, (0, 0, 0, 0), 2)) == 486

    def test_idempotent(self, all_codes):
        once = filter_candidates(all_codes, (5, 5, 1, 9), 2)
        twice = filter_candidates(once, (5, 5, 1, 9), 2)
        assert once == twice

    def test_monotonically_shrinks(self, all_codes):
        target = (3, 1, 4, 1)
        candidates = list(all_codes)
        for guess in [(0, 1, 2, 3), (4, 5, 6, 7), (1, 1, 1, 1), (3, 4, 1, 1)]:
            filtered = filter_candidates(candidates, guess, compute_feedback(guess, target))
            assert len(filtered) <= len(candidates)
            assert set(filtered) <= set(candidates)
            assert target in filtered
            candidates = filtered

    def test_does_not_mutate_input(self):
        candidates = [(1, 2, 3, 4), (5, 6, 7, 8)]
        filter_candidates(candidates, (1, 2, 3, 4), 4)
        assert candidates == [(1, 2, 3, 4), (5, 6, 7, 8)]

    def test_empty_input(self):
        assert filter_candidates([], (1, 2, 3, 4), 2) == []

    def test_contradictory_feedback_empties_the_set(self):
        assert filter_candidates([(1, 1, 1, 1)], (1, 1, 1, 1), 0) == []

    def test_exclude_code(self):
        candidates = [(1, 2, 3, 4), (4, 3, 2, 1)]
        assert exclude_code(candidates, (1, 2, 3, 4)) == [(4, 3, 2, 1)]
        assert exclude_code(candidates, (9, 9, 9, 9)) == candidates


class TestCodebreakerGame:
    """Game engine holding a hidden target"""

    def test_exact_match_wins(self):
        game = Codebreaker("1234")
        status, payload = game.guess((1, 2, 3, 4))
        assert status == 1
        assert payload["feedback"] == 4
        assert payload["steps"] == 1
        assert game.game_over

    def test_miss_reports_feedback(self):
        game = Codebreaker((1, 2, 3, 4))
        status, payload = game.guess((4, 3, 2, 1))
        assert status == 0
        assert payload["feedback"] == 4
        assert not game.game_over

    def test_step_cap(self):
        game = Codebreaker("1234", max_steps=2)
        assert game.guess((0, 0, 0, 0))[0] == 0
        status, payload = game.guess((0, 0, 0, 0))
        assert status == -1
        assert payload["target"] == (1, 2, 3, 4)
        with pytest.raises(RuntimeError):
            game.guess((1, 2, 3, 4))

    def test_reset(self):
        game = Codebreaker("1234", max_steps=1)
        game.guess((0, 0, 0, 0))
        game.reset()
        assert game.steps == 0
        assert game.guess((1, 2, 3, 4))[0] == 1

    def test_random_target_is_reproducible(self):
        a = Codebreaker(rng=random.Random(3)).target
        b = Codebreaker(rng=random.Random(3)).target
        assert a == b
        assert len(a) == 4 and all(0 <= d <= 9 for d in a)

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            Codebreaker("1234", max_steps=0)
        with pytest.raises(ValueError):
            Codebreaker((1, 2, 3))
        with pytest.raises(InvalidFormat):
            Codebreaker("12x4")

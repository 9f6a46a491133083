"""
Tests for digit-frequency knowledge deduction.
"""

import random

from conftest import make_history

from codebreaker.knowledge import analyze_knowledge
from codebreaker.solver import Round


class TestEmptyHistory:
    def test_everything_unknown(self):
        knowledge = analyze_knowledge([])
        assert knowledge.unknown_digits == list(range(10))
        assert knowledge.confirmed_digits == []
        assert knowledge.eliminated_digits == []
        assert knowledge.remaining_slots == 4
        assert knowledge.confirmed_slots == 0
        assert not knowledge.composition_known
        assert all(d.max_count == 4 and d.min_count == 0 for d in knowledge.digits)


class TestMonochromaticGuesses:
    """Only all-same-digit guesses carry frequency information"""

    def test_zero_feedback_eliminates_digit(self):
        knowledge = analyze_knowledge(make_history(((0, 0, 0, 0), 0)))
        assert knowledge.eliminated_digits == [0]
        assert knowledge.unknown_digits == list(range(1, 10))
        assert knowledge.digits[0].confirmed_count == 0

    def test_confirmed_count_caps_the_others(self):
        knowledge = analyze_knowledge(make_history(((3, 3, 3, 3), 3)))
        assert knowledge.confirmed_digits == [3]
        assert knowledge.digits[3].confirmed_count == 3
        assert knowledge.digits[3].min_count == 3
        assert knowledge.digits[3].max_count == 3
        assert knowledge.remaining_slots == 1
        for d in knowledge.unknown_digits:
            assert knowledge.digits[d].max_count == 1
            assert knowledge.digits[d].confirmed_count is None

    def test_feedbacks_summing_to_four_fix_the_composition(self):
        knowledge = analyze_knowledge(make_history(((1, 1, 1, 1), 2), ((2, 2, 2, 2), 2)))
        assert knowledge.composition_known
        assert knowledge.confirmed_digits == [1, 2]
        assert knowledge.eliminated_digits == [0, 3, 4, 5, 6, 7, 8, 9]
        assert knowledge.unknown_digits == []
        assert knowledge.confirmed_slots == 4
        assert knowledge.remaining_slots == 0
        assert sum(d.confirmed_count for d in knowledge.digits) == 4

    def test_single_digit_target(self):
        knowledge = analyze_knowledge(make_history(((8, 8, 8, 8), 4)))
        assert knowledge.composition_known
        assert knowledge.confirmed_digits == [8]
        assert len(knowledge.eliminated_digits) == 9

    def test_composition_known_implies_full_slots(self):
        history = make_history(((4, 4, 4, 4), 1), ((5, 5, 5, 5), 1), ((6, 6, 6, 6), 2))
        knowledge = analyze_knowledge(history)
        assert knowledge.composition_known
        assert knowledge.confirmed_slots == 4
        assert not knowledge.unknown_digits
        assert "composition" in knowledge.summary


class TestIgnoredRounds:
    def test_mixed_guesses_contribute_nothing(self):
        knowledge = analyze_knowledge(make_history(((0, 1, 2, 3), 2), ((4, 4, 5, 5), 0)))
        assert knowledge.unknown_digits == list(range(10))
        assert knowledge.remaining_slots == 4

    def test_unresolved_rounds_are_skipped(self):
        history = [Round(round_index=0, guess=(7, 7, 7, 7), feedback=None)]
        assert analyze_knowledge(history).unknown_digits == list(range(10))


class TestDeterminism:
    def test_idempotent(self):
        history = make_history(((1, 1, 1, 1), 1), ((0, 1, 2, 3), 2), ((9, 9, 9, 9), 0))
        assert analyze_knowledge(history) == analyze_knowledge(history)

    def test_order_independent(self):
        history = make_history(
            ((1, 1, 1, 1), 1), ((2, 2, 2, 2), 0), ((0, 1, 2, 3), 2), ((9, 9, 9, 9), 2)
        )
        shuffled = list(history)
        random.Random(5).shuffle(shuffled)
        assert analyze_knowledge(shuffled) == analyze_knowledge(history)

    def test_history_is_not_mutated(self):
        history = make_history(((1, 1, 1, 1), 2))
        before = [(r.guess, r.feedback) for r in history]
        analyze_knowledge(history)
        assert [(r.guess, r.feedback) for r in history] == before

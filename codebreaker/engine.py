"""Code model, feedback rules, candidate filtering and the codebreaking game engine."""

import random
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from .utils import (
    CODE_LENGTH,
    MAX_FEEDBACK,
    NUM_DIGITS,
    PLACE_VALUES,
    Code,
    get_all_codes,
    get_feedback_table,
    get_multiset_ids,
)


class InvalidFormat(ValueError):
    """Raised when a string cannot be parsed into a 4-digit code."""


class InvalidFeedback(ValueError):
    """Raised when an externally supplied feedback value is out of range."""


# -----------------------------------------------------------------------------
# Code model and feedback
# -----------------------------------------------------------------------------


def compute_feedback(guess: Code, target: Code) -> int:
    """
    Compute the multiset-intersection feedback between a guess and a target.

    Args:
        guess: The guessed code.
        target: The hidden code.

    Returns:
        Sum over digits d of min(count of d in guess, count of d in target),
        a value in [0, 4]. Positions are ignored.
    """
    guess_count = [0] * NUM_DIGITS
    target_count = [0] * NUM_DIGITS
    for i in range(CODE_LENGTH):
        guess_count[guess[i]] += 1
        target_count[target[i]] += 1
    return sum(min(g, t) for g, t in zip(guess_count, target_count))


def is_exact_match(guess: Code, target: Code) -> bool:
    """Return True if both codes agree in every position."""
    return all(g == t for g, t in zip(guess, target))


def generate_all_codes() -> Tuple[Code, ...]:
    """Return the cached, lexicographically ordered space of all 10,000 codes."""
    return get_all_codes()


def code_index(code: Code) -> int:
    """Return the position of a code in the full code space."""
    return code[0] * 1000 + code[1] * 100 + code[2] * 10 + code[3]


def codes_to_indices(codes: Sequence[Code]) -> np.ndarray:
    """Convert a sequence of codes to an int64 array of code indices."""
    if not codes:
        return np.empty(0, dtype=np.int64)
    return np.asarray(codes, dtype=np.int64) @ PLACE_VALUES


def code_to_string(code: Code) -> str:
    """Format a code as a 4-character digit string."""
    return "".join(str(d) for d in code)


def string_to_code(text: str) -> Code:
    """
    Parse a 4-character digit string into a code.

    Args:
        text: String such as "0123".

    Returns:
        The parsed code.

    Raises:
        InvalidFormat: If the string does not have exactly 4 characters or
            contains a character that is not a decimal digit.
    """
    if not isinstance(text, str) or len(text) != CODE_LENGTH:
        raise InvalidFormat(f"Expected a {CODE_LENGTH}-digit string, got {text!r}.")
    if not all(ch in "0123456789" for ch in text):
        raise InvalidFormat(f"Code must contain only decimal digits, got {text!r}.")
    a, b, c, d = (int(ch) for ch in text)
    return (a, b, c, d)


def validate_feedback(value: Any) -> int:
    """
    Validate a feedback value supplied from outside the solver.

    Args:
        value: Candidate feedback value, usually typed in by a person.

    Returns:
        The feedback as an int in [0, 4].

    Raises:
        InvalidFeedback: If the value is not an integer in [0, 4].
    """
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidFeedback(f"Feedback must be an integer, got {value!r}.")
    if not 0 <= value <= MAX_FEEDBACK:
        raise InvalidFeedback(f"Feedback must be in [0, {MAX_FEEDBACK}], got {value}.")
    return int(value)


# -----------------------------------------------------------------------------
# Candidate set operations
# -----------------------------------------------------------------------------


def filter_candidates(
    candidates: Sequence[Code], guess: Code, feedback: int
) -> List[Code]:
    """
    Keep the candidates that would have produced the observed feedback.

    Only the given (guess, feedback) constraint is checked; the input is
    assumed to be consistent with every earlier round already.

    Args:
        candidates: Current candidate set, in order.
        guess: The code that was guessed.
        feedback: The feedback received for that guess.

    Returns:
        A new list with the matching candidates in their original order.
    """
    if not candidates:
        return []
    multiset_ids = get_multiset_ids()
    table = get_feedback_table()
    scores = table[multiset_ids[code_index(guess)], multiset_ids[codes_to_indices(candidates)]]
    return [c for c, keep in zip(candidates, scores == feedback) if keep]


def exclude_code(candidates: Sequence[Code], code: Code) -> List[Code]:
    """Return the candidates without `code`, which is known not to be the target."""
    return [c for c in candidates if c != code]


# -----------------------------------------------------------------------------
# Game engine
# -----------------------------------------------------------------------------


class Codebreaker:
    """Codebreaking game engine holding one hidden target code."""

    def __init__(
        self,
        target: Optional[Union[Code, str]] = None,
        max_steps: int = 20,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Initialize a game against a hidden target.

        Args:
            target: Hidden code, as a tuple or a digit string. A random code
                is drawn when omitted.
            max_steps: Number of guesses allowed before the game is over.
            rng: Random source used when the target is drawn.

        Raises:
            ValueError: If max_steps is not positive or the target is not a
                valid code.
        """
        if max_steps <= 0:
            raise ValueError("max_steps must be positive.")

        if target is None:
            rng = rng or random.Random()
            target = tuple(rng.randrange(NUM_DIGITS) for _ in range(CODE_LENGTH))  # type: ignore[assignment]
        elif isinstance(target, str):
            target = string_to_code(target)
        elif len(target) != CODE_LENGTH or not all(
            isinstance(d, int) and 0 <= d < NUM_DIGITS for d in target
        ):
            raise ValueError(f"Invalid target code: {target!r}.")

        self.target: Code = tuple(target)  # type: ignore[assignment]
        self.max_steps: int = max_steps
        self.steps: int = 0
        self.game_over: bool = False

    def reset(self) -> None:
        """Reset the step counter so the same target can be played again."""
        self.steps = 0
        self.game_over = False

    def guess(self, code: Code) -> Tuple[int, Dict[str, Any]]:
        """
        Submit a guess and return a status code plus payload.

        Args:
            code: The guessed code.

        Returns:
            Tuple of (status, payload) where status is:
                - 1: Exact match (win)
                - 0: Non-terminal guess
                - -1: Step cap reached without a match

            Payload contains "feedback" and "steps"; on status -1 it also
            contains "target".

        Raises:
            RuntimeError: If the game is already over.
        """
        if self.game_over:
            raise RuntimeError("The game is already over.")

        self.steps += 1
        feedback = compute_feedback(code, self.target)

        if is_exact_match(code, self.target):
            self.game_over = True
            return 1, {"feedback": feedback, "steps": self.steps}

        if self.steps >= self.max_steps:
            self.game_over = True
            return -1, {
                "feedback": feedback,
                "steps": self.steps,
                "target": self.target,
            }

        return 0, {"feedback": feedback, "steps": self.steps}

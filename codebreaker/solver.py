"""Guess-selection strategies and a single-game solving agent."""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from .engine import (
    Codebreaker,
    code_to_string,
    codes_to_indices,
    compute_feedback,
    exclude_code,
    filter_candidates,
    generate_all_codes,
)
from .knowledge import KnowledgeState, analyze_knowledge
from .utils import (
    CODE_LENGTH,
    CODE_SPACE_SIZE,
    MAX_FEEDBACK,
    Code,
    get_all_codes,
    get_feedback_table,
    get_multiset_ids,
)

logger = logging.getLogger(__name__)

FALLBACK_GUESS: Code = (0, 0, 0, 0)

# Digit groups chosen to cover 0-9 with some overlap for cross-checking.
PROBE_SEQUENCE: Tuple[Code, ...] = (
    (0, 1, 2, 3),
    (4, 5, 6, 7),
    (8, 9, 0, 1),
    (2, 3, 4, 5),
    (6, 7, 8, 9),
)

# Frequency probe strategy
PROBE_MIN_POOL = 100
PROBE_FALLBACK_LIMIT = 500

# Pure max-entropy strategy
ENTROPY_FULL_SPACE_MAX_POOL = 500
ENTROPY_SMALL_POOL = 200
ENTROPY_SMALL_POOL_LIMIT = 5000
ENTROPY_LIMIT = 2000

# Pure minimax strategy
MINIMAX_FULL_SPACE_MAX_POOL = 50
MINIMAX_FULL_SPACE_LIMIT = 5000
MINIMAX_LIMIT = 2000

# Hybrid phase boundaries
HYBRID_PROBE_ROUNDS = 3
HYBRID_PROBE_MIN_POOL = 5000
HYBRID_MINIMAX_MAX_POOL = 200
HYBRID_MINIMAX_FULL_SPACE_LIMIT = 10000
HYBRID_MINIMAX_LIMIT = 5000
HYBRID_ENTROPY_FULL_SPACE_MAX_POOL = 1000
HYBRID_ENTROPY_FULL_SPACE_LIMIT = 3000
HYBRID_ENTROPY_SAMPLED_LIMIT = 2000

POSITION_CLUES_MAX_POOL = 100


class Strategy(str, Enum):
    """The closed set of guess-selection strategies."""

    FREQUENCY_PROBE = "frequency-probe"
    MAX_ENTROPY = "max-entropy"
    MINIMAX = "minimax"
    HYBRID = "hybrid"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES: Dict[Strategy, str] = {
    Strategy.FREQUENCY_PROBE: "Pure frequency probing",
    Strategy.MAX_ENTROPY: "Pure max-entropy",
    Strategy.MINIMAX: "Pure minimax",
    Strategy.HYBRID: "Three-phase hybrid",
}


@dataclass
class FeedbackPreview:
    """How many candidates would remain for one possible feedback value."""

    feedback: int
    remaining: int
    meaning: str


@dataclass
class StrategyAnalysis:
    """Supporting data for a chosen guess. Text fields are display-only."""

    strategy: str
    strategy_name: str
    candidates_before: int
    candidates_remaining: int
    expected_reduction: int
    worst_case_remaining: int
    best_case_remaining: int
    partitions: Dict[int, int]
    knowledge: KnowledgeState
    reasoning: List[str] = field(default_factory=list)
    guess_rationale: str = ""
    feedback_preview: List[FeedbackPreview] = field(default_factory=list)
    phase: str = ""
    phase_description: str = ""
    position_clues: List[str] = field(default_factory=list)
    entropy: Optional[float] = None


@dataclass
class Round:
    """One played round: the guess, its feedback and the analysis behind it."""

    round_index: int
    guess: Code
    feedback: Optional[int] = None
    analysis: Optional[StrategyAnalysis] = None
    is_correct: bool = False


@dataclass(frozen=True)
class StrategyChoice:
    """A strategy's chosen guess, with analysis when requested."""

    guess: Code
    analysis: Optional[StrategyAnalysis] = None


@dataclass
class _Decision:
    guess: Code
    tag: str
    entropy: Optional[float] = None
    evaluated: int = 0
    full_space: bool = False


# -----------------------------------------------------------------------------
# Partitions, entropy and sampling
# -----------------------------------------------------------------------------


def compute_partitions(guess: Code, candidates: Sequence[Code]) -> Dict[int, int]:
    """
    Group the candidates by the feedback the guess would receive against each.

    Args:
        guess: Code being evaluated.
        candidates: Current candidate set.

    Returns:
        Mapping feedback -> number of candidates, only for non-empty groups,
        ordered by feedback value.
    """
    partitions: Dict[int, int] = {}
    for candidate in candidates:
        fb = compute_feedback(guess, candidate)
        partitions[fb] = partitions.get(fb, 0) + 1
    return dict(sorted(partitions.items()))


def compute_entropy(partitions: Dict[int, int], total: int) -> float:
    """Shannon entropy in bits of the partition-size distribution."""
    entropy = 0.0
    for count in partitions.values():
        p = count / total
        if p > 0:
            entropy -= p * math.log2(p)
    return entropy


def sample_pool(pool: Sequence[Any], limit: int) -> Sequence[Any]:
    """
    Take an evenly strided sample of at most about `limit` pool elements.

    The stride is max(1, len(pool) // min(len(pool), limit)) and elements are
    taken in index order starting from the first.
    """
    limit = min(len(pool), limit)
    if limit <= 0:
        return pool[:0]
    stride = max(1, len(pool) // limit)
    return pool[::stride]


def _partition_matrix(guess_ids: np.ndarray, candidate_ids: np.ndarray) -> np.ndarray:
    """Return feedback-group sizes, shape (len(guess_ids), 5)."""
    multiset_ids = get_multiset_ids()
    table = get_feedback_table()

    class_counts = np.bincount(multiset_ids[candidate_ids], minlength=table.shape[0])
    guess_classes, inverse = np.unique(multiset_ids[guess_ids], return_inverse=True)
    rows = table[guess_classes]

    per_class = np.stack(
        [(rows == fb) @ class_counts for fb in range(MAX_FEEDBACK + 1)], axis=1
    )
    return per_class[inverse.reshape(-1)]


def _entropies(counts: np.ndarray, total: int) -> np.ndarray:
    p = counts / total
    with np.errstate(divide="ignore", invalid="ignore"):
        terms = np.where(p > 0, -p * np.log2(p), 0.0)
    return terms.sum(axis=1)


def _space_indices(all_codes: Sequence[Code]) -> np.ndarray:
    if all_codes is get_all_codes():
        return np.arange(CODE_SPACE_SIZE, dtype=np.int64)
    return codes_to_indices(all_codes)


def _code_at(index: int) -> Code:
    return get_all_codes()[int(index)]


# -----------------------------------------------------------------------------
# Searches
# -----------------------------------------------------------------------------


def _search_max_entropy(
    candidates: Sequence[Code],
    candidate_ids: np.ndarray,
    pool_ids: np.ndarray,
    limit: int,
    tag: str,
) -> _Decision:
    """Pick the sampled guess with the highest partition entropy (first wins)."""
    n = len(candidates)
    sampled = sample_pool(pool_ids, limit)
    entropies = _entropies(_partition_matrix(sampled, candidate_ids), n)

    best = int(np.argmax(entropies))
    best_entropy = float(entropies[best])
    if best_entropy <= 0.0:
        # Nothing splits the pool; only an exact hit can make progress.
        return _Decision(candidates[0], tag, 0.0, len(sampled))

    return _Decision(_code_at(sampled[best]), tag, best_entropy, len(sampled))


def _search_minimax(
    candidates: Sequence[Code],
    candidate_ids: np.ndarray,
    pool_ids: np.ndarray,
    limit: int,
) -> _Decision:
    """
    Pick the sampled guess whose largest partition is smallest.

    Among guesses tied on the worst case, the first one that is itself a
    candidate wins; otherwise the first evaluated. If no guess does better
    than leaving every candidate in one group, the first candidate is used.
    """
    n = len(candidates)
    sampled = sample_pool(pool_ids, limit)
    worst = _partition_matrix(sampled, candidate_ids).max(axis=1)

    best_worst = int(worst.min())
    if best_worst >= n:
        return _Decision(candidates[0], "minimax", evaluated=len(sampled))

    is_candidate = np.zeros(CODE_SPACE_SIZE, dtype=bool)
    is_candidate[candidate_ids] = True

    ties = np.flatnonzero(worst == best_worst)
    tie_is_candidate = is_candidate[sampled[ties]]
    pick = ties[int(np.argmax(tie_is_candidate))] if tie_is_candidate.any() else ties[0]
    return _Decision(_code_at(sampled[pick]), "minimax", evaluated=len(sampled))


def _degenerate(candidates: Sequence[Code]) -> Optional[_Decision]:
    n = len(candidates)
    if n == 0:
        return _Decision(FALLBACK_GUESS, "no-candidates")
    if n == 1:
        return _Decision(candidates[0], "unique-solution")
    if n == 2:
        return _Decision(candidates[0], "direct")
    return None


# -----------------------------------------------------------------------------
# Strategies
# -----------------------------------------------------------------------------


def _decide_frequency_probe(
    candidates: Sequence[Code], all_codes: Sequence[Code], round_index: int
) -> _Decision:
    n = len(candidates)
    if round_index < len(PROBE_SEQUENCE) and n > PROBE_MIN_POOL:
        return _Decision(PROBE_SEQUENCE[round_index], "frequency-probe")

    candidate_ids = codes_to_indices(candidates)
    return _search_minimax(candidates, candidate_ids, candidate_ids, PROBE_FALLBACK_LIMIT)


def _decide_max_entropy(
    candidates: Sequence[Code], all_codes: Sequence[Code], round_index: int
) -> _Decision:
    n = len(candidates)
    candidate_ids = codes_to_indices(candidates)
    full_space = n <= ENTROPY_FULL_SPACE_MAX_POOL
    pool_ids = _space_indices(all_codes) if full_space else candidate_ids
    limit = ENTROPY_SMALL_POOL_LIMIT if n <= ENTROPY_SMALL_POOL else ENTROPY_LIMIT

    decision = _search_max_entropy(
        candidates,
        candidate_ids,
        pool_ids,
        limit,
        "max-entropy" if full_space else "entropy-sampled",
    )
    decision.full_space = full_space
    return decision


def _decide_minimax(
    candidates: Sequence[Code], all_codes: Sequence[Code], round_index: int
) -> _Decision:
    n = len(candidates)
    candidate_ids = codes_to_indices(candidates)
    full_space = n <= MINIMAX_FULL_SPACE_MAX_POOL
    pool_ids = _space_indices(all_codes) if full_space else candidate_ids
    limit = MINIMAX_FULL_SPACE_LIMIT if full_space else MINIMAX_LIMIT

    decision = _search_minimax(candidates, candidate_ids, pool_ids, limit)
    decision.full_space = full_space
    return decision


def _decide_hybrid(
    candidates: Sequence[Code], all_codes: Sequence[Code], round_index: int
) -> _Decision:
    n = len(candidates)

    # Phase 1: fixed probes while the pool is still huge
    if round_index < HYBRID_PROBE_ROUNDS and n > HYBRID_PROBE_MIN_POOL:
        return _Decision(PROBE_SEQUENCE[round_index], "frequency-probe")

    candidate_ids = codes_to_indices(candidates)

    # Phase 3: small pool, bound the worst case
    if n <= HYBRID_MINIMAX_MAX_POOL:
        full_space = n <= MINIMAX_FULL_SPACE_MAX_POOL
        pool_ids = _space_indices(all_codes) if full_space else candidate_ids
        limit = HYBRID_MINIMAX_FULL_SPACE_LIMIT if full_space else HYBRID_MINIMAX_LIMIT
        decision = _search_minimax(candidates, candidate_ids, pool_ids, limit)
        decision.full_space = full_space
        return decision

    # Phase 2: medium pool, entropy over the whole code space
    if n <= HYBRID_ENTROPY_FULL_SPACE_MAX_POOL:
        decision = _search_max_entropy(
            candidates,
            candidate_ids,
            _space_indices(all_codes),
            HYBRID_ENTROPY_FULL_SPACE_LIMIT,
            "max-entropy",
        )
        decision.full_space = True
        return decision

    # Large pool: entropy over a sample of the candidates only
    return _search_max_entropy(
        candidates, candidate_ids, candidate_ids, HYBRID_ENTROPY_SAMPLED_LIMIT, "entropy-sampled"
    )


_DECIDERS = {
    Strategy.FREQUENCY_PROBE: _decide_frequency_probe,
    Strategy.MAX_ENTROPY: _decide_max_entropy,
    Strategy.MINIMAX: _decide_minimax,
    Strategy.HYBRID: _decide_hybrid,
}


def choose_guess(
    strategy: Union[Strategy, str],
    candidates: Sequence[Code],
    all_codes: Optional[Sequence[Code]] = None,
    round_index: int = 0,
    history: Sequence[Round] = (),
    *,
    with_analysis: bool = False,
) -> StrategyChoice:
    """
    Choose the next guess with the given strategy.

    Args:
        strategy: Strategy to apply (enum member or its string value).
        candidates: Codes still consistent with every observed round.
        all_codes: Full code space; defaults to the cached space.
        round_index: Zero-based index of the round about to be played.
        history: Rounds played so far, used for the knowledge analysis.
        with_analysis: If True, attach a StrategyAnalysis to the result.

    Returns:
        The chosen guess and, if requested, its analysis.

    Raises:
        ValueError: If the strategy name is unknown.
    """
    strategy = Strategy(strategy)
    if all_codes is None:
        all_codes = generate_all_codes()

    decision = _degenerate(candidates)
    if decision is None:
        decision = _DECIDERS[strategy](candidates, all_codes, round_index)

    logger.debug(
        "%s round %d: %d candidates -> %s (%s)",
        strategy.value,
        round_index,
        len(candidates),
        code_to_string(decision.guess),
        decision.tag,
    )

    if not with_analysis:
        return StrategyChoice(decision.guess)
    return StrategyChoice(decision.guess, _build_analysis(decision, candidates, history))


def frequency_probe_guess(
    candidates: Sequence[Code],
    all_codes: Sequence[Code],
    round_index: int,
    history: Sequence[Round] = (),
) -> Code:
    """Structured probing: fixed probes first, then a candidate-only minimax."""
    return choose_guess(Strategy.FREQUENCY_PROBE, candidates, all_codes, round_index, history).guess


def max_entropy_guess(
    candidates: Sequence[Code],
    all_codes: Sequence[Code],
    round_index: int,
    history: Sequence[Round] = (),
) -> Code:
    """Maximum-entropy search over a strided sample of the search pool."""
    return choose_guess(Strategy.MAX_ENTROPY, candidates, all_codes, round_index, history).guess


def minimax_guess(
    candidates: Sequence[Code],
    all_codes: Sequence[Code],
    round_index: int,
    history: Sequence[Round] = (),
) -> Code:
    """Minimax search over a strided sample of the search pool."""
    return choose_guess(Strategy.MINIMAX, candidates, all_codes, round_index, history).guess


def hybrid_guess(
    candidates: Sequence[Code],
    all_codes: Sequence[Code],
    round_index: int,
    history: Sequence[Round] = (),
) -> Code:
    """Three-phase hybrid: probing, then entropy, then minimax."""
    return choose_guess(Strategy.HYBRID, candidates, all_codes, round_index, history).guess


def get_next_guess(
    candidates: Sequence[Code],
    all_codes: Sequence[Code],
    round_index: int,
    history: Sequence[Round],
) -> Tuple[Code, StrategyAnalysis]:
    """
    Suggest the hybrid strategy's next guess together with its analysis.

    This is the entry point for interactive play.

    Returns:
        Tuple of (guess, analysis).
    """
    choice = choose_guess(
        Strategy.HYBRID, candidates, all_codes, round_index, history, with_analysis=True
    )
    assert choice.analysis is not None
    return choice.guess, choice.analysis


# -----------------------------------------------------------------------------
# Analysis payload
# -----------------------------------------------------------------------------

_FEEDBACK_MEANINGS = {
    0: "the target contains none of the guessed digits",
    1: "one digit matches (counting repeats)",
    2: "two digits match",
    3: "three digits match",
    4: "all four digits match, positions may differ",
}

_STRATEGY_NAMES = {
    "no-candidates": "No candidates",
    "unique-solution": "Unique solution",
    "direct": "One of two",
    "frequency-probe": "Composition probe",
    "minimax": "Minimax",
    "max-entropy": "Maximum entropy",
    "entropy-sampled": "Sampled entropy",
}


def build_feedback_preview(guess: Code, candidates: Sequence[Code]) -> List[FeedbackPreview]:
    """List the remaining-candidate count for every feedback value that can occur."""
    partitions = compute_partitions(guess, candidates)
    return [
        FeedbackPreview(fb, remaining, _FEEDBACK_MEANINGS[fb])
        for fb, remaining in partitions.items()
    ]


def analyze_position_clues(candidates: Sequence[Code]) -> List[str]:
    """Describe, per slot, which digits are still possible when the pool is small."""
    clues: List[str] = []
    if len(candidates) > POSITION_CLUES_MAX_POOL:
        return clues

    for pos in range(CODE_LENGTH):
        possible = sorted({c[pos] for c in candidates})
        if len(possible) == 1:
            clues.append(f"slot {pos + 1} is locked to {possible[0]}")
        elif len(possible) <= 3:
            clues.append(f"slot {pos + 1} is one of {'/'.join(str(d) for d in possible)}")
        else:
            clues.append(f"slot {pos + 1} has {len(possible)} options")
    return clues


def _build_analysis(
    decision: _Decision, candidates: Sequence[Code], history: Sequence[Round]
) -> StrategyAnalysis:
    n = len(candidates)
    guess = decision.guess
    guess_text = code_to_string(guess)
    knowledge = analyze_knowledge(history)

    if decision.tag == "no-candidates":
        partitions: Dict[int, int] = {}
    elif decision.tag == "unique-solution":
        partitions = {MAX_FEEDBACK: 1}
    else:
        partitions = compute_partitions(guess, candidates)

    worst = max(partitions.values()) if partitions else 0
    best = min(partitions.values()) if partitions else 0
    reasoning: List[str] = []
    expected_reduction = n - worst
    position_clues = analyze_position_clues(candidates)

    if decision.tag == "no-candidates":
        reasoning.append("No code is consistent with the feedback so far; check the inputs.")
        rationale = f"Fallback guess {guess_text}."
        phase, phase_description = "Endgame check", "The candidate set is empty."
        expected_reduction = 0
    elif decision.tag == "unique-solution":
        reasoning.append("Only one candidate is left, verify it directly.")
        rationale = f"{guess_text} is the only remaining possibility."
        phase, phase_description = "Endgame check", "A single candidate remains."
        expected_reduction = 0
    elif decision.tag == "direct":
        reasoning.append(
            f"Two candidates remain: {code_to_string(candidates[0])} and "
            f"{code_to_string(candidates[1])}."
        )
        reasoning.append("Try the first; if it is wrong the other one is the answer.")
        rationale = f"Try {guess_text} first, otherwise it is the other one."
        phase, phase_description = "Endgame check", "At most one more guess after this."
        worst = best = expected_reduction = 1
    elif decision.tag == "frequency-probe":
        digits = ",".join(str(d) for d in sorted(set(guess)))
        reasoning.append(f"{n} codes are still possible; probe digit composition first.")
        reasoning.append(f"A feedback of k means k of the target's digits are in {{{digits}}}.")
        rationale = f"Structured probe {guess_text} covers digits {digits}."
        phase = "Phase 1: composition probing"
        phase_description = "Fixed probes reveal which digits the target uses at almost no cost."
        expected_reduction = 0
        position_clues = []
    elif decision.tag == "minimax":
        is_candidate = guess in set(candidates)
        reasoning.append(f"The pool has shrunk to {n}; minimise the worst case.")
        if knowledge.composition_known:
            reasoning.append("The digit composition is known; only the order is open.")
        reasoning.append(
            f"{guess_text} splits the pool into {len(partitions)} groups, "
            f"at most {worst} candidates remain."
        )
        if is_candidate:
            reasoning.append("The guess is itself a candidate and may win outright.")
        else:
            reasoning.append("The guess is not a candidate but separates the pool better.")
        rationale = f"{guess_text} has the smallest largest group ({worst}) among {n} candidates."
        if knowledge.composition_known:
            phase = "Phase 3: permutation check"
            phase_description = "Composition is known; lock down each position."
        else:
            phase = "Phase 2: closing in"
            phase_description = "Small pool, minimax guarantees steady progress."
    else:
        entropy = decision.entropy or 0.0
        efficiency = entropy / math.log2(MAX_FEEDBACK + 1) * 100
        reasoning.append(f"{n} candidates remain; maximise expected information.")
        reasoning.append(
            f"{guess_text} has entropy {entropy:.3f} bit over {len(partitions)} groups, "
            f"largest group {worst}."
        )
        reasoning.append(
            f"Theoretical maximum is {math.log2(MAX_FEEDBACK + 1):.3f} bit, "
            f"efficiency {efficiency:.1f}%."
        )
        rationale = f"{guess_text} has the highest entropy ({entropy:.2f} bit) of the sampled guesses."
        if decision.tag == "max-entropy":
            phase = "Phase 2: information gathering"
            phase_description = "Medium pool, maximum entropy over the whole code space."
        else:
            phase = "Phase 1: information gathering"
            phase_description = "Large pool, entropy over a sample of the candidates."
            position_clues = []

    return StrategyAnalysis(
        strategy=decision.tag,
        strategy_name=_STRATEGY_NAMES[decision.tag],
        candidates_before=n,
        candidates_remaining=n,
        expected_reduction=expected_reduction,
        worst_case_remaining=worst,
        best_case_remaining=best,
        partitions=partitions,
        knowledge=knowledge,
        reasoning=reasoning,
        guess_rationale=rationale,
        feedback_preview=build_feedback_preview(guess, candidates) if n else [],
        phase=phase,
        phase_description=phase_description,
        position_clues=position_clues,
        entropy=decision.entropy,
    )


# -----------------------------------------------------------------------------
# Single-game agent
# -----------------------------------------------------------------------------


class CodebreakerSolver:
    """
    Solving agent that plays one strategy against a Codebreaker game.

    The agent keeps the shrinking candidate set and the round history. After
    a miss it filters by the feedback and drops the guess itself, since the
    feedback alone cannot tell permutations of the target apart.
    """

    def __init__(
        self,
        game: Codebreaker,
        strategy: Union[Strategy, str] = Strategy.HYBRID,
        record_analysis: bool = True,
        all_codes: Optional[Sequence[Code]] = None,
    ) -> None:
        """
        Initialize a solving agent bound to a specific game instance.

        Args:
            game: The game engine to play against.
            strategy: Guess-selection strategy.
            record_analysis: If True, attach a StrategyAnalysis to every round.
                Set to False for benchmarks to improve performance.
            all_codes: Full code space; defaults to the cached space.

        Raises:
            ValueError: If the strategy name is unknown.
        """
        self.game = game
        self.strategy = Strategy(strategy)
        self.record_analysis = record_analysis
        self.all_codes: Sequence[Code] = (
            all_codes if all_codes is not None else generate_all_codes()
        )

        self.candidates: List[Code] = list(self.all_codes)
        self.history: List[Round] = []
        self.guesses: List[Code] = []

    def next_guess(self) -> StrategyChoice:
        """Ask the strategy for the guess of the upcoming round."""
        return choose_guess(
            self.strategy,
            self.candidates,
            self.all_codes,
            len(self.history),
            self.history,
            with_analysis=self.record_analysis,
        )

    def apply_feedback(self, guess: Code, feedback: int) -> List[Code]:
        """Narrow the candidates after a guess that was not an exact match."""
        self.candidates = exclude_code(filter_candidates(self.candidates, guess, feedback), guess)
        return self.candidates

    def _payload(self, reason: str) -> Dict[str, Any]:
        return {
            "strategy": self.strategy.value,
            "target": self.game.target,
            "steps": self.game.steps,
            "guesses": list(self.guesses),
            "rounds": self.history,
            "candidates_remaining": len(self.candidates),
            "reason": reason,
        }

    def solve(self) -> Tuple[int, Dict[str, Any]]:
        """
        Play until an exact match, an empty candidate set or the step cap.

        Returns:
            Tuple of (status, payload) where status is 1 (solved) or -1
            (contradiction or step cap). The payload's "reason" is one of
            "solved", "contradiction", "step_cap".
        """
        while True:
            choice = self.next_guess()
            guess = choice.guess
            round_index = len(self.history)

            status, payload = self.game.guess(guess)
            feedback = int(payload["feedback"])
            self.guesses.append(guess)
            self.history.append(
                Round(round_index, guess, feedback, choice.analysis, status == 1)
            )

            if status == 1:
                return 1, self._payload("solved")

            self.apply_feedback(guess, feedback)

            if not self.candidates:
                logger.warning(
                    "Candidate set became empty after %s (feedback %d) against %s",
                    code_to_string(guess),
                    feedback,
                    code_to_string(self.game.target),
                )
                return -1, self._payload("contradiction")

            if status == -1:
                logger.info(
                    "%s hit the step cap of %d on target %s",
                    self.strategy.value,
                    self.game.max_steps,
                    code_to_string(self.game.target),
                )
                return -1, self._payload("step_cap")

"""Per-digit frequency knowledge derived from the round history."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Sequence

from .utils import CODE_LENGTH, NUM_DIGITS

if TYPE_CHECKING:
    from .solver import Round


@dataclass
class DigitKnowledge:
    """What is known about how often one digit occurs in the target."""

    digit: int
    # None until the exact count is known
    confirmed_count: Optional[int] = None
    min_count: int = 0
    max_count: int = CODE_LENGTH


@dataclass
class KnowledgeState:
    """Aggregated digit knowledge for the whole target."""

    digits: List[DigitKnowledge]
    confirmed_digits: List[int] = field(default_factory=list)
    eliminated_digits: List[int] = field(default_factory=list)
    unknown_digits: List[int] = field(default_factory=list)
    confirmed_slots: int = 0
    remaining_slots: int = CODE_LENGTH
    composition_known: bool = False
    summary: str = ""


def analyze_knowledge(history: Sequence["Round"]) -> KnowledgeState:
    """
    Derive digit-frequency knowledge from every resolved round.

    Only monochromatic guesses (one digit repeated four times) are used: their
    feedback is exactly the count of that digit in the target. Mixed guesses
    are ignored. The state is rebuilt from scratch on every call.

    Args:
        history: All rounds played so far, oldest first. Rounds without
            feedback are skipped.

    Returns:
        The resulting KnowledgeState.
    """
    digits = [DigitKnowledge(digit=d) for d in range(NUM_DIGITS)]

    for round_ in history:
        feedback = round_.feedback
        if feedback is None:
            continue

        guess = round_.guess
        if len(set(guess)) == 1:
            entry = digits[guess[0]]
            entry.confirmed_count = feedback
            entry.min_count = feedback
            entry.max_count = feedback

    known_sum = sum(
        entry.confirmed_count for entry in digits if entry.confirmed_count is not None
    )
    remaining_slots = CODE_LENGTH - known_sum

    if remaining_slots == 0:
        for entry in digits:
            if entry.confirmed_count is None:
                entry.confirmed_count = 0
                entry.min_count = 0
                entry.max_count = 0
    else:
        for entry in digits:
            if entry.confirmed_count is None:
                entry.max_count = min(entry.max_count, max(remaining_slots, 0))

    confirmed: List[int] = []
    eliminated: List[int] = []
    unknown: List[int] = []

    for entry in digits:
        if entry.confirmed_count is not None:
            if entry.confirmed_count > 0:
                confirmed.append(entry.digit)
            else:
                eliminated.append(entry.digit)
        elif entry.max_count == 0:
            entry.confirmed_count = 0
            eliminated.append(entry.digit)
        else:
            unknown.append(entry.digit)

    composition_known = not unknown and remaining_slots == 0

    return KnowledgeState(
        digits=digits,
        confirmed_digits=confirmed,
        eliminated_digits=eliminated,
        unknown_digits=unknown,
        confirmed_slots=known_sum,
        remaining_slots=remaining_slots,
        composition_known=composition_known,
        summary=_summarize(digits, confirmed, eliminated, unknown, composition_known),
    )


def _summarize(
    digits: List[DigitKnowledge],
    confirmed: List[int],
    eliminated: List[int],
    unknown: List[int],
    composition_known: bool,
) -> str:
    parts: List[str] = []
    if confirmed:
        counts = ", ".join(f"{d}x{digits[d].confirmed_count}" for d in confirmed)
        parts.append(f"confirmed: {counts}")
    if eliminated:
        parts.append("eliminated: " + ", ".join(str(d) for d in eliminated))
    if unknown:
        parts.append("pending: " + ", ".join(str(d) for d in unknown))
    if composition_known:
        parts.append("composition fully known, only the order remains")
    return "  ".join(parts)

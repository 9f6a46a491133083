"""Utility functions and cached lookup tables for the codebreaker solver."""

from typing import Dict, Optional, Tuple

import numpy as np

Code = Tuple[int, int, int, int]

CODE_LENGTH = 4
NUM_DIGITS = 10
MAX_FEEDBACK = CODE_LENGTH
CODE_SPACE_SIZE = NUM_DIGITS**CODE_LENGTH

PLACE_VALUES = np.array([1000, 100, 10, 1], dtype=np.int64)

# Module-level caches, built once on first use and read-only afterwards.
_ALL_CODES_CACHE: Optional[Tuple[Code, ...]] = None
_TABLES_CACHE: Dict[str, np.ndarray] = {}


def get_all_codes() -> Tuple[Code, ...]:
    """
    Build and cache the full code space in lexicographic order.

    Returns:
        A tuple of all 10,000 codes, from (0, 0, 0, 0) to (9, 9, 9, 9). The
        same object is returned on every call.
    """
    global _ALL_CODES_CACHE
    if _ALL_CODES_CACHE is not None:
        return _ALL_CODES_CACHE

    _ALL_CODES_CACHE = tuple(
        (a, b, c, d)
        for a in range(NUM_DIGITS)
        for b in range(NUM_DIGITS)
        for c in range(NUM_DIGITS)
        for d in range(NUM_DIGITS)
    )
    return _ALL_CODES_CACHE


def _build_tables() -> None:
    digits = np.array(get_all_codes(), dtype=np.int64)
    histograms = np.zeros((CODE_SPACE_SIZE, NUM_DIGITS), dtype=np.int64)
    for pos in range(CODE_LENGTH):
        np.add.at(histograms, (np.arange(CODE_SPACE_SIZE), digits[:, pos]), 1)

    # Feedback only depends on each side's digit multiset, so 10,000 codes
    # collapse into 715 classes.
    classes, inverse = np.unique(histograms, axis=0, return_inverse=True)
    table = np.minimum(classes[:, None, :], classes[None, :, :]).sum(axis=2)

    _TABLES_CACHE["multiset_ids"] = inverse.reshape(-1)
    _TABLES_CACHE["feedback_table"] = table.astype(np.int8)


def get_multiset_ids() -> np.ndarray:
    """
    Return the multiset class id of every code, indexed by code index.

    Returns:
        Integer array of shape (10000,).
    """
    if "multiset_ids" not in _TABLES_CACHE:
        _build_tables()
    return _TABLES_CACHE["multiset_ids"]


def get_feedback_table() -> np.ndarray:
    """
    Return the feedback between every pair of multiset classes.

    Returns:
        Square int8 array; entry [i, j] is the feedback of any code of class i
        against any code of class j.
    """
    if "feedback_table" not in _TABLES_CACHE:
        _build_tables()
    return _TABLES_CACHE["feedback_table"]

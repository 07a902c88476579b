"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/filter.py
Eligibility rules deciding whether a directory entry takes part in hashing.
Pure functions: no I/O, no logging, no shared state.
"""

import os
import re
from typing import Iterable, List, Optional, Pattern, Sequence

from dedupscan.core.models import Eligibility


def compile_patterns(patterns: Iterable[str]) -> List[Pattern[str]]:
    """
    Compiles name patterns (regular expressions).
    Raises ValueError naming the offending expression.
    """
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise ValueError(f"Invalid regular expression '{pattern}': {e}") from e
    return compiled


def name_matches(path: str, patterns: Optional[Sequence[Pattern[str]]]) -> bool:
    """
    True if the base name of path matches at least one pattern.
    No patterns means every name matches.
    """
    if not patterns:
        return True
    name = os.path.basename(path)
    return any(p.search(name) for p in patterns)


def classify(
        path: str,
        size: int,
        is_regular_file: bool,
        patterns: Optional[Sequence[Pattern[str]]] = None,
        max_size: int = 0
) -> Eligibility:
    """
    Applies the rules in order:
    non-regular entries, empty files, files above the size ceiling (0 = no ceiling),
    then the name patterns.
    """
    if not is_regular_file:
        return Eligibility.NOT_REGULAR
    if size == 0:
        return Eligibility.ZERO_LENGTH
    if max_size > 0 and size > max_size:
        return Eligibility.OVERSIZE
    if not name_matches(path, patterns):
        return Eligibility.NAME_MISMATCH
    return Eligibility.ELIGIBLE


def eligible(
        path: str,
        size: int,
        is_regular_file: bool,
        patterns: Optional[Sequence[Pattern[str]]] = None,
        max_size: int = 0
) -> bool:
    return classify(path, size, is_regular_file, patterns, max_size) is Eligibility.ELIGIBLE

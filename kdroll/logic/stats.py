"""Elementary statistics over numeric sequences."""
import math
import operator
from collections import Counter
from collections.abc import Sequence
from functools import reduce

from kdroll.logic.number import floating_point_fix, scale


def mean(arr: Sequence[float]) -> float:
    """Statistical mean; NaN for an empty sequence."""
    if not arr:
        return math.nan
    # Plain left-to-right accumulation, no compensated summation
    total = reduce(operator.add, arr)
    return floating_point_fix(total / len(arr))


def median(arr: Sequence[float]) -> float:
    """Statistical median; NaN for an empty sequence. ``arr`` is not mutated."""
    if not arr:
        return math.nan
    ordered = sorted(arr)
    n = len(ordered)
    return floating_point_fix((ordered[(n - 1) >> 1] + ordered[n >> 1]) / 2)


def modes(arr: Sequence[float]) -> list[float]:
    """Every most frequent value, ascending; empty for an empty sequence."""
    if not arr:
        return []
    counts = Counter(arr)
    top = max(counts.values())
    return [floating_point_fix(value) for value in sorted(counts) if counts[value] == top]


def standard_deviation(arr: Sequence[float]) -> float:
    """
    Population standard deviation normalized against the sequence maximum.

    The root of the mean squared deviation is scaled from [0, max(arr)]
    to [0, 1]. A sequence with no spread returns 0.
    """
    if not arr:
        return math.nan
    fix = floating_point_fix
    avg = mean(arr)
    sq_diffs = [fix(fix(value - avg) * fix(value - avg)) for value in arr]
    root = fix(math.sqrt(mean(sq_diffs)))
    if root == 0:
        return 0.0
    return scale(root, (0, max(arr)), (0, 1))

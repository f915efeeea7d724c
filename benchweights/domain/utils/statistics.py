"""
Order statistics for benchmark samples.

Benchmark values are non-negative integers, and fitted coefficients are
reported as integers too. The helpers here keep that integer contract:
medians pick an element of the sample rather than averaging, and fitted
floats are converted with ``round_coefficient``.
"""

import logging
import math
from collections import Counter
from typing import Hashable, List, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def median(values: Sequence[T]) -> T:
    """
    Return the upper median of ``values``.

    For an even number of samples the element right of the middle is used,
    so the result is always one of the observed values.

    Raises
    ------
    ValueError
        If ``values`` is empty.

    Examples
    --------
    >>> median([5, 1, 3])
    3
    >>> median([4, 1, 3, 2])
    3
    """
    if not values:
        raise ValueError("median of empty sample")
    ordered = sorted(values)  # type: ignore[type-var]
    return ordered[len(ordered) // 2]


def trim_interquartile(values: Sequence[int]) -> List[int]:
    """
    Sort ``values`` and drop the lowest and highest quarter.

    Fewer than four samples are returned sorted but untrimmed.

    Examples
    --------
    >>> trim_interquartile([9, 1, 5, 3, 7, 100, 2, 4])
    [3, 4, 5, 7]
    """
    ordered = sorted(values)
    quarter = len(ordered) // 4
    return ordered[quarter : len(ordered) - quarter]


def modal_point(points: Sequence[K]) -> K:
    """
    Return the most frequent point.

    Ties are broken in favour of the largest point so the choice does not
    depend on sample order.
    """
    if not points:
        raise ValueError("modal point of empty sample")
    counted = Counter(points)
    best = None
    for point in sorted(counted):  # type: ignore[type-var]
        if best is None or counted[point] >= counted[best]:
            best = point
    return best  # type: ignore[return-value]


def round_coefficient(value: float, offset: int = 0) -> int:
    """
    Round a fitted coefficient half-up, add ``offset`` and clamp at zero.

    ``offset`` is an exact integer the fit was shifted by; it is added after
    rounding so it never passes through float arithmetic.

    Non-finite input maps to 0 and is logged, since it only arises from a
    degenerate fit that already produced an unusable coefficient.

    Examples
    --------
    >>> round_coefficient(2.9999999997)
    3
    >>> round_coefficient(-4.2)
    0
    >>> round_coefficient(-2.0, offset=2**60 + 3)
    1152921504606846977
    """
    if not math.isfinite(value):
        logger.warning("statistics.non_finite_coefficient", extra={"value": value})
        return 0
    return max(0, offset + math.floor(value + 0.5))


def truncate_coefficient(value: float) -> int:
    """Truncate a fitted coefficient toward zero and clamp it at zero."""
    if not math.isfinite(value):
        logger.warning("statistics.non_finite_coefficient", extra={"value": value})
        return 0
    return max(0, int(value))

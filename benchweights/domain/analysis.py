"""
Cost model fitting for benchmark samples.

Each benchmarked operation is modelled as a linear function of its varied
components::

    value = base + sum(slope_i * component_i)

Three strategies are available, selected through ``AnalysisChoice``:

- ``min-squares``: ordinary least squares over inter-quartile trimmed samples,
  with standard errors for every slope (the default).
- ``median-slopes``: median of pairwise slopes per component, robust to
  outliers but without error estimates.
- ``max``: the element-wise maximum of both, for a conservative model.

All coefficients are non-negative integers; see
``domain.utils.statistics.round_coefficient``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from itertools import combinations
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..errors import AnalysisError, ConfigError
from .models import BenchmarkResult
from .utils.statistics import (
    median,
    modal_point,
    round_coefficient,
    trim_interquartile,
    truncate_coefficient,
)

logger = logging.getLogger(__name__)


class AnalysisChoice(Enum):
    """Strategy used to fit the cost model of every operation."""

    MIN_SQUARES = "min-squares"
    MEDIAN_SLOPES = "median-slopes"
    MAX = "max"

    @classmethod
    def from_name(cls, name: Optional[str]) -> "AnalysisChoice":
        """Resolve a user-supplied strategy name; ``None`` means the default.

        Raises
        ------
        ConfigError
            If ``name`` is not a recognized strategy.
        """
        if name is None:
            return cls.MIN_SQUARES
        normalized = name.strip().lower().replace("_", "-")
        for choice in cls:
            if choice.value == normalized:
                return choice
        raise ConfigError(
            f"Invalid analysis choice '{name}'; "
            f"expected one of: {', '.join(c.value for c in cls)}"
        )


class BenchmarkSelector(Enum):
    """Metric of a ``BenchmarkResult`` that a model is fitted to."""

    EXTRINSIC_TIME = "extrinsic_time"
    STORAGE_ROOT_TIME = "storage_root_time"
    READS = "reads"
    REPEAT_READS = "repeat_reads"
    WRITES = "writes"
    REPEAT_WRITES = "repeat_writes"
    PROOF_SIZE = "proof_size"

    def value_of(self, result: BenchmarkResult) -> int:
        return getattr(result, self.value)


@dataclass
class Analysis:
    """Fitted linear model for one metric of one operation.

    Attributes
    ----------
    base : int
        Intercept of the model.
    slopes : List[int]
        Per-component slope, aligned with ``names``.
    names : List[str]
        Component names the model was fitted over.
    errors : List[int] or None
        Standard error of each slope, when the strategy provides one.
    """

    base: int
    slopes: List[int] = field(default_factory=list)
    names: List[str] = field(default_factory=list)
    errors: Optional[List[int]] = None

    def slope_errors(self) -> List[int]:
        return list(self.errors) if self.errors is not None else [0] * len(self.slopes)

    @classmethod
    def median_value(
        cls, results: Sequence[BenchmarkResult], selector: BenchmarkSelector
    ) -> "Analysis":
        """Model without components: the base is the median sample."""
        if not results:
            raise AnalysisError("cannot analyse an empty sample set")
        return cls(base=median([selector.value_of(r) for r in results]))

    @classmethod
    def min_squares_iqr(
        cls,
        results: Sequence[BenchmarkResult],
        selector: BenchmarkSelector,
        names: Optional[Sequence[str]] = None,
    ) -> "Analysis":
        """Least squares fit over inter-quartile trimmed samples.

        Samples are grouped by their component point and the outer quarters
        of each group are discarded before fitting. Standard errors come
        from the residual variance of the fit.

        The fit runs in float64 relative to the smallest selected sample, so
        the base stays exact for large metrics while slopes and the spread
        between samples are exact up to 2**53.

        Raises
        ------
        AnalysisError
            If the design is rank deficient, e.g. a component has a single
            distinct value or two components always move together.
        """
        names = _component_names(results, names)
        if not names:
            return cls.median_value(results, selector)

        by_point: Dict[Tuple[int, ...], List[int]] = {}
        for result in results:
            point = tuple(result.component_value(n) for n in names)
            by_point.setdefault(point, []).append(selector.value_of(result))

        rows: List[Tuple[int, ...]] = []
        ys: List[int] = []
        for point in sorted(by_point):
            for value in trim_interquartile(by_point[point]):
                rows.append(point)
                ys.append(value)

        design = np.column_stack(
            [np.ones(len(rows)), np.asarray(rows, dtype=np.float64)]
        )
        # float64 is exact only below 2**53; fit relative to the smallest sample.
        offset = min(ys)
        target = np.asarray([y - offset for y in ys], dtype=np.float64)
        n_samples, n_params = design.shape

        coefficients, _, rank, _ = np.linalg.lstsq(design, target, rcond=None)
        if rank < n_params:
            raise AnalysisError(
                f"cannot fit {selector.value} over components {list(names)}: "
                f"rank {rank} < {n_params} with {n_samples} samples"
            )

        residuals = target - design @ coefficients
        dof = n_samples - n_params
        variance = float(residuals @ residuals) / dof if dof > 0 else 0.0
        covariance = variance * np.linalg.inv(design.T @ design)
        std_errors = np.sqrt(np.clip(np.diag(covariance), 0.0, None))

        logger.debug(
            "analysis.min_squares",
            extra={
                "selector": selector.value,
                "components": list(names),
                "samples": n_samples,
                "coefficients": coefficients.tolist(),
            },
        )
        return cls(
            base=round_coefficient(float(coefficients[0]), offset=offset),
            slopes=[round_coefficient(float(c)) for c in coefficients[1:]],
            names=list(names),
            errors=[round_coefficient(float(e)) for e in std_errors[1:]],
        )

    @classmethod
    def median_slopes(
        cls,
        results: Sequence[BenchmarkResult],
        selector: BenchmarkSelector,
        names: Optional[Sequence[str]] = None,
    ) -> "Analysis":
        """Median-of-pairwise-slopes fit, one component at a time.

        For every component the other components are pinned to their most
        common values; the slope is the median of all pairwise slopes among
        the remaining samples and the offset the median residual. The base is
        then corrected for the contribution of the pinned components.

        Raises
        ------
        AnalysisError
            If a component has fewer than two distinct values among the
            samples where the other components are pinned.
        """
        names = _component_names(results, names)
        if not names:
            return cls.median_value(results, selector)

        points = [tuple(r.component_value(n) for n in names) for r in results]
        values = [selector.value_of(r) for r in results]

        fits: List[Tuple[float, float]] = []
        pinned: List[Tuple[int, ...]] = []
        for i, name in enumerate(names):
            others = modal_point([p[:i] + (0,) + p[i + 1 :] for p in points])
            pairs = [
                (p[i], v)
                for p, v in zip(points, values)
                if all(j == i or p[j] == others[j] for j in range(len(names)))
            ]
            slopes = sorted(
                (y1 - y2) / (x1 - x2)
                for (x1, y1), (x2, y2) in combinations(pairs, 2)
                if x1 != x2
            )
            if not slopes:
                raise AnalysisError(
                    f"cannot fit {selector.value}: component '{name}' "
                    "has a single value where the others are fixed"
                )
            slope = slopes[len(slopes) // 2]
            offset = median([y - slope * x for x, y in pairs])
            fits.append((offset, slope))
            pinned.append(others)

        corrected = []
        for i, ((offset, slope), others) in enumerate(zip(fits, pinned)):
            over = sum(fits[j][1] * v for j, v in enumerate(others) if j != i)
            corrected.append((offset - over, slope))

        return cls(
            base=truncate_coefficient(corrected[0][0]),
            slopes=[truncate_coefficient(slope) for _, slope in corrected],
            names=list(names),
        )

    @classmethod
    def max(
        cls,
        results: Sequence[BenchmarkResult],
        selector: BenchmarkSelector,
        names: Optional[Sequence[str]] = None,
    ) -> "Analysis":
        """Element-wise maximum of the least squares and median slopes fits."""
        squares = cls.min_squares_iqr(results, selector, names)
        slopes = cls.median_slopes(results, selector, names)
        return cls(
            base=max(squares.base, slopes.base),
            slopes=[max(a, b) for a, b in zip(squares.slopes, slopes.slopes)],
            names=squares.names,
            errors=squares.errors,
        )


AnalysisFunction = Callable[
    [Sequence[BenchmarkResult], BenchmarkSelector, Optional[Sequence[str]]],
    Analysis,
]


def analysis_function(choice: AnalysisChoice) -> AnalysisFunction:
    """Return the fitting function implementing ``choice``."""
    if choice is AnalysisChoice.MEDIAN_SLOPES:
        return Analysis.median_slopes
    if choice is AnalysisChoice.MAX:
        return Analysis.max
    return Analysis.min_squares_iqr


def _component_names(
    results: Sequence[BenchmarkResult], names: Optional[Sequence[str]]
) -> List[str]:
    if not results:
        raise AnalysisError("cannot analyse an empty sample set")
    if names is None:
        return results[0].component_names()
    return list(names)

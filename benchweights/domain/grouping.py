"""
Grouping of measurement batches into per-pallet benchmark reports.

``map_results`` is a pure transform: it classifies the components of every
batch, fits the cost models through the selected analysis strategy and
collects the resulting ``BenchmarkData`` by (pallet, instance). No I/O
happens here, so the output can be checked against literal expectations.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence, Set

from ..errors import AnalysisError
from .analysis import Analysis, AnalysisChoice, BenchmarkSelector, analysis_function
from .models import (
    BenchmarkData,
    Component,
    ComponentSlope,
    GroupKey,
    MeasurementBatch,
    ResultGroups,
)

logger = logging.getLogger(__name__)

# Harness time unit to weight unit.
WEIGHT_PER_TIME_UNIT = 1_000


def classify_components(batch: MeasurementBatch) -> List[Component]:
    """
    Report every declared parameter and whether it was varied.

    A parameter is used when at least two samples assign it different
    values. Order is the order of first appearance across the samples, which
    templates rely on to render function arguments positionally.

    Examples
    --------
    Samples ``[(a, 0), (z, 0)] .. [(a, 4), (z, 0)]`` classify as
    ``[Component(a, used), Component(z, unused)]``.
    """
    seen: Dict[str, Set[int]] = {}
    for sample in batch.time_results:
        for name, value in sample.components:
            seen.setdefault(name, set()).add(value)
    return [Component(name=name, is_used=len(values) > 1) for name, values in seen.items()]


def get_benchmark_data(
    batch: MeasurementBatch, analysis_choice: AnalysisChoice
) -> BenchmarkData:
    """Fit time, read and write models for one batch and build its report."""
    components = classify_components(batch)
    used = [c.name for c in components if c.is_used]
    fit = analysis_function(analysis_choice)

    extrinsic_time = fit(batch.time_results, BenchmarkSelector.EXTRINSIC_TIME, used)
    reads = fit(batch.db_samples, BenchmarkSelector.READS, used)
    writes = fit(batch.db_samples, BenchmarkSelector.WRITES, used)

    return BenchmarkData(
        name=batch.benchmark,
        components=components,
        base_weight=extrinsic_time.base * WEIGHT_PER_TIME_UNIT,
        component_weight=_component_slopes(extrinsic_time, WEIGHT_PER_TIME_UNIT),
        base_reads=reads.base,
        component_reads=_component_slopes(reads),
        base_writes=writes.base,
        component_writes=_component_slopes(writes),
    )


def _component_slopes(analysis: Analysis, scale: int = 1) -> List[ComponentSlope]:
    return [
        ComponentSlope(name=name, slope=slope * scale, error=error * scale)
        for name, slope, error in zip(
            analysis.names, analysis.slopes, analysis.slope_errors()
        )
    ]


def map_results(
    batches: Sequence[MeasurementBatch],
    analysis_choice: AnalysisChoice = AnalysisChoice.MIN_SQUARES,
) -> ResultGroups:
    """
    Group batches by (pallet, instance) and fit every operation.

    Groups appear in order of first occurrence and operations keep the order
    of their batches, even when batches of different groups are interleaved.

    Raises
    ------
    AnalysisError
        If ``batches`` is empty or an operation cannot be fitted.
    """
    if not batches:
        raise AnalysisError("empty batches")

    all_benchmarks: ResultGroups = {}
    for batch in batches:
        key = GroupKey(batch.pallet, batch.instance)
        try:
            data = get_benchmark_data(batch, analysis_choice)
        except AnalysisError:
            logger.error(
                "grouping.analysis_failed",
                extra={
                    "pallet": batch.pallet,
                    "instance": batch.instance,
                    "benchmark": batch.benchmark,
                    "analysis": analysis_choice.value,
                },
            )
            raise
        all_benchmarks.setdefault(key, []).append(data)

    logger.debug(
        "grouping.complete",
        extra={
            "groups": len(all_benchmarks),
            "benchmarks": sum(len(v) for v in all_benchmarks.values()),
        },
    )
    return all_benchmarks

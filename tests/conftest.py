"""Pytest configuration for test suite.

Ensures the project root is on ``sys.path`` so imports like
``import benchweights`` resolve correctly regardless of the working directory
pytest chooses, and provides builders for benchmark batches.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest


def _ensure_project_root_on_syspath() -> None:
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        # Prepend to prefer local sources over site-packages
        sys.path.insert(0, project_root_str)


_ensure_project_root_on_syspath()

from benchweights.domain.models import (  # noqa: E402
    BenchmarkResult,
    MeasurementBatch,
    RunMetadata,
)


def build_batch(
    pallet: str,
    benchmark: str,
    param: str,
    base: int,
    slope: int,
    instance: str = "instance",
) -> MeasurementBatch:
    """Five samples where every metric is ``base + slope * param``.

    A second parameter ``z`` is declared but pinned at 0.
    """
    results = [
        BenchmarkResult(
            components=[(param, i), ("z", 0)],
            extrinsic_time=base + slope * i,
            storage_root_time=base + slope * i,
            reads=base + slope * i,
            repeat_reads=0,
            writes=base + slope * i,
            repeat_writes=0,
            proof_size=0,
        )
        for i in range(5)
    ]
    return MeasurementBatch(
        pallet=pallet,
        instance=instance,
        benchmark=benchmark,
        time_results=results,
        db_results=results,
    )


@pytest.fixture
def make_batch() -> Callable[..., MeasurementBatch]:
    return build_batch


@pytest.fixture
def sample_batches():
    """The three-batch example: two pallets, one instance each."""
    return [
        build_batch("first", "first", "a", 10, 3),
        build_batch("first", "second", "b", 9, 2),
        build_batch("second", "first", "c", 3, 4),
    ]


@pytest.fixture
def run_metadata() -> RunMetadata:
    return RunMetadata(
        date="2021-06-01",
        args=["benchweights", "--input", "results.json"],
        version="1.2.3",
    )

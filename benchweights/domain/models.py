"""Canonical data model for benchmark batches and fitted reports.

These Pydantic models describe the raw measurement batches produced by the
benchmarking harness and the per-operation reports derived from them. Raw
input models are frozen; derived models are plain value records that only
live for the duration of one generation run.
"""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..__version__ import __version__


class BenchmarkResult(BaseModel):
    """Single sample of one benchmarked operation.

    Attributes
    ----------
    components: List[Tuple[str, int]]
        Parameter assignment used for this sample, e.g. ``[("a", 3), ("z", 0)]``.
    extrinsic_time: int
        Execution time of the operation in the harness' native unit.
    storage_root_time: int
        Time spent computing the storage root after execution.
    reads, repeat_reads, writes, repeat_writes: int
        Database access counters.
    proof_size: int
        Size of the storage proof recorded for the sample.
    """

    model_config = ConfigDict(frozen=True)

    components: List[Tuple[str, int]] = Field(default_factory=list)
    extrinsic_time: int = Field(0, ge=0)
    storage_root_time: int = Field(0, ge=0)
    reads: int = Field(0, ge=0)
    repeat_reads: int = Field(0, ge=0)
    writes: int = Field(0, ge=0)
    repeat_writes: int = Field(0, ge=0)
    proof_size: int = Field(0, ge=0)

    def component_names(self) -> List[str]:
        return [name for name, _ in self.components]

    def component_value(self, name: str) -> int:
        """Return the value assigned to ``name``; undeclared parameters read as 0."""
        for component, value in self.components:
            if component == name:
                return value
        return 0


class MeasurementBatch(BaseModel):
    """All samples collected for one pallet/instance/benchmark triple.

    Some harnesses run timing and database passes separately; ``db_results``
    carries the database pass when present, otherwise ``time_results`` is used
    for both.
    """

    model_config = ConfigDict(frozen=True)

    pallet: str
    instance: str
    benchmark: str
    time_results: List[BenchmarkResult] = Field(..., min_length=1)
    db_results: Optional[List[BenchmarkResult]] = None

    @property
    def db_samples(self) -> List[BenchmarkResult]:
        return self.db_results if self.db_results else self.time_results

    @model_validator(mode="after")
    def _validate_parameter_set(self) -> "MeasurementBatch":
        declared = set(self.time_results[0].component_names())
        for sample in [*self.time_results, *(self.db_results or [])]:
            if set(sample.component_names()) != declared:
                raise ValueError(
                    f"benchmark '{self.benchmark}' mixes parameter sets: "
                    f"{sorted(declared)} vs {sorted(sample.component_names())}"
                )
        return self


class StorageInfo(BaseModel):
    """Storage item metadata, passed verbatim to the templates."""

    model_config = ConfigDict(extra="allow")

    pallet_name: str = ""
    storage_name: str = ""
    prefix: str = ""
    max_values: Optional[int] = None
    max_size: Optional[int] = None


class Component(BaseModel):
    """Declared benchmark parameter and whether it was actually varied."""

    name: str
    is_used: bool


class ComponentSlope(BaseModel):
    """Fitted sensitivity of one metric to one component."""

    name: str
    slope: int = Field(..., ge=0)
    error: int = Field(0, ge=0)


class BenchmarkData(BaseModel):
    """Fitted cost model for one operation, ready for rendering.

    Weight fields are already scaled to the generated-code unit; read and
    write counts are left untouched.
    """

    name: str
    components: List[Component] = Field(default_factory=list)
    base_weight: int = 0
    component_weight: List[ComponentSlope] = Field(default_factory=list)
    base_reads: int = 0
    component_reads: List[ComponentSlope] = Field(default_factory=list)
    base_writes: int = 0
    component_writes: List[ComponentSlope] = Field(default_factory=list)


class GroupKey(NamedTuple):
    """Hashable (pallet, instance) key used to group results."""

    pallet: str
    instance: str


ResultGroups = Dict[GroupKey, List[BenchmarkData]]


class OutputMode(Enum):
    """Rendering mode; decides the file extension and default template."""

    SOURCE = "rs"
    HTML = "html"

    @property
    def extension(self) -> str:
        return f".{self.value}"

    @property
    def default_template(self) -> str:
        if self is OutputMode.HTML:
            return "report.html.j2"
        return "weights.rs.j2"

    @property
    def autoescape(self) -> bool:
        return self is OutputMode.HTML


class OutputTarget(BaseModel):
    """Resolved output file for a result group."""

    model_config = ConfigDict(frozen=True)

    path: Path
    mode: OutputMode


class RunMetadata(BaseModel):
    """Generation metadata captured once per run.

    Attributes
    ----------
    date: str
        UTC date of the run, formatted ``YYYY-MM-DD``.
    args: List[str]
        Full invocation argument list.
    version: str
        Version of this package, embedded in the artifacts.
    """

    model_config = ConfigDict(frozen=True)

    date: str
    args: List[str] = Field(default_factory=list)
    version: str = __version__

    @classmethod
    def capture(cls, args: Optional[List[str]] = None) -> "RunMetadata":
        return cls(
            date=datetime.now(timezone.utc).strftime("%Y-%m-%d"),
            args=list(sys.argv if args is None else args),
            version=__version__,
        )


class CmdData(BaseModel):
    """Benchmark command parameters echoed into generated files."""

    steps: int = 1
    repeat: int = 1
    lowest_range_values: List[int] = Field(default_factory=list)
    highest_range_values: List[int] = Field(default_factory=list)
    execution: str = "Native"
    wasm_execution: str = "Interpreted"
    chain: str = "dev"
    db_cache: int = 128
    analysis_choice: str = "min-squares"


class TemplateData(BaseModel):
    """Final record handed to the template renderer for one result group."""

    args: List[str]
    date: str
    version: str
    pallet: str
    instance: str
    header: str = ""
    cmd: CmdData
    storage_info: List[StorageInfo] = Field(default_factory=list)
    benchmarks: List[BenchmarkData]

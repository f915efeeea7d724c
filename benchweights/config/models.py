"""Config models and loader.

This module defines Pydantic models for file- and environment-based
configuration. JSON parsing prefers `orjson` when available for speed and
lower memory usage, but falls back to the Python standard library's `json`
module so `orjson` stays an optional extra.
"""

from __future__ import annotations

import json as _json
from pathlib import Path
from typing import Any, Callable, List, Optional

try:
    import orjson as _orjson_mod  # type: ignore[assignment]
except ImportError:  # pragma: no cover - optional dependency
    _orjson_mod = None  # type: ignore[assignment]
    _loads_orjson: Optional[Callable[[bytes], Any]] = None
else:

    def _loads_orjson(buf: bytes) -> Any:
        loader = getattr(_orjson_mod, "loads")  # type: ignore[assignment]
        return loader(buf)


from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.analysis import AnalysisChoice
from ..domain.models import CmdData
from ..errors import ConfigError


def loads_json(raw: bytes) -> Any:
    """Parse a JSON document, using `orjson` when it is installed.

    Raises
    ------
    ConfigError
        If ``raw`` is not valid JSON.
    """
    try:
        if _loads_orjson is not None:
            return _loads_orjson(raw)
        return _json.loads(raw.decode("utf-8"))
    except ValueError as exc:  # orjson.JSONDecodeError subclasses ValueError
        raise ConfigError(f"invalid JSON document: {exc}") from exc


class BenchmarkCmd(BaseModel):
    """Options of the benchmark command that drive artifact generation.

    Attributes
    ----------
    template: Optional[Path]
        Template file overriding the built-in template for the output mode.
    header: Optional[Path]
        File whose text is placed at the top of every generated artifact.
    output_analysis: Optional[str]
        Fitting strategy name ("min-squares", "median-slopes", "max").
        Defaults to "min-squares".

    The remaining fields describe how the benchmarks were run and are only
    echoed into the generated files.
    """

    template: Optional[Path] = Field(None, description="Custom template file")
    header: Optional[Path] = Field(None, description="Header file prepended to output")
    output_analysis: Optional[str] = Field(
        None, description="Analysis strategy: min-squares, median-slopes or max"
    )
    steps: int = Field(1, ge=1)
    repeat: int = Field(1, ge=1)
    lowest_range_values: List[int] = Field(default_factory=list)
    highest_range_values: List[int] = Field(default_factory=list)
    execution: str = Field("Native")
    wasm_execution: str = Field("Interpreted")
    chain: str = Field("dev")
    db_cache: int = Field(128, ge=0)

    def analysis_choice(self) -> AnalysisChoice:
        """Resolve ``output_analysis``; raises ConfigError when unrecognized."""
        return AnalysisChoice.from_name(self.output_analysis)

    def cmd_data(self) -> CmdData:
        return CmdData(
            steps=self.steps,
            repeat=self.repeat,
            lowest_range_values=list(self.lowest_range_values),
            highest_range_values=list(self.highest_range_values),
            execution=self.execution,
            wasm_execution=self.wasm_execution,
            chain=self.chain,
            db_cache=self.db_cache,
            analysis_choice=self.analysis_choice().value,
        )


class AppConfig(BaseModel):
    """Top-level configuration file.

    Attributes
    ----------
    cmd: BenchmarkCmd
        Benchmark command options; CLI flags override these.
    html: bool
        Render HTML reports instead of weight source files.
    """

    cmd: BenchmarkCmd = Field(default_factory=BenchmarkCmd)
    html: bool = False

    @staticmethod
    def load(path: Path) -> "AppConfig":
        """Load application config from a JSON file.

        Raises
        ------
        OSError
            If the file cannot be read.
        ConfigError
            If the content is not valid JSON or fails validation.
        """
        raw = path.read_bytes()
        try:
            return AppConfig.model_validate(loads_json(raw))
        except ValidationError as exc:
            raise ConfigError(f"invalid config file {path}: {exc}") from exc


class EnvSettings(BaseSettings):
    """Environment-driven settings and .env support.

    Attributes
    ----------
    log_level: str
        Logging level name (e.g., "DEBUG", "INFO"). Defaults to "INFO".
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="BENCHWEIGHTS_", extra="ignore"
    )

    log_level: str = Field("INFO")

"""Writes benchmark results to generated weight files or HTML reports.

The run is split into four phases: configure (analysis choice, template,
header, run metadata), group and analyze (``map_results``), name
(``output_target``) and render/write. Only the last phase touches the output
directory, and groups are written one after another: a failure stops the run
but leaves files of earlier groups in place.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from ..config.models import BenchmarkCmd
from ..domain.grouping import map_results
from ..domain.models import (
    MeasurementBatch,
    OutputMode,
    RunMetadata,
    StorageInfo,
    TemplateData,
)
from ..errors import ArtifactWriteError, RenderError, TemplateIOError
from .naming import output_target
from .render import Renderer, TemplateRenderer, default_template

logger = logging.getLogger(__name__)


def _read_text(path: Path, what: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise TemplateIOError(f"cannot read {what} file {path}: {exc}") from exc


def write_results(
    batches: Sequence[MeasurementBatch],
    storage_info: Sequence[StorageInfo],
    path: Path,
    cmd: BenchmarkCmd,
    mode: OutputMode = OutputMode.SOURCE,
    metadata: Optional[RunMetadata] = None,
    renderer: Optional[Renderer] = None,
) -> List[Path]:
    """Fit, render and write one artifact per (pallet, instance) group.

    Parameters
    ----------
    batches: Sequence[MeasurementBatch]
        Raw results from the benchmarking harness.
    storage_info: Sequence[StorageInfo]
        Storage metadata passed through to the templates.
    path: Path
        Output directory, or a single file every group is written to.
    cmd: BenchmarkCmd
        Template, header and analysis options.
    mode: OutputMode
        Generate weight source files or HTML reports.
    metadata: Optional[RunMetadata]
        Run metadata; captured from the current process when omitted.
    renderer: Optional[Renderer]
        Template engine; defaults to ``TemplateRenderer`` for ``mode``.

    Returns
    -------
    List[Path]
        Files written, in group order.

    Raises
    ------
    ConfigError
        Unknown analysis choice, raised before any file is read or written.
    TemplateIOError
        Template or header file is unreadable.
    AnalysisError
        An operation could not be fitted.
    ArtifactWriteError
        A template failed to render for a group.
    OSError
        An output file could not be created or written.
    """
    analysis_choice = cmd.analysis_choice()
    cmd_data = cmd.cmd_data()

    if cmd.template is not None:
        template = _read_text(cmd.template, "template")
    else:
        template = default_template(mode)

    header_text = _read_text(cmd.header, "header") if cmd.header is not None else ""

    if metadata is None:
        metadata = RunMetadata.capture()
    if renderer is None:
        renderer = TemplateRenderer.for_mode(mode)

    all_results = map_results(batches, analysis_choice)

    path = Path(path)
    if not path.is_dir() and len(all_results) > 1:
        logger.warning(
            "writer.shared_output_path",
            extra={"path": str(path), "groups": len(all_results)},
        )

    written: List[Path] = []
    for (pallet, instance), results in all_results.items():
        target = output_target(pallet, instance, all_results.keys(), path, mode)

        data = TemplateData(
            args=list(metadata.args),
            date=metadata.date,
            version=metadata.version,
            pallet=pallet,
            instance=instance,
            header=header_text,
            cmd=cmd_data,
            storage_info=list(storage_info),
            benchmarks=results,
        )

        try:
            rendered = renderer.render(template, data.model_dump())
        except RenderError as exc:
            raise ArtifactWriteError(
                f"failed to render {target.path} for {pallet}/{instance}: {exc}"
            ) from exc

        with open(target.path, "w", encoding="utf-8") as output_file:
            output_file.write(rendered)

        logger.info(
            "writer.file_written",
            extra={
                "path": str(target.path),
                "pallet": pallet,
                "instance": instance,
                "benchmarks": len(results),
                "mode": mode.value,
            },
        )
        written.append(target.path)

    return written


def write_html_results(
    batches: Sequence[MeasurementBatch],
    storage_info: Sequence[StorageInfo],
    path: Path,
    cmd: BenchmarkCmd,
    metadata: Optional[RunMetadata] = None,
) -> List[Path]:
    """Report-mode variant of ``write_results`` producing ``.html`` files."""
    return write_results(
        batches, storage_info, path, cmd, mode=OutputMode.HTML, metadata=metadata
    )

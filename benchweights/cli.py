"""Command-line interface for generating weight files and reports.

Reads a results file produced by the benchmark harness, fits the cost models
and writes one artifact per (pallet, instance).

Usage
-----
    benchweights --input results.json --output runtime/src/weights/
    benchweights --input results.json --output reports/ --html
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config.models import AppConfig, BenchmarkCmd, EnvSettings
from .domain.loader import load_results
from .domain.models import OutputMode
from .errors import BenchweightsError
from .observability import setup_logging
from .writer import write_results

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="benchweights",
        description="Generate weight files or HTML reports from benchmark results",
    )
    parser.add_argument(
        "--input", required=True, help="Path to the JSON results file"
    )
    parser.add_argument(
        "--output",
        default=".",
        help="Output directory, or a single file for every pallet (default .)",
    )
    parser.add_argument("--config", help="Path to JSON app config")
    parser.add_argument("--template", help="Custom template file")
    parser.add_argument("--header", help="Header file prepended to every artifact")
    parser.add_argument(
        "--output-analysis",
        dest="output_analysis",
        help="Analysis strategy: min-squares (default), median-slopes or max",
    )
    parser.add_argument(
        "--html",
        action="store_true",
        help="Write HTML reports instead of weight source files",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=[
            "CRITICAL",
            "ERROR",
            "WARNING",
            "INFO",
            "DEBUG",
        ],
        help="Logging level (overrides environment)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (once sets DEBUG)",
    )
    return parser


def _resolve_cmd(args: argparse.Namespace) -> tuple[BenchmarkCmd, bool]:
    """Merge the optional config file with CLI overrides."""
    cfg = AppConfig.load(Path(args.config)) if args.config else AppConfig()
    overrides = {}
    if args.template:
        overrides["template"] = Path(args.template)
    if args.header:
        overrides["header"] = Path(args.header)
    if args.output_analysis:
        overrides["output_analysis"] = args.output_analysis
    return cfg.cmd.model_copy(update=overrides), cfg.html or args.html


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entrypoint. Returns the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    env_level = EnvSettings().log_level.upper()
    effective_level = args.log_level or ("DEBUG" if args.verbose > 0 else env_level)
    setup_logging(effective_level)

    try:
        cmd, html = _resolve_cmd(args)
        # Fail on a bad analysis name before reading any input.
        cmd.analysis_choice()
        batches, storage_info = load_results(Path(args.input))
        written = write_results(
            batches,
            storage_info,
            Path(args.output),
            cmd,
            mode=OutputMode.HTML if html else OutputMode.SOURCE,
        )
    except (BenchweightsError, OSError) as exc:
        logger.error("cli.failed", extra={"error": str(exc)})
        print(f"error: {exc}", file=sys.stderr)
        return 1

    logger.info("cli.complete", extra={"files": [str(p) for p in written]})
    return 0


if __name__ == "__main__":
    sys.exit(main())

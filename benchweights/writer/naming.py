"""Output file naming for result groups."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Tuple

import inflection

from ..domain.models import OutputMode, OutputTarget

_SEPARATORS = re.compile(r"[\s\-]+")


def snake_case(value: str) -> str:
    """Convert an instance name such as ``Instance1`` or ``Council Two`` to snake case."""
    return inflection.underscore(_SEPARATORS.sub("_", value.strip()))


def output_target(
    pallet: str,
    instance: str,
    all_keys: Iterable[Tuple[str, str]],
    path: Path,
    mode: OutputMode = OutputMode.SOURCE,
) -> OutputTarget:
    """Resolve the file a (pallet, instance) group is written to.

    When ``path`` is not an existing directory it is used as-is for every
    group, so the last group written wins. Inside a directory the file is
    named after the pallet, with the snake-cased instance appended only when
    another instance of the same pallet is generated in the same run. That
    keeps single-instance file names stable across runs.
    """
    if not path.is_dir():
        return OutputTarget(path=path, mode=mode)

    if any(p == pallet and i != instance for p, i in all_keys):
        # e.g. "path/to/pallet_collective_instance1.rs"
        stem = f"{pallet}_{snake_case(instance)}"
    else:
        stem = pallet
    return OutputTarget(path=path / f"{stem}{mode.extension}", mode=mode)

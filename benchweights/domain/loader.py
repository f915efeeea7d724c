"""Loading of harness output into validated batch models.

The harness writes a JSON document of the form::

    {
      "batches": [{"pallet": ..., "instance": ..., "benchmark": ...,
                   "time_results": [...], "db_results": [...]}],
      "storage_info": [{"pallet_name": ..., "storage_name": ...}]
    }

A bare list is accepted as the ``batches`` array with no storage info.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Tuple

from pydantic import TypeAdapter, ValidationError

from ..config.models import loads_json
from ..errors import ConfigError
from .models import MeasurementBatch, StorageInfo

logger = logging.getLogger(__name__)

_batches_adapter = TypeAdapter(List[MeasurementBatch])
_storage_adapter = TypeAdapter(List[StorageInfo])


def parse_results(document: Any) -> Tuple[List[MeasurementBatch], List[StorageInfo]]:
    """Validate an already parsed results document.

    Raises
    ------
    ConfigError
        If the document does not have the expected shape.
    """
    if isinstance(document, list):
        raw_batches, raw_storage = document, []
    elif isinstance(document, dict):
        raw_batches = document.get("batches", [])
        raw_storage = document.get("storage_info", [])
    else:
        raise ConfigError(
            f"results document must be an object or a list, got {type(document).__name__}"
        )

    try:
        batches = _batches_adapter.validate_python(raw_batches)
        storage_info = _storage_adapter.validate_python(raw_storage)
    except ValidationError as exc:
        raise ConfigError(f"invalid results document: {exc}") from exc
    return batches, storage_info


def load_results(path: Path) -> Tuple[List[MeasurementBatch], List[StorageInfo]]:
    """Read and validate a results file written by the benchmark harness.

    Raises
    ------
    OSError
        If the file cannot be read.
    ConfigError
        If the content is not valid JSON or not a valid results document.
    """
    batches, storage_info = parse_results(loads_json(path.read_bytes()))
    logger.info(
        "loader.results_loaded",
        extra={
            "path": str(path),
            "batches": len(batches),
            "storage_items": len(storage_info),
        },
    )
    return batches, storage_info

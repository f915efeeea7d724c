"""Tests for loading harness results files."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from benchweights.domain.loader import load_results, parse_results
from benchweights.errors import ConfigError


def _sample(n: int, time: int) -> dict:
    return {
        "components": [["n", n], ["z", 0]],
        "extrinsic_time": time,
        "storage_root_time": 1,
        "reads": 2,
        "repeat_reads": 0,
        "writes": 1,
        "repeat_writes": 0,
        "proof_size": 0,
    }


def _batch(pallet: str = "balances", benchmark: str = "transfer") -> dict:
    return {
        "pallet": pallet,
        "instance": "Instance1",
        "benchmark": benchmark,
        "time_results": [_sample(n, 100 + 10 * n) for n in range(3)],
    }


def test_load_results_document(tmp_path: Path):
    """A full document yields batches and storage info."""
    path = tmp_path / "results.json"
    path.write_text(
        json.dumps(
            {
                "batches": [_batch(), _batch(benchmark="transfer_keep_alive")],
                "storage_info": [
                    {
                        "pallet_name": "Balances",
                        "storage_name": "Account",
                        "prefix": "0x26aa",
                        "max_values": None,
                        "max_size": 112,
                        "hasher": "Blake2_128Concat",
                    }
                ],
            }
        )
    )

    batches, storage_info = load_results(path)

    assert [b.benchmark for b in batches] == ["transfer", "transfer_keep_alive"]
    assert batches[0].time_results[1].components == [("n", 1), ("z", 0)]
    assert batches[0].db_samples == batches[0].time_results
    assert storage_info[0].storage_name == "Account"
    assert storage_info[0].max_size == 112
    # Unknown storage fields are kept for the templates
    assert storage_info[0].model_dump()["hasher"] == "Blake2_128Concat"


def test_parse_results_bare_list():
    """A bare list is read as the batches array."""
    batches, storage_info = parse_results([_batch()])
    assert len(batches) == 1
    assert storage_info == []


def test_parse_results_wrong_shape():
    """Scalars are not results documents."""
    with pytest.raises(ConfigError, match="object or a list"):
        parse_results("batches")


def test_parse_results_requires_samples():
    """A batch must carry at least one sample."""
    batch = _batch()
    batch["time_results"] = []
    with pytest.raises(ConfigError):
        parse_results([batch])


def test_parse_results_rejects_mixed_parameter_sets():
    """All samples of a batch declare the same parameters."""
    batch = _batch()
    batch["time_results"][1]["components"] = [["n", 1]]
    with pytest.raises(ConfigError, match="mixes parameter sets"):
        parse_results([batch])


def test_parse_results_rejects_negative_metrics():
    """Measurements are non-negative."""
    batch = _batch()
    batch["time_results"][0]["reads"] = -1
    with pytest.raises(ConfigError):
        parse_results([batch])


def test_load_results_invalid_json(tmp_path: Path):
    """Malformed JSON is a configuration error."""
    path = tmp_path / "results.json"
    path.write_text("{not json")
    with pytest.raises(ConfigError, match="invalid JSON"):
        load_results(path)


def test_load_results_missing_file(tmp_path: Path):
    """A missing input file raises the OS error."""
    with pytest.raises(FileNotFoundError):
        load_results(tmp_path / "absent.json")

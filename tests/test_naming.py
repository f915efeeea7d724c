"""Tests for output file naming."""

from __future__ import annotations

from pathlib import Path

import pytest

from benchweights.domain.models import OutputMode
from benchweights.writer.naming import output_target, snake_case


def test_single_instance_uses_pallet_name(tmp_path: Path):
    """A pallet benchmarked with one instance keeps a stable file name."""
    keys = [("first_pallet", "instance"), ("second_pallet", "instance")]
    target = output_target("first_pallet", "instance", keys, tmp_path)
    assert target.path == tmp_path / "first_pallet.rs"
    assert target.mode is OutputMode.SOURCE


def test_single_instance_html(tmp_path: Path):
    """Report mode switches the extension only."""
    keys = [("first_pallet", "instance")]
    target = output_target("first_pallet", "instance", keys, tmp_path, OutputMode.HTML)
    assert target.path == tmp_path / "first_pallet.html"


def test_multiple_instances_get_snake_case_suffix(tmp_path: Path):
    """Sibling instances of one pallet are disambiguated."""
    keys = [("p", "A"), ("p", "B"), ("q", "A")]
    assert output_target("p", "A", keys, tmp_path).path == tmp_path / "p_a.rs"
    assert output_target("p", "B", keys, tmp_path).path == tmp_path / "p_b.rs"
    # "q" has a single instance even though "A" is shared with "p"
    assert output_target("q", "A", keys, tmp_path).path == tmp_path / "q.rs"


def test_explicit_file_path_used_for_every_group(tmp_path: Path):
    """A file path is returned unchanged whatever the group."""
    out = tmp_path / "weights.rs"
    keys = [("p", "A"), ("p", "B")]
    assert output_target("p", "A", keys, out).path == out
    assert output_target("p", "B", keys, out).path == out


def test_missing_path_treated_as_file(tmp_path: Path):
    """A path that does not exist yet is a file, not a directory."""
    out = tmp_path / "not-created"
    target = output_target("p", "i", [("p", "i")], out, OutputMode.HTML)
    assert target.path == out


@pytest.mark.parametrize(
    "value,expected",
    [
        ("Instance1", "instance1"),
        ("Instance2", "instance2"),
        ("CouncilCollective", "council_collective"),
        ("technical-committee", "technical_committee"),
        ("Council Two", "council_two"),
        ("A", "a"),
    ],
)
def test_snake_case(value, expected):
    """Instance names are snake-cased for file names."""
    assert snake_case(value) == expected

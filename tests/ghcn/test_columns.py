"""Tests for gzipped column files."""

import gzip

import numpy as np
import pytest

from ghcnpivot.ghcn.columns import read_float64, read_strings, write_float64, write_strings

pytestmark = pytest.mark.unit


def test_strings_are_newline_terminated(tmp_path):
    path = tmp_path / "ids.gz"
    write_strings(path, ["USW00000001", "USW00000002"])

    with gzip.open(path, "rb") as fh:
        assert fh.read() == b"USW00000001\nUSW00000002\n"
    assert read_strings(path) == ["USW00000001", "USW00000002"]


def test_float_column_is_raw_little_endian(tmp_path):
    path = tmp_path / "values.gz"
    write_float64(path, np.array([6.7, -12.3]))

    with gzip.open(path, "rb") as fh:
        payload = fh.read()

    assert len(payload) == 16
    np.testing.assert_array_equal(np.frombuffer(payload, dtype="<f8"), [6.7, -12.3])
    np.testing.assert_array_equal(read_float64(path), [6.7, -12.3])


def test_empty_columns(tmp_path):
    write_strings(tmp_path / "ids.gz", [])
    write_float64(tmp_path / "values.gz", [])

    assert read_strings(tmp_path / "ids.gz") == []
    assert read_float64(tmp_path / "values.gz").size == 0


def test_same_input_gives_identical_bytes(tmp_path):
    """No timestamp or file name ends up in the gzip header."""
    write_strings(tmp_path / "a.gz", ["2000-01-01"])
    write_strings(tmp_path / "b.gz", ["2000-01-01"])

    assert (tmp_path / "a.gz").read_bytes() == (tmp_path / "b.gz").read_bytes()

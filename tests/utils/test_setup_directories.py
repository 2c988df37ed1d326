from pathlib import Path

import pytest

from ghcnpivot.setup_directories import (
    get_monthly_path,
    get_partition_dir,
    setup_output_directories,
)

pytestmark = pytest.mark.unit


def test_setup_output_directories_creates_all(tmp_path):
    dirs = setup_output_directories(tmp_path)

    assert set(dirs.keys()) == {"base", "columns", "logs"}

    for path in dirs.values():
        assert isinstance(path, Path)
        assert path.exists()
        assert path.is_dir()


def test_setup_output_directories_is_idempotent(tmp_path):
    dirs1 = setup_output_directories(tmp_path)
    dirs2 = setup_output_directories(tmp_path)

    assert dirs1 == dirs2


def test_setup_output_directories_requires_base():
    with pytest.raises(ValueError):
        setup_output_directories(None)


def test_partition_dir(tmp_path):
    dirs = setup_output_directories(tmp_path)

    path = get_partition_dir(dirs, 1909)
    assert path == dirs["columns"] / "1909"
    assert not path.exists()

    get_partition_dir(dirs, 1909, create=True)
    assert path.is_dir()


def test_monthly_path(tmp_path):
    dirs = setup_output_directories(tmp_path)
    path = get_monthly_path(dirs, "gcos_monthly_{element}.csv.gz", "TMIN")
    assert path == dirs["base"] / "gcos_monthly_TMIN.csv.gz"

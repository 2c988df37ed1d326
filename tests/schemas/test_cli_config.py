import pytest
from pydantic import ValidationError

from ghcnpivot.schemas.cli import CLIConfig
from ghcnpivot.schemas.param import ParamConfig
from ghcnpivot.schemas.resolve import resolve_config
from ghcnpivot.schemas.user import UserConfig

pytestmark = pytest.mark.unit


def test_empty_cli_has_no_overrides():
    assert CLIConfig().to_internal_overrides() == {}


def test_cli_overrides_mapping():
    cli = CLIConfig(
        data_dir="/in",
        base_dir="/out",
        element="tmin",
        max_open_files=5,
        flush_threshold_bytes=64,
        emit_workers=2,
        on_file_error="skip_file",
    )

    assert cli.to_internal_overrides() == {
        "base_dir": "/out",
        "reader": {"data_dir": "/in", "element": "TMIN"},
        "ingest": {"max_open_files": 5},
        "buffer": {"flush_threshold_bytes": 64},
        "emit": {"max_workers": 2},
        "failure": {"policy": "skip_file"},
    }


def test_cli_overrides_do_not_mutate_user():
    user = UserConfig.model_validate({"ELEMENT": "TMAX", "BASE_DIR": "/tmp"})
    cli = CLIConfig.model_validate({"element": "TMIN"})

    internal = resolve_config(ParamConfig(), user, cli)

    assert internal.reader.element == "TMIN"
    assert user.element == "TMAX"


@pytest.mark.parametrize("field", ["max_open_files", "flush_threshold_bytes", "emit_workers"])
def test_cli_rejects_non_positive(field):
    with pytest.raises(ValidationError):
        CLIConfig(**{field: 0})


def test_cli_rejects_unknown_field():
    with pytest.raises(ValidationError):
        CLIConfig(station="USW00094846")

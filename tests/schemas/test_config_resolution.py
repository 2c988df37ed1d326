"""Test config resolution and validation with Pydantic."""

import pytest
from pydantic import ValidationError

from ghcnpivot.schemas import ParamConfig, UserConfig, CLIConfig, InternalConfig
from ghcnpivot.schemas.resolve import deep_merge, resolve_config
from ghcnpivot.schemas.user import UserBufferConfig, UserIngestConfig, UserReaderConfig

pytestmark = pytest.mark.unit


class TestConfigResolution:
    """Test resolve_config() precedence and merging."""

    def test_resolve_config_all_defaults(self):
        """Resolving with no user/CLI overrides uses all ParamConfig defaults."""
        config = resolve_config(ParamConfig(), None, None)

        assert isinstance(config, InternalConfig)
        assert config.mode == "columnize"
        assert config.reader.element == "TMAX"
        assert config.reader.data_dir is None
        assert config.ingest.max_open_files == 50
        assert config.buffer.flush_threshold_bytes == 10_000_000
        assert config.buffer.staging_filename == "raw.bin"
        assert config.emit.max_workers is None
        assert config.failure.policy == "fail_fast"
        assert config.logging.level == "INFO"

    def test_user_config_overrides_param_config(self):
        user = UserConfig(max_open_files=8, flush_threshold_bytes=1024)
        config = resolve_config(ParamConfig(), user, None)

        assert config.ingest.max_open_files == 8
        assert config.buffer.flush_threshold_bytes == 1024
        # Untouched sibling keeps its default
        assert config.ingest.queue_size == 50

    def test_cli_overrides_user(self):
        user = UserConfig(element="TMAX", base_dir="/tmp/a", max_open_files=8)
        cli = CLIConfig(element="TMIN", max_open_files=2)

        config = resolve_config(ParamConfig(), user, cli)

        assert config.reader.element == "TMIN"
        assert config.ingest.max_open_files == 2
        assert config.base_dir == "/tmp/a"

    def test_dict_inputs_accepted(self):
        config = resolve_config(ParamConfig().model_dump(), {"ELEMENT": "tmin"}, {"mode": "monthly"})

        assert config.reader.element == "TMIN"
        assert config.mode == "monthly"

    def test_internal_config_is_frozen(self):
        config = resolve_config(ParamConfig(), None, None)
        with pytest.raises(ValidationError):
            config.mode = "monthly"

    def test_invalid_element_rejected(self):
        with pytest.raises(ValidationError):
            resolve_config(ParamConfig(), UserConfig(element="PRCP"), None)

    def test_invalid_threshold_rejected(self):
        with pytest.raises(ValidationError):
            resolve_config(ParamConfig(), UserConfig(flush_threshold_bytes=0), None)


class TestUserConfigAliases:
    """Test UserConfig flat aliases map correctly."""

    def test_upper_case_keys(self):
        user = UserConfig.model_validate({
            "MODE": "monthly",
            "DATA_DIR": "/data/ghcnd_gsn",
            "BASE_DIR": "/scratch/out",
            "ELEMENT": "tmin",
            "MAX_OPEN_FILES": 20,
            "FLUSH_THRESHOLD_BYTES": 4096,
            "EMIT_WORKERS": 3,
            "ON_FILE_ERROR": "skip_file",
            "LOG_LEVEL": "debug",
        })
        config = resolve_config(ParamConfig(), user, None)

        assert config.mode == "monthly"
        assert config.reader.data_dir == "/data/ghcnd_gsn"
        assert config.base_dir == "/scratch/out"
        assert config.reader.element == "TMIN"
        assert config.ingest.max_open_files == 20
        assert config.buffer.flush_threshold_bytes == 4096
        assert config.emit.max_workers == 3
        assert config.failure.policy == "skip_file"
        assert config.logging.level == "DEBUG"

    def test_unknown_keys_ignored(self):
        user = UserConfig.model_validate({"ELEMENT": "TMAX", "SOMETHING_ELSE": 1})
        assert user.element == "TMAX"

    def test_nested_override_wins_over_flat_alias(self):
        user = UserConfig(
            max_open_files=10,
            ingest=UserIngestConfig(max_open_files=4),
            flush_threshold_bytes=100,
            buffer=UserBufferConfig(flush_threshold_bytes=200),
        )
        config = resolve_config(ParamConfig(), user, None)

        assert config.ingest.max_open_files == 4
        assert config.buffer.flush_threshold_bytes == 200

    def test_nested_reader_override(self):
        user = UserConfig(reader=UserReaderConfig(file_pattern="*.dly", encoding="latin-1"))
        config = resolve_config(ParamConfig(), user, None)

        assert config.reader.file_pattern == "*.dly"
        assert config.reader.encoding == "latin-1"


class TestDeepMerge:

    def test_nested_dicts_merged(self):
        merged = deep_merge({"a": 1, "b": {"c": 2, "d": 3}}, {"b": {"d": 4}}, {"e": 5})
        assert merged == {"a": 1, "b": {"c": 2, "d": 4}, "e": 5}

    def test_base_not_mutated(self):
        base = {"b": {"c": 2}}
        deep_merge(base, {"b": {"c": 3}})
        assert base == {"b": {"c": 2}}

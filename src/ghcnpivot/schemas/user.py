"""UserConfig: Forgiving, minimal user-facing configuration.

This schema accepts user inputs with aliases for the upper-case keys used
in config files (e.g., DATA_DIR → data_dir, ELEMENT → element).

UserConfig is intentionally minimal - users only specify what they want
to override from the expert defaults.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator
from ghcnpivot.schemas.base import PivotBaseModel


class UserReaderConfig(PivotBaseModel):
    """User-facing reader config."""
    data_dir: Optional[str] = None
    file_pattern: Optional[str] = None
    element: Optional[str] = None
    encoding: Optional[str] = None


class UserIngestConfig(PivotBaseModel):
    """User-facing ingest config."""
    max_open_files: Optional[int] = None
    queue_size: Optional[int] = None


class UserBufferConfig(PivotBaseModel):
    """User-facing buffer config."""
    flush_threshold_bytes: Optional[int] = None
    staging_filename: Optional[str] = None


class UserEmitConfig(PivotBaseModel):
    """User-facing sort-and-emit config."""
    max_workers: Optional[int] = None
    ids_filename: Optional[str] = None
    dates_filename: Optional[str] = None
    values_filename: Optional[str] = None
    compresslevel: Optional[int] = None


class UserConfig(PivotBaseModel):
    """User-facing configuration schema.

    Minimal, forgiving, and uses common aliases. Users only specify
    what they want to override from ParamConfig defaults.

    Usage
    -----
        user_cfg = UserConfig(
            data_dir="/data/ghcnd_gsn",
            base_dir="/scratch/ghcn_columns",
            element="tmin",
            flush_threshold_bytes=50_000_000,
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    # Top-level operational settings
    mode: Optional[Literal["columnize", "monthly"]] = Field(None, alias="MODE")
    base_dir: Optional[str] = Field(None, alias="BASE_DIR")
    data_dir: Optional[str] = Field(None, alias="DATA_DIR")
    element: Optional[str] = Field(None, alias="ELEMENT")
    file_pattern: Optional[str] = Field(None, alias="FILE_PATTERN")

    # Tuning (flat aliases)
    max_open_files: Optional[int] = Field(None, alias="MAX_OPEN_FILES")
    flush_threshold_bytes: Optional[int] = Field(None, alias="FLUSH_THRESHOLD_BYTES")
    emit_workers: Optional[int] = Field(None, alias="EMIT_WORKERS")
    on_file_error: Optional[Literal["fail_fast", "skip_file"]] = Field(None, alias="ON_FILE_ERROR")
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = Field(
        None, alias="LOG_LEVEL"
    )

    # Nested overrides (advanced users)
    reader: Optional[UserReaderConfig] = None
    ingest: Optional[UserIngestConfig] = None
    buffer: Optional[UserBufferConfig] = None
    emit: Optional[UserEmitConfig] = None

    model_config = PivotBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("element", mode="before")
    @classmethod
    def normalize_element(cls, v):
        """Element codes are upper-case in the station files."""
        if isinstance(v, str):
            return v.upper().strip()
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.upper().strip()
        return v

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        if self.mode is not None:
            overrides["mode"] = self.mode

        if self.base_dir is not None:
            overrides["base_dir"] = str(self.base_dir)

        # Reader section
        reader = {}
        if self.data_dir is not None:
            reader["data_dir"] = str(self.data_dir)
        if self.element is not None:
            reader["element"] = self.element
        if self.file_pattern is not None:
            reader["file_pattern"] = self.file_pattern
        if self.reader is not None:
            reader.update(self.reader.model_dump(exclude_none=True))
        if reader:
            overrides["reader"] = reader

        # Ingest section
        ingest = {}
        if self.max_open_files is not None:
            ingest["max_open_files"] = self.max_open_files
        if self.ingest is not None:
            ingest.update(self.ingest.model_dump(exclude_none=True))
        if ingest:
            overrides["ingest"] = ingest

        # Buffer section
        buffer = {}
        if self.flush_threshold_bytes is not None:
            buffer["flush_threshold_bytes"] = self.flush_threshold_bytes
        if self.buffer is not None:
            buffer.update(self.buffer.model_dump(exclude_none=True))
        if buffer:
            overrides["buffer"] = buffer

        # Emit section
        emit = {}
        if self.emit_workers is not None:
            emit["max_workers"] = self.emit_workers
        if self.emit is not None:
            emit.update(self.emit.model_dump(exclude_none=True))
        if emit:
            overrides["emit"] = emit

        if self.on_file_error is not None:
            overrides["failure"] = {"policy": self.on_file_error}

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides

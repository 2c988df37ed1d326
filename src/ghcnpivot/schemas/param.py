"""ParamConfig: Expert defaults for the ghcnpivot pipeline.

This module defines the complete default configuration. ALL pipeline
parameters must have defaults here. No runtime code should define
fallback values - this is the single source of truth for defaults.

Runtime code NEVER reads from ParamConfig directly - it only receives InternalConfig.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator
from ghcnpivot.schemas.base import PivotBaseModel


# =============================================================================
# Nested Configuration Models
# =============================================================================

class ReaderConfig(PivotBaseModel):
    """Station file reader configuration."""
    data_dir: Optional[str] = None
    file_pattern: str = Field("*.gz", description="Glob for station files in data_dir")
    element: Literal["TMAX", "TMIN"] = "TMAX"
    encoding: str = "ascii"

    @field_validator("element", mode="before")
    @classmethod
    def normalize_element(cls, v):
        """Accept lowercase element codes."""
        if isinstance(v, str):
            return v.upper().strip()
        return v


class IngestConfig(PivotBaseModel):
    """Concurrent file ingest configuration."""
    max_open_files: int = Field(50, ge=1, description="Station files parsed at once")
    queue_size: int = Field(50, ge=1, description="Delivery queue bound, in whole-file results")


class BufferConfig(PivotBaseModel):
    """Per-year buffering before staging files are appended."""
    flush_threshold_bytes: int = Field(10_000_000, ge=1)
    staging_filename: str = "raw.bin"


class EmitConfig(PivotBaseModel):
    """Sort-and-emit stage configuration."""
    max_workers: Optional[int] = Field(None, ge=1, description="None uses os.cpu_count()")
    ids_filename: str = "ids.gz"
    dates_filename: str = "dates.gz"
    values_filename: str = "values.gz"
    compresslevel: int = Field(9, ge=0, le=9)


class MonthlyConfig(PivotBaseModel):
    """Monthly summary output configuration."""
    filename_pattern: str = "gcos_monthly_{element}.csv.gz"


class FailureConfig(PivotBaseModel):
    """What to do when a station file cannot be read or parsed."""
    policy: Literal["fail_fast", "skip_file"] = "fail_fast"


class LoggingConfig(PivotBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(PivotBaseModel):
    """Complete expert configuration with all defaults.

    This is the single source of truth for all pipeline parameters.
    Every tunable parameter MUST have a default here.

    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:

        internal_cfg = resolve_config(param_cfg, user_cfg, cli_cfg)

    Runtime code only sees InternalConfig.
    """

    mode: Literal["columnize", "monthly"] = "columnize"
    base_dir: Optional[str] = None
    reader: ReaderConfig = Field(default_factory=ReaderConfig)
    ingest: IngestConfig = Field(default_factory=IngestConfig)
    buffer: BufferConfig = Field(default_factory=BufferConfig)
    emit: EmitConfig = Field(default_factory=EmitConfig)
    monthly: MonthlyConfig = Field(default_factory=MonthlyConfig)
    failure: FailureConfig = Field(default_factory=FailureConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

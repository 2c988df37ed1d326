"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully validated,
normalized, and frozen.

All .get() calls, fallback defaults, and validation logic are FORBIDDEN in
runtime code - everything is explicit here.
"""

from typing import Literal, Optional
from pydantic import Field, ConfigDict
from ghcnpivot.schemas.base import PivotBaseModel


# =============================================================================
# Nested Configuration Models (Runtime)
# =============================================================================

class InternalReaderConfig(PivotBaseModel):
    """Runtime reader configuration.

    Note: data_dir may be None while configs are merged; the orchestrator
    rejects a config without it before any file is touched.
    """
    data_dir: Optional[str]
    file_pattern: str
    element: Literal["TMAX", "TMIN"]
    encoding: str


class InternalIngestConfig(PivotBaseModel):
    """Runtime ingest configuration."""
    max_open_files: int = Field(ge=1)
    queue_size: int = Field(ge=1)


class InternalBufferConfig(PivotBaseModel):
    """Runtime buffer configuration."""
    flush_threshold_bytes: int = Field(ge=1)
    staging_filename: str


class InternalEmitConfig(PivotBaseModel):
    """Runtime sort-and-emit configuration."""
    max_workers: Optional[int]
    ids_filename: str
    dates_filename: str
    values_filename: str
    compresslevel: int = Field(ge=0, le=9)


class InternalMonthlyConfig(PivotBaseModel):
    """Runtime monthly summary configuration."""
    filename_pattern: str


class InternalFailureConfig(PivotBaseModel):
    """Runtime failure policy."""
    policy: Literal["fail_fast", "skip_file"]


class InternalLoggingConfig(PivotBaseModel):
    """Runtime logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


# =============================================================================
# Main InternalConfig
# =============================================================================

class InternalConfig(PivotBaseModel):
    """Authoritative runtime configuration.

    Runtime modules receive InternalConfig and access fields directly:

        def __init__(self, config: InternalConfig):
            self.element = config.reader.element  # NOT .get()
            self.threshold = config.buffer.flush_threshold_bytes

    Rules
    -----
    - NO .get() calls
    - NO fallback defaults
    - NO validation

    All of that happens during config resolution, not in runtime code.
    """

    mode: Literal["columnize", "monthly"]
    base_dir: Optional[str]
    reader: InternalReaderConfig
    ingest: InternalIngestConfig
    buffer: InternalBufferConfig
    emit: InternalEmitConfig
    monthly: InternalMonthlyConfig
    failure: InternalFailureConfig
    logging: InternalLoggingConfig

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,  # Immutable after construction
    )

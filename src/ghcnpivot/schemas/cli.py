"""CLIConfig: Command-line operational overrides.

Minimal configuration for operational parameters that commonly change
between runs: mode, input and output paths, element, concurrency, verbosity.

This schema handles command-line arguments parsed by argparse.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator
from ghcnpivot.schemas.base import PivotBaseModel


class CLIConfig(PivotBaseModel):
    """Command-line configuration overrides.

    Operational-only settings that override user and param configs.
    Highest priority in config resolution.

    Usage
    -----
        cli_cfg = CLIConfig(
            data_dir="/data/ghcnd_gsn",
            base_dir="/scratch/ghcn_columns",
            element="TMIN",
            max_open_files=20,
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    mode: Optional[Literal["columnize", "monthly"]] = None
    data_dir: Optional[str] = None
    base_dir: Optional[str] = None
    element: Optional[Literal["TMAX", "TMIN"]] = None
    max_open_files: Optional[int] = Field(None, ge=1)
    flush_threshold_bytes: Optional[int] = Field(None, ge=1)
    emit_workers: Optional[int] = Field(None, ge=1)
    on_file_error: Optional[Literal["fail_fast", "skip_file"]] = None
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None

    @field_validator("element", mode="before")
    @classmethod
    def normalize_element(cls, v):
        if isinstance(v, str):
            return v.upper().strip()
        return v

    def to_internal_overrides(self) -> dict:
        """Convert CLI config to internal config structure.

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

        reader_overrides = {}
        if self.data_dir is not None:
            reader_overrides["data_dir"] = str(self.data_dir)
        if self.element is not None:
            reader_overrides["element"] = self.element
        if reader_overrides:
            overrides["reader"] = reader_overrides

        if self.max_open_files is not None:
            overrides["ingest"] = {"max_open_files": self.max_open_files}

        if self.flush_threshold_bytes is not None:
            overrides["buffer"] = {"flush_threshold_bytes": self.flush_threshold_bytes}

        if self.emit_workers is not None:
            overrides["emit"] = {"max_workers": self.emit_workers}

        if self.on_file_error is not None:
            overrides["failure"] = {"policy": self.on_file_error}

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides

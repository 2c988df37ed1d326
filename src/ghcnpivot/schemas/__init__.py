"""Pydantic configuration schemas for the ghcnpivot pipeline.

All configuration validation, coercion, and normalization happens at
schema validation time via Pydantic.

Exports
-------
resolve_config : function
    Single entrypoint for configuration resolution
InternalConfig : class
    Fully validated, authoritative runtime configuration
ParamConfig : class
    Expert defaults (complete)
UserConfig : class
    User-facing configuration (forgiving, minimal)
CLIConfig : class
    Command-line operational overrides
"""

from ghcnpivot.schemas.resolve import resolve_config
from ghcnpivot.schemas.internal import InternalConfig
from ghcnpivot.schemas.param import ParamConfig
from ghcnpivot.schemas.user import UserConfig
from ghcnpivot.schemas.cli import CLIConfig

__all__ = [
    'resolve_config',
    'InternalConfig',
    'ParamConfig',
    'UserConfig',
    'CLIConfig',
]

"""Merging of the configuration layers into one runtime config.

Layers, lowest priority first: ParamConfig (defaults), UserConfig (config
file), CLIConfig (command line). Each layer is turned into a nested dict of
the keys it actually sets; the dicts are merged and validated as
InternalConfig.
"""

from typing import Optional, Type, TypeVar, Union

from pydantic import BaseModel

from ghcnpivot.schemas.cli import CLIConfig
from ghcnpivot.schemas.internal import InternalConfig
from ghcnpivot.schemas.param import ParamConfig
from ghcnpivot.schemas.user import UserConfig

ModelT = TypeVar("ModelT", bound=BaseModel)


def deep_merge(base: dict, *overrides: dict) -> dict:
    """Merge ``overrides`` into a copy of ``base``, recursing into nested dicts.

    >>> deep_merge({"ingest": {"max_open_files": 50, "queue_size": 50}},
    ...            {"ingest": {"max_open_files": 4}})
    {'ingest': {'max_open_files': 4, 'queue_size': 50}}
    """
    merged = dict(base)
    for layer in overrides:
        for key, value in layer.items():
            current = merged.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                merged[key] = deep_merge(current, value)
            else:
                merged[key] = value
    return merged


def _as_model(model_cls: Type[ModelT], cfg) -> ModelT:
    """Validate a dict layer; missing or empty layers become the model's defaults."""
    if isinstance(cfg, model_cls):
        return cfg
    return model_cls.model_validate(cfg or {})


def resolve_config(
    param_cfg: Union[dict, ParamConfig],
    user_cfg: Optional[Union[dict, UserConfig]] = None,
    cli_cfg: Optional[Union[dict, CLIConfig]] = None,
) -> InternalConfig:
    """Build the frozen runtime config.

    Parameters
    ----------
    param_cfg : dict or ParamConfig
        Complete defaults.
    user_cfg : dict or UserConfig, optional
        Config file overrides (upper-case aliases accepted).
    cli_cfg : dict or CLIConfig, optional
        Command-line overrides.

    Returns
    -------
    InternalConfig

    Raises
    ------
    ValidationError
        If a layer, or the merged result, is invalid

    Examples
    --------
    >>> config = resolve_config(ParamConfig(), {"ELEMENT": "tmin"}, {"max_open_files": 8})
    >>> config.reader.element, config.ingest.max_open_files
    ('TMIN', 8)
    """
    param = _as_model(ParamConfig, param_cfg)
    user = _as_model(UserConfig, user_cfg)
    cli = _as_model(CLIConfig, cli_cfg)

    merged = deep_merge(
        param.model_dump(),
        user.to_internal_overrides(),
        cli.to_internal_overrides(),
    )
    return InternalConfig.model_validate(merged)

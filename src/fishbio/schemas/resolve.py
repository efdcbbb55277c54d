"""Build the runtime InternalConfig from the three configuration layers.

Expert defaults (ParamConfig) are overridden by the user's CONFIG file
(UserConfig), which is overridden by command-line flags (CLIConfig).
"""

from typing import Union, Optional
from fishbio.schemas.param import ParamConfig
from fishbio.schemas.user import UserConfig
from fishbio.schemas.cli import CLIConfig
from fishbio.schemas.internal import InternalConfig


def deep_merge(base: dict, *overrides: dict) -> dict:
    """Merge ``overrides`` into a copy of ``base``, later ones winning.

    Nested sections such as ``binning`` or ``visualization.layout`` merge key
    by key; lists (``analyses``, excluded codes) are replaced whole.

    Examples
    --------
    >>> deep_merge({"binning": {"class_interval": 10.0, "origin": 0.0}},
    ...            {"binning": {"class_interval": 5.0}})
    {'binning': {'class_interval': 5.0, 'origin': 0.0}}
    """
    result = base.copy()
    for override in overrides:
        for key, value in override.items():
            if isinstance(result.get(key), dict) and isinstance(value, dict):
                result[key] = deep_merge(result[key], value)
            else:
                result[key] = value
    return result


def _as_model(cfg, model):
    """Validate a dict layer; ``None`` or ``{}`` gives the empty layer."""
    if isinstance(cfg, model):
        return cfg
    return model.model_validate(cfg or {})


def resolve_config(
    param_cfg: Union[dict, ParamConfig],
    user_cfg: Optional[Union[dict, UserConfig]] = None,
    cli_cfg: Optional[Union[dict, CLIConfig]] = None,
) -> InternalConfig:
    """Merge the configuration layers into a frozen InternalConfig.

    Parameters
    ----------
    param_cfg : dict or ParamConfig
        Expert defaults for every section.
    user_cfg : dict or UserConfig, optional
        Contents of the user's CONFIG dict (uppercase aliases accepted).
    cli_cfg : dict or CLIConfig, optional
        Command-line overrides.

    Returns
    -------
    InternalConfig

    Raises
    ------
    ValidationError
        If a layer or the merged result is invalid, e.g. a non-positive
        class interval or a date window whose end precedes its start.

    Examples
    --------
    >>> user = UserConfig(CLASS_INTERVAL=5, INPUT_PATH="lengths.csv")
    >>> resolve_config(ParamConfig(), user).binning.class_interval
    5.0
    """
    param = _as_model(param_cfg, ParamConfig)
    user = _as_model(user_cfg, UserConfig)
    cli = _as_model(cli_cfg, CLIConfig)

    merged = deep_merge(
        param.model_dump(),
        user.to_internal_overrides(),
        cli.to_internal_overrides(),
    )
    # Duplicate analyses collapse, first occurrence wins
    merged["analyses"] = list(dict.fromkeys(merged["analyses"]))

    return InternalConfig.model_validate(merged)

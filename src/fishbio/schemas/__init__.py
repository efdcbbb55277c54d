"""Pydantic configuration schemas for fishbio.

This module provides strictly typed configuration models for the fishbio
summarizer. All configuration validation, coercion, and normalization
happens at schema validation time via Pydantic.

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
FigureLayout : class
    Explicit plot layout passed to the renderer
"""

from fishbio.schemas.resolve import resolve_config
from fishbio.schemas.internal import InternalConfig
from fishbio.schemas.param import ParamConfig, FigureLayout, ALL_ANALYSES
from fishbio.schemas.user import UserConfig
from fishbio.schemas.cli import CLIConfig

__all__ = [
    'resolve_config',
    'InternalConfig',
    'ParamConfig',
    'UserConfig',
    'CLIConfig',
    'FigureLayout',
    'ALL_ANALYSES',
]

"""Pydantic configuration schemas for rasterhex.

This module provides strictly typed configuration models for raster to
hex-grid conversion. All configuration validation, coercion, and
normalization happens at schema validation time via Pydantic.

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

from rasterhex.schemas.resolve import resolve_config
from rasterhex.schemas.internal import InternalConfig
from rasterhex.schemas.param import ParamConfig
from rasterhex.schemas.user import UserConfig
from rasterhex.schemas.cli import CLIConfig

__all__ = [
    'resolve_config',
    'InternalConfig',
    'ParamConfig',
    'UserConfig',
    'CLIConfig',
]

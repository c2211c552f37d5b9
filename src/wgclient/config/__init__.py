"""Shared configuration helpers and dataclasses."""

from .errors import ConfigurationError
from .runtime import (
    env_bool,
    env_float,
    env_int,
    env_path,
    env_seconds,
    env_str,
    reset_default_values,
)
from .settings import ClientSettings

__all__ = [
    "ClientSettings",
    "ConfigurationError",
    "env_bool",
    "env_float",
    "env_int",
    "env_path",
    "env_seconds",
    "env_str",
    "reset_default_values",
]

"""Configuration module."""

from streamgen.common.config.settings import (
    Config,
    LogLevel,
    get_config,
    reset_config,
    load_producer_properties,
)

__all__ = [
    "Config",
    "LogLevel",
    "get_config",
    "reset_config",
    "load_producer_properties",
]

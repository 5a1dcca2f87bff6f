"""Common utilities - logging, config, exceptions."""

from streamgen.common.logging.logger import get_logger
from streamgen.common.config import Config, get_config, reset_config
from streamgen.common.exceptions import (
    StreamgenException,
    InvalidConfigurationError,
    GeneratorContractViolation,
    TokenExhaustionError,
    EmptyStateError,
    DeliveryError,
)

__all__ = [
    # Logging
    "get_logger",
    # Config
    "Config",
    "get_config",
    "reset_config",
    # Exceptions
    "StreamgenException",
    "InvalidConfigurationError",
    "GeneratorContractViolation",
    "TokenExhaustionError",
    "EmptyStateError",
    "DeliveryError",
]

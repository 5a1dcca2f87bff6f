"""Configuration management - Centralized configuration for streamgen.

Provides environment-aware configuration with sensible defaults.
All configuration is loaded from environment variables with fallbacks;
command line flags override individual fields.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from streamgen.common.constants import DeliveryConstants, SessionConstants
from streamgen.common.exceptions import InvalidConfigurationError
from streamgen.core.types import SinkType, ValueFormat


class LogLevel(str, Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def _optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return None
    return int(raw)


@dataclass
class Config:
    """Central configuration object for streamgen.

    All settings can be overridden via environment variables prefixed with STREAMGEN_.

    Example:
        STREAMGEN_SINK=kafka
        STREAMGEN_BOOTSTRAP_SERVERS=broker:9092
        STREAMGEN_MAX_SESSIONS=5
    """

    # Core settings
    log_level: LogLevel = field(
        default_factory=lambda: LogLevel(os.getenv("STREAMGEN_LOG_LEVEL", "INFO").upper())
    )

    # Sink settings
    sink_type: SinkType = field(
        default_factory=lambda: SinkType(os.getenv("STREAMGEN_SINK", "kafka").lower())
    )
    bootstrap_servers: str = field(
        default_factory=lambda: os.getenv("STREAMGEN_BOOTSTRAP_SERVERS", "localhost:9092")
    )
    value_format: ValueFormat = field(
        default_factory=lambda: ValueFormat(os.getenv("STREAMGEN_VALUE_FORMAT", "JSON").upper())
    )
    properties_file: Optional[Path] = field(
        default_factory=lambda: (
            Path(os.environ["STREAMGEN_PROPERTIES_FILE"])
            if os.getenv("STREAMGEN_PROPERTIES_FILE") else None
        )
    )
    aws_region: str = field(
        default_factory=lambda: os.getenv("AWS_DEFAULT_REGION", "us-east-1")
    )

    # Generation settings
    topic: Optional[str] = field(
        default_factory=lambda: os.getenv("STREAMGEN_TOPIC")
    )
    key: Optional[str] = field(
        default_factory=lambda: os.getenv("STREAMGEN_KEY")
    )
    iterations: int = field(
        default_factory=lambda: int(
            os.getenv("STREAMGEN_ITERATIONS", str(DeliveryConstants.DEFAULT_ITERATIONS))
        )
    )
    max_interval_ms: int = field(
        default_factory=lambda: int(os.getenv("STREAMGEN_MAX_INTERVAL_MS", "-1"))
    )
    seed: Optional[int] = field(
        default_factory=lambda: _optional_int("STREAMGEN_SEED")
    )

    # Session settings
    max_sessions: int = field(
        default_factory=lambda: int(
            os.getenv("STREAMGEN_MAX_SESSIONS", str(SessionConstants.DEFAULT_MAX_SESSIONS))
        )
    )
    session_duration_seconds: int = field(
        default_factory=lambda: int(
            os.getenv(
                "STREAMGEN_SESSION_DURATION_SECONDS",
                str(SessionConstants.DEFAULT_SESSION_DURATION_SECONDS),
            )
        )
    )

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.iterations < 0:
            raise InvalidConfigurationError(
                f"STREAMGEN_ITERATIONS must be >= 0, got {self.iterations}"
            )
        if self.max_sessions < 1:
            raise InvalidConfigurationError(
                f"STREAMGEN_MAX_SESSIONS must be >= 1, got {self.max_sessions}"
            )
        if self.session_duration_seconds < 0:
            raise InvalidConfigurationError(
                "STREAMGEN_SESSION_DURATION_SECONDS must be >= 0, "
                f"got {self.session_duration_seconds}"
            )
        if self.sink_type == SinkType.KAFKA and not self.bootstrap_servers:
            raise InvalidConfigurationError(
                "STREAMGEN_BOOTSTRAP_SERVERS must be set when using the kafka sink"
            )

    def kafka_properties(self) -> Dict[str, Any]:
        """Producer properties: bootstrap servers plus any properties file entries."""
        props: Dict[str, Any] = {"bootstrap.servers": self.bootstrap_servers}
        if self.properties_file is not None:
            props.update(load_producer_properties(self.properties_file))
        return props


def load_producer_properties(path: Path) -> Dict[str, Any]:
    """Load extra producer properties from a YAML mapping.

    Raises:
        InvalidConfigurationError: If the file is missing or not a mapping.
    """
    path = Path(path)
    if not path.exists():
        raise InvalidConfigurationError(f"Properties file not found: {path}")

    with open(path, "r") as f:
        raw = yaml.safe_load(f)

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise InvalidConfigurationError(
            f"Properties file must contain a mapping, got {type(raw).__name__}: {path}"
        )
    return {str(k): v for k, v in raw.items()}


# Singleton instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance.

    Returns:
        Config: The global configuration singleton.
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None

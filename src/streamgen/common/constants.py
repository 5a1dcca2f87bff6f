"""Centralized constants for streamgen."""

import sys


# ===== SESSIONS =====
class SessionConstants:
    DEFAULT_MAX_SESSIONS = sys.maxsize
    DEFAULT_SESSION_DURATION_SECONDS = 300


# ===== FIELD METADATA TAGS =====
class FieldTags:
    SESSION = "session"
    SESSION_SIBLING_INT_HASH = "session-sibling-int-hash"
    FORMAT_AS_TIME = "format_as_time"
    UNIX_LONG = "unix_long"
    ARG_PROPERTIES = "arg.properties"


# ===== DELIVERY =====
class DeliveryConstants:
    INTER_MESSAGE_MAX_INTERVAL_MS = 500
    DEFAULT_ITERATIONS = 1000000
    FLUSH_TIMEOUT_SECONDS = 30.0
    BUFFER_FULL_POLL_SECONDS = 1.0


# ===== KINESIS =====
class KinesisConstants:
    QUEUE_SIZE = 10000
    QUEUE_GET_TIMEOUT = 1.0
    SHUTDOWN_TIMEOUT_SECONDS = 5.0


# ===== GENERATOR DEFAULTS =====
class GeneratorConstants:
    INT_MIN = -(2 ** 31)
    INT_MAX = 2 ** 31
    LONG_MIN = -(2 ** 63)
    LONG_MAX = 2 ** 63
    STRING_LENGTH_MIN = 8
    STRING_LENGTH_MAX = 16
    COLLECTION_LENGTH_MIN = 0
    COLLECTION_LENGTH_MAX = 5

"""Shared fixtures for streamgen tests."""

from datetime import datetime, timezone

import pytest

from streamgen.core.clock import MockClock
from streamgen.data.generators.base_generator import BaseGenerator
from streamgen.sessions.manager import SessionManager


class StaticGenerator(BaseGenerator):
    """Replays a fixed list of records, cycling when exhausted."""

    def __init__(self, schema, records):
        super().__init__(seed=0)
        self._schema = schema
        self._records = list(records)

    def schema(self):
        return self._schema

    def generate(self):
        record = self._records[self._record_counter % len(self._records)]
        self._record_counter += 1
        return record


@pytest.fixture
def clock():
    """Controllable clock starting at zero."""
    return MockClock(start=0.0)


@pytest.fixture
def session_manager(clock):
    """SessionManager with a 1 second TTL on the mock clock."""
    return SessionManager(max_session_duration_seconds=1, clock=clock, seed=7)


@pytest.fixture
def fixed_now():
    """Factory returning a fixed wall-clock moment."""
    moment = datetime(2024, 3, 5, 14, 7, 9, 123000, tzinfo=timezone.utc)
    return lambda: moment


@pytest.fixture
def session_schema():
    """Record schema with a session field, a sibling field and time fields."""
    return {
        "type": "record",
        "name": "clicks",
        "fields": [
            {"name": "ts", "type": {"type": "long", "format_as_time": "unix_long"}},
            {"name": "ip", "type": {"type": "string", "session": "true"}},
            {
                "name": "userid",
                "type": {
                    "type": "int",
                    "session-sibling-int-hash": "true",
                    "arg.properties": {"range": {"min": 1, "max": 40}},
                },
            },
            {"name": "page", "type": "string"},
        ],
    }


@pytest.fixture
def nested_schema():
    """Record schema with nested record, array and map fields."""
    return {
        "type": "record",
        "name": "orders",
        "namespace": "test",
        "fields": [
            {"name": "orderid", "type": "long"},
            {
                "name": "address",
                "type": {
                    "type": "record",
                    "name": "Address",
                    "fields": [
                        {"name": "city", "type": "string"},
                        {"name": "zipcode", "type": "int"},
                    ],
                },
            },
            {"name": "tags", "type": {"type": "array", "items": "string"}},
            {"name": "counts", "type": {"type": "map", "values": "long"}},
            {"name": "note", "type": ["null", "string"]},
        ],
    }


@pytest.fixture
def static_generator():
    """Factory for StaticGenerator instances."""
    return StaticGenerator

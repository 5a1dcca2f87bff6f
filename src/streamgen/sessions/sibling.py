"""Sibling-field linker - ties an integer field to the record's session token."""

import hashlib
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Set

from streamgen.common.constants import FieldTags

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SiblingLinkResult:
    """Outcome of linking a token to an integer id."""
    ok: bool
    value: Optional[int] = None
    reason: Optional[str] = None

    @classmethod
    def success(cls, value: int) -> "SiblingLinkResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, reason: str) -> "SiblingLinkResult":
        return cls(ok=False, reason=reason)


def range_max(field_schema: Any) -> Optional[int]:
    """Read `arg.properties.range.max` from an Avro type schema, if present."""
    if not isinstance(field_schema, dict):
        return None
    props = field_schema.get(FieldTags.ARG_PROPERTIES)
    if not isinstance(props, dict):
        return None
    value_range = props.get("range")
    if not isinstance(value_range, dict):
        return None
    upper = value_range.get("max")
    if isinstance(upper, bool) or not isinstance(upper, int):
        return None
    return upper


class SiblingLinker:
    """Assigns each session token a stable integer within `[0, max)`.

    The allocation table only grows: ids are never freed when a session
    expires or is recycled.
    """

    def __init__(self):
        self._assigned: Dict[str, int] = {}
        self._allocated: Set[int] = set()

    @staticmethod
    def _hash(token: str) -> int:
        digest = hashlib.sha256(token.encode("utf-8")).digest()
        return int.from_bytes(digest[:8], "big")

    def link(self, token: str, field_schema: Any) -> SiblingLinkResult:
        """Link a token using the range declared on the field's type schema."""
        if token in self._assigned:
            return SiblingLinkResult.success(self._assigned[token])

        upper = range_max(field_schema)
        if upper is None:
            return SiblingLinkResult.failure("missing arg.properties.range.max")
        return self.link_with_max(token, upper)

    def link_with_max(self, token: str, upper: int) -> SiblingLinkResult:
        """Link a token to an integer in `[0, upper)`."""
        if token in self._assigned:
            return SiblingLinkResult.success(self._assigned[token])
        if upper <= 0:
            return SiblingLinkResult.failure(f"range max must be positive, got {upper}")

        candidate = self._hash(token) % upper
        if candidate in self._allocated:
            free = next((i for i in range(upper) if i not in self._allocated), None)
            if free is None:
                logger.warning(f"Failed to allocate id for {token}, reusing {candidate}")
            else:
                candidate = free

        self._allocated.add(candidate)
        self._assigned[token] = candidate
        return SiblingLinkResult.success(candidate)

    @property
    def allocated_count(self) -> int:
        return len(self._allocated)

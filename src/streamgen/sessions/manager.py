"""Session token lifecycle manager.

Simulates a bounded pool of concurrent user sessions. Each token is either
active (tracked with its creation time), retired (evicted after outliving its
TTL, waiting to be recycled), or unknown. Generated data reuses active
sessions first; new identities only enter rotation when sessions expire or
capacity allows it.

Both session sets are plain dicts, so enumeration follows insertion order:
`get_active_session_that_has_expired` returns the first qualifying token in
that order, while `recycle_oldest_expired` picks by creation timestamp.
"""

import logging
import random
from typing import Dict, List, Optional, Tuple

from streamgen.common.constants import SessionConstants
from streamgen.common.exceptions import EmptyStateError, InvalidConfigurationError
from streamgen.core.clock import Clock, SystemClock

logger = logging.getLogger(__name__)


class SessionManager:
    """Owns the active and retired session sets for one generation run.

    Not thread-safe: the manager belongs to the single generation thread.
    """

    def __init__(
        self,
        max_sessions: int = SessionConstants.DEFAULT_MAX_SESSIONS,
        max_session_duration_seconds: float = SessionConstants.DEFAULT_SESSION_DURATION_SECONDS,
        clock: Optional[Clock] = None,
        seed: Optional[int] = None,
    ):
        """Initialize an empty manager.

        Args:
            max_sessions: Upper bound on concurrently active tokens.
            max_session_duration_seconds: Time-to-live of each session.
            clock: Monotonic clock; SystemClock when omitted.
            seed: Seed for random active-token selection.
        """
        self.set_max_sessions(max_sessions)
        self.set_max_session_duration_seconds(max_session_duration_seconds)
        self._clock = clock or SystemClock()
        self._rng = random.Random(seed)
        self._active: Dict[str, float] = {}
        self._retired: Dict[str, float] = {}

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def get_max_sessions(self) -> int:
        return self._max_sessions

    def set_max_sessions(self, max_sessions: int) -> None:
        if max_sessions < 1:
            raise InvalidConfigurationError(
                f"max_sessions must be >= 1, got {max_sessions}"
            )
        self._max_sessions = max_sessions

    def get_max_session_duration_seconds(self) -> float:
        return self._max_session_duration_seconds

    def set_max_session_duration_seconds(self, seconds: float) -> None:
        if seconds < 0:
            raise InvalidConfigurationError(
                f"max_session_duration_seconds must be >= 0, got {seconds}"
            )
        self._max_session_duration_seconds = seconds

    # ------------------------------------------------------------------
    # State queries
    # ------------------------------------------------------------------

    def _has_outlived(self, created: float) -> bool:
        return self._clock.monotonic() - created > self._max_session_duration_seconds

    def is_active(self, token: str) -> bool:
        """True if the token is in the active set, regardless of expiry."""
        return token in self._active

    def is_expired(self, token: str) -> bool:
        """True if the token is active and older than the session duration."""
        created = self._active.get(token)
        return created is not None and self._has_outlived(created)

    def is_expired_session(self, token: str) -> bool:
        """True if the token was retired and has not been restarted or recycled."""
        return token in self._retired

    def get_active_session_count(self) -> int:
        return len(self._active)

    @property
    def active_session_count(self) -> int:
        return len(self._active)

    @property
    def active_tokens(self) -> List[str]:
        """Active tokens in insertion order."""
        return list(self._active)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def is_active_and_expire(self, token: str) -> bool:
        """Check a token and retire it when its session has run out.

        Returns:
            True if the token is active and within its TTL. False if it was
            never active, or if it was active but expired; in the latter
            case it moves to the retired set.
        """
        created = self._active.get(token)
        if created is None:
            return False
        if self._has_outlived(created):
            del self._active[token]
            self._retired[token] = created
            logger.debug(f"Session expired: {token}")
            return False
        return True

    def new_session(self, token: str) -> None:
        """Start (or restart) a session for the token with a fresh TTL."""
        # pop first so a restarted token moves to the end of the insertion order
        self._active.pop(token, None)
        self._active[token] = self._clock.monotonic()
        self._retired.pop(token, None)

    def get_random_active_token(self) -> str:
        """Pick one active token uniformly at random.

        Raises:
            EmptyStateError: If there are no active sessions.
        """
        if not self._active:
            raise EmptyStateError("No active sessions to choose from")
        return self._rng.choice(list(self._active))

    def get_active_session_that_has_expired(self) -> Optional[str]:
        """First active token, in insertion order, past its TTL. Does not mutate."""
        for token, created in self._active.items():
            if self._has_outlived(created):
                return token
        return None

    def recycle_oldest_expired(self) -> Optional[str]:
        """Remove and return the expired token with the oldest creation time.

        Candidates are retired tokens plus active tokens past their TTL.
        Tokens still within their TTL are never returned.
        """
        candidates: List[Tuple[str, float]] = list(self._retired.items())
        candidates.extend(
            (token, created)
            for token, created in self._active.items()
            if self._has_outlived(created)
        )
        if not candidates:
            return None

        token, _ = min(candidates, key=lambda item: item[1])
        self._retired.pop(token, None)
        self._active.pop(token, None)
        logger.debug(f"Recycled session: {token}")
        return token

    def get_token(self, candidate: str) -> str:
        """Resolve a candidate token against the current pool.

        An active candidate is reused. When the pool is full, a random active
        token is returned instead. A retired candidate is released from the
        retired set so it can start a new session.
        """
        if candidate in self._active:
            return candidate
        if len(self._active) >= self._max_sessions:
            return self.get_random_active_token()
        self._retired.pop(candidate, None)
        return candidate

    def reset(self) -> None:
        """Forget every session."""
        self._active.clear()
        self._retired.clear()

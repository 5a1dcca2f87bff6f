"""Session resolution policy and the token corpus."""

import logging
from typing import Dict, List, Optional

from streamgen.common.exceptions import TokenExhaustionError
from streamgen.sessions.manager import SessionManager

logger = logging.getLogger(__name__)


class SessionResolver:
    """Maps each generated session value to the session token the row carries.

    The resolver also accumulates the token corpus: every distinct value seen
    in a session field, in first-seen order. New sessions are minted from it.
    """

    def __init__(self, session_manager: Optional[SessionManager] = None):
        self.session_manager = session_manager or SessionManager()
        self._corpus: Dict[str, None] = {}

    @property
    def token_corpus(self) -> List[str]:
        return list(self._corpus)

    def _unused_corpus_token(self) -> Optional[str]:
        sm = self.session_manager
        for token in self._corpus:
            if not sm.is_active(token) and not sm.is_expired(token):
                return token
        return None

    def resolve(self, current_value: str, field_name: Optional[str] = None) -> str:
        """Resolve the generator's value for a session field.

        Order of preference: the value itself when it is an active session
        (an expired one is retired but still returned one last time), a
        random active token when the pool is over capacity, an active token
        past its TTL, an unused token from the corpus, and finally the oldest
        expired token.

        Raises:
            TokenExhaustionError: If no token can be found.
        """
        sm = self.session_manager
        self._corpus[current_value] = None

        if sm.is_active(current_value):
            sm.is_active_and_expire(current_value)
            return current_value

        if sm.get_active_session_count() > sm.get_max_sessions():
            return sm.get_random_active_token()

        expired = sm.get_active_session_that_has_expired()
        if expired is not None:
            return expired

        value = self._unused_corpus_token()
        if value is not None:
            sm.new_session(value)
            return value

        value = sm.recycle_oldest_expired()
        if value is None:
            raise TokenExhaustionError(
                f"Ran out of session tokens for field '{field_name}' (last value "
                f"'{current_value}'): increase the session duration "
                f"({sm.get_max_session_duration_seconds()}s), reduce the number of "
                f"sessions ({sm.get_max_sessions()}) or add tokens to the schema",
                token=current_value,
                field_name=field_name,
            )
        logger.debug(f"Recycling expired session token {value}")
        sm.new_session(value)
        return value

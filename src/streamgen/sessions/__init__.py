"""Session simulation - lifecycle manager, resolution policy, sibling linking."""

from streamgen.sessions.manager import SessionManager
from streamgen.sessions.resolver import SessionResolver
from streamgen.sessions.sibling import SiblingLinker, SiblingLinkResult

__all__ = [
    "SessionManager",
    "SessionResolver",
    "SiblingLinker",
    "SiblingLinkResult",
]

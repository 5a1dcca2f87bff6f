"""streamgen - synthetic streaming data with simulated session affinity."""

__version__ = "0.1.0"

from streamgen.sessions.manager import SessionManager
from streamgen.sessions.resolver import SessionResolver
from streamgen.sessions.sibling import SiblingLinker
from streamgen.producer.row_builder import RowAssembler
from streamgen.producer.datagen_producer import DataGenProducer

__all__ = [
    "SessionManager",
    "SessionResolver",
    "SiblingLinker",
    "RowAssembler",
    "DataGenProducer",
]

"""Base synthetic data generator with deterministic seeding."""

import random
import string
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

ALPHANUMERIC = string.ascii_letters + string.digits


class BaseGenerator(ABC):
    """Base class for schema-driven record generators.

    All generators must be deterministic given the same seed. A seed of
    None draws from system entropy.
    """

    def __init__(self, seed: Optional[int] = None):
        """Initialize generator with seed for reproducibility."""
        self.seed = seed
        self.rng = random.Random(seed)
        self._record_counter = 0

    def reset(self):
        """Reset generator to initial state."""
        self.rng = random.Random(self.seed)
        self._record_counter = 0

    def _random_choice(self, items: list) -> Any:
        """Deterministic random choice."""
        return self.rng.choice(items)

    def _random_int(self, low: int, high: int) -> int:
        """Deterministic random integer in [low, high)."""
        return self.rng.randrange(low, high)

    def _random_float(self, low: float, high: float) -> float:
        """Deterministic random float."""
        return self.rng.uniform(low, high)

    def _random_bool(self, probability: float = 0.5) -> bool:
        """Deterministic random boolean with given probability."""
        return self.rng.random() < probability

    def _random_string(self, length: int) -> str:
        """Deterministic random alphanumeric string."""
        return "".join(self.rng.choice(ALPHANUMERIC) for _ in range(length))

    def _random_bytes(self, length: int) -> bytes:
        return bytes(self.rng.getrandbits(8) for _ in range(length))

    @property
    def records_generated(self) -> int:
        return self._record_counter

    @abstractmethod
    def schema(self) -> Dict[str, Any]:
        """Return the schema describing generated records."""
        pass

    @abstractmethod
    def generate(self) -> Any:
        """Generate one record. Must be implemented by subclasses."""
        pass

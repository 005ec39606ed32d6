import random
import secrets
from typing import Optional


class SecretSampler:
    """Uniform integer draws from one generator, seeded once at construction."""

    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = secrets.randbits(64)
        self._rng = random.Random(seed)

    def uniform(self, lo: int, hi: int) -> int:
        if lo > hi:
            raise ValueError(f"empty range [{lo}, {hi}]")
        return self._rng.randint(lo, hi)

    def secret_exponent(self, p: int) -> int:
        """Sample n in [1, p-2]; p must already be validated as >= 3."""
        return self.uniform(1, p - 2)

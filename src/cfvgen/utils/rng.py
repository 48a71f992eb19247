"""Random number generation utilities."""

import numpy as np
from typing import List, Union

SeedLike = Union[None, int, np.random.SeedSequence]


class RNG:
    """Seeded wrapper around numpy's Generator.

    Samplers take an RNG instance explicitly so that one seed reproduces a
    whole generation run.
    """

    def __init__(self, seed: SeedLike = None):
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def randint(self, low: int, high: int) -> int:
        """Generate random integer in [low, high)."""
        return int(self.rng.integers(low, high))

    def random(self, size=None):
        """Generate random floats in [0.0, 1.0)."""
        return self.rng.random(size)

    def permutation(self, n: int) -> np.ndarray:
        """Random permutation of range(n)."""
        return self.rng.permutation(n)


def spawn_rngs(seed: SeedLike, count: int) -> List[RNG]:
    """Create `count` independent RNG streams derived from one seed."""
    if isinstance(seed, np.random.SeedSequence):
        sequence = seed
    else:
        sequence = np.random.SeedSequence(seed)
    return [RNG(child) for child in sequence.spawn(count)]

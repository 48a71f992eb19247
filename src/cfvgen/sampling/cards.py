"""Random board sampling."""

import numpy as np

from cfvgen.types import GameConfig
from cfvgen.utils.rng import RNG


class CardGenerator:
    """Samples cards uniformly without replacement from the full deck."""

    def __init__(self, config: GameConfig, rng: RNG):
        self.config = config
        self.rng = rng

    def generate_cards(self, count: int) -> np.ndarray:
        """Sample `count` distinct cards, returned sorted."""
        if not 0 <= count <= self.config.card_count:
            raise ValueError(f"Cannot deal {count} cards from a {self.config.card_count}-card deck")
        deck = self.rng.permutation(self.config.card_count) + 1
        return np.sort(deck[:count]).astype(np.int64)

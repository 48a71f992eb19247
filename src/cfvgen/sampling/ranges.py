"""Random range sampling.

Ranges are drawn by recursively splitting probability mass at a uniform
random point over the possible hands sorted by strength, which yields
ranges that are smooth in hand strength rather than uniform noise.
"""

from typing import Optional, Sequence

import numpy as np

from cfvgen.game import cards
from cfvgen.types import GameConfig, Player
from cfvgen.utils.rng import RNG


class RangeGenerator:
    """Samples batches of random ranges for one board at a time."""

    def __init__(self, config: GameConfig, rng: RNG):
        self.config = config
        self.rng = rng
        self.sorted_hands: Optional[np.ndarray] = None

    def set_board(self, board: Sequence[int]):
        """Order the board's possible hands by strength."""
        strengths = cards.evaluate_board(self.config, board)
        possible = np.flatnonzero(strengths >= 0)
        order = np.argsort(strengths[possible], kind='stable')
        self.sorted_hands = possible[order]

    def _generate_recursion(self, sorted_range: np.ndarray, mass: np.ndarray):
        """Split `mass` (one entry per row) across the columns of `sorted_range`."""
        card_count = sorted_range.shape[1]
        if card_count == 1:
            sorted_range[:, 0] = mass
            return

        mass1 = mass * self.rng.random(sorted_range.shape[0])
        mass2 = mass - mass1
        half_size = card_count // 2
        if card_count % 2 == 1:
            half_size += self.rng.randint(0, 2)
        self._generate_recursion(sorted_range[:, :half_size], mass1)
        self._generate_recursion(sorted_range[:, half_size:], mass2)

    def generate_range(self, batch_size: int, player: Player = Player.P1) -> np.ndarray:
        """Sample `batch_size` ranges over all hands, one per row.

        Each row sums to 1 and blocked hands get 0. Both players draw from
        the same distribution.
        """
        if self.sorted_hands is None:
            raise ValueError("No board set: call set_board() before generate_range()")

        sorted_range = np.zeros((batch_size, len(self.sorted_hands)))
        self._generate_recursion(sorted_range, np.ones(batch_size))

        ranges = np.zeros((batch_size, self.config.card_count))
        ranges[:, self.sorted_hands] = sorted_range
        return ranges

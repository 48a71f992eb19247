"""Assigns private hands to buckets on a given board.

Every (board, private hand) pair gets its own bucket: the board index picks
a block of `card_count` buckets and the hand picks the bucket inside it.
"""

from typing import Sequence

import numpy as np

from cfvgen.game import cards
from cfvgen.types import GameConfig

NO_BUCKET = -1


class Bucketer:
    """Lossless (board, hand) abstraction."""

    def __init__(self, config: GameConfig):
        self.config = config

    def get_bucket_count(self) -> int:
        """Total number of buckets across all boards."""
        return self.config.card_count * cards.get_boards_count(self.config)

    def compute_buckets(self, board: Sequence[int]) -> np.ndarray:
        """Map each private hand to its 1-based bucket on `board`.

        Hands sharing a card with the board get NO_BUCKET.
        """
        card_count = self.config.card_count
        shift = (cards.get_board_index(self.config, board) - 1) * card_count
        buckets = np.arange(1, card_count + 1, dtype=np.int64) + shift
        for card in board:
            buckets[int(card) - 1] = NO_BUCKET
        return buckets

"""Converts between vectors over private hands and vectors over buckets.

`set_board` returns a `BoardBuckets` context which every conversion call
takes explicitly, so there is no way to convert against a stale or missing
board.
"""

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from cfvgen.abstraction.bucketer import Bucketer, NO_BUCKET
from cfvgen.types import GameConfig


@dataclass(frozen=True)
class BoardBuckets:
    """Bucket assignment of every private hand on one board."""
    board: np.ndarray
    buckets: np.ndarray        # 1-based bucket per hand, NO_BUCKET if blocked
    possible_hands: np.ndarray  # hand indexes with a bucket
    columns: np.ndarray        # 0-based bucket column of each possible hand
    bucket_count: int


class BucketConversion:
    """Scatter/gather between the per-hand and the per-bucket basis."""

    def __init__(self, config: GameConfig, bucketer: Bucketer = None):
        self.config = config
        self.bucketer = bucketer or Bucketer(config)
        self.bucket_count = self.bucketer.get_bucket_count()

    def set_board(self, board: Sequence[int]) -> BoardBuckets:
        """Compute the bucket context for `board`."""
        board = np.asarray(board, dtype=np.int64)
        buckets = self.bucketer.compute_buckets(board)
        possible_hands = np.flatnonzero(buckets != NO_BUCKET)
        buckets.setflags(write=False)
        return BoardBuckets(
            board=board,
            buckets=buckets,
            possible_hands=possible_hands,
            columns=buckets[possible_hands] - 1,
            bucket_count=self.bucket_count,
        )

    def _check_context(self, board_buckets: BoardBuckets):
        if not isinstance(board_buckets, BoardBuckets):
            raise ValueError("No board set: call set_board() and pass its result")
        if board_buckets.bucket_count != self.bucket_count:
            raise ValueError("Board context was built for a different game config")

    def card_range_to_bucket_range(
        self,
        board_buckets: BoardBuckets,
        card_range: np.ndarray,
        bucket_range: np.ndarray
    ):
        """Add each possible hand's weight into its bucket column of `bucket_range`.

        Both arguments are either vectors or matrices with one example per
        row. Blocked hands are skipped and columns no hand maps to are left
        untouched, so callers pass a zeroed output.
        """
        self._check_context(board_buckets)
        card_range = np.asarray(card_range)
        if card_range.shape[-1] != self.config.card_count:
            raise ValueError(
                f"Expected {self.config.card_count} hands, got shape {card_range.shape}"
            )
        if bucket_range.shape[-1] != self.bucket_count:
            raise ValueError(
                f"Expected {self.bucket_count} buckets, got shape {bucket_range.shape}"
            )
        if card_range.shape[:-1] != bucket_range.shape[:-1]:
            raise ValueError(
                f"Row mismatch: {card_range.shape} hands vs {bucket_range.shape} buckets"
            )

        weights = card_range[..., board_buckets.possible_hands]
        if bucket_range.ndim == 1:
            np.add.at(bucket_range, board_buckets.columns, weights)
        else:
            np.add.at(bucket_range, (slice(None), board_buckets.columns), weights)

    def bucket_value_to_card_value(
        self,
        board_buckets: BoardBuckets,
        bucket_value: np.ndarray,
        card_value: np.ndarray
    ):
        """Give every possible hand the value of its bucket; blocked hands get 0."""
        self._check_context(board_buckets)
        bucket_value = np.asarray(bucket_value)
        if bucket_value.shape[-1] != self.bucket_count:
            raise ValueError(
                f"Expected {self.bucket_count} buckets, got shape {bucket_value.shape}"
            )
        if card_value.shape[-1] != self.config.card_count:
            raise ValueError(
                f"Expected {self.config.card_count} hands, got shape {card_value.shape}"
            )
        card_value[...] = 0
        card_value[..., board_buckets.possible_hands] = bucket_value[..., board_buckets.columns]

    def get_possible_bucket_mask(self, board_buckets: BoardBuckets) -> np.ndarray:
        """1 for every bucket some hand maps to on this board, 0 elsewhere."""
        self._check_context(board_buckets)
        mask = np.zeros(self.bucket_count, dtype=np.float64)
        mask[board_buckets.columns] = 1
        return mask

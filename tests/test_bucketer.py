"""Tests for the card abstraction."""

import numpy as np
import pytest

from cfvgen.abstraction.bucketer import Bucketer, NO_BUCKET
from cfvgen.types import GameConfig


@pytest.fixture
def bucketer():
    return Bucketer(GameConfig())


def test_bucket_count(bucketer):
    assert bucketer.get_bucket_count() == 36
    assert Bucketer(GameConfig(board_card_count=2)).get_bucket_count() == 90


def test_compute_buckets_single_board(bucketer):
    """Board Qh shifts buckets by two blocks and blocks hand 3."""
    buckets = bucketer.compute_buckets(np.array([3]))
    assert buckets.tolist() == [13, 14, NO_BUCKET, 16, 17, 18]


@pytest.mark.parametrize("board_card_count", [1, 2])
def test_buckets_for_all_boards(board_card_count):
    """Each board blocks exactly its own cards and no two boards share a bucket."""
    from itertools import combinations

    config = GameConfig(board_card_count=board_card_count)
    bucketer = Bucketer(config)
    bucket_count = bucketer.get_bucket_count()

    seen = set()
    for board in combinations(range(1, config.card_count + 1), board_card_count):
        buckets = bucketer.compute_buckets(list(board))
        assert len(buckets) == config.card_count
        assert np.sum(buckets == NO_BUCKET) == board_card_count
        for card in board:
            assert buckets[card - 1] == NO_BUCKET

        valid = buckets[buckets != NO_BUCKET]
        assert np.all((valid >= 1) & (valid <= bucket_count))
        assert len(set(valid.tolist())) == len(valid)
        assert seen.isdisjoint(valid.tolist())
        seen.update(valid.tolist())


def test_board_permutations_share_buckets():
    bucketer = Bucketer(GameConfig(board_card_count=2))
    np.testing.assert_array_equal(
        bucketer.compute_buckets([2, 5]),
        bucketer.compute_buckets([5, 2])
    )


def test_invalid_board_rejected(bucketer):
    with pytest.raises(ValueError):
        bucketer.compute_buckets([9])

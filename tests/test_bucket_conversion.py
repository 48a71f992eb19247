"""Tests for conversion between hand and bucket vectors."""

import numpy as np
import pytest

from cfvgen.abstraction.bucket_conversion import BucketConversion
from cfvgen.types import GameConfig


@pytest.fixture
def conversion():
    return BucketConversion(GameConfig())


class TestCardRangeToBucketRange:
    """Scatter-add from hands into buckets."""

    def test_vector(self, conversion):
        board_buckets = conversion.set_board([3])
        bucket_range = np.zeros(36)
        conversion.card_range_to_bucket_range(
            board_buckets, np.arange(1.0, 7.0), bucket_range
        )

        assert bucket_range[12:18].tolist() == [1, 2, 0, 4, 5, 6]
        assert bucket_range.sum() == pytest.approx(18.0)
        assert np.all(bucket_range[:12] == 0)
        assert np.all(bucket_range[18:] == 0)

    def test_matrix_rows_are_independent(self, conversion):
        rng = np.random.default_rng(0)
        card_range = rng.random((4, 6))
        board_buckets = conversion.set_board([5])
        bucket_range = np.zeros((4, 36))

        conversion.card_range_to_bucket_range(board_buckets, card_range, bucket_range)

        feasible = card_range.copy()
        feasible[:, 4] = 0
        np.testing.assert_allclose(bucket_range.sum(axis=1), feasible.sum(axis=1))
        np.testing.assert_allclose(bucket_range[:, 24:30], feasible)

    def test_nonzero_buckets_are_feasible(self, conversion):
        """Every nonzero bucket is marked possible by the mask."""
        rng = np.random.default_rng(1)
        for board in range(1, 7):
            board_buckets = conversion.set_board([board])
            bucket_range = np.zeros((3, 36))
            conversion.card_range_to_bucket_range(board_buckets, rng.random((3, 6)) + 0.1, bucket_range)
            mask = conversion.get_possible_bucket_mask(board_buckets)
            assert np.all(mask[np.any(bucket_range != 0, axis=0)] == 1)

    def test_unused_columns_untouched(self, conversion):
        board_buckets = conversion.set_board([1])
        bucket_range = np.zeros(36)
        bucket_range[35] = 7.0
        bucket_range[0] = 3.0  # Blocked hand's bucket
        conversion.card_range_to_bucket_range(board_buckets, np.ones(6), bucket_range)

        assert bucket_range[35] == 7.0
        assert bucket_range[0] == 3.0
        assert bucket_range[1] == 1.0

    def test_writes_into_tensor_view(self, conversion):
        """Output may be a slice of a wider inputs tensor."""
        inputs = np.zeros((2, 73))
        board_buckets = conversion.set_board([2])
        conversion.card_range_to_bucket_range(
            board_buckets, np.ones((2, 6)), inputs[:, 36:72]
        )

        assert inputs[:, :36].sum() == 0
        assert inputs[:, 36:72].sum() == pytest.approx(10.0)
        assert inputs[:, 72].sum() == 0

    def test_shape_mismatch(self, conversion):
        board_buckets = conversion.set_board([2])
        with pytest.raises(ValueError):
            conversion.card_range_to_bucket_range(board_buckets, np.ones(5), np.zeros(36))
        with pytest.raises(ValueError):
            conversion.card_range_to_bucket_range(board_buckets, np.ones(6), np.zeros(35))
        with pytest.raises(ValueError):
            conversion.card_range_to_bucket_range(board_buckets, np.ones((2, 6)), np.zeros((3, 36)))


def test_conversion_requires_board(conversion):
    with pytest.raises(ValueError):
        conversion.card_range_to_bucket_range(None, np.ones(6), np.zeros(36))
    with pytest.raises(ValueError):
        conversion.get_possible_bucket_mask(None)


def test_context_from_other_game_rejected(conversion):
    other = BucketConversion(GameConfig(board_card_count=2))
    with pytest.raises(ValueError):
        conversion.get_possible_bucket_mask(other.set_board([1, 2]))


def test_possible_bucket_mask(conversion):
    mask = conversion.get_possible_bucket_mask(conversion.set_board([3]))

    assert mask.shape == (36,)
    assert mask.sum() == 5
    assert mask[12:18].tolist() == [1, 1, 0, 1, 1, 1]


def test_bucket_value_to_card_value(conversion):
    board_buckets = conversion.set_board([4])
    card_value = np.arange(1.0, 7.0)
    bucket_value = np.zeros(36)
    conversion.card_range_to_bucket_range(board_buckets, card_value, bucket_value)

    restored = np.full(6, -1.0)
    conversion.bucket_value_to_card_value(board_buckets, bucket_value, restored)

    assert restored.tolist() == [1, 2, 3, 0, 5, 6]


def test_board_buckets_are_read_only(conversion):
    board_buckets = conversion.set_board([1])
    with pytest.raises(ValueError):
        board_buckets.buckets[0] = 5

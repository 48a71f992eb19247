"""Tests for CFR re-solving."""

import numpy as np
import pytest

from cfvgen.types import GameConfig, Player, ResolveNode, ResolvingConfig
from cfvgen.values.resolving import Resolving
from cfvgen.values.terminal_equity import TerminalEquity


@pytest.fixture
def config():
    return GameConfig()


@pytest.fixture
def resolving(config):
    return Resolving(config, ResolvingConfig(cfr_iters=200, cfr_skip_iters=100))


def make_ranges(board_card):
    rng = np.random.default_rng(board_card)
    ranges = rng.random((2, 6)) + 0.05
    ranges[:, board_card - 1] = 0
    return ranges / ranges.sum(axis=1, keepdims=True)


def node(board_card, pot, street=2):
    return ResolveNode(
        board=np.array([board_card]),
        street=street,
        current_player=Player.P1,
        bets=np.array([pot, pot], dtype=float),
    )


def test_allin_pot_matches_terminal_equity(config, resolving):
    """With both players all-in resolving reduces to terminal equity."""
    ranges = make_ranges(3)
    resolving.resolve_first_node(node(3, config.stack), ranges[0], ranges[1])
    values = resolving.get_root_cfv_both_players() / config.stack

    equity = TerminalEquity(config)
    equity.set_board(np.array([3]))
    np.testing.assert_allclose(values[0], equity.call_value(ranges[1]), atol=1e-9)
    np.testing.assert_allclose(values[1], equity.call_value(ranges[0]), atol=1e-9)


def test_root_values_are_zero_sum(resolving):
    ranges = make_ranges(2)
    resolving.resolve_first_node(node(2, 300.0), ranges[0], ranges[1])
    values = resolving.get_root_cfv_both_players()

    assert values.shape == (2, 6)
    total = ranges[0] @ values[0] + ranges[1] @ values[1]
    assert abs(total) < 1e-6 * 300.0


def test_blocked_hands_have_zero_value(resolving):
    ranges = make_ranges(5)
    resolving.resolve_first_node(node(5, 500.0), ranges[0], ranges[1])
    values = resolving.get_root_cfv_both_players()
    assert np.all(values[:, 4] == 0)


def test_nuts_never_lose(resolving):
    """The hand pairing the board has non-negative value for both players."""
    ranges = make_ranges(1)
    resolving.resolve_first_node(node(1, 200.0), ranges[0], ranges[1])
    values = resolving.get_root_cfv_both_players()
    assert values[0, 1] >= 0
    assert values[1, 1] >= 0


def test_average_strategy_is_distribution(resolving):
    ranges = make_ranges(4)
    resolving.resolve_first_node(node(4, 150.0), ranges[0], ranges[1])
    strategy = resolving.solver.get_average_strategy(resolving.root)

    assert strategy.shape == (len(resolving.root.children), 6)
    np.testing.assert_allclose(strategy.sum(axis=0), 1.0)


def test_resolving_is_deterministic(config):
    ranges = make_ranges(6)
    results = []
    for _ in range(2):
        resolving = Resolving(config, ResolvingConfig(cfr_iters=50, cfr_skip_iters=10))
        resolving.resolve_first_node(node(6, 400.0), ranges[0], ranges[1])
        results.append(resolving.get_root_cfv_both_players())
    np.testing.assert_array_equal(results[0], results[1])


def test_values_before_resolve(resolving):
    with pytest.raises(RuntimeError):
        resolving.get_root_cfv_both_players()


def test_empty_range_fails(resolving):
    ranges = make_ranges(2)
    empty = np.zeros(6)
    empty[1] = 1.0  # Only mass on the board card
    with pytest.raises(RuntimeError):
        resolving.resolve_first_node(node(2, 300.0), empty, ranges[1])


def test_non_final_street_rejected(resolving):
    ranges = make_ranges(2)
    with pytest.raises(ValueError):
        resolving.resolve_first_node(node(2, 300.0, street=1), ranges[0], ranges[1])


def test_wrong_range_shape(resolving):
    with pytest.raises(ValueError):
        resolving.resolve_first_node(node(2, 300.0), np.ones(5), np.ones(5))

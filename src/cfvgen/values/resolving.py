"""Exact re-solving of a last-street situation from given ranges.

RangeCFR runs CFR+ on the public tree with regrets kept as one vector over
private hands per action, so a single tree walk updates every hand of both
players at once. Root counterfactual values are averaged over the
iterations that follow the warm-up (`cfr_skip_iters`).
"""

from typing import Dict, Optional

import numpy as np

from cfvgen.game import cards
from cfvgen.game.tree import PokerTreeBuilder, TreeNode, TreeParams
from cfvgen.types import GameConfig, NodeType, ResolveNode, ResolvingConfig
from cfvgen.utils.logging import get_logger
from cfvgen.values.terminal_equity import TerminalEquity

logger = get_logger("values.resolving")


class RangeCFR:
    """CFR+ over range vectors on a public tree."""

    def __init__(
        self,
        root: TreeNode,
        terminal_equity: TerminalEquity,
        resolving_config: ResolvingConfig
    ):
        self.root = root
        self.terminal_equity = terminal_equity
        self.cfr_iters = resolving_config.cfr_iters
        self.cfr_skip_iters = resolving_config.cfr_skip_iters
        self.card_count = terminal_equity.config.card_count

        self.regrets: Dict[int, np.ndarray] = {}
        self.strategy_sum: Dict[int, np.ndarray] = {}

    def solve(self, ranges: np.ndarray) -> np.ndarray:
        """Run CFR+ from the root ranges and return averaged root values.

        Args:
            ranges: [2, card_count] reach probabilities at the root

        Returns:
            [2, card_count] counterfactual values at the root
        """
        value_sum = np.zeros((2, self.card_count))
        for iteration in range(self.cfr_iters):
            values = self._cfr(self.root, ranges, iteration)
            if iteration >= self.cfr_skip_iters:
                value_sum += values
        return value_sum / (self.cfr_iters - self.cfr_skip_iters)

    def _terminal_values(self, node: TreeNode, ranges: np.ndarray) -> np.ndarray:
        values = np.empty((2, self.card_count))
        if node.node_type is NodeType.FOLD:
            folder = node.fold_player.value
            # Folder forfeits its contribution to the other player
            stake = node.bets[folder]
            for player in (0, 1):
                sign = -1.0 if player == folder else 1.0
                values[player] = sign * stake * self.terminal_equity.fold_value(ranges[1 - player])
        else:
            for player in (0, 1):
                values[player] = node.bets[player] * self.terminal_equity.call_value(ranges[1 - player])
        return values

    @staticmethod
    def _regret_matching(regrets: np.ndarray) -> np.ndarray:
        """Current strategy [actions, hands] from positive regrets."""
        positive = np.maximum(regrets, 0.0)
        totals = positive.sum(axis=0, keepdims=True)
        uniform = np.full_like(positive, 1.0 / positive.shape[0])
        return np.where(totals > 0, positive / np.where(totals > 0, totals, 1.0), uniform)

    def _cfr(self, node: TreeNode, ranges: np.ndarray, iteration: int) -> np.ndarray:
        if node.terminal:
            return self._terminal_values(node, ranges)

        player = node.current_player.value
        opponent = 1 - player
        action_count = len(node.children)

        regrets = self.regrets.get(node.node_id)
        if regrets is None:
            regrets = np.zeros((action_count, self.card_count))
            self.regrets[node.node_id] = regrets
            self.strategy_sum[node.node_id] = np.zeros((action_count, self.card_count))

        strategy = self._regret_matching(regrets)

        values = np.zeros((2, self.card_count))
        action_values = np.empty((action_count, self.card_count))
        for action, child in enumerate(node.children):
            child_ranges = ranges.copy()
            child_ranges[player] = ranges[player] * strategy[action]
            child_values = self._cfr(child, child_ranges, iteration)
            action_values[action] = child_values[player]
            values[player] += strategy[action] * child_values[player]
            values[opponent] += child_values[opponent]

        regrets += action_values - values[player]
        np.maximum(regrets, 0.0, out=regrets)

        if iteration >= self.cfr_skip_iters:
            self.strategy_sum[node.node_id] += ranges[player] * strategy

        return values

    def get_average_strategy(self, node: TreeNode) -> Optional[np.ndarray]:
        """Average strategy [actions, hands] at an inner node, None if never visited."""
        strategy_sum = self.strategy_sum.get(node.node_id)
        if strategy_sum is None:
            return None
        totals = strategy_sum.sum(axis=0, keepdims=True)
        uniform = np.full_like(strategy_sum, 1.0 / strategy_sum.shape[0])
        return np.where(totals > 0, strategy_sum / np.where(totals > 0, totals, 1.0), uniform)


class Resolving:
    """Solves one situation and exposes the root values of both players.

    Instances hold the solver state of a single resolve and are not shared
    between examples or worker processes.
    """

    def __init__(self, config: GameConfig, resolving_config: ResolvingConfig):
        self.config = config
        self.resolving_config = resolving_config
        self.tree_builder = PokerTreeBuilder(config)
        self.terminal_equity = TerminalEquity(config)
        self.root: Optional[TreeNode] = None
        self.solver: Optional[RangeCFR] = None
        self._root_values: Optional[np.ndarray] = None

    def resolve_first_node(self, node: ResolveNode, p1_range: np.ndarray, p2_range: np.ndarray):
        """Solve the game starting at `node` with the given player ranges.

        Raises:
            ValueError: if the node is not a supported root or ranges are malformed
            RuntimeError: if the situation cannot be solved
        """
        card_count = self.config.card_count
        board = np.asarray(node.board, dtype=np.int64)
        ranges = np.stack([
            np.asarray(p1_range, dtype=np.float64),
            np.asarray(p2_range, dtype=np.float64),
        ])
        if ranges.shape != (2, card_count):
            raise ValueError(f"Expected two ranges over {card_count} hands, got {ranges.shape}")

        possible = cards.get_possible_hand_indexes(self.config, board)
        ranges = ranges * possible
        if not np.all(np.isfinite(ranges)) or np.any(ranges < 0):
            raise RuntimeError("Cannot resolve: ranges must be finite and non-negative")
        if np.any(ranges.sum(axis=1) <= 0):
            raise RuntimeError("Cannot resolve: a range has no mass on hands possible with this board")

        self.root = self.tree_builder.build_tree(TreeParams(
            street=node.street,
            current_player=node.current_player,
            bets=node.bets,
        ))
        self.terminal_equity.set_board(board)
        self.solver = RangeCFR(self.root, self.terminal_equity, self.resolving_config)

        root_values = self.solver.solve(ranges)
        if not np.all(np.isfinite(root_values)):
            raise RuntimeError("Resolving produced non-finite root values")

        self._root_values = root_values
        logger.debug(
            f"Resolved board {board.tolist()} bets {np.asarray(node.bets).tolist()}: "
            f"{self.tree_builder.node_count} nodes, {self.resolving_config.cfr_iters} iterations"
        )

    def get_root_cfv_both_players(self) -> np.ndarray:
        """Root counterfactual values [2, card_count] from the last resolve."""
        if self._root_values is None:
            raise RuntimeError("No resolve has been run yet")
        return self._root_values.copy()

"""Public betting tree for the last street.

Each player may fold when facing a bet, check or call, raise by the
configured pot fractions, or move all-in. Two checks, a call, or a fold end
the hand; there are no chance nodes since resolving only runs on the final
street.
"""

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from cfvgen.types import GameConfig, NodeType, Player


@dataclass
class TreeParams:
    """Root state for tree construction."""
    street: int
    current_player: Player
    bets: np.ndarray


@dataclass
class TreeNode:
    """Node of the public tree."""
    node_id: int
    bets: np.ndarray
    node_type: NodeType
    current_player: Optional[Player] = None  # None at terminal nodes
    fold_player: Optional[Player] = None
    action_count: int = 0  # Actions taken on this street before the node
    actions: List[str] = field(default_factory=list)
    children: List["TreeNode"] = field(default_factory=list)

    @property
    def terminal(self) -> bool:
        return self.node_type is not NodeType.INNER


class PokerTreeBuilder:
    """Builds the public tree from a root state."""

    def __init__(self, config: GameConfig):
        self.config = config
        self._next_id = 0

    def _new_node(self, **kwargs) -> TreeNode:
        node = TreeNode(node_id=self._next_id, **kwargs)
        self._next_id += 1
        return node

    def build_tree(self, params: TreeParams) -> TreeNode:
        """Build the tree below `params`.

        Raises:
            ValueError: for a non-final street or bets outside [ante, stack]
        """
        if params.street != self.config.last_street:
            raise ValueError(
                f"Only last-street trees are supported (street {self.config.last_street}), "
                f"got street {params.street}"
            )
        bets = np.asarray(params.bets, dtype=np.float64)
        if bets.shape != (self.config.player_count,):
            raise ValueError(f"Expected one bet per player, got {bets}")
        if bets.min() < self.config.ante or bets.max() > self.config.stack:
            raise ValueError(
                f"Bets {bets.tolist()} outside [{self.config.ante}, {self.config.stack}]"
            )

        self._next_id = 0
        if bets.min() >= self.config.stack:
            # Both all-in: nothing left to decide
            return self._new_node(bets=bets, node_type=NodeType.SHOWDOWN)

        root = self._new_node(
            bets=bets,
            node_type=NodeType.INNER,
            current_player=params.current_player,
        )
        self._build(root)
        return root

    @property
    def node_count(self) -> int:
        """Nodes created by the last build_tree call."""
        return self._next_id

    def _build(self, node: TreeNode):
        for action, child in self._get_children(node):
            node.actions.append(action)
            node.children.append(child)
            if not child.terminal:
                self._build(child)

    def _get_children(self, node: TreeNode):
        player = node.current_player
        opponent = player.opponent
        bets = node.bets
        stack = self.config.stack
        children = []

        if bets[player.value] < bets[opponent.value]:
            children.append(("fold", self._new_node(
                bets=bets.copy(),
                node_type=NodeType.FOLD,
                fold_player=player,
                action_count=node.action_count + 1,
            )))
            called = bets.copy()
            called[player.value] = bets[opponent.value]
            children.append(("call", self._new_node(
                bets=called,
                node_type=NodeType.SHOWDOWN,
                action_count=node.action_count + 1,
            )))
        elif node.action_count == 0:
            children.append(("check", self._new_node(
                bets=bets.copy(),
                node_type=NodeType.INNER,
                current_player=opponent,
                action_count=1,
            )))
        else:
            children.append(("check", self._new_node(
                bets=bets.copy(),
                node_type=NodeType.SHOWDOWN,
                action_count=node.action_count + 1,
            )))

        max_bet = bets.max()
        if max_bet < stack:
            pot = max_bet * 2
            min_raise = max(max_bet - bets.min(), self.config.ante)
            max_raise = stack - max_bet
            raise_to = []
            for fraction in self.config.bet_sizing:
                raise_size = pot * fraction
                if min_raise <= raise_size < max_raise:
                    raise_to.append(max_bet + raise_size)
            raise_to.append(stack)

            for amount in sorted(set(raise_to)):
                raised = bets.copy()
                raised[player.value] = amount
                label = "allin" if amount >= stack else f"raise_{amount:g}"
                children.append((label, self._new_node(
                    bets=raised,
                    node_type=NodeType.INNER,
                    current_player=opponent,
                    action_count=node.action_count + 1,
                )))

        return children

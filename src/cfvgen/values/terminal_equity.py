"""Terminal equity: values of hands when the game ends without further action."""

from typing import Optional, Sequence

import numpy as np

from cfvgen.game import cards
from cfvgen.types import GameConfig


class TerminalEquity:
    """Showdown and fold values against an opponent range on one board."""

    def __init__(self, config: GameConfig):
        self.config = config
        self.board: Optional[np.ndarray] = None
        self.equity_matrix: Optional[np.ndarray] = None
        self.fold_matrix: Optional[np.ndarray] = None

    def set_board(self, board: Sequence[int]):
        """Build the call and fold matrices for `board`.

        equity_matrix[i, j] is +1 if hand i beats hand j at showdown, -1 if it
        loses and 0 for ties or when the two hands cannot coexist with the
        board. fold_matrix[i, j] is 1 when they can coexist.
        """
        self.board = np.asarray(board, dtype=np.int64)
        possible = cards.get_possible_hand_indexes(self.config, self.board)

        fold_matrix = np.outer(possible, possible)
        np.fill_diagonal(fold_matrix, 0)

        strengths = cards.evaluate_board(self.config, self.board)
        equity_matrix = np.sign(strengths[:, None] - strengths[None, :]).astype(np.float64)

        self.fold_matrix = fold_matrix
        self.equity_matrix = equity_matrix * fold_matrix

    def _check_board(self):
        if self.equity_matrix is None:
            raise ValueError("No board set: call set_board() first")

    def call_value(self, opponent_ranges: np.ndarray) -> np.ndarray:
        """Showdown value of every hand against each opponent range (row)."""
        self._check_board()
        return np.asarray(opponent_ranges) @ self.equity_matrix.T

    def fold_value(self, opponent_ranges: np.ndarray) -> np.ndarray:
        """Opponent mass compatible with every hand, per opponent range (row)."""
        self._check_board()
        return np.asarray(opponent_ranges) @ self.fold_matrix.T

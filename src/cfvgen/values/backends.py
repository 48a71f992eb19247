"""Value backends used to label generated situations.

Both backends map (board, ranges, pot sample) to per-hand values for each
player; the data generator does not know which one it is driving.

- terminal_equity: both players check/call to showdown. Cheap and exact for
  that assumption; the pot feature is uniform noise in [0, 1).
- resolving: each example is re-solved with CFR from a node whose bets equal
  the sampled pot; values are divided by that pot so targets are pot-relative
  and the pot feature is pot / stack.
"""

import multiprocessing as mp
from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple

import numpy as np

from cfvgen.types import GameConfig, Player, PotSample, ResolveNode, ResolvingConfig
from cfvgen.utils.logging import get_logger
from cfvgen.utils.rng import RNG
from cfvgen.values.resolving import Resolving
from cfvgen.values.terminal_equity import TerminalEquity

logger = get_logger("values.backends")

# Largest sampled pot stays below the stack so the resolved tree keeps decisions
POT_STACK_MARGIN = 0.1


class ValueBackend(ABC):
    """Computes per-hand values for a batch of situations on one board."""

    name: str = ""

    def __init__(self, config: GameConfig):
        self.config = config
        self.board: Optional[np.ndarray] = None

    def set_board(self, board: Sequence[int]):
        self.board = np.asarray(board, dtype=np.int64)

    @abstractmethod
    def sample_pots(self, rng: RNG, batch_size: int) -> PotSample:
        """Sample one pot feature per example."""

    @abstractmethod
    def compute_values(self, ranges: np.ndarray, pot_sample: PotSample) -> np.ndarray:
        """Values [player_count, batch, card_count] for ranges [player_count, batch, card_count]."""

    def _check_board(self):
        if self.board is None:
            raise ValueError(f"{self.name}: no board set, call set_board() first")

    def close(self):
        """Release worker resources, if any."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class TerminalEquityBackend(ValueBackend):
    """Showdown values against the opponent's range, one call per player per batch."""

    name = "terminal_equity"

    def __init__(self, config: GameConfig):
        super().__init__(config)
        self.equity = TerminalEquity(config)

    def set_board(self, board: Sequence[int]):
        super().set_board(board)
        self.equity.set_board(self.board)

    def sample_pots(self, rng: RNG, batch_size: int) -> PotSample:
        return PotSample(features=rng.random(batch_size))

    def compute_values(self, ranges: np.ndarray, pot_sample: PotSample) -> np.ndarray:
        self._check_board()
        values = np.empty_like(ranges, dtype=np.float64)
        for player in Player:
            values[player.value] = self.equity.call_value(ranges[player.opponent.value])
        return values


def resolve_example(
    task: Tuple[GameConfig, ResolvingConfig, np.ndarray, np.ndarray, np.ndarray, float]
) -> np.ndarray:
    """Resolve one example with its own solver and return pot-normalized root values.

    Module-level so it can run in spawned worker processes.
    """
    config, resolving_config, board, p1_range, p2_range, pot_size = task
    node = ResolveNode(
        board=board,
        street=config.last_street,
        current_player=Player.P1,
        bets=np.array([pot_size, pot_size], dtype=np.float64),
    )
    resolving = Resolving(config, resolving_config)
    resolving.resolve_first_node(node, p1_range, p2_range)
    return resolving.get_root_cfv_both_players() / pot_size


class ResolvingBackend(ValueBackend):
    """Re-solves every example from a pot-specific root node."""

    name = "resolving"

    def __init__(
        self,
        config: GameConfig,
        resolving_config: ResolvingConfig,
        num_workers: int = 1
    ):
        super().__init__(config)
        self.resolving_config = resolving_config
        self.num_workers = max(1, num_workers)
        self._pool = None

    @property
    def min_pot(self) -> float:
        return self.config.ante

    @property
    def max_pot(self) -> float:
        return self.config.stack - POT_STACK_MARGIN

    def sample_pots(self, rng: RNG, batch_size: int) -> PotSample:
        """Pot sizes uniform in [ante, stack - 0.1), features = size / stack."""
        sizes = rng.random(batch_size) * (self.max_pot - self.min_pot) + self.min_pot
        return PotSample(features=sizes / self.config.stack, sizes=sizes)

    def _get_pool(self):
        if self._pool is None:
            # Spawn context for cross-platform compatibility
            ctx = mp.get_context('spawn')
            self._pool = ctx.Pool(processes=self.num_workers)
            logger.info(f"Started resolving pool with {self.num_workers} workers")
        return self._pool

    def compute_values(self, ranges: np.ndarray, pot_sample: PotSample) -> np.ndarray:
        self._check_board()
        if pot_sample.sizes is None:
            raise ValueError("Resolving needs pot sizes in chips")

        batch_size = ranges.shape[1]
        tasks = [
            (
                self.config,
                self.resolving_config,
                self.board,
                ranges[Player.P1.value, i],
                ranges[Player.P2.value, i],
                float(pot_sample.sizes[i]),
            )
            for i in range(batch_size)
        ]

        if self.num_workers > 1:
            results = self._get_pool().map(resolve_example, tasks)
        else:
            results = [resolve_example(task) for task in tasks]

        values = np.empty_like(ranges, dtype=np.float64)
        for i, root_values in enumerate(results):
            values[:, i, :] = root_values
        return values

    def close(self):
        if self._pool is not None:
            self._pool.close()
            self._pool.join()
            self._pool = None


def create_value_backend(
    name: str,
    config: GameConfig,
    resolving_config: Optional[ResolvingConfig] = None,
    num_workers: int = 1
) -> ValueBackend:
    """Instantiate a backend by its config name."""
    if name == TerminalEquityBackend.name:
        return TerminalEquityBackend(config)
    if name == ResolvingBackend.name:
        return ResolvingBackend(config, resolving_config or ResolvingConfig(), num_workers)
    raise ValueError(
        f"Unknown value backend: {name}. "
        f"Use '{TerminalEquityBackend.name}' or '{ResolvingBackend.name}'"
    )

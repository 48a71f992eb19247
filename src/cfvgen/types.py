"""Core data types and configuration values."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

import numpy as np


class Player(Enum):
    """Players, valued by their array index."""
    P1 = 0
    P2 = 1

    @property
    def opponent(self) -> "Player":
        return Player.P2 if self is Player.P1 else Player.P1


class NodeType(Enum):
    """Public tree node kinds."""
    INNER = "inner"
    FOLD = "fold"
    SHOWDOWN = "showdown"


VALUE_BACKENDS = ("terminal_equity", "resolving")


@dataclass(frozen=True)
class GameConfig:
    """Game variant constants (Leduc hold'em by default).

    Passed explicitly to every component; never mutated.
    """
    suit_count: int = 2
    rank_count: int = 3
    board_card_count: int = 1
    player_count: int = 2
    streets_count: int = 2
    ante: float = 100.0
    stack: float = 1200.0
    bet_sizing: Tuple[float, ...] = (1.0,)

    @property
    def card_count(self) -> int:
        return self.suit_count * self.rank_count

    @property
    def last_street(self) -> int:
        return self.streets_count

    def validate(self):
        """Raise ValueError on inconsistent constants."""
        if self.suit_count < 1 or self.rank_count < 1:
            raise ValueError("suit_count and rank_count must be positive")
        if not 0 < self.board_card_count < self.card_count:
            raise ValueError(
                f"board_card_count must be in [1, {self.card_count - 1}], "
                f"got {self.board_card_count}"
            )
        if self.player_count != 2:
            raise ValueError(f"Only 2 players supported, got {self.player_count}")
        if self.streets_count < 1:
            raise ValueError("streets_count must be positive")
        if not 0 < self.ante < self.stack:
            raise ValueError(f"Need 0 < ante < stack, got ante={self.ante} stack={self.stack}")
        if any(size <= 0 for size in self.bet_sizing):
            raise ValueError(f"bet_sizing entries must be positive: {self.bet_sizing}")


@dataclass
class DataGenConfig:
    """Configuration for training data generation."""
    train_data_count: int = 100
    valid_data_count: int = 100
    gen_batch_size: int = 10
    data_path: str = "data/TrainSamples/"
    value_backend: str = "terminal_equity"  # "terminal_equity" or "resolving"
    seed: Optional[int] = None
    num_workers: int = 1  # Worker processes for per-example resolving

    def validate(self):
        """Raise ValueError if counts, batch size or backend are unusable."""
        if self.gen_batch_size <= 0:
            raise ValueError(f"gen_batch_size must be positive, got {self.gen_batch_size}")
        for name in ("train_data_count", "valid_data_count"):
            count = getattr(self, name)
            if count < 0:
                raise ValueError(f"{name} must be non-negative, got {count}")
            if count % self.gen_batch_size != 0:
                raise ValueError(
                    f"{name}={count} is not divisible by gen_batch_size={self.gen_batch_size}"
                )
        if self.value_backend not in VALUE_BACKENDS:
            raise ValueError(
                f"Unknown value backend: {self.value_backend}. "
                f"Use one of {', '.join(VALUE_BACKENDS)}"
            )
        if self.num_workers < 1:
            raise ValueError(f"num_workers must be >= 1, got {self.num_workers}")


@dataclass
class ResolvingConfig:
    """CFR settings for the resolving value backend."""
    cfr_iters: int = 1000
    cfr_skip_iters: int = 500  # Iterations excluded from the root value average

    def validate(self):
        if self.cfr_iters <= 0:
            raise ValueError(f"cfr_iters must be positive, got {self.cfr_iters}")
        if not 0 <= self.cfr_skip_iters < self.cfr_iters:
            raise ValueError(
                f"cfr_skip_iters must be in [0, {self.cfr_iters}), got {self.cfr_skip_iters}"
            )


@dataclass
class PotSample:
    """Pot features written to the inputs tensor and the pot sizes behind them.

    `sizes` is None when the feature has no chip meaning.
    """
    features: np.ndarray
    sizes: Optional[np.ndarray] = None


@dataclass
class DatasetTensors:
    """The three parallel output tensors of one dataset split."""
    inputs: np.ndarray
    targets: np.ndarray
    mask: np.ndarray

    @property
    def example_count(self) -> int:
        return self.inputs.shape[0]


@dataclass
class ResolveNode:
    """Public state the resolver starts from."""
    board: np.ndarray
    street: int
    current_player: Player
    bets: np.ndarray = field(default_factory=lambda: np.zeros(2))

"""Card and board tools for the configured game variant.

Cards are integers in [1, card_count]; hand i of a per-hand vector is
card i + 1. Card c has rank (c - 1) // suit_count and suit
(c - 1) % suit_count.
"""

from functools import lru_cache
from itertools import combinations
from math import comb
from typing import Dict, Sequence, Tuple

import numpy as np

from cfvgen.types import GameConfig

RANK_TABLE = "JQKA"
SUIT_TABLE = "hscd"


def card_rank(config: GameConfig, card: int) -> int:
    return (card - 1) // config.suit_count


def card_suit(config: GameConfig, card: int) -> int:
    return (card - 1) % config.suit_count


def card_to_string(config: GameConfig, card: int) -> str:
    """Convert a card id to a string like 'Kh'."""
    if not 1 <= card <= config.card_count:
        raise ValueError(f"Card {card} outside [1, {config.card_count}]")
    if config.rank_count > len(RANK_TABLE) or config.suit_count > len(SUIT_TABLE):
        raise ValueError("No string names for this deck size")
    return RANK_TABLE[card_rank(config, card)] + SUIT_TABLE[card_suit(config, card)]


def string_to_card(config: GameConfig, s: str) -> int:
    """Convert a string like 'Kh' to a card id."""
    if len(s) != 2:
        raise ValueError(f"Invalid card string: {s}")
    rank = RANK_TABLE.find(s[0])
    suit = SUIT_TABLE.find(s[1])
    if not 0 <= rank < config.rank_count or not 0 <= suit < config.suit_count:
        raise ValueError(f"Invalid card string for this game: {s}")
    return rank * config.suit_count + suit + 1


def board_from_string(config: GameConfig, s: str) -> np.ndarray:
    """Parse a board like 'KhJs' into card ids."""
    if len(s) % 2 != 0:
        raise ValueError(f"Invalid board string: {s}")
    return np.array(
        [string_to_card(config, s[i:i + 2]) for i in range(0, len(s), 2)],
        dtype=np.int64
    )


def canonical_board(config: GameConfig, board: Sequence[int]) -> Tuple[int, ...]:
    """Sorted tuple of board cards; raises ValueError on invalid boards."""
    cards = tuple(sorted(int(c) for c in board))
    if len(cards) != config.board_card_count:
        raise ValueError(
            f"Board must have {config.board_card_count} cards, got {len(cards)}"
        )
    if len(set(cards)) != len(cards):
        raise ValueError(f"Board has duplicate cards: {list(board)}")
    if cards and (cards[0] < 1 or cards[-1] > config.card_count):
        raise ValueError(f"Board cards outside [1, {config.card_count}]: {list(board)}")
    return cards


def get_boards_count(config: GameConfig) -> int:
    """Number of distinct boards (order-insensitive)."""
    return comb(config.card_count, config.board_card_count)


@lru_cache(maxsize=None)
def _board_index_table(card_count: int, board_card_count: int) -> Dict[Tuple[int, ...], int]:
    return {
        board: index
        for index, board in enumerate(
            combinations(range(1, card_count + 1), board_card_count), start=1
        )
    }


def get_board_index(config: GameConfig, board: Sequence[int]) -> int:
    """1-based lexicographic index of the sorted board among all boards.

    Permutations of the same cards share an index.
    """
    table = _board_index_table(config.card_count, config.board_card_count)
    return table[canonical_board(config, board)]


def get_possible_hand_indexes(config: GameConfig, board: Sequence[int]) -> np.ndarray:
    """0/1 vector over hands, 0 where the hand shares a card with the board."""
    possible = np.ones(config.card_count, dtype=np.float64)
    for card in board:
        possible[int(card) - 1] = 0
    return possible


def hand_strength(config: GameConfig, hand: int, board: Sequence[int]) -> int:
    """Showdown strength of a one-card hand on the board.

    A hand paired with the board beats every unpaired hand; otherwise the
    higher rank wins.
    """
    rank = card_rank(config, hand)
    board_ranks = {card_rank(config, int(c)) for c in board}
    if rank in board_ranks:
        return config.rank_count + rank
    return rank


def evaluate_board(config: GameConfig, board: Sequence[int]) -> np.ndarray:
    """Strength of every hand on the board, -1 for impossible hands."""
    strengths = np.full(config.card_count, -1, dtype=np.int64)
    board_cards = {int(c) for c in board}
    for hand in range(1, config.card_count + 1):
        if hand not in board_cards:
            strengths[hand - 1] = hand_strength(config, hand, board)
    return strengths

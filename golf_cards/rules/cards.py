"""Card, rank and deck definitions for Golf.

Scoring values: A = 1, 2-10 = face value, J/Q = 10, K = 0, Joker = -2

This module provides:
- Rank and suit constants with display symbols
- Card representation (identity plus face-up / cleared flags)
- Deck construction and shuffling
- Parsing helpers for tests and front ends
"""

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import List, Optional, Tuple
import random


class Rank(IntEnum):
    """Card ranks in deck order (Ace low, Joker last)."""

    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    JOKER = 14


class Suit(IntEnum):
    """Card suits, in the order the deck is built."""

    CLUB = 0
    DIAMOND = 1
    HEART = 2
    SPADE = 3


# Rank symbols for display
RANK_SYMBOLS = {
    Rank.ACE: "A",
    Rank.TWO: "2",
    Rank.THREE: "3",
    Rank.FOUR: "4",
    Rank.FIVE: "5",
    Rank.SIX: "6",
    Rank.SEVEN: "7",
    Rank.EIGHT: "8",
    Rank.NINE: "9",
    Rank.TEN: "10",
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
    Rank.JOKER: "JOKER",
}

# Suit symbols for display
SUIT_SYMBOLS = {
    Suit.CLUB: "♣",
    Suit.DIAMOND: "♦",
    Suit.HEART: "♥",
    Suit.SPADE: "♠",
}

# Symbol to rank mapping (for parsing)
SYMBOL_TO_RANK = {v: k for k, v in RANK_SYMBOLS.items()}

# Standard ranks (everything but the joker)
STANDARD_RANKS = tuple(r for r in Rank if r != Rank.JOKER)

# Scoring weight of each rank
RANK_VALUES = {
    Rank.ACE: 1,
    Rank.TWO: 2,
    Rank.THREE: 3,
    Rank.FOUR: 4,
    Rank.FIVE: 5,
    Rank.SIX: 6,
    Rank.SEVEN: 7,
    Rank.EIGHT: 8,
    Rank.NINE: 9,
    Rank.TEN: 10,
    Rank.JACK: 10,
    Rank.QUEEN: 10,
    Rank.KING: 0,
    Rank.JOKER: -2,
}

JOKER_LABEL = "Joker"
JOKERS_PER_DECK = 2


def card_value(rank: Rank) -> int:
    """Return the scoring value of a rank."""
    return RANK_VALUES[rank]


@dataclass
class Card:
    """A playing card.

    Identity is the (rank, suit) pair and never changes. The two flags
    change during a round: ``face_up`` when the card is revealed and
    ``cleared`` once its row has been matched. Flags are ignored when
    comparing cards, so the two jokers compare equal.

    Attributes:
        rank: Card rank
        suit: Card suit, None for jokers
        face_up: Whether the card is visible
        cleared: Whether the card has been removed from scoring this round
    """

    rank: Rank
    suit: Optional[Suit] = None
    face_up: bool = field(default=False, compare=False)
    cleared: bool = field(default=False, compare=False)

    def __post_init__(self):
        if self.rank == Rank.JOKER and self.suit is not None:
            raise ValueError("Jokers have no suit")
        if self.rank != Rank.JOKER and self.suit is None:
            raise ValueError(f"Rank {RANK_SYMBOLS[self.rank]} needs a suit")

    @property
    def value(self) -> int:
        return RANK_VALUES[self.rank]

    @property
    def is_joker(self) -> bool:
        return self.rank == Rank.JOKER

    @property
    def label(self) -> str:
        if self.is_joker:
            return JOKER_LABEL
        return f"{RANK_SYMBOLS[self.rank]}{SUIT_SYMBOLS[self.suit]}"

    @property
    def key(self) -> Tuple[int, int]:
        """Hashable identity, usable for multiset comparisons."""
        return (int(self.rank), -1 if self.suit is None else int(self.suit))

    def fresh(self) -> "Card":
        """Copy of this card, face-down and uncleared."""
        return replace(self, face_up=False, cleared=False)

    def matches(self, other: "Card") -> bool:
        """Whether two cards form a clearing pair (same rank or a joker)."""
        return self.rank == other.rank or self.is_joker or other.is_joker

    def to_dict(self, reveal: bool = False) -> dict:
        """Convert to a JSON-ready dict.

        Face-down cards only expose their flags unless ``reveal`` is set.
        """
        if not self.face_up and not reveal:
            return {"face_up": False, "cleared": self.cleared}
        return {
            "rank": RANK_SYMBOLS[self.rank],
            "suit": SUIT_SYMBOLS[self.suit] if self.suit is not None else "",
            "label": self.label,
            "value": self.value,
            "face_up": self.face_up,
            "cleared": self.cleared,
        }

    def __str__(self) -> str:
        return self.label

    def __repr__(self) -> str:
        return f"Card({self.label})"

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Parse a card from a string like 'A♣', '10S', 'qh' or 'JOKER'.

        Raises:
            ValueError: If the string cannot be parsed
        """
        s = s.strip().upper()
        if s in ("JOKER", "★", "JK"):
            return cls(rank=Rank.JOKER)
        if len(s) < 2:
            raise ValueError(f"Invalid card: {s!r}")

        suit_char = s[-1]
        rank_str = s[:-1]

        suit_map = {v: k for k, v in SUIT_SYMBOLS.items()}
        suit_map.update({"C": Suit.CLUB, "D": Suit.DIAMOND, "H": Suit.HEART, "S": Suit.SPADE})

        if suit_char not in suit_map:
            raise ValueError(f"Invalid suit character: {suit_char}")
        if rank_str not in SYMBOL_TO_RANK or rank_str == "JOKER":
            raise ValueError(f"Invalid rank: {rank_str}")

        return cls(rank=SYMBOL_TO_RANK[rank_str], suit=suit_map[suit_char])


def make_cards_from_string(s: str) -> List[Card]:
    """Parse a whitespace/comma separated list of cards, e.g. 'A♣ 5H joker'."""
    tokens = s.replace(",", " ").split()
    return [Card.from_string(t) for t in tokens]


def create_deck(include_jokers: bool = True) -> List[Card]:
    """Create an ordered Golf deck.

    Returns:
        52 cards (4 suits x 13 ranks), plus 2 jokers when enabled.
        All cards are face-down and uncleared.
    """
    deck = []
    for suit in Suit:
        for rank in STANDARD_RANKS:
            deck.append(Card(rank=rank, suit=suit))
    if include_jokers:
        for _ in range(JOKERS_PER_DECK):
            deck.append(Card(rank=Rank.JOKER))
    return deck


def shuffle_deck(cards: List[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """Shuffle cards in place with a uniform (Fisher-Yates) permutation.

    Args:
        cards: Cards to shuffle
        rng: Random generator (module-level random if None)

    Returns:
        The same list, shuffled
    """
    if rng is None:
        random.shuffle(cards)
    else:
        rng.shuffle(cards)
    return cards

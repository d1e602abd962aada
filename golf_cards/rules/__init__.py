"""Golf rules implementations.

This module provides:
- Card, rank and deck definitions (cards.py)
- Hand layout, row clearing and scoring (hand.py)
"""

from .cards import (
    Rank,
    Suit,
    Card,
    RANK_SYMBOLS,
    SUIT_SYMBOLS,
    RANK_VALUES,
    STANDARD_RANKS,
    JOKER_LABEL,
    card_value,
    create_deck,
    shuffle_deck,
    make_cards_from_string,
)

from .hand import (
    Hand,
    HAND_SIZE,
    NUM_ROWS,
    ROW_SIZE,
    is_valid_slot,
    slot_row,
    row_slots,
    partner_slot,
)

__all__ = [
    # Cards
    "Rank",
    "Suit",
    "Card",
    "RANK_SYMBOLS",
    "SUIT_SYMBOLS",
    "RANK_VALUES",
    "STANDARD_RANKS",
    "JOKER_LABEL",
    "card_value",
    "create_deck",
    "shuffle_deck",
    "make_cards_from_string",
    # Hand
    "Hand",
    "HAND_SIZE",
    "NUM_ROWS",
    "ROW_SIZE",
    "is_valid_slot",
    "slot_row",
    "row_slots",
    "partner_slot",
]

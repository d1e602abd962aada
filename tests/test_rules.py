"""Tests for cards, decks and hands.

Tests cover:
- Scoring values (A=1, J/Q=10, K=0, Joker=-2)
- Card labels, parsing and equality
- Deck composition with and without jokers
- Shuffle preserves the multiset of cards
- Row geometry, row clearing and hand scoring
"""

import random
from collections import Counter

import pytest

from golf_cards import set_seed
from golf_cards.rules import (
    Card,
    Rank,
    Suit,
    Hand,
    HAND_SIZE,
    card_value,
    create_deck,
    shuffle_deck,
    make_cards_from_string,
    is_valid_slot,
    slot_row,
    row_slots,
    partner_slot,
)


class TestCardValues:
    """Tests for rank scoring values."""

    def test_number_cards_score_face_value(self):
        for rank in (Rank.TWO, Rank.FIVE, Rank.NINE, Rank.TEN):
            assert card_value(rank) == int(rank)

    def test_ace_scores_one(self):
        assert card_value(Rank.ACE) == 1

    def test_jack_and_queen_score_ten(self):
        assert card_value(Rank.JACK) == 10
        assert card_value(Rank.QUEEN) == 10

    def test_king_scores_zero(self):
        assert card_value(Rank.KING) == 0

    def test_joker_scores_minus_two(self):
        assert Card(Rank.JOKER).value == -2


class TestCardBasics:
    """Tests for card construction, labels and parsing."""

    def test_label(self):
        assert Card(Rank.TEN, Suit.SPADE).label == "10♠"
        assert Card(Rank.ACE, Suit.HEART).label == "A♥"
        assert Card(Rank.JOKER).label == "Joker"

    def test_joker_has_no_suit(self):
        with pytest.raises(ValueError):
            Card(Rank.JOKER, Suit.CLUB)

    def test_standard_card_needs_suit(self):
        with pytest.raises(ValueError):
            Card(Rank.FIVE)

    def test_from_string(self):
        assert Card.from_string("A♣") == Card(Rank.ACE, Suit.CLUB)
        assert Card.from_string("10s") == Card(Rank.TEN, Suit.SPADE)
        assert Card.from_string("qh") == Card(Rank.QUEEN, Suit.HEART)
        assert Card.from_string("joker").is_joker

    def test_from_string_invalid(self):
        for bad in ("", "Z♣", "5X", "1"):
            with pytest.raises(ValueError):
                Card.from_string(bad)

    def test_make_cards_from_string(self):
        cards = make_cards_from_string("A♣, 5H joker")
        assert [c.label for c in cards] == ["A♣", "5♥", "Joker"]

    def test_equality_ignores_flags(self):
        a = Card(Rank.SEVEN, Suit.DIAMOND, face_up=True)
        b = Card(Rank.SEVEN, Suit.DIAMOND)
        assert a == b
        assert Card(Rank.JOKER) == Card(Rank.JOKER)

    def test_fresh_resets_flags(self):
        card = Card(Rank.SEVEN, Suit.DIAMOND, face_up=True, cleared=True)
        fresh = card.fresh()
        assert not fresh.face_up and not fresh.cleared
        assert card.face_up and card.cleared

    def test_matches(self):
        seven = Card(Rank.SEVEN, Suit.DIAMOND)
        assert seven.matches(Card(Rank.SEVEN, Suit.CLUB))
        assert seven.matches(Card(Rank.JOKER))
        assert Card(Rank.JOKER).matches(seven)
        assert not seven.matches(Card(Rank.EIGHT, Suit.DIAMOND))

    def test_to_dict_hides_face_down(self):
        card = Card(Rank.KING, Suit.HEART)
        assert card.to_dict() == {"face_up": False, "cleared": False}
        revealed = card.to_dict(reveal=True)
        assert revealed["label"] == "K♥"
        assert revealed["value"] == 0


class TestDeck:
    """Tests for deck construction and shuffling."""

    def test_deck_with_jokers(self):
        deck = create_deck(include_jokers=True)
        assert len(deck) == 54
        assert sum(1 for c in deck if c.is_joker) == 2

    def test_deck_without_jokers(self):
        deck = create_deck(include_jokers=False)
        assert len(deck) == 52
        assert not any(c.is_joker for c in deck)

    def test_deck_has_each_standard_card_once(self):
        keys = Counter(c.key for c in create_deck(include_jokers=False))
        assert len(keys) == 52
        assert set(keys.values()) == {1}

    def test_deck_cards_face_down(self):
        assert not any(c.face_up or c.cleared for c in create_deck())

    def test_shuffle_preserves_cards(self):
        deck = create_deck()
        before = Counter(c.key for c in deck)
        shuffle_deck(deck, random.Random(7))
        assert Counter(c.key for c in deck) == before

    def test_shuffle_is_seeded(self):
        a = shuffle_deck(create_deck(), random.Random(3))
        b = shuffle_deck(create_deck(), random.Random(3))
        assert [c.key for c in a] == [c.key for c in b]

    def test_shuffle_without_rng_follows_set_seed(self):
        set_seed(1)
        a = shuffle_deck(create_deck())
        set_seed(1)
        b = shuffle_deck(create_deck())
        assert [c.key for c in a] == [c.key for c in b]
        assert [c.key for c in a] != [c.key for c in create_deck()]


def _hand(labels: str, face_up=()) -> Hand:
    cards = make_cards_from_string(labels)
    for slot in face_up:
        cards[slot].face_up = True
    return Hand(cards)


class TestHandGeometry:
    """Tests for slot and row helpers."""

    def test_rows(self):
        assert [slot_row(s) for s in range(HAND_SIZE)] == [0, 0, 1, 1, 2, 2]
        assert row_slots(1) == (2, 3)

    def test_partner_slot(self):
        assert [partner_slot(s) for s in range(HAND_SIZE)] == [1, 0, 3, 2, 5, 4]

    def test_is_valid_slot(self):
        assert all(is_valid_slot(s) for s in range(HAND_SIZE))
        for bad in (-1, 6, True, 1.0, "2", None):
            assert not is_valid_slot(bad)

    def test_hand_needs_six_cards(self):
        with pytest.raises(ValueError):
            Hand(make_cards_from_string("A♣ 2♣"))


class TestRowClear:
    """Tests for row clearing."""

    def test_matching_face_up_row_clears(self):
        hand = _hand("7♠ 7♦ 2♣ 3♣ 4♣ 5♣", face_up=(0, 1))
        assert hand.try_row_clear(1)
        assert hand.row_cleared(0)
        assert hand[0].cleared and hand[1].cleared

    def test_joker_clears_any_card(self):
        hand = _hand("2♣ 3♣ Q♥ joker 4♣ 5♣", face_up=(2, 3))
        assert hand.try_row_clear(2)
        assert hand.row_cleared(1)

    def test_face_down_partner_blocks_clear(self):
        hand = _hand("7♠ 7♦ 2♣ 3♣ 4♣ 5♣", face_up=(0,))
        assert not hand.try_row_clear(0)

    def test_mismatch_does_not_clear(self):
        hand = _hand("7♠ 8♦ 2♣ 3♣ 4♣ 5♣", face_up=(0, 1))
        assert not hand.try_row_clear(0)

    def test_cleared_row_does_not_clear_again(self):
        hand = _hand("7♠ 7♦ 2♣ 3♣ 4♣ 5♣", face_up=(0, 1))
        assert hand.try_row_clear(0)
        assert not hand.try_row_clear(0)


class TestHandScoring:
    """Tests for hand scoring and completion."""

    def test_score_counts_face_down_cards(self):
        hand = _hand("A♣ 2♣ 3♣ 4♣ 5♣ 6♣", face_up=(0,))
        assert hand.score() == 21
        assert hand.visible_score() == 1

    def test_cleared_cards_score_nothing(self):
        hand = _hand("Q♠ Q♦ K♣ joker 4♣ 5♣", face_up=(0, 1, 2, 3))
        hand.try_row_clear(0)
        assert hand.score() == 0 - 2 + 4 + 5

    def test_complete_when_all_revealed(self):
        hand = _hand("A♣ 2♣ 3♣ 4♣ 5♣ 6♣", face_up=range(5))
        assert not hand.is_complete()
        hand[5].face_up = True
        assert hand.is_complete()

    def test_complete_when_all_rows_cleared(self):
        hand = _hand("7♠ 7♦ 2♣ 2♦ joker 5♣", face_up=range(6))
        for row in range(3):
            hand.try_row_clear(row * 2)
        assert hand.all_rows_cleared()
        assert hand.is_complete()
        assert hand.score() == 0

    def test_hidden_slots(self):
        hand = _hand("A♣ 2♣ 3♣ 4♣ 5♣ 6♣", face_up=(1, 4))
        assert hand.hidden_slots() == [0, 2, 3, 5]

"""Six-slot Golf hand: row geometry, row clearing and scoring.

Layout (slot indices):

    [0] [1]   <- row 0
    [2] [3]   <- row 1
    [4] [5]   <- row 2

Both slots of a row clear together when they are face-up and either share
a rank or contain a joker. Cleared cards score nothing for the rest of the
round.
"""

from typing import Iterator, List, Optional, Tuple

from .cards import Card


HAND_SIZE = 6
ROW_SIZE = 2
NUM_ROWS = HAND_SIZE // ROW_SIZE


def is_valid_slot(slot) -> bool:
    """Check that slot is an int index into a hand."""
    return isinstance(slot, int) and not isinstance(slot, bool) and 0 <= slot < HAND_SIZE


def slot_row(slot: int) -> int:
    """Row (0-2) that a slot (0-5) belongs to."""
    return slot // ROW_SIZE


def row_slots(row: int) -> Tuple[int, int]:
    """The two slot indices forming a row."""
    start = row * ROW_SIZE
    return start, start + 1


def partner_slot(slot: int) -> int:
    """The other slot in the same row."""
    return slot ^ 1


class Hand:
    """A player's six cards.

    A slot only holds ``None`` between construction and dealing; every
    operation past the deal expects all six slots filled.
    """

    def __init__(self, cards: Optional[List[Card]] = None):
        if cards is not None and len(cards) != HAND_SIZE:
            raise ValueError(f"A hand holds {HAND_SIZE} cards, got {len(cards)}")
        self.slots: List[Optional[Card]] = list(cards) if cards is not None else [None] * HAND_SIZE

    def __getitem__(self, slot: int) -> Optional[Card]:
        return self.slots[slot]

    def __setitem__(self, slot: int, card: Card) -> None:
        self.slots[slot] = card

    def __iter__(self) -> Iterator[Optional[Card]]:
        return iter(self.slots)

    def __len__(self) -> int:
        return HAND_SIZE

    def cards(self) -> List[Card]:
        """Cards currently in the hand (cleared ones included)."""
        return [c for c in self.slots if c is not None]

    def is_hidden(self, slot: int) -> bool:
        """True if the slot holds a face-down, uncleared card."""
        card = self.slots[slot]
        return card is not None and not card.face_up and not card.cleared

    def hidden_slots(self) -> List[int]:
        return [i for i in range(HAND_SIZE) if self.is_hidden(i)]

    def try_row_clear(self, slot: int) -> bool:
        """Clear the row containing ``slot`` if its two cards match.

        Returns:
            True if the row was cleared by this call
        """
        a, b = row_slots(slot_row(slot))
        c1, c2 = self.slots[a], self.slots[b]
        if c1 is None or c2 is None:
            return False
        if c1.cleared or c2.cleared:
            return False
        if not c1.face_up or not c2.face_up:
            return False
        if not c1.matches(c2):
            return False
        c1.cleared = True
        c2.cleared = True
        return True

    def row_cleared(self, row: int) -> bool:
        a, b = row_slots(row)
        return all(self.slots[i] is not None and self.slots[i].cleared for i in (a, b))

    def all_rows_cleared(self) -> bool:
        return all(self.row_cleared(row) for row in range(NUM_ROWS))

    def all_revealed(self) -> bool:
        """True when every slot is face-up or cleared."""
        return all(c is not None and (c.face_up or c.cleared) for c in self.slots)

    def is_complete(self) -> bool:
        """Whether this hand ends the round."""
        return self.all_rows_cleared() or self.all_revealed()

    def score(self) -> int:
        """Sum of values over uncleared slots, face-down cards included."""
        return sum(c.value for c in self.slots if c is not None and not c.cleared)

    def visible_score(self) -> int:
        """Score of the face-up, uncleared cards only."""
        return sum(c.value for c in self.slots if c is not None and c.face_up and not c.cleared)

    def to_list(self, reveal: bool = False) -> List[dict]:
        return [c.to_dict(reveal=reveal) if c is not None else None for c in self.slots]

    def __str__(self) -> str:
        rows = []
        for row in range(NUM_ROWS):
            parts = []
            for i in row_slots(row):
                card = self.slots[i]
                if card is None:
                    parts.append("--")
                elif card.cleared:
                    parts.append("xx")
                elif card.face_up:
                    parts.append(card.label)
                else:
                    parts.append("??")
            rows.append(" ".join(parts))
        return " | ".join(rows)

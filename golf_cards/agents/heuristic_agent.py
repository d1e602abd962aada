"""Heuristic-based Golf agent.

The heuristics are:

1. Setup: flip the first legal slot.

2. Start of a turn (nothing held):
   - Take the discard top if it would be placed by the rules below
   - Otherwise draw from the stock

3. Holding a card:
   - Complete a pair: put it next to a face-up card it matches
   - Low card: swap out the highest face-up card it undercuts,
     else drop it into a face-down slot
   - Big improvement: swap out a face-up card worth much more
   - Otherwise discard it
"""

from typing import List, Optional
import numpy as np

from golf_cards.rules import Card, NUM_ROWS, row_slots
from golf_cards.engine import GamePhase
from golf_cards.moves import (
    DRAW_STOCK,
    DRAW_DISCARD,
    REPLACE_START,
    DISCARD_HELD,
)

from .random_agent import Observation


# Cards worth at most this are always kept
LOW_CARD_VALUE = 4

# Minimum gain for swapping a face-up card with a non-low card
MIN_SWAP_GAIN = 5

# Assumed value of an unseen card
HIDDEN_CARD_VALUE = 5


class HeuristicAgent:
    """Agent that uses simple Golf rules of thumb.

    Attributes:
        name: Agent name for identification
        rng: Random number generator for fallbacks
    """

    def __init__(self, seed: Optional[int] = None, name: str = "HeuristicAgent"):
        self.name = name
        self._seed = seed
        self.rng = np.random.default_rng(seed)

    def act(
        self,
        observation: Observation,
        action_mask: np.ndarray,
        rng: Optional[np.random.Generator] = None,
    ) -> int:
        """Select an action using heuristic rules.

        Args:
            observation: Dictionary built by build_observation()
                Expected keys: 'phase', 'hand', 'discard_top', 'held_card'
            action_mask: Boolean array indicating legal actions
            rng: Optional random generator for fallbacks

        Returns:
            Selected action index
        """
        if rng is None:
            rng = self.rng

        legal_indices = np.flatnonzero(action_mask)
        if len(legal_indices) == 0:
            raise ValueError("No legal actions available")

        if observation.get("phase") == GamePhase.SETUP_FLIPS:
            return int(legal_indices[0])

        hand: List[Optional[Card]] = observation.get("hand", [])
        held = observation.get("held_card")

        if held is None:
            top = observation.get("discard_top")
            if action_mask[DRAW_DISCARD] and top is not None and self.choose_slot(hand, top) is not None:
                return DRAW_DISCARD
            if action_mask[DRAW_STOCK]:
                return DRAW_STOCK
        else:
            slot = self.choose_slot(hand, held)
            if slot is not None and action_mask[REPLACE_START + slot]:
                return REPLACE_START + slot
            if action_mask[DISCARD_HELD]:
                return DISCARD_HELD

        return int(rng.choice(legal_indices))

    def choose_slot(self, hand: List[Optional[Card]], card: Card) -> Optional[int]:
        """Slot the card should replace, or None to discard it.

        Args:
            hand: Visible hand (None = face-down slot)
            card: Card being placed
        """
        slot = self._pairing_slot(hand, card)
        if slot is not None:
            return slot

        face_up = [
            (i, c) for i, c in enumerate(hand) if c is not None and not c.cleared
        ]
        worse = [(i, c) for i, c in face_up if c.value > card.value]

        if card.value <= LOW_CARD_VALUE:
            if worse:
                return max(worse, key=lambda ic: ic[1].value)[0]
            hidden = [i for i, c in enumerate(hand) if c is None]
            if hidden:
                return hidden[0]
            return None

        big_gain = [(i, c) for i, c in worse if c.value - card.value >= MIN_SWAP_GAIN]
        if big_gain:
            return max(big_gain, key=lambda ic: ic[1].value)[0]
        return None

    def _pairing_slot(self, hand: List[Optional[Card]], card: Card) -> Optional[int]:
        """Slot whose replacement would clear its row, best gain first."""
        best_slot = None
        best_gain = None
        for row in range(NUM_ROWS):
            a, b = row_slots(row)
            for anchor, target in ((a, b), (b, a)):
                anchor_card = hand[anchor]
                if anchor_card is None or anchor_card.cleared:
                    continue
                if not card.matches(anchor_card):
                    continue
                target_card = hand[target]
                if target_card is not None and (target_card.cleared or target_card.matches(anchor_card)):
                    continue
                # Clearing removes both cards from the score
                target_value = HIDDEN_CARD_VALUE if target_card is None else target_card.value
                gain = target_value + anchor_card.value
                if gain <= 0:
                    continue
                if best_gain is None or gain > best_gain:
                    best_slot, best_gain = target, gain
        return best_slot

    def reset(self) -> None:
        pass

    def __repr__(self) -> str:
        return f"HeuristicAgent(seed={self._seed}, name={self.name!r})"


def create_heuristic_agent(seed: Optional[int] = None) -> HeuristicAgent:
    """Factory function to create a heuristic agent."""
    return HeuristicAgent(seed=seed)

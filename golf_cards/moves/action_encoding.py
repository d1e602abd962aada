"""Fixed action space for agents and front ends.

This module provides:
- A 15-index discrete action space covering every Golf action
- Move <-> action index encoding
- Action mask generation from the engine's own legality checks
- Observation building (the acting player's view of the table)

Action layout:
    0-5    flip slot N (setup flip or turn flip, depending on phase)
    6      draw from the stock
    7      draw from the discard pile
    8-13   replace slot N-8 with the held card
    14     discard the held card

Actions are always taken by the engine's current player.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

import numpy as np

from golf_cards.rules import Card, Hand, HAND_SIZE
from golf_cards.engine import (
    GameEngine,
    GamePhase,
    DrawSource,
    ActionResult,
    RejectReason,
    other_player,
)


FLIP_START = 0
DRAW_STOCK = FLIP_START + HAND_SIZE
DRAW_DISCARD = DRAW_STOCK + 1
REPLACE_START = DRAW_DISCARD + 1
DISCARD_HELD = REPLACE_START + HAND_SIZE
NUM_ACTIONS = DISCARD_HELD + 1


class MoveType(Enum):
    """Kinds of moves in the action space."""

    FLIP = "flip"
    DRAW_STOCK = "draw_stock"
    DRAW_DISCARD = "draw_discard"
    REPLACE = "replace"
    DISCARD = "discard"


@dataclass(frozen=True)
class Move:
    """A decoded action.

    Attributes:
        move_type: Kind of move
        slot: Target slot for FLIP and REPLACE, None otherwise
    """

    move_type: MoveType
    slot: Optional[int] = None

    def __str__(self) -> str:
        if self.slot is None:
            return self.move_type.value
        return f"{self.move_type.value} {self.slot}"


class ActionEncodingError(Exception):
    """Raised when an action index or move cannot be encoded."""

    pass


def decode_action(action_idx: int) -> Move:
    """Decode an action index to a Move.

    Raises:
        ActionEncodingError: If the index is outside the action space
    """
    if not 0 <= action_idx < NUM_ACTIONS:
        raise ActionEncodingError(f"Action index {action_idx} out of range [0, {NUM_ACTIONS})")

    if action_idx < DRAW_STOCK:
        return Move(MoveType.FLIP, action_idx - FLIP_START)
    if action_idx == DRAW_STOCK:
        return Move(MoveType.DRAW_STOCK)
    if action_idx == DRAW_DISCARD:
        return Move(MoveType.DRAW_DISCARD)
    if action_idx < DISCARD_HELD:
        return Move(MoveType.REPLACE, action_idx - REPLACE_START)
    return Move(MoveType.DISCARD)


def encode_action(move: Move) -> int:
    """Encode a Move to its action index.

    Raises:
        ActionEncodingError: If the move has a missing or invalid slot
    """
    if move.move_type in (MoveType.FLIP, MoveType.REPLACE):
        if move.slot is None or not 0 <= move.slot < HAND_SIZE:
            raise ActionEncodingError(f"Move {move} needs a slot in [0, {HAND_SIZE})")
        start = FLIP_START if move.move_type == MoveType.FLIP else REPLACE_START
        return start + move.slot
    if move.move_type == MoveType.DRAW_STOCK:
        return DRAW_STOCK
    if move.move_type == MoveType.DRAW_DISCARD:
        return DRAW_DISCARD
    return DISCARD_HELD


def describe_action(action_idx: int) -> str:
    """Short human-readable description of an action index."""
    move = decode_action(action_idx)
    if move.move_type == MoveType.FLIP:
        return f"Flip slot {move.slot}"
    if move.move_type == MoveType.DRAW_STOCK:
        return "Draw from stock"
    if move.move_type == MoveType.DRAW_DISCARD:
        return "Draw from discard"
    if move.move_type == MoveType.REPLACE:
        return f"Replace slot {move.slot}"
    return "Discard drawn card"


def check_move(engine: GameEngine, move: Move) -> Optional[RejectReason]:
    """Legality of a move for the current player (None = legal)."""
    player = engine.current_player
    if move.move_type == MoveType.FLIP:
        if engine.phase == GamePhase.SETUP_FLIPS:
            return engine.check_flip_during_setup(player, move.slot)
        return engine.check_flip_during_turn(player, move.slot)
    if move.move_type == MoveType.DRAW_STOCK:
        return engine.check_draw(DrawSource.STOCK)
    if move.move_type == MoveType.DRAW_DISCARD:
        return engine.check_draw(DrawSource.DISCARD)
    if move.move_type == MoveType.REPLACE:
        return engine.check_replace(player, move.slot)
    return engine.check_discard_held()


def get_action_mask(engine: GameEngine) -> np.ndarray:
    """Boolean mask of legal actions for the current player.

    Returns:
        Boolean numpy array of shape (NUM_ACTIONS,), True = legal
    """
    mask = np.zeros(NUM_ACTIONS, dtype=bool)
    for action_idx in range(NUM_ACTIONS):
        mask[action_idx] = check_move(engine, decode_action(action_idx)) is None
    return mask


def legal_actions(engine: GameEngine) -> List[int]:
    """Indices of legal actions for the current player."""
    return [int(i) for i in np.flatnonzero(get_action_mask(engine))]


def count_legal_actions(engine: GameEngine) -> int:
    return int(np.sum(get_action_mask(engine)))


def apply_move(engine: GameEngine, move: Move) -> ActionResult:
    """Apply a Move as the current player."""
    player = engine.current_player
    if move.move_type == MoveType.FLIP:
        if engine.phase == GamePhase.SETUP_FLIPS:
            return engine.flip_during_setup(player, move.slot)
        return engine.flip_during_turn(player, move.slot)
    if move.move_type == MoveType.DRAW_STOCK:
        return engine.draw(DrawSource.STOCK)
    if move.move_type == MoveType.DRAW_DISCARD:
        return engine.draw(DrawSource.DISCARD)
    if move.move_type == MoveType.REPLACE:
        return engine.replace(player, move.slot)
    return engine.discard_held()


def apply_action(engine: GameEngine, action_idx: int) -> ActionResult:
    """Decode and apply an action index.

    Raises:
        ActionEncodingError: If the index is outside the action space
    """
    return apply_move(engine, decode_action(int(action_idx)))


def visible_hand(hand: Hand) -> List[Optional[Card]]:
    """Hand as seen at the table: face-down, uncleared slots become None."""
    return [None if hand.is_hidden(i) else hand[i] for i in range(HAND_SIZE)]


def build_observation(engine: GameEngine, player: Optional[int] = None) -> Dict[str, Any]:
    """Build the observation dict an agent acts on.

    Args:
        engine: Game engine
        player: Observing player (default: current player)

    Returns:
        Dict with keys: player, phase, hand, opponent_hand, discard_top,
        held_card, stock_count, flips_remaining, round, totals
    """
    if player is None:
        player = engine.current_player
    opponent = other_player(player)
    return {
        "player": player,
        "phase": engine.phase,
        "hand": visible_hand(engine.hand(player)),
        "opponent_hand": visible_hand(engine.hand(opponent)),
        "discard_top": engine.discard_top,
        "held_card": engine.held_card,
        "stock_count": engine.stock_count,
        "flips_remaining": engine.flips_remaining(player),
        "round": engine.round_number,
        "totals": engine.totals(),
    }

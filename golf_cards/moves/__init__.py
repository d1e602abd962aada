"""Golf action space.

This module provides:
- Action encoding, masks and observations (action_encoding.py)
"""

from .action_encoding import (
    NUM_ACTIONS,
    FLIP_START,
    DRAW_STOCK,
    DRAW_DISCARD,
    REPLACE_START,
    DISCARD_HELD,
    MoveType,
    Move,
    ActionEncodingError,
    decode_action,
    encode_action,
    describe_action,
    check_move,
    get_action_mask,
    legal_actions,
    count_legal_actions,
    apply_move,
    apply_action,
    visible_hand,
    build_observation,
)

__all__ = [
    "NUM_ACTIONS",
    "FLIP_START",
    "DRAW_STOCK",
    "DRAW_DISCARD",
    "REPLACE_START",
    "DISCARD_HELD",
    "MoveType",
    "Move",
    "ActionEncodingError",
    "decode_action",
    "encode_action",
    "describe_action",
    "check_move",
    "get_action_mask",
    "legal_actions",
    "count_legal_actions",
    "apply_move",
    "apply_action",
    "visible_hand",
    "build_observation",
]

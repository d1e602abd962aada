"""Golf game engine implementations.

This module provides:
- GameEngine: Round state machine, actions and queries
- GamePhase / DrawSource: Phase and pile enums
- ActionResult / RejectReason: Action outcomes
- GameEvent / EventKind: Status notifications
- ScoreLedger: Per-round scores and totals
"""

from .game_state import (
    GameEngine,
    GameConfig,
    GamePhase,
    DrawSource,
    RejectReason,
    ActionResult,
    EventKind,
    GameEvent,
    PLAYERS,
    SETUP_FLIPS,
    DEFAULT_ROUNDS,
    other_player,
)
from .ledger import ScoreLedger

__all__ = [
    "GameEngine",
    "GameConfig",
    "GamePhase",
    "DrawSource",
    "RejectReason",
    "ActionResult",
    "EventKind",
    "GameEvent",
    "PLAYERS",
    "SETUP_FLIPS",
    "DEFAULT_ROUNDS",
    "other_player",
    "ScoreLedger",
]

"""Tests for the action space.

Tests cover:
- Encoding and decoding of the 15 action indices
- Action masks agree with the engine's own checks
- Applying actions through the encoding
- Observations hide face-down cards
"""

import numpy as np
import pytest

from golf_cards.engine import GameEngine, GameConfig, GamePhase, RejectReason
from golf_cards.moves import (
    NUM_ACTIONS,
    DRAW_STOCK,
    DRAW_DISCARD,
    REPLACE_START,
    DISCARD_HELD,
    Move,
    MoveType,
    ActionEncodingError,
    decode_action,
    encode_action,
    describe_action,
    check_move,
    get_action_mask,
    legal_actions,
    count_legal_actions,
    apply_action,
    apply_move,
    build_observation,
)


class TestActionEncoding:
    """Tests for index <-> move conversion."""

    def test_action_space_size(self):
        assert NUM_ACTIONS == 15

    def test_layout(self):
        assert decode_action(0) == Move(MoveType.FLIP, 0)
        assert decode_action(5) == Move(MoveType.FLIP, 5)
        assert decode_action(DRAW_STOCK) == Move(MoveType.DRAW_STOCK)
        assert decode_action(DRAW_DISCARD) == Move(MoveType.DRAW_DISCARD)
        assert decode_action(REPLACE_START + 3) == Move(MoveType.REPLACE, 3)
        assert decode_action(DISCARD_HELD) == Move(MoveType.DISCARD)

    def test_encode_inverts_decode(self):
        for idx in range(NUM_ACTIONS):
            assert encode_action(decode_action(idx)) == idx

    def test_out_of_range(self):
        with pytest.raises(ActionEncodingError):
            decode_action(-1)
        with pytest.raises(ActionEncodingError):
            decode_action(NUM_ACTIONS)

    def test_slot_required(self):
        with pytest.raises(ActionEncodingError):
            encode_action(Move(MoveType.FLIP))
        with pytest.raises(ActionEncodingError):
            encode_action(Move(MoveType.REPLACE, 6))

    def test_describe(self):
        assert describe_action(2) == "Flip slot 2"
        assert describe_action(REPLACE_START) == "Replace slot 0"
        assert describe_action(DISCARD_HELD) == "Discard drawn card"


class TestActionMask:
    """Tests for legality masks."""

    def test_waiting_has_no_legal_actions(self):
        engine = GameEngine()
        assert count_legal_actions(engine) == 0

    def test_setup_mask_is_flips_only(self):
        engine = GameEngine(GameConfig(seed=3))
        engine.start_game()
        assert legal_actions(engine) == [0, 1, 2, 3, 4, 5]
        apply_action(engine, 0)
        assert legal_actions(engine) == [2, 3, 4, 5]

    def test_turn_start_mask(self):
        engine = _engine_in_turns(seed=4)
        mask = get_action_mask(engine)
        assert mask[DRAW_STOCK] and mask[DRAW_DISCARD]
        assert not mask[REPLACE_START:DISCARD_HELD + 1].any()
        assert list(np.flatnonzero(mask[:6])) == engine.hand(engine.current_player).hidden_slots()

    def test_holding_mask(self):
        engine = _engine_in_turns(seed=4)
        apply_action(engine, DRAW_STOCK)
        mask = get_action_mask(engine)
        assert not mask[:DRAW_DISCARD + 1].any()
        assert mask[REPLACE_START:DISCARD_HELD + 1].all()

    def test_mask_matches_check_move(self):
        engine = _engine_in_turns(seed=9)
        mask = get_action_mask(engine)
        for idx in range(NUM_ACTIONS):
            assert mask[idx] == (check_move(engine, decode_action(idx)) is None)

    def test_illegal_action_returns_reason(self):
        engine = _engine_in_turns(seed=4)
        result = apply_action(engine, DISCARD_HELD)
        assert not result
        assert result.reason == RejectReason.NO_CARD_HELD

    def test_apply_accepts_numpy_index(self):
        engine = _engine_in_turns(seed=4)
        assert apply_action(engine, np.int64(DRAW_STOCK))
        assert engine.held_card is not None

    def test_apply_move_flip_uses_phase(self):
        engine = GameEngine(GameConfig(seed=3))
        engine.start_game()
        assert apply_move(engine, Move(MoveType.FLIP, 4))
        assert engine.flips_remaining(1) == 1


class TestObservation:
    """Tests for agent observations."""

    def test_hidden_cards_are_none(self):
        engine = GameEngine(GameConfig(seed=3))
        engine.start_game()
        apply_action(engine, 0)
        obs = build_observation(engine)
        assert obs["player"] == 1
        assert obs["phase"] == GamePhase.SETUP_FLIPS
        assert obs["hand"][0] is engine.hand(1)[0]
        assert obs["hand"][1:] == [None] * 5
        assert obs["opponent_hand"] == [None] * 6
        assert obs["discard_top"] is engine.discard_top
        assert obs["flips_remaining"] == 1

    def test_observation_for_other_player(self):
        engine = GameEngine(GameConfig(seed=3))
        engine.start_game()
        obs = build_observation(engine, player=2)
        assert obs["player"] == 2
        assert obs["totals"] == {1: 0, 2: 0}


def _engine_in_turns(seed: int) -> GameEngine:
    """Start a seeded game and make both opening flips for each player."""
    engine = GameEngine(GameConfig(seed=seed))
    engine.start_game()
    while engine.phase == GamePhase.SETUP_FLIPS:
        apply_action(engine, legal_actions(engine)[0])
    return engine

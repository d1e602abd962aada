"""Tests for the terminal front end.

Tests cover:
- Command parsing into moves
- Rendering the table and the settlement panel
- Command-line validation
"""

import pytest
from rich.console import Console

from golf_cards.engine import GameEngine, GameConfig, RejectReason
from golf_cards.moves import Move, MoveType, apply_move
from playground.play_tui import (
    GameUI,
    REJECT_MESSAGES,
    build_settlement_panel,
    describe_reject,
    main,
    parse_command,
)


@pytest.fixture
def engine():
    engine = GameEngine(GameConfig(rounds=1, seed=8))
    engine.start_game("Ann", "Bo")
    return engine


class TestParseCommand:
    """Tests for user input parsing."""

    def test_flip(self, engine):
        assert parse_command("f 3", engine) == Move(MoveType.FLIP, 3)
        assert parse_command("flip 0", engine) == Move(MoveType.FLIP, 0)

    def test_draws(self, engine):
        assert parse_command("s", engine) == Move(MoveType.DRAW_STOCK)
        assert parse_command("D", engine) == Move(MoveType.DRAW_DISCARD)

    def test_replace_and_drop(self, engine):
        assert parse_command("r 4", engine) == Move(MoveType.REPLACE, 4)
        assert parse_command("x", engine) == Move(MoveType.DISCARD)

    def test_digit_shortcut_depends_on_held_card(self, engine):
        assert parse_command("2", engine) == Move(MoveType.FLIP, 2)
        engine.held_card = engine.discard_top
        assert parse_command("2", engine) == Move(MoveType.REPLACE, 2)
        assert parse_command("d", engine) == Move(MoveType.DISCARD)

    def test_invalid(self, engine):
        for raw in ("", "f", "r x", "jump"):
            with pytest.raises(ValueError):
                parse_command(raw, engine)


class TestRendering:
    """Tests for rich output."""

    def test_every_reason_has_a_message(self):
        assert set(REJECT_MESSAGES) == set(RejectReason)
        assert describe_reject(RejectReason.ROW_USED).startswith("Your second opening flip")

    def test_render_table(self, engine):
        console = Console(record=True, width=120)
        console.print(GameUI({}).render(engine))
        text = console.export_text()
        assert "Ann" in text and "Bo" in text
        assert "Round 1/1" in text
        assert "??" in text

    def test_settlement(self, engine):
        engine.finish_round()
        console = Console(record=True, width=120)
        console.print(build_settlement_panel(engine))
        text = console.export_text()
        assert "Final Results" in text
        assert "Loses" in text or "Tie" in text

    def test_moves_apply_after_parse(self, engine):
        assert apply_move(engine, parse_command("f 0", engine))
        assert engine.hand(1)[0].face_up


class TestCommandLine:
    """Tests for argument validation."""

    def test_zero_rounds_rejected(self, capsys):
        with pytest.raises(SystemExit):
            main(["--rounds", "0"])
        assert "must be at least 1" in capsys.readouterr().err

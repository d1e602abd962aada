#!/usr/bin/env python3
"""
Play Golf in the terminal: hot-seat for two people, or against an agent.

Usage:
1) Two people at one keyboard:
   python playground/play_tui.py --name1 Alice --name2 Bob

2) Against the heuristic agent:
   python playground/play_tui.py --opponent heuristic

3) Short game without jokers, reproducible deals:
   python playground/play_tui.py --rounds 3 --no-jokers --seed 7

Input tips:
- "f 3"  : flip slot 3 (setup flip or turn flip)
- "s"    : draw from the stock
- "d"    : draw from the discard pile (discards the held card if holding one)
- "r 4"  : replace slot 4 with the held card
- "x"    : discard the held card
- "3"    : slot shortcut (flip, or replace when holding a card)
- "quit" : exit
"""

from __future__ import annotations

import argparse
import logging
import time
from typing import Dict, Optional

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.align import Align
from rich.columns import Columns
from rich import box
from rich.prompt import Prompt

from golf_cards.rules import Card, Suit, NUM_ROWS, row_slots
from golf_cards.engine import (
    GameEngine,
    GameConfig,
    GamePhase,
    RejectReason,
    PLAYERS,
    DEFAULT_ROUNDS,
)
from golf_cards.moves import (
    Move,
    MoveType,
    apply_action,
    apply_move,
    build_observation,
    describe_action,
    get_action_mask,
)
from golf_cards.agents import BaseAgent, create_heuristic_agent, create_random_agent
from golf_cards.scripts.evaluate import positive_int


# ==============================================================================
# Constants & Config
# ==============================================================================

COLOR_RED_SUIT = "red1"
COLOR_BLACK_SUIT = "cyan1"
COLOR_JOKER = "magenta"
COLOR_HIGHLIGHT = "yellow"

REJECT_MESSAGES = {
    RejectReason.WRONG_PHASE: "That action is not available in this phase",
    RejectReason.WRONG_TURN: "It is not your turn",
    RejectReason.INVALID_SLOT: "Slots are numbered 0-5",
    RejectReason.WRONG_TARGET: "That card cannot be used",
    RejectReason.ROW_USED: "Your second opening flip must be in a different row",
    RejectReason.NO_FLIPS_LEFT: "No opening flips left",
    RejectReason.CARD_HELD: "You are holding a card: replace or discard it",
    RejectReason.NO_CARD_HELD: "Draw a card first",
    RejectReason.PILE_EMPTY: "That pile is empty",
    RejectReason.INVALID_SOURCE: "Draw from the stock or the discard pile",
    RejectReason.GAME_OVER: "The game is over",
}

console = Console()
logger = logging.getLogger(__name__)

# ==============================================================================
# UI Helpers
# ==============================================================================

def get_card_rich_text(card: Optional[Card]) -> Text:
    """Return a Rich Text object for a slot, pile or held card."""
    if card is None:
        return Text("  --  ", style="dim")
    if card.cleared:
        return Text("      ")
    if not card.face_up:
        return Text("  ??  ", style="bold white on blue")
    if card.is_joker:
        return Text(" JOKER", style=f"bold {COLOR_JOKER}")
    color = COLOR_RED_SUIT if card.suit in (Suit.HEART, Suit.DIAMOND) else COLOR_BLACK_SUIT
    return Text(f" {card.label:>4} ", style=f"bold {color}")


def render_hand_visual(engine: GameEngine, player: int) -> Table:
    """Render a hand as 3 rows of 2 card panels, each labelled with its slot."""
    grid = Table.grid(padding=(0, 1))
    hand = engine.hand(player)
    for row in range(NUM_ROWS):
        cells = []
        for slot in row_slots(row):
            card = hand[slot]
            border = "dim" if card is not None and card.cleared else "white"
            cells.append(
                Panel(get_card_rich_text(card), expand=False, padding=(0, 1), border_style=border, title=str(slot))
            )
        grid.add_row(*cells)
    return grid


def parse_command(raw: str, engine: GameEngine) -> Move:
    """Parse user input into a Move for the current player.

    Raises:
        ValueError: If the input is not a recognised command
    """
    tokens = raw.strip().lower().split()
    if not tokens:
        raise ValueError("Empty command")
    cmd, args = tokens[0], tokens[1:]
    holding = engine.held_card is not None

    def slot_arg() -> int:
        if len(args) != 1 or not args[0].isdigit():
            raise ValueError(f"'{cmd}' needs one slot number")
        return int(args[0])

    if cmd.isdigit() and not args:
        slot = int(cmd)
        return Move(MoveType.REPLACE if holding else MoveType.FLIP, slot)
    if cmd in ("f", "flip"):
        return Move(MoveType.FLIP, slot_arg())
    if cmd in ("r", "replace"):
        return Move(MoveType.REPLACE, slot_arg())
    if cmd in ("s", "stock"):
        return Move(MoveType.DRAW_STOCK)
    if cmd in ("d", "discard"):
        return Move(MoveType.DISCARD if holding else MoveType.DRAW_DISCARD)
    if cmd in ("x", "drop"):
        return Move(MoveType.DISCARD)
    raise ValueError(f"Unknown command: {raw.strip()}")


def describe_reject(reason: Optional[RejectReason]) -> str:
    return REJECT_MESSAGES.get(reason, "Not allowed")


# ==============================================================================
# TUI Layout
# ==============================================================================

class GameUI:
    def __init__(self, agent_seats: Dict[int, BaseAgent]):
        self.agent_seats = agent_seats

    def render(self, engine: GameEngine) -> Group:
        return Group(
            self._make_header(engine),
            Columns([self._create_player_panel(engine, p) for p in PLAYERS], equal=True, expand=True),
            self._make_table_center(engine),
            self._make_scoreboard(engine),
            Panel(Text(engine.status or "", style=f"bold {COLOR_HIGHLIGHT}"), title="Status"),
        )

    def _make_header(self, engine: GameEngine) -> Panel:
        title = Text(
            f"Golf - Round {engine.round_number}/{engine.config.rounds} ({engine.phase.value})",
            style="bold white on blue",
            justify="center",
        )
        return Panel(title, box=box.HEAVY)

    def _create_player_panel(self, engine: GameEngine, player: int) -> Panel:
        name = engine.player_name(player)
        if player in self.agent_seats:
            name = f"{name} (AI)"
        border = "dim"
        if player == engine.current_player and engine.phase != GamePhase.ENDED:
            border = f"bold {COLOR_HIGHLIGHT}"
            name = f"> {name}"

        content = [Text(name, justify="center"), render_hand_visual(engine, player)]
        if engine.phase == GamePhase.SETUP_FLIPS:
            content.append(Text(f"Opening flips left: {engine.flips_remaining(player)}", style="dim"))
        return Panel(Group(*content), border_style=border, title=f"P{player}")

    def _make_table_center(self, engine: GameEngine) -> Panel:
        grid = Table.grid(expand=True, padding=(0, 3))
        grid.add_column(justify="center")
        grid.add_column(justify="center")
        grid.add_column(justify="center")
        grid.add_row("[underline]Stock[/underline]", "[underline]Discard[/underline]", "[underline]Drawn[/underline]")
        grid.add_row(
            Text(f"{engine.stock_count} cards"),
            get_card_rich_text(engine.discard_top),
            get_card_rich_text(engine.held_card) if engine.held_card else Text("-", style="dim"),
        )
        return Panel(Align.center(grid), border_style="blue", title="Table")

    def _make_scoreboard(self, engine: GameEngine) -> Panel:
        table = Table(box=box.SIMPLE, show_header=True)
        table.add_column("Round", justify="right")
        for player in PLAYERS:
            table.add_column(engine.player_name(player), justify="right")
        for round_number in range(1, engine.config.rounds + 1):
            cells = []
            for player in PLAYERS:
                score = engine.ledger.round_score(round_number, player)
                cells.append("" if score is None else str(score))
            table.add_row(str(round_number), *cells)
        totals = engine.totals()
        table.add_row("[bold]Total[/bold]", *(f"[bold]{totals[p]}[/bold]" for p in PLAYERS))
        return Panel(table, title="Scores", border_style="white")


def build_settlement_panel(engine: GameEngine) -> Panel:
    totals = engine.totals()
    loser = engine.loser()

    table = Table(title="Final Results", box=box.SIMPLE, show_header=True)
    table.add_column("Seat", justify="right")
    table.add_column("Name")
    table.add_column("Total", justify="right")
    table.add_column("Result")

    for player in sorted(PLAYERS, key=lambda p: totals[p]):
        if loser is None:
            result = "Tie"
        else:
            result = "Loses" if player == loser else "Wins"
        table.add_row(f"P{player}", engine.player_name(player), str(totals[player]), result)

    return Panel(table, title="Settlement", border_style="green")


# ==============================================================================
# Main loop
# ==============================================================================

def create_agent(kind: str, seed: Optional[int]) -> BaseAgent:
    if kind == "heuristic":
        return create_heuristic_agent(seed=seed)
    return create_random_agent(seed=seed)


def play_agent_turn(engine: GameEngine, agent: BaseAgent) -> str:
    """Let an agent take one action. Returns its description."""
    player = engine.current_player
    action = agent.act(build_observation(engine, player), get_action_mask(engine))
    result = apply_action(engine, action)
    if not result:
        raise RuntimeError(f"Agent chose illegal action {action}: {result.reason}")
    return describe_action(action)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Play Golf in the terminal")
    parser.add_argument("--name1", default="", help="Name of player 1")
    parser.add_argument("--name2", default="", help="Name of player 2")
    parser.add_argument(
        "--opponent",
        choices=["human", "heuristic", "random"],
        default="human",
        help="Who plays seat 2 (default: human)",
    )
    parser.add_argument("--rounds", type=positive_int, default=DEFAULT_ROUNDS, help="Rounds per game (default: 9)")
    parser.add_argument("--no-jokers", action="store_true", help="Play without the two jokers")
    parser.add_argument("--seed", type=int, default=None, help="Seed for shuffles and the agent")
    parser.add_argument("--ai-delay", type=float, default=0.6, help="Seconds to pause before each AI action")
    parser.add_argument("--debug", action="store_true", help="Log engine events")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)

    config = GameConfig(rounds=args.rounds, include_jokers=not args.no_jokers, seed=args.seed)
    agents: Dict[int, BaseAgent] = {}
    name2 = args.name2
    if args.opponent != "human":
        agents[2] = create_agent(args.opponent, args.seed)
        name2 = name2 or agents[2].name

    ui = GameUI(agents)
    engine = GameEngine(config)
    engine.start_game(args.name1, name2)
    last_error = ""

    while True:
        console.clear()
        console.print(ui.render(engine))
        if last_error:
            console.print(f"[red]{last_error}[/red]")
            last_error = ""

        if engine.phase == GamePhase.ENDED:
            if engine.is_game_over:
                console.print(build_settlement_panel(engine))
                again = Prompt.ask("Play again? (y/n)", default="n", choices=["y", "n"])
                if again != "y":
                    break
                engine = GameEngine(config)
                engine.start_game(args.name1, name2)
                continue
            Prompt.ask("Press Enter to deal the next round", default="", show_default=False)
            engine.start_next_round()
            continue

        player = engine.current_player
        if player in agents:
            if args.ai_delay > 0:
                time.sleep(args.ai_delay)
            try:
                play_agent_turn(engine, agents[player])
            except (RuntimeError, ValueError):
                logger.exception("Agent failed to move")
                raise
            continue

        raw = console.input(f"[bold yellow]{engine.player_name(player)}> [/bold yellow]").strip()
        if raw.lower() in ("q", "quit", "exit"):
            return

        try:
            move = parse_command(raw, engine)
        except ValueError as ve:
            last_error = str(ve)
            continue

        result = apply_move(engine, move)
        if not result:
            last_error = describe_reject(result.reason)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\nBye.")

#!/usr/bin/env python
"""Evaluation script for playing agents against each other.

This script runs full games between two agents and collects:
- Average and standard deviation of game totals per seat
- Loss rate (strictly higher total) and tie rate
- Average round score per seat

Usage:
    python -m golf_cards.scripts.evaluate --games 10 --agents heuristic,random
    python -m golf_cards.scripts.evaluate --games 200 --agents heuristic,heuristic --seed 42
    python -m golf_cards.scripts.evaluate --games 50 --agents random,random --rounds 3 --no-jokers
    python -m golf_cards.scripts.evaluate --help
"""

import argparse
from collections import defaultdict
from dataclasses import dataclass, field
import logging
import sys
import numpy as np

from golf_cards.engine import GameEngine, GameConfig, PLAYERS, DEFAULT_ROUNDS
from golf_cards.utils import set_seed
from golf_cards.agents import (
    BaseAgent,
    create_random_agent,
    create_heuristic_agent,
    play_game,
)


logger = logging.getLogger(__name__)

AGENT_FACTORIES = {
    "random": create_random_agent,
    "heuristic": create_heuristic_agent,
}


@dataclass
class EvaluationStats:
    """Statistics from evaluation games.

    Attributes:
        total_games: Number of games played
        totals_by_seat: Seat -> list of game totals
        round_scores_by_seat: Seat -> list of every round score
        losses_by_seat: Seat -> number of games lost
        ties: Number of tied games
        actions: Number of actions per game
    """

    total_games: int = 0
    totals_by_seat: dict[int, list[int]] = field(default_factory=lambda: defaultdict(list))
    round_scores_by_seat: dict[int, list[int]] = field(default_factory=lambda: defaultdict(list))
    losses_by_seat: dict[int, int] = field(default_factory=lambda: defaultdict(int))
    ties: int = 0
    actions: list[int] = field(default_factory=list)

    def record_game(self, engine: GameEngine, num_actions: int) -> None:
        """Record the results of a finished game."""
        self.total_games += 1
        self.actions.append(num_actions)
        for seat in PLAYERS:
            self.totals_by_seat[seat].append(engine.ledger.total(seat))
            for scores in engine.ledger.rounds.values():
                self.round_scores_by_seat[seat].append(scores[seat])

        loser = engine.loser()
        if loser is None:
            self.ties += 1
        else:
            self.losses_by_seat[loser] += 1

    def get_average_total(self, seat: int) -> float:
        totals = self.totals_by_seat[seat]
        return float(np.mean(totals)) if totals else 0.0

    def get_total_std(self, seat: int) -> float:
        totals = self.totals_by_seat[seat]
        return float(np.std(totals)) if totals else 0.0

    def get_average_round_score(self, seat: int) -> float:
        scores = self.round_scores_by_seat[seat]
        return float(np.mean(scores)) if scores else 0.0

    def get_loss_rate(self, seat: int) -> float:
        return self.losses_by_seat[seat] / self.total_games if self.total_games > 0 else 0.0

    def get_tie_rate(self) -> float:
        return self.ties / self.total_games if self.total_games > 0 else 0.0

    def summary(self, agent_names: list[str]) -> str:
        """Generate summary string.

        Args:
            agent_names: Agent names by seat (seat 1 first)
        """
        lines = [
            f"\n{'=' * 60}",
            f"Evaluation Summary ({self.total_games} games)",
            f"{'=' * 60}",
        ]

        for seat, name in zip(PLAYERS, agent_names):
            lines.append(f"\n{name} (Seat {seat}):")
            lines.append(
                f"  Game Total: {self.get_average_total(seat):.2f} ± {self.get_total_std(seat):.2f}"
            )
            lines.append(f"  Round Score: {self.get_average_round_score(seat):.2f}")
            lines.append(f"  Loss Rate: {self.get_loss_rate(seat):.1%}")

        lines.append(f"\nTie Rate: {self.get_tie_rate():.1%}")
        if self.actions:
            lines.append(f"Actions per Game: {np.mean(self.actions):.1f}")
        lines.append(f"\n{'=' * 60}")
        return "\n".join(lines)


def create_agent(agent_type: str, seed: int | None = None) -> BaseAgent:
    """Create an agent of the specified type.

    Raises:
        ValueError: If the agent type is unknown
    """
    factory = AGENT_FACTORIES.get(agent_type.lower())
    if factory is None:
        raise ValueError(
            f"Unknown agent type '{agent_type}'. Valid types: {', '.join(sorted(AGENT_FACTORIES))}"
        )
    return factory(seed=seed)


def evaluate(
    agent_types: list[str],
    games: int = 10,
    rounds: int = DEFAULT_ROUNDS,
    include_jokers: bool = True,
    seed: int | None = None,
    verbose: bool = False,
) -> EvaluationStats:
    """Play games between two agents and collect statistics.

    Args:
        agent_types: Two agent type names, seat 1 first
        games: Number of games
        rounds: Rounds per game
        include_jokers: Whether decks include jokers
        seed: Master seed for agents and shuffles (generated and logged if None)
        verbose: Whether to print per-game results

    Returns:
        EvaluationStats for all games
    """
    if len(agent_types) != len(PLAYERS):
        raise ValueError(f"Expected {len(PLAYERS)} agents, got {len(agent_types)}")

    seed = set_seed(seed)
    rng = np.random.default_rng(seed)
    logger.info("Evaluation seed: %d", seed)
    agents = {}
    for seat, agent_type in zip(PLAYERS, agent_types):
        agent_seed = int(rng.integers(0, 2**31))
        agents[seat] = create_agent(agent_type, seed=agent_seed)

    agent_names = [f"{t.capitalize()} ({seat})" for seat, t in zip(PLAYERS, agent_types)]
    stats = EvaluationStats()

    print(f"Running {games} games with agents: {', '.join(agent_types)}")

    for game in range(games):
        game_seed = int(rng.integers(0, 2**31))
        engine = GameEngine(GameConfig(rounds=rounds, include_jokers=include_jokers, seed=game_seed))

        try:
            history = play_game(engine, agents, names=tuple(agent_names))
        except RuntimeError as e:
            print(f"  Game {game + 1} failed: {e}")
            logger.exception("Game %d failed", game + 1)
            continue

        stats.record_game(engine, len(history))
        if verbose:
            print(f"  Game {game + 1}: totals {engine.totals()} - {engine.status}")
        elif (game + 1) % max(1, games // 10) == 0:
            print(f"  Completed {game + 1}/{games} games...")

    print(stats.summary(agent_names))
    return stats


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def main(argv: list[str] | None = None):
    """Main entry point for evaluation script."""
    parser = argparse.ArgumentParser(
        description="Evaluate Golf agents against each other",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m golf_cards.scripts.evaluate --games 10 --agents heuristic,random
  python -m golf_cards.scripts.evaluate --games 200 --agents heuristic,heuristic --seed 42
        """,
    )

    parser.add_argument(
        "--games", "-n", type=positive_int, default=10, help="Number of games to play (default: 10)"
    )
    parser.add_argument(
        "--agents",
        "-a",
        type=str,
        default="heuristic,random",
        help="Comma-separated agent types for seats 1 and 2: random, heuristic (default: heuristic,random)",
    )
    parser.add_argument(
        "--rounds", "-r", type=positive_int, default=DEFAULT_ROUNDS, help="Rounds per game (default: 9)"
    )
    parser.add_argument("--no-jokers", action="store_true", help="Play without the two jokers")
    parser.add_argument(
        "--seed", "-s", type=int, default=None, help="Random seed for reproducibility"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Print per-game results"
    )

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    agent_types = [a.strip() for a in args.agents.split(",")]
    for agent_type in agent_types:
        if agent_type.lower() not in AGENT_FACTORIES:
            print(
                f"Error: Unknown agent type '{agent_type}'. Valid types: {', '.join(sorted(AGENT_FACTORIES))}"
            )
            sys.exit(1)

    try:
        evaluate(
            agent_types=agent_types,
            games=args.games,
            rounds=args.rounds,
            include_jokers=not args.no_jokers,
            seed=args.seed,
            verbose=args.verbose,
        )
    except KeyboardInterrupt:
        print("\nEvaluation interrupted by user.")
        sys.exit(0)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

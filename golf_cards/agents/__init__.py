"""Agents for Golf.

This module provides:
- RandomAgent: Baseline agent that plays random legal actions
- HeuristicAgent: Rule-based agent with Golf rules of thumb
- play_game / play_random_game: Drive full games between agents
"""

from .random_agent import (
    BaseAgent,
    RandomAgent,
    create_random_agent,
)

from .heuristic_agent import (
    HeuristicAgent,
    create_heuristic_agent,
)

from .play import (
    MAX_ACTIONS_PER_GAME,
    play_game,
    play_random_game,
)

__all__ = [
    # Protocols
    "BaseAgent",
    # Random agent
    "RandomAgent",
    "create_random_agent",
    # Heuristic agent
    "HeuristicAgent",
    "create_heuristic_agent",
    # Game driver
    "MAX_ACTIONS_PER_GAME",
    "play_game",
    "play_random_game",
]

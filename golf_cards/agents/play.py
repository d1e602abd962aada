"""Drive complete games between agents."""

from typing import Dict, List, Optional, Tuple
import logging

from golf_cards.engine import GameEngine, GameConfig, GamePhase
from golf_cards.moves import apply_action, build_observation, get_action_mask

from .random_agent import BaseAgent, RandomAgent


logger = logging.getLogger(__name__)

# Upper bound on actions in one game before it is considered stalled
MAX_ACTIONS_PER_GAME = 20000


def play_game(
    engine: GameEngine,
    agents: Dict[int, BaseAgent],
    names: Tuple[str, str] = ("", ""),
    max_actions: int = MAX_ACTIONS_PER_GAME,
) -> List[Tuple[int, int]]:
    """Play a full game, starting every round until the last one ends.

    Args:
        engine: Engine to play on (a new game is started)
        agents: Player number -> agent
        names: Player names passed to start_game
        max_actions: Action cap for the whole game

    Returns:
        History of (player, action_idx) pairs

    Raises:
        RuntimeError: If an agent picks an illegal action, no legal action
            exists, or the action cap is reached
    """
    for agent in agents.values():
        agent.reset()

    engine.start_game(*names)
    history: List[Tuple[int, int]] = []

    while True:
        if engine.phase == GamePhase.ENDED:
            if engine.is_game_over:
                return history
            engine.start_next_round()
            continue

        if len(history) >= max_actions:
            raise RuntimeError(f"Game did not finish within {max_actions} actions")

        player = engine.current_player
        mask = get_action_mask(engine)
        if not mask.any():
            raise RuntimeError(f"No legal actions for player {player}")

        action = agents[player].act(build_observation(engine, player), mask)
        result = apply_action(engine, action)
        if not result:
            raise RuntimeError(f"Agent {agents[player]!r} chose illegal action {action}: {result.reason}")
        history.append((player, action))


def play_random_game(seed: Optional[int] = None, rounds: int = 9) -> Tuple[GameEngine, List[Tuple[int, int]]]:
    """Play a complete game with random agents.

    Args:
        seed: Random seed for reproducibility
        rounds: Number of rounds

    Returns:
        Tuple of (final engine, action history)
    """
    engine = GameEngine(GameConfig(rounds=rounds, seed=seed))
    agents = {
        1: RandomAgent(seed=seed, name="Random 1"),
        2: RandomAgent(seed=None if seed is None else seed + 1, name="Random 2"),
    }
    history = play_game(engine, agents)
    logger.debug("Random game finished after %d actions, totals %s", len(history), engine.totals())
    return engine, history

"""Agent protocol and the random Golf baseline.

Agents see the dict from ``build_observation`` and a boolean mask over the
15 action indices:

    0-5    flip slot N (opening flip in setup, turn flip in turns)
    6      draw from the stock
    7      draw from the discard pile
    8-13   replace slot N-8 with the held card
    14     discard the held card
"""

from typing import Any, Dict, Optional, Protocol
import numpy as np


Observation = Dict[str, Any]


class BaseAgent(Protocol):
    """Interface shared by the evaluation script, play_game and the playgrounds."""

    name: str

    def act(
        self,
        observation: Observation,
        action_mask: np.ndarray,
        rng: Optional[np.random.Generator] = None,
    ) -> int:
        """Return an action index with ``action_mask[idx]`` True."""
        ...

    def reset(self) -> None:
        """Called by play_game before each new game."""
        ...


class RandomAgent:
    """Picks uniformly among the legal action indices."""

    def __init__(self, seed: Optional[int] = None, name: str = "RandomAgent"):
        self.name = name
        self._seed = seed
        self.rng = np.random.default_rng(seed)

    def act(
        self,
        observation: Observation,
        action_mask: np.ndarray,
        rng: Optional[np.random.Generator] = None,
    ) -> int:
        """Sample a legal action for the observing player.

        Raises:
            ValueError: If the mask has no legal action
        """
        legal = np.flatnonzero(action_mask)
        if legal.size == 0:
            raise ValueError(f"No legal action for player {observation.get('player')}")
        return int((self.rng if rng is None else rng).choice(legal))

    def reset(self) -> None:
        # Stateless between games
        pass

    def __repr__(self) -> str:
        return f"RandomAgent(seed={self._seed}, name={self.name!r})"


def create_random_agent(seed: Optional[int] = None) -> RandomAgent:
    return RandomAgent(seed=seed, name="Random")

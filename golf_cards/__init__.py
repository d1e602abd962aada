"""Golf - rules engine for the two-player six-card Golf card game.

Deck construction, dealing, setup flips, turn sequencing, row clearing and
multi-round scoring, plus an action space and simple agents for simulation.
"""

__version__ = "0.1.0"
__author__ = "Golf Cards Team"

from golf_cards.utils.seeding import set_seed

__all__ = ["__version__", "set_seed"]

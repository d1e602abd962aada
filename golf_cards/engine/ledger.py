"""Per-round score ledger with running totals.

Lower totals are better: after the final round the player with the strictly
higher total loses, equal totals tie.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass
class ScoreLedger:
    """Round scores for both players.

    Attributes:
        players: Player numbers tracked by the ledger
        rounds: Mapping round number -> {player: score}
    """

    players: tuple = (1, 2)
    rounds: Dict[int, Dict[int, int]] = field(default_factory=dict)

    def record(self, round_number: int, scores: Dict[int, int]) -> None:
        """Record (or overwrite) the scores of one round."""
        missing = set(self.players) - set(scores)
        if missing:
            raise ValueError(f"Missing scores for players {sorted(missing)}")
        self.rounds[round_number] = {p: int(scores[p]) for p in self.players}

    def round_score(self, round_number: int, player: int) -> Optional[int]:
        """Score of a player for a round, None if not recorded."""
        scores = self.rounds.get(round_number)
        if scores is None:
            return None
        return scores[player]

    def total(self, player: int) -> int:
        return sum(scores[player] for scores in self.rounds.values())

    def totals(self) -> Dict[int, int]:
        return {p: self.total(p) for p in self.players}

    @property
    def rounds_played(self) -> int:
        return len(self.rounds)

    def loser(self) -> Optional[int]:
        """Player with the strictly highest total, None on a tie."""
        totals = self.totals()
        highest = max(totals.values())
        leaders = [p for p, t in totals.items() if t == highest]
        if len(leaders) != 1:
            return None
        return leaders[0]

    def clear(self) -> None:
        self.rounds.clear()

    def to_dict(self) -> dict:
        return {
            "rounds": {str(r): {str(p): s for p, s in scores.items()} for r, scores in sorted(self.rounds.items())},
            "totals": {str(p): t for p, t in self.totals().items()},
        }

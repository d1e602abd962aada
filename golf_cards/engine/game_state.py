"""Game state machine, turn flow and scoring for two-player Golf.

This module provides:
- GameEngine: owns stock, discard pile, hands, phase and the held card
- GameConfig: number of rounds, jokers on/off, seed
- ActionResult / RejectReason: outcome of every action call
- GameEvent / EventKind: notifications emitted after each state transition

Game flow:
1. Each round builds a fresh deck, deals 6 cards to each player (P1 slot i,
   then P2 slot i) and turns one card onto the discard pile
2. Setup: the starting player flips 2 cards in different rows, then the
   other player does the same
3. Turns: flip a face-down card, or draw (stock/discard) then replace a
   slot or discard the drawn card
4. A row whose two cards are face-up and match (same rank or a joker) is
   cleared and stops scoring
5. The round ends after the acting player's hand is all cleared or all
   face-up; uncleared cards are scored, face-down ones included
6. Starting player alternates each round; after the last round the higher
   total loses

Illegal calls never raise and never change state. They return a falsy
ActionResult carrying the reason, so callers that ignore the result get
silent no-op behaviour.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Set
import logging
import random

from golf_cards.rules import (
    Card,
    Hand,
    HAND_SIZE,
    create_deck,
    shuffle_deck,
    is_valid_slot,
    slot_row,
)
from .ledger import ScoreLedger


logger = logging.getLogger(__name__)

# Player numbers
PLAYERS = (1, 2)

# Opening reveals per player
SETUP_FLIPS = 2

DEFAULT_ROUNDS = 9


class GamePhase(str, Enum):
    """Phases of a round."""

    WAITING = "waiting"  # No game started yet
    SETUP_FLIPS = "setupFlips"
    TURNS = "turns"
    ENDED = "ended"


class DrawSource(str, Enum):
    """Piles a card can be drawn from."""

    STOCK = "stock"
    DISCARD = "discard"


class RejectReason(str, Enum):
    """Why an action call was ignored."""

    WRONG_PHASE = "wrong_phase"
    WRONG_TURN = "wrong_turn"
    INVALID_SLOT = "invalid_slot"
    WRONG_TARGET = "wrong_target"
    ROW_USED = "row_used"
    NO_FLIPS_LEFT = "no_flips_left"
    CARD_HELD = "card_held"
    NO_CARD_HELD = "no_card_held"
    PILE_EMPTY = "pile_empty"
    INVALID_SOURCE = "invalid_source"
    GAME_OVER = "game_over"


class EventKind(Enum):
    """Kinds of state transitions reported to listeners."""

    GAME_STARTED = "game_started"
    ROUND_STARTED = "round_started"
    SETUP_FLIP = "setup_flip"
    SETUP_COMPLETE = "setup_complete"
    CARD_FLIPPED = "card_flipped"
    CARD_DRAWN = "card_drawn"
    DECK_RESHUFFLED = "deck_reshuffled"
    CARD_REPLACED = "card_replaced"
    CARD_DISCARDED = "card_discarded"
    ROW_CLEARED = "row_cleared"
    TURN_PASSED = "turn_passed"
    ROUND_ENDED = "round_ended"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class GameEvent:
    """A state transition plus its human-readable status line."""

    kind: EventKind
    message: str
    player: Optional[int] = None


@dataclass(frozen=True)
class ActionResult:
    """Outcome of an action call. Truthy when the action was applied."""

    success: bool
    reason: Optional[RejectReason] = None

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls) -> "ActionResult":
        return cls(success=True)

    @classmethod
    def rejected(cls, reason: RejectReason) -> "ActionResult":
        return cls(success=False, reason=reason)


@dataclass(frozen=True)
class GameConfig:
    """Game settings, fixed for the lifetime of an engine.

    Attributes:
        rounds: Number of rounds in a game
        include_jokers: Whether the two jokers are added to the deck
        seed: Seed for the engine's shuffles (None = nondeterministic)
    """

    rounds: int = DEFAULT_ROUNDS
    include_jokers: bool = True
    seed: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.rounds, int) or isinstance(self.rounds, bool) or self.rounds < 1:
            raise ValueError(f"rounds must be a positive integer, got {self.rounds!r}")
        if not isinstance(self.include_jokers, bool):
            raise ValueError(f"include_jokers must be a bool, got {self.include_jokers!r}")


Listener = Callable[[GameEvent], None]


def other_player(player: int) -> int:
    """The opponent of a player."""
    return 2 if player == 1 else 1


class GameEngine:
    """Two-player Golf rules engine.

    Attributes:
        config: Game settings
        rng: Random generator used for every shuffle
        ledger: Per-round scores of the current game
        phase: Current phase
        round_number: Current round (0 before the first round)
        starting_player: Player who opens the current round
        current_player: Player expected to act
        stock: Face-down draw pile (last element = top)
        discard: Discard pile (last element = visible top)
        hands: Player number -> Hand
        held_card: Card drawn but not yet replaced or discarded
        status: Latest human-readable status line
    """

    def __init__(self, config: Optional[GameConfig] = None, rng: Optional[random.Random] = None):
        self.config = config if config is not None else GameConfig()
        self.rng = rng if rng is not None else random.Random(self.config.seed)
        self.ledger = ScoreLedger(players=PLAYERS)
        self.names: Dict[int, str] = {p: f"Player {p}" for p in PLAYERS}
        self.status = ""
        self._listeners: List[Listener] = []
        self._pending: List[GameEvent] = []

        self.phase = GamePhase.WAITING
        self.round_number = 0
        self.starting_player = 1
        self.current_player = 1
        self.stock: List[Card] = []
        self.discard: List[Card] = []
        self.hands: Dict[int, Hand] = {p: Hand() for p in PLAYERS}
        self.held_card: Optional[Card] = None
        self._flips_remaining: Dict[int, int] = {p: SETUP_FLIPS for p in PLAYERS}
        self._opening_rows: Dict[int, Set[int]] = {p: set() for p in PLAYERS}

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        """Register a callback invoked with every GameEvent.

        Events are delivered once the action that produced them has fully
        applied, so a listener sees a consistent engine and an exception it
        raises cannot leave the action half done.
        """
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    def _emit(self, kind: EventKind, message: str, player: Optional[int] = None) -> None:
        self.status = message
        self._pending.append(GameEvent(kind=kind, message=message, player=player))

    def _dispatch(self) -> None:
        events, self._pending = self._pending, []
        for event in events:
            for listener in list(self._listeners):
                listener(event)

    def _reject(self, action: str, reason: RejectReason) -> ActionResult:
        logger.debug("Rejected %s: %s", action, reason.value)
        return ActionResult.rejected(reason)

    # ------------------------------------------------------------------
    # Game and round lifecycle
    # ------------------------------------------------------------------

    def start_game(self, name1: str = "", name2: str = "") -> ActionResult:
        """Start a new game: record names, clear scores, deal round 1."""
        self.names = {
            1: (name1 or "").strip() or "Player 1",
            2: (name2 or "").strip() or "Player 2",
        }
        self.ledger.clear()
        self._emit(EventKind.GAME_STARTED, f"Game started: {self.names[1]} vs {self.names[2]}.")
        self.start_round(1)
        self._dispatch()
        return ActionResult.ok()

    def start_round(self, round_number: int, deck: Optional[List[Card]] = None) -> None:
        """Build, shuffle and deal a fresh round.

        Args:
            round_number: Round to start (1..config.rounds)
            deck: Optional pre-arranged deck (last element = top). Skips the
                shuffle; cards are dealt face-down and uncleared.

        Raises:
            ValueError: If the round number is out of range or the deck is
                too small to deal
        """
        if not 1 <= round_number <= self.config.rounds:
            raise ValueError(f"Round must be in [1, {self.config.rounds}], got {round_number}")

        if deck is None:
            cards = shuffle_deck(create_deck(self.config.include_jokers), self.rng)
        else:
            cards = [card.fresh() for card in deck]
            if len(cards) < 2 * HAND_SIZE + 1:
                raise ValueError(f"Deck of {len(cards)} cards is too small to deal")

        self.round_number = round_number
        self.starting_player = 1 if round_number % 2 == 1 else 2
        self.current_player = self.starting_player
        self.phase = GamePhase.SETUP_FLIPS
        self._flips_remaining = {p: SETUP_FLIPS for p in PLAYERS}
        self._opening_rows = {p: set() for p in PLAYERS}
        self.held_card = None

        self.stock = cards
        self.discard = []
        self.hands = {p: Hand() for p in PLAYERS}
        self._deal()

        top = self.stock.pop()
        top.face_up = True
        self.discard.append(top)

        logger.info("Round %d started, %s opens", round_number, self.names[self.starting_player])
        self._emit(
            EventKind.ROUND_STARTED,
            f"{self.player_name(self.current_player)}: flip one card (two flips, different rows).",
            self.current_player,
        )
        self._dispatch()

    def _deal(self) -> None:
        for slot in range(HAND_SIZE):
            for player in PLAYERS:
                card = self.stock.pop()
                card.face_up = False
                card.cleared = False
                self.hands[player][slot] = card

    def finish_round(self) -> ActionResult:
        """Score both hands and end the current round.

        Called automatically when a hand completes; may also be called to
        end a round in progress. A held card goes back onto the discard pile.
        """
        if self.phase not in (GamePhase.SETUP_FLIPS, GamePhase.TURNS):
            return self._reject("finish_round", self._phase_reason())
        if self.held_card is not None:
            self.discard.append(self.held_card)
            self.held_card = None
        self._complete_round()
        self._dispatch()
        return ActionResult.ok()

    def start_next_round(self) -> ActionResult:
        """Deal the next round once the current one has ended."""
        if self.phase != GamePhase.ENDED:
            return self._reject("start_next_round", RejectReason.WRONG_PHASE)
        if self.is_game_over:
            return self._reject("start_next_round", RejectReason.GAME_OVER)
        self.start_round(self.round_number + 1)
        self._dispatch()
        return ActionResult.ok()

    def _complete_round(self) -> None:
        self.phase = GamePhase.ENDED
        scores = {p: self.hands[p].score() for p in PLAYERS}
        self.ledger.record(self.round_number, scores)
        logger.info("Round %d scores: %s", self.round_number, scores)
        self._emit(
            EventKind.ROUND_ENDED,
            f"Round {self.round_number} over. "
            f"{self.player_name(1)}: {scores[1]:+d}, {self.player_name(2)}: {scores[2]:+d}.",
        )
        if self.is_game_over:
            loser = self.ledger.loser()
            verdict = "It's a tie!" if loser is None else f"{self.player_name(loser)} loses."
            logger.info("Game over, totals %s", self.ledger.totals())
            self._emit(EventKind.GAME_OVER, f"Game over. Highest points lose. {verdict}", loser)

    # ------------------------------------------------------------------
    # Legality checks (None = legal)
    # ------------------------------------------------------------------

    def _phase_reason(self) -> RejectReason:
        return RejectReason.GAME_OVER if self.is_game_over else RejectReason.WRONG_PHASE

    def check_flip_during_setup(self, player: int, slot: int) -> Optional[RejectReason]:
        if self.phase != GamePhase.SETUP_FLIPS:
            return self._phase_reason()
        if player != self.current_player:
            return RejectReason.WRONG_TURN
        if not is_valid_slot(slot):
            return RejectReason.INVALID_SLOT
        if self._flips_remaining[player] <= 0:
            return RejectReason.NO_FLIPS_LEFT
        if slot_row(slot) in self._opening_rows[player]:
            return RejectReason.ROW_USED
        if not self.hands[player].is_hidden(slot):
            return RejectReason.WRONG_TARGET
        return None

    def check_flip_during_turn(self, player: int, slot: int) -> Optional[RejectReason]:
        if self.phase != GamePhase.TURNS:
            return self._phase_reason()
        if player != self.current_player:
            return RejectReason.WRONG_TURN
        if not is_valid_slot(slot):
            return RejectReason.INVALID_SLOT
        if self.held_card is not None:
            return RejectReason.CARD_HELD
        if not self.hands[player].is_hidden(slot):
            return RejectReason.WRONG_TARGET
        return None

    def check_draw(self, source) -> Optional[RejectReason]:
        if self.phase != GamePhase.TURNS:
            return self._phase_reason()
        if self.held_card is not None:
            return RejectReason.CARD_HELD
        try:
            source = DrawSource(source)
        except ValueError:
            return RejectReason.INVALID_SOURCE
        if source == DrawSource.STOCK:
            # An empty stock is refilled from all but the discard top
            if not self.stock and len(self.discard) <= 1:
                return RejectReason.PILE_EMPTY
        elif not self.discard:
            return RejectReason.PILE_EMPTY
        return None

    def check_replace(self, player: int, slot: int) -> Optional[RejectReason]:
        if self.phase != GamePhase.TURNS:
            return self._phase_reason()
        if player != self.current_player:
            return RejectReason.WRONG_TURN
        if not is_valid_slot(slot):
            return RejectReason.INVALID_SLOT
        if self.held_card is None:
            return RejectReason.NO_CARD_HELD
        card = self.hands[player][slot]
        if card is None or card.cleared:
            return RejectReason.WRONG_TARGET
        return None

    def check_discard_held(self) -> Optional[RejectReason]:
        if self.phase != GamePhase.TURNS:
            return self._phase_reason()
        if self.held_card is None:
            return RejectReason.NO_CARD_HELD
        return None

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def flip_during_setup(self, player: int, slot: int) -> ActionResult:
        """Reveal one of the two opening cards."""
        reason = self.check_flip_during_setup(player, slot)
        if reason is not None:
            return self._reject("flip_during_setup", reason)

        self.hands[player][slot].face_up = True
        self._opening_rows[player].add(slot_row(slot))
        self._flips_remaining[player] -= 1

        if self._flips_remaining[player] > 0:
            self._emit(
                EventKind.SETUP_FLIP,
                f"{self.player_name(player)}: flip one more card in a different row.",
                player,
            )
            self._dispatch()
            return ActionResult.ok()

        # Turn passes only after both flips
        if all(self._flips_remaining[p] == 0 for p in PLAYERS):
            self.phase = GamePhase.TURNS
            self.current_player = self.starting_player
            self._emit(
                EventKind.SETUP_COMPLETE,
                f"{self.player_name(self.current_player)}'s turn: flip, draw/replace or draw/discard.",
                self.current_player,
            )
        else:
            self.current_player = other_player(player)
            self._emit(
                EventKind.SETUP_FLIP,
                f"{self.player_name(self.current_player)}: flip one card (setup phase).",
                self.current_player,
            )
        self._dispatch()
        return ActionResult.ok()

    def flip_during_turn(self, player: int, slot: int) -> ActionResult:
        """Reveal a face-down card as the whole turn."""
        reason = self.check_flip_during_turn(player, slot)
        if reason is not None:
            return self._reject("flip_during_turn", reason)

        card = self.hands[player][slot]
        card.face_up = True
        self._emit(EventKind.CARD_FLIPPED, f"{self.player_name(player)} flipped {card.label}.", player)
        self._try_row_clear(player, slot)
        self._end_turn()
        self._dispatch()
        return ActionResult.ok()

    def draw(self, source) -> ActionResult:
        """Take the top card of the stock or discard pile into hand.

        Args:
            source: DrawSource or its value ("stock" / "discard")
        """
        reason = self.check_draw(source)
        if reason is not None:
            return self._reject("draw", reason)

        if DrawSource(source) == DrawSource.STOCK:
            if not self.stock:
                self._reshuffle_discard()
            card = self.stock.pop()
        else:
            card = self.discard.pop()

        card.face_up = True
        self.held_card = card
        self._emit(
            EventKind.CARD_DRAWN,
            f"{self.player_name(self.current_player)}: place the drawn {card.label} on one of "
            f"your cards to replace it, or on the discard pile to discard it.",
            self.current_player,
        )
        self._dispatch()
        return ActionResult.ok()

    def replace(self, player: int, slot: int) -> ActionResult:
        """Swap the held card into a slot; the old card goes to the discard pile."""
        reason = self.check_replace(player, slot)
        if reason is not None:
            return self._reject("replace", reason)

        hand = self.hands[player]
        outgoing = hand[slot]
        incoming = self.held_card
        outgoing.face_up = True
        incoming.face_up = True
        hand[slot] = incoming
        self.discard.append(outgoing)
        self.held_card = None

        self._emit(
            EventKind.CARD_REPLACED,
            f"{self.player_name(player)} replaced {outgoing.label} with {incoming.label}.",
            player,
        )
        self._try_row_clear(player, slot)
        self._end_turn()
        self._dispatch()
        return ActionResult.ok()

    def discard_held(self) -> ActionResult:
        """Put the held card on the discard pile and end the turn."""
        reason = self.check_discard_held()
        if reason is not None:
            return self._reject("discard_held", reason)

        card = self.held_card
        self.discard.append(card)
        self.held_card = None
        self._emit(
            EventKind.CARD_DISCARDED,
            f"{self.player_name(self.current_player)} discarded {card.label}.",
            self.current_player,
        )
        self._end_turn()
        self._dispatch()
        return ActionResult.ok()

    def _reshuffle_discard(self) -> bool:
        """Shuffle all but the discard top back into the stock."""
        if len(self.discard) <= 1:
            return False
        top = self.discard.pop()
        rest = self.discard
        for card in rest:
            card.face_up = False
        self.stock = shuffle_deck(rest, self.rng)
        self.discard = [top]
        logger.info("Reshuffled %d discards into the stock", len(self.stock))
        self._emit(EventKind.DECK_RESHUFFLED, "Stock empty: discard pile reshuffled into a new stock.")
        return True

    def _try_row_clear(self, player: int, slot: int) -> None:
        if self.hands[player].try_row_clear(slot):
            self._emit(
                EventKind.ROW_CLEARED,
                f"{self.player_name(player)} cleared row {slot_row(slot) + 1}.",
                player,
            )

    def _end_turn(self) -> None:
        player = self.current_player
        if self.hands[player].is_complete():
            self._complete_round()
            return
        self.current_player = other_player(player)
        self._emit(
            EventKind.TURN_PASSED,
            f"{self.player_name(self.current_player)}'s turn: flip, draw/replace or draw/discard.",
            self.current_player,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_game_over(self) -> bool:
        return self.phase == GamePhase.ENDED and self.round_number >= self.config.rounds

    @property
    def discard_top(self) -> Optional[Card]:
        return self.discard[-1] if self.discard else None

    @property
    def stock_count(self) -> int:
        return len(self.stock)

    def hand(self, player: int) -> Hand:
        return self.hands[player]

    def flips_remaining(self, player: int) -> int:
        return self._flips_remaining[player]

    def opening_rows(self, player: int) -> frozenset:
        return frozenset(self._opening_rows[player])

    def player_name(self, player: int) -> str:
        return self.names[player]

    def round_scores(self, round_number: Optional[int] = None) -> Optional[Dict[int, int]]:
        """Recorded scores of a round (default: current round)."""
        if round_number is None:
            round_number = self.round_number
        scores = self.ledger.rounds.get(round_number)
        return dict(scores) if scores is not None else None

    def totals(self) -> Dict[int, int]:
        return self.ledger.totals()

    def loser(self) -> Optional[int]:
        """Losing player once the game is over, None before that or on a tie."""
        if not self.is_game_over:
            return None
        return self.ledger.loser()

    def all_cards(self) -> List[Card]:
        """Every card in play: stock, discard, both hands and the held card."""
        cards = list(self.stock) + list(self.discard)
        for player in PLAYERS:
            cards.extend(self.hands[player].cards())
        if self.held_card is not None:
            cards.append(self.held_card)
        return cards

    def snapshot(self, reveal: bool = False) -> dict:
        """JSON-ready view of the table.

        Face-down hand cards are hidden unless ``reveal`` is set.
        """
        return {
            "phase": self.phase.value,
            "round": self.round_number,
            "rounds": self.config.rounds,
            "starting_player": self.starting_player,
            "current_player": self.current_player,
            "names": {str(p): self.names[p] for p in PLAYERS},
            "hands": {str(p): self.hands[p].to_list(reveal=reveal) for p in PLAYERS},
            "flips_remaining": {str(p): self._flips_remaining[p] for p in PLAYERS},
            "discard_top": self.discard_top.to_dict(reveal=True) if self.discard_top else None,
            "stock_count": self.stock_count,
            "held_card": self.held_card.to_dict(reveal=True) if self.held_card else None,
            "scores": self.ledger.to_dict(),
            "status": self.status,
            "game_over": self.is_game_over,
            "loser": self.loser(),
        }

    def __str__(self) -> str:
        lines = [f"GameEngine (round={self.round_number}, phase={self.phase.value})"]
        lines.append(f"  Current player: {self.current_player}")
        lines.append(f"  Stock: {self.stock_count}, discard top: {self.discard_top}")
        lines.append(f"  Held: {self.held_card}")
        for player in PLAYERS:
            lines.append(f"  {self.player_name(player)}: {self.hands[player]}")
        return "\n".join(lines)

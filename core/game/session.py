"""Session records: one game for one player."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from core.cards import Deck
from core.hand import Hand, Outcome
from core.game.state import SessionState, is_valid_transition


@dataclass
class Session:
    """
    A single player's game.

    The session owns its deck, so cards never leak between games of the
    same player.
    """

    player: str
    stake: int
    session_id: str = field(default_factory=lambda: str(uuid4()))
    player_hand: Hand = field(default_factory=Hand)
    dealer_hand: Hand = field(default_factory=Hand)
    deck: Deck = field(default_factory=Deck)
    state: SessionState = SessionState.OPEN
    commitment: str = ""
    dealer_threshold: int | None = None
    opened_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def transition(self, to_state: SessionState) -> None:
        """Move to a new state, rejecting transitions the flow does not allow."""
        if not is_valid_transition(self.state, to_state):
            raise ValueError(f"Cannot move session from {self.state.name} to {to_state.name}")
        self.state = to_state

    def copy(self) -> "Session":
        """Return a working copy whose hands and deck can be mutated freely."""
        return Session(
            player=self.player,
            stake=self.stake,
            session_id=self.session_id,
            player_hand=self.player_hand.copy(),
            dealer_hand=self.dealer_hand.copy(),
            deck=self.deck.copy(),
            state=self.state,
            commitment=self.commitment,
            dealer_threshold=self.dealer_threshold,
            opened_at=self.opened_at,
        )

    def snapshot(self) -> "HandState":
        """Public view of the session."""
        return HandState(
            session_id=self.session_id,
            player=self.player,
            state=self.state,
            player_hand=self.player_hand.ranks,
            player_total=self.player_hand.value,
            is_bust=self.player_hand.is_busted,
            is_blackjack=self.player_hand.is_blackjack,
            dealer_upcard=self.dealer_hand.ranks[0] if self.dealer_hand.cards else None,
            cards_remaining=self.deck.cards_remaining,
        )


@dataclass(frozen=True)
class HandState:
    """What the player is allowed to see during their turn."""

    session_id: str
    player: str
    state: SessionState
    player_hand: list[int]
    player_total: int
    is_bust: bool
    is_blackjack: bool
    dealer_upcard: int | None
    cards_remaining: int


@dataclass(frozen=True)
class OutcomeRecord:
    """Settlement of one session, as archived and reported to the shell."""

    session_id: str
    player: str
    outcome: Outcome
    player_hand: list[int]
    dealer_hand: list[int]
    player_total: int
    dealer_total: int
    stake: int
    payout: int
    dealer_threshold: int | None = None
    commitment: str = ""
    reveal: str = ""
    settled_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def net_to_player(self) -> int:
        """Player's profit (negative for a loss)."""
        return self.payout - self.stake

    def to_dict(self) -> dict[str, Any]:
        """Serialize to JSON-compatible types."""
        return {
            "session_id": self.session_id,
            "player": self.player,
            "outcome": self.outcome.value,
            "player_hand": list(self.player_hand),
            "dealer_hand": list(self.dealer_hand),
            "player_total": self.player_total,
            "dealer_total": self.dealer_total,
            "stake": self.stake,
            "payout": self.payout,
            "dealer_threshold": self.dealer_threshold,
            "commitment": self.commitment,
            "reveal": self.reveal,
            "settled_at": self.settled_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OutcomeRecord":
        """Restore a record produced by ``to_dict``."""
        return cls(
            session_id=data["session_id"],
            player=data["player"],
            outcome=Outcome(data["outcome"]),
            player_hand=list(data["player_hand"]),
            dealer_hand=list(data["dealer_hand"]),
            player_total=data["player_total"],
            dealer_total=data["dealer_total"],
            stake=data["stake"],
            payout=data["payout"],
            dealer_threshold=data.get("dealer_threshold"),
            commitment=data.get("commitment", ""),
            reveal=data.get("reveal", ""),
            settled_at=datetime.fromisoformat(data["settled_at"]),
        )

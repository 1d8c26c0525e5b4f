"""Pydantic schemas for API requests and responses."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from core.game import HandState, OutcomeRecord

# Largest run one request may ask for; the simulation occupies a worker thread
MAX_SIMULATION_GAMES = 5_000


# Player schemas
class PlayerResponse(BaseModel):
    """A freshly issued player identity."""

    player_id: str
    token: str


# Game schemas
class StartGameRequest(BaseModel):
    """Request to open a session; value must equal the required bet."""

    value: int = Field(..., ge=0, description="Stake sent with the request, in minor units")


class HandStateResponse(BaseModel):
    """Player-visible state of a session."""

    session_id: str
    state: str
    player_hand: list[int]
    player_total: int
    is_bust: bool
    is_blackjack: bool
    dealer_upcard: int | None
    cards_remaining: int
    outcome: "OutcomeResponse | None" = None

    @classmethod
    def from_state(
        cls,
        hand: HandState,
        outcome: OutcomeRecord | None = None,
    ) -> "HandStateResponse":
        return cls(
            session_id=hand.session_id,
            state=hand.state.name,
            player_hand=hand.player_hand,
            player_total=hand.player_total,
            is_bust=hand.is_bust,
            is_blackjack=hand.is_blackjack,
            dealer_upcard=hand.dealer_upcard,
            cards_remaining=hand.cards_remaining,
            outcome=OutcomeResponse.from_record(outcome) if outcome else None,
        )


class OutcomeResponse(BaseModel):
    """Settlement of a session."""

    session_id: str
    player: str
    outcome: Literal["PlayerWin", "PlayerLoss", "Push"]
    player_hand: list[int]
    dealer_hand: list[int]
    player_total: int
    dealer_total: int
    stake: int
    payout: int
    dealer_threshold: int | None
    commitment: str
    reveal: str
    settled_at: datetime

    @classmethod
    def from_record(cls, record: OutcomeRecord) -> "OutcomeResponse":
        return cls(
            session_id=record.session_id,
            player=record.player,
            outcome=record.outcome.value,
            player_hand=record.player_hand,
            dealer_hand=record.dealer_hand,
            player_total=record.player_total,
            dealer_total=record.dealer_total,
            stake=record.stake,
            payout=record.payout,
            dealer_threshold=record.dealer_threshold,
            commitment=record.commitment,
            reveal=record.reveal,
            settled_at=record.settled_at,
        )


class HistoryResponse(BaseModel):
    """Archived outcomes for the calling player."""

    outcomes: list[OutcomeResponse]


# House schemas
class AmountRequest(BaseModel):
    """Deposit or withdrawal amount."""

    amount: int = Field(..., ge=1, description="Amount in minor units")


class BalanceResponse(BaseModel):
    """House funds."""

    balance: int
    liabilities: int
    reserve_floor: int
    required_bet: int
    winning_payout: int
    open_sessions: int


# Statistics schemas
class SimulationRequest(BaseModel):
    """Request for a Monte Carlo run of the table."""

    games: int = Field(default=1000, ge=1, le=MAX_SIMULATION_GAMES)
    stand_on: int = Field(default=17, ge=2, le=21)
    seed: int | None = None


class SimulationResponse(BaseModel):
    """Monte Carlo result."""

    games: int
    wins: int
    losses: int
    pushes: int
    player_busts: int
    player_blackjacks: int
    house_net: int
    house_edge_percent: float


HandStateResponse.model_rebuild()

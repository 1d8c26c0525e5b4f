"""Sessions, dealer policy and the game ledger."""

from core.game.events import GameEvent, EventType
from core.game.state import SessionState
from core.game.session import Session, HandState, OutcomeRecord
from core.game.dealer import DealerPolicy, DealerState
from core.game.ledger import GameLedger, payout_for

__all__ = [
    "GameEvent",
    "EventType",
    "SessionState",
    "Session",
    "HandState",
    "OutcomeRecord",
    "DealerPolicy",
    "DealerState",
    "GameLedger",
    "payout_for",
]

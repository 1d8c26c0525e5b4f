"""Game API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from api.ledger import get_ledger
from api.routes.players import require_player
from api.schemas import (
    HandStateResponse,
    HistoryResponse,
    OutcomeResponse,
    StartGameRequest,
)
from api.session import archive_outcome, load_history
from core.errors import NoActiveSession
from core.game import GameLedger

router = APIRouter()

Player = Annotated[str, Depends(require_player)]
Ledger = Annotated[GameLedger, Depends(get_ledger)]


def _owned_session(ledger: GameLedger, session_id: str, player: str) -> None:
    """Reject access to another player's session as if it did not exist."""
    if ledger.get_session(session_id).player != player:
        raise NoActiveSession(f"No open session {session_id}")


@router.post("/start")
async def start_game(request: StartGameRequest, player: Player, ledger: Ledger) -> HandStateResponse:
    """Escrow the stake and deal the opening hands."""
    hand = ledger.start_game(player, request.value)
    return HandStateResponse.from_state(hand)


@router.get("/history")
async def get_history(player: Player) -> HistoryResponse:
    """Archived outcomes for the caller."""
    records = await load_history(player)
    return HistoryResponse(outcomes=[OutcomeResponse.from_record(r) for r in records])


@router.get("/{session_id}")
async def get_session(session_id: str, player: Player, ledger: Ledger) -> HandStateResponse:
    """Current state of one of the caller's sessions."""
    _owned_session(ledger, session_id, player)
    return HandStateResponse.from_state(ledger.get_session(session_id))


@router.post("/{session_id}/hit")
async def hit(session_id: str, player: Player, ledger: Ledger) -> HandStateResponse:
    """Draw a card; a bust settles the session immediately."""
    _owned_session(ledger, session_id, player)
    hand = ledger.hit(session_id)

    outcome = ledger.get_outcome(session_id)
    if outcome is not None:
        await archive_outcome(outcome)
    return HandStateResponse.from_state(hand, outcome)


@router.post("/{session_id}/stand")
async def stand(session_id: str, player: Player, ledger: Ledger) -> OutcomeResponse:
    """Stand, let the dealer play, and settle."""
    _owned_session(ledger, session_id, player)
    record = ledger.stand(session_id)
    await archive_outcome(record)
    return OutcomeResponse.from_record(record)

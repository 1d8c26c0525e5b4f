"""House funds endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from api.ledger import get_ledger
from api.routes.players import require_player
from api.schemas import AmountRequest, BalanceResponse
from core.game import GameLedger

router = APIRouter()

Caller = Annotated[str, Depends(require_player)]
Ledger = Annotated[GameLedger, Depends(get_ledger)]


def _balance_response(ledger: GameLedger) -> BalanceResponse:
    return BalanceResponse(
        balance=ledger.get_balance(),
        liabilities=ledger.liabilities,
        reserve_floor=ledger.rules.reserve_floor,
        required_bet=ledger.rules.required_bet,
        winning_payout=ledger.rules.winning_payout,
        open_sessions=ledger.open_sessions,
    )


@router.get("/balance")
async def get_balance(ledger: Ledger) -> BalanceResponse:
    """Current house balance and table policy."""
    return _balance_response(ledger)


@router.post("/deposit")
async def deposit(request: AmountRequest, caller: Caller, ledger: Ledger) -> BalanceResponse:
    """Fund the house. Anyone may deposit."""
    ledger.deposit(request.amount, sender=caller)
    return _balance_response(ledger)


@router.post("/withdraw")
async def withdraw(request: AmountRequest, caller: Caller, ledger: Ledger) -> BalanceResponse:
    """Withdraw house funds (owner only, never below the reserve floor)."""
    ledger.withdraw(caller, request.amount)
    return _balance_response(ledger)

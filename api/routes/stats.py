"""Statistics API endpoints."""

from random import Random
from typing import Annotated

from fastapi import APIRouter, Depends

from api.ledger import get_ledger
from api.routes.players import require_player
from api.schemas import SimulationRequest, SimulationResponse
from core.game import GameLedger
from core.statistics import TableSimulator

router = APIRouter()


@router.post("/simulate", dependencies=[Depends(require_player)])
def simulate(
    request: SimulationRequest,
    ledger: Annotated[GameLedger, Depends(get_ledger)],
) -> SimulationResponse:
    """
    Simulate the live table's rules against a fixed-threshold player.

    A plain ``def`` so FastAPI runs the CPU-bound simulation in its
    threadpool instead of on the event loop.
    """
    simulator = TableSimulator(
        rules=ledger.rules,
        stand_on=request.stand_on,
        rng=Random(request.seed),
    )
    result = simulator.run(request.games)

    return SimulationResponse(
        games=result.games,
        wins=result.wins,
        losses=result.losses,
        pushes=result.pushes,
        player_busts=result.player_busts,
        player_blackjacks=result.player_blackjacks,
        house_net=result.house_net,
        house_edge_percent=float(result.house_edge_percent),
    )

"""Player identity endpoints."""

from typing import Annotated

from fastapi import APIRouter, Header, HTTPException

from api.schemas import PlayerResponse
from api.session import issue_player, resolve_player

router = APIRouter()


def require_player(
    token: Annotated[str, Header(alias="X-Player-Token")],
) -> str:
    """Resolve the caller's identity from their signed token."""
    player = resolve_player(token)
    if player is None:
        raise HTTPException(status_code=401, detail="Invalid or expired player token")
    return player


@router.post("")
async def new_player() -> PlayerResponse:
    """Issue a new player identity."""
    player_id, token = issue_player()
    return PlayerResponse(player_id=player_id, token=token)
